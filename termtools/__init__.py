"""Public package surface for termtools.

Exports ``main`` for programmatic CLI invocation.
The reusable browsing core lives in ``selection``, ``search``, ``preview``,
``process`` and ``session``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
