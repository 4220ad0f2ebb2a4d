"""Preview generation for the selected entry.

Exposes the preview value types, the path dispatcher, and the ASCII image
renderer it delegates to.
"""

from __future__ import annotations

from .dispatcher import (
    MAX_DIRECTORY_ENTRIES,
    MAX_TEXT_LINES,
    PreviewDispatcher,
    build_binary_info,
    build_directory_preview,
    build_text_preview,
    read_text_head,
)
from .image import ASCII_RAMP, AsciiImageRenderer, is_image_file, luma, ramp_index
from .model import (
    BinaryInfoPreview,
    DirectoryItem,
    DirectoryPreview,
    EmptyPreview,
    ErrorPreview,
    ImagePreview,
    Preview,
    TextPreview,
    text_preview,
)

__all__ = [
    "ASCII_RAMP",
    "AsciiImageRenderer",
    "BinaryInfoPreview",
    "DirectoryItem",
    "DirectoryPreview",
    "EmptyPreview",
    "ErrorPreview",
    "ImagePreview",
    "MAX_DIRECTORY_ENTRIES",
    "MAX_TEXT_LINES",
    "Preview",
    "PreviewDispatcher",
    "TextPreview",
    "build_binary_info",
    "build_directory_preview",
    "build_text_preview",
    "is_image_file",
    "luma",
    "ramp_index",
    "read_text_head",
    "text_preview",
]
