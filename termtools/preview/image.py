"""Bounded grayscale ASCII-art rendering of image files.

Images are decoded with Pillow, shrunk with nearest-neighbour sampling to a
small terminal footprint, converted to luma, and mapped onto a fixed
dark-to-light character ramp.
"""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ..errors import ImageDecodeError, ImageDimensionError, TermToolsError
from .model import ErrorPreview, ImagePreview, Preview

logger = logging.getLogger(__name__)

ASCII_RAMP = " .:-=+*#%@"
IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "bmp"})
TARGET_WIDTH = 40
TARGET_HEIGHT = 15
MAX_RENDER_WIDTH = 200
MAX_RENDER_HEIGHT = 100
MAX_SOURCE_DIMENSION = 10_000
RENDER_FAULT_MESSAGE = "Unexpected failure while rendering image"


def is_image_file(path: Path) -> bool:
    """Return whether ``path`` has a supported image extension (case-insensitive)."""
    suffix = path.suffix
    if len(suffix) <= 1:
        return False
    return suffix[1:].lower() in IMAGE_EXTENSIONS


def luma(red: int, green: int, blue: int) -> int:
    """Grayscale value from RGB using ITU-R 601 weights, truncated to 0..255."""
    value = int(0.299 * red + 0.587 * green + 0.114 * blue)
    return max(0, min(255, value))


def ramp_index(gray: int, ramp_length: int = len(ASCII_RAMP)) -> int:
    """Map a 0..255 gray value linearly onto ``[0, ramp_length - 1]``.

    255 maps to the last ramp slot exactly; out-of-range input saturates.
    """
    if ramp_length <= 1:
        return 0
    gray = max(0, min(255, int(gray)))
    if gray == 255:
        return ramp_length - 1
    return min((gray * (ramp_length - 1)) // 255, ramp_length - 1)


def fit_dimensions(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int]:
    """Largest size within the bounds that keeps aspect ratio, never upscaling."""
    max_width = max(1, min(max_width, MAX_RENDER_WIDTH))
    max_height = max(1, min(max_height, MAX_RENDER_HEIGHT))
    if width <= 0 or height <= 0:
        return 1, 1
    scale = min(max_width / width, max_height / height, 1.0)
    return (
        max(1, min(max_width, int(width * scale))),
        max(1, min(max_height, int(height * scale))),
    )


def check_dimensions(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ImageDimensionError(width, height, "Image has zero dimensions")
    if width > MAX_SOURCE_DIMENSION or height > MAX_SOURCE_DIMENSION:
        raise ImageDimensionError(width, height, f"Image too large for preview ({width}x{height})")


class AsciiImageRenderer:
    """Render images as character art no larger than ``width`` x ``height``."""

    def __init__(self, width: int = TARGET_WIDTH, height: int = TARGET_HEIGHT, ramp: str = ASCII_RAMP) -> None:
        if not ramp:
            raise ValueError("ramp must contain at least one character")
        self.width = width
        self.height = height
        self.ramp = ramp

    def load(self, path: Path) -> Image.Image:
        """Open and decode ``path``; header dimensions are validated before decoding pixels."""
        try:
            image = Image.open(path)
        except FileNotFoundError as exc:
            raise ImageDecodeError(f"Error loading image: {exc.strerror or exc}") from exc
        except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
            raise ImageDecodeError(f"Error loading image: {exc}") from exc

        width, height = image.size
        try:
            check_dimensions(width, height)
            image.load()
        except ImageDimensionError:
            image.close()
            raise
        except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
            image.close()
            raise ImageDecodeError(f"Error decoding image: {exc}") from exc
        return image

    def render(self, image: Image.Image, width: int | None = None, height: int | None = None) -> str:
        """Return newline-terminated art rows for ``image``.

        Requested sizes are clamped into ``[1, MAX_RENDER_WIDTH]`` x
        ``[1, MAX_RENDER_HEIGHT]``; zero requests yield at least one cell.
        """
        source_width, source_height = image.size
        check_dimensions(source_width, source_height)
        target_width, target_height = fit_dimensions(
            source_width,
            source_height,
            self.width if width is None else width,
            self.height if height is None else height,
        )
        try:
            rgb = image.convert("RGB")
        except (ValueError, OSError) as exc:
            raise ImageDecodeError(f"Unsupported color layout ({image.mode}): {exc}") from exc
        if rgb.size != (target_width, target_height):
            rgb = rgb.resize((target_width, target_height), Image.Resampling.NEAREST)

        pixels = rgb.load()
        actual_width, actual_height = rgb.size
        ramp_length = len(self.ramp)
        rows: list[str] = []
        for y in range(actual_height):
            row: list[str] = []
            for x in range(actual_width):
                red, green, blue = pixels[x, y][:3]
                row.append(self.ramp[ramp_index(luma(red, green, blue), ramp_length)])
            rows.append("".join(row))
        return "".join(f"{row}\n" for row in rows)

    def preview(self, path: Path) -> Preview:
        """Build an image preview, converting every failure into ``ErrorPreview``."""
        try:
            image = self.load(path)
        except TermToolsError as exc:
            logger.info("image preview failed for %s: %s", path, exc)
            return ErrorPreview(f"Image file: {path.name}\n{exc}")
        except Exception:
            logger.exception("unexpected image decoder failure for %s", path)
            return ErrorPreview(f"Image file: {path.name}\n{RENDER_FAULT_MESSAGE}")

        with image:
            width, height = image.size
            channels = len(image.getbands())
            try:
                art = self.render(image)
            except TermToolsError as exc:
                logger.info("ascii render failed for %s: %s", path, exc)
                return ImagePreview(path, width, height, channels, None, f"ASCII preview unavailable: {exc}")
            except Exception:
                logger.exception("unexpected ascii render failure for %s", path)
                return ImagePreview(path, width, height, channels, None, RENDER_FAULT_MESSAGE)
        return ImagePreview(path, width, height, channels, art)
