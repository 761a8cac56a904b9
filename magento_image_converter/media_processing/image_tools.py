"""
image_tools.py — Locate Magento product images on disk and re-encode them.
"""

import os
from PIL import Image


MEDIA_DIR = "media/catalog/product"
MAX_SIZE = 1200
QUALITY = 85

# Pillow formats that cannot store an alpha channel
NO_ALPHA_FORMATS = {"JPEG", "BMP"}

# Modes every other target codec can write directly
PORTABLE_MODES = {"RGB", "RGBA", "L", "LA", "P"}


class TranscodeError(Exception):
    """Raised when an image cannot be decoded, encoded or written."""


def resolve_image_path(stored_value: str, base_path: str) -> str:
    if not stored_value.startswith("/"):
        stored_value = "/" + stored_value
    result_path = os.path.join(base_path, MEDIA_DIR) + stored_value

    if not os.path.isfile(result_path):
        raise FileNotFoundError(f"File {result_path} not found!")
    return result_path


def converted_path(image_path: str, target_format: str) -> str:
    """Same path, with only the extension swapped for the target format."""
    root, _ = os.path.splitext(image_path)
    return f"{root}.{target_format}"


def pillow_format(target_format: str) -> str:
    extension = "." + target_format.lower().lstrip(".")
    fmt = Image.registered_extensions().get(extension)
    if fmt is None:
        raise TranscodeError(f"Unsupported image format: {target_format}")
    return fmt


def _flatten(img: Image.Image) -> Image.Image:
    if img.mode in ("RGB", "L"):
        return img
    img = img.convert("RGBA")
    background = Image.new("RGB", img.size, "white")
    background.paste(img, mask=img.split()[-1])
    return background


def _portable(img: Image.Image) -> Image.Image:
    if img.mode in PORTABLE_MODES:
        return img
    has_alpha = "A" in img.getbands() or "transparency" in img.info
    return img.convert("RGBA" if has_alpha else "RGB")


def transcode_image(image_path: str, target_format: str, max_size: int = MAX_SIZE, quality: int = QUALITY) -> str:
    """
    Fit the image within max_size x max_size (aspect kept, never enlarged)
    and save it next to the original in the target format. Returns the new path.
    """
    fmt = pillow_format(target_format)
    output_path = converted_path(image_path, target_format)

    try:
        with Image.open(image_path) as img:
            img.load()
            img.thumbnail((max_size, max_size), Image.LANCZOS)
            if fmt in NO_ALPHA_FORMATS:
                img = _flatten(img)
            else:
                img = _portable(img)
            img.save(output_path, fmt, quality=quality)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise TranscodeError(f"Could not convert {image_path}: {e}") from e
    return output_path
