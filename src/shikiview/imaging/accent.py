"""Accent color extraction from poster images.

The accent color is a cheap approximation of a poster's dominant tone: the
image is shrunk to a 10x10 thumbnail, near-black and near-white pixels are
ignored, and the remaining pixels are averaged and darkened.
"""

import io

from PIL import Image, UnidentifiedImageError

THUMBNAIL_SIZE = (10, 10)
MIN_BRIGHTNESS = 30
MAX_BRIGHTNESS = 220
DARKEN_FACTOR = 0.8
ALPHA = 0.9
FALLBACK_COLOR = "rgba(180,160,120,0.9)"


class ImageDecodeError(ValueError):
    """Raised when fetched bytes are not a decodable image."""


def brightness(r: int, g: int, b: int) -> float:
    """Perceptual brightness of an RGB triple."""
    return 0.299 * r + 0.587 * g + 0.114 * b


def decode_image(data: bytes) -> Image.Image:
    """Decode raw image bytes into an RGB Pillow image.

    Raises:
        ImageDecodeError: If Pillow cannot identify or load the data.
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            return image.convert("RGB")
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        ValueError,
    ) as exc:
        raise ImageDecodeError(f"cannot decode image: {exc}") from exc


def extract_accent_color(image: Image.Image) -> str:
    """Return a muted ``rgba(r,g,b,0.9)`` color representing *image*.

    Falls back to :data:`FALLBACK_COLOR` when every thumbnail pixel is too dark
    or too bright to count.
    """
    thumbnail = image.convert("RGB").resize(THUMBNAIL_SIZE)
    data = thumbnail.tobytes()

    r_sum = g_sum = b_sum = count = 0
    for offset in range(0, len(data), 3):
        r, g, b = data[offset], data[offset + 1], data[offset + 2]
        if MIN_BRIGHTNESS < brightness(r, g, b) < MAX_BRIGHTNESS:
            r_sum += r
            g_sum += g
            b_sum += b
            count += 1

    if count == 0:
        return FALLBACK_COLOR

    r, g, b = (
        min(255, int(channel / count * DARKEN_FACTOR)) for channel in (r_sum, g_sum, b_sum)
    )
    return f"rgba({r},{g},{b},{ALPHA})"


def accent_color_from_bytes(data: bytes) -> str:
    """Decode *data* and extract its accent color."""
    return extract_accent_color(decode_image(data))
