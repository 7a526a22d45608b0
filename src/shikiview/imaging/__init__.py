"""Poster image analysis: accent color extraction and its URL cache."""

from shikiview.imaging.accent import (
    FALLBACK_COLOR,
    ImageDecodeError,
    accent_color_from_bytes,
    extract_accent_color,
)
from shikiview.imaging.color_cache import AccentColorCache

__all__ = [
    "FALLBACK_COLOR",
    "AccentColorCache",
    "ImageDecodeError",
    "accent_color_from_bytes",
    "extract_accent_color",
]
