"""Utility modules for shikiview."""

from shikiview.utils.config import resolve_setting
from shikiview.utils.debug import debug, warn

__all__ = ["resolve_setting", "debug", "warn"]
