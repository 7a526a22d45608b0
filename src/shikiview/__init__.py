# SPDX-FileCopyrightText: 2025-present DouglasMacKrell <d.mackrell@gmail.com>
#
# SPDX-License-Identifier: MIT

"""Shikiview - Shikimori catalog normalization and accent color layer."""

from shikiview.__about__ import __version__

__all__ = ["__version__"]
