"""Security helpers."""

from __future__ import annotations

import re

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_IDENTIFIER = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


def is_safe_identifier(value: str) -> bool:
    # Used as a storage folder segment: no separators, no traversal
    return bool(value) and bool(_IDENTIFIER.match(value))


def is_hex_color(value: str) -> bool:
    return bool(_HEX_COLOR.match(value or ""))
