"""Reaction slug validation and canonicalization rules."""

from __future__ import annotations

import re

SLUG_PATTERN = re.compile(r"^[a-z0-9_-]+$")


def is_valid_slug(value: object) -> bool:
    """Return whether value is a string matching the strict slug pattern."""

    return isinstance(value, str) and SLUG_PATTERN.fullmatch(value) is not None


def canonicalize_slug(value: object) -> str | None:
    """Return trimmed lowercase slug, or None when it cannot be a valid slug."""

    if not isinstance(value, str):
        return None
    normalized = value.strip().lower()
    if not is_valid_slug(normalized):
        return None
    return normalized
