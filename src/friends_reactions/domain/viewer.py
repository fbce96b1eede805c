"""Explicit identity of the user reading or mutating reactions."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Viewer:
    """Authenticated local user as asserted by the identity provider."""

    user_id: int
    display_name: str
