"""Port for local user lookups used by aggregation and viewer resolution."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class UserRecord:
    """Local user persistence model."""

    user_id: int
    display_name: str
    is_active: bool


class UserDirectoryPort(Protocol):
    """User directory contract."""

    async def get_display_names(self, *, user_ids: Iterable[int]) -> dict[int, str]:
        """Return display names keyed by id; unknown ids are omitted."""

    async def get_active_user(self, *, user_id: int) -> UserRecord | None:
        """Return active user by id or None."""
