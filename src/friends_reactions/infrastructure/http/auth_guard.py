"""Resolve the viewer asserted by the upstream identity provider."""

from __future__ import annotations

import logging

from friends_reactions.application.ports.user_directory_port import UserDirectoryPort
from friends_reactions.domain.viewer import Viewer

logger = logging.getLogger(__name__)

AUTHENTICATED_USER_HEADER = "X-Authenticated-User-Id"


def extract_authenticated_user_id(header_value: str | None) -> int | None:
    """Parse the identity header into a positive user id, or None when absent/invalid."""

    if header_value is None:
        return None
    stripped = header_value.strip()
    if not stripped.isascii() or not stripped.isdigit():
        return None
    user_id = int(stripped)
    return user_id if user_id > 0 else None


class ViewerAuthGuard:
    """Map the identity header to an active local user.

    Authentication itself happens upstream; this guard only trusts the asserted id
    when it names an active user.
    """

    def __init__(self, *, users: UserDirectoryPort) -> None:
        self._users = users

    async def resolve_viewer(self, *, header_value: str | None) -> Viewer | None:
        """Return the authenticated viewer, or None for anonymous/unknown callers."""

        user_id = extract_authenticated_user_id(header_value)
        if user_id is None:
            return None

        user = await self._users.get_active_user(user_id=user_id)
        if user is None:
            logger.info("viewer_rejected reason=unknown_or_inactive user_id=%s", user_id)
            return None
        return Viewer(user_id=user.user_id, display_name=user.display_name)
