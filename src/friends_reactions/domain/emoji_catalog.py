"""Immutable emoji catalog and available-emoji lookup."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

DEFAULT_EMOJI_SLUG = "1f44d"


@dataclass(frozen=True)
class EmojiEntry:
    """One known emoji addressed by its reaction slug."""

    slug: str
    char: str
    name: str


DEFAULT_AVAILABLE_EMOJIS: Mapping[str, EmojiEntry] = MappingProxyType(
    {
        DEFAULT_EMOJI_SLUG: EmojiEntry(
            slug=DEFAULT_EMOJI_SLUG,
            char="\U0001F44D",
            name="THUMBS UP SIGN",
        ),
    }
)


class EmojiCatalog:
    """Process-scoped emoji table built once at startup and shared by reference.

    `all_emojis` holds every emoji known to the catalog resource. `available_emojis`
    is the subset users may react with; when no subset is configured it falls back
    to the single thumbs-up entry.
    """

    def __init__(
        self,
        *,
        all_emojis: Mapping[str, EmojiEntry],
        available_emojis: Mapping[str, EmojiEntry] | None = None,
    ) -> None:
        self._all_emojis: Mapping[str, EmojiEntry] = MappingProxyType(dict(all_emojis))
        if available_emojis:
            self._available_emojis: Mapping[str, EmojiEntry] = MappingProxyType(
                dict(available_emojis)
            )
        else:
            self._available_emojis = DEFAULT_AVAILABLE_EMOJIS

    def all_emojis(self) -> Mapping[str, EmojiEntry]:
        """Return every emoji of the catalog keyed by slug."""

        return self._all_emojis

    def available_emojis(self) -> Mapping[str, EmojiEntry]:
        """Return the emoji users may react with, keyed by slug."""

        return self._available_emojis

    def get_emoji(self, slug: str) -> EmojiEntry | None:
        """Return the full catalog entry for slug, or None when unknown."""

        return self._all_emojis.get(slug.strip().lower())

    def resolve_glyph(self, slug: str) -> str | None:
        """Return the display glyph of an available slug, or None when not found."""

        entry = self._available_emojis.get(slug.strip().lower())
        if entry is None:
            return None
        return entry.char
