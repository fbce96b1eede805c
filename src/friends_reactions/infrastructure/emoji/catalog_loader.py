"""Load the emoji catalog resource into an immutable `EmojiCatalog`."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from friends_reactions.domain.emoji_catalog import EmojiCatalog, EmojiEntry
from friends_reactions.domain.reaction_slug import canonicalize_slug

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).with_name("emojis.json")


class EmojiCatalogLoadError(RuntimeError):
    """Raised when the emoji catalog resource is missing or corrupt."""

    def __init__(self, *, path: Path, reason: str) -> None:
        super().__init__(f"cannot load emoji catalog {path}: {reason}")
        self.path = path
        self.reason = reason


def parse_selected_emojis(raw: str | None) -> list[str]:
    """Split a comma-separated slug list, dropping blanks."""

    if raw is None:
        return []
    return [part.strip().lower() for part in raw.split(",") if part.strip()]


def load_emoji_catalog(
    *,
    path: Path | None = None,
    selected_slugs: Iterable[str] = (),
) -> EmojiCatalog:
    """Read catalog JSON once and build the catalog with its available subset."""

    catalog_path = path or DEFAULT_CATALOG_PATH
    try:
        raw = json.loads(catalog_path.read_text(encoding="utf-8"))
    except FileNotFoundError as error:
        raise EmojiCatalogLoadError(path=catalog_path, reason="file not found") from error
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as error:
        raise EmojiCatalogLoadError(path=catalog_path, reason=str(error)) from error

    known = EmojiCatalog(all_emojis=_parse_catalog(raw, path=catalog_path))

    available: dict[str, EmojiEntry] = {}
    for selected in selected_slugs:
        entry = known.get_emoji(selected)
        if entry is None:
            logger.warning("emoji_selection_unknown slug=%r", selected)
            continue
        available[entry.slug] = entry

    logger.info(
        "emoji_catalog_loaded path=%s emojis=%s available=%s",
        catalog_path,
        len(known.all_emojis()),
        len(available) or "default",
    )
    return EmojiCatalog(all_emojis=known.all_emojis(), available_emojis=available)


def _parse_catalog(raw: object, *, path: Path) -> dict[str, EmojiEntry]:
    if not isinstance(raw, dict) or not raw:
        raise EmojiCatalogLoadError(path=path, reason="expected a non-empty JSON object")

    emojis: dict[str, EmojiEntry] = {}
    for key, value in raw.items():
        slug = canonicalize_slug(key)
        if slug is None:
            raise EmojiCatalogLoadError(path=path, reason=f"invalid slug {key!r}")
        if not isinstance(value, dict):
            raise EmojiCatalogLoadError(path=path, reason=f"invalid entry for {slug}")
        char = value.get("char")
        name = value.get("name")
        if not isinstance(char, str) or not char or not isinstance(name, str):
            raise EmojiCatalogLoadError(path=path, reason=f"invalid entry for {slug}")
        emojis[slug] = EmojiEntry(slug=slug, char=char, name=name)
    return emojis
