"""Parsing helpers for reaction markup found in remote Friends feeds.

A remote site annotates each feed item with one element per reaction slug::

    <friends:reaction slug="1f44d" count="3" you-reacted="1">Ann, Bob, Cy</friends:reaction>

Feed readers hand these over either as SimplePie-style dicts (attributes grouped
by namespace, element text under ``data``), as parsed ElementTree items, or as
plain JSON objects once the poller has already extracted them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any
from xml.etree.ElementTree import Element, ParseError, fromstring

from friends_reactions.application.services.remote_reaction_reconciler import FeedReaction
from friends_reactions.domain.reaction_slug import is_valid_slug

XMLNS = "wordpress-plugin-friends:feed-additions:1"
_REACTION_TAG = f"{{{XMLNS}}}reaction"
_TRUE_VALUES = frozenset({"1", "true", "yes"})


def parse_sync_reaction_items(items: Iterable[object]) -> list[FeedReaction]:
    """Parse JSON reaction objects posted by the feed poller; bad entries are skipped."""

    reactions: list[FeedReaction] = []
    for item in items:
        if not isinstance(item, Mapping):
            continue
        reaction = _build_reaction(
            slug=item.get("slug"),
            count=item.get("count"),
            usernames=item.get("usernames"),
            you_reacted=item.get("you_reacted"),
        )
        if reaction is not None:
            reactions.append(reaction)
    return reactions


def parse_feed_reaction_items(items: Iterable[Mapping[str, Any]]) -> list[FeedReaction]:
    """Parse SimplePie-style reaction items into normalized `FeedReaction` tuples."""

    reactions: list[FeedReaction] = []
    for item in items:
        if not isinstance(item, Mapping):
            continue
        attribs_by_ns = item.get("attribs")
        if not isinstance(attribs_by_ns, Mapping):
            continue
        attribs = attribs_by_ns.get(XMLNS)
        if not isinstance(attribs, Mapping):
            continue

        reaction = _build_reaction(
            slug=attribs.get("slug"),
            count=attribs.get("count"),
            usernames=item.get("data"),
            you_reacted=attribs.get("you-reacted"),
        )
        if reaction is not None:
            reactions.append(reaction)
    return reactions


def parse_feed_reactions_xml(item_xml: str) -> list[FeedReaction]:
    """Parse reaction children of one serialized feed item; unparsable markup yields none."""

    try:
        item = fromstring(item_xml)
    except ParseError:
        return []
    return parse_feed_reactions_element(item)


def parse_feed_reactions_element(item: Element) -> list[FeedReaction]:
    """Parse reaction children of one feed `<item>`/`<entry>` element."""

    reactions: list[FeedReaction] = []
    for element in item.iter(_REACTION_TAG):
        reaction = _build_reaction(
            slug=element.get("slug"),
            count=element.get("count"),
            usernames=(element.text or "").strip(),
            you_reacted=element.get("you-reacted"),
        )
        if reaction is not None:
            reactions.append(reaction)
    return reactions


def _build_reaction(
    *,
    slug: object,
    count: object,
    usernames: object,
    you_reacted: object,
) -> FeedReaction | None:
    if not isinstance(slug, str) or not is_valid_slug(slug):
        return None
    return FeedReaction(
        slug=slug,
        count=_parse_count(count),
        usernames=usernames if isinstance(usernames, str) else None,
        you_reacted=_parse_flag(you_reacted),
    )


def _parse_count(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        try:
            return int(stripped)
        except ValueError:
            return None
    return None


def _parse_flag(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return False
