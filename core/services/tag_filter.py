"""Query-string encoding of tag filters.

Each parameter key is a tag name. A key starting with ``-`` excludes the tag,
any other key requires it. Parameter values are ignored, so ``cat&-dog=1``
and ``?cat=&-dog`` describe the same filter. A required tag that itself starts
with ``-`` is written with the dash escaped (``%2D``).
"""

from __future__ import annotations

from urllib.parse import quote, unquote_plus

from core.models import TagFilter

NEGATION_MARKER = "-"


def _encode_tag(tag: str) -> str:
    encoded = quote(tag, safe="")
    if encoded.startswith(NEGATION_MARKER):
        encoded = "%2D" + encoded[1:]
    return encoded


def parse_tag_filter(query: str | None) -> TagFilter:
    """Parse `query` into a `TagFilter`; empty or None yields an empty filter."""
    if not query:
        return TagFilter()
    text = query[1:] if query.startswith("?") else query
    required: set[str] = set()
    excluded: set[str] = set()
    for part in text.split("&"):
        # The marker is read before unquoting so an escaped dash stays in the tag
        raw = part.split("=", 1)[0]
        if raw.startswith(NEGATION_MARKER):
            tag = unquote_plus(raw[1:])
            if tag:
                excluded.add(tag)
        elif raw:
            required.add(unquote_plus(raw))
    return TagFilter(frozenset(required), frozenset(excluded))


def encode_tag_filter(tag_filter: TagFilter) -> str:
    """Return the canonical query string for `tag_filter` (no leading ``?``)."""
    parts = [_encode_tag(tag) for tag in sorted(tag_filter.required)]
    parts += [NEGATION_MARKER + quote(tag, safe="") for tag in sorted(tag_filter.excluded)]
    return "&".join(parts)
