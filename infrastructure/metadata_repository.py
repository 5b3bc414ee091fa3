"""Metadata feed parsing.

The feed is plain text, one record per line::

    <epoch seconds> <identity> <width> <height> [tag ...]

Malformed records are logged and dropped. Surviving records are filtered by a
media pattern on the identity, sorted by timestamp and ranked, so the rest of
the application only ever sees well-formed `Item` objects.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
import re

from loguru import logger

from core.models import Item

DEFAULT_MEDIA_PATTERN = r"[.](jpe?g|png|webp|mov|mp4)$"
MIN_FIELDS = 4


def _parse_record(line: str, line_no: int) -> tuple[int, str, int, int, frozenset[str]] | None:
    """Parse a single record line; return None (and log) when malformed."""
    fields = line.split()
    if len(fields) < MIN_FIELDS:
        logger.warning(
            "Feed line {}: expected >= {} fields, got {}", line_no, MIN_FIELDS, len(fields)
        )
        return None
    ts_txt, identity, w_txt, h_txt, *tags = fields
    try:
        timestamp = round(float(ts_txt) * 1000)
        width = int(w_txt)
        height = int(h_txt)
    except (ValueError, OverflowError) as ex:
        logger.warning("Feed line {}: {} | line={!r}", line_no, ex, line)
        return None
    return timestamp, identity, width, height, frozenset(tags)


def parse_feed_lines(
    lines: Iterable[str], media_pattern: str | None = DEFAULT_MEDIA_PATTERN
) -> list[Item]:
    """Parse feed `lines` into items ranked by ascending timestamp.

    Args:
        lines: Raw feed lines.
        media_pattern: Case-insensitive regex the identity must match; None
            or empty accepts everything.
    """
    rx = re.compile(media_pattern, re.IGNORECASE) if media_pattern else None
    records = []
    dropped = 0
    for line_no, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        rec = _parse_record(line, line_no)
        if rec is None:
            dropped += 1
            continue
        if rx is not None and not rx.search(rec[1]):
            continue
        records.append(rec)

    records.sort(key=lambda r: r[0])
    items = [
        Item(
            sequence_index=i,
            timestamp=ts,
            identity=identity,
            width=w,
            height=h,
            tags=tags,
        )
        for i, (ts, identity, w, h, tags) in enumerate(records)
    ]
    if dropped:
        logger.info("Dropped {} malformed feed records", dropped)
    return items


def parse_feed_text(text: str, media_pattern: str | None = DEFAULT_MEDIA_PATTERN) -> list[Item]:
    """Parse an in-memory feed."""
    return parse_feed_lines(text.splitlines(), media_pattern)


class MetadataFeedRepository:
    """Load items from a metadata feed file."""

    def __init__(self, media_pattern: str | None = DEFAULT_MEDIA_PATTERN) -> None:
        if media_pattern:
            try:
                re.compile(media_pattern)
            except re.error as ex:
                raise ValueError(f"Invalid media pattern {media_pattern!r}: {ex}") from ex
        self._media_pattern = media_pattern

    def load(self, feed_path: str | Path) -> list[Item]:
        """Return the ranked items of the feed at `feed_path`."""
        path = Path(feed_path)
        with path.open("r", encoding="utf-8") as f:
            items = parse_feed_lines(f, self._media_pattern)
        logger.info("Loaded feed {} | items={}", path, len(items))
        return items
