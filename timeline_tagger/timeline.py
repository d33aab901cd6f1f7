"""Timeline event shaping for country pages.

This module is pure logic:
- Input: timeline events as stored (dates are free-form text).
- Output: sorted/filtered events, display dates, truncated text, tags.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from functools import lru_cache
from typing import Any, Iterable, Mapping, Optional

from dateutil import parser as dateparser

from tagger import extract_tags


LONG_DESCRIPTION_CHARS = 150
TRUNCATED_CHARS = 147

# missing month/day parse to January 1st
_DATE_DEFAULT = datetime(1, 1, 1)


@dataclass(frozen=True)
class TimelineEvent:
    id: int
    country_id: int
    title: str
    description: str
    date: str
    event_type: str
    icon: Optional[str] = None
    tags: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "TimelineEvent":
        """Build from a `timelineEvents` row (camelCase columns)."""
        return cls(
            id=int(row["id"]),
            country_id=int(row["countryId"]),
            title=row.get("title") or "",
            description=row.get("description") or "",
            date=str(row.get("date") or ""),
            event_type=row.get("eventType") or "",
            icon=row.get("icon"),
            tags=_coerce_tags(row.get("tags")),
        )


def _coerce_tags(raw: Any) -> tuple[str, ...]:
    # jsonb arrives decoded from psycopg; older rows may hold a JSON string
    if raw is None:
        return ()
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return (raw,) if raw.strip() else ()
    if isinstance(raw, (list, tuple)):
        return tuple(str(t) for t in raw if t)
    return ()


def parse_event_date(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        return dateparser.parse(str(value), default=_DATE_DEFAULT)
    except (ValueError, OverflowError):
        return None


def format_date(value: Any) -> str:
    """Readable date, e.g. "March 4, 2019".

    Strings without a time component are already display text and are
    returned unchanged.
    """
    if isinstance(value, str) and "T" not in value and ":" not in value:
        return value

    d = parse_event_date(value)
    if d is None:
        return value if isinstance(value, str) else str(value or "")
    return f"{d:%B} {d.day}, {d.year}"


def _sort_key(d: datetime) -> datetime:
    # mixed aware/naive values cannot be compared
    return d.replace(tzinfo=None)


def sort_events(events: Iterable[TimelineEvent]) -> list[TimelineEvent]:
    """Most recent first; undated events keep their order at the end."""
    dated = []
    undated = []
    for e in events:
        d = parse_event_date(e.date)
        if d is None:
            undated.append(e)
        else:
            dated.append((d, e))
    dated.sort(key=lambda pair: _sort_key(pair[0]), reverse=True)
    return [e for _, e in dated] + undated


def event_types(events: Iterable[TimelineEvent]) -> list[str]:
    out: list[str] = []
    for e in events:
        if e.event_type not in out:
            out.append(e.event_type)
    return out


def filter_events(events: Iterable[TimelineEvent], event_type: Optional[str] = None) -> list[TimelineEvent]:
    ordered = sort_events(events)
    if event_type is None:
        return ordered
    return [e for e in ordered if e.event_type == event_type]


def is_description_long(text: Optional[str]) -> bool:
    return bool(text) and len(text) > LONG_DESCRIPTION_CHARS


def truncate_description(text: Optional[str]) -> Optional[str]:
    if not text or not is_description_long(text):
        return text
    return f"{text[:TRUNCATED_CHARS]}..."


@lru_cache(maxsize=2048)
def _cached_tags(description: str) -> tuple[str, ...]:
    return tuple(extract_tags(description))


def display_tags(event: TimelineEvent) -> list[str]:
    """Stored tags win; otherwise derive them from the description."""
    if event.tags:
        return list(event.tags)
    return list(_cached_tags(event.description or ""))
