"""Postgres access for timeline events.

- Reads and updates the existing "timelineEvents" table (owned by the web app)
- Never creates or migrates schema

Env:
- DATABASE_URL (required)
"""

from __future__ import annotations

import os
from typing import Optional, Sequence

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from timeline import TimelineEvent


def database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is required to read timeline events")
    return url


def connect(url: Optional[str] = None) -> psycopg.Connection:
    return psycopg.connect(url or database_url())


def fetch_timeline_events(
    conn: psycopg.Connection,
    *,
    country_id: Optional[int] = None,
    untagged_only: bool = False,
    limit: int = 500,
) -> list[TimelineEvent]:
    where = []
    params: list = []
    if country_id is not None:
        where.append('"countryId" = %s')
        params.append(country_id)
    if untagged_only:
        where.append("(tags IS NULL OR tags = '[]'::jsonb)")

    sql = 'SELECT id, "countryId", title, description, date, "eventType", icon, tags FROM "timelineEvents"'
    if where:
        sql += " WHERE " + " AND ".join(where)
    sql += " ORDER BY id LIMIT %s"
    params.append(limit)

    with conn.cursor(row_factory=dict_row) as cur:
        cur.execute(sql, params)
        rows = cur.fetchall() or []
    return [TimelineEvent.from_row(r) for r in rows]


def update_event_tags(conn: psycopg.Connection, event_id: int, tags: Sequence[str]) -> bool:
    with conn.cursor() as cur:
        cur.execute(
            'UPDATE "timelineEvents" SET tags=%s WHERE id=%s',
            (Jsonb(list(tags)), event_id),
        )
        return bool(cur.rowcount)
