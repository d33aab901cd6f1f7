"""Single-run tag backfill for timeline events (cron or manual).

- Loads settings (.env + environment)
- Reads timeline events from Postgres
- Stores extracted tags in the jsonb `tags` column

Events that already carry tags are left alone unless TAG_OVERWRITE is set.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from db_pg import connect, database_url, fetch_timeline_events, update_event_tags
from settings import load_settings_from_env
from tagger import extract_tags
from timeline import TimelineEvent


logger = logging.getLogger("tag_backfill")


@dataclass
class BackfillResult:
    scanned: int = 0
    updated: int = 0
    unchanged: int = 0
    skipped: int = 0


def backfill_tags(conn, events: Iterable[TimelineEvent], *, overwrite: bool = False) -> BackfillResult:
    res = BackfillResult()
    for e in events:
        res.scanned += 1
        if e.tags and not overwrite:
            res.skipped += 1
            continue

        tags = extract_tags(e.description)
        if list(e.tags) == tags:
            res.unchanged += 1
            continue

        if update_event_tags(conn, e.id, tags):
            res.updated += 1
            logger.debug("event %s tagged: %s", e.id, tags)
        else:
            # row vanished between read and write
            res.skipped += 1
    return res


def main() -> None:
    settings = load_settings_from_env()
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))

    conn = connect(settings.database_url or database_url())
    try:
        events = fetch_timeline_events(
            conn,
            country_id=settings.country_id,
            untagged_only=not settings.overwrite,
            limit=settings.batch_limit,
        )
        logger.info("fetched %d timeline events (country=%s)", len(events), settings.country_id)

        res = backfill_tags(conn, events, overwrite=settings.overwrite)
        conn.commit()
        logger.info(
            "backfill ok: scanned=%s updated=%s unchanged=%s skipped=%s",
            res.scanned,
            res.updated,
            res.unchanged,
            res.skipped,
        )
    except Exception as e:
        logger.exception("backfill error: %s", e)
        conn.rollback()
        raise
    finally:
        conn.close()


if __name__ == "__main__":
    main()
