import pytest

import db_pg
import run_tag_backfill
import settings
from run_tag_backfill import backfill_tags
from timeline import TimelineEvent


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self.rowcount = 0

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        self.conn.executed.append((sql, params))
        if sql.startswith("UPDATE"):
            _, event_id = params
            self.rowcount = 1 if event_id in self.conn.existing_ids else 0

    def fetchall(self):
        return self.conn.rows


class FakeConn:
    def __init__(self, rows=(), existing_ids=()):
        self.rows = list(rows)
        self.existing_ids = set(existing_ids)
        self.executed = []
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def cursor(self, row_factory=None):
        return FakeCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = True


def _event(id, description, tags=()):
    return TimelineEvent(
        id=id, country_id=1, title="t", description=description, date="2000", event_type="political", tags=tuple(tags)
    )


def test_backfill_updates_untagged_and_skips_tagged():
    conn = FakeConn(existing_ids={1, 2})
    events = [
        _event(1, "A peace treaty was signed yesterday."),
        _event(2, "The cat sat on the mat for a while.", tags=["pets"]),
    ]
    res = backfill_tags(conn, events)
    assert (res.scanned, res.updated, res.skipped, res.unchanged) == (2, 1, 1, 0)

    sql, params = conn.executed[0]
    assert sql.startswith('UPDATE "timelineEvents"')
    assert params[0].obj == ["peace treaty", "treaty signed", "yesterday"]
    assert params[1] == 1


def test_backfill_overwrite_leaves_identical_tags():
    conn = FakeConn(existing_ids={1})
    events = [_event(1, "The cat sat on the mat for a while.", tags=["historical event"])]
    res = backfill_tags(conn, events, overwrite=True)
    assert res.unchanged == 1
    assert conn.executed == []


def test_backfill_missing_row_counts_as_skipped():
    conn = FakeConn(existing_ids=set())
    res = backfill_tags(conn, [_event(9, "Thousands joined the protest in the capital.")])
    assert res.updated == 0
    assert res.skipped == 1


def test_fetch_timeline_events_builds_query():
    conn = FakeConn(
        rows=[
            {
                "id": 1,
                "countryId": 4,
                "title": "Coup",
                "description": "The army seized power.",
                "date": "1973",
                "eventType": "conflict",
                "icon": "fire",
                "tags": None,
            }
        ]
    )
    events = db_pg.fetch_timeline_events(conn, country_id=4, untagged_only=True, limit=10)
    assert [e.id for e in events] == [1]
    assert events[0].icon == "fire"

    sql, params = conn.executed[0]
    assert '"countryId" = %s' in sql
    assert "tags IS NULL" in sql
    assert params == [4, 10]


def test_database_url_required(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(RuntimeError):
        db_pg.database_url()


def test_main_commits_and_closes(monkeypatch):
    conn = FakeConn(
        rows=[
            {
                "id": 1,
                "countryId": 2,
                "title": "Resignation",
                "description": "The prime minister resigned after the general election.",
                "date": "2010",
                "eventType": "political",
                "icon": None,
                "tags": [],
            }
        ],
        existing_ids={1},
    )
    monkeypatch.setattr(settings, "load_dotenv", lambda **kw: None)
    monkeypatch.setenv("DATABASE_URL", "postgresql://example/db")
    monkeypatch.delenv("TAG_OVERWRITE", raising=False)
    monkeypatch.setattr(run_tag_backfill, "connect", lambda url=None: conn)

    run_tag_backfill.main()

    assert conn.commits == 1
    assert conn.rollbacks == 0
    assert conn.closed
    _, params = conn.executed[-1]
    assert params[0].obj == ["general election", "prime minister", "leader resigned"]


def test_main_rolls_back_on_error(monkeypatch):
    conn = FakeConn()
    monkeypatch.setenv("DATABASE_URL", "postgresql://example/db")
    monkeypatch.setattr(run_tag_backfill, "connect", lambda url=None: conn)

    def boom(*args, **kwargs):
        raise RuntimeError("db down")

    monkeypatch.setattr(run_tag_backfill, "fetch_timeline_events", boom)

    with pytest.raises(RuntimeError):
        run_tag_backfill.main()
    assert conn.rollbacks == 1
    assert conn.closed
