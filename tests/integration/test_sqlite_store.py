"""
Integration tests for the SQLite store: migrations, repositories, handles.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from loadrush.adapters.sqlite.handles import get_store, init_store
from loadrush.adapters.sqlite.migrator import SQLiteMigrator
from loadrush.adapters.sqlite.repos import SQLiteKeyValueStore, SQLiteLoadRepo
from loadrush.components.archival import ArchivalConfig, ArchivalService
from loadrush.components.cache import TTLCache
from loadrush.domain.entities import LoadRecord, Location
from loadrush.services.event_log import EventLog


@pytest.fixture
def migrated_db(db_path) -> str:
    SQLiteMigrator(db_path).run_migrations()
    return db_path


@pytest.fixture
def repo(migrated_db) -> SQLiteLoadRepo:
    return SQLiteLoadRepo(migrated_db)


@pytest.fixture
def kv(migrated_db) -> SQLiteKeyValueStore:
    return SQLiteKeyValueStore(migrated_db)


class TestMigrations:
    def test_applies_once(self, db_path) -> None:
        migrator = SQLiteMigrator(db_path)

        first = migrator.run_migrations()
        second = migrator.run_migrations()

        assert first == ["0001_init.sql"]
        assert second == []
        assert migrator.applied_migrations() == {"0001_init.sql"}


class TestSQLiteLoadRepo:
    def test_round_trip(self, repo) -> None:
        load = LoadRecord(
            created_by="owner-1",
            status="completed",
            rate=1800.0,
            rate_total_usd=1800.0,
            distance_miles=420.0,
            weight_lbs=0.0,
            equipment_type="Reefer",
            origin=Location(city="Phoenix", state="AZ", zip="85001"),
            destination=Location(city="Dallas", state="TX"),
            delivery_date=datetime(2024, 6, 1, 15, 30, tzinfo=UTC),
            photos=["https://x.com/a.jpg"],
            primary_photo="https://x.com/a.jpg",
            expires_at_ms=1717300000000,
        )

        repo.save(load)

        assert repo.get_by_id(load.id) == load

    def test_save_is_upsert(self, repo) -> None:
        load = repo.save(LoadRecord(created_by="owner-1", title="first"))
        repo.save(load.model_copy(update={"title": "second"}))

        assert repo.get_by_id(load.id).title == "second"
        assert len(repo.list_by_owner("owner-1")) == 1

    def test_missing_is_none(self, repo) -> None:
        assert repo.get_by_id("missing") is None

    def test_archive_candidates_filtered_in_query(self, repo, now) -> None:
        cutoff = now - timedelta(days=7)
        due = [
            repo.save(
                LoadRecord(
                    created_by="owner-1",
                    status="completed",
                    delivery_date=now - timedelta(days=10 + i),
                )
            )
            for i in range(3)
        ]
        repo.save(LoadRecord(created_by="owner-1", status="completed"))
        repo.save(
            LoadRecord(
                created_by="owner-1", status="active", delivery_date=now - timedelta(days=30)
            )
        )
        repo.save(
            LoadRecord(
                created_by="owner-1", status="completed", delivery_date=now - timedelta(days=2)
            )
        )
        repo.save(
            LoadRecord(
                created_by="owner-1",
                status="completed",
                delivery_date=now - timedelta(days=30),
                is_archived=True,
                archived_at=now,
            )
        )

        found = repo.list_archive_candidates(("completed", "archived"), cutoff, limit=10)

        assert [load.id for load in found] == [load.id for load in reversed(due)]
        assert len(repo.list_archive_candidates(("completed",), cutoff, limit=2)) == 2
        assert repo.list_archive_candidates((), cutoff, limit=10) == []

    def test_purge_candidates_filtered_in_query(self, repo, now) -> None:
        manual = repo.save(
            LoadRecord(
                created_by="owner-1",
                is_archived=True,
                archived_at=now - timedelta(days=20),
                archived_reason="manual_profile_delete",
            )
        )
        swept = repo.save(
            LoadRecord(
                created_by="owner-1", is_archived=True, archived_at=now - timedelta(days=30)
            )
        )
        repo.save(
            LoadRecord(created_by="owner-1", is_archived=True, archived_at=now - timedelta(days=1))
        )
        repo.save(LoadRecord(created_by="owner-1"))
        cutoff = now - timedelta(days=14)

        assert [load.id for load in repo.list_purge_candidates(cutoff, None, 10)] == [
            swept.id,
            manual.id,
        ]
        assert [
            load.id for load in repo.list_purge_candidates(cutoff, "manual_profile_delete", 10)
        ] == [manual.id]

    def test_delete(self, repo) -> None:
        load = repo.save(LoadRecord(created_by="owner-1"))

        assert repo.delete(load.id) is True
        assert repo.delete(load.id) is False
        assert repo.get_by_id(load.id) is None


class TestSQLiteKeyValueStore:
    def test_set_get_remove(self, kv) -> None:
        assert kv.get_item("k") is None

        kv.set_item("k", "v1")
        kv.set_item("k", "v2")
        assert kv.get_item("k") == "v2"

        kv.remove_item("k")
        assert kv.get_item("k") is None

    def test_backs_ttl_cache(self, kv, frozen_clock) -> None:
        cache = TTLCache(store=kv, time_port=frozen_clock)
        cache.set("analytics:x", {"gross": 100}, 1000)

        assert cache.get("analytics:x").data == {"gross": 100}

        frozen_clock.advance(timedelta(seconds=2))
        assert cache.get("analytics:x").hit is False
        assert kv.get_item("analytics:x") is None

    def test_backs_event_log_across_instances(self, kv) -> None:
        EventLog(kv).log_event("archive_sweep", {"archived": 1})

        assert [e.name for e in EventLog(kv).get_buffer()] == ["archive_sweep"]


class TestArchivalOnSQLite:
    def test_sweep_then_purge(self, repo, frozen_clock, now) -> None:
        load = repo.save(
            LoadRecord(
                created_by="owner-1",
                status="completed",
                delivery_date=now - timedelta(days=8),
            )
        )
        service = ArchivalService(repo, frozen_clock)

        assert service.sweep().report.archived == 1
        assert repo.get_by_id(load.id).archived_at == now

        frozen_clock.advance(timedelta(days=15))
        assert service.purge().report.purged == 1
        assert repo.get_by_id(load.id) is None

    @pytest.mark.parametrize(
        "blocker",
        [
            {"status": "active", "days_ago": 60},
            {"status": "active", "days_ago": None},
            {"status": "completed", "days_ago": None},
        ],
    )
    def test_ineligible_backlog_does_not_starve_sweep(
        self, repo, frozen_clock, now, blocker
    ) -> None:
        days_ago = blocker["days_ago"]
        for _ in range(ArchivalConfig().batch_limit + 1):
            repo.save(
                LoadRecord(
                    created_by="owner-1",
                    status=blocker["status"],
                    delivery_date=now - timedelta(days=days_ago) if days_ago else None,
                )
            )
        done = repo.save(
            LoadRecord(
                created_by="owner-1",
                status="completed",
                delivery_date=now - timedelta(days=30),
            )
        )

        out = ArchivalService(repo, frozen_clock).sweep()

        assert out.report.scanned == 1
        assert out.report.archived_ids == (done.id,)
        assert repo.get_by_id(done.id).is_archived is True

    def test_reason_purge_not_starved_by_other_archived_loads(
        self, repo, frozen_clock, now
    ) -> None:
        for _ in range(ArchivalConfig().batch_limit + 1):
            repo.save(
                LoadRecord(
                    created_by="owner-1",
                    is_archived=True,
                    archived_at=now - timedelta(days=60),
                )
            )
        manual = repo.save(
            LoadRecord(
                created_by="owner-1",
                is_archived=True,
                archived_at=now - timedelta(days=20),
                archived_reason="manual_profile_delete",
            )
        )

        out = ArchivalService(repo, frozen_clock).purge(archived_reason="manual_profile_delete")

        assert out.report.purged_ids == (manual.id,)
        assert repo.get_by_id(manual.id) is None


class TestStoreHandle:
    def test_get_before_init_raises(self) -> None:
        with pytest.raises(RuntimeError):
            get_store()

    def test_init_is_idempotent(self, db_path, tmp_path) -> None:
        first = init_store(db_path)
        second = init_store(str(tmp_path / "other.db"))

        assert second is first
        assert get_store() is first
        assert not (tmp_path / "other.db").exists()

    def test_creates_data_dir(self, tmp_path) -> None:
        handle = init_store(str(tmp_path / "nested" / "loadrush.db"))

        handle.loads.save(LoadRecord(created_by="owner-1"))
        assert (tmp_path / "nested" / "loadrush.db").exists()
