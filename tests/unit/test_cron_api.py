"""
Tests for the cron API.

- Requests without the configured secret are rejected
- Sweep and purge report scanned/affected counts
"""

from __future__ import annotations

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from loadrush.adapters.sqlite.handles import init_store
from loadrush.api.deps import get_clock, get_rules, get_store_handle
from loadrush.api.main import app
from loadrush.domain.entities import LoadRecord
from loadrush.services.event_log import get_event_log

SECRET = "s3cret"


@pytest.fixture
def store(db_path):
    return init_store(db_path)


@pytest.fixture
def client(store, rules, frozen_clock, monkeypatch):
    monkeypatch.setenv("LOADRUSH_CRON_SECRET", SECRET)
    app.dependency_overrides[get_store_handle] = lambda: store
    app.dependency_overrides[get_rules] = lambda: rules
    app.dependency_overrides[get_clock] = lambda: frozen_clock
    yield TestClient(app)
    app.dependency_overrides.clear()


def _completed(now, days_ago: int) -> LoadRecord:
    return LoadRecord(
        created_by="owner-1", status="completed", delivery_date=now - timedelta(days=days_ago)
    )


class TestCronAuth:
    def test_unconfigured_secret_is_503(self, client, monkeypatch) -> None:
        monkeypatch.delenv("LOADRUSH_CRON_SECRET", raising=False)

        response = client.post("/api/cron/archive-loads", headers={"x-cron-secret": SECRET})

        assert response.status_code == 503

    def test_missing_header_is_401(self, client) -> None:
        assert client.post("/api/cron/archive-loads").status_code == 401

    def test_wrong_secret_is_401(self, client) -> None:
        response = client.post("/api/cron/purge-loads", headers={"x-cron-secret": "nope"})
        assert response.status_code == 401


class TestArchiveLoads:
    def test_sweeps_completed_loads(self, client, store, now) -> None:
        old = store.loads.save(_completed(now, 8))
        store.loads.save(_completed(now, 2))

        response = client.post("/api/cron/archive-loads", headers={"x-cron-secret": SECRET})

        assert response.status_code == 200
        assert response.json() == {"ok": True, "scanned": 1, "archived": 1}
        assert store.loads.get_by_id(old.id).is_archived is True

    def test_second_run_archives_nothing(self, client, store, now) -> None:
        store.loads.save(_completed(now, 8))
        headers = {"x-cron-secret": SECRET}

        client.post("/api/cron/archive-loads", headers=headers)
        response = client.post("/api/cron/archive-loads", headers=headers)

        assert response.json() == {"ok": True, "scanned": 0, "archived": 0}

    def test_outcome_recorded_in_event_log(self, client, store, now) -> None:
        store.loads.save(_completed(now, 8))

        client.post("/api/cron/archive-loads", headers={"x-cron-secret": SECRET})

        names = [e.name for e in get_event_log().get_buffer()]
        assert "archive_sweep" in names


class TestPurgeLoads:
    def _archived(self, now, days_ago: int, reason: str | None = None) -> LoadRecord:
        return LoadRecord(
            created_by="owner-1",
            status="completed",
            is_archived=True,
            archived_at=now - timedelta(days=days_ago),
            archived_reason=reason,
        )

    def test_purges_with_default_days(self, client, store, now) -> None:
        old = store.loads.save(self._archived(now, 20))
        store.loads.save(self._archived(now, 5))

        response = client.post("/api/cron/purge-loads", headers={"x-cron-secret": SECRET})

        assert response.json() == {"ok": True, "scanned": 1, "purged": 1}
        assert store.loads.get_by_id(old.id) is None

    def test_days_query(self, client, store, now) -> None:
        store.loads.save(self._archived(now, 5))

        response = client.post(
            "/api/cron/purge-loads", params={"days": 3}, headers={"x-cron-secret": SECRET}
        )

        assert response.json()["purged"] == 1

    def test_reason_query(self, client, store, now) -> None:
        manual = store.loads.save(self._archived(now, 30, "manual_profile_delete"))
        swept = store.loads.save(self._archived(now, 30))

        response = client.post(
            "/api/cron/purge-loads",
            params={"reason": "manual_profile_delete"},
            headers={"x-cron-secret": SECRET},
        )

        assert response.json()["purged"] == 1
        assert store.loads.get_by_id(manual.id) is None
        assert store.loads.get_by_id(swept.id) is not None

    def test_negative_days_rejected(self, client) -> None:
        response = client.post(
            "/api/cron/purge-loads", params={"days": -1}, headers={"x-cron-secret": SECRET}
        )
        assert response.status_code == 422
