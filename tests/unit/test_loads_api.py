"""
Tests for the loads API (import, photos, analytics).
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from loadrush.adapters.sqlite.handles import init_store
from loadrush.api.deps import get_clock, get_rules, get_store_handle
from loadrush.api.main import app
from loadrush.domain.entities import LoadRecord


@pytest.fixture
def store(db_path):
    return init_store(db_path)


@pytest.fixture
def client(store, rules, frozen_clock):
    app.dependency_overrides[get_store_handle] = lambda: store
    app.dependency_overrides[get_rules] = lambda: rules
    app.dependency_overrides[get_clock] = lambda: frozen_clock
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    def test_health(self, client) -> None:
        assert client.get("/health").json() == {"status": "ok", "service": "api"}


class TestImport:
    def test_imports_rows(self, client, store) -> None:
        response = client.post(
            "/api/loads/import",
            json={
                "ownerId": "owner-1",
                "rows": [
                    {"rate": "$1,500", "pickupCity": "Phoenix", "equipmentType": "Van"},
                    {"rateTotalUSD": "900", "status": "draft"},
                ],
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["imported"] == 2
        assert body["errors"] == []
        first = store.loads.get_by_id(body["loadIds"][0])
        assert first.title == "Van 1500"
        assert first.origin.city == "Phoenix"
        assert first.created_by == "owner-1"

    def test_blank_owner_is_400(self, client) -> None:
        response = client.post("/api/loads/import", json={"ownerId": " ", "rows": [{}]})
        assert response.status_code == 400


class TestPhotos:
    def test_replaces_with_sanitized_photos(self, client, store) -> None:
        load = store.loads.save(LoadRecord(created_by="owner-1"))

        response = client.put(
            f"/api/loads/{load.id}/photos",
            json={
                "photos": ["https://x.com/a.jpg", "not-a-url", "https://x.com/b.png"],
                "primaryPhoto": "https://x.com/b.png",
            },
        )

        assert response.status_code == 200
        assert response.json() == {
            "photos": ["https://x.com/a.jpg", "https://x.com/b.png"],
            "primaryPhoto": "https://x.com/b.png",
            "totalArraySize": 45,
            "percentUsed": 0,
        }
        assert store.loads.get_by_id(load.id).photos == [
            "https://x.com/a.jpg",
            "https://x.com/b.png",
        ]

    def test_unknown_load_is_404(self, client) -> None:
        response = client.put("/api/loads/missing/photos", json={"photos": []})
        assert response.status_code == 404


class TestAnalytics:
    def test_computes_and_caches(self, client, store) -> None:
        load = store.loads.save(
            LoadRecord(created_by="owner-1", distance_miles=300, rate_total_usd=1500)
        )

        first = client.get(f"/api/loads/{load.id}/analytics", params={"mpg": 30})
        second = client.get(f"/api/loads/{load.id}/analytics", params={"mpg": 30})

        assert first.status_code == 200
        body = first.json()
        assert body["loadId"] == load.id
        assert body["cached"] is False
        assert body["analytics"]["gallonsNeeded"] == pytest.approx(10.0)
        assert body["analytics"]["fuelCost"] == pytest.approx(41.0)
        assert body["analytics"]["netRevenue"] == pytest.approx(1459.0)
        assert second.json()["cached"] is True

    def test_gasoline_override(self, client, store) -> None:
        load = store.loads.save(LoadRecord(created_by="owner-1", distance_miles=300))

        response = client.get(
            f"/api/loads/{load.id}/analytics",
            params={"mpg": 30, "fuelType": "gasoline", "gasPrice": 3.0},
        )

        analytics = response.json()["analytics"]
        assert analytics["fuel"] == "gasoline"
        assert analytics["fuelCost"] == pytest.approx(30.0)

    def test_insufficient_data_is_null(self, client, store) -> None:
        load = store.loads.save(LoadRecord(created_by="owner-1", distance_miles=300))

        response = client.get(f"/api/loads/{load.id}/analytics")

        assert response.status_code == 200
        assert response.json()["analytics"] is None

    def test_unknown_load_is_404(self, client) -> None:
        assert client.get("/api/loads/missing/analytics", params={"mpg": 30}).status_code == 404
