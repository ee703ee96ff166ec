from __future__ import annotations

from fastapi.testclient import TestClient

from services.api_gateway.app.main import app, get_result_store
from services.api_gateway.app.state import InMemoryResultStore


class _RecordingStore:
    def __init__(self) -> None:
        self.items: dict[str, dict] = {}

    def get(self, key: str) -> dict | None:
        return self.items.get(key)

    def set(self, key: str, value: dict) -> None:
        self.items[key] = value


def test_in_memory_store_returns_copies() -> None:
    store = InMemoryResultStore()
    payload = {"title": "t", "sections": []}
    store.set("a", payload)

    payload["title"] = "changed"
    fetched = store.get("a")

    assert fetched == {"title": "t", "sections": []}
    assert store.get("missing") is None


def test_save_then_get_round_trip(monkeypatch) -> None:
    monkeypatch.setenv("BENTO_PUBLIC_BASE_URL", "https://bento.example/")
    store = _RecordingStore()
    app.dependency_overrides[get_result_store] = lambda: store
    try:
        client = TestClient(app)
        saved = client.post("/api/save-data", json={"data": {"title": "好天气", "sections": []}})

        assert saved.status_code == 200
        body = saved.json()
        assert body["success"] is True
        assert body["url"] == f"https://bento.example/api/get-data?id={body['dataId']}"
        assert store.items[body["dataId"]] == {"title": "好天气", "sections": []}

        fetched = client.get("/api/get-data", params={"id": body["dataId"]})
        assert fetched.status_code == 200
        assert fetched.json() == {"title": "好天气", "sections": []}
    finally:
        app.dependency_overrides.clear()


def test_save_without_data_returns_400() -> None:
    client = TestClient(app)

    response = client.post("/api/save-data", json={})

    assert response.status_code == 400
    assert response.json()["error"] == "no data provided"


def test_get_data_errors() -> None:
    client = TestClient(app)

    assert client.get("/api/get-data").status_code == 400
    missing = client.get("/api/get-data", params={"id": "does-not-exist"})
    assert missing.status_code == 404
    assert missing.json() == {"error": "data not found"}
