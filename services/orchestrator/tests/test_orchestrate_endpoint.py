from __future__ import annotations

from fastapi.testclient import TestClient

from shared.errors import ModelOutputParseError
from shared.schemas.domain import BentoResult

from services.orchestrator.app import main


def test_orchestrate_returns_result(monkeypatch) -> None:
    monkeypatch.setattr(
        main,
        "process_content",
        lambda content, is_url=False: BentoResult(title="t", content=content),
    )
    client = TestClient(main.app)

    response = client.post("/orchestrate", json={"content": "正文", "isUrl": False})

    assert response.status_code == 200
    assert response.json() == {"title": "t", "author": "", "content": "正文", "rawContent": "", "meta": {}}


def test_orchestrate_maps_domain_errors(monkeypatch) -> None:
    def _fail(content, is_url=False):
        raise ModelOutputParseError(raw="oops")

    monkeypatch.setattr(main, "process_content", _fail)
    client = TestClient(main.app)

    response = client.post("/orchestrate", json={"content": "正文"})

    assert response.status_code == 500
    assert "could not be parsed" in response.json()["detail"]
