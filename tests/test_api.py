import pytest

from fastapi.testclient import TestClient

import api
from maps_places.models import CrawlSummary, FailedQuery, Place


@pytest.fixture
def client():
    return TestClient(api.app)


def test_healthz(client) -> None:
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_crawl_returns_summary_with_output_aliases(monkeypatch, client) -> None:
    calls = {}

    async def fake_run_crawl(settings, write_output=True):
        calls["queries"] = settings.queries
        calls["write_output"] = write_output
        return CrawlSummary(
            places=[Place(name="Laba Africa Expeditions", category="Tour operator", five_stars=12)],
            not_found=["Nowhere"],
            failed=[FailedQuery(query="Broken", reason="timeout")],
        )

    monkeypatch.setattr(api, "run_crawl", fake_run_crawl)

    response = client.post("/crawl", json={"queries": [" Laba africa expeditions ", "Nowhere", "Broken"]})

    assert response.status_code == 200
    body = response.json()
    assert body["places"][0]["name"] == "Laba Africa Expeditions"
    assert body["places"][0]["5_stars"] == 12
    assert body["places"][0]["reviews"] == []
    assert body["not_found"] == ["Nowhere"]
    assert body["failed"] == [{"query": "Broken", "reason": "timeout"}]
    assert calls == {"queries": ["Laba africa expeditions", "Nowhere", "Broken"], "write_output": False}


def test_crawl_validates_payload(client) -> None:
    assert client.post("/crawl", json={}).status_code == 422
    assert client.post("/crawl", json={"queries": []}).status_code == 422
    assert client.post("/crawl", json={"queries": ["  "]}).status_code == 422


def test_crawl_reports_aborted_run(monkeypatch, client) -> None:
    async def failing_run_crawl(settings, write_output=True):
        raise OSError("disk full")

    monkeypatch.setattr(api, "run_crawl", failing_run_crawl)

    response = client.post("/crawl", json={"queries": ["Zed Tours"], "write_output": True})

    assert response.status_code == 500
    assert response.json()["detail"] == "disk full"
