# tests/test_api.py

import pytest

pytest.importorskip("fastapi")
pytest.importorskip("httpx")

from fastapi.testclient import TestClient

from conftest import FakeLabeler, FakeMediaSource, FixedClock
from gallery_api.app import create_app
from gallery_config import AppSettings
from gallery_search.services import create_services
from gallery_search.store import InMemoryRecordStore

IDS = ["content://media/2", "content://media/1"]


@pytest.fixture
def services():
    labeler = FakeLabeler({IDS[0]: [("beach sunset", 0.9)], IDS[1]: [("dog", 0.8)]})
    built = create_services(
        settings=AppSettings(),
        store=InMemoryRecordStore(),
        media_source=FakeMediaSource(IDS),
        labeler=labeler,
    )
    built.indexer.clock = FixedClock()
    return built


@pytest.fixture
def client(services):
    return TestClient(create_app(services))


def test_health_reports_record_count(client, services):
    assert client.get("/health").json() == {"status": "ok", "indexed_images": 0}


def test_index_then_search(client):
    indexed = client.post("/index").json()
    assert indexed == {"processed": 2, "total": 2, "message": "Indexing complete!"}

    response = client.post("/search", json={"text": "dog", "mode": "exact"})

    assert response.status_code == 200
    body = response.json()
    assert body["mode"] == "exact"
    assert [result["id"] for result in body["results"]] == [IDS[1]]
    assert body["results"][0]["labels"] == ["Dog"]
    assert body["results"][0]["score"] == 1.0


def test_search_limit(client):
    client.post("/index")

    body = client.post("/search", json={"text": "beach dog", "mode": "contains", "k": 1}).json()

    assert len(body["results"]) == 1


def test_invalid_mode_is_rejected(client):
    response = client.post("/search", json={"text": "dog", "mode": "telepathic"})
    assert response.status_code == 400


def test_unconfigured_app():
    client = TestClient(create_app())

    assert client.get("/health").json() == {"status": "ok"}
    assert client.post("/search", json={"text": "dog"}).status_code == 500
    assert client.post("/index").status_code == 500


def test_labels_are_served_as_stored(client):
    client.post("/index")

    body = client.post("/search", json={"text": "sunset", "mode": "contains"}).json()

    assert body["results"][0]["labels"] == ["Beach Sunset"]
