"""
End-to-end test of the link API against SQLite.

The application lifespan builds the real container; only the resolver
inside the enricher is swapped so no outbound requests are made.

System role: Verification of upload-to-enrichment flow through HTTP
"""

import time

import pytest
from fastapi.testclient import TestClient

from linkdrop.api.main import create_app
from linkdrop.configs import Settings
from linkdrop.configs.metadata import MetadataSettings
from linkdrop.core.metadata import Metadata


@pytest.fixture
def client(db_settings, resolver_factory):
    settings = Settings(
        database=db_settings,
        metadata=MetadataSettings(worker_concurrency=2),
        log_level="WARNING",
    )
    app = create_app(settings)

    with TestClient(app) as test_client:
        resolver = resolver_factory(Metadata(title="Example Domain", thumbnail="https://example.com/i.png"))
        test_client.app.state.container.enricher.resolver = resolver
        yield test_client


def wait_for_status(client, link_id, expected, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        body = client.get(f"/api/v1/links/{link_id}/metadata-status").json()
        if body["status"] == expected:
            return body
        time.sleep(0.05)
    raise AssertionError(f"status never reached {expected}: {body}")


def test_upload_then_poll_until_completed(client):
    response = client.post(
        "/api/v1/links/upload",
        json={"urls": [{"url": "https://example.com/", "title": "Mine"}], "categories": ["reading"]},
    )
    assert response.status_code == 201
    link = response.json()["files"][0]
    assert link["metadata_status"] in ("pending", "processing")

    body = wait_for_status(client, link["id"], "completed")

    assert body["metadata"] == {
        "title": "Mine",
        "description": None,
        "thumbnail": "https://example.com/i.png",
    }


def test_lookup_search_and_delete(client):
    response = client.post(
        "/api/v1/links/upload",
        json={
            "urls": [{"url": "https://example.com/a"}, {"url": "https://example.org/b"}, {"url": "nope"}],
            "categories": ["reading"],
            "tags": ["docs"],
        },
    )
    assert response.status_code == 201
    data = response.json()
    assert data["success"] is False
    assert data["total"] == 2
    first = data["files"][0]

    by_code = client.get(f"/api/v1/links/code/{first['short_code'].lower()}")
    assert by_code.status_code == 200
    assert by_code.json()["id"] == first["id"]

    search = client.get("/api/v1/links/search?q=DOCS").json()
    assert search["pagination"]["total"] == 2

    assert client.delete(f"/api/v1/links/{first['id']}").status_code == 204
    assert client.get(f"/api/v1/links/code/{first['short_code']}").status_code == 404
    assert client.get("/api/v1/links").json()["pagination"]["total"] == 1
