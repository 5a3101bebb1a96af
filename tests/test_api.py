"""Tests for the ristream FastAPI application.

- `GET /health` returns status, environment and package version.
- `POST /expand` runs the expand pipeline and reports problems in the body
  rather than failing the request.
"""

from __future__ import annotations

from typing import Final

import pytest
from fastapi.testclient import TestClient

from ristream import __version__ as PKG_VERSION
from ristream.api.app import create_app
from ristream.core.settings import MAX_REPLAY_DEPTH_LIMIT

ALLOWED_ENVS: Final[set[str]] = {"dev", "test", "prod"}


@pytest.fixture  # type: ignore[misc]
def client() -> TestClient:
    return TestClient(create_app())


def test_health_endpoint_contract(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["environment"] in ALLOWED_ENVS
    assert data["version"] == PKG_VERSION


def test_expand_endpoint(client: TestClient) -> None:
    rib = (
        'ObjectBegin "cup"\nCylinder 1 0 1 360\nObjectEnd\n'
        'ObjectInstance "cup"\nObjectInstance "cup"\nObjectInstance "saucer"\n'
    )
    resp = client.post("/expand", json={"rib": rib})
    assert resp.status_code == 200
    data = resp.json()
    assert data["rib"] == "Cylinder 1 0 1 360\nCylinder 1 0 1 360\n"
    assert data["requests"] == 6
    assert data["objects"] == [{"name": "cup", "commands": 1}]
    assert data["archives"] == []
    assert [e["code"] for e in data["errors"]] == ["bad handle"]


def test_expand_endpoint_options(client: TestClient) -> None:
    rib = 'ArchiveBegin "a"\n# note\nReadArchive "a"\nArchiveEnd\nReadArchive "a"\n'
    resp = client.post(
        "/expand",
        json={"rib": rib, "capture_archive_records": True, "max_replay_depth": 2},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["rib"] == "# note\n# note\n"
    assert [e["code"] for e in data["errors"]] == ["nesting"]


@pytest.mark.parametrize(  # type: ignore[misc]
    "body",
    [
        {},
        {"rib": 3},
        {"rib": "", "max_replay_depth": 0},
        {"rib": "", "max_replay_depth": MAX_REPLAY_DEPTH_LIMIT + 1},
    ],
)
def test_expand_endpoint_validation(client: TestClient, body: dict[str, object]) -> None:
    resp = client.post("/expand", json=body)
    assert resp.status_code == 422


def test_expand_endpoint_at_deepest_limit(client: TestClient) -> None:
    rib = 'ArchiveBegin "a"\nSphere 1 -1 1 360\nReadArchive "a"\nArchiveEnd\nReadArchive "a"\n'
    resp = client.post(
        "/expand", json={"rib": rib, "max_replay_depth": MAX_REPLAY_DEPTH_LIMIT}
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["rib"].count("Sphere") == MAX_REPLAY_DEPTH_LIMIT
    assert [e["code"] for e in data["errors"]] == ["nesting"]
