from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from main import app, clear_context_cache
from spatial.config import CONFIG_PATH_ENV, FACTORY_ENV


@pytest.fixture
def client(monkeypatch):
    monkeypatch.delenv(CONFIG_PATH_ENV, raising=False)
    monkeypatch.delenv(FACTORY_ENV, raising=False)
    clear_context_cache()
    yield TestClient(app)
    clear_context_cache()


def test_default_context(client):
    resp = client.get("/context")
    assert resp.status_code == 200
    body = resp.json()
    assert body["units"] == "km"
    assert body["isGeo"] is True
    assert body["distCalculator"] is None
    assert body["worldBounds"] is None


def test_context_from_yaml_config(client, tmp_path, monkeypatch):
    path = tmp_path / "context.yaml"
    path.write_text("units: miles\nworldBounds: ENVELOPE(-10, 10, 20, -20)\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_PATH_ENV, str(path))
    clear_context_cache()

    body = client.get("/context").json()
    assert body["units"] == "miles"
    assert body["worldBounds"] == {"minX": -10.0, "minY": -20.0, "maxX": 10.0, "maxY": 20.0}


def test_encode_small_shape(client):
    resp = client.post("/encode", json={"shape": "POINT(1 2)"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["length"] == 21
    assert body["simplified"] is False
    assert len(bytes.fromhex(body["wkbHex"])) == 21


def test_encode_errors(client):
    assert client.post("/encode", json={"shape": "POINT(1 2)", "maxBytes": 10}).status_code == 422
    assert client.post("/encode", json={"shape": "garbage"}).status_code == 400
    assert client.post("/encode", json={"shape": "POLYGON EMPTY", "maxBytes": 5}).status_code == 422
    assert client.post("/encode", json={"shape": "0 nan 10 10"}).status_code == 400


def test_relate(client):
    resp = client.post(
        "/relate",
        json={
            "operation": "IsWithin",
            "shape": "0 0 10 10",
            "candidates": ["1 1", "20 20", "POLYGON((1 1, 2 1, 2 2, 1 2, 1 1))"],
        },
    )
    assert resp.status_code == 200
    assert resp.json() == {"matches": [0, 2]}


def test_relate_unknown_operation(client):
    resp = client.post("/relate", json={"operation": "Near", "shape": "1 1"})
    assert resp.status_code == 400
