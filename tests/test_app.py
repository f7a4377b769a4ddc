import pytest

import app as app_module
from generator import MemoryHost


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(app_module, "BASE_DIR", str(tmp_path))
    monkeypatch.setattr(app_module, "HOST", MemoryHost())
    app_module.app.config["TESTING"] = True
    with app_module.app.test_client() as c:
        yield c


def test_api_generate_returns_rects_and_shapes(client):
    resp = client.post("/api/generate", json={
        "tilemap": "#..\n#..\n###",
        "origin_x": -1,
        "origin_y": "2",
        "overlap": "NotAllowed",
    })
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["ok"] is True
    assert data["bounds"] == {"x": -1, "y": 2, "w": 3, "h": 3}
    assert data["rects"] == [
        {"x": 0, "y": 0, "w": 3, "h": 1},
        {"x": 0, "y": 1, "w": 1, "h": 2},
    ]
    assert data["shapes"][0] == {"offset": [0.5, 2.5], "size": [3.0, 1.0]}


def test_generate_form_renders_result_and_writes_outputs(client, tmp_path):
    resp = client.post("/generate", data={
        "tilemap": "##\n##",
        "overlap": "Allowed",
        "target": "CreateChildContainer",
    })
    assert resp.status_code == 200
    body = resp.get_data(as_text=True)
    assert "Colliders generated" in body
    assert "<svg" in body
    assert (tmp_path / app_module.COORDS_FILENAME).exists()
    assert len(app_module.HOST.all_boxes()) == 1


def test_generate_rejects_bad_origin(client):
    resp = client.post("/generate", data={"tilemap": "#", "origin_x": "left"})
    assert resp.status_code == 400
    assert "origin_x must be an integer" in resp.get_data(as_text=True)


def test_api_generate_rejects_unknown_policy(client):
    resp = client.post("/api/generate", json={"tilemap": "#", "overlap": "sometimes"})
    assert resp.status_code == 400
    assert resp.get_json()["ok"] is False


def test_remove_clears_generated_colliders(client):
    client.post("/api/generate", json={"tilemap": "#.#", "target": "CreateChildContainer"})
    assert len(app_module.HOST.all_boxes()) == 2

    resp = client.post("/remove")
    assert resp.get_json() == {"ok": True, "removed": 2, "boxes": 0}

    resp = client.post("/remove")
    assert resp.get_json()["removed"] == 0


def test_progress_is_not_cached(client):
    client.post("/api/generate", json={"tilemap": "###"})
    resp = client.get("/progress")
    assert resp.headers["Cache-Control"] == "no-store, max-age=0"
    snap = resp.get_json()
    assert snap["status"] == "Done"
    assert snap["rect_count"] == 1
