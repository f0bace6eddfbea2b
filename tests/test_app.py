import io

import pytest
from PIL import Image

from step_traversability.app import app


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


def _spike_body(spike_params, **overrides):
    elev = [[0.0] * 5 for _ in range(5)]
    elev[2][2] = 1.0
    body = {"elevation": elev, "resolution": 1.0, "origin": [0.0, 0.0], "params": spike_params}
    body.update(overrides)
    return body


def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["ok"] is True
    assert data["defaults"]["map_type"] == "traversability_step"
    assert resp.headers["Access-Control-Allow-Origin"] == "*"


def test_solve_spike(client, spike_params):
    resp = client.post("/step/solve", json=_spike_body(spike_params))
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["layer"] == "traversability_step"
    assert data["shape"] == [5, 5]
    assert data["values"][2][2] == 0.0
    assert data["values"][0][0] is None
    assert data["valid_cells"] == 13
    assert data["impassable_cells"] == 13


def test_solve_accepts_null_cells(client, spike_params):
    body = _spike_body(spike_params)
    body["elevation"][0][0] = None
    resp = client.post("/step/solve", json=body)
    assert resp.status_code == 200
    assert resp.get_json()["values"][0][0] is None


def test_solve_missing_elevation(client):
    resp = client.post("/step/solve", json={"resolution": 1.0})
    assert resp.status_code == 400
    assert "elevation" in resp.get_json()["error"]


def test_solve_ragged_grid(client, spike_params):
    resp = client.post("/step/solve", json=_spike_body(spike_params, elevation=[[0.0, 1.0], [0.0]]))
    assert resp.status_code == 400


def test_solve_bad_param(client, spike_params):
    body = _spike_body(dict(spike_params, critical_value=-1.0))
    resp = client.post("/step/solve", json=body)
    assert resp.status_code == 400
    assert "critical_value" in resp.get_json()["error"]


def test_solve_non_finite_origin(client):
    # Flask's JSON parser accepts the NaN literal
    body = '{"elevation": [[0, 1], [0, 0]], "resolution": 1.0, "origin": [NaN, 0]}'
    resp = client.post("/step/solve", data=body, content_type="application/json")
    assert resp.status_code == 400
    assert "origin" in resp.get_json()["error"]


def test_png(client, spike_params):
    resp = client.post("/step/png", json=_spike_body(spike_params))
    assert resp.status_code == 200
    assert resp.headers["Content-Type"] == "image/png"
    img = Image.open(io.BytesIO(resp.data))
    assert img.size == (5, 5)
    assert img.mode == "LA"
