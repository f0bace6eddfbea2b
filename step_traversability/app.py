# app.py: slim Flask API around the step filter
# deps: pip install flask numpy pillow

from __future__ import annotations
from typing import Any, Dict, Tuple
import io
import logging
import numpy as np
from flask import Flask, request, jsonify, make_response
from PIL import Image

from step_traversability.config import DEFAULT_PARAMS
from step_traversability.grid_map import GridMap
from step_traversability.step_filter import StepFilter

logger = logging.getLogger(__name__)

app = Flask(__name__)

# ======= CORS =======
@app.after_request
def _cors(resp):
    resp.headers["Access-Control-Allow-Origin"]  = "*"
    resp.headers["Access-Control-Allow-Headers"] = "*"
    resp.headers["Access-Control-Allow-Methods"] = "GET,POST,OPTIONS"
    return resp

# ======= helpers =======
class BadRequest(ValueError):
    pass


def _run_filter(data: Dict[str, Any]) -> Tuple[GridMap, str]:
    """
    JSON body:
    {
      "elevation": [[...], ...],   // rows north→south, null = no data
      "resolution": 0.04,
      "origin": [min_x, min_y],    // optional, default [0, 0]
      "params": {...}              // optional, merged over the defaults
    }
    """
    if not isinstance(data, dict) or "elevation" not in data:
        raise BadRequest("elevation grid required")
    try:
        elev = np.array(data["elevation"], dtype=np.float64)
        res = float(data.get("resolution", 1.0))
        origin = data.get("origin") or [0.0, 0.0]
        grid = GridMap.from_array(elev, res, origin=(float(origin[0]), float(origin[1])))
    except (TypeError, ValueError, IndexError) as e:
        raise BadRequest(f"malformed raster: {e}") from e

    extra = data.get("params") or {}
    if not isinstance(extra, dict):
        raise BadRequest("params must be an object")
    params = dict(DEFAULT_PARAMS)
    params.update(extra)
    f = StepFilter()
    if not f.configure(params):
        logger.warning("Rejected step filter params: %s", f.last_error)
        raise BadRequest(f"bad parameter {f.last_error}")

    return f.update(grid), f.config.output_layer

# ======= public endpoints =======
@app.route("/", methods=["GET"])
def root():
    return {"ok": True, "filter": "StepFilter", "solve": "/step/solve (POST JSON)",
            "png": "/step/png (POST JSON)", "defaults": DEFAULT_PARAMS}

@app.route("/step/solve", methods=["POST"])
def step_solve():
    data = request.get_json(force=True, silent=True) or {}
    try:
        out, layer = _run_filter(data)
    except BadRequest as e:
        return jsonify({"error": str(e)}), 400

    values = out.get(layer)
    rows = [[float(v) if np.isfinite(v) else None for v in row] for row in values]
    valid = out.valid_mask(layer)
    return jsonify({
        "layer": layer,
        "shape": list(values.shape),
        "values": rows,
        "valid_cells": int(valid.sum()),
        "impassable_cells": int((values[valid] == 0.0).sum()),
    })

@app.route("/step/png", methods=["POST"])
def step_png():
    data = request.get_json(force=True, silent=True) or {}
    try:
        out, layer = _run_filter(data)
    except BadRequest as e:
        return jsonify({"error": str(e)}), 400

    values = out.get(layer)
    valid = np.isfinite(values)
    gray = (np.clip(np.nan_to_num(values, nan=0.0), 0, 1) * 255).astype("uint8")
    alpha = np.where(valid, 255, 0).astype("uint8")
    buf = io.BytesIO()
    Image.fromarray(np.dstack([gray, alpha])).save(buf, "PNG")
    buf.seek(0)
    resp = make_response(buf.read())
    resp.headers["Content-Type"] = "image/png"
    return resp


if __name__ == "__main__":
    from step_traversability.log import get_logger
    get_logger()
    app.run(host="0.0.0.0", port=8081, threaded=True)
