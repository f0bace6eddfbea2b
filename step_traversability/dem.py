# dem.py
# ----------------
# Elevation rasters in and out of GridMap.
#
# Exposes:
#   - read_elevation_geotiff(path, band=1, window=None)
#   - write_layer_geotiff(grid, layer, path)
#   - make_step_terrain(...)   (synthetic curb, for demos/tests)
#   - make_spike_terrain(...)  (single raised cell)
#
# Dependencies: numpy, rasterio

from __future__ import annotations
from typing import Optional
import numpy as np
import rasterio
from rasterio.windows import transform as window_transform

from step_traversability.config import ELEVATION_LAYER
from step_traversability.grid_map import GridMap
from step_traversability.models import GridSpec


# -----------------------------
# GeoTIFF loader
# -----------------------------

def read_elevation_geotiff(tif_path: str, band: int = 1, window=None) -> GridMap:
    """
    Load one band of a GeoTIFF DEM (optionally a rasterio Window of it) into
    a GridMap with an 'elevation' layer. Nodata cells become NaN.

    Raises ValueError for empty windows, rotated or non-square pixels.
    """
    with rasterio.open(tif_path) as ds:
        if window is not None:
            H, W = int(window.height), int(window.width)
            tf = window_transform(window, ds.transform)
        else:
            H, W = ds.height, ds.width
            tf = ds.transform

        # --- robust guards ---
        if H < 1 or W < 1:
            raise ValueError(f"Selected window is empty (H={H}, W={W}).")

        spec = GridSpec.from_transform(tf, W, H)
        arr = ds.read(band, window=window).astype(np.float64)

        nodata = ds.nodata
        if nodata is not None and not np.isnan(nodata):
            arr[arr == nodata] = np.nan

    return GridMap(spec, {ELEVATION_LAYER: arr})


def write_layer_geotiff(grid: GridMap, layer: str, out_path: str, crs=None) -> str:
    """Write one layer as a float32 GeoTIFF; invalid cells are stored as NaN nodata."""
    data = grid.get(layer).astype(np.float32)
    H, W = data.shape
    with rasterio.open(
        out_path,
        "w",
        driver="GTiff",
        height=H,
        width=W,
        count=1,
        dtype="float32",
        crs=crs,
        transform=grid.spec.transform,
        nodata=np.nan,
    ) as dst:
        dst.write(data, 1)
        dst.set_band_description(1, layer)
    return out_path


# -----------------------------
# Synthetic terrain (for tests)
# -----------------------------

def make_step_terrain(
    H: int = 64,
    W: int = 64,
    resolution: float = 0.04,
    step_height: float = 0.2,
    step_col: Optional[int] = None,
    seed: int = 0,
    noise: float = 0.0,
    hole_fraction: float = 0.0,
) -> GridMap:
    """
    Flat ground with a curb: columns >= step_col are raised by step_height.
    Optional Gaussian noise (std in meters) and random NaN holes mimic
    unobserved cells of a real elevation map.
    """
    rng = np.random.default_rng(seed)
    if step_col is None:
        step_col = W // 2

    height = np.zeros((H, W), dtype=np.float64)
    height[:, step_col:] += step_height
    if noise > 0.0:
        height += rng.normal(0.0, noise, (H, W))
    if hole_fraction > 0.0:
        height[rng.random((H, W)) < hole_fraction] = np.nan

    return GridMap.from_array(height, resolution)


def make_spike_terrain(
    size: int = 5,
    resolution: float = 1.0,
    spike_height: float = 1.0,
    spike_rc=None,
) -> GridMap:
    """All-zero square field with a single raised cell (center by default)."""
    height = np.zeros((size, size), dtype=np.float64)
    r, c = spike_rc if spike_rc is not None else (size // 2, size // 2)
    height[r, c] = spike_height
    return GridMap.from_array(height, resolution)
