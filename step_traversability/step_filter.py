# step_filter.py
# ----------------
# Step traversability filter over a layered elevation raster.
#
# Two windowed scans:
#   1. step height: largest |dz| between a cell and any cell in a disc of
#      first_window_radius around it.
#   2. traversability: largest step height in a disc of second_window_radius,
#      dampened by how many times the running maximum climbed above the
#      critical value, mapped linearly to [0, 1].
#
# Exposes:
#   - compute_step_height(grid, radius)
#   - compute_step_traversability(grid, config)
#   - StepFilter (configure / update)

# region Imports
from __future__ import annotations
import logging
from typing import Any, Mapping, Optional

from step_traversability.config import (
    ELEVATION_LAYER,
    STEP_HEIGHT_LAYER,
    ConfigurationError,
    StepFilterConfig,
)
from step_traversability.filter_chain import FilterBase, register_filter
from step_traversability.grid_map import Raster
from step_traversability.iterators import circle_cells, grid_cells
# endregion

logger = logging.getLogger(__name__)


# region Pass 1: Step Height
def compute_step_height(
    grid: Raster,
    radius: float,
    elevation_layer: str = ELEVATION_LAYER,
    step_layer: str = STEP_HEIGHT_LAYER,
) -> None:
    """
    Fill `step_layer` in place with the largest elevation difference between
    each cell and the valid cells in the disc of `radius` around it.

    Cells without elevation, or whose window is flat, stay invalid.
    """
    spec = grid.spec
    for idx in grid_cells(spec):
        if not grid.is_valid(idx, elevation_layer):
            continue
        height = grid.at(elevation_layer, idx)
        center = grid.get_position(idx)

        step_max = 0.0
        for sub in circle_cells(spec, center, radius):
            if not grid.is_valid(sub, elevation_layer):
                continue
            step = abs(height - grid.at(elevation_layer, sub))
            if step > step_max:
                step_max = step

        if step_max > 0.0:
            grid.set_at(step_layer, idx, step_max)
# endregion


# region Pass 2: Traversability
def compute_step_traversability(
    grid: Raster,
    config: StepFilterConfig,
    step_layer: str = STEP_HEIGHT_LAYER,
) -> None:
    """
    Fill `config.output_layer` in place from the step heights in the disc of
    `config.second_window_radius` around each cell.

    n_cells counts the strict increases of the running maximum that land
    above the critical value; it is floor-divided by n_cell_critical, so a
    window only keeps its full step once the maximum has climbed past the
    critical value n_cell_critical times.
    """
    spec = grid.spec
    critical = config.critical_value
    debug = logger.isEnabledFor(logging.DEBUG)

    for idx in grid_cells(spec):
        center = grid.get_position(idx)
        n_cells = 0
        step_max = 0.0
        saw_any = False

        for sub in circle_cells(spec, center, config.second_window_radius):
            if not grid.is_valid(sub, step_layer):
                continue
            saw_any = True
            value = grid.at(step_layer, sub)
            if value > step_max:
                step_max = value
                if step_max > critical:
                    n_cells += 1
                    if debug:
                        logger.debug("cell %s: step max %.4f above critical", idx, step_max)

        if not saw_any:
            continue

        step = min(step_max, (n_cells // config.n_cell_critical) * step_max)
        if debug:
            logger.debug("cell %s: n_cells=%d step=%.4f", idx, n_cells, step)
        if step < critical:
            grid.set_at(config.output_layer, idx, 1.0 - step / critical)
        else:
            grid.set_at(config.output_layer, idx, 0.0)
# endregion


# region Filter
@register_filter("StepFilter")
class StepFilter(FilterBase):
    """Configured step traversability transform: configure once, update many."""

    def __init__(self, name: str = "step"):
        super().__init__(name)
        self.config: Optional[StepFilterConfig] = None
        self.last_error: Optional[ConfigurationError] = None

    def configure(self, params: Mapping[str, Any]) -> bool:
        try:
            config = StepFilterConfig.from_params(params)
        except ConfigurationError as e:
            self.last_error = e
            logger.error("Step filter '%s' rejected param %s", self.name, e)
            return False

        self.config = config
        self.last_error = None
        logger.info("Critical step height = %f.", config.critical_value)
        logger.info("First window radius of step filter = %f.", config.first_window_radius)
        logger.info("Second window radius of step filter = %f.", config.second_window_radius)
        logger.info("Number of critical cells of step filter = %d.", config.n_cell_critical)
        logger.info("Step map type = %s.", config.output_layer)
        return True

    def update(self, grid: Raster) -> Raster:
        """Return a copy of `grid` with the output layer added; `grid` is untouched."""
        if self.config is None:
            raise RuntimeError(f"Step filter '{self.name}' used before configure()")
        if not grid.exists(ELEVATION_LAYER):
            raise KeyError(f"input raster has no '{ELEVATION_LAYER}' layer")

        out = grid.copy()
        out.add(self.config.output_layer)
        out.add(STEP_HEIGHT_LAYER)

        compute_step_height(out, self.config.first_window_radius)
        compute_step_traversability(out, self.config)

        out.erase(STEP_HEIGHT_LAYER)
        return out
# endregion
