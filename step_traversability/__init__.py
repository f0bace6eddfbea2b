"""Step traversability filter for layered elevation rasters."""
from step_traversability.config import (
    DEFAULT_PARAMS,
    ConfigurationError,
    StepFilterConfig,
    load_params,
)
from step_traversability.filter_chain import FilterBase, FilterChain, create_filter, register_filter
from step_traversability.grid_map import GridMap, Raster
from step_traversability.models import GridSpec
from step_traversability.step_filter import (
    StepFilter,
    compute_step_height,
    compute_step_traversability,
)

__version__ = "0.1.0"
