# config.py
# region Imports
from __future__ import annotations
import math
import numbers
from dataclasses import dataclass
from typing import Any, Mapping, Optional
# endregion

# region Defaults
ELEVATION_LAYER = "elevation"
STEP_HEIGHT_LAYER = "step_height"

# Customary values for a small wheeled robot on a 4 cm grid
DEFAULT_PARAMS = {
    "critical_value": 0.3,
    "first_window_radius": 0.08,
    "second_window_radius": 0.08,
    "critical_cell_number": 5,
    "map_type": "traversability_step",
}
# endregion

# region Errors
class ConfigurationError(ValueError):
    """Raised when a filter parameter is missing or out of range."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"'{key}': {reason}")
        self.key = key
        self.reason = reason
# endregion

# region Field Checks
def _require(params: Mapping[str, Any], key: str) -> Any:
    if params is None or key not in params:
        raise ConfigurationError(key, "parameter not found")
    return params[key]


def _positive_real(params: Mapping[str, Any], key: str) -> float:
    v = _require(params, key)
    if isinstance(v, bool) or not isinstance(v, numbers.Real):
        raise ConfigurationError(key, f"must be a number, got {type(v).__name__}")
    v = float(v)
    if not math.isfinite(v) or v <= 0.0:
        raise ConfigurationError(key, f"must be greater than zero, got {v}")
    return v


def _positive_int(params: Mapping[str, Any], key: str) -> int:
    v = _require(params, key)
    if isinstance(v, bool) or not isinstance(v, numbers.Integral):
        raise ConfigurationError(key, f"must be an integer, got {type(v).__name__}")
    v = int(v)
    if v <= 0:
        raise ConfigurationError(key, f"must be greater than zero, got {v}")
    return v


def _layer_name(params: Mapping[str, Any], key: str) -> str:
    v = _require(params, key)
    if not isinstance(v, str) or not v.strip():
        raise ConfigurationError(key, "must be a non-empty layer name")
    if v in (ELEVATION_LAYER, STEP_HEIGHT_LAYER):
        raise ConfigurationError(key, f"'{v}' is reserved for the filter's own layers")
    return v
# endregion

# region Step Filter Config
@dataclass(frozen=True)
class StepFilterConfig:
    """
    critical_value:       step height (m) at and above which a cell scores 0
    first_window_radius:  disc radius (m) used to find raw elevation steps
    second_window_radius: disc radius (m) used to aggregate step heights
    n_cell_critical:      normalization count for the critical-step tally
    output_layer:         name of the layer the filter writes
    """
    critical_value: float
    first_window_radius: float
    second_window_radius: float
    n_cell_critical: int
    output_layer: str

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "StepFilterConfig":
        """Validate a parameter mapping. Raises ConfigurationError on the first bad key."""
        return cls(
            critical_value=_positive_real(params, "critical_value"),
            first_window_radius=_positive_real(params, "first_window_radius"),
            second_window_radius=_positive_real(params, "second_window_radius"),
            n_cell_critical=_positive_int(params, "critical_cell_number"),
            output_layer=_layer_name(params, "map_type"),
        )

    def to_params(self) -> dict:
        return {
            "critical_value": self.critical_value,
            "first_window_radius": self.first_window_radius,
            "second_window_radius": self.second_window_radius,
            "critical_cell_number": self.n_cell_critical,
            "map_type": self.output_layer,
        }
# endregion

# region YAML Loading
def load_params(path: str, section: Optional[str] = "params") -> dict:
    """Read a parameter mapping from a YAML file.

    A top-level `section` key (``params`` by default) is unwrapped when present,
    so both flat files and ``params: {...}`` blocks work.
    """
    import yaml

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at top level, got {type(data).__name__}")
    if section and isinstance(data.get(section), dict):
        data = data[section]
    return dict(data)
# endregion
