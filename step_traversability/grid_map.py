# grid_map.py
# ----------------
# Layered raster used by the step filter.
#
# Exposes:
#   - Raster   (protocol the filters rely on)
#   - GridMap  (numpy-backed implementation, NaN = invalid)

from __future__ import annotations
from typing import Dict, List, Optional, Protocol, runtime_checkable
import numpy as np

from step_traversability.models import GridSpec, Index, Position


# -----------------------------
# Capability interface
# -----------------------------

@runtime_checkable
class Raster(Protocol):
    spec: GridSpec

    def at(self, layer: str, index: Index) -> float: ...
    def set_at(self, layer: str, index: Index, value: float) -> None: ...
    def is_valid(self, index: Index, layer: str) -> bool: ...
    def add(self, layer: str, value: float = np.nan) -> None: ...
    def erase(self, layer: str) -> None: ...
    def exists(self, layer: str) -> bool: ...
    def get_position(self, index: Index) -> Position: ...
    def get_index(self, position: Position) -> Optional[Index]: ...
    def copy(self) -> "Raster": ...


# -----------------------------
# Concrete raster
# -----------------------------

class GridMap:
    """
    Named float64 layers over one GridSpec.

    Every layer has shape (H, W). A cell is valid in a layer when its value is
    finite; new layers start all-NaN.
    """

    def __init__(self, spec: GridSpec, layers: Optional[Dict[str, np.ndarray]] = None):
        self.spec = spec
        self._layers: Dict[str, np.ndarray] = {}
        for name, data in (layers or {}).items():
            self.set_layer(name, data)

    @classmethod
    def from_array(
        cls,
        data: np.ndarray,
        resolution: float,
        origin: Position = (0.0, 0.0),
        layer: str = "elevation",
    ) -> "GridMap":
        """Wrap a (H, W) array; origin is the south-west corner (min_x, min_y)."""
        arr = np.asarray(data, dtype=np.float64)
        if arr.ndim != 2:
            raise ValueError(f"layer data must be 2-D, got shape {arr.shape}")
        H, W = arr.shape
        spec = GridSpec(float(origin[0]), float(origin[1]), float(resolution), W, H)
        return cls(spec, {layer: arr})

    # region Layer Management
    @property
    def layers(self) -> List[str]:
        return list(self._layers)

    @property
    def shape(self):
        return self.spec.shape

    @property
    def resolution(self) -> float:
        return self.spec.resolution

    def exists(self, layer: str) -> bool:
        return layer in self._layers

    def add(self, layer: str, value: float = np.nan) -> None:
        """Create `layer` filled with `value`; an existing layer is reset in place."""
        self._layers[layer] = np.full(self.spec.shape, value, dtype=np.float64)

    def erase(self, layer: str) -> None:
        self._layers.pop(layer, None)

    def get(self, layer: str) -> np.ndarray:
        try:
            return self._layers[layer]
        except KeyError:
            raise KeyError(f"layer '{layer}' does not exist") from None

    def set_layer(self, layer: str, data) -> None:
        arr = np.array(data, dtype=np.float64)
        if arr.shape != self.spec.shape:
            raise ValueError(
                f"layer '{layer}' has shape {arr.shape}, grid is {self.spec.shape}"
            )
        self._layers[layer] = arr
    # endregion

    # region Cell Access
    def at(self, layer: str, index: Index) -> float:
        return float(self.get(layer)[index])

    def set_at(self, layer: str, index: Index, value: float) -> None:
        self.get(layer)[index] = value

    def is_valid(self, index: Index, layer: str) -> bool:
        return bool(np.isfinite(self.get(layer)[index]))

    def valid_mask(self, layer: str) -> np.ndarray:
        return np.isfinite(self.get(layer))

    def get_position(self, index: Index) -> Position:
        r, c = index
        return self.spec.rc_to_xy(r, c)

    def get_index(self, position: Position) -> Optional[Index]:
        return self.spec.xy_to_rc(position[0], position[1])
    # endregion

    def copy(self) -> "GridMap":
        return GridMap(self.spec, {k: v.copy() for k, v in self._layers.items()})

    def __repr__(self):
        H, W = self.spec.shape
        return f"GridMap({H}x{W} @ {self.spec.resolution:g} m, layers={self.layers})"
