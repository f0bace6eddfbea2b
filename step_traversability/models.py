# models.py
from dataclasses import dataclass
import math
from typing import Optional, Tuple

from rasterio.transform import Affine, from_origin

Index = Tuple[int, int]
Position = Tuple[float, float]


@dataclass(frozen=True)
class GridSpec:
    """
    North-up raster geometry with square cells.

    Row 0 is the northern edge (max_y), column 0 the western edge (min_x),
    the same orientation a GeoTIFF uses.
    """
    min_x: float
    min_y: float
    resolution: float
    W: int
    H: int

    def __post_init__(self):
        if not (math.isfinite(self.min_x) and math.isfinite(self.min_y)):
            raise ValueError(f"origin must be finite, got ({self.min_x}, {self.min_y})")
        if not (self.resolution > 0.0 and math.isfinite(self.resolution)):
            raise ValueError(f"resolution must be positive, got {self.resolution}")
        if self.W < 1 or self.H < 1:
            raise ValueError(f"grid must have at least one cell, got H={self.H}, W={self.W}")

    @property
    def max_x(self) -> float:
        return self.min_x + self.W * self.resolution

    @property
    def max_y(self) -> float:
        return self.min_y + self.H * self.resolution

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.H, self.W)

    @property
    def transform(self) -> Affine:
        return from_origin(self.min_x, self.max_y, self.resolution, self.resolution)

    @classmethod
    def from_transform(cls, transform: Affine, W: int, H: int) -> "GridSpec":
        if transform.b != 0.0 or transform.d != 0.0:
            raise ValueError("rotated rasters are not supported")
        if not math.isclose(abs(transform.a), abs(transform.e), rel_tol=1e-6):
            raise ValueError(f"cells must be square, got {abs(transform.a)} x {abs(transform.e)}")
        if transform.a <= 0 or transform.e >= 0:
            raise ValueError("raster must be north-up")
        res = float(transform.a)
        return cls(min_x=float(transform.c), min_y=float(transform.f) - H * res,
                   resolution=res, W=int(W), H=int(H))

    # region Index Helpers
    def rc_to_xy(self, r: int, c: int) -> Position:
        """Center of cell (r, c)."""
        x = self.min_x + (c + 0.5) * self.resolution
        y = self.max_y - (r + 0.5) * self.resolution
        return x, y

    def xy_to_rc(self, x: float, y: float) -> Optional[Index]:
        """Cell containing (x, y), or None outside the map."""
        c = int(math.floor((x - self.min_x) / self.resolution))
        r = int(math.floor((self.max_y - y) / self.resolution))
        if 0 <= r < self.H and 0 <= c < self.W:
            return (r, c)
        return None
    # endregion
