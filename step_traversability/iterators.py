# region Imports
import math
from typing import Iterator

from step_traversability.models import GridSpec, Index, Position
# endregion

# region Full Grid
def grid_cells(spec: GridSpec) -> Iterator[Index]:
    """Every cell exactly once, row-major."""
    for r in range(spec.H):
        for c in range(spec.W):
            yield (r, c)
# endregion

# region Disc Window
def _clip(v: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, v))


def circle_cells(spec: GridSpec, center: Position, radius: float) -> Iterator[Index]:
    """
    Cells whose centers lie within `radius` of `center` (boundary included).

    Scans the disc's bounding box clipped to the grid, row-major. Yields
    nothing when the disc misses the grid entirely.
    """
    cx, cy = center
    res = spec.resolution

    c0 = int(math.floor((cx - radius - spec.min_x) / res))
    c1 = int(math.floor((cx + radius - spec.min_x) / res))
    r0 = int(math.floor((spec.max_y - (cy + radius)) / res))
    r1 = int(math.floor((spec.max_y - (cy - radius)) / res))
    if c1 < 0 or r1 < 0 or c0 >= spec.W or r0 >= spec.H:
        return
    c0, c1 = _clip(c0, 0, spec.W - 1), _clip(c1, 0, spec.W - 1)
    r0, r1 = _clip(r0, 0, spec.H - 1), _clip(r1, 0, spec.H - 1)

    r2 = radius * radius
    for r in range(r0, r1 + 1):
        dy = (spec.max_y - (r + 0.5) * res) - cy
        for c in range(c0, c1 + 1):
            dx = (spec.min_x + (c + 0.5) * res) - cx
            if dx * dx + dy * dy <= r2:
                yield (r, c)
# endregion
