# region Imports
from typing import Optional, Sequence
import numpy as np
import matplotlib.pyplot as plt
# endregion

# region Layer Colormaps
LAYER_CMAPS = {
    "elevation": "terrain",
    "step_height": "magma",
}
DEFAULT_CMAP = "RdYlGn"
# endregion

# region Visualization Function
def show_layers(
    grid,
    layers: Sequence[str] = ("elevation", "traversability_step"),
    title: str = "Step filter",
    show: bool = False,
    out_path: Optional[str] = None,
):
    """
    Draw each requested layer side by side in map coordinates.
    Invalid (NaN) cells are left transparent. Returns the figure.
    """
    spec = grid.spec
    extent = [spec.min_x, spec.max_x, spec.min_y, spec.max_y]

    fig, axes = plt.subplots(1, len(layers), figsize=(5 * len(layers), 5), squeeze=False)
    for ax, name in zip(axes[0], layers):
        data = np.ma.masked_invalid(grid.get(name))
        cmap = LAYER_CMAPS.get(name, DEFAULT_CMAP)
        if name in LAYER_CMAPS:
            im = ax.imshow(data, origin="upper", cmap=cmap, extent=extent)
        else:
            # traversability output lives in [0, 1]
            im = ax.imshow(data, origin="upper", cmap=cmap, extent=extent, vmin=0.0, vmax=1.0)
        cbar = fig.colorbar(im, ax=ax, fraction=0.046, pad=0.04)
        cbar.set_label(name)
        ax.set_title(name)
        ax.set_xlabel("x [m]")
        ax.set_ylabel("y [m]")

    fig.suptitle(title)
    fig.tight_layout()
    if out_path:
        fig.savefig(out_path, dpi=120)
    if show:
        plt.show()
    return fig
# endregion
