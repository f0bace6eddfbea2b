"""
Command line entry point for the step filter.

    step-filter --input dem.tif --output step.tif --config params.yaml
    step-filter --synthetic --show

The YAML file either holds the five step filter parameters (optionally under
a `params:` key) or a `filters:` list for a whole filter chain.
"""
# region Imports
import argparse
import logging
import sys
from typing import List, Optional

import yaml

from step_traversability.config import DEFAULT_PARAMS, load_params
from step_traversability.dem import make_step_terrain, read_elevation_geotiff, write_layer_geotiff
from step_traversability.filter_chain import FilterChain
from step_traversability.log import get_logger
# endregion


# region Chain Setup
def build_chain(config_path: Optional[str]) -> FilterChain:
    """Chain from a YAML file, or a single StepFilter with the default params."""
    entries = [{"name": "step", "type": "StepFilter", "params": dict(DEFAULT_PARAMS)}]
    if config_path:
        with open(config_path, "r") as f:
            raw = yaml.safe_load(f) or {}
        if isinstance(raw, dict) and isinstance(raw.get("filters"), list):
            entries = raw["filters"]
        else:
            entries = [{"name": "step", "type": "StepFilter", "params": load_params(config_path)}]

    chain = FilterChain()
    if not chain.configure(entries):
        raise ValueError(f"could not configure filter chain from {config_path or 'defaults'}")
    return chain


def _output_layers(chain: FilterChain) -> List[str]:
    return [f.config.output_layer for f in chain.filters if getattr(f, "config", None)]
# endregion


# region Main
def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Step traversability filter")
    src = parser.add_mutually_exclusive_group(required=True)
    src.add_argument("--input", type=str, help="elevation GeoTIFF")
    src.add_argument("--synthetic", action="store_true", help="use a synthetic curb terrain")
    parser.add_argument("--band", type=int, default=1)
    parser.add_argument("--config", type=str, default=None, help="YAML params or filter chain")
    parser.add_argument("--output", type=str, default=None, help="GeoTIFF for the output layer")
    parser.add_argument("--png", type=str, default=None, help="save a rendering of the layers")
    parser.add_argument("--show", action="store_true", help="open a matplotlib window")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args(argv)

    log = get_logger("step_traversability", logging.DEBUG if args.verbose else logging.INFO)

    try:
        chain = build_chain(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        log.error("%s", e)
        return 1

    if args.synthetic:
        grid = make_step_terrain(noise=0.005, hole_fraction=0.02)
        crs = None
    else:
        import rasterio
        try:
            grid = read_elevation_geotiff(args.input, band=args.band)
            with rasterio.open(args.input) as ds:
                crs = ds.crs
        except (OSError, ValueError) as e:
            # RasterioIOError is an OSError
            log.error("%s: %s", args.input, e)
            return 1
    log.info("Loaded %r", grid)

    out = chain.update(grid)
    layers = _output_layers(chain)
    for name in layers:
        valid = out.valid_mask(name)
        log.info("%s: %d/%d valid cells, %d at 0",
                 name, int(valid.sum()), valid.size, int((out.get(name)[valid] == 0.0).sum()))

    if args.output and layers:
        write_layer_geotiff(out, layers[-1], args.output, crs=crs)
        print(f"Wrote {layers[-1]} to {args.output}")

    if args.png or args.show:
        from step_traversability.viz import show_layers
        show_layers(out, ["elevation"] + layers, out_path=args.png, show=args.show)
        if args.png:
            print(f"Wrote rendering to {args.png}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
# endregion
