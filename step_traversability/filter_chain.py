# filter_chain.py
# region Imports
from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Type
# endregion

logger = logging.getLogger(__name__)


# region Filter Base
class FilterBase:
    """A raster filter: configure once from a parameter mapping, then update rasters."""

    type_name: str = ""

    def __init__(self, name: str = ""):
        self.name = name or self.type_name

    def configure(self, params: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def update(self, grid):
        raise NotImplementedError
# endregion


# region Registry
_REGISTRY: Dict[str, Type[FilterBase]] = {}


def register_filter(type_name: str) -> Callable[[Type[FilterBase]], Type[FilterBase]]:
    def deco(cls: Type[FilterBase]) -> Type[FilterBase]:
        if type_name in _REGISTRY and _REGISTRY[type_name] is not cls:
            raise ValueError(f"filter type '{type_name}' already registered")
        cls.type_name = type_name
        _REGISTRY[type_name] = cls
        return cls
    return deco


def available_filters() -> List[str]:
    return sorted(_REGISTRY)


def create_filter(type_name: str, name: str = "") -> FilterBase:
    try:
        cls = _REGISTRY[type_name]
    except KeyError:
        raise KeyError(
            f"unknown filter type '{type_name}' (known: {', '.join(available_filters())})"
        ) from None
    return cls(name) if name else cls()
# endregion


# region Chain
class FilterChain:
    """
    Ordered filters built from config entries of the form
      {"name": "step", "type": "StepFilter", "params": {...}}
    Each filter's output raster is the next one's input.
    """

    def __init__(self):
        self.filters: List[FilterBase] = []

    def configure(self, entries: Sequence[Mapping[str, Any]]) -> bool:
        if not entries:
            logger.error("Filter chain has no entries")
            return False
        built: List[FilterBase] = []
        for i, entry in enumerate(entries):
            if not isinstance(entry, Mapping):
                logger.error("Filter chain entry %d is not a mapping: %r", i, entry)
                return False
            ftype = entry.get("type")
            name = entry.get("name") or f"filter_{i}"
            try:
                f = create_filter(ftype, name)
            except KeyError as e:
                logger.error("Filter chain entry %d: %s", i, e.args[0])
                return False
            if not f.configure(entry.get("params") or {}):
                logger.error("Filter chain entry %d ('%s') failed to configure", i, name)
                return False
            built.append(f)

        self.filters = built
        logger.info("Configured filter chain: %s", [f.name for f in built])
        return True

    def update(self, grid):
        if not self.filters:
            raise RuntimeError("filter chain is empty or not configured")
        out = grid
        for f in self.filters:
            out = f.update(out)
        return out

    def get(self, name: str) -> Optional[FilterBase]:
        for f in self.filters:
            if f.name == name:
                return f
        return None
# endregion
