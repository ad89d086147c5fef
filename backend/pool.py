from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Type

from backend.base import Backend
from backend.cpu import CpuBackend, PythonBackend
from fractals.mandelbrot import MandelbrotFractal

logger = logging.getLogger(__name__)


# Small descriptor of a backend implementation
@dataclass(frozen=True)
class BackendSpec:
    cls: Type[Backend]
    priority: int


# Default registry
DEFAULT_BACKENDS: Dict[str, BackendSpec] = {
    "CPU":    BackendSpec(cls=CpuBackend,    priority=10),
    "PYTHON": BackendSpec(cls=PythonBackend, priority=0),
}


class BackendPool:
    """
    Creates, caches and compiles backend instances, keyed by backend name.
    """

    def __init__(self, registry: Optional[Dict[str, BackendSpec]] = None,
                 fractal: Optional[MandelbrotFractal] = None) -> None:
        self.registry: Dict[str, BackendSpec] = registry or DEFAULT_BACKENDS
        self.fractal = fractal or MandelbrotFractal()
        self._cache: Dict[str, Backend] = {}

    def default_name(self) -> str:
        return max(self.registry, key=lambda name: self.registry[name].priority)

    def get(self, name: Optional[str] = None) -> Backend:
        key = (name or self.default_name()).upper()
        if key in self._cache:
            return self._cache[key]
        try:
            spec = self.registry[key]
        except KeyError as e:
            raise KeyError(f"Unknown backend '{key}', expected one of {sorted(self.registry)}") from e
        be = spec.cls()
        be.compile(self.fractal)
        logger.debug("Created %s backend", key)
        self._cache[key] = be
        return be

    def close_all(self) -> None:
        for be in list(self._cache.values()):
            be.close()
        self._cache.clear()
