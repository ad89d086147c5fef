from __future__ import annotations
import importlib
from typing import Dict, Any, Iterable, List

from kernel_sources.registry import load_kernel as load_registered
from kernel_sources.registry import resolve_op_order


KERNEL_ROOT = "kernel_sources"

# Both CPU backends run the same sources: PYTHON registers the interpreted py_func.
_SOURCE_DIRS = {"CPU": "cpu", "PYTHON": "cpu"}


def _module_name(backend: str, fractal: str, operation: str = "") -> str:
    try:
        source_dir = _SOURCE_DIRS[backend.upper()]
    except KeyError as e:
        raise KeyError(f"No kernel sources for backend '{backend}'") from e
    name = f"{KERNEL_ROOT}.{source_dir}.{fractal.lower()}"
    return f"{name}.{operation.lower()}" if operation else name


def _import(module: str) -> None:
    try:
        importlib.import_module(module)
    except ModuleNotFoundError as e:
        if e.name is None or not module.startswith(e.name):
            raise
        raise KeyError(f"Kernel module '{module}' not found") from e


def load_op_order(backend: str, fractal: str, targets: Iterable[str]) -> List[str]:
    """
    Import the fractal's kernel package (its import registers the op
    descriptors) and return the ops needed for targets, dependencies first.
    """
    _import(_module_name(backend, fractal))
    return resolve_op_order(fractal, targets)


def load_kernel(backend: str, fractal: str, operation: str) -> Dict[str, Any]:
    """
    Import module by convention (its import registers the kernels) and return
    the registered kernel metadata.
    """
    _import(_module_name(backend, fractal, operation))
    meta = load_registered(backend, fractal, operation)
    _validate_meta(backend, meta, f"registry[{fractal}.{operation}:{backend}]")
    return meta


def _validate_meta(backend: str, meta: Dict[str, Any], where: str) -> None:
    if "arg_order" not in meta or not isinstance(meta["arg_order"], (list, tuple)):
        raise KeyError(f"{where} must provide an 'arg_order' list")
    if "func" not in meta or not callable(meta["func"]):
        raise KeyError(f"{where} must provide a callable 'func' for {backend}")
