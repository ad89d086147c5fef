from __future__ import annotations
from typing import Dict, Any, Iterable, List, Set

# Nested dict: [fractal][op_name][backend] -> meta
_REGISTRY: Dict[str, Dict[str, Dict[str, Dict[str, Any]]]] = {}

# Static op descriptors (backend-agnostic)
_OP_DESCRIPTORS: Dict[str, Dict[str, Dict[str, Any]]] = {}
# shape: [fractal][op_name] -> {"depends_on": ["escape"]}


def register_kernel(fractal: str, op_name: str, backend: str, **meta: Any) -> None:
    """
    Register kernel metadata for a given fractal, operation and backend.
    Example:
        register_kernel("mandelbrot", "iter", "CPU", func=_render_pass1, arg_order=[...])
    """
    _REGISTRY.setdefault(fractal, {}).setdefault(op_name, {})[backend.upper()] = meta


def register_op_descriptor(fractal: str, op_name: str, **descriptor: Any) -> None:
    """
    Register static operation descriptor for a given fractal and operation.
    Example:
        register_op_descriptor("mandelbrot", "iter", depends_on=["escape"])
    """
    _OP_DESCRIPTORS.setdefault(fractal, {})[op_name] = descriptor


def load_kernel(backend: str, fractal: str, op_name: str) -> Dict[str, Any]:
    """
    Load kernel metadata from the registry for the given parameters.
    Raises KeyError if not found.
    """
    be = backend.upper()
    try:
        meta = _REGISTRY[fractal][op_name][be]
    except KeyError as e:
        raise KeyError(f"Kernel not found for fractal='{fractal}', op='{op_name}', backend='{be}'") from e
    return meta


def get_op_descriptor(fractal: str, op_name: str) -> Dict[str, Any]:
    """
    Get the static operation descriptor for the given fractal and operation.
    Raises KeyError if not found.
    """
    try:
        descriptor = _OP_DESCRIPTORS[fractal][op_name]
    except KeyError as e:
        raise KeyError(f"Operation descriptor not found for fractal='{fractal}', op='{op_name}'") from e
    return descriptor


def resolve_op_order(fractal: str, targets: Iterable[str]) -> List[str]:
    """
    Expand the target ops with everything they depend on, dependencies first.
    Raises KeyError for an unknown op and ValueError for a dependency cycle.
    """
    order: List[str] = []
    visiting: Set[str] = set()

    def visit(op_name: str) -> None:
        if op_name in order:
            return
        if op_name in visiting:
            raise ValueError(f"Dependency cycle through '{op_name}' for fractal='{fractal}'")
        visiting.add(op_name)
        for dep in get_op_descriptor(fractal, op_name).get("depends_on", []):
            visit(dep)
        visiting.discard(op_name)
        order.append(op_name)

    for op_name in targets:
        visit(op_name)
    return order
