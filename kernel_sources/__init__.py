# Kernel sources package
from .loader import load_kernel, load_op_order
from .registry import (register_kernel, register_op_descriptor,
                       get_op_descriptor, resolve_op_order)

__all__ = [
    "load_kernel",
    "load_op_order",
    "register_kernel",
    "register_op_descriptor",
    "get_op_descriptor",
    "resolve_op_order",
]
