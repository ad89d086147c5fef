from numba import njit

from kernel_sources.registry import register_kernel

ARG_SCALARS = ["real", "imag", "max_iter"]

ARG_ORDER = ARG_SCALARS

BAILOUT = 4.0


@njit(cache=True, nogil=True)
def escape_count(real, imag, max_iter):
    """
    Iterate z -> z*z + c from z = 0 and return the iteration at which |z|^2
    left the bailout radius, or -1 if it never did within max_iter.
    """
    x = 0.0
    y = 0.0
    x2 = 0.0
    y2 = 0.0
    n = 0

    while x2 + y2 <= BAILOUT and n < max_iter:
        y = (x + x) * y + imag
        x = x2 - y2 + real
        x2 = x * x
        y2 = y * y
        n += 1

    if n >= max_iter:
        return -1
    return n


register_kernel(
    fractal="mandelbrot",
    op_name="escape",
    backend="CPU",
    func=escape_count,
    arg_order=ARG_ORDER,
)

register_kernel(
    fractal="mandelbrot",
    op_name="escape",
    backend="PYTHON",
    func=escape_count.py_func,
    arg_order=ARG_ORDER,
)
