from numba import njit

from kernel_sources.cpu.common.color import draw_pixel
from kernel_sources.cpu.common.coords import index_to_pixel
from kernel_sources.registry import register_kernel

ARG_SCALARS = [
    "start_real", "start_imag", "end_real", "end_imag",
    "width", "height", "max_iter",
    "start_index", "amount", "lowest",
]
ARG_BUFFERS_IN = ["results"]
ARG_BUFFERS_OUT = ["image"]

ARG_ORDER = ARG_BUFFERS_OUT + ARG_BUFFERS_IN + ARG_SCALARS


@njit(cache=True, nogil=True)
def _render_pass2(image, results,
                  start_real, start_imag, end_real, end_imag,
                  width, height, max_iter,
                  start_index, amount, lowest):
    if lowest <= 0:
        return
    for count in range(amount + 1):
        index = start_index + count
        current = results[index]
        if current <= 0:
            continue
        # counts below lowest clamp to the bottom of the ramp
        normalized = max(current - lowest + 1, 0)
        x, y = index_to_pixel(index, width)
        draw_pixel(image, ((width * y) + x) * 4, normalized, max_iter)


register_kernel(
    fractal="mandelbrot",
    op_name="normalize",
    backend="CPU",
    func=_render_pass2,
    arg_order=ARG_ORDER,
)

register_kernel(
    fractal="mandelbrot",
    op_name="normalize",
    backend="PYTHON",
    func=_render_pass2.py_func,
    arg_order=ARG_ORDER,
)
