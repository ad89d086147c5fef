from numba import njit

from kernel_sources.cpu.common.color import draw_pixel
from kernel_sources.cpu.common.coords import index_to_pixel, pixel_to_complex
from kernel_sources.cpu.mandelbrot.escape import escape_count
from kernel_sources.registry import register_kernel


ARG_SCALARS = [
    "start_real", "start_imag", "end_real", "end_imag",
    "width", "height", "max_iter",
    "start_index", "amount",
]
ARG_BUFFERS_OUT = ["image", "results"]

ARG_ORDER = ARG_BUFFERS_OUT + ARG_SCALARS


@njit(cache=True, nogil=True)
def _render_pass1(image, results,
                  start_real, start_imag, end_real, end_imag,
                  width, height, max_iter,
                  start_index, amount):
    # the range is inclusive: amount + 1 pixels
    lowest = -1
    for count in range(amount + 1):
        index = start_index + count
        x, y = index_to_pixel(index, width)
        real, imag = pixel_to_complex(x, y, start_real, start_imag,
                                      end_real, end_imag, width, height)

        n = escape_count(real, imag, max_iter)
        results[index] = n
        if n >= 0 and (lowest < 0 or n < lowest):
            lowest = n

        draw_pixel(image, ((width * y) + x) * 4, n, max_iter)
    return lowest


register_kernel(
    fractal="mandelbrot",
    op_name="iter",
    backend="CPU",
    func=_render_pass1,
    arg_order=ARG_ORDER,
)

register_kernel(
    fractal="mandelbrot",
    op_name="iter",
    backend="PYTHON",
    func=_render_pass1.py_func,
    arg_order=ARG_ORDER,
)
