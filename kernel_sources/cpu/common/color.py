import math

from numba import njit

OPAQUE = 255


@njit(cache=True, nogil=True)
def intensity(iterations, max_iter):
    """
    8-bit log-scaled intensity of an escape count.
    Degenerate inputs follow the float semantics of the formula:
    log2(0) is -inf and log2(1) is 0.
    """
    if iterations <= 0 or max_iter == 0:
        return 0
    if max_iter == 1:
        return 255
    value = math.log2(iterations * 1.2) / math.log2(max_iter) * 255.0
    if value < 0.0:
        return 0
    if value > 255.0:
        return 255
    return int(value)


@njit(cache=True, nogil=True)
def transfer_color(iterations, max_iter):
    # negative iterations mark set members
    if iterations < 0:
        return 255, 255, 255
    t = intensity(iterations, max_iter)
    return t // 2, 0, t // 3


@njit(cache=True, nogil=True)
def draw_pixel(image, offset, iterations, max_iter):
    r, g, b = transfer_color(iterations, max_iter)
    image[offset] = r
    image[offset + 1] = g
    image[offset + 2] = b
    image[offset + 3] = OPAQUE
