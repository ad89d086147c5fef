from numba import njit


@njit(cache=True, nogil=True)
def index_to_pixel(index, width):
    return index % width, index // width


@njit(cache=True, nogil=True)
def pixel_to_complex(x, y, start_real, start_imag, end_real, end_imag,
                     width, height):
    real = start_real + (x / width) * (end_real - start_real)
    # image rows grow downward, the imaginary axis grows upward
    imag = end_imag + (y / height) * (start_imag - end_imag)
    return real, imag
