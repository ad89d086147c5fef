import math
from typing import Tuple

from fractals.base import Complex, Pixel, RenderArgs
from fractals.validation import DegenerateViewportError
from kernel_sources.cpu.common import coords as _kernel_coords


def index_to_pixel(index: int, width: int) -> Pixel:
    x, y = _kernel_coords.index_to_pixel(int(index), int(width))
    return Pixel(int(x), int(y))


def pixel_to_complex(pixel: Pixel, args: RenderArgs) -> Complex:
    """
    Map a pixel onto the viewport. Row 0 maps to end.imag and column 0 to
    start.real; the same compiled mapping the chunk kernels use.
    """
    real, imag = _kernel_coords.pixel_to_complex(
        int(pixel.x), int(pixel.y),
        float(args.start.real), float(args.start.imag),
        float(args.end.real), float(args.end.imag),
        int(args.width), int(args.height))
    return Complex(float(real), float(imag))


def complex_to_pixel(point: Complex, args: RenderArgs) -> Pixel:
    """
    Inverse of pixel_to_complex: the pixel whose cell contains point.
    Raises DegenerateViewportError for a viewport with no real or imaginary
    extent, where every row (or column) maps onto the same value.
    """
    span_real = args.end.real - args.start.real
    span_imag = args.start.imag - args.end.imag
    if span_real == 0 or span_imag == 0:
        raise DegenerateViewportError(
            f"cannot map {point} onto the flat viewport {args.start} .. {args.end}.")
    fx = (point.real - args.start.real) / span_real
    fy = (point.imag - args.end.imag) / span_imag
    return Pixel(math.floor(fx * args.width), math.floor(fy * args.height))


def aspect_ratios(args: RenderArgs) -> Tuple[float, float]:
    """
    Returns (area_ratio, canvas_ratio), both x / y. A viewport with no
    imaginary extent gives an infinite or NaN area ratio.
    """
    span_imag = args.end.imag - args.start.imag
    span_real = args.end.real - args.start.real
    if span_imag == 0:
        area_ratio = math.copysign(math.inf, span_real) if span_real else math.nan
    else:
        area_ratio = span_real / span_imag
    canvas_ratio = args.width / args.height if args.height else math.nan
    return area_ratio, canvas_ratio
