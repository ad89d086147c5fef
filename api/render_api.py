import logging
from typing import Any, Optional

import numpy as np

from backend.base import Backend
from backend.pool import BackendPool
from fractals.base import ComplexLike, RenderArgs
from fractals.validation import (as_buffer_view, validate_chunk, validate_lowest,
                                 validate_max_iterations, validate_render_args)
from utils.enums import BackendType

logger = logging.getLogger(__name__)

_pool = BackendPool()


def get_backend(backend: Optional[BackendType] = None) -> Backend:
    """
    Shared backend instance for the given type (CPU when omitted).
    """
    return _pool.get(backend.name if backend is not None else None)


def _chunk_views(image: Any, results: Any, args: RenderArgs, start_index: int,
                 amount: int, *, results_writable: bool):
    validate_render_args(args)
    validate_chunk(args, start_index, amount)
    image_view = as_buffer_view(image, np.uint8, args.pixel_count * 4, "image")
    results_view = as_buffer_view(results, np.int32, args.pixel_count, "results",
                                  writable=results_writable)
    return image_view, results_view


# ---------- Single point ------------------------------------

def evaluate(real: float, imag: float, max_iterations: int,
             *, backend: Optional[BackendType] = None) -> Optional[int]:
    """
    Escape-time test for one point of the complex plane.

    Args:
        real (float): Real part of c.
        imag (float): Imaginary part of c.
        max_iterations (int): Iteration cap, 0 reports every point as a member.

    Returns:
        The iteration at which the orbit escaped, or None for a set member.
    """
    validate_max_iterations(max_iterations)
    return get_backend(backend).evaluate(real, imag, max_iterations)


check_in_mandelbrot = evaluate


# ---------- Chunks ------------------------------------------

def render_chunk_pass1(image: Any, results: Any, args: RenderArgs,
                       start_index: int, amount: int,
                       *, backend: Optional[BackendType] = None) -> Optional[int]:
    """
    First pass over the inclusive pixel range [start_index, start_index + amount].
    Writes the raw escape count (-1 for members) of every pixel into results and
    its provisional color into image.

    Args:
        image: RGBA byte buffer of the whole frame.
        results: int32 buffer of the whole frame.
        args (RenderArgs): Frame description.
        start_index (int): First pixel index of the chunk.
        amount (int): Number of pixels after the first one.

    Returns:
        The lowest escape count in the chunk, or None if no pixel escaped.
    """
    image_view, results_view = _chunk_views(image, results, args, start_index,
                                            amount, results_writable=True)
    lowest = get_backend(backend).render_pass1(image_view, results_view, args,
                                               start_index, amount)
    logger.debug("pass 1 chunk [%d, %d] lowest=%s", start_index,
                 start_index + amount, lowest)
    return lowest


def render_chunk_pass2(image: Any, results: Any, args: RenderArgs,
                       start_index: int, amount: int, lowest: int,
                       *, backend: Optional[BackendType] = None) -> None:
    """
    Second pass over the same range. Every pixel whose raw count is > 0 is
    redrawn with count - lowest + 1; members and untouched pixels keep their
    first-pass color. A lowest of 0 leaves the chunk unchanged.
    """
    validate_lowest(lowest)
    image_view, results_view = _chunk_views(image, results, args, start_index,
                                            amount, results_writable=False)
    get_backend(backend).render_pass2(image_view, results_view, args,
                                      start_index, amount, int(lowest))
    logger.debug("pass 2 chunk [%d, %d] lowest=%d", start_index,
                 start_index + amount, lowest)


def render_pass1(image: Any, results: Any, start: ComplexLike, end: ComplexLike,
                 width: int, height: int, max_iterations: int,
                 start_index: int, amount: int,
                 *, backend: Optional[BackendType] = None) -> Optional[int]:
    args = RenderArgs.from_corners(start, end, width, height, max_iterations)
    return render_chunk_pass1(image, results, args, start_index, amount,
                              backend=backend)


def render_pass2(image: Any, results: Any, start: ComplexLike, end: ComplexLike,
                 width: int, height: int, max_iterations: int,
                 start_index: int, amount: int, lowest: int,
                 *, backend: Optional[BackendType] = None) -> None:
    args = RenderArgs.from_corners(start, end, width, height, max_iterations)
    render_chunk_pass2(image, results, args, start_index, amount, lowest,
                       backend=backend)
