from __future__ import annotations

from numbers import Integral, Real
from typing import Any, List

import numpy as np

from fractals.base import RenderArgs

UINT32_MAX = 2 ** 32 - 1


class RenderArgsError(ValueError):
    """Aggregated RenderArgs validation error(s)."""


class DegenerateViewportError(RenderArgsError):
    """The viewport or image has no area to map pixels onto."""


class ChunkBoundsError(IndexError):
    """A chunk range reaches outside the frame."""


class BufferSizeError(ChunkBoundsError):
    """An image or results buffer cannot hold the frame."""


def _is_int(value: Any) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool)


def validate_max_iterations(max_iterations: Any) -> None:
    if not _is_int(max_iterations):
        raise RenderArgsError(
            f"max_iterations must be an integer, got {type(max_iterations).__name__}.")
    if not 0 <= max_iterations <= UINT32_MAX:
        raise RenderArgsError(
            f"max_iterations must be within [0, {UINT32_MAX}], got {max_iterations}.")


def validate_lowest(lowest: Any) -> None:
    if not _is_int(lowest):
        raise RenderArgsError(f"lowest must be an integer, got {lowest!r}.")
    if not 0 <= lowest <= UINT32_MAX:
        raise RenderArgsError(f"lowest must be within [0, {UINT32_MAX}], got {lowest}.")


def validate_render_args(args: RenderArgs) -> None:
    """
    Validates a RenderArgs before any buffer is touched.
    Raises DegenerateViewportError when the frame has no area, RenderArgsError
    for any other problem.
    """
    errors: List[str] = []
    degenerate = False

    # --- image ---
    for name in ("width", "height"):
        value = getattr(args.image, name)
        if not _is_int(value):
            errors.append(f"{name} must be an integer, got {type(value).__name__}.")
        elif value <= 0:
            errors.append(f"{name} must be > 0, got {value}.")
            degenerate = True
        elif value > UINT32_MAX:
            errors.append(f"{name} must be <= {UINT32_MAX}, got {value}.")

    try:
        validate_max_iterations(args.image.max_iterations)
    except RenderArgsError as e:
        errors.append(str(e))

    # --- viewport ---
    start, end = args.viewport.start, args.viewport.end
    coords = (start.real, start.imag, end.real, end.imag)
    if not all(isinstance(c, Real) and np.isfinite(c) for c in coords):
        errors.append(f"viewport corners must be finite numbers, got start={start} end={end}.")
    elif end.real <= start.real:
        errors.append(f"end.real ({end.real}) must be greater than start.real ({start.real}).")
        degenerate = True

    if errors:
        cls = DegenerateViewportError if degenerate else RenderArgsError
        raise cls("RenderArgs validation failed:\n- " + "\n- ".join(errors))


def validate_chunk(args: RenderArgs, start_index: Any, amount: Any) -> None:
    """
    Checks that the inclusive range [start_index, start_index + amount] lies
    inside the frame.
    """
    if not _is_int(start_index) or not _is_int(amount):
        raise ChunkBoundsError(
            f"start_index and amount must be integers, got "
            f"{type(start_index).__name__} and {type(amount).__name__}.")
    if start_index < 0 or amount < 0:
        raise ChunkBoundsError(
            f"start_index ({start_index}) and amount ({amount}) must be >= 0.")
    last = start_index + amount
    if last >= args.pixel_count:
        raise ChunkBoundsError(
            f"chunk [{start_index}, {last}] exceeds the frame of "
            f"{args.pixel_count} pixels ({args.width} x {args.height}).")


def as_buffer_view(buffer: Any, dtype: Any, min_length: int, name: str,
                   *, writable: bool = True) -> np.ndarray:
    """
    View a caller-owned buffer as a flat numpy array without copying it.
    Accepts numpy arrays and anything exposing the buffer protocol
    (bytearray, array.array, memoryview).
    """
    np_dt = np.dtype(dtype)
    if isinstance(buffer, np.ndarray):
        view = buffer
    else:
        try:
            view = np.frombuffer(buffer, dtype=np_dt)
        except (TypeError, ValueError) as e:
            raise BufferSizeError(f"{name}: cannot view buffer as {np_dt}: {e}") from e

    if view.dtype != np_dt:
        raise BufferSizeError(f"{name}: expected dtype {np_dt}, got {view.dtype}.")
    if not view.flags.c_contiguous:
        raise BufferSizeError(f"{name}: buffer must be C-contiguous.")
    if writable and not view.flags.writeable:
        raise BufferSizeError(f"{name}: buffer is read-only.")

    view = view.reshape(-1)
    if view.size < min_length:
        raise BufferSizeError(
            f"{name}: buffer holds {view.size} items, frame needs {min_length}.")
    return view
