import numpy as np
import pytest

from api.render_api import render_chunk_pass1, render_pass1
from fractals.base import RenderArgs
from fractals.validation import (BufferSizeError, ChunkBoundsError,
                                 DegenerateViewportError, RenderArgsError,
                                 as_buffer_view)


@pytest.mark.parametrize("width, height", [(0, 10), (10, 0), (0, 0)])
def test_empty_frame_is_rejected_before_writes(width, height):
    image = np.full(400, 7, dtype=np.uint8)
    results = np.full(100, 7, dtype=np.int32)
    with pytest.raises(DegenerateViewportError):
        render_pass1(image, results, (-2.0, 1.5), (1.0, -1.5), width, height, 10, 0, 0)
    assert (image == 7).all() and (results == 7).all()


def test_reversed_real_axis_is_degenerate(make_buffers):
    args = RenderArgs.from_corners((1.0, 1.5), (-2.0, -1.5), 4, 3, 10)
    with pytest.raises(DegenerateViewportError):
        render_chunk_pass1(*make_buffers(args), args, 0, 11)


def test_errors_are_aggregated():
    args = RenderArgs.from_corners((-2.0, 1.5), (1.0, -1.5), 2.5, 3, -4)
    with pytest.raises(RenderArgsError) as info:
        render_chunk_pass1(np.zeros(100, np.uint8), np.zeros(100, np.int32), args, 0, 0)
    message = str(info.value)
    assert "width must be an integer" in message
    assert "max_iterations" in message
    assert not isinstance(info.value, DegenerateViewportError)


@pytest.mark.parametrize("start_index, amount", [(0, 12), (11, 1), (-1, 2), (3, -1), (12, 0)])
def test_chunk_outside_frame_is_rejected(small_args, make_buffers, start_index, amount):
    image, results = make_buffers(small_args, fill_image=7, fill_results=7)
    with pytest.raises(ChunkBoundsError):
        render_chunk_pass1(image, results, small_args, start_index, amount)
    assert (image == 7).all() and (results == 7).all()


def test_last_index_is_allowed(small_args, make_buffers):
    image, results = make_buffers(small_args, fill_results=12345)
    render_chunk_pass1(image, results, small_args, 11, 0)
    assert results[11] != 12345


def test_short_buffers_are_rejected(small_args):
    with pytest.raises(BufferSizeError):
        render_chunk_pass1(np.zeros(47, np.uint8), np.zeros(12, np.int32), small_args, 0, 0)
    with pytest.raises(BufferSizeError):
        render_chunk_pass1(np.zeros(48, np.uint8), np.zeros(11, np.int32), small_args, 0, 0)


def test_buffer_errors_are_index_errors():
    assert issubclass(BufferSizeError, IndexError)
    assert issubclass(DegenerateViewportError, ValueError)


def test_wrong_dtype_is_rejected(small_args):
    with pytest.raises(BufferSizeError):
        render_chunk_pass1(np.zeros(48, np.uint8), np.zeros(12, np.int64), small_args, 0, 0)


def test_read_only_image_is_rejected(small_args):
    image = np.zeros(48, np.uint8)
    image.setflags(write=False)
    with pytest.raises(BufferSizeError):
        render_chunk_pass1(image, np.zeros(12, np.int32), small_args, 0, 0)
    with pytest.raises(BufferSizeError):
        render_chunk_pass1(bytes(48), np.zeros(12, np.int32), small_args, 0, 0)


def test_buffer_view_shares_memory():
    raw = bytearray(16)
    view = as_buffer_view(raw, np.uint8, 16, "image")
    view[3] = 200
    assert raw[3] == 200


def test_non_contiguous_buffer_is_rejected():
    with pytest.raises(BufferSizeError):
        as_buffer_view(np.zeros(32, np.uint8)[::2], np.uint8, 4, "image")
