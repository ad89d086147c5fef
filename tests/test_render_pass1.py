from array import array

import numpy as np
import pytest

from api.render_api import evaluate, render_chunk_pass1, render_pass1
from coloring.transfer import rgba_for
from fractals.base import RenderArgs
from utils.coords import index_to_pixel, pixel_to_complex
from utils.enums import BackendType


def test_full_frame_scenario(full_args, make_buffers):
    image, results = make_buffers(full_args)
    lowest = render_pass1(image, results, (-2.0, 1.5), (1.0, -1.5), 100, 100, 100, 0, 9999)

    assert lowest is not None and lowest >= 1
    assert lowest == results[results >= 0].min()
    center = results.reshape(100, 100)[45:56, 45:56]
    assert (center == -1).any()


def test_every_pixel_is_drawn_from_its_result(full_args, make_buffers):
    image, results = make_buffers(full_args)
    render_chunk_pass1(image, results, full_args, 0, full_args.pixel_count - 1)

    rgba = image.reshape(-1, 4)
    for index in range(0, full_args.pixel_count, 7):
        n = int(results[index])
        assert tuple(rgba[index]) == rgba_for(None if n < 0 else n, full_args.max_iterations)
    assert (rgba[:, 3] == 255).all()


def test_results_match_single_point_evaluation(full_args, make_buffers):
    image, results = make_buffers(full_args)
    render_chunk_pass1(image, results, full_args, 0, full_args.pixel_count - 1)

    for index in (0, 99, 100, 4321, 5050, 9999):
        point = pixel_to_complex(index_to_pixel(index, full_args.width), full_args)
        n = evaluate(point.real, point.imag, full_args.max_iterations)
        assert results[index] == (-1 if n is None else n)


def test_pass1_is_idempotent(full_args, make_buffers):
    first = make_buffers(full_args)
    second = make_buffers(full_args)
    low_a = render_chunk_pass1(*first, full_args, 0, 9999)
    low_b = render_chunk_pass1(*second, full_args, 0, 9999)
    assert low_a == low_b
    assert np.array_equal(first[0], second[0])
    assert np.array_equal(first[1], second[1])


def test_range_is_inclusive_of_amount(small_args, make_buffers):
    image, results = make_buffers(small_args, fill_image=7, fill_results=12345)
    render_chunk_pass1(image, results, small_args, 3, 2)

    written = np.flatnonzero(results != 12345)
    assert written.tolist() == [3, 4, 5]
    touched = np.flatnonzero(image != 7)
    assert touched.min() >= 3 * 4 and touched.max() < 6 * 4


def test_zero_amount_draws_one_pixel(small_args, make_buffers):
    image, results = make_buffers(small_args, fill_image=7, fill_results=12345)
    render_chunk_pass1(image, results, small_args, 5, 0)
    assert np.flatnonzero(results != 12345).tolist() == [5]
    rgba = image.reshape(-1, 4)
    assert rgba[5, 3] == 255
    assert (np.delete(rgba, 5, axis=0) == 7).all()


def test_adjacent_chunks_neither_overlap_nor_skip(small_args, make_buffers):
    whole = make_buffers(small_args)
    render_chunk_pass1(*whole, small_args, 0, 11)

    split = make_buffers(small_args, fill_results=12345)
    low_a = render_chunk_pass1(*split, small_args, 0, 5)
    low_b = render_chunk_pass1(*split, small_args, 6, 5)

    assert (split[1] != 12345).all()
    assert np.array_equal(whole[0], split[0])
    assert np.array_equal(whole[1], split[1])
    assert min(x for x in (low_a, low_b) if x is not None) == \
        render_chunk_pass1(*make_buffers(small_args), small_args, 0, 11)


def test_row_stride_uses_frame_width(make_buffers):
    args = RenderArgs.from_corners((-2.0, 1.5), (1.0, -1.5), 7, 5, 30)
    image, results = make_buffers(args, fill_image=7)
    # a chunk crossing a row boundary
    render_chunk_pass1(image, results, args, 5, 4)
    rgba = image.reshape(5, 7, 4)
    assert (rgba[0, 5:, 3] == 255).all()
    assert (rgba[1, :3, 3] == 255).all()
    assert (rgba[1, 3:, :] == 7).all()
    assert (rgba[0, :5, :] == 7).all()


def test_zero_cap_renders_everything_as_member(small_args, make_buffers):
    args = RenderArgs.from_corners(small_args.start, small_args.end, 4, 3, 0)
    image, results = make_buffers(args)
    assert render_chunk_pass1(image, results, args, 0, 11) is None
    assert (results == -1).all()
    assert (image == 255).all()


def test_python_buffers_are_written_in_place(small_args, make_buffers):
    image = bytearray(small_args.pixel_count * 4)
    results = array("i", [0] * small_args.pixel_count)
    lowest = render_chunk_pass1(image, results, small_args, 0, 11)

    expected_image, expected_results = make_buffers(small_args)
    assert render_chunk_pass1(expected_image, expected_results, small_args, 0, 11) == lowest
    assert bytes(image) == expected_image.tobytes()
    assert list(results) == expected_results.tolist()


def test_image_may_be_shaped(small_args):
    image = np.zeros((small_args.height, small_args.width, 4), dtype=np.uint8)
    results = np.zeros((small_args.height, small_args.width), dtype=np.int32)
    render_chunk_pass1(image, results, small_args, 0, 11)
    assert (image[..., 3] == 255).all()


@pytest.mark.parametrize("backend", [BackendType.CPU, BackendType.PYTHON])
def test_backends_agree(full_args, make_buffers, backend):
    reference = make_buffers(full_args)
    low_ref = render_chunk_pass1(*reference, full_args, 0, 9999)
    candidate = make_buffers(full_args)
    low = render_chunk_pass1(*candidate, full_args, 0, 9999, backend=backend)
    assert low == low_ref
    assert np.array_equal(reference[0], candidate[0])
    assert np.array_equal(reference[1], candidate[1])
