import numpy as np
import pytest

from fractals.base import Complex, RenderArgs


@pytest.fixture
def full_args():
    return RenderArgs.from_corners(Complex(-2.0, 1.5), Complex(1.0, -1.5), 100, 100, 100)


@pytest.fixture
def small_args():
    return RenderArgs.from_corners((-2.0, 1.5), (1.0, -1.5), 4, 3, 50)


@pytest.fixture
def make_buffers():
    def make(args, fill_image=0, fill_results=0):
        image = np.full(args.pixel_count * 4, fill_image, dtype=np.uint8)
        results = np.full(args.pixel_count, fill_results, dtype=np.int32)
        return image, results
    return make
