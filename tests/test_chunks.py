import pytest

from rendering.chunks import Chunk, combine_minima, plan_chunks


def covered(chunks):
    out = []
    for c in chunks:
        out.extend(range(c.start_index, c.start_index + c.amount + 1))
    return out


def test_small_frame_is_a_single_chunk():
    chunks = plan_chunks(10_000)
    assert chunks == [Chunk(0, 0, 9_999)]


def test_large_frame_splits_into_chunk_count():
    chunks = plan_chunks(1_000_000, chunk_count=20)
    assert len(chunks) == 20
    assert all(c.length == 50_000 for c in chunks)


def test_minimum_chunk_size_wins_over_count():
    chunks = plan_chunks(100_000, chunk_count=20, min_chunk_pixels=25_000)
    assert [c.length for c in chunks] == [25_000] * 4


@pytest.mark.parametrize("total, count, minimum", [
    (1, 20, 25_000),
    (12, 5, 0),
    (1_200, 7, 0),
    (480_000, 20, 25_000),
    (97, 97, 0),
    (98, 3, 10),
])
def test_chunks_cover_frame_once(total, count, minimum):
    chunks = plan_chunks(total, count, minimum)
    assert covered(chunks) == list(range(total))
    assert len(chunks) <= max(count, 1)
    assert [c.index for c in chunks] == list(range(len(chunks)))


def test_last_chunk_takes_the_remainder():
    chunks = plan_chunks(10, chunk_count=3, min_chunk_pixels=0)
    assert [(c.start_index, c.amount) for c in chunks] == [(0, 3), (4, 3), (8, 1)]
    assert chunks[-1].stop == 10


@pytest.mark.parametrize("total, count, minimum", [(0, 20, 0), (-5, 20, 0), (10, 0, 0), (10, 2, -1)])
def test_invalid_plans_raise(total, count, minimum):
    with pytest.raises(ValueError):
        plan_chunks(total, count, minimum)


def test_combine_minima():
    assert combine_minima([None, 4, 2, None, 9]) == 2
    assert combine_minima([None, None]) is None
    assert combine_minima([]) is None
    assert combine_minima([0]) == 0
