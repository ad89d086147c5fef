from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional


@dataclass(frozen=True)
class Chunk:
    """
    A contiguous range of pixel indices, inclusive on both ends:
    [start_index, start_index + amount].
    """
    index: int
    start_index: int
    amount: int

    @property
    def length(self) -> int:
        return self.amount + 1

    @property
    def stop(self) -> int:
        """One past the last index of the chunk."""
        return self.start_index + self.length


def plan_chunks(total: int, chunk_count: int = 20,
                min_chunk_pixels: int = 25000) -> List[Chunk]:
    """
    Split [0, total) into disjoint chunks that cover every index once.
    Each chunk holds max(ceil(total / chunk_count), min_chunk_pixels) pixels
    (the last one takes the remainder), so small frames end up in fewer,
    larger chunks.
    """
    if total <= 0:
        raise ValueError(f"total must be > 0, got {total}.")
    if chunk_count <= 0:
        raise ValueError(f"chunk_count must be > 0, got {chunk_count}.")
    if min_chunk_pixels < 0:
        raise ValueError(f"min_chunk_pixels must be >= 0, got {min_chunk_pixels}.")

    per_chunk = max(math.ceil(total / chunk_count), min_chunk_pixels, 1)
    per_chunk = min(per_chunk, total)

    chunks: List[Chunk] = []
    for index, start in enumerate(range(0, total, per_chunk)):
        length = min(per_chunk, total - start)
        # amount counts the pixels after the first one
        chunks.append(Chunk(index, start, length - 1))
    return chunks


def combine_minima(minima: Iterable[Optional[int]]) -> Optional[int]:
    """Smallest escape count over chunks; None if no chunk had one."""
    found = [m for m in minima if m is not None]
    return min(found) if found else None
