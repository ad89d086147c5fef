from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, List, Optional, Sequence, TypeVar

from rendering.chunks import Chunk

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ChunkExecutor:
    """
    Dispatches one call per chunk onto a thread pool.

    Chunks own disjoint index ranges, so calls writing into shared frame
    buffers need no locking. Results are reported in completion order through
    on_result, always from the calling thread.
    """

    def __init__(
        self,
        *,
        workers: Optional[int] = None,
        telemetry: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.workers = workers
        self.log = telemetry or (lambda *_: None)

    def run(
        self,
        fn: Callable[[Chunk], T],
        chunks: Sequence[Chunk],
        on_result: Optional[Callable[[Chunk, T], None]] = None,
        label: str = "chunks",
    ) -> List[T]:
        """
        Call fn(chunk) for every chunk. Returns the results in chunk order.
        The first exception raised by a chunk propagates once every submitted
        call has finished.
        """
        if not chunks:
            return []

        results: List[Optional[T]] = [None] * len(chunks)
        max_workers = self.workers or min(len(chunks), 32)
        t0 = time.perf_counter()

        with ThreadPoolExecutor(max_workers=max_workers) as ex:
            futs = {ex.submit(fn, chunk): pos for pos, chunk in enumerate(chunks)}
            for fut in as_completed(futs):
                pos = futs[fut]
                res = fut.result()
                results[pos] = res
                if on_result is not None:
                    on_result(chunks[pos], res)

        elapsed = (time.perf_counter() - t0) * 1000.0
        logger.debug("%s: %d calls on %d workers in %.2f ms", label,
                     len(chunks), max_workers, elapsed)
        self.log(f"[ChunkExecutor] {label}: {len(chunks)} chunks in {elapsed:.2f} ms")
        return results
