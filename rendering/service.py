from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from backend.base import Backend
from backend.pool import BackendPool
from fractals.base import RenderArgs, RenderSettings
from fractals.validation import as_buffer_view, validate_render_args
from rendering.chunks import Chunk, combine_minima, plan_chunks
from rendering.events import ChunkEvent, FrameEvent, LogEvent
from rendering.executor import ChunkExecutor
from utils.enums import NormalizationMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderResult:
    image: np.ndarray               # flat RGBA bytes, 4 per pixel
    results: np.ndarray             # flat int32 escape counts, -1 for members
    lowest: Optional[int]           # minimum over all chunks
    chunk_minima: List[Optional[int]]
    elapsed: float                  # seconds
    width: int
    height: int

    def rgba(self) -> np.ndarray:
        return self.image.reshape(self.height, self.width, 4)

    def iterations(self) -> np.ndarray:
        return self.results.reshape(self.height, self.width)


class RenderService:
    """
    Caller-side facade that owns:
      - chunk planning for a frame,
      - concurrent dispatch of both passes,
      - aggregation of the per-chunk minima,
      - event dispatch (chunk/frame/log).

    The compute itself happens in a backend; the service only decides which
    chunk runs where and with which minimum.
    """

    def __init__(
        self,
        settings: Optional[RenderSettings] = None,
        *,
        pool: Optional[BackendPool] = None,
        executor: Optional[ChunkExecutor] = None,
        telemetry: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.settings = settings or RenderSettings()
        self.pool = pool or BackendPool()
        self.executor = executor or ChunkExecutor(workers=self.settings.workers,
                                                  telemetry=telemetry)
        self._render_seq = 0

        # Callbacks
        self.on_chunk: Optional[Callable[[ChunkEvent], None]] = None
        self.on_frame: Optional[Callable[[FrameEvent], None]] = None
        self.on_log: Optional[Callable[[LogEvent], None]] = None

    # ---------------------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------------------

    def _log(self, level: int, message: str) -> None:
        logger.log(level, message)
        cb = self.on_log
        if callable(cb):
            cb(LogEvent(message, level))

    def _emit_chunk(self, event: ChunkEvent) -> None:
        cb = self.on_chunk
        if callable(cb):
            cb(event)

    def backend(self) -> Backend:
        be = self.pool.get(self.settings.backend.name)
        if self.settings.warmup and hasattr(be, "warmup"):
            be.warmup()
        return be

    def plan(self, args: RenderArgs) -> List[Chunk]:
        return plan_chunks(args.pixel_count, self.settings.chunk_count,
                           self.settings.min_chunk_pixels)

    # ---------------------------------------------------------------------
    # Rendering
    # ---------------------------------------------------------------------

    def render(self, args: RenderArgs, image: Any = None,
               results: Any = None) -> RenderResult:
        """
        Render a full frame in two passes.

        Args:
            args (RenderArgs): Frame description.
            image: Optional caller-owned RGBA buffer; allocated when omitted.
            results: Optional caller-owned int32 buffer; allocated when omitted.

        Returns:
            RenderResult holding views of the frame buffers.
        """
        try:
            return self._render(args, image, results)
        except Exception:
            logger.exception("render failed for %s", args)
            raise

    def _render(self, args: RenderArgs, image: Any, results: Any) -> RenderResult:
        validate_render_args(args)
        total = args.pixel_count
        if image is None:
            image = np.zeros(total * 4, dtype=np.uint8)
        if results is None:
            results = np.zeros(total, dtype=np.int32)
        image = as_buffer_view(image, np.uint8, total * 4, "image")
        results = as_buffer_view(results, np.int32, total, "results")

        self._render_seq += 1
        seq = self._render_seq
        be = self.backend()
        chunks = self.plan(args)
        mode = self.settings.normalization
        t0 = time.perf_counter()
        self._log(logging.INFO,
                  f"render #{seq}: {args} in {len(chunks)} chunks on {be.name}")

        # ----- Pass 1 -----
        done = {"count": 0}

        def first(chunk: Chunk) -> Optional[int]:
            return be.render_pass1(image, results, args, chunk.start_index, chunk.amount)

        def first_done(chunk: Chunk, low: Optional[int]) -> None:
            done["count"] += 1
            self._emit_chunk(ChunkEvent(chunk, 1, low, done["count"], len(chunks), seq))

        minima = self.executor.run(first, chunks, first_done, label="pass 1")
        lowest = combine_minima(minima)
        self._log(logging.INFO, f"render #{seq}: pass 1 done, lowest={lowest}")

        # ----- Pass 2 -----
        lowest_by_chunk: Dict[int, int] = {}
        if mode == NormalizationMode.GLOBAL and lowest is not None:
            lowest_by_chunk = {chunk.index: lowest for chunk in chunks}
        elif mode == NormalizationMode.PER_CHUNK:
            lowest_by_chunk = {chunk.index: low for chunk, low in zip(chunks, minima)
                               if low is not None}

        if mode != NormalizationMode.NONE and not lowest_by_chunk:
            self._log(logging.WARNING,
                      f"render #{seq}: no pixel escaped, skipping pass 2")

        if lowest_by_chunk:
            second_chunks = [c for c in chunks if c.index in lowest_by_chunk]
            done["count"] = 0

            def second(chunk: Chunk) -> None:
                be.render_pass2(image, results, args, chunk.start_index,
                                chunk.amount, lowest_by_chunk[chunk.index])

            def second_done(chunk: Chunk, _: None) -> None:
                done["count"] += 1
                self._emit_chunk(ChunkEvent(chunk, 2, lowest_by_chunk[chunk.index],
                                            done["count"], len(second_chunks), seq))

            self.executor.run(second, second_chunks, second_done, label="pass 2")

        elapsed = time.perf_counter() - t0
        self._log(logging.INFO, f"render #{seq}: done in {elapsed:.2f}s")

        result = RenderResult(image=image, results=results, lowest=lowest,
                              chunk_minima=list(minima), elapsed=elapsed,
                              width=args.width, height=args.height)
        cb = self.on_frame
        if callable(cb):
            cb(FrameEvent(result.rgba(), args.width, args.height, lowest, elapsed, seq))
        return result

    def close(self) -> None:
        self.pool.close_all()
