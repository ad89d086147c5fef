from dataclasses import dataclass
import numpy as np
from typing import Optional

from rendering.chunks import Chunk


@dataclass(frozen=True)
class ChunkEvent:
    chunk: Chunk
    pass_number: int    # 1 = raw results, 2 = normalized
    lowest: Optional[int]
    done: int           # chunks finished in this pass, this one included
    total: int
    seq: int            # generation / render sequence number

    @property
    def progress(self) -> float:
        return 100.0 * self.done / self.total if self.total else 100.0


@dataclass(frozen=True)
class FrameEvent:
    data: np.ndarray    # (height, width, 4) RGBA view of the frame
    width: int
    height: int
    lowest: Optional[int]
    elapsed: float      # seconds
    seq: int


@dataclass(frozen=True)
class LogEvent:
    message: str
    level: Optional[int]
