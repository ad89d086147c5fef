from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from fractals.base import RenderArgs
from fractals.mandelbrot import MandelbrotFractal


class Backend(ABC):
    """
    A base class for fractal rendering backends.
    Buffers handed to a backend are already validated flat views; the
    backend writes only the indices of the chunk it is given.
    """
    name: str

    @abstractmethod
    def compile(self, fractal: MandelbrotFractal) -> None:
        ...

    @abstractmethod
    def evaluate(self, real: float, imag: float,
                 max_iterations: int) -> Optional[int]:
        ...

    @abstractmethod
    def render_pass1(self, image: np.ndarray, results: np.ndarray,
                     args: RenderArgs, start_index: int,
                     amount: int) -> Optional[int]:
        ...

    @abstractmethod
    def render_pass2(self, image: np.ndarray, results: np.ndarray,
                     args: RenderArgs, start_index: int, amount: int,
                     lowest: int) -> None:
        ...

    @abstractmethod
    def close(self) -> None:
        ...

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
