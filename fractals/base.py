from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

from utils.enums import BackendType, NormalizationMode


@dataclass(frozen=True)
class Complex:
    """A point of the complex plane."""
    real: float
    imag: float

    def __str__(self) -> str:
        return f"{self.real} + {self.imag}i"


@dataclass(frozen=True)
class Pixel:
    x: int
    y: int

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


ComplexLike = Union[Complex, Tuple[float, float]]


def as_complex(value: ComplexLike) -> Complex:
    if isinstance(value, Complex):
        return value
    real, imag = value
    return Complex(float(real), float(imag))


@dataclass(frozen=True)
class Viewport:
    """
    Holds the rectangle of the complex plane that is mapped onto the image.
    Start is the upper-left corner and end the lower-right one. Pixel rows
    grow downward while the imaginary axis grows upward, so row 0 maps to
    end.imag.
    """
    start: Complex
    end: Complex


@dataclass(frozen=True)
class ImageDescriptor:
    """
    Holds the size of the rendered image in pixels and the escape search cap.
    """
    width: int
    height: int
    max_iterations: int

    @property
    def pixel_count(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class RenderArgs:
    """
    Everything a chunk call needs to know about the frame. Immutable, so it
    may be shared read-only between concurrently running chunks.
    """
    viewport: Viewport
    image: ImageDescriptor

    @classmethod
    def from_corners(cls, start: ComplexLike, end: ComplexLike, width: int,
                     height: int, max_iterations: int) -> "RenderArgs":
        return cls(Viewport(as_complex(start), as_complex(end)),
                   ImageDescriptor(width, height, max_iterations))

    @property
    def start(self) -> Complex:
        return self.viewport.start

    @property
    def end(self) -> Complex:
        return self.viewport.end

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def max_iterations(self) -> int:
        return self.image.max_iterations

    @property
    def pixel_count(self) -> int:
        return self.image.pixel_count

    def cloned(self) -> "RenderArgs":
        return replace(self)

    def __str__(self) -> str:
        return (f"start: {self.start} end: {self.end} "
                f"size: {self.width} x {self.height}, "
                f"maxIterations: {self.max_iterations}")


@dataclass
class RenderSettings:
    """
    Holds the settings of a chunked render.
    Chunk_count and min_chunk_pixels size the chunks: a frame is split into
    at most chunk_count ranges of at least min_chunk_pixels pixels each.
    Normalization selects which minimum escape count the second pass uses.
    Workers bounds the thread pool (None lets the executor decide).
    """
    chunk_count: int = 20
    min_chunk_pixels: int = 25000
    normalization: NormalizationMode = NormalizationMode.GLOBAL
    backend: BackendType = BackendType.CPU
    workers: Optional[int] = None
    warmup: bool = True
