import logging
from typing import Any, Dict, Optional

import numpy as np

from backend.base import Backend
from fractals.base import Complex, RenderArgs
from fractals.mandelbrot import MandelbrotFractal
from kernel_sources.loader import load_kernel, load_op_order

logger = logging.getLogger(__name__)


class CpuBackend(Backend):
    """
    Backend running the numba-compiled CPU kernels. Kernels release the GIL,
    so chunks dispatched from several threads run in parallel.
    """
    name = "CPU"

    def __init__(self):
        self._kernels: Dict[str, Dict[str, Any]] = {}
        self._fractal: Optional[MandelbrotFractal] = None
        self._warmed_up = False

        # Warmup configuration
        self._wu_w, self._wu_h = 16, 16
        self._wu_start, self._wu_end = Complex(-2.0, 1.5), Complex(1.0, -1.5)
        self._wu_max_iter = 16

    def compile(self, fractal: MandelbrotFractal) -> None:
        """
        Load every kernel the fractal needs from the registry, dependencies
        first.
        """
        ops = load_op_order(self.name, fractal.name, fractal.operations)
        self._kernels = {op: load_kernel(self.name, fractal.name, op) for op in ops}
        logger.debug("%s backend loaded ops %s", self.name, ops)
        self._fractal = fractal
        self._warmed_up = False

    def warmup(self) -> None:
        """
        Run each kernel once on a tiny frame so JIT compilation does not land
        inside the first real chunk.
        """
        if self._warmed_up:
            return
        fractal = self._require_fractal()

        w, h = self._wu_w, self._wu_h
        args = RenderArgs.from_corners(self._wu_start, self._wu_end, w, h,
                                       self._wu_max_iter)
        image = np.zeros(w * h * 4, dtype=np.uint8)
        results = np.zeros(w * h, dtype=np.int32)

        self.evaluate(0.0, 0.0, self._wu_max_iter)
        lowest = self.render_pass1(image, results, args, 0, w * h - 1)
        self.render_pass2(image, results, args, 0, w * h - 1, lowest or 1)

        logger.debug("%s backend warmed up for %s", self.name, fractal.name)
        self._warmed_up = True

    def _require_fractal(self) -> MandelbrotFractal:
        if self._fractal is None:
            raise RuntimeError("Backend has not been compiled yet")
        return self._fractal

    def _run(self, op: str, values: Dict[str, Any]) -> Any:
        meta = self._kernels[op]
        ordered = [values[name] for name in meta["arg_order"]]
        return meta["func"](*ordered)

    def evaluate(self, real: float, imag: float,
                 max_iterations: int) -> Optional[int]:
        self._require_fractal()
        n = self._run("escape", {"real": float(real), "imag": float(imag),
                                 "max_iter": int(max_iterations)})
        return None if n < 0 else int(n)

    def render_pass1(self, image: np.ndarray, results: np.ndarray,
                     args: RenderArgs, start_index: int,
                     amount: int) -> Optional[int]:
        values = self._require_fractal().get_kernel_args(args)
        values.update(image=image, results=results,
                      start_index=int(start_index), amount=int(amount))
        lowest = self._run("iter", values)
        return None if lowest < 0 else int(lowest)

    def render_pass2(self, image: np.ndarray, results: np.ndarray,
                     args: RenderArgs, start_index: int, amount: int,
                     lowest: int) -> None:
        values = self._require_fractal().get_kernel_args(args)
        values.update(image=image, results=results,
                      start_index=int(start_index), amount=int(amount),
                      lowest=int(lowest))
        self._run("normalize", values)

    def close(self) -> None:
        self._kernels = {}
        self._fractal = None
        self._warmed_up = False


class PythonBackend(CpuBackend):
    """
    Runs the chunk loops of the same kernels interpreted (the per-pixel
    helpers stay compiled). Slow; meant for debugging the compiled path.
    """
    name = "PYTHON"
