from dataclasses import dataclass
from typing import Any, Dict, Tuple

from fractals.base import RenderArgs


@dataclass(frozen=True)
class MandelbrotFractal:
    name: str = "mandelbrot"
    # final kernel ops; their dependencies come from the op descriptors
    operations: Tuple[str, ...] = ("normalize",)

    def get_kernel_args(self, args: RenderArgs) -> Dict[str, Any]:
        """
        Flatten RenderArgs into the scalar kernel arguments.
        """
        return {
            "start_real": float(args.start.real),
            "start_imag": float(args.start.imag),
            "end_real": float(args.end.real),
            "end_imag": float(args.end.imag),
            "width": int(args.width),
            "height": int(args.height),
            "max_iter": int(args.max_iterations),
        }
