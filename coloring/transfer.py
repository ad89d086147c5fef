from typing import Optional, Tuple

from kernel_sources.cpu.common import color as _kernel_color

MEMBER_COLOR = (255, 255, 255)
ALPHA = _kernel_color.OPAQUE


def color_for(iterations: Optional[int], max_iterations: int) -> Tuple[int, int, int]:
    """
    Map an escape count onto the red/blue logarithmic ramp.

    Parameters:
        iterations (int or None): Escape count, None for a set member.
        max_iterations (int): Iteration cap the count was computed with.

    Returns:
        tuple: (r, g, b), each 0-255. Set members are white.
    """
    if iterations is None:
        return MEMBER_COLOR
    r, g, b = _kernel_color.transfer_color(max(int(iterations), 0), int(max_iterations))
    return int(r), int(g), int(b)


def rgba_for(iterations: Optional[int], max_iterations: int) -> Tuple[int, int, int, int]:
    return color_for(iterations, max_iterations) + (ALPHA,)
