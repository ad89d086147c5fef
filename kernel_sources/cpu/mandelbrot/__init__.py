from kernel_sources.registry import register_op_descriptor

# "escape" answers the membership question for one point; no deps.
register_op_descriptor("mandelbrot", "escape", depends_on=[])

# "iter" fills iteration results and provisional colors for a chunk; depends on escape.
register_op_descriptor("mandelbrot", "iter", depends_on=["escape"])

# "normalize" consumes results, redraws against the lowest count; depends on iter
register_op_descriptor("mandelbrot", "normalize", depends_on=["iter"])
