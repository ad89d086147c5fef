"""
Benchmark the chunked two-pass Mandelbrot renderer (CPU / PYTHON backends).

Usage examples:
  fractal-bench --backends cpu --res 800x600,1280x720 --max-iter 1000 --runs 5

  fractal-bench --backends cpu,python --res 200x150 --chunks 8 --normalization per-chunk
"""

import os
import csv
import time
import logging
import argparse
import platform
from typing import List, Optional, Sequence, Tuple

from fractals.base import Complex, RenderArgs, RenderSettings
from rendering.service import RenderService
from utils.enums import BackendType, NormalizationMode

logger = logging.getLogger(__name__)

# canonical viewport, upper-left to lower-right
VIEW_START = Complex(-2.0, 1.5)
VIEW_END = Complex(1.0, -1.5)

# --- Helpers -----------------------------------------------------------------

def parse_resolution_list(res_str: str) -> List[Tuple[int, int]]:
    """
    Parse resolutions like "800x600,1280x720".
    """
    if not res_str:
        return [(800, 600), (1280, 720), (1920, 1080)]
    out: List[Tuple[int, int]] = []
    for token in res_str.split(','):
        token = token.strip().lower()
        if not token:
            continue
        try:
            w, h = token.split('x')
            out.append((int(w), int(h)))
        except ValueError as e:
            raise argparse.ArgumentTypeError(f"Invalid resolution '{token}', expected WxH") from e
    return out


def parse_backend(tag: str) -> BackendType:
    try:
        return BackendType[tag.strip().upper()]
    except KeyError as e:
        raise argparse.ArgumentTypeError(
            f"Unknown backend '{tag}', expected one of "
            f"{', '.join(b.name.lower() for b in BackendType)}") from e


def parse_normalization(tag: str) -> NormalizationMode:
    try:
        return NormalizationMode[tag.strip().upper().replace('-', '_')]
    except KeyError as e:
        raise argparse.ArgumentTypeError(f"Unknown normalization mode '{tag}'") from e

# --- Benchmark core ----------------------------------------------------------

def benchmark_combo(backend: BackendType,
                    max_iter: int,
                    width: int,
                    height: int,
                    runs: int,
                    chunks: int,
                    min_chunk_pixels: int,
                    normalization: NormalizationMode,
                    workers: Optional[int] = None,
                    warmup: int = 1) -> Tuple[float, float, Optional[int]]:
    """
    Runs warmups (not timed), then 'runs' timed renders.
    Returns (avg_time_seconds, fps, lowest).
    """
    settings = RenderSettings(chunk_count=chunks,
                              min_chunk_pixels=min_chunk_pixels,
                              normalization=normalization,
                              backend=backend,
                              workers=workers)
    service = RenderService(settings)
    args = RenderArgs.from_corners(VIEW_START, VIEW_END, width, height, max_iter)

    try:
        # Compile/build JIT once before timing
        service.backend()

        for _ in range(max(0, warmup)):
            service.render(args)

        times = []
        lowest = None
        for _ in range(runs):
            t0 = time.perf_counter()
            lowest = service.render(args).lowest
            times.append(time.perf_counter() - t0)
    finally:
        service.close()

    avg = sum(times) / len(times)
    fps = 1.0 / avg if avg > 0 else 0.0
    return avg, fps, lowest

# --- CSV writer --------------------------------------------------------------

def write_csv_row(writer,
                  resolution: Tuple[int, int],
                  rows_by_backend: List[Tuple[str, Optional[Tuple[float, float]]]]):
    """
    rows_by_backend: list of (backend_label, (avg, fps)) where the tuple may be None if the run failed
    """
    base = [f"{resolution[0]}x{resolution[1]}"]
    for _, result in rows_by_backend:
        if result is None:
            base.extend(["n/a", "n/a"])
        else:
            avg, fps = result
            base.extend([f"{avg:.4f}", f"{fps:.2f}"])
    writer.writerow(base)

# --- CLI ---------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Benchmark the chunked Mandelbrot renderer.")
    p.add_argument("--backends", type=str, default="cpu",
                   help="Comma separated list: cpu,python")
    p.add_argument("--res", type=parse_resolution_list, default="800x600,1280x720",
                   help="Comma separated WxH list")
    p.add_argument("--max-iter", type=int, default=500)
    p.add_argument("--chunks", type=int, default=20,
                   help="Upper bound on the number of chunks per frame")
    p.add_argument("--min-chunk-pixels", type=int, default=25000)
    p.add_argument("--normalization", type=parse_normalization, default="global",
                   help="global, per-chunk or none")
    p.add_argument("--workers", type=int, default=None)
    p.add_argument("--runs", type=int, default=3)
    p.add_argument("--warmup", type=int, default=1)
    p.add_argument("--csv", type=str, default="benchmark_results.csv")
    p.add_argument("--log-level", type=str, default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.runs <= 0:
        p.error("--runs must be > 0")

    try:
        backends = [parse_backend(t) for t in args.backends.split(",") if t.strip()]
    except argparse.ArgumentTypeError as e:
        p.error(str(e))

    print("=== Hardware Summary ===")
    print("CPU:", platform.processor() or platform.machine() or "Unknown CPU")
    print("Cores:", os.cpu_count())
    print()
    print(f"Settings: max_iter={args.max_iter}, chunks<={args.chunks}, "
          f"min_chunk_pixels={args.min_chunk_pixels}, "
          f"normalization={args.normalization.name.lower()}, workers={args.workers or 'auto'}")
    print()

    failures = 0
    with open(args.csv, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["Hardware Summary"])
        writer.writerow(["CPU", platform.processor() or platform.machine()])
        writer.writerow([])

        header = ["Resolution"]
        for backend in backends:
            header.extend([f"{backend.name} Time (s)", f"{backend.name} FPS"])
        writer.writerow(header)

        for (w, h) in args.res:
            print(f"=== {w}x{h} ===")
            row_results: List[Tuple[str, Optional[Tuple[float, float]]]] = []
            for backend in backends:
                try:
                    avg, fps, lowest = benchmark_combo(
                        backend=backend,
                        max_iter=args.max_iter,
                        width=w,
                        height=h,
                        runs=args.runs,
                        chunks=args.chunks,
                        min_chunk_pixels=args.min_chunk_pixels,
                        normalization=args.normalization,
                        workers=args.workers,
                        warmup=args.warmup,
                    )
                    print(f"{backend.name:>8}  avg={avg:.4f}s  fps={fps:.2f}  lowest={lowest}")
                    row_results.append((backend.name, (avg, fps)))
                except (ValueError, IndexError, KeyError) as e:
                    logger.exception("benchmark failed for %s at %dx%d", backend.name, w, h)
                    print(f"{backend.name:>8}  FAIL: {e}")
                    row_results.append((backend.name, None))
                    failures += 1
            write_csv_row(writer, (w, h), row_results)
            print()

    print(f"Benchmark results saved to {args.csv}")
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
