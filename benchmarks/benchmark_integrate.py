#!/usr/bin/env python3
"""
Benchmark script for the integration over secondary sources.

Compares serial integration against thread parallel integration for
several grid resolutions and array sizes.

Usage:
    python benchmarks/benchmark_integrate.py
    python benchmarks/benchmark_integrate.py --quick
    python benchmarks/benchmark_integrate.py --json
"""

from __future__ import annotations

import argparse
import json
import time
from dataclasses import asdict, dataclass

import numpy as np

from sfs_mono import SynthesisConfig, build_grid, integrate


@dataclass
class IntegrateResult:
    """Results from one integration benchmark."""

    resolution: int
    num_sources: int
    n_jobs: int
    time_sec: float
    mpoints_per_sec: float
    speedup: float


def circular_array(n: int, radius: float = 2.0) -> np.ndarray:
    phi = np.linspace(0, 2 * np.pi, n, endpoint=False)
    table = np.zeros((n, 7))
    table[:, 0] = radius * np.cos(phi)
    table[:, 1] = radius * np.sin(phi)
    table[:, 3] = -np.cos(phi)
    table[:, 4] = -np.sin(phi)
    table[:, 6] = 2 * np.pi * radius / n
    return table


def run_integration(resolution: int, num_sources: int, n_jobs: int, repeats: int) -> float:
    """Return the best of ``repeats`` wall clock times in seconds."""
    grid = build_grid([-1.5, 1.5], [-1.5, 1.5], 0, resolution)
    table = circular_array(num_sources)
    D = np.ones(num_sources, dtype=complex)
    conf = SynthesisConfig(resolution=resolution)

    best = float("inf")
    for _ in range(repeats):
        start = time.perf_counter()
        integrate(grid, table, D, "point", 1000.0, conf, n_jobs=n_jobs)
        best = min(best, time.perf_counter() - start)
    return best


def benchmark(resolutions, source_counts, job_counts, repeats) -> list[IntegrateResult]:
    results = []
    for resolution in resolutions:
        for num_sources in source_counts:
            baseline = None
            for n_jobs in job_counts:
                elapsed = run_integration(resolution, num_sources, n_jobs, repeats)
                if baseline is None:
                    baseline = elapsed
                points = resolution**2 * num_sources
                results.append(
                    IntegrateResult(
                        resolution=resolution,
                        num_sources=num_sources,
                        n_jobs=n_jobs,
                        time_sec=elapsed,
                        mpoints_per_sec=points / elapsed / 1e6,
                        speedup=baseline / elapsed,
                    )
                )
    return results


def main():
    parser = argparse.ArgumentParser(description=__doc__.split("\n\n")[0])
    parser.add_argument("--quick", action="store_true", help="Small problem sizes only")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    args = parser.parse_args()

    if args.quick:
        resolutions, source_counts, repeats = [100], [32], 1
    else:
        resolutions, source_counts, repeats = [200, 400], [64, 256], 3
    job_counts = [1, 2, 4, -1]

    results = benchmark(resolutions, source_counts, job_counts, repeats)

    if args.json:
        print(json.dumps([asdict(r) for r in results], indent=2))
        return

    print("=" * 72)
    print(f"{'resolution':>10} {'sources':>8} {'n_jobs':>7} {'time [s]':>10} "
          f"{'Mpoints/s':>10} {'speedup':>8}")
    print("-" * 72)
    for r in results:
        print(
            f"{r.resolution:>10} {r.num_sources:>8} {r.n_jobs:>7} {r.time_sec:>10.3f} "
            f"{r.mpoints_per_sec:>10.1f} {r.speedup:>8.2f}"
        )
    print("=" * 72)


if __name__ == "__main__":
    main()
