#!/usr/bin/env python3
"""
PathStore Performance Benchmarks

Measures throughput of the hot operations (get, set with and without
listeners, on_change registration) and prints the results as a rich table.

Usage:
    python scripts/benchmark.py                 # Run all benchmarks
    python scripts/benchmark.py --depth 8       # Deeper paths
    python scripts/benchmark.py --time-limit 2  # Longer runs per benchmark
"""

import argparse
import sys
import time
from dataclasses import dataclass
from typing import Callable, List

# Add the project root to the Python path
sys.path.insert(0, ".")

from rich.console import Console
from rich.panel import Panel
from rich.table import Table, box

from pathstore import PathStore

# ============================================================================
# Configuration
# ============================================================================


@dataclass
class BenchmarkConfig:
    """Benchmark configuration parameters."""

    time_limit: float = 1.0
    depth: int = 4
    listeners: int = 4


@dataclass
class BenchmarkResult:
    name: str
    operations: int
    elapsed: float

    @property
    def ops_per_second(self) -> float:
        return self.operations / self.elapsed if self.elapsed > 0 else 0.0

    @property
    def microseconds_per_op(self) -> float:
        return self.elapsed / self.operations * 1e6 if self.operations else 0.0


def deep_path(depth: int) -> str:
    return "BENCH." + ".".join(f"level{i}" for i in range(depth))


def fresh_store() -> PathStore:
    store = PathStore()
    store.init_container("BENCH", {})
    return store


def run_for(name: str, time_limit: float, operation: Callable[[int], None]):
    """Call operation(i) repeatedly until time_limit seconds have passed."""
    count = 0
    start = time.perf_counter()
    deadline = start + time_limit
    while True:
        # Check the clock every 100 calls to keep timer overhead low
        for _ in range(100):
            operation(count)
            count += 1
        if time.perf_counter() >= deadline:
            break
    return BenchmarkResult(name, count, time.perf_counter() - start)


# ============================================================================
# Benchmarks
# ============================================================================


def bench_get(config: BenchmarkConfig) -> BenchmarkResult:
    store = fresh_store()
    path = deep_path(config.depth)
    store.set(path, 1)
    return run_for("get (deep path)", config.time_limit, lambda i: store.get(path))


def bench_set_unwatched(config: BenchmarkConfig) -> BenchmarkResult:
    store = fresh_store()
    path = deep_path(config.depth)
    return run_for("set (no listeners)", config.time_limit, lambda i: store.set(path, i))


def bench_set_watched(config: BenchmarkConfig) -> BenchmarkResult:
    store = fresh_store()
    path = deep_path(config.depth)
    parts = path.split(".")
    for depth in range(1, len(parts) + 1):
        for _ in range(config.listeners):
            store.on_change(".".join(parts[:depth]), lambda old, new: None)
    return run_for(
        f"set ({config.listeners} listeners per level)",
        config.time_limit,
        lambda i: store.set(path, i),
    )


def bench_set_unchanged(config: BenchmarkConfig) -> BenchmarkResult:
    store = fresh_store()
    path = deep_path(config.depth)
    store.set(path, {"a": 1, "b": [1, 2, 3]})
    store.on_change(path, lambda old, new: None)
    value = {"a": 1, "b": [1, 2, 3]}
    return run_for(
        "set (equal value, no dispatch)",
        config.time_limit,
        lambda i: store.set(path, value),
    )


def bench_on_change(config: BenchmarkConfig) -> BenchmarkResult:
    store = fresh_store()
    path = deep_path(config.depth)
    return run_for(
        "on_change registration",
        config.time_limit,
        lambda i: store.on_change(path, lambda old, new: None),
    )


BENCHMARKS = [
    bench_get,
    bench_set_unwatched,
    bench_set_watched,
    bench_set_unchanged,
    bench_on_change,
]


# ============================================================================
# Output
# ============================================================================


def render_results(console: Console, results: List[BenchmarkResult]) -> None:
    table = Table(box=box.DOUBLE, show_header=True, header_style="bold cyan")
    table.add_column("Benchmark", style="white", no_wrap=True)
    table.add_column("Operations", style="magenta", justify="right")
    table.add_column("ops/sec", style="green", justify="right")
    table.add_column("µs/op", style="yellow", justify="right")

    for result in results:
        table.add_row(
            result.name,
            f"{result.operations:,}",
            f"{result.ops_per_second:,.0f}",
            f"{result.microseconds_per_op:.2f}",
        )

    console.print()
    console.print(table)


def main():
    parser = argparse.ArgumentParser(description="PathStore performance benchmarks")
    parser.add_argument("--time-limit", type=float, default=1.0)
    parser.add_argument("--depth", type=int, default=4)
    parser.add_argument("--listeners", type=int, default=4)
    args = parser.parse_args()

    config = BenchmarkConfig(
        time_limit=args.time_limit, depth=args.depth, listeners=args.listeners
    )
    console = Console()
    console.print(
        Panel(
            f"time limit {config.time_limit}s · path depth {config.depth} · "
            f"{config.listeners} listeners per level",
            title="PathStore Benchmarks",
            border_style="blue",
        )
    )

    results = []
    for benchmark in BENCHMARKS:
        console.print(f"[yellow]Running {benchmark.__name__}...[/yellow]")
        results.append(benchmark(config))

    render_results(console, results)


if __name__ == "__main__":
    main()
