#!/usr/bin/env python3
"""
Timing benchmark for the fourier_core engines.

This script measures, per engine and signal size:
  1. Forward transform time (ms per call, mean and std)
  2. Inverse transform time (ms per call)
  3. Round-trip reconstruction error

Usage:
    python scripts/benchmark.py [--config CONFIG_PATH] [--engines fft parallel_fft]
                                [--sizes 1024 65536] [--output OUTPUT_DIR]
"""

import sys
import json
import argparse
import logging
import time
from pathlib import Path
from datetime import datetime
from typing import Dict, List, Optional
from dataclasses import dataclass, asdict
import yaml
import numpy as np

# Add src to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / 'src'))

# Rich imports
from rich.console import Console
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    TaskProgressColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.panel import Panel
from rich import box

# Project imports
from fourier_core import (
    FourierTransform,
    ParallelRadixTwoFFT,
    TransformConfig,
    allocate,
    create_transform,
    is_power_of_two,
)
from fourier_core.utils import setup_logging

console = Console()

QUADRATIC_ENGINES = ('naive', 'symmetric')


@dataclass
class TimingResult:
    """Timing of one engine at one size."""
    engine: str
    size: int
    forward_ms: float
    forward_std_ms: float
    inverse_ms: float
    inverse_std_ms: float
    max_error: float  # Round-trip reconstruction error

    def to_dict(self) -> Dict:
        return asdict(self)


def time_calls(fn, repeats: int) -> List[float]:
    """Time repeated calls of fn in ms (one warm-up call first, which also triggers JIT)."""
    fn()
    times = []
    for _ in range(repeats):
        start = time.perf_counter()
        fn()
        times.append((time.perf_counter() - start) * 1000)
    return times


def measure_engine(name: str, engine: FourierTransform, n: int, repeats: int,
                   rng: np.random.Generator) -> TimingResult:
    """Measure forward/inverse timing and round-trip error for one engine."""
    signal = rng.uniform(-1.0, 1.0, n)
    spectrum = allocate(engine.required_bins(n))
    restored = np.empty(n, dtype=np.float64)

    fwd = time_calls(lambda: engine.forward(signal, spectrum), repeats)
    inv = time_calls(lambda: engine.inverse(spectrum, restored), repeats)

    return TimingResult(
        engine=name,
        size=n,
        forward_ms=float(np.mean(fwd)),
        forward_std_ms=float(np.std(fwd)),
        inverse_ms=float(np.mean(inv)),
        inverse_std_ms=float(np.std(inv)),
        max_error=float(np.abs(restored - signal).max()),
    )


def load_yaml(config_path: Optional[str]) -> Dict:
    """Load configuration."""
    if config_path is None:
        return {}
    with open(config_path, 'r') as f:
        return yaml.safe_load(f) or {}


def display_results_table(results: List[TimingResult]):
    """Display timing results."""
    table = Table(title="Transform Timing Results", box=box.ROUNDED)
    table.add_column("Engine", style="bold")
    table.add_column("N", justify="right")
    table.add_column("Forward (ms)", justify="right")
    table.add_column("Inverse (ms)", justify="right")
    table.add_column("Max Error", justify="right")

    for r in results:
        table.add_row(
            r.engine,
            str(r.size),
            f"{r.forward_ms:.3f}±{r.forward_std_ms:.3f}",
            f"{r.inverse_ms:.3f}±{r.inverse_std_ms:.3f}",
            f"{r.max_error:.2e}",
        )

    console.print(table)


def run_benchmark(args) -> List[TimingResult]:
    """Run the benchmark."""
    yaml_config = load_yaml(args.config)
    bench_cfg = yaml_config.get('benchmark', {})

    transform_config = TransformConfig.from_dict(yaml_config.get('transform', {}))
    if args.workers is not None:
        transform_config = transform_config.with_overrides(workers=args.workers)

    engines = args.engines or bench_cfg.get('engines', ['fft', 'parallel_fft'])
    sizes = args.sizes or bench_cfg.get('sizes', [1024, 4096, 16384])
    repeats = args.repeats or bench_cfg.get('repeats', 20)
    max_quadratic = bench_cfg.get('max_quadratic_size', 4096)

    output_dir = Path(args.output) if args.output else None
    log_file = None
    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
        log_file = str(output_dir / 'benchmark.log')
    logger = setup_logging(
        log_file=log_file,
        level=logging.DEBUG if args.verbose else logging.INFO,
        console=console,
    )

    console.print(Panel.fit(
        "[bold blue]Transform Benchmark[/bold blue]\n"
        f"Engines: {', '.join(engines)} | Sizes: {sizes} | Repeats: {repeats}",
        border_style="blue"
    ))

    rng = np.random.default_rng(args.seed)
    results = []

    jobs = []
    for name in engines:
        for n in sizes:
            if name in QUADRATIC_ENGINES and n > max_quadratic:
                logger.info(f"Skipping {name} at N={n} (O(N^2), above {max_quadratic})")
                continue
            if name not in QUADRATIC_ENGINES and not is_power_of_two(n):
                logger.info(f"Skipping {name} at N={n} (not a power of two)")
                continue
            jobs.append((name, n))

    with Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(bar_width=30),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("[cyan]Measuring", total=len(jobs))

        for name in engines:
            engine = create_transform(name, transform_config)
            try:
                for job_name, n in jobs:
                    if job_name != name:
                        continue
                    progress.update(task, description=f"[cyan]{name} N={n}")

                    result = measure_engine(name, engine, n, repeats, rng)
                    results.append(result)
                    logger.info(
                        f"{name} N={n}: fwd={result.forward_ms:.3f}ms, "
                        f"inv={result.inverse_ms:.3f}ms, err={result.max_error:.2e}"
                    )
                    progress.update(task, advance=1)
            finally:
                if isinstance(engine, ParallelRadixTwoFFT):
                    engine.close()

    console.print("\n")
    display_results_table(results)

    if output_dir is not None:
        results_dict = {
            'timestamp': datetime.now().isoformat(),
            'config': transform_config.to_dict(),
            'repeats': repeats,
            'results': [r.to_dict() for r in results],
        }
        with open(output_dir / 'timing.json', 'w') as f:
            json.dump(results_dict, f, indent=2)
        console.print(f"\n[green]✓[/green] Results saved to {output_dir}")

    return results


def main():
    parser = argparse.ArgumentParser(description="Fourier transform benchmark")
    parser.add_argument(
        '--config',
        type=str,
        default=str(PROJECT_ROOT / 'configs' / 'default.yaml'),
        help='Path to configuration file'
    )
    parser.add_argument('--engines', nargs='+', default=None, help='Engines to benchmark')
    parser.add_argument('--sizes', nargs='+', type=int, default=None, help='Signal lengths')
    parser.add_argument('--repeats', type=int, default=None, help='Timed calls per measurement')
    parser.add_argument('--workers', type=int, default=None, help='Worker threads for parallel_fft')
    parser.add_argument('--seed', type=int, default=0, help='Random seed for test signals')
    parser.add_argument('--output', type=str, default=None, help='Directory for timing.json and the log')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log pool lifecycle at DEBUG')
    args = parser.parse_args()

    run_benchmark(args)


if __name__ == '__main__':
    main()
