import sys
import time
import random
import platform
import argparse
import tracemalloc
import numpy as np
from datetime import datetime

from cube_engine import CubeState, SolverConfig, TwoPhaseSolver, scramble
from cube_engine.solver import get_tables

# store results
all_results = []


def get_system_info(seed):
    """Get system information for reproducibility."""
    return {
        'timestamp': datetime.now().isoformat(),
        'os': f"{platform.system()} {platform.release()}",
        'processor': platform.processor() or 'unknown',
        'python_version': f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        'numpy_version': np.__version__,
        'random_seed': seed,
        'timing_method': 'wall-clock time (time.perf_counter())',
        'memory_tracking': 'tracemalloc peak memory',
    }


def calculate_comprehensive_stats(data):
    """Calculate medians, IQR, percentiles and bootstrap confidence intervals."""
    data = np.array(data, dtype=float)
    data = data[~np.isnan(data)]  # Remove NaN values

    if len(data) == 0:
        return {
            'N': 0, 'mean': np.nan, 'median': np.nan, 'std': np.nan,
            'iqr': np.nan, 'q1': np.nan, 'q3': np.nan,
            'p5': np.nan, 'p95': np.nan,
            'min': np.nan, 'max': np.nan,
            'ci_95_lower': np.nan, 'ci_95_upper': np.nan
        }

    # Basic statistics
    stats = {
        'N': len(data),
        'mean': np.mean(data),
        'median': np.median(data),
        'std': np.std(data),
        'min': np.min(data),
        'max': np.max(data)
    }

    # Quartiles and IQR
    stats['q1'] = np.percentile(data, 25)
    stats['q3'] = np.percentile(data, 75)
    stats['iqr'] = stats['q3'] - stats['q1']

    # Percentiles
    stats['p5'] = np.percentile(data, 5)
    stats['p95'] = np.percentile(data, 95)

    # Bootstrap confidence interval of the mean
    n_bootstrap = 1000
    samples = np.random.choice(data, size=(n_bootstrap, len(data)), replace=True)
    bootstrap_means = samples.mean(axis=1)
    stats['ci_95_lower'] = np.percentile(bootstrap_means, 2.5)
    stats['ci_95_upper'] = np.percentile(bootstrap_means, 97.5)

    return stats


def run_solver_quiet(solver, cube: CubeState, name: str):
    """Run solver without printing detailed output and collect metrics."""
    tracemalloc.start()
    start_time = time.perf_counter()
    cpu_start = time.process_time()

    result = solver.solve(cube)

    end_time = time.perf_counter()
    cpu_end = time.process_time()
    current, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()

    record = {
        "solver": name,
        "status": result.status.value,
        "source": result.source,
        "moves": len(result.maneuver) if result.ok else np.nan,
        "phase1_moves": result.phase_lengths[0] if len(result.phase_lengths) > 0 else np.nan,
        "phase2_moves": result.phase_lengths[1] if len(result.phase_lengths) > 1 else np.nan,
        "time": end_time - start_time,
        "time_cpu": cpu_end - cpu_start,
        "memory": peak / 1024,
        "nodes_expanded": result.nodes,
        "solution": str(result.maneuver),
        "success": result.ok
    }

    all_results.append(record)
    return record


def save_results(results, system_info, output_filename="benchmark_results.txt"):
    metrics = [
        ("moves", "Solution length (moves)"),
        ("phase1_moves", "Phase 1 length (moves)"),
        ("phase2_moves", "Phase 2 length (moves)"),
        ("time", "Wall time (sec)"),
        ("time_cpu", "CPU time (sec)"),
        ("memory", "Peak memory (KB)"),
        ("nodes_expanded", "Nodes expanded"),
    ]

    with open(output_filename, "w") as output_file:
        output_file.write(f"{'='*80}\n")
        output_file.write("CUBE ENGINE BENCHMARK\n")
        output_file.write(f"{'='*80}\n\n")

        output_file.write("SYSTEM INFORMATION\n")
        for key, value in system_info.items():
            output_file.write(f"  {key}: {value}\n")

        solved = sum(1 for r in results if r["success"])
        output_file.write(f"\nSolved {solved}/{len(results)} scrambles\n")
        statuses = sorted({r["status"] for r in results})
        for status in statuses:
            output_file.write(f"  {status}: {sum(1 for r in results if r['status'] == status)}\n")

        for key, title in metrics:
            stats = calculate_comprehensive_stats([r[key] for r in results])
            output_file.write(f"\n{title}\n")
            output_file.write(f"  N={stats['N']} mean={stats['mean']:.4f} median={stats['median']:.4f} "
                              f"std={stats['std']:.4f}\n")
            output_file.write(f"  min={stats['min']:.4f} q1={stats['q1']:.4f} q3={stats['q3']:.4f} "
                              f"max={stats['max']:.4f} iqr={stats['iqr']:.4f}\n")
            output_file.write(f"  p5={stats['p5']:.4f} p95={stats['p95']:.4f} "
                              f"95% CI=[{stats['ci_95_lower']:.4f}, {stats['ci_95_upper']:.4f}]\n")

        output_file.write(f"\n{'='*80}\n")
        output_file.write("PER INSTANCE\n")
        output_file.write(f"{'='*80}\n")
        for i, r in enumerate(results, start=1):
            output_file.write(f"{i:4d} {r['status']:<18} {r['time']:8.4f}s {r['solution']}\n")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Benchmark the two-phase solver on random scrambles.")
    parser.add_argument("-n", "--num-cubes", type=int, default=20)
    parser.add_argument("-s", "--seed", type=int, default=0)
    parser.add_argument("-o", "--output", default="benchmark_results.txt")
    args = parser.parse_args()

    print("="*80)
    print("CUBE ENGINE BENCHMARK")
    print("="*80)

    random.seed(args.seed)
    np.random.seed(args.seed)
    rng = random.Random(args.seed)

    # tables are built once, outside of the measured solves
    print("Loading tables...")
    config = SolverConfig.from_env()
    solver = TwoPhaseSolver(config, tables=get_tables(config.table_cache_dir))

    results = []
    for i in range(1, args.num_cubes + 1):
        print(f"Processing cube {i}/{args.num_cubes}...")
        cube = CubeState(scramble(rng=rng))
        results.append(run_solver_quiet(solver, cube, "TwoPhase"))

    save_results(results, get_system_info(args.seed), args.output)
    print(f"Results written to {args.output}")
