from __future__ import annotations

import argparse
import csv
import statistics
from collections import Counter
from pathlib import Path
from typing import Dict, List, Sequence

from contiguous_memory import MemorySpace, SimulationInstance, StrategyType
from experiments.environment import WorkloadConfig, WorkloadGenerator
from experiments.instrumentation import MemoryProfiler


def run_strategy_trial(config: WorkloadConfig, strategy: StrategyType) -> Dict[str, float]:
    """Replay one generated workload under a single strategy and summarise it."""
    instructions = WorkloadGenerator(config).generate()
    profiler = MemoryProfiler(run_id=f"sweep_{strategy.value}_{config.seed}")
    simulation = SimulationInstance(instructions, MemorySpace(config.capacity), strategy, profiler=profiler)
    simulation.run_all()

    failure_kinds = Counter(failure.kind.value for failure in simulation.get_failures())
    stats = simulation.stats()
    return {
        "seed": float(config.seed if config.seed is not None else -1),
        "instructions": float(len(instructions)),
        "failures": float(stats["failures"]),
        "insufficient_space": float(failure_kinds.get("insufficient_space", 0)),
        "final_fragmentation": float(stats["fragmentation"]),
        "peak_fragmentation": profiler.peak_fragmentation(),
        "final_free_slots": float(stats["free_slots"]),
        "final_allocated": float(stats["allocated"]),
    }


def sweep(
    capacity: int,
    steps: int,
    seeds: Sequence[int],
    strategies: Sequence[StrategyType] = tuple(StrategyType),
) -> Dict[str, Dict[str, float]]:
    results: Dict[str, Dict[str, float]] = {}
    for strategy in strategies:
        trials: List[Dict[str, float]] = []
        for seed in seeds:
            config = WorkloadConfig(capacity=capacity, steps=steps, seed=seed)
            trials.append(run_strategy_trial(config, strategy))
        metrics = [key for key in trials[0] if key != "seed"]
        results[strategy.value] = {metric: statistics.mean(trial[metric] for trial in trials) for metric in metrics}
    return results


def write_csv(results: Dict[str, Dict[str, float]], output: str) -> None:
    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    fieldnames = ["strategy"] + sorted({key for row in results.values() for key in row})
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=fieldnames)
        writer.writeheader()
        for strategy, row in results.items():
            writer.writerow({"strategy": strategy, **row})


def main() -> None:
    parser = argparse.ArgumentParser(description="Compare placement strategies on generated workloads.")
    parser.add_argument("--capacity", type=int, default=256, help="Address space size.")
    parser.add_argument("--steps", type=int, default=200, help="Instructions per workload.")
    parser.add_argument("--seeds", type=int, nargs="+", default=[1, 2, 3], help="Workload seeds.")
    parser.add_argument("--output", default=None, help="Optional CSV path for the averaged results.")
    args = parser.parse_args()

    results = sweep(args.capacity, args.steps, args.seeds)
    for strategy, row in results.items():
        summary = ", ".join(f"{key}={value:.3f}" for key, value in sorted(row.items()))
        print(f"[{strategy}] {summary}")
    if args.output:
        write_csv(results, args.output)


if __name__ == "__main__":
    main()
