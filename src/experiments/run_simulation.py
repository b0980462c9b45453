from __future__ import annotations

import argparse
from typing import List, Optional, Sequence

from contiguous_memory import Instruction, MemorySpace, SimulationInstance, StrategyType
from experiments.environment import WorkloadConfig, WorkloadGenerator
from experiments.instrumentation import MemoryProfiler
from experiments.trace import load_trace


def run_simulation(
    instructions: Sequence[Instruction],
    capacity: int,
    strategy: StrategyType,
    *,
    run_steps: Optional[int] = None,
    profiler: Optional[MemoryProfiler] = None,
) -> SimulationInstance:
    simulation = SimulationInstance(instructions, MemorySpace(capacity), strategy, profiler=profiler)
    if run_steps is None:
        simulation.run_all()
    else:
        simulation.run_steps(run_steps)
    return simulation


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a contiguous memory allocation simulation.")
    parser.add_argument("--trace", help="JSON-lines instruction trace. A workload is generated when omitted.")
    parser.add_argument(
        "--strategy",
        type=StrategyType.from_name,
        default=StrategyType.FIRST_FIT,
        help="Placement strategy: first_fit, best_fit or worst_fit.",
    )
    parser.add_argument("--capacity", type=int, default=100, help="Address space size.")
    parser.add_argument("--steps", type=int, default=50, help="Generated workload length.")
    parser.add_argument("--seed", type=int, default=42, help="Seed for the generated workload.")
    parser.add_argument("--run-steps", type=int, default=None, help="Only dispatch the first N instructions.")
    parser.add_argument("--profile-dir", default=None, help="Flush profiler events to this directory.")
    return parser


def run_from_args(argv: Optional[List[str]] = None) -> SimulationInstance:
    args = build_parser().parse_args(argv)
    if args.trace:
        instructions = list(load_trace(args.trace))
    else:
        config = WorkloadConfig(capacity=args.capacity, steps=args.steps, seed=args.seed)
        instructions = WorkloadGenerator(config).generate()

    profiler = MemoryProfiler(run_id=f"simulation_{args.strategy.value}", output_dir=args.profile_dir)
    simulation = run_simulation(
        instructions,
        args.capacity,
        args.strategy,
        run_steps=args.run_steps,
        profiler=profiler,
    )
    print(simulation)
    print("Final stats:", simulation.stats())
    profiler.flush()
    return simulation


def main(argv: Optional[List[str]] = None) -> None:
    run_from_args(argv)


if __name__ == "__main__":
    main()
