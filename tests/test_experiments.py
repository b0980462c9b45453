import json
import tempfile
import unittest
from contextlib import redirect_stdout
from io import StringIO
from pathlib import Path

from contiguous_memory import AllocationInstruction, CompactInstruction, DeallocationInstruction, StrategyType
from experiments.environment import WorkloadConfig, WorkloadGenerator
from experiments.run_simulation import run_from_args
from experiments.strategy_sweep import sweep, write_csv
from experiments.trace import write_trace


class WorkloadGeneratorTests(unittest.TestCase):
    def test_same_seed_same_stream(self) -> None:
        config = WorkloadConfig(steps=40, seed=11)
        self.assertEqual(WorkloadGenerator(config).generate(), WorkloadGenerator(config).generate())

    def test_valid_stream_only_frees_issued_ids(self) -> None:
        config = WorkloadConfig(steps=200, invalid_rate=0.0, seed=3)
        issued = set()
        for instruction in WorkloadGenerator(config):
            if isinstance(instruction, AllocationInstruction):
                self.assertNotIn(instruction.block_id, issued)
                issued.add(instruction.block_id)
                self.assertTrue(config.min_size <= instruction.dimension <= config.max_size)
            elif isinstance(instruction, DeallocationInstruction):
                self.assertIn(instruction.block_id, issued)

    def test_rejects_bad_size_range(self) -> None:
        with self.assertRaises(ValueError):
            WorkloadGenerator(WorkloadConfig(min_size=5, max_size=2))

    def test_rejects_weights_that_cannot_start_a_stream(self) -> None:
        with self.assertRaises(ValueError):
            WorkloadGenerator(WorkloadConfig(allocate_weight=0.0, compact_weight=0.0))
        with self.assertRaises(ValueError):
            WorkloadGenerator(WorkloadConfig(deallocate_weight=-1.0))

    def test_compaction_only_stream(self) -> None:
        config = WorkloadConfig(steps=5, allocate_weight=0.0, deallocate_weight=0.0, compact_weight=1.0, seed=1)
        self.assertEqual(WorkloadGenerator(config).generate(), [CompactInstruction()] * 5)


class StrategySweepTests(unittest.TestCase):
    def test_summary_contains_core_metrics(self) -> None:
        results = sweep(capacity=64, steps=60, seeds=[1, 2])
        self.assertEqual(set(results), {strategy.value for strategy in StrategyType})
        for row in results.values():
            self.assertIn("failures", row)
            self.assertIn("final_fragmentation", row)
            self.assertEqual(row["instructions"], 60.0)
            self.assertGreaterEqual(row["peak_fragmentation"], row["final_fragmentation"] - 1e-9)

    def test_write_csv(self) -> None:
        results = sweep(capacity=32, steps=20, seeds=[5], strategies=[StrategyType.BEST_FIT])
        with tempfile.TemporaryDirectory() as tmpdir:
            output = Path(tmpdir) / "sweep.csv"
            write_csv(results, str(output))
            lines = output.read_text(encoding="utf-8").splitlines()
        self.assertTrue(lines[0].startswith("strategy,"))
        self.assertTrue(lines[1].startswith("best_fit,"))


class RunSimulationCliTests(unittest.TestCase):
    def test_trace_run_with_profile_output(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            trace_path = Path(tmpdir) / "trace.jsonl"
            write_trace(trace_path, [AllocationInstruction(1, 5), AllocationInstruction(2, 6)])
            profile_dir = Path(tmpdir) / "profile"
            buffer = StringIO()
            with redirect_stdout(buffer):
                sim = run_from_args(
                    [
                        "--trace",
                        str(trace_path),
                        "--capacity",
                        "10",
                        "--strategy",
                        "worst-fit",
                        "--profile-dir",
                        str(profile_dir),
                    ]
                )
            events = [
                json.loads(line)
                for line in (profile_dir / "simulation_worst_fit.jsonl").read_text(encoding="utf-8").splitlines()
            ]
            self.assertTrue((profile_dir / "simulation_worst_fit.csv").exists())

        self.assertIs(sim.get_strategy(), StrategyType.WORST_FIT)
        self.assertEqual(len(sim.get_failures()), 1)
        self.assertIn("(0-4) --> ID 1", buffer.getvalue())
        self.assertEqual([event["event"] for event in events], ["allocation", "instruction_failure"])

    def test_generated_run_honours_step_limit(self) -> None:
        with redirect_stdout(StringIO()):
            sim = run_from_args(["--steps", "30", "--run-steps", "10", "--seed", "9"])
        self.assertEqual(len(sim.get_instructions()), 20)


if __name__ == "__main__":
    unittest.main()
