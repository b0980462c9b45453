from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Any, Deque, Dict, Iterable, List, Optional

from .allocators import Allocator, allocator_for
from .exceptions import FailureKind, InstructionException, MemoryBoundsError
from .instructions import (
    AllocationInstruction,
    CompactInstruction,
    DeallocationInstruction,
    Instruction,
)
from .memory_space import MemorySpace, ReadOnlyMemory
from .strategy import StrategyType

if TYPE_CHECKING:
    from experiments.instrumentation import MemoryProfiler


class SimulationInstance:
    """
    Instruction-driven driver over a MemorySpace.

    Instructions are consumed FIFO. Every instruction is either fully applied or
    rejected; rejections land in the failure log and the run carries on with the
    next instruction.
    """

    def __init__(
        self,
        instructions: Iterable[Instruction],
        memory: MemorySpace,
        strategy: StrategyType,
        *,
        profiler: Optional["MemoryProfiler"] = None,
    ) -> None:
        self._instructions: Deque[Instruction] = deque(instructions)
        self._memory = memory
        self._view = ReadOnlyMemory(memory)
        self._strategy = strategy
        self._allocator: Allocator = allocator_for(strategy)
        self._failures: List[InstructionException] = []
        self.profiler = profiler

    # -- Execution -----------------------------------------------------------------
    def run_all(self) -> int:
        executed = 0
        while self._instructions:
            self._execute(self._instructions.popleft())
            executed += 1
        return executed

    def run_steps(self, steps: int) -> int:
        """Dispatch at most `steps` instructions; returns how many ran."""
        if steps < 0:
            raise ValueError(f"Step count must be non-negative, got {steps}")
        executed = 0
        while executed < steps and self._instructions:
            self._execute(self._instructions.popleft())
            executed += 1
        return executed

    run = run_steps

    def _execute(self, instruction: Instruction) -> None:
        try:
            if isinstance(instruction, AllocationInstruction):
                self._execute_allocation(instruction)
            elif isinstance(instruction, DeallocationInstruction):
                self._execute_deallocation(instruction)
            elif isinstance(instruction, CompactInstruction):
                self._execute_compaction()
            else:
                raise TypeError(f"Unsupported instruction {instruction!r}")
        except InstructionException as exc:
            self._record_failure(exc)

    def _execute_allocation(self, instruction: AllocationInstruction) -> None:
        if self._memory.contains_block(instruction.block_id):
            raise self._failure(instruction, FailureKind.DUPLICATE_ALLOCATION)
        try:
            interval = self._allocator.allocate(self._memory, instruction.block_id, instruction.dimension)
        except MemoryBoundsError as exc:
            raise self._failure(instruction, FailureKind.OUT_OF_BOUNDS) from exc
        if interval is None:
            raise self._failure(instruction, FailureKind.INSUFFICIENT_SPACE)
        self._record_event(
            "allocation",
            {
                "block_id": instruction.block_id,
                "size": instruction.dimension,
                "low_address": interval.low_address,
                "high_address": interval.high_address,
            },
        )

    def _execute_deallocation(self, instruction: DeallocationInstruction) -> None:
        if not self._memory.contains_block(instruction.block_id):
            raise self._failure(instruction, FailureKind.UNKNOWN_BLOCK)
        self._memory.deallocate(instruction.block_id)
        self._record_event("deallocation", {"block_id": instruction.block_id})

    def _execute_compaction(self) -> None:
        moved = self._memory.compact()
        self._record_event("compaction", {"moved": moved})

    def _failure(self, instruction: Instruction, kind: FailureKind) -> InstructionException:
        return InstructionException(instruction, kind, self._memory.available())

    def _record_failure(self, exc: InstructionException) -> None:
        self._failures.append(exc)
        self._record_event("instruction_failure", exc.to_dict())

    def _record_event(self, event_type: str, payload: Dict[str, Any]) -> None:
        if not self.profiler:
            return
        self.profiler.record_event(
            event_type,
            {
                **payload,
                "strategy": self._strategy.value,
                "heap_used": self._memory.allocated(),
                "heap_free": self._memory.available(),
                "fragmentation": self._memory.fragmentation(),
            },
        )

    # -- Introspection -------------------------------------------------------------
    def get_memory(self) -> ReadOnlyMemory:
        return self._view

    def get_instructions(self) -> Deque[Instruction]:
        return self._instructions

    def get_strategy(self) -> StrategyType:
        return self._strategy

    def get_failures(self) -> List[InstructionException]:
        return self._failures

    get_exceptions = get_failures

    def stats(self) -> Dict[str, Any]:
        return {
            "strategy": self._strategy.value,
            "capacity": self._memory.capacity,
            "allocated": self._memory.allocated(),
            "available": self._memory.available(),
            "blocks": len(self._memory.blocks()),
            "free_slots": len(self._memory.sorted_free_slots()),
            "fragmentation": self._memory.fragmentation(),
            "pending": len(self._instructions),
            "failures": len(self._failures),
        }

    def __str__(self) -> str:
        pending = ", ".join(str(instruction) for instruction in self._instructions)
        failures = ", ".join(repr(failure) for failure in self._failures)
        return (
            "Simulation Details:\n"
            f"Strategy: {self._strategy}\n"
            f"List of Remaining Instructions: [{pending}]\n"
            f"Current Memory Structure:\n\n{self._memory}\n"
            f"List of Occurred Exceptions: [{failures}]"
        )
