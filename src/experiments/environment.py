from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterator, List, Optional

from contiguous_memory import (
    AllocationInstruction,
    CompactInstruction,
    DeallocationInstruction,
    Instruction,
)


@dataclass
class WorkloadConfig:
    """
    Shape of a generated instruction stream.

    allocate_weight / deallocate_weight / compact_weight: relative odds of each
    instruction kind per step.
    invalid_rate: probability that an allocation reuses a live id or a
    deallocation targets an id that was never handed out.
    """

    capacity: int = 100
    steps: int = 50
    min_size: int = 1
    max_size: int = 20
    allocate_weight: float = 0.6
    deallocate_weight: float = 0.35
    compact_weight: float = 0.05
    invalid_rate: float = 0.05
    seed: Optional[int] = None


class WorkloadGenerator:
    """
    Generate instruction streams that emulate a program allocating and freeing
    variably sized blocks.

    The generator only tracks ids it has handed out; it knows nothing about
    placement, so some allocations will fail once the space fills up.
    """

    def __init__(self, config: WorkloadConfig) -> None:
        if config.min_size <= 0 or config.max_size < config.min_size:
            raise ValueError(f"Invalid size range [{config.min_size}, {config.max_size}]")
        weights = (config.allocate_weight, config.deallocate_weight, config.compact_weight)
        if any(weight < 0 for weight in weights):
            raise ValueError(f"Instruction weights must be non-negative, got {weights}")
        # Deallocation needs live ids, so the first step relies on the other two weights.
        if config.allocate_weight + config.compact_weight <= 0:
            raise ValueError("allocate_weight or compact_weight must be positive")
        self.config = config
        self.random = random.Random(config.seed)
        self._next_id = 1
        self._live: List[int] = []

    def __iter__(self) -> Iterator[Instruction]:
        for _ in range(self.config.steps):
            yield self.next_instruction()

    def generate(self) -> List[Instruction]:
        return list(self)

    def next_instruction(self) -> Instruction:
        kinds = ["allocate", "deallocate", "compact"]
        weights = [
            self.config.allocate_weight,
            self.config.deallocate_weight if self._live else 0.0,
            self.config.compact_weight,
        ]
        kind = self.random.choices(kinds, weights=weights)[0]
        if kind == "deallocate":
            return self._deallocation()
        if kind == "compact":
            return CompactInstruction()
        return self._allocation()

    def _allocation(self) -> AllocationInstruction:
        size = self.random.randint(self.config.min_size, self.config.max_size)
        if self._live and self.random.random() < self.config.invalid_rate:
            return AllocationInstruction(self.random.choice(self._live), size)
        block_id = self._next_id
        self._next_id += 1
        self._live.append(block_id)
        return AllocationInstruction(block_id, size)

    def _deallocation(self) -> DeallocationInstruction:
        if self.random.random() < self.config.invalid_rate:
            # Ids at or beyond _next_id have never been issued.
            return DeallocationInstruction(self._next_id + self.random.randint(1000, 9999))
        block_id = self._live.pop(self.random.randrange(len(self._live)))
        return DeallocationInstruction(block_id)
