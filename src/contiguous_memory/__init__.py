"""
Contiguous memory allocation simulator.

Expose high-level classes for building simulations quickly.
"""

from .block_interval import BlockInterval
from .strategy import StrategyType
from .instructions import (
    AllocationInstruction,
    CompactInstruction,
    DeallocationInstruction,
    Instruction,
)
from .exceptions import FailureKind, InstructionException, MemoryBoundsError
from .memory_space import MemorySpace, MemoryView, ReadOnlyMemory
from .allocators import BestFitAllocator, FirstFitAllocator, WorstFitAllocator, allocator_for
from .simulation import SimulationInstance

__all__ = [
    "BlockInterval",
    "StrategyType",
    "Instruction",
    "AllocationInstruction",
    "DeallocationInstruction",
    "CompactInstruction",
    "FailureKind",
    "InstructionException",
    "MemoryBoundsError",
    "MemorySpace",
    "MemoryView",
    "ReadOnlyMemory",
    "FirstFitAllocator",
    "BestFitAllocator",
    "WorstFitAllocator",
    "allocator_for",
    "SimulationInstance",
]
