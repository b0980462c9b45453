from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Type

from .instructions import Instruction


class FailureKind(Enum):
    DUPLICATE_ALLOCATION = "duplicate_allocation"
    INSUFFICIENT_SPACE = "insufficient_space"
    OUT_OF_BOUNDS = "out_of_bounds"
    UNKNOWN_BLOCK = "unknown_block"


class MemoryBoundsError(IndexError):
    """Raised when an explicit placement falls outside the address range."""


class InstructionException(Exception):
    """
    Record of an instruction that could not be applied.

    The simulation raises these from its dispatch routines and keeps them in
    its failure log instead of letting them escape, so a run never halts on a
    bad instruction.
    """

    def __init__(self, instruction: Instruction, kind: FailureKind, allocatable_memory: int) -> None:
        super().__init__(f"{kind.value}: {instruction} (free memory {allocatable_memory})")
        self.instruction = instruction
        self.kind = kind
        self.allocatable_memory_at_exception = allocatable_memory

    @property
    def instruction_type(self) -> Type[Instruction]:
        return type(self.instruction)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "allocatable_memory": self.allocatable_memory_at_exception,
            **self.instruction.to_dict(),
        }

    def __repr__(self) -> str:
        return (
            f"InstructionException(instruction={self.instruction}, kind={self.kind.name}, "
            f"allocatable_memory={self.allocatable_memory_at_exception})"
        )
