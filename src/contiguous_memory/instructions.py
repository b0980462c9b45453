from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict


class Instruction(ABC):
    """Single command consumed by a simulation run."""

    kind: str = ""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        ...

    @staticmethod
    def from_dict(record: Dict[str, Any]) -> "Instruction":
        """Build an instruction from a trace record such as {"op": "allocate", ...}."""
        op = record.get("op")
        if op == AllocationInstruction.kind:
            return AllocationInstruction(_int_field(record, "block_id"), _int_field(record, "dimension"))
        if op == DeallocationInstruction.kind:
            return DeallocationInstruction(_int_field(record, "block_id"))
        if op == CompactInstruction.kind:
            return CompactInstruction()
        raise ValueError(f"Unknown instruction op {op!r}")


def _int_field(record: Dict[str, Any], name: str) -> int:
    if name not in record:
        raise ValueError(f"Instruction record {record!r} is missing field {name!r}")
    value = record[name]
    # bool is an int subclass; floats are rejected rather than truncated.
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"Field {name!r} must be an integer, got {value!r}")
    return value


@dataclass(frozen=True)
class AllocationInstruction(Instruction):
    block_id: int
    dimension: int

    kind = "allocate"

    def __post_init__(self) -> None:
        if self.dimension <= 0:
            raise ValueError(f"Allocation of block {self.block_id} needs a positive size, got {self.dimension}")

    def to_dict(self) -> Dict[str, Any]:
        return {"op": self.kind, "block_id": self.block_id, "dimension": self.dimension}

    def __str__(self) -> str:
        return f"Allocate(id={self.block_id}, size={self.dimension})"


@dataclass(frozen=True)
class DeallocationInstruction(Instruction):
    block_id: int

    kind = "deallocate"

    def to_dict(self) -> Dict[str, Any]:
        return {"op": self.kind, "block_id": self.block_id}

    def __str__(self) -> str:
        return f"Deallocate(id={self.block_id})"


@dataclass(frozen=True)
class CompactInstruction(Instruction):
    kind = "compact"

    def to_dict(self) -> Dict[str, Any]:
        return {"op": self.kind}

    def __str__(self) -> str:
        return "Compact()"
