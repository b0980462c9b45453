from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BlockInterval:
    """
    Inclusive address range [low_address, high_address].

    Used both for occupied blocks and for free slots. Two intervals are equal
    when both bounds match, so intervals can be stored in sets.
    """

    low_address: int
    high_address: int

    def __post_init__(self) -> None:
        if self.low_address < 0:
            raise ValueError(f"Interval cannot start below address 0: {self.low_address}")
        if self.low_address > self.high_address:
            raise ValueError(
                f"Interval low address {self.low_address} exceeds high address {self.high_address}"
            )

    @property
    def size(self) -> int:
        return self.high_address - self.low_address + 1

    def contains(self, address: int) -> bool:
        return self.low_address <= address <= self.high_address

    def overlaps(self, other: "BlockInterval") -> bool:
        return self.low_address <= other.high_address and other.low_address <= self.high_address

    def __str__(self) -> str:
        return f"({self.low_address}-{self.high_address})"
