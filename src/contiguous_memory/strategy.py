from __future__ import annotations

from enum import Enum


class StrategyType(Enum):
    """Placement rule used to pick the free slot that receives an allocation."""

    FIRST_FIT = "first_fit"
    BEST_FIT = "best_fit"
    WORST_FIT = "worst_fit"

    @classmethod
    def from_name(cls, name: str) -> "StrategyType":
        normalised = name.strip().lower().replace("-", "_")
        for member in cls:
            if member.value == normalised:
                return member
        choices = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown strategy '{name}'. Expected one of: {choices}")

    def __str__(self) -> str:
        return self.name
