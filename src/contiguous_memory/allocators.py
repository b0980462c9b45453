from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Type

from .block_interval import BlockInterval
from .memory_space import MemorySpace
from .strategy import StrategyType


class Allocator(ABC):
    """Abstract placement strategy."""

    strategy: StrategyType

    @abstractmethod
    def select_slot(self, free_slots: Sequence[BlockInterval], dimension: int) -> Optional[BlockInterval]:
        """Pick a slot from free slots ordered by address, or None if nothing fits."""

    def allocate(self, space: MemorySpace, block_id: int, dimension: int) -> Optional[BlockInterval]:
        target = self.select_slot(space.sorted_free_slots(), dimension)
        if target is None:
            return None
        return space.allocate(block_id, target.low_address, dimension)


class FirstFitAllocator(Allocator):
    """
    Place the block at the lowest-addressed free slot large enough to hold it.
    Leftover space stays at the tail of that slot.
    """

    strategy = StrategyType.FIRST_FIT

    def select_slot(self, free_slots: Sequence[BlockInterval], dimension: int) -> Optional[BlockInterval]:
        for slot in free_slots:
            if slot.size >= dimension:
                return slot
        return None


class BestFitAllocator(Allocator):
    """
    Place the block in the smallest free slot that holds it, so the leftover
    gap is as small as possible. Equal-sized slots go to the lower address.
    """

    strategy = StrategyType.BEST_FIT

    def select_slot(self, free_slots: Sequence[BlockInterval], dimension: int) -> Optional[BlockInterval]:
        candidates: List[BlockInterval] = [slot for slot in free_slots if slot.size >= dimension]
        if not candidates:
            return None
        # Equal sizes fall back to the lowest address.
        return min(candidates, key=lambda slot: (slot.size, slot.low_address))


class WorstFitAllocator(Allocator):
    """
    Worst-fit allocator: carve the block out of the largest free slot, leaving
    the biggest possible remainder behind.
    """

    strategy = StrategyType.WORST_FIT

    def select_slot(self, free_slots: Sequence[BlockInterval], dimension: int) -> Optional[BlockInterval]:
        candidates: List[BlockInterval] = [slot for slot in free_slots if slot.size >= dimension]
        if not candidates:
            return None
        return min(candidates, key=lambda slot: (-slot.size, slot.low_address))


_ALLOCATORS: Dict[StrategyType, Type[Allocator]] = {
    StrategyType.FIRST_FIT: FirstFitAllocator,
    StrategyType.BEST_FIT: BestFitAllocator,
    StrategyType.WORST_FIT: WorstFitAllocator,
}


def allocator_for(strategy: StrategyType) -> Allocator:
    return _ALLOCATORS[strategy]()
