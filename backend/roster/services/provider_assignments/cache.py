from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Sequence, TypeVar

T = TypeVar("T")


class CacheSlot(str, enum.Enum):
    physicians = "physicians"
    nurse_practitioners = "nurse_practitioners"
    patients = "patients"
    hospitalizations = "hospitalizations"
    hospitalization_statuses = "hospitalization_statuses"
    visits = "visits"


@dataclass
class ResolutionCache:
    """Reference data for one resolution cycle.

    Each slot is loaded at most once; a new cache is built for every cycle
    (and every retry of a cycle), so nothing outlives its transaction.
    """

    physicians: tuple | None = None
    nurse_practitioners: tuple | None = None
    patients: tuple | None = None
    hospitalizations: tuple | None = None
    hospitalization_statuses: tuple | None = None
    visits: tuple | None = None

    def fill_cache(self, slot: CacheSlot, loader: Callable[[], Sequence[T]]) -> tuple[T, ...]:
        current = getattr(self, slot.value)
        if current is not None:
            return current
        items = tuple(loader())
        setattr(self, slot.value, items)
        return items

    def has_cache(self, slot: CacheSlot) -> bool:
        return getattr(self, slot.value) is not None

    def get(self, slot: CacheSlot) -> tuple:
        items = getattr(self, slot.value)
        if items is None:
            raise KeyError(f"Resolution cache slot '{slot.value}' has not been filled.")
        return items
