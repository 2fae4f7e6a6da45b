"""
Coach Sim Entity Stores
=======================

In-memory, date-ordered collections (one per entity type).

Rules shared by every store:
- The backing list is owned by the store; readers get shallow copies.
- Every mutation re-sorts ascending by date (stable sort, so equal dates
  keep their pre-sort relative order).
- reset() restores a copy of the seed list.
- Nothing is ever deleted, and no operation raises on an empty store.
"""

import logging
from dataclasses import fields, replace
from typing import Any, Dict, Generic, Iterable, List, Optional, TypeVar

from coach_sim.models import (
    TrainingLogEntry,
    RecoveryEntry,
    ConfidenceScorePoint,
    PredictionEntry,
    from_wire,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')


def _sorted_by_date(items: Iterable[T]) -> List[T]:
    return sorted(items, key=lambda item: item.date)


class EntityStore(Generic[T]):
    """Generic date-keyed store with get/set/add/reset."""

    name = "entity"

    def __init__(self, seed: Optional[Iterable[T]] = None):
        self._seed: List[T] = list(seed or [])
        self._items: List[T] = _sorted_by_date(self._seed)

    def get_all(self) -> List[T]:
        """Sorted copy, ascending by date."""
        return list(self._items)

    def set_all(self, items: Iterable[T]) -> None:
        self._items = _sorted_by_date(items)

    def add(self, item: T) -> None:
        self._items = _sorted_by_date(self._items + [item])

    def reset(self) -> None:
        self._items = _sorted_by_date(self._seed)
        logger.debug(f"{self.name} store reset to {len(self._items)} seed rows")

    def get_latest(self) -> Optional[T]:
        """Row with the maximum date (last of the ascending sort)."""
        if not self._items:
            return None
        return self._items[-1]

    def __len__(self) -> int:
        return len(self._items)


class TrainingStore(EntityStore[TrainingLogEntry]):
    name = "training"


_RECOVERY_FIELDS = {f.name for f in fields(RecoveryEntry)}


class RecoveryStore(EntityStore[RecoveryEntry]):
    name = "recovery"

    def get_by_date(self, date: str) -> Optional[RecoveryEntry]:
        for entry in self._items:
            if entry.date == date:
                return entry
        return None

    def update_by_date(self, date: str, partial: Dict[str, Any]) -> RecoveryEntry:
        """
        Upsert by exact date match.
        Found -> shallow merge of `partial`; missing -> new record from
        `partial` plus the date. Keys may be field or wire (camelCase)
        names; unknown keys are dropped.
        """
        updates = {}
        for key, value in from_wire(partial).items():
            if key in _RECOVERY_FIELDS and key != 'date':
                updates[key] = value
            else:
                logger.debug(f"Recovery update for {date}: ignoring key {key!r}")
        for index, entry in enumerate(self._items):
            if entry.date == date:
                # New object: the seed rows must survive for reset()
                merged = replace(entry, **updates)
                items = list(self._items)
                items[index] = merged
                self._items = _sorted_by_date(items)
                return merged

        created = RecoveryEntry(date=date, **updates)
        self.add(created)
        return created


class ConfidenceStore(EntityStore[ConfidenceScorePoint]):
    name = "confidence"

    def get_scores_for_paper(self, paper_id: str) -> List[ConfidenceScorePoint]:
        """Points of one paper, ascending by date."""
        return [point for point in self._items if point.paper_id == str(paper_id)]

    def get_latest_score_for_paper(self, paper_id: str) -> Optional[ConfidenceScorePoint]:
        scores = self.get_scores_for_paper(paper_id)
        if not scores:
            return None
        return scores[-1]

    def accumulate(self, paper_id: str, delta: float, date: str) -> ConfidenceScorePoint:
        """
        Add `delta` to the paper's latest cumulative value (0 if none) and
        store the result as a new point.
        """
        previous = self.get_latest_score_for_paper(paper_id)
        base = previous.score if previous is not None else 0.0
        point = ConfidenceScorePoint(
            date=date,
            paper_id=str(paper_id),
            score=round(base + delta, 4),
        )
        self.add(point)
        return point


class PredictionStore(EntityStore[PredictionEntry]):
    name = "prediction"

    def get_for_paper(self, paper_id: str) -> List[PredictionEntry]:
        return [entry for entry in self._items if entry.paper_id == str(paper_id)]
