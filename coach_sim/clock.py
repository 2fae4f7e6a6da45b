"""
Simulation Clock
================

Mutable "today" cursor. Decides which store row counts as the latest day and
stamps every simulated record.

Subscribers are plain callables. They run synchronously after every
mutation (set / advance / reset), once per mutation, and always see the
post-mutation date.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

Subscriber = Callable[[], None]


class SimulationClock:
    """Process-wide simulated date with observer notification."""

    def __init__(self, initial: Optional[datetime] = None):
        self._now = initial if initial is not None else datetime.now()
        self._subscribers: Dict[int, Subscriber] = {}
        self._next_token = 0

    # ---------- Reads ----------
    def now(self) -> datetime:
        return self._now

    def now_iso_date(self) -> str:
        """Current date as YYYY-MM-DD."""
        return self._now.date().isoformat()

    # ---------- Mutations ----------
    def set_date(self, value) -> None:
        """Accepts a datetime or a date (midnight)."""
        if isinstance(value, datetime):
            self._now = value
        elif isinstance(value, date):
            self._now = datetime(value.year, value.month, value.day)
        else:
            raise ValueError(f"Unsupported date value: {value!r}")
        self._notify()

    def set_from_iso_date(self, value: str) -> None:
        """
        Set from 'YYYY-MM-DD' (midnight) or a full ISO datetime string.
        Raises ValueError on malformed input.
        """
        value = value.strip()
        if len(value) == 10:
            parsed = datetime.combine(date.fromisoformat(value), datetime.min.time())
        else:
            parsed = datetime.fromisoformat(value)
        self._now = parsed
        self._notify()

    def advance_day(self) -> None:
        """Move forward exactly one calendar day, keeping the time of day."""
        self._now = self._now + timedelta(days=1)
        logger.debug(f"Clock advanced to {self.now_iso_date()}")
        self._notify()

    def reset(self) -> None:
        """Back to the real wall-clock date."""
        self._now = datetime.now()
        self._notify()

    # ---------- Observers ----------
    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback; returns the matching unsubscribe function."""
        token = self._next_token
        self._next_token += 1
        self._subscribers[token] = callback

        def unsubscribe() -> None:
            self._subscribers.pop(token, None)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _notify(self) -> None:
        # Snapshot: callbacks may unsubscribe themselves while running
        for callback in list(self._subscribers.values()):
            callback()


# Default clock for the HTTP surface
default_clock = SimulationClock()
