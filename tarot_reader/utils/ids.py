"""Reading id generation."""

from __future__ import annotations

import itertools
from datetime import datetime
from typing import Callable, Optional


class ReadingIdGenerator:
    """Issues ids of the form ``R20250101-093000-001``.

    The counter lives on the instance, so two session engines in one process
    never share state.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or datetime.now
        self._counter = itertools.count(1)

    def now(self) -> datetime:
        return self._clock()

    def next_id(self, timestamp: Optional[datetime] = None) -> str:
        ts = timestamp or self.now()
        return f"R{ts:%Y%m%d-%H%M%S}-{next(self._counter):03d}"
