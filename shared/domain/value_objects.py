"""
Common Value Objects

Value objects used across multiple domains:
- StayPeriod: half-open [start, end) interval of a stay or a busy window
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

SECONDS_PER_NIGHT = 86400


@dataclass(frozen=True)
class StayPeriod:
    """
    Stay period value object

    Represents a range from start (inclusive) to end (exclusive).
    Used for bookings, availability checks and external calendar blocks.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start ({self.start}) must be before end ({self.end})")

    def overlaps_with(self, other: 'StayPeriod') -> bool:
        """
        Check if this period overlaps with another

        Note: end is exclusive, so adjacent periods don't overlap.

        Examples:
            - [1, 5) overlaps with [4, 8) -> True
            - [1, 5) overlaps with [5, 8) -> False (adjacent)
        """
        if not isinstance(other, StayPeriod):
            raise TypeError("Can only check overlap with another StayPeriod")
        return self.start < other.end and other.start < self.end

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def nights(self) -> int:
        """Количество ночей: неполные сутки округляются вверх."""
        return math.ceil(self.duration.total_seconds() / SECONDS_PER_NIGHT)

    def price_for(self, nightly_rate: Decimal) -> Decimal:
        return nightly_rate * self.nights

    def __str__(self):
        return f"{self.start.isoformat()} - {self.end.isoformat()}"
