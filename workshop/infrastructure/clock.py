"""Horloge systeme, implementation de production du port IClock."""

from datetime import datetime

from workshop.core.clock import utcnow
from workshop.core.ports.clock import IClock


class SystemClock(IClock):
    def now(self) -> datetime:
        return utcnow()
