"""
Instant courant du domaine.

Toutes les dates du domaine sont des datetime UTC naifs, comme en base.
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Instant courant en UTC, sans tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
