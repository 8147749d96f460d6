"""
Port horloge.

Les regles temporelles (expiration des devis, horodatage) ne lisent jamais
l'heure systeme directement : elles recoivent un IClock injectable, ce qui
rend les tests d'expiration deterministes.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from workshop.core.clock import utcnow

__all__ = ["IClock", "utcnow"]


class IClock(ABC):
    """Source de l'instant courant."""

    @abstractmethod
    def now(self) -> datetime:
        """Retourne l'instant courant (UTC naif)."""
        ...
