"""Base roadmap repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from contracts import Roadmap


class RoadmapPersistenceError(Exception):
    """A roadmap could not be loaded or saved."""


class RoadmapRepository(ABC):
    """Abstract save/load collaborator for the roadmap store."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Repository name (memory, json)."""
        pass

    @abstractmethod
    def load(self) -> Optional[Roadmap]:
        """Return the saved roadmap, or None if nothing has been saved.

        Raises:
            RoadmapPersistenceError: If saved data exists but cannot be read.
        """
        pass

    @abstractmethod
    def save(self, roadmap: Roadmap) -> None:
        """Persist the roadmap, replacing any previous copy.

        Raises:
            RoadmapPersistenceError: If the roadmap cannot be written.
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Forget the saved roadmap."""
        pass


class InMemoryRoadmapRepository(RoadmapRepository):
    """Keeps a deep copy of the last saved roadmap."""

    def __init__(self, roadmap: Optional[Roadmap] = None):
        self._roadmap = roadmap.model_copy(deep=True) if roadmap else None
        self.save_count = 0

    @property
    def name(self) -> str:
        return "memory"

    def load(self) -> Optional[Roadmap]:
        return self._roadmap.model_copy(deep=True) if self._roadmap else None

    def save(self, roadmap: Roadmap) -> None:
        self._roadmap = roadmap.model_copy(deep=True)
        self.save_count += 1

    def clear(self) -> None:
        self._roadmap = None
