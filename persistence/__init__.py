"""Roadmap persistence collaborators."""

from pathlib import Path
from typing import Optional, Union

from config import settings
from .base import InMemoryRoadmapRepository, RoadmapPersistenceError, RoadmapRepository
from .json_file import JsonFileRoadmapRepository


def get_repository(
    path: Optional[Union[str, Path]] = None,
    persist: Optional[bool] = None,
) -> RoadmapRepository:
    """Build a repository from settings.

    Args:
        path: Roadmap file; defaults to settings.roadmap_file.
        persist: Force file persistence on or off; defaults to settings.persist_roadmap.
            An explicit path implies file persistence.
    """
    if persist is None:
        persist = settings.persist_roadmap or path is not None
    if not persist:
        return InMemoryRoadmapRepository()
    return JsonFileRoadmapRepository(path or settings.get_roadmap_path())


__all__ = [
    "RoadmapRepository",
    "RoadmapPersistenceError",
    "InMemoryRoadmapRepository",
    "JsonFileRoadmapRepository",
    "get_repository",
]
