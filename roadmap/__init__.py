"""Roadmap state management: the store, tree analysis and reply formatting."""

from .store import (
    RoadmapStore,
    get_roadmap_store,
    reset_roadmap_store,
    NO_ROADMAP,
    EMPTY_ROADMAP,
)

__all__ = [
    "RoadmapStore",
    "get_roadmap_store",
    "reset_roadmap_store",
    "NO_ROADMAP",
    "EMPTY_ROADMAP",
]
