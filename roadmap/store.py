"""Roadmap store - owner of the single mutable roadmap tree.

Every operation addresses nodes by title (first exact match wins) and
returns a human-readable reply. Missing roadmaps, modules, topics and
resources are reported in that reply; nothing here raises for them.
"""

import functools
import logging
import threading
from datetime import timedelta
from typing import Callable, Dict, List, Optional, Union

from contracts import (
    CONFIDENCE_MAX,
    CONFIDENCE_MIN,
    Concept,
    Module,
    Resource,
    ResourceType,
    Roadmap,
    RoadmapStatus,
    Topic,
)
from contracts.adapters import parse_resource_blocks
from persistence import RoadmapPersistenceError, RoadmapRepository, get_repository
from . import analysis, formatting

logger = logging.getLogger(__name__)

NO_ROADMAP = "No roadmap available"
NO_ROADMAP_TO_VALIDATE = "No roadmap exists to validate."
NO_ROADMAP_EXISTS = "No roadmap exists."
EMPTY_ROADMAP = "Roadmap is empty - no modules available"

# Largest hour count a timedelta can hold
MAX_DURATION_HOURS = timedelta.max.days * 24

RoadmapListener = Callable[[Optional[Roadmap]], None]


def _locked(method):
    """Run the method while holding the store lock."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


def _module_not_found(title: str) -> str:
    return f"Module '{title}' not found"


def _topic_not_found(topic_title: str, module_title: str) -> str:
    return f"Topic '{topic_title}' not found in module '{module_title}'"


def _duration_problem(hours: int) -> Optional[str]:
    if hours < 0:
        return "Estimated duration must be a non-negative number of hours"
    if hours > MAX_DURATION_HOURS:
        return f"Estimated duration is too large (maximum {MAX_DURATION_HOURS} hours)"
    return None


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


class RoadmapStore:
    """Holds at most one roadmap and exposes title-keyed operations on it.

    A single re-entrant lock guards the roadmap reference, so readers always
    see a fully applied mutation. When a repository is given, the saved
    roadmap is loaded on construction and every successful mutation is saved.
    """

    def __init__(
        self,
        roadmap: Optional[Roadmap] = None,
        repository: Optional[RoadmapRepository] = None,
    ):
        """Initialize the store.

        Args:
            roadmap: Starting roadmap; takes precedence over the repository copy.
            repository: Optional save/load collaborator.
        """
        self._lock = threading.RLock()
        self._repository = repository
        self._listeners: List[RoadmapListener] = []
        self._module_index: Dict[str, int] = {}

        if roadmap is not None:
            self._roadmap: Optional[Roadmap] = roadmap.model_copy(deep=True)
        else:
            self._roadmap = self._load_from_repository()
        self._reindex()

    # --- internals ---

    def _load_from_repository(self) -> Optional[Roadmap]:
        if self._repository is None:
            return None
        try:
            return self._repository.load()
        except RoadmapPersistenceError:
            logger.exception("Failed to load roadmap from %s repository, starting without one",
                             self._repository.name)
            return None

    def _reindex(self) -> None:
        """Rebuild the module title -> first position map."""
        index: Dict[str, int] = {}
        if self._roadmap is not None:
            for position, module in enumerate(self._roadmap.modules):
                index.setdefault(module.title, position)
        self._module_index = index

    def _find_module(self, title: str) -> Optional[Module]:
        position = self._module_index.get(title)
        if position is None:
            return None
        return self._roadmap.modules[position]

    def _snapshot(self) -> Optional[Roadmap]:
        return self._roadmap.model_copy(deep=True) if self._roadmap is not None else None

    def _commit(self, action: str, touch: bool = True) -> None:
        """Stamp, persist and announce a successful mutation."""
        if touch and self._roadmap is not None:
            self._roadmap.touch()
        logger.debug("Roadmap mutation: %s", action)

        if self._repository is not None:
            try:
                if self._roadmap is None:
                    self._repository.clear()
                else:
                    self._repository.save(self._roadmap)
            except RoadmapPersistenceError:
                logger.exception("Failed to persist roadmap after %s", action)

        for listener in list(self._listeners):
            try:
                listener(self._snapshot())
            except Exception:
                logger.exception("Roadmap listener %r failed after %s", listener, action)

    # --- whole-roadmap access ---

    @_locked
    def get_roadmap(self) -> Optional[Roadmap]:
        """Deep copy of the current roadmap, or None."""
        return self._snapshot()

    @_locked
    def set_roadmap(self, roadmap: Roadmap) -> None:
        """Replace the current roadmap with a copy of roadmap."""
        self._roadmap = roadmap.model_copy(deep=True)
        self._reindex()
        self._commit("set roadmap", touch=False)

    @_locked
    def clear_roadmap(self) -> None:
        self._roadmap = None
        self._reindex()
        self._commit("clear roadmap", touch=False)

    def subscribe(self, listener: RoadmapListener) -> None:
        """Call listener with a roadmap copy (or None) after every change."""
        with self._lock:
            self._listeners.append(listener)

    def unsubscribe(self, listener: RoadmapListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    # --- roadmap management ---

    @_locked
    def initialize_roadmap(self, profile_summary: str = "") -> str:
        """Initialize a new, empty draft roadmap, replacing any existing one."""
        self._roadmap = Roadmap()
        self._reindex()
        logger.debug("Initializing roadmap from a %d character profile summary", len(profile_summary or ""))
        self._commit("initialize roadmap")
        return "Roadmap initialized successfully"

    @_locked
    def update_status(self, status: Union[RoadmapStatus, str]) -> str:
        """Update roadmap status."""
        if self._roadmap is None:
            return "No roadmap available to update"
        try:
            status = RoadmapStatus.parse(status)
        except ValueError as e:
            return str(e)

        self._roadmap.status = status
        self._commit(f"status -> {status.value}")
        return f"Roadmap status updated to {status.value}"

    @_locked
    def get_summary(self) -> str:
        """Get roadmap summary with module, topic and resource counts and status."""
        if self._roadmap is None:
            return NO_ROADMAP
        return formatting.format_summary(self._roadmap)

    # --- modules ---

    @_locked
    def add_module(self, title: str, description: str, estimated_duration_hours: int) -> str:
        """Add a new module to the end of the roadmap."""
        if self._roadmap is None:
            return NO_ROADMAP
        if _blank(title):
            return "Module title is required"
        problem = _duration_problem(estimated_duration_hours)
        if problem:
            return problem

        module = Module(
            title=title,
            description=description or "",
            order=len(self._roadmap.modules) + 1,
            estimated_duration=timedelta(hours=estimated_duration_hours),
        )
        self._roadmap.modules.append(module)
        self._reindex()
        self._commit(f"add module '{title}'")
        return f"Module '{title}' added successfully"

    @_locked
    def update_module(
        self,
        current_title: str,
        new_title: str,
        description: str,
        estimated_duration_hours: int,
    ) -> str:
        """Update title, description and duration of an existing module."""
        if self._roadmap is None:
            return NO_ROADMAP
        module = self._find_module(current_title)
        if module is None:
            return _module_not_found(current_title)
        if _blank(new_title):
            return "Module title is required"
        problem = _duration_problem(estimated_duration_hours)
        if problem:
            return problem

        module.title = new_title
        module.description = description or ""
        module.estimated_duration = timedelta(hours=estimated_duration_hours)
        self._reindex()
        self._commit(f"update module '{current_title}'")
        return "Module updated successfully"

    @_locked
    def remove_module(self, title: str) -> str:
        """Remove a module and renumber the remaining ones 1..N."""
        if self._roadmap is None:
            return NO_ROADMAP
        module = self._find_module(title)
        if module is None:
            return _module_not_found(title)

        del self._roadmap.modules[self._module_index[title]]
        self._roadmap.renumber_modules()
        self._reindex()
        self._commit(f"remove module '{title}'")
        return f"Module '{title}' removed successfully"

    @_locked
    def get_all_modules(self) -> str:
        """One line per module in order, with duration, topic and resource counts."""
        if self._roadmap is None:
            return NO_ROADMAP
        if not self._roadmap.modules:
            return "No modules in roadmap"
        modules = sorted(self._roadmap.modules, key=lambda m: m.order)
        return "\n".join(formatting.format_module_line(m) for m in modules)

    # --- topics ---

    @_locked
    def add_topic_to_module(
        self,
        module_title: str,
        topic_title: str,
        topic_description: str,
        confidence_score: int = 0,
    ) -> str:
        """Add a topic to a module. The confidence score is stored as given."""
        if self._roadmap is None:
            return NO_ROADMAP
        module = self._find_module(module_title)
        if module is None:
            return _module_not_found(module_title)
        if _blank(topic_title):
            return "Topic title is required"

        module.topics.append(Topic(
            title=topic_title,
            description=topic_description or "",
            order=len(module.topics) + 1,
            confidence_score=confidence_score,
        ))
        self._commit(f"add topic '{topic_title}' to '{module_title}'")
        return f"Topic '{topic_title}' added to module '{module_title}'"

    @_locked
    def update_topic_confidence(self, module_title: str, topic_title: str, confidence_score: int) -> str:
        """Set a topic's confidence, clamped to 0-100.

        The reply reports the stored (clamped) score, not the value passed in.
        """
        if self._roadmap is None:
            return NO_ROADMAP
        module = self._find_module(module_title)
        if module is None:
            return _module_not_found(module_title)
        topic = module.find_topic(topic_title)
        if topic is None:
            return _topic_not_found(topic_title, module_title)

        topic.confidence_score = max(CONFIDENCE_MIN, min(CONFIDENCE_MAX, confidence_score))
        self._commit(f"confidence of '{topic_title}' -> {topic.confidence_score}")
        return f"Topic '{topic_title}' confidence updated to {topic.confidence_score}"

    @_locked
    def get_module_topics(self, module_title: str) -> str:
        """One line per topic with confidence and concept count."""
        if self._roadmap is None:
            return NO_ROADMAP
        module = self._find_module(module_title)
        if module is None:
            return _module_not_found(module_title)
        if not module.topics:
            return f"No topics in module '{module_title}'"
        topics = sorted(module.topics, key=lambda t: t.order)
        return "\n".join(formatting.format_topic_line(t) for t in topics)

    # --- concepts ---

    @_locked
    def add_concept_to_topic(
        self,
        module_title: str,
        topic_title: str,
        concept_title: str,
        concept_description: str,
    ) -> str:
        """Add a key concept to a topic."""
        if self._roadmap is None:
            return NO_ROADMAP
        module = self._find_module(module_title)
        if module is None:
            return _module_not_found(module_title)
        topic = module.find_topic(topic_title)
        if topic is None:
            return _topic_not_found(topic_title, module_title)
        if _blank(concept_title):
            return "Concept title is required"

        topic.concepts.append(Concept(
            title=concept_title,
            description=concept_description or "",
            order=len(topic.concepts) + 1,
        ))
        self._commit(f"add concept '{concept_title}' to '{topic_title}'")
        return f"Concept '{concept_title}' added to topic '{topic_title}'"

    @_locked
    def get_topic_concepts(self, module_title: str, topic_title: str) -> str:
        if self._roadmap is None:
            return NO_ROADMAP
        module = self._find_module(module_title)
        if module is None:
            return _module_not_found(module_title)
        topic = module.find_topic(topic_title)
        if topic is None:
            return _topic_not_found(topic_title, module_title)
        if not topic.concepts:
            return f"No concepts in topic '{topic_title}'"
        concepts = sorted(topic.concepts, key=lambda c: c.order)
        return "\n".join(f"{c.order}. {c.title}: {c.description}" for c in concepts)

    # --- resources ---

    @_locked
    def add_resource_to_module(
        self,
        module_title: str,
        title: str,
        url: str,
        resource_type: Union[ResourceType, str],
        source: str,
        description: str,
    ) -> str:
        """Attach a resource verbatim; URLs are only checked by the validation operations."""
        if self._roadmap is None:
            return NO_ROADMAP
        module = self._find_module(module_title)
        if module is None:
            return _module_not_found(module_title)
        try:
            resource_type = ResourceType.parse(resource_type)
        except ValueError as e:
            return str(e)

        module.resources.append(Resource(
            title=title or "",
            url=url or "",
            type=resource_type,
            source=source or "",
            description=description or "",
        ))
        self._commit(f"add resource '{title}' to '{module_title}'")
        return f"Resource '{title}' added to module '{module_title}'"

    @_locked
    def add_resources_from_text(self, module_title: str, resources_text: str) -> str:
        """Attach every **RESOURCE block found in agent output.

        When no block parses, the raw text is kept as a single Article
        resource with no URL so that URL validation flags it.
        """
        if self._roadmap is None:
            return NO_ROADMAP
        module = self._find_module(module_title)
        if module is None:
            return _module_not_found(module_title)

        resources = parse_resource_blocks(resources_text or "")
        if resources:
            module.resources.extend(resources)
            self._commit(f"add {len(resources)} parsed resources to '{module_title}'")
            return f"Added {len(resources)} resources to module '{module_title}' successfully."

        module.resources.append(Resource(
            title=f"Resources for {module_title}",
            description=resources_text or "",
            type=ResourceType.ARTICLE,
        ))
        self._commit(f"add fallback resource to '{module_title}'")
        return f"Added general resource description to module '{module_title}' successfully."

    @_locked
    def get_module_resources(self, module_title: str) -> str:
        if self._roadmap is None:
            return NO_ROADMAP
        module = self._find_module(module_title)
        if module is None:
            return _module_not_found(module_title)
        if not module.resources:
            return f"No resources in module '{module_title}'"
        return "\n".join(
            f"• {r.title} ({r.type.value}) - {r.source} - {r.url}" for r in module.resources
        )

    @_locked
    def remove_resource_from_module(self, module_title: str, resource_title: str) -> str:
        if self._roadmap is None:
            return NO_ROADMAP
        module = self._find_module(module_title)
        if module is None:
            return _module_not_found(module_title)
        resource = module.find_resource(resource_title)
        if resource is None:
            return f"Resource '{resource_title}' not found in module '{module_title}'"

        module.resources.remove(resource)
        self._commit(f"remove resource '{resource_title}' from '{module_title}'")
        return f"Resource '{resource_title}' removed from module '{module_title}'"

    # --- resource quality ---

    @_locked
    def validate_module_resource_quality(self, module_title: str) -> str:
        """Check one module's resources for URLs, titles and placeholder content."""
        if self._roadmap is None:
            return NO_ROADMAP
        module = self._find_module(module_title)
        if module is None:
            return _module_not_found(module_title)
        if not module.resources:
            return f"Module '{module_title}' has no resources to validate"
        report = analysis.validate_module_resources(module)
        return formatting.format_module_resource_report(module_title, report)

    @_locked
    def get_modules_without_resources(self) -> str:
        if self._roadmap is None:
            return NO_ROADMAP
        gaps = analysis.modules_needing_resources(self._roadmap)
        if not gaps:
            return "✅ All modules have resources"
        return f"❌ Modules missing resources: {', '.join(g.module_title for g in gaps)}"

    @_locked
    def validate_all_resource_urls(self) -> str:
        """Roadmap-wide URL check with a per-module resource count summary."""
        if self._roadmap is None:
            return NO_ROADMAP
        report = analysis.validate_resource_urls(self._roadmap)
        return formatting.format_url_report(report)

    # --- analysis ---

    @_locked
    def get_roadmap_analysis(self) -> str:
        """Totals, duration and average confidence over the whole roadmap."""
        if self._roadmap is None:
            return NO_ROADMAP
        result = analysis.analyze_roadmap(self._roadmap)
        if result is None:
            return EMPTY_ROADMAP
        return formatting.format_analysis(result)

    @_locked
    def validate_roadmap_quality(self) -> str:
        """Check that all modules have topics and resources and all topics have key concepts."""
        if self._roadmap is None:
            return NO_ROADMAP_TO_VALIDATE
        return formatting.format_quality_report(analysis.validate_quality(self._roadmap))

    @_locked
    def get_topics_needing_concepts(self) -> str:
        if self._roadmap is None:
            return NO_ROADMAP_EXISTS
        return formatting.format_concept_gaps(analysis.topics_needing_concepts(self._roadmap))

    @_locked
    def get_modules_needing_topics(self) -> str:
        if self._roadmap is None:
            return NO_ROADMAP_EXISTS
        return formatting.format_module_gaps(analysis.modules_needing_topics(self._roadmap), "topics")

    @_locked
    def get_modules_needing_resources(self) -> str:
        if self._roadmap is None:
            return NO_ROADMAP_EXISTS
        return formatting.format_module_gaps(analysis.modules_needing_resources(self._roadmap), "resources")


# Global store for the current process
_current_store: Optional[RoadmapStore] = None


def get_roadmap_store() -> RoadmapStore:
    """Get the current roadmap store, creating one from settings if needed."""
    global _current_store
    if _current_store is None:
        _current_store = RoadmapStore(repository=get_repository())
    return _current_store


def reset_roadmap_store(repository: Optional[RoadmapRepository] = None) -> RoadmapStore:
    """Replace the current store, e.g. between agent sessions or tests."""
    global _current_store
    _current_store = RoadmapStore(repository=repository)
    return _current_store
