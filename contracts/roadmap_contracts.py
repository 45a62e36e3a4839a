"""Roadmap tree contracts: Roadmap -> Module -> Topic -> Concept, plus Resources."""

import uuid
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

CONFIDENCE_MIN = 0
CONFIDENCE_MAX = 100


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _NamedEnum(str, Enum):
    """Enum whose wire value is the member name."""

    @classmethod
    def parse(cls, value: Union[str, "_NamedEnum"]):
        """Resolve a member or a case-insensitive member name.

        Raises:
            ValueError: If the name matches no member.
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        raise ValueError(
            f"Unknown {cls.__name__} '{value}'. Valid values: {', '.join(cls.names())}"
        )

    @classmethod
    def names(cls) -> List[str]:
        return [member.value for member in cls]


class RoadmapStatus(_NamedEnum):
    """Lifecycle state of a roadmap."""
    DRAFT = "Draft"
    AWAITING_FEEDBACK = "AwaitingFeedback"
    APPROVED = "Approved"
    ACTIVE = "Active"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"


class ResourceType(_NamedEnum):
    """Kind of learning resource attached to a module."""
    DOCUMENTATION = "Documentation"
    BOOK = "Book"
    TUTORIAL = "Tutorial"
    VIDEO = "Video"
    GAME = "Game"
    ARTICLE = "Article"
    COURSE = "Course"


class _RoadmapNode(BaseModel):
    model_config = ConfigDict(validate_assignment=True)


class Concept(_RoadmapNode):
    """A key concept inside a topic."""
    title: str = Field(..., description="Concept title")
    description: str = Field(default="", description="What the learner should understand")
    order: int = Field(..., ge=1, description="1-based position assigned at creation")


class Resource(_RoadmapNode):
    """A learning resource attached to a module. Stored verbatim; checked only by validation."""
    title: str = Field(default="", description="Resource title")
    url: str = Field(default="", description="Resource URL")
    type: ResourceType = Field(default=ResourceType.DOCUMENTATION, description="Resource kind")
    source: str = Field(default="", description="Publisher or site")
    description: str = Field(default="", description="Why this resource is useful")


class Topic(_RoadmapNode):
    """A topic inside a module, owning its key concepts."""
    title: str = Field(..., description="Topic title, unique within its module")
    description: str = Field(default="", description="Topic description")
    order: int = Field(..., ge=1, description="1-based position assigned at creation")
    confidence_score: int = Field(default=0, description="Learner confidence, 0-100 after any update")
    concepts: List[Concept] = Field(default_factory=list)


class Module(_RoadmapNode):
    """A roadmap module owning topics and resources."""
    title: str = Field(..., description="Module title, used as lookup key")
    description: str = Field(default="", description="Module description")
    order: int = Field(..., ge=1, description="1-based position, kept equal to list position")
    estimated_duration: timedelta = Field(default=timedelta(0), description="Estimated study time")
    topics: List[Topic] = Field(default_factory=list)
    resources: List[Resource] = Field(default_factory=list)

    @property
    def estimated_hours(self) -> float:
        return self.estimated_duration.total_seconds() / 3600

    @property
    def average_confidence(self) -> int:
        """Mean topic confidence truncated to int; 0 when the module has no topics."""
        if not self.topics:
            return 0
        return int(sum(t.confidence_score for t in self.topics) / len(self.topics))

    def find_topic(self, title: str) -> Optional[Topic]:
        """First topic whose title matches exactly."""
        return next((t for t in self.topics if t.title == title), None)

    def find_resource(self, title: str) -> Optional[Resource]:
        """First resource whose title matches exactly."""
        return next((r for r in self.resources if r.title == title), None)


class Roadmap(_RoadmapNode):
    """The root of the learning roadmap tree."""
    roadmap_id: str = Field(
        default_factory=lambda: uuid.uuid4().hex,
        description="Surrogate id for persistence; operations address nodes by title",
    )
    status: RoadmapStatus = Field(default=RoadmapStatus.DRAFT)
    modules: List[Module] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    last_modified_at: datetime = Field(default_factory=utc_now)

    def touch(self) -> None:
        """Record a mutation."""
        self.last_modified_at = utc_now()

    def renumber_modules(self) -> None:
        """Compact module order to 1..N in list order."""
        for position, module in enumerate(self.modules, start=1):
            module.order = position
