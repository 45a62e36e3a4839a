"""Analysis and validation contracts produced by walking a roadmap tree."""

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, Field

from .roadmap_contracts import RoadmapStatus


class IssueSeverity(str, Enum):
    """Severity of a quality finding."""
    CRITICAL = "critical"  # Empty module or topic, or module with no resources
    WARNING = "warning"  # Topic below the recommended concept count


class IssueKind(str, Enum):
    """Which completeness rule a finding violates."""
    MODULE_WITHOUT_TOPICS = "module_without_topics"
    TOPIC_WITHOUT_CONCEPTS = "topic_without_concepts"
    TOPIC_FEW_CONCEPTS = "topic_few_concepts"
    MODULE_WITHOUT_RESOURCES = "module_without_resources"


class QualityIssue(BaseModel):
    """A single completeness finding, in tree-walk order."""
    kind: IssueKind
    severity: IssueSeverity
    module_title: str
    topic_title: str = ""
    concept_count: int = 0


class QualityReport(BaseModel):
    """Result of the multi-rule completeness check."""
    issues: List[QualityIssue] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        """Any finding, critical or not, fails the report."""
        return not self.issues

    def of_kind(self, kind: IssueKind) -> List[QualityIssue]:
        return [i for i in self.issues if i.kind == kind]

    def has_critical_issues(self) -> bool:
        return any(i.severity == IssueSeverity.CRITICAL for i in self.issues)


class ResourceIssue(BaseModel):
    """A problem found on one resource."""
    module_title: str
    resource_title: str
    url: str
    problem: str = Field(..., description="missing_url, invalid_url, disallowed_scheme, missing_title or placeholder")


class ResourceReport(BaseModel):
    """Result of checking resource URLs and content."""
    issues: List[ResourceIssue] = Field(default_factory=list)
    resources_checked: int = 0
    resource_counts: List[tuple[str, int]] = Field(
        default_factory=list, description="(module title, resource count) in roadmap order"
    )

    @property
    def passed(self) -> bool:
        return not self.issues


class RoadmapAnalysis(BaseModel):
    """Aggregate statistics over a non-empty roadmap."""
    status: RoadmapStatus
    total_modules: int = Field(..., ge=1)
    total_topics: int = Field(..., ge=0)
    total_concepts: int = Field(..., ge=0)
    total_resources: int = Field(..., ge=0)
    total_hours: float
    average_confidence: float = Field(
        ..., description="Mean of module average confidence over modules that have topics"
    )
    created_at: datetime
    last_modified_at: datetime


class ConceptGap(BaseModel):
    """A topic below the recommended number of key concepts."""
    module_title: str
    topic_title: str
    concept_count: int


class ModuleGap(BaseModel):
    """A module missing topics or resources."""
    module_title: str
    count: int = 0
