"""Pydantic contracts for Roadmap Forge.

The roadmap tree and every analysis result are typed through these contracts.
"""

from .roadmap_contracts import (
    CONFIDENCE_MIN,
    CONFIDENCE_MAX,
    RoadmapStatus,
    ResourceType,
    Concept,
    Resource,
    Topic,
    Module,
    Roadmap,
)

from .analysis_contracts import (
    IssueSeverity,
    IssueKind,
    QualityIssue,
    QualityReport,
    ResourceIssue,
    ResourceReport,
    RoadmapAnalysis,
    ConceptGap,
    ModuleGap,
)

__all__ = [
    # Roadmap tree
    "CONFIDENCE_MIN",
    "CONFIDENCE_MAX",
    "RoadmapStatus",
    "ResourceType",
    "Concept",
    "Resource",
    "Topic",
    "Module",
    "Roadmap",
    # Analysis
    "IssueSeverity",
    "IssueKind",
    "QualityIssue",
    "QualityReport",
    "ResourceIssue",
    "ResourceReport",
    "RoadmapAnalysis",
    "ConceptGap",
    "ModuleGap",
]
