"""Tree walks over a roadmap producing analysis and validation contracts.

Every function here is read-only. The store calls them under its lock and
hands the results to roadmap.formatting.
"""

from typing import List, Optional

from pydantic import AnyUrl, TypeAdapter, ValidationError

from config import settings
from contracts import (
    ConceptGap,
    IssueKind,
    IssueSeverity,
    Module,
    ModuleGap,
    QualityIssue,
    QualityReport,
    Resource,
    ResourceIssue,
    ResourceReport,
    Roadmap,
    RoadmapAnalysis,
)

_any_url = TypeAdapter(AnyUrl)


def parse_absolute_url(url: str) -> Optional[AnyUrl]:
    """Parse url as an absolute URI; None if it is relative or malformed."""
    try:
        return _any_url.validate_python(url.strip())
    except ValidationError:
        return None


def analyze_roadmap(roadmap: Roadmap) -> Optional[RoadmapAnalysis]:
    """Aggregate counts and averages; None for a roadmap with no modules."""
    modules = roadmap.modules
    if not modules:
        return None

    # Modules without topics stay out of the denominator
    with_topics = [m for m in modules if m.topics]
    average_confidence = (
        sum(m.average_confidence for m in with_topics) / len(with_topics) if with_topics else 0.0
    )

    return RoadmapAnalysis(
        status=roadmap.status,
        total_modules=len(modules),
        total_topics=sum(len(m.topics) for m in modules),
        total_concepts=sum(len(t.concepts) for m in modules for t in m.topics),
        total_resources=sum(len(m.resources) for m in modules),
        total_hours=sum(m.estimated_hours for m in modules),
        average_confidence=average_confidence,
        created_at=roadmap.created_at,
        last_modified_at=roadmap.last_modified_at,
    )


def validate_quality(roadmap: Roadmap, min_concepts: Optional[int] = None) -> QualityReport:
    """Check that modules have topics and resources and topics have enough concepts.

    Issue order: few-concept warnings as encountered during the walk, then
    modules without topics, topics without concepts, modules without resources.
    """
    min_concepts = min_concepts or settings.min_concepts_per_topic

    warnings: List[QualityIssue] = []
    without_topics: List[QualityIssue] = []
    without_concepts: List[QualityIssue] = []
    without_resources: List[QualityIssue] = []

    for module in roadmap.modules:
        if not module.topics:
            without_topics.append(QualityIssue(
                kind=IssueKind.MODULE_WITHOUT_TOPICS,
                severity=IssueSeverity.CRITICAL,
                module_title=module.title,
            ))
        else:
            for topic in module.topics:
                count = len(topic.concepts)
                if count == 0:
                    without_concepts.append(QualityIssue(
                        kind=IssueKind.TOPIC_WITHOUT_CONCEPTS,
                        severity=IssueSeverity.CRITICAL,
                        module_title=module.title,
                        topic_title=topic.title,
                    ))
                elif count < min_concepts:
                    warnings.append(QualityIssue(
                        kind=IssueKind.TOPIC_FEW_CONCEPTS,
                        severity=IssueSeverity.WARNING,
                        module_title=module.title,
                        topic_title=topic.title,
                        concept_count=count,
                    ))

        if not module.resources:
            without_resources.append(QualityIssue(
                kind=IssueKind.MODULE_WITHOUT_RESOURCES,
                severity=IssueSeverity.CRITICAL,
                module_title=module.title,
            ))

    return QualityReport(issues=warnings + without_topics + without_concepts + without_resources)


def topics_needing_concepts(roadmap: Roadmap, min_concepts: Optional[int] = None) -> List[ConceptGap]:
    """Every topic with fewer than min_concepts key concepts, in tree order."""
    min_concepts = min_concepts or settings.min_concepts_per_topic
    return [
        ConceptGap(module_title=m.title, topic_title=t.title, concept_count=len(t.concepts))
        for m in roadmap.modules
        for t in m.topics
        if len(t.concepts) < min_concepts
    ]


def modules_needing_topics(roadmap: Roadmap) -> List[ModuleGap]:
    return [ModuleGap(module_title=m.title) for m in roadmap.modules if not m.topics]


def modules_needing_resources(roadmap: Roadmap) -> List[ModuleGap]:
    return [ModuleGap(module_title=m.title) for m in roadmap.modules if not m.resources]


def _resource_content_issues(module: Module, resource: Resource) -> List[ResourceIssue]:
    """Missing-title and placeholder checks shared by the module check."""
    issues = []
    if not resource.title.strip():
        issues.append(ResourceIssue(
            module_title=module.title, resource_title=resource.title,
            url=resource.url, problem="missing_title",
        ))

    marker = settings.placeholder_marker.lower()
    if marker in resource.title.lower() or marker in resource.description.lower():
        issues.append(ResourceIssue(
            module_title=module.title, resource_title=resource.title,
            url=resource.url, problem="placeholder",
        ))
    return issues


def validate_module_resources(module: Module) -> ResourceReport:
    """URL, title and placeholder checks for one module.

    A URL only needs to parse as an absolute URI here; the scheme is not checked.
    """
    issues: List[ResourceIssue] = []
    for resource in module.resources:
        if not resource.url.strip():
            issues.append(ResourceIssue(
                module_title=module.title, resource_title=resource.title,
                url=resource.url, problem="missing_url",
            ))
        elif parse_absolute_url(resource.url) is None:
            issues.append(ResourceIssue(
                module_title=module.title, resource_title=resource.title,
                url=resource.url, problem="invalid_url",
            ))
        issues.extend(_resource_content_issues(module, resource))

    return ResourceReport(
        issues=issues,
        resources_checked=len(module.resources),
        resource_counts=[(module.title, len(module.resources))],
    )


def validate_resource_urls(roadmap: Roadmap) -> ResourceReport:
    """Roadmap-wide URL check; the scheme must be one of settings.allowed_url_schemes."""
    allowed = {s.lower() for s in settings.allowed_url_schemes}
    issues: List[ResourceIssue] = []
    counts = []
    checked = 0

    for module in roadmap.modules:
        counts.append((module.title, len(module.resources)))
        for resource in module.resources:
            checked += 1
            if not resource.url.strip():
                problem = "missing_url"
            else:
                parsed = parse_absolute_url(resource.url)
                if parsed is None:
                    problem = "invalid_url"
                elif parsed.scheme.lower() not in allowed:
                    problem = "disallowed_scheme"
                else:
                    continue
            issues.append(ResourceIssue(
                module_title=module.title, resource_title=resource.title,
                url=resource.url, problem=problem,
            ))

    return ResourceReport(issues=issues, resources_checked=checked, resource_counts=counts)
