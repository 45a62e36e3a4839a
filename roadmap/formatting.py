"""Render roadmap contracts as the plain-text replies agents read."""

from datetime import datetime
from typing import List

from config import settings
from contracts import (
    ConceptGap,
    IssueKind,
    Module,
    ModuleGap,
    QualityReport,
    ResourceIssue,
    ResourceReport,
    Roadmap,
    RoadmapAnalysis,
    Topic,
)


def format_hours(hours: float) -> str:
    """10.0 -> '10', 1.5 -> '1.5'."""
    if float(hours).is_integer():
        return str(int(hours))
    return f"{round(hours, 2)}"


def _timestamp(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M")


def format_summary(roadmap: Roadmap) -> str:
    topics = sum(len(m.topics) for m in roadmap.modules)
    resources = sum(len(m.resources) for m in roadmap.modules)
    return (
        f"Roadmap Status: {roadmap.status.value}, Modules: {len(roadmap.modules)}, "
        f"Topics: {topics}, Resources: {resources}, Created: {roadmap.created_at:%Y-%m-%d}"
    )


def format_module_line(module: Module) -> str:
    return (
        f"{module.order}. {module.title} ({format_hours(module.estimated_hours)}h) - "
        f"{len(module.topics)} topics, {len(module.resources)} resources"
    )


def format_topic_line(topic: Topic) -> str:
    return f"{topic.order}. {topic.title} (Confidence: {topic.confidence_score}%) - {len(topic.concepts)} concepts"


def format_analysis(analysis: RoadmapAnalysis) -> str:
    lines = [
        "Roadmap Analysis:",
        f"- Status: {analysis.status.value}",
        f"- Total Modules: {analysis.total_modules}",
        f"- Total Topics: {analysis.total_topics}",
        f"- Total Concepts: {analysis.total_concepts}",
        f"- Total Resources: {analysis.total_resources}",
        f"- Total Estimated Duration: {format_hours(analysis.total_hours)} hours",
        f"- Average Confidence Score: {analysis.average_confidence:.1f}%",
        f"- Created: {_timestamp(analysis.created_at)}",
        f"- Last Modified: {_timestamp(analysis.last_modified_at)}",
    ]
    return "\n".join(lines)


def format_quality_report(report: QualityReport) -> str:
    if report.passed:
        return (
            "✅ Roadmap validation passed: All modules have topics, all topics have "
            "appropriate key concepts, and all modules have resources."
        )

    lines = [
        f"Module '{i.module_title}' > Topic '{i.topic_title}' has only {i.concept_count} "
        f"key concepts (should have {settings.concept_range_label()})"
        for i in report.of_kind(IssueKind.TOPIC_FEW_CONCEPTS)
    ]

    without_topics = report.of_kind(IssueKind.MODULE_WITHOUT_TOPICS)
    if without_topics:
        lines.append("CRITICAL: Modules without any topics:")
        lines.extend(f"Module '{i.module_title}'" for i in without_topics)

    without_concepts = report.of_kind(IssueKind.TOPIC_WITHOUT_CONCEPTS)
    if without_concepts:
        lines.append("CRITICAL: Topics without any key concepts:")
        lines.extend(f"Module '{i.module_title}' > Topic '{i.topic_title}'" for i in without_concepts)

    without_resources = report.of_kind(IssueKind.MODULE_WITHOUT_RESOURCES)
    if without_resources:
        lines.append("CRITICAL: Modules without any resources:")
        lines.extend(f"Module '{i.module_title}'" for i in without_resources)

    return "❌ Roadmap validation issues found:\n" + "\n".join(lines)


def format_concept_gaps(gaps: List[ConceptGap]) -> str:
    if not gaps:
        return "✅ All topics have sufficient key concepts."
    lines = [
        f"Module: '{g.module_title}' | Topic: '{g.topic_title}' | Current Concepts: {g.concept_count}"
        for g in gaps
    ]
    return (
        f"Topics needing key concepts (should have {settings.concept_range_label()} each):\n"
        + "\n".join(lines)
    )


def format_module_gaps(gaps: List[ModuleGap], noun: str) -> str:
    """noun is 'topics' or 'resources'."""
    if not gaps:
        return f"✅ All modules have {noun}."
    lines = [f"Module: '{g.module_title}' | Current {noun.capitalize()}: {g.count}" for g in gaps]
    return f"Modules needing {noun}:\n" + "\n".join(lines)


def _module_resource_issue_line(issue: ResourceIssue) -> str:
    if issue.problem == "missing_url":
        return f"Resource '{issue.resource_title}' is missing URL"
    if issue.problem == "invalid_url":
        return f"Resource '{issue.resource_title}' has invalid URL: {issue.url}"
    if issue.problem == "missing_title":
        return f"Resource with URL '{issue.url}' is missing title"
    return f"Resource '{issue.resource_title}' appears to be a placeholder"


def format_module_resource_report(module_title: str, report: ResourceReport) -> str:
    if report.passed:
        return (
            f"✅ All {report.resources_checked} resources in module '{module_title}' "
            f"have proper URLs and titles"
        )
    lines = [_module_resource_issue_line(i) for i in report.issues]
    return f"❌ Resource quality issues in module '{module_title}':\n" + "\n".join(lines)


def _url_issue_line(issue: ResourceIssue) -> str:
    prefix = f"Module '{issue.module_title}' - Resource '{issue.resource_title}'"
    if issue.problem == "missing_url":
        return f"{prefix}: Missing URL"
    if issue.problem == "invalid_url":
        return f"{prefix}: Invalid URL format"
    schemes = "/".join(s.upper() for s in settings.allowed_url_schemes)
    return f"{prefix}: URL must use {schemes}"


def format_url_report(report: ResourceReport) -> str:
    summary = "\n".join(f"- {title}: {count} resources" for title, count in report.resource_counts)
    if report.passed:
        return f"✅ All resources have valid URLs\n\nResource Summary:\n{summary}"
    lines = "\n".join(_url_issue_line(i) for i in report.issues)
    return f"❌ Resource URL validation issues:\n{lines}\n\nResource Summary:\n{summary}"
