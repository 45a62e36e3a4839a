"""Tests for roadmap analysis, quality validation and resource checks."""

import pytest

from contracts import IssueKind, IssueSeverity
from roadmap import RoadmapStore
from roadmap.analysis import (
    analyze_roadmap,
    parse_absolute_url,
    topics_needing_concepts,
    validate_quality,
)


@pytest.fixture
def store():
    s = RoadmapStore()
    s.initialize_roadmap("Profile")
    return s


def _complete_module(store, title, concepts=3, confidence=0):
    """Module with one topic holding `concepts` concepts and one valid resource."""
    store.add_module(title, "d", 10)
    store.add_topic_to_module(title, f"{title} topic", "t", confidence)
    for i in range(concepts):
        store.add_concept_to_topic(title, f"{title} topic", f"C{i}", "c")
    store.add_resource_to_module(title, f"{title} docs", "https://example.com/docs", "Documentation", "ex", "d")


class TestRoadmapAnalysis:
    """GetRoadmapAnalysis."""

    def test_no_roadmap_and_empty_roadmap_differ(self):
        store = RoadmapStore()
        absent = store.get_roadmap_analysis()
        store.initialize_roadmap("x")
        empty = store.get_roadmap_analysis()
        assert absent == "No roadmap available"
        assert empty == "Roadmap is empty - no modules available"
        assert absent != empty

    def test_average_confidence_excludes_modules_without_topics(self, store):
        store.add_module("A", "d", 10)
        store.add_topic_to_module("A", "T", "t", 80)
        store.add_module("B", "d", 20)
        store.add_topic_to_module("B", "T", "t", 90)
        store.add_module("C", "d", 5)
        result = store.get_roadmap_analysis()
        assert "Average Confidence Score: 85.0%" in result
        assert "Total Modules: 3" in result
        assert "Total Topics: 2" in result
        assert "Total Estimated Duration: 35 hours" in result

    def test_totals(self, store):
        _complete_module(store, "A", concepts=4)
        _complete_module(store, "B", concepts=2)
        analysis = analyze_roadmap(store.get_roadmap())
        assert analysis.total_modules == 2
        assert analysis.total_topics == 2
        assert analysis.total_concepts == 6
        assert analysis.total_resources == 2
        assert analysis.total_hours == 20

    def test_module_average_is_truncated(self, store):
        store.add_module("A", "d", 1)
        store.add_topic_to_module("A", "T1", "t", 50)
        store.add_topic_to_module("A", "T2", "t", 55)
        module = store.get_roadmap().modules[0]
        assert module.average_confidence == 52
        assert "Average Confidence Score: 52.0%" in store.get_roadmap_analysis()

    def test_negative_confidence_is_reported(self, store):
        store.add_module("M", "d", 1)
        store.add_topic_to_module("M", "T", "t", -10)
        result = store.get_roadmap_analysis()
        assert "Average Confidence Score: -10.0%" in result
        assert analyze_roadmap(store.get_roadmap()).average_confidence == -10

    def test_all_modules_without_topics(self, store):
        store.add_module("A", "d", 1)
        assert "Average Confidence Score: 0.0%" in store.get_roadmap_analysis()

    def test_report_lines(self, store):
        store.add_module("A", "d", 1)
        lines = store.get_roadmap_analysis().splitlines()
        assert lines[0] == "Roadmap Analysis:"
        assert lines[1] == "- Status: Draft"
        assert lines[-2].startswith("- Created: ")
        assert lines[-1].startswith("- Last Modified: ")


class TestValidateRoadmapQuality:
    """ValidateRoadmapQuality."""

    def test_no_roadmap(self):
        assert RoadmapStore().validate_roadmap_quality() == "No roadmap exists to validate."

    def test_module_without_topics(self, store):
        store.add_module("M1", "d", 1)
        result = store.validate_roadmap_quality()
        assert result.startswith("❌ Roadmap validation issues found:\n")
        assert "CRITICAL: Modules without any topics" in result
        assert "Module 'M1'" in result

    def test_topic_without_concepts(self, store):
        store.add_module("M1", "d", 1)
        store.add_topic_to_module("M1", "T1", "t")
        result = store.validate_roadmap_quality()
        assert "CRITICAL: Topics without any key concepts" in result
        assert "Module 'M1' > Topic 'T1'" in result
        assert "CRITICAL: Modules without any topics" not in result

    def test_module_without_resources(self, store):
        _complete_module(store, "M1")
        store.remove_resource_from_module("M1", "M1 docs")
        result = store.validate_roadmap_quality()
        assert "CRITICAL: Modules without any resources:\nModule 'M1'" in result

    def test_few_concepts_alone_fails(self, store):
        _complete_module(store, "M1", concepts=2)
        result = store.validate_roadmap_quality()
        assert result == (
            "❌ Roadmap validation issues found:\n"
            "Module 'M1' > Topic 'M1 topic' has only 2 key concepts (should have 3-5)"
        )
        assert "CRITICAL" not in result

    def test_complete_roadmap_passes(self, store):
        _complete_module(store, "M1")
        _complete_module(store, "M2", concepts=5)
        assert store.validate_roadmap_quality().startswith("✅ Roadmap validation passed")

    def test_section_order(self, store):
        store.add_module("NoResources", "d", 1)
        store.add_topic_to_module("NoResources", "Empty", "t")
        store.add_topic_to_module("NoResources", "Thin", "t")
        store.add_concept_to_topic("NoResources", "Thin", "C", "c")
        store.add_module("NoTopics", "d", 1)
        store.add_resource_to_module("NoTopics", "R", "https://r.io", "Video", "s", "d")

        lines = store.validate_roadmap_quality().splitlines()
        assert lines == [
            "❌ Roadmap validation issues found:",
            "Module 'NoResources' > Topic 'Thin' has only 1 key concepts (should have 3-5)",
            "CRITICAL: Modules without any topics:",
            "Module 'NoTopics'",
            "CRITICAL: Topics without any key concepts:",
            "Module 'NoResources' > Topic 'Empty'",
            "CRITICAL: Modules without any resources:",
            "Module 'NoResources'",
        ]

    def test_report_contract(self, store):
        store.add_module("M1", "d", 1)
        store.add_topic_to_module("M1", "T1", "t")
        store.add_concept_to_topic("M1", "T1", "C", "c")
        report = validate_quality(store.get_roadmap())
        assert not report.passed
        assert report.has_critical_issues()
        warning = report.of_kind(IssueKind.TOPIC_FEW_CONCEPTS)[0]
        assert warning.severity == IssueSeverity.WARNING
        assert warning.concept_count == 1


class TestGapReports:
    """Topics needing concepts, modules needing topics or resources."""

    def test_no_roadmap(self):
        store = RoadmapStore()
        assert store.get_topics_needing_concepts() == "No roadmap exists."
        assert store.get_modules_needing_topics() == "No roadmap exists."
        assert store.get_modules_needing_resources() == "No roadmap exists."

    def test_topic_listed_until_three_concepts(self, store):
        store.add_module("M", "d", 1)
        store.add_topic_to_module("M", "T", "t")
        store.add_concept_to_topic("M", "T", "C1", "c")
        store.add_concept_to_topic("M", "T", "C2", "c")
        result = store.get_topics_needing_concepts()
        assert "Module: 'M' | Topic: 'T' | Current Concepts: 2" in result

        store.add_concept_to_topic("M", "T", "C3", "c")
        assert store.get_topics_needing_concepts() == "✅ All topics have sufficient key concepts."

    def test_topic_with_zero_concepts_listed(self, store):
        store.add_module("M", "d", 1)
        store.add_topic_to_module("M", "T", "t")
        gaps = topics_needing_concepts(store.get_roadmap())
        assert [(g.topic_title, g.concept_count) for g in gaps] == [("T", 0)]

    def test_modules_needing_topics(self, store):
        store.add_module("Empty", "d", 1)
        _complete_module(store, "Full")
        assert store.get_modules_needing_topics() == "Modules needing topics:\nModule: 'Empty' | Current Topics: 0"
        store.add_topic_to_module("Empty", "T", "t")
        assert store.get_modules_needing_topics() == "✅ All modules have topics."

    def test_modules_needing_resources(self, store):
        store.add_module("Bare", "d", 1)
        assert store.get_modules_needing_resources() == (
            "Modules needing resources:\nModule: 'Bare' | Current Resources: 0"
        )
        store.add_resource_to_module("Bare", "R", "https://r.io", "Video", "s", "d")
        assert store.get_modules_needing_resources() == "✅ All modules have resources."

    def test_modules_without_resources_list(self, store):
        store.add_module("A", "d", 1)
        store.add_module("B", "d", 1)
        assert store.get_modules_without_resources() == "❌ Modules missing resources: A, B"
        store.add_resource_to_module("A", "R", "https://r.io", "Video", "s", "d")
        store.add_resource_to_module("B", "R", "https://r.io", "Video", "s", "d")
        assert store.get_modules_without_resources() == "✅ All modules have resources"


class TestResourceQuality:
    """ValidateModuleResourceQuality and ValidateAllResourceUrls."""

    def test_parse_absolute_url(self):
        assert parse_absolute_url("https://docs.python.org/3/") is not None
        assert parse_absolute_url("ftp://files.example.com/book.pdf") is not None
        assert parse_absolute_url("docs.python.org/3/") is None
        assert parse_absolute_url("not a url") is None

    def test_module_without_resources(self, store):
        store.add_module("M", "d", 1)
        assert store.validate_module_resource_quality("M") == "Module 'M' has no resources to validate"
        assert store.validate_module_resource_quality("X") == "Module 'X' not found"

    def test_module_resources_valid(self, store):
        store.add_module("M", "d", 1)
        store.add_resource_to_module("M", "A", "https://a.io/x", "Video", "s", "d")
        store.add_resource_to_module("M", "B", "ftp://files.example.com/b.pdf", "Book", "s", "d")
        assert store.validate_module_resource_quality("M") == (
            "✅ All 2 resources in module 'M' have proper URLs and titles"
        )

    def test_module_resource_issues(self, store):
        store.add_module("M", "d", 1)
        store.add_resource_to_module("M", "NoUrl", "", "Video", "s", "d")
        store.add_resource_to_module("M", "Relative", "docs/page", "Video", "s", "d")
        store.add_resource_to_module("M", "", "https://untitled.io", "Video", "s", "d")
        store.add_resource_to_module("M", "Real", "https://r.io", "Video", "s", "PLACEHOLDER text")
        result = store.validate_module_resource_quality("M")
        assert result.splitlines() == [
            "❌ Resource quality issues in module 'M':",
            "Resource 'NoUrl' is missing URL",
            "Resource 'Relative' has invalid URL: docs/page",
            "Resource with URL 'https://untitled.io' is missing title",
            "Resource 'Real' appears to be a placeholder",
        ]

    def test_all_urls_valid_with_summary(self, store):
        _complete_module(store, "A")
        store.add_module("B", "d", 1)
        assert store.validate_all_resource_urls() == (
            "✅ All resources have valid URLs\n\n"
            "Resource Summary:\n"
            "- A: 1 resources\n"
            "- B: 0 resources"
        )

    def test_all_urls_require_http(self, store):
        store.add_module("A", "d", 1)
        store.add_resource_to_module("A", "Ftp", "ftp://files.example.com/b.pdf", "Book", "s", "d")
        store.add_resource_to_module("A", "Bad", "not a url", "Book", "s", "d")
        store.add_resource_to_module("A", "Empty", "", "Book", "s", "d")
        result = store.validate_all_resource_urls()
        assert result.startswith("❌ Resource URL validation issues:\n")
        assert "Module 'A' - Resource 'Ftp': URL must use HTTP/HTTPS" in result
        assert "Module 'A' - Resource 'Bad': Invalid URL format" in result
        assert "Module 'A' - Resource 'Empty': Missing URL" in result
        assert result.endswith("Resource Summary:\n- A: 3 resources")

    def test_fallback_resource_fails_url_check(self, store):
        store.add_module("A", "d", 1)
        store.add_resources_from_text("A", "Some free text")
        assert "Resource 'Resources for A': Missing URL" in store.validate_all_resource_urls()
