"""Tests for roadmap contracts."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from contracts import (
    Concept,
    Module,
    Resource,
    ResourceType,
    Roadmap,
    RoadmapStatus,
    Topic,
)


class TestEnums:
    """Enum parsing by name."""

    def test_values_are_names(self):
        assert RoadmapStatus.AWAITING_FEEDBACK.value == "AwaitingFeedback"
        assert ResourceType.names() == [
            "Documentation", "Book", "Tutorial", "Video", "Game", "Article", "Course",
        ]

    def test_parse_case_insensitive(self):
        assert RoadmapStatus.parse("inprogress") == RoadmapStatus.IN_PROGRESS
        assert ResourceType.parse(" VIDEO ") == ResourceType.VIDEO
        assert ResourceType.parse(ResourceType.GAME) == ResourceType.GAME

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            RoadmapStatus.parse("Archived")


class TestRoadmapTree:
    """Tree models and derived values."""

    def test_average_confidence(self):
        module = Module(title="M", order=1, topics=[
            Topic(title="A", order=1, confidence_score=70),
            Topic(title="B", order=2, confidence_score=75),
        ])
        assert module.average_confidence == 72

    def test_average_confidence_without_topics(self):
        assert Module(title="M", order=1).average_confidence == 0

    def test_estimated_hours(self):
        module = Module(title="M", order=1, estimated_duration=timedelta(hours=12))
        assert module.estimated_hours == 12

    def test_order_must_be_positive(self):
        with pytest.raises(ValidationError):
            Concept(title="C", order=0)

    def test_find_first_match(self):
        module = Module(title="M", order=1, resources=[
            Resource(title="Dup", url="https://one.io"),
            Resource(title="Dup", url="https://two.io"),
        ])
        assert module.find_resource("Dup").url == "https://one.io"
        assert module.find_topic("Dup") is None

    def test_renumber_modules(self):
        roadmap = Roadmap(modules=[Module(title="A", order=3), Module(title="B", order=7)])
        roadmap.renumber_modules()
        assert [m.order for m in roadmap.modules] == [1, 2]

    def test_json_round_trip_keeps_enum_names(self):
        roadmap = Roadmap(status=RoadmapStatus.ACTIVE, modules=[
            Module(title="A", order=1, estimated_duration=timedelta(hours=3),
                   resources=[Resource(title="R", type=ResourceType.VIDEO)]),
        ])
        payload = roadmap.model_dump_json()
        assert '"Active"' in payload
        assert '"Video"' in payload
        restored = Roadmap.model_validate_json(payload)
        assert restored.modules[0].estimated_duration == timedelta(hours=3)
        assert restored.status == RoadmapStatus.ACTIVE
