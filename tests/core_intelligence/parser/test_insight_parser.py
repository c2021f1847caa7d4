"""
Tests for core_intelligence.parser.insight_parser.
"""

import json

import pytest

from core_intelligence.parser.insight_parser import InsightParser, extract_json_object
from domain.models import MeetingType


VALID_PAYLOAD = {
    "summary": "Kickoff went well.",
    "meetingType": "planning",
    "actionItems": ["Send schedule"],
    "decisions": ["Start Monday"],
    "risks": [{"title": "Permit delay", "severity": "medium"}],
    "insights": [
        {
            "type": "risk",
            "title": "Permit delay",
            "description": "City backlog",
            "requiresAction": True,
            "confidence": 0.8,
        }
    ],
    "followUpRequired": True,
}


class TestExtractJsonObject:
    def test_plain_json(self) -> None:
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_fenced_json(self) -> None:
        raw = 'Here you go:\n```json\n{"a": 1}\n```\nThanks'
        assert extract_json_object(raw) == {"a": 1}

    def test_prose_around_object(self) -> None:
        raw = 'Sure! The analysis is {"a": {"b": 2}} as requested.'
        assert extract_json_object(raw) == {"a": {"b": 2}}

    @pytest.mark.parametrize("raw", ["", "   ", "no json here", "[1, 2, 3]", "{broken"])
    def test_returns_none_when_no_object(self, raw) -> None:
        assert extract_json_object(raw) is None


class TestInsightParser:
    def test_parses_valid_payload(self) -> None:
        insight = InsightParser.parse(json.dumps(VALID_PAYLOAD))
        assert insight is not None
        assert insight.meeting_type == MeetingType.PLANNING
        assert insight.insights[0].confidence == 0.8

    def test_parses_fenced_payload(self) -> None:
        raw = f"```\n{json.dumps(VALID_PAYLOAD)}\n```"
        assert InsightParser.parse(raw).summary == "Kickoff went well."

    def test_schema_violation_returns_none(self) -> None:
        bad = {**VALID_PAYLOAD, "meetingType": "party"}
        assert InsightParser.parse(json.dumps(bad)) is None

    def test_missing_summary_returns_none(self) -> None:
        bad = {k: v for k, v in VALID_PAYLOAD.items() if k != "summary"}
        assert InsightParser.parse(json.dumps(bad)) is None

    def test_garbage_returns_none(self) -> None:
        assert InsightParser.parse("I cannot help with that.") is None
