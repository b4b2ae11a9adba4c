"""
Tests for the text-generation boundary: parsing, fallback, prompt, client errors.
"""
import json

import pytest

from app.core.errors import UpstreamUnavailableError
from app.services.proposals import (
    FALLBACK_INSIGHTS,
    FALLBACK_TITLE,
    ParseFailure,
    ProposedItems,
    build_checklist_prompt,
    fallback_proposals,
    parse_proposals,
    proposals_or_fallback,
    request_proposals,
)
from app.services.standup import StandupAnswers


_GOOD = json.dumps({
    "items": [
        {
            "title": "Draft the Q3 plan",
            "description": "One page",
            "priority": 2,
            "estimatedTimeMinutes": 45,
            "goalAlignment": ["planning"],
        }
    ],
    "insights": "Protect the morning for planning.",
})


class TestParseProposals:
    def test_valid_payload(self):
        result = parse_proposals(_GOOD)
        assert isinstance(result, ProposedItems)
        [item] = result.items
        assert item.title == "Draft the Q3 plan"
        assert item.estimated_minutes == 45
        assert item.goal_alignment_labels == ["planning"]
        assert result.insights == "Protect the morning for planning."

    def test_fenced_json_is_accepted(self):
        result = parse_proposals(f"Here is your plan:\n```json\n{_GOOD}\n```\nGood luck!")
        assert isinstance(result, ProposedItems)
        assert result.items[0].priority == 2

    def test_defaults_for_missing_optional_fields(self):
        result = parse_proposals('{"items": [{"title": "Inbox zero"}]}')
        [item] = result.items
        assert item.priority == 3
        assert item.estimated_minutes == 30
        assert item.goal_alignment_labels == []
        assert result.insights is None

    @pytest.mark.parametrize("raw, reason", [
        ("", "empty"),
        ("   ", "empty"),
        ("not json at all", "invalid JSON"),
        ('{"items": "nope"}', "unexpected shape"),
        ('{"items": [{"title": "x", "priority": 9}]}', "unexpected shape"),
        ('[1, 2, 3]', "unexpected shape"),
    ])
    def test_failures_are_reported_not_raised(self, raw, reason):
        result = parse_proposals(raw)
        assert isinstance(result, ParseFailure)
        assert reason in result.reason


class TestFallback:
    def test_fallback_item(self):
        fb = fallback_proposals()
        [item] = fb.items
        assert item.title == FALLBACK_TITLE
        assert item.priority == 1
        assert item.estimated_minutes == 30
        assert fb.insights == FALLBACK_INSIGHTS

    def test_failure_substitutes_fallback(self):
        result = proposals_or_fallback(ParseFailure(reason="invalid JSON", raw="??"))
        assert result.items[0].title == FALLBACK_TITLE

    def test_success_passes_through(self):
        parsed = parse_proposals(_GOOD)
        assert proposals_or_fallback(parsed) is parsed


class TestPromptAndClient:
    def test_prompt_carries_answers_and_goals(self):
        prompt = build_checklist_prompt(
            StandupAnswers(what_doing_today="Pair on auth", what_could_stop="Outage"),
            ["Harden security"],
        )
        assert "Pair on auth" in prompt
        assert "Outage" in prompt
        assert "- Harden security" in prompt
        assert "estimatedTimeMinutes" in prompt

    def test_prompt_without_goals(self):
        assert "- (none)" in build_checklist_prompt(StandupAnswers(), [])

    def test_transport_failure_is_upstream_unavailable(self):
        class Down:
            def complete(self, prompt):
                raise TimeoutError("read timeout")

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            request_proposals(Down(), "prompt")
        assert exc_info.value.details == {"upstream": "text-generation"}

    def test_garbage_reply_yields_fallback(self):
        class Chatty:
            def complete(self, prompt):
                return "I cannot produce JSON today."

        assert request_proposals(Chatty(), "prompt").items[0].title == FALLBACK_TITLE
