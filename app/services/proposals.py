"""
Boundary to the text-generation provider.

The provider returns loosely-shaped JSON text. Nothing untyped crosses this
module: `parse_proposals` turns the raw text into either `ProposedItems`
(validated) or `ParseFailure` (with the reason). Callers that receive a
`ParseFailure` substitute `fallback_proposals()` so the daily flow never
blocks on a formatting glitch.

The client is a per-request value passed in by the caller, so one user's
API key never leaks into another request.

`TextClient` is a protocol only: callers of `request_proposals` (and
`orchestrator.generate_from_standup`) bring their own implementation.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Annotated, Optional, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.core.errors import UpstreamUnavailableError
from app.services.standup import StandupAnswers

logger = logging.getLogger(__name__)

FALLBACK_TITLE = "Review and prioritize today's tasks"
FALLBACK_INSIGHTS = "Please review your standup responses for more specific task generation."


# ---------------------------------------------------------------------------
# Client protocol
# ---------------------------------------------------------------------------

class TextClient(Protocol):
    def complete(self, prompt: str) -> str:
        """Return the provider's raw text response. Raise on transport failure."""
        ...


# ---------------------------------------------------------------------------
# Validated shapes
# ---------------------------------------------------------------------------

class ProposedItem(BaseModel):
    """One AI-proposed checklist item. Field aliases match the provider's JSON."""
    model_config = ConfigDict(populate_by_name=True)

    title: Annotated[str, Field(min_length=1, max_length=512)]
    description: Optional[str] = None
    priority: Annotated[int, Field(ge=1, le=5)] = 3
    estimated_minutes: Annotated[int, Field(ge=0, alias="estimatedTimeMinutes")] = 30
    goal_alignment_labels: list[str] = Field(default_factory=list, alias="goalAlignment")


class _ProviderPayload(BaseModel):
    items: list[ProposedItem]
    insights: Optional[str] = None


@dataclass(frozen=True)
class ProposedItems:
    items: list[ProposedItem]
    insights: Optional[str] = None


@dataclass(frozen=True)
class ParseFailure:
    reason: str
    raw: str


ProposalResult = Union[ProposedItems, ParseFailure]


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


def _strip_fence(raw: str) -> str:
    match = _FENCE_RE.search(raw)
    return match.group(1) if match else raw


def parse_proposals(raw: str) -> ProposalResult:
    """Validate a provider response. Never raises."""
    text = _strip_fence(raw or "").strip()
    if not text:
        return ParseFailure(reason="empty response", raw=raw or "")
    try:
        data = json.loads(text)
    except ValueError as exc:
        return ParseFailure(reason=f"invalid JSON: {exc}", raw=raw)
    try:
        payload = _ProviderPayload.model_validate(data)
    except ValidationError as exc:
        return ParseFailure(reason=f"unexpected shape: {exc.error_count()} error(s)", raw=raw)
    return ProposedItems(items=payload.items, insights=payload.insights)


def fallback_proposals() -> ProposedItems:
    return ProposedItems(
        items=[
            ProposedItem(
                title=FALLBACK_TITLE,
                description="Based on standup responses, organize priorities",
                priority=1,
                estimated_minutes=30,
                goal_alignment_labels=["productivity"],
            )
        ],
        insights=FALLBACK_INSIGHTS,
    )


def proposals_or_fallback(result: ProposalResult) -> ProposedItems:
    if isinstance(result, ParseFailure):
        logger.warning("Unusable checklist proposal (%s); using fallback item", result.reason)
        return fallback_proposals()
    return result


# ---------------------------------------------------------------------------
# Prompting
# ---------------------------------------------------------------------------

def build_checklist_prompt(answers: StandupAnswers, goal_titles: list[str]) -> str:
    goals_block = "\n".join(f"- {t}" for t in goal_titles) or "- (none)"
    return f"""
Based on this standup data, create a focused daily checklist:

What did yesterday: {answers.what_did_yesterday or ''}
What not able yesterday: {answers.what_not_able_yesterday or ''}
Who need to do: {answers.who_need_to_do or ''}
What need to do: {answers.what_need_to_do or ''}
Why not able: {answers.why_not_able or ''}
What doing today: {answers.what_doing_today or ''}
What could stop: {answers.what_could_stop or ''}
What need understand: {answers.what_need_understand or ''}

Active goals:
{goals_block}

Create 3-7 actionable checklist items. Each should be:
- Specific and measurable
- Time-bounded
- Aligned with overarching goals

Return JSON with:
- items: array of checklist items with title, description, priority (1-5), estimatedTimeMinutes, goalAlignment
- insights: brief analysis and recommendations for the day
""".strip()


def request_proposals(client: TextClient, prompt: str) -> ProposedItems:
    """
    Ask the provider for checklist items. Malformed output degrades to the
    fallback item; a provider that cannot be reached is UpstreamUnavailable.
    """
    try:
        raw = client.complete(prompt)
    except Exception as exc:
        logger.error("Text-generation provider failed: %s", exc)
        raise UpstreamUnavailableError(upstream="text-generation") from exc
    return proposals_or_fallback(parse_proposals(raw))
