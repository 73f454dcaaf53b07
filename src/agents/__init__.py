"""AI Agents package."""

from src.agents.insight_agent import (
    INSIGHTS_FALLBACK,
    EmptyInsightError,
    InsightAgent,
    InsightUnavailableError,
    build_insights_prompt,
)

__all__ = [
    "INSIGHTS_FALLBACK",
    "EmptyInsightError",
    "InsightAgent",
    "InsightUnavailableError",
    "build_insights_prompt",
]
