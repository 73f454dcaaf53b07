"""
AI Insight Agent for the Petty-Cash Ledger

Asks Gemini for a short prose review of the ledger.

CRITICAL BOUNDARIES:
- The prompt is built ONLY from aggregate figures computed from the
  ledger. The model never sees individual records or receipt images.
- The response is shown verbatim. It is not parsed or trusted as data.
- The agent NEVER raises. Missing credentials, network errors, blocked
  or empty responses all come back as INSIGHTS_FALLBACK.
- The agent never mutates the ledger.
"""

import json
from decimal import Decimal
from typing import Any, Iterable, Optional

import google.generativeai as genai
import structlog
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential

from src.config import GeminiSettings, get_settings
from src.models.transaction import Transaction
from src.queries.views import calculate_stats, has_receipt


INSIGHTS_FALLBACK = (
    "Unable to generate financial insights at this time / "
    "لا يمكن توليد التحليلات حالياً."
)


class InsightUnavailableError(Exception):
    """No Gemini model can be used (e.g. API key not configured)."""
    pass


class EmptyInsightError(Exception):
    """Gemini answered, but with no usable text."""
    pass


def _format_amount(amount: Decimal) -> str:
    # Plain number, no exponent, no trailing ".00" noise for whole amounts
    if amount == amount.to_integral_value():
        return format(amount.to_integral_value(), "f")
    return format(amount.normalize(), "f")


def build_insights_prompt(
    transactions: Iterable[Transaction],
    currency: str = "EGP",
) -> str:
    """
    Build the instruction sent to Gemini.

    Only aggregates go in: counts, totals, receipt coverage and the
    distinct expense categories.
    """
    snapshot = list(transactions)
    stats = calculate_stats(snapshot)
    expenses = [t for t in snapshot if t.is_expense]
    with_receipts = sum(1 for t in expenses if has_receipt(t))
    coverage = (with_receipts / len(expenses)) if expenses else 0.0
    categories = list(dict.fromkeys(t.category for t in expenses))

    return f"""Analyze this Petty Cash (العهدة) financial data and provide 4 professional insights in bullet points (Bilingual: English & Arabic).

Summary Data:
- Total Transactions: {stats.count}
- Total Deposits: {_format_amount(stats.total_budget)} {currency}
- Total Expenses: {_format_amount(stats.total_expenses)} {currency}
- Digital Archives: {with_receipts} out of {len(expenses)} expenses have digital receipts attached ({coverage:.0%} coverage).
- Categories: {json.dumps(categories, ensure_ascii=False)}

Focus on:
1. Highest spending categories.
2. Budget sustainability and burn rate.
3. Compliance and Audit health (based on receipt availability).
4. Suggestions for cost optimization.

Provide a professional tone suitable for a financial manager."""


class InsightAgent:
    """
    AI agent for the "AI audit" button.

    RESPONSIBILITIES:
    - Summarize ledger aggregates into a prompt
    - Return Gemini's prose, or the fallback message

    BOUNDARIES:
    - NEVER raises to the caller
    - NEVER de-duplicates or queues requests; each call is one request
      (times GEMINI_MAX_ATTEMPTS if retries are configured)
    """

    def __init__(
        self,
        settings: Optional[GeminiSettings] = None,
        model: Optional[Any] = None,
        currency: Optional[str] = None,
    ):
        self._settings = settings or get_settings().gemini
        self._currency = currency or get_settings().app.currency
        self._model = model
        self._logger = structlog.get_logger("src.agents.insight")

    def _get_model(self):
        """Configure Google Generative AI on first use."""
        if self._model is None:
            if not self._settings.api_key:
                raise InsightUnavailableError("GEMINI_API_KEY is not configured")
            genai.configure(api_key=self._settings.api_key)
            self._model = genai.GenerativeModel(
                model_name=self._settings.model_name,
                generation_config={
                    "temperature": self._settings.temperature,
                    "max_output_tokens": self._settings.max_tokens,
                }
            )
        return self._model

    async def _request(self, prompt: str) -> str:
        model = self._get_model()

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._settings.max_attempts),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            reraise=True,
        ):
            with attempt:
                response = await model.generate_content_async(prompt)
                # .text raises ValueError when the response was blocked
                text = (response.text or "").strip()
                if not text:
                    raise EmptyInsightError("Gemini returned an empty response")
                return text

        raise EmptyInsightError("No attempt was made")

    async def generate_insights(
        self,
        transactions: Iterable[Transaction],
    ) -> str:
        """
        Generate the prose review for the current ledger.

        Returns the model's text as-is, or INSIGHTS_FALLBACK on any failure.
        """
        try:
            prompt = build_insights_prompt(transactions, self._currency)
            return await self._request(prompt)
        except Exception as e:
            self._logger.warning(
                "insights_failed",
                error_type=type(e).__name__,
                error=str(e),
            )
            return INSIGHTS_FALLBACK
