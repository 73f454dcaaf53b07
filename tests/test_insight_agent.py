"""
Tests for the Gemini insight agent.

No real API calls: a stub model stands in for GenerativeModel.
"""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from src.agents import INSIGHTS_FALLBACK, InsightAgent, build_insights_prompt
from src.models.transaction import Transaction, TransactionType


class StubResponse:
    def __init__(self, text):
        self._text = text

    @property
    def text(self):
        if isinstance(self._text, Exception):
            raise self._text
        return self._text


class StubModel:
    """Mimics GenerativeModel.generate_content_async."""

    def __init__(self, text="- Fees dominate spending", error=None):
        self.text = text
        self.error = error
        self.prompts = []

    async def generate_content_async(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return StubResponse(self.text)


@pytest.fixture
def make_agent(gemini_settings):
    def _make(model=None):
        return InsightAgent(settings=gemini_settings, model=model, currency="EGP")
    return _make


class TestGenerateInsights:

    def test_returns_model_text(self, make_agent, sample_ledger):
        model = StubModel("  - Fees dominate spending\n")
        text = asyncio.run(make_agent(model).generate_insights(sample_ledger))
        assert text == "- Fees dominate spending"
        assert len(model.prompts) == 1

    def test_no_api_key_falls_back(self, make_agent, sample_ledger):
        text = asyncio.run(make_agent().generate_insights(sample_ledger))
        assert text == INSIGHTS_FALLBACK

    def test_service_error_falls_back(self, make_agent, sample_ledger):
        model = StubModel(error=ConnectionError("network unreachable"))
        text = asyncio.run(make_agent(model).generate_insights(sample_ledger))
        assert text == INSIGHTS_FALLBACK

    def test_empty_response_falls_back(self, make_agent, sample_ledger):
        text = asyncio.run(make_agent(StubModel("   ")).generate_insights(sample_ledger))
        assert text == INSIGHTS_FALLBACK

    def test_blocked_response_falls_back(self, make_agent, sample_ledger):
        """A blocked response raises on .text."""
        model = StubModel(ValueError("response was blocked"))
        text = asyncio.run(make_agent(model).generate_insights(sample_ledger))
        assert text == INSIGHTS_FALLBACK

    def test_one_request_per_call(self, make_agent, sample_ledger):
        model = StubModel(error=TimeoutError("slow"))
        asyncio.run(make_agent(model).generate_insights(sample_ledger))
        assert len(model.prompts) == 1

    def test_huge_totals_do_not_raise(self, make_agent):
        ledger = [
            Transaction(
                date=date(2023, 10, 1),
                description="Opening float",
                amount=Decimal("1" + "0" * 30),
                category="Deposit",
                type=TransactionType.DEPOSIT,
            ),
        ]
        model = StubModel("- Large float on hand")
        text = asyncio.run(make_agent(model).generate_insights(ledger))

        assert text == "- Large float on hand"
        assert "Total Deposits: 1" + "0" * 30 + " EGP" in model.prompts[0]

    def test_prompt_failure_falls_back(self, make_agent, sample_ledger, monkeypatch):
        def broken_prompt(transactions, currency=None):
            raise ArithmeticError("cannot summarise ledger")

        monkeypatch.setattr("src.agents.insight_agent.build_insights_prompt", broken_prompt)
        model = StubModel()
        text = asyncio.run(make_agent(model).generate_insights(sample_ledger))

        assert text == INSIGHTS_FALLBACK
        assert model.prompts == []

    def test_fallback_text(self):
        assert INSIGHTS_FALLBACK == (
            "Unable to generate financial insights at this time / "
            "لا يمكن توليد التحليلات حالياً."
        )


class TestInsightsPrompt:

    def test_sample_ledger_figures(self, sample_ledger):
        prompt = build_insights_prompt(sample_ledger, "EGP")
        assert "Total Transactions: 3" in prompt
        assert "Total Deposits: 20000 EGP" in prompt
        assert "Total Expenses: 2150 EGP" in prompt
        assert "0 out of 2 expenses have digital receipts attached (0% coverage)" in prompt
        assert 'Categories: ["Fees", "Internet"]' in prompt

    def test_receipt_coverage(self):
        ledger = [
            Transaction(
                date=date(2023, 10, 5),
                description="Paper",
                amount=Decimal("12.50"),
                category="Supplies",
                type=TransactionType.EXPENSE,
                invoice_image="data:image/png;base64,AAAA",
            ),
            Transaction(
                date=date(2023, 10, 6),
                description="Toner",
                amount=Decimal("80"),
                category="Supplies",
                type=TransactionType.EXPENSE,
            ),
        ]
        prompt = build_insights_prompt(ledger, "USD")
        assert "1 out of 2 expenses" in prompt
        assert "(50% coverage)" in prompt
        assert "Total Expenses: 92.5 USD" in prompt
        assert 'Categories: ["Supplies"]' in prompt

    def test_empty_ledger(self):
        prompt = build_insights_prompt([], "EGP")
        assert "Total Transactions: 0" in prompt
        assert "Categories: []" in prompt

    def test_no_record_details_leak(self, sample_ledger):
        """Only aggregates go out; descriptions and bill numbers stay local."""
        prompt = build_insights_prompt(sample_ledger)
        assert "INV-102" not in prompt
        assert "Mindmapp" not in prompt
