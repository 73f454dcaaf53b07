"""Shared fixtures for the ledger tests."""

from datetime import date
from decimal import Decimal
from io import BytesIO

import pytest
from PIL import Image

from src.config import AppSettings, GeminiSettings
from src.models.transaction import Transaction, TransactionType
from src.orchestrator import LedgerSession
from src.services.storage import InMemoryTransactionStorage, sample_transactions


@pytest.fixture
def app_settings():
    """Application defaults, ignoring any local .env file."""
    return AppSettings(_env_file=None, seed_sample_data=False)


@pytest.fixture
def gemini_settings():
    """Gemini settings with no API key."""
    return GeminiSettings(_env_file=None, api_key=None)


@pytest.fixture
def sample_ledger():
    return sample_transactions()


@pytest.fixture
def make_transaction():
    """Factory for expenses/deposits with sensible defaults."""
    def _make(
        amount="100",
        on=date(2023, 10, 15),
        type=TransactionType.EXPENSE,
        category="Supplies",
        description="Printer paper",
        bill_number="",
        invoice_image=None,
    ):
        return Transaction(
            date=on,
            description=description,
            amount=Decimal(amount),
            bill_number=bill_number,
            category=category,
            type=type,
            invoice_image=invoice_image,
        )
    return _make


def image_bytes(fmt="PNG", size=(8, 8)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_bytes():
    return image_bytes("PNG")


class StubInsightAgent:
    """Stands in for InsightAgent; records how often it was asked."""

    def __init__(self, text="- Spending is under control"):
        self.text = text
        self.calls = 0

    async def generate_insights(self, transactions):
        self.calls += 1
        return self.text


@pytest.fixture
def session(app_settings):
    """A session over an empty ledger."""
    return LedgerSession(
        storage=InMemoryTransactionStorage(),
        settings=app_settings,
        insight_agent=StubInsightAgent(),
    )


@pytest.fixture
def seeded_session(app_settings):
    """A session over the sample ledger."""
    return LedgerSession(
        storage=InMemoryTransactionStorage(sample_transactions()),
        settings=app_settings,
        insight_agent=StubInsightAgent(),
    )


@pytest.fixture
def make_image():
    """Factory for real image bytes in a given PIL format."""
    return image_bytes


@pytest.fixture
def stub_agent_class():
    return StubInsightAgent
