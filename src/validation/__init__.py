"""Form validation package."""

from src.validation.validator import REQUIRED_FIELDS_MESSAGE, TransactionValidator

__all__ = ["REQUIRED_FIELDS_MESSAGE", "TransactionValidator"]
