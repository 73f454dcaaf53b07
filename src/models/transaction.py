"""
Core Data Models for the Petty-Cash Ledger

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for display and logging

DESIGN DECISION: Amounts are stored as non-negative Decimals.
The direction of money (in or out) comes ONLY from the transaction type,
never from the sign of the amount.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS AND CONSTANTS
# =============================================================================

class TransactionType(str, Enum):
    """
    Direction of a ledger entry.

    Deposits fund the petty-cash balance, expenses draw it down.
    """
    DEPOSIT = "Deposit"
    EXPENSE = "Expense"


# Categories offered by the entry form.
# DESIGN DECISION: category is an OPEN string on the model. The form offers
# this list, but users may type their own and the ledger accepts it.
DEFAULT_CATEGORIES: tuple[str, ...] = (
    "Internet",
    "Fees",
    "Personal",
    "Supplies",
    "Transport",
    "Utilities",
    "Maintenance",
    "Deposit",
)

DEFAULT_CATEGORY = "Personal"

MAX_DESCRIPTION_LENGTH = 500


# =============================================================================
# CORE TRANSACTION MODEL
# =============================================================================

class Transaction(BaseModel):
    """
    A single petty-cash ledger entry.

    The id is assigned once at creation and never changes; every other
    field can be replaced by an edit, including clearing the receipt.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique transaction ID"
    )
    date: dt.date = Field(
        ...,
        description="Date of the transaction"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=MAX_DESCRIPTION_LENGTH,
        description="What the money was for"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        decimal_places=2,
        description="Amount as a positive magnitude"
    )
    bill_number: str = Field(
        default="",
        description="Bill/invoice reference number"
    )
    category: str = Field(
        default=DEFAULT_CATEGORY,
        description="Spending category (open set)"
    )
    type: TransactionType = Field(
        ...,
        description="Deposit or Expense"
    )
    invoice_image: Optional[str] = Field(
        default=None,
        description="Receipt photo as an inline data: URL"
    )

    @field_validator('invoice_image')
    @classmethod
    def empty_image_is_none(cls, v: Optional[str]) -> Optional[str]:
        """An empty payload means no receipt on file."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE

    @property
    def is_deposit(self) -> bool:
        return self.type == TransactionType.DEPOSIT


class TransactionForm(BaseModel):
    """
    In-progress state of the entry form.

    The amount is kept as the raw text the user typed; it is only
    parsed when the form is submitted.

    `generation` identifies this form instance. It changes whenever the
    form is reset or loaded with another record, so late results of an
    earlier receipt read can be recognised and dropped.
    """

    date: dt.date = Field(default_factory=dt.date.today)
    description: str = ""
    amount: str = ""
    bill_number: str = ""
    category: str = DEFAULT_CATEGORY
    type: TransactionType = TransactionType.EXPENSE
    invoice_image: Optional[str] = None
    generation: int = Field(default=0, ge=0)

    @classmethod
    def from_transaction(cls, transaction: Transaction, generation: int) -> "TransactionForm":
        """Load an existing record into the form for editing."""
        return cls(
            date=transaction.date,
            description=transaction.description,
            amount=str(transaction.amount),
            bill_number=transaction.bill_number,
            category=transaction.category,
            type=transaction.type,
            invoice_image=transaction.invoice_image,
            generation=generation,
        )


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'negative')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """Result of validating a submitted form."""

    validated_at: dt.datetime = Field(
        default_factory=dt.datetime.utcnow
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )
    # Parsed amount, only set when the amount field was valid
    amount: Optional[Decimal] = None

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def is_valid(self) -> bool:
        return not self.has_errors
