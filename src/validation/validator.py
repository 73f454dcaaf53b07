"""
Transaction Form Validation

Runs when the entry form is submitted, before anything touches the ledger.

ERRORS block the save:
- Missing description
- Missing amount
- Amount that is not a finite number
- Negative amount (direction comes from the type, never the sign)
- Amount above APP_MAX_TRANSACTION_AMOUNT or with more than 2 decimals

WARNINGS are reported but do not block:
- Dates far in the future

IMPORTANT: Validation NEVER silently fixes issues.
It reports them and the user corrects the form.
"""

from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Optional

from src.config import AppSettings, get_settings
from src.models.transaction import (
    MAX_DESCRIPTION_LENGTH,
    TransactionForm,
    ValidationIssue,
    ValidationResult,
)


REQUIRED_FIELDS_MESSAGE = "Fill required fields / أكمل البيانات"


class TransactionValidator:
    """Validates a submitted TransactionForm."""

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    def _parse_amount(
        self,
        raw: str,
    ) -> tuple[Optional[Decimal], list[ValidationIssue]]:
        """
        Parse the amount text.

        Returns: (amount_or_none, list_of_issues)
        """
        text = raw.strip().replace(",", "")
        if not text:
            return None, [ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                severity="error",
                suggested_fix="Enter the amount paid or received",
            )]

        try:
            amount = Decimal(text)
        except InvalidOperation:
            return None, [ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=f"Amount '{raw.strip()}' is not a number",
                severity="error",
                suggested_fix="Use digits only, e.g. 1500 or 99.50",
            )]

        if not amount.is_finite():
            return None, [ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message="Amount must be a finite number",
                severity="error",
            )]

        if amount < 0:
            return None, [ValidationIssue(
                field="amount",
                issue_type="negative",
                message="Amount cannot be negative",
                severity="error",
                suggested_fix="Enter the magnitude and pick Deposit or Expense",
            )]

        max_amount = Decimal(str(self._settings.max_transaction_amount))
        if amount > max_amount:
            return None, [ValidationIssue(
                field="amount",
                issue_type="too_large",
                message=f"Amount cannot exceed {max_amount:,.2f}",
                severity="error",
                suggested_fix="Check the number of digits",
            )]

        # Trailing zeros do not count: "1.500" is the same as "1.50"
        if amount.normalize().as_tuple().exponent < -2:
            return None, [ValidationIssue(
                field="amount",
                issue_type="too_many_decimals",
                message="Amount can have at most 2 decimal places",
                severity="error",
                suggested_fix="Round to the nearest piastre, e.g. 99.50",
            )]
        if amount.as_tuple().exponent < -2:
            amount = amount.quantize(Decimal("0.01"))

        return amount, []

    def _check_date(self, value: date) -> list[ValidationIssue]:
        max_future_date = date.today() + timedelta(
            days=self._settings.future_date_tolerance_days
        )
        if value > max_future_date:
            return [ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Date ({value.isoformat()}) is in the future",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            )]
        return []

    def validate(self, form: TransactionForm) -> ValidationResult:
        """
        Validate a submitted form.

        The parsed amount is returned on the result when it is valid, so
        callers never parse the text a second time.
        """
        issues: list[ValidationIssue] = []

        if not form.description.strip():
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Description is required",
                severity="error",
                suggested_fix="Describe what the money was for",
            ))
        elif len(form.description.strip()) > MAX_DESCRIPTION_LENGTH:
            issues.append(ValidationIssue(
                field="description",
                issue_type="too_long",
                message=f"Description is longer than {MAX_DESCRIPTION_LENGTH} characters",
                severity="error",
            ))

        amount, amount_issues = self._parse_amount(form.amount)
        issues.extend(amount_issues)

        issues.extend(self._check_date(form.date))

        return ValidationResult(issues=issues, amount=amount)

    def get_user_message(self, result: ValidationResult) -> str:
        """
        One short line for the error notice.

        Missing required fields get the generic bilingual prompt;
        anything else shows the first error.
        """
        errors = [issue for issue in result.issues if issue.severity == "error"]
        if not errors:
            return ""
        if any(issue.issue_type == "missing" for issue in errors):
            return REQUIRED_FIELDS_MESSAGE
        return errors[0].message
