"""
Two-Stage Expense Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - INPUT VALIDATION:
- Amount present, numeric, finite and positive
- Description present and not blank
- This catches malformed form input

STAGE 2 - REFERENCE VALIDATION:
- The paying participant exists in the ledger
- This needs the ledger's current participant ids

Stage 2 only runs when stage 1 passes.

IMPORTANT: Validation NEVER silently fixes issues. Numeric strings are
parsed (that is how amounts arrive from a form), but nothing is rounded,
clamped or trimmed.
"""

import math
from collections.abc import Collection
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from spendwise.models.ledger import ExpenseValidationResult, ValidationIssue


class ExpenseValidator:
    """
    Validates raw expense input before it reaches the ledger.

    Stateless: the ledger passes in its participant ids on every call.
    """

    def _parse_amount(
        self,
        amount: Any,
    ) -> tuple[Optional[float], Optional[ValidationIssue]]:
        """
        Turn raw amount input into a float.

        Returns: (parsed_amount, issue). Exactly one of the two is None.
        """
        if amount is None or (isinstance(amount, str) and not amount.strip()):
            return None, ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
            )

        # bool is an int subclass; True is not an amount
        if isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal, str)):
            return None, ValidationIssue(
                field="amount",
                issue_type="not_a_number",
                message=f"Amount must be a number, got {type(amount).__name__}",
            )

        try:
            value = float(amount.strip() if isinstance(amount, str) else amount)
        except (ValueError, OverflowError):
            return None, ValidationIssue(
                field="amount",
                issue_type="not_a_number",
                message=f"Amount must be a number, got {amount!r}",
            )

        if not math.isfinite(value):
            return None, ValidationIssue(
                field="amount",
                issue_type="not_finite",
                message="Amount must be a finite number",
            )

        if value <= 0:
            return None, ValidationIssue(
                field="amount",
                issue_type="not_positive",
                message="Amount must be greater than zero",
            )

        return value, None

    def _validate_input(
        self,
        amount: Any,
        description: Any,
    ) -> tuple[bool, Optional[float], list[ValidationIssue]]:
        """
        Stage 1: Input validation.

        Returns: (is_valid, parsed_amount, list_of_issues)
        """
        issues = []

        parsed, amount_issue = self._parse_amount(amount)
        if amount_issue:
            issues.append(amount_issue)

        if description is None or (isinstance(description, str) and not description.strip()):
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Description is required",
            ))
        elif not isinstance(description, str):
            issues.append(ValidationIssue(
                field="description",
                issue_type="not_text",
                message=f"Description must be text, got {type(description).__name__}",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, parsed, issues

    def _validate_reference(
        self,
        participant_id: Any,
        known_participant_ids: Collection[UUID],
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: Reference validation.

        Returns: (is_valid, list_of_issues)
        """
        if participant_id in known_participant_ids:
            return True, []

        return False, [ValidationIssue(
            field="participant_id",
            issue_type="unknown_reference",
            message=f"Participant {participant_id} does not exist",
        )]

    def validate(
        self,
        participant_id: Any,
        amount: Any,
        description: Any,
        known_participant_ids: Collection[UUID],
    ) -> ExpenseValidationResult:
        """
        Run the full two-stage validation pipeline.

        Args:
            participant_id: Who paid
            amount: Raw amount (number or numeric string)
            description: Raw description
            known_participant_ids: Participant ids currently in the ledger

        Returns:
            ExpenseValidationResult with all issues found
        """
        all_issues = []

        input_valid, parsed, input_issues = self._validate_input(amount, description)
        all_issues.extend(input_issues)

        reference_valid = False
        if input_valid:
            reference_valid, reference_issues = self._validate_reference(
                participant_id, known_participant_ids
            )
            all_issues.extend(reference_issues)

        return ExpenseValidationResult(
            input_valid=input_valid,
            reference_valid=reference_valid,
            is_valid=input_valid and reference_valid,
            amount=parsed if input_valid else None,
            issues=all_issues,
        )

    def get_user_friendly_summary(
        self,
        result: ExpenseValidationResult,
    ) -> str:
        """Generate the message shown when an expense is rejected."""
        if result.is_valid:
            return "Expense details look good."

        if result.error_count == 1:
            return result.issues[0].message

        lines = ["Please fix the following:"]
        for issue in result.issues:
            lines.append(f"• {issue.message}")
        return "\n".join(lines)
