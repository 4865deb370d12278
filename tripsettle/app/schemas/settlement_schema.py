"""
schemas/settlement_schema.py — Marshmallow schemas for balance and settlement endpoints.

Validation responsibility:
  - This file: field types, decimal precision, positive expense amounts,
    non-negative split amounts, expense count limit.
  - services/balance_service.py and services/settlement_service.py:
      nothing to reject, since any well-formed expense list has balances and a
      settlement plan.

IMPORTANT: schemas have no knowledge of Flask, g, or HTTP context.
"""

from __future__ import annotations

from decimal import Decimal

from marshmallow import Schema, ValidationError, fields, validates

from tripsettle.app.errors import ErrorCode

DEFAULT_MAX_EXPENSES = 1000


# ── Shared monetary validators ─────────────────────────────────────────────
#
# Same precision rule as expense_schema.py. Defined here rather than imported
# to keep each schema file self-contained.
# ──────────────────────────────────────────────────────────────────────────

def _validate_precision(value: Decimal) -> None:
    if value.as_tuple().exponent < -2:
        raise ValidationError(ErrorCode.INVALID_AMOUNT_PRECISION)


def _validate_expense_amount(value: Decimal) -> None:
    """An expense amount is strictly positive with at most 2 dp."""
    if value <= Decimal("0"):
        raise ValidationError("Amount must be greater than zero.")
    _validate_precision(value)


def _validate_split_amount(value: Decimal) -> None:
    """
    A stored split may be 0.00 (a 0% entry of a percentage split), never
    negative.
    """
    if value < Decimal("0"):
        raise ValidationError("Split amount must not be negative.")
    _validate_precision(value)


def _validate_non_empty_after_trim(value: str) -> None:
    if not value.strip():
        raise ValidationError("This field must not be blank or contain only whitespace.")


# ── Sub-schemas ─────────────────────────────────────────────────────────────

class SplitRecordSchema(Schema):
    """One stored split of an expense: {participant, amount}."""

    participant = fields.Str(
        required=True,
        validate=_validate_non_empty_after_trim,
    )
    amount = fields.Decimal(
        required=True,
        validate=_validate_split_amount,
    )


class ExpenseRecordSchema(Schema):
    """
    One expense as the trip store hands it over.

    splits may be omitted or null: the expense then credits the payer only.
    """

    payer = fields.Str(
        required=True,
        validate=_validate_non_empty_after_trim,
    )
    amount = fields.Decimal(
        required=True,
        validate=_validate_expense_amount,
    )
    splits = fields.List(
        fields.Nested(SplitRecordSchema),
        load_default=None,
        allow_none=True,
    )


# ── Request schemas ─────────────────────────────────────────────────────────

class ExpenseBatchSchema(Schema):
    """POST /balances"""

    expenses = fields.List(
        fields.Nested(ExpenseRecordSchema),
        required=True,
    )

    def __init__(self, *args, max_expenses: int = DEFAULT_MAX_EXPENSES, **kwargs):
        super().__init__(*args, **kwargs)
        self.max_expenses = max_expenses

    @validates("expenses")
    def validate_expense_count(self, value: list, **kwargs) -> None:
        if len(value) > self.max_expenses:
            raise ValidationError(ErrorCode.TOO_MANY_ITEMS)


class SettleRequestSchema(ExpenseBatchSchema):
    """
    POST /settlements

    participant is optional. When present, the response also carries that
    participant's position in the settlement plan.
    """

    participant = fields.Str(
        load_default=None,
        validate=_validate_non_empty_after_trim,
    )
