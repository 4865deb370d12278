"""
schemas/expense_schema.py — Marshmallow schemas for split endpoints.

Validation responsibility:
  - This file:
      - Field types and presence (MISSING_FIELD / INVALID_FIELD, 400)
      - Decimal precision: at most 2 dp for money (INVALID_AMOUNT_PRECISION, 400)
      - Participant identifiers non-empty after trim
      - List size limits (participants per split)
      - Which split data each split_mode accepts (UNEXPECTED_SPLIT_DATA, 400)
  - services/split_service.py:
      - Positive amounts, mode mixing, percentage range, duplicates and
        sum reconciliation (typed SplitError, 422). These are left to the
        service so the caller sees the specific violated rule.

IMPORTANT: schemas have no knowledge of Flask, g, or HTTP context. Limits that
come from app config are passed to the schema constructor by the route.
"""

from __future__ import annotations

from decimal import Decimal

from marshmallow import (
    Schema,
    ValidationError,
    fields,
    validates,
    validates_schema,
)

from tripsettle.app.errors import ErrorCode
from tripsettle.app.models.expense import SplitMode

DEFAULT_MAX_PARTICIPANTS = 100


# ── Shared validators ─────────────────────────────────────────────────────

def _validate_amount_precision(value: Decimal) -> None:
    """
    Rejects money with more than 2 decimal places. Never rounds it.

    Decimal.as_tuple().exponent gives the scale as a negative integer:
      Decimal("10.123").as_tuple().exponent == -3  → 3 dp → REJECT
      Decimal("10.12").as_tuple().exponent  == -2  → 2 dp → accept
    """
    if value.as_tuple().exponent < -2:
        raise ValidationError(ErrorCode.INVALID_AMOUNT_PRECISION)


def _validate_non_empty_after_trim(value: str) -> None:
    """validate.Length(min=1) alone would accept "   "."""
    if not value.strip():
        raise ValidationError("This field must not be blank or contain only whitespace.")


def _too_many(items: list | None, limit: int) -> bool:
    return items is not None and len(items) > limit


# ── Sub-schema: one entry in a custom `splits` array ──────────────────────

class SplitInputSchema(Schema):
    """
    One custom split entry. Exactly one of amount/percentage is expected;
    the service reports AMBIGUOUS_SPLIT_MODE / MISSING_SPLIT_VALUE when not.
    """

    participant = fields.Str(
        required=True,
        validate=_validate_non_empty_after_trim,
    )

    amount = fields.Decimal(
        allow_none=True,
        validate=_validate_amount_precision,
    )

    percentage = fields.Decimal(allow_none=True)


# ── Equal split ────────────────────────────────────────────────────────────

class EqualSplitSchema(Schema):
    """POST /splits/equal"""

    amount = fields.Decimal(
        required=True,
        validate=_validate_amount_precision,
    )

    # An empty list is accepted here; the service raises NO_PARTICIPANTS.
    participants = fields.List(
        fields.Str(validate=_validate_non_empty_after_trim),
        required=True,
    )

    def __init__(self, *args, max_participants: int = DEFAULT_MAX_PARTICIPANTS, **kwargs):
        super().__init__(*args, **kwargs)
        self.max_participants = max_participants

    @validates("participants")
    def validate_participant_count(self, value: list, **kwargs) -> None:
        if _too_many(value, self.max_participants):
            raise ValidationError(ErrorCode.TOO_MANY_ITEMS)


# ── Custom split (also used by /splits/validate) ───────────────────────────

class CustomSplitSchema(Schema):
    """POST /splits/custom and POST /splits/validate"""

    amount = fields.Decimal(
        required=True,
        validate=_validate_amount_precision,
    )

    # An empty list is accepted here; the service raises EMPTY_SPLIT_SET.
    splits = fields.List(
        fields.Nested(SplitInputSchema),
        required=True,
    )

    def __init__(self, *args, max_participants: int = DEFAULT_MAX_PARTICIPANTS, **kwargs):
        super().__init__(*args, **kwargs)
        self.max_participants = max_participants

    @validates("splits")
    def validate_split_count(self, value: list, **kwargs) -> None:
        if _too_many(value, self.max_participants):
            raise ValidationError(ErrorCode.TOO_MANY_ITEMS)


# ── Expense split resolution ───────────────────────────────────────────────

class ExpenseSplitsSchema(Schema):
    """
    POST /expenses/splits — the splits a new expense is stored with.

    Split mode behaviour:
      - split_mode='none'   → neither participants nor splits may be sent.
                              The payer carries the full amount.
      - split_mode='equal'  → participants only. Server computes the shares.
      - split_mode='custom' → splits only.
    Sending data the mode ignores returns UNEXPECTED_SPLIT_DATA (400).
    """

    payer = fields.Str(
        required=True,
        validate=_validate_non_empty_after_trim,
    )

    amount = fields.Decimal(
        required=True,
        validate=_validate_amount_precision,
    )

    split_mode = fields.Enum(
        SplitMode,
        load_default=SplitMode.NONE,
        by_value=True,
        error_messages={"unknown": ErrorCode.INVALID_SPLIT_MODE},
    )

    participants = fields.List(
        fields.Str(validate=_validate_non_empty_after_trim),
        load_default=None,
    )

    splits = fields.List(
        fields.Nested(SplitInputSchema),
        load_default=None,
    )

    def __init__(self, *args, max_participants: int = DEFAULT_MAX_PARTICIPANTS, **kwargs):
        super().__init__(*args, **kwargs)
        self.max_participants = max_participants

    @validates_schema
    def validate_split_data_for_mode(self, data: dict, **kwargs) -> None:
        split_mode   = data.get("split_mode", SplitMode.NONE)
        participants = data.get("participants")
        splits       = data.get("splits")

        if split_mode is not SplitMode.EQUAL and participants is not None:
            raise ValidationError({"participants": [ErrorCode.UNEXPECTED_SPLIT_DATA]})

        if split_mode is not SplitMode.CUSTOM and splits is not None:
            raise ValidationError({"splits": [ErrorCode.UNEXPECTED_SPLIT_DATA]})

        if _too_many(participants, self.max_participants):
            raise ValidationError({"participants": [ErrorCode.TOO_MANY_ITEMS]})
        if _too_many(splits, self.max_participants):
            raise ValidationError({"splits": [ErrorCode.TOO_MANY_ITEMS]})
