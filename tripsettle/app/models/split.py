"""
models/split.py — Split value types.

No business logic. No imports from services or routes.

Key design points:
  - Amounts are Decimal, never float.
  - SplitInput is what a caller sends for a custom split; exactly one of
    amount/percentage is expected, but the type does not enforce it.
    Rule checks live in services/split_service.validate_splits() so that the
    caller gets the specific violated rule, not a constructor TypeError.
  - SplitResult is what the calculator returns and what an ExpenseRecord
    carries into the balance aggregator.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from tripsettle.app.money import money, to_decimal


class CustomSplitMode(str, enum.Enum):
    """How the entries of a custom split set express their share."""
    AMOUNT     = "amount"
    PERCENTAGE = "percentage"


@dataclass(frozen=True)
class SplitInput:
    participant: str
    amount:      Decimal | None = None
    percentage:  Decimal | None = None

    @property
    def mode(self) -> CustomSplitMode | None:
        """
        The entry's mode, or None when it sets both or neither value.
        Ambiguous entries are reported by the validator, not here.
        """
        if self.amount is not None and self.percentage is None:
            return CustomSplitMode.AMOUNT
        if self.percentage is not None and self.amount is None:
            return CustomSplitMode.PERCENTAGE
        return None

    @classmethod
    def coerce(cls, value: SplitInput | Mapping[str, Any]) -> SplitInput:
        """Accepts a SplitInput or a {participant, amount?, percentage?} mapping."""
        if isinstance(value, SplitInput):
            return value

        amount = value.get("amount")
        percentage = value.get("percentage")
        return cls(
            participant=value.get("participant"),
            amount=None if amount is None else to_decimal(amount, field="amount"),
            percentage=None if percentage is None else to_decimal(percentage, field="percentage"),
        )


@dataclass(frozen=True)
class SplitResult:
    participant: str
    amount:      Decimal

    @classmethod
    def coerce(cls, value: SplitResult | Mapping[str, Any]) -> SplitResult:
        """Accepts a SplitResult or a {participant, amount} mapping."""
        if isinstance(value, SplitResult):
            return value
        return cls(
            participant=value["participant"],
            amount=money(value["amount"], field="amount"),
        )

    def to_dict(self) -> dict:
        return {"participant": self.participant, "amount": self.amount}
