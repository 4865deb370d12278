"""
models/expense.py — Expense record consumed by the balance aggregator.

The trip/expense store owns expenses; the engine only reads them and never
mutates one. SplitMode is a Python enum so it can be imported and used
throughout the service and schema layers without repeating string literals.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from tripsettle.app.models.split import SplitResult
from tripsettle.app.money import money


class SplitMode(str, enum.Enum):
    """How an expense's splits are produced when it is created."""
    NONE   = "none"     # payer carries the full amount
    EQUAL  = "equal"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ExpenseRecord:
    """
    One expense as seen by the engine.

    splits is None when the expense was never split. Such an expense credits
    the payer and debits nobody; an empty tuple behaves the same way.
    """

    payer:  str
    amount: Decimal
    splits: tuple[SplitResult, ...] | None = None

    @classmethod
    def coerce(cls, value: ExpenseRecord | Mapping[str, Any]) -> ExpenseRecord:
        """Accepts an ExpenseRecord or a {payer, amount, splits?} mapping."""
        if isinstance(value, ExpenseRecord):
            return value

        raw_splits = value.get("splits")
        splits = (
            None if raw_splits is None
            else tuple(SplitResult.coerce(s) for s in raw_splits)
        )
        return cls(
            payer=value["payer"],
            amount=money(value["amount"], field="amount"),
            splits=splits,
        )
