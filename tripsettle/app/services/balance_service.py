"""
services/balance_service.py — Net balance computation.

This file is the SINGLE SOURCE OF TRUTH for how balances are computed.
The canonical formula must not be reimplemented elsewhere in the codebase.

Layer rules:
  - No Flask imports. No HTTP knowledge. No logging.
  - Receives expense records (ExpenseRecord or plain mappings) as arguments.
  - Returns plain Python dicts and lists.

No rounding correction happens here. Each expense's splits are expected to
reconcile with its amount already (split_service guarantees this for splits
it produced); drift across expenses is reported, never "fixed".
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from tripsettle.app.models.expense import ExpenseRecord
from tripsettle.app.money import ZERO

ExpenseLike = ExpenseRecord | Mapping[str, Any]


def coerce_expenses(expenses: Iterable[ExpenseLike] | None) -> list[ExpenseRecord]:
    """Normalises caller-supplied expenses to ExpenseRecord instances."""
    return [ExpenseRecord.coerce(e) for e in (expenses or [])]


def compute_balances(expenses: Iterable[ExpenseLike] | None) -> dict[str, Decimal]:
    """
    Canonical balance computation.

    Returns {participant: net_balance}. Positive means the participant is
    owed money overall; negative means they owe money overall.

    Algorithm:
      1. Credit each payer for the full expense amount they fronted.
      2. Debit each split participant for their split amount.

    The payer is not special-cased: they owe a personal share only when they
    appear in their own expense's splits. An expense without splits credits
    the payer and debits nobody.

    Participants appear in the order they are first seen.
    """
    balances: dict[str, Decimal] = defaultdict(lambda: ZERO)

    for expense in coerce_expenses(expenses):
        balances[expense.payer] += expense.amount
        for split in expense.splits or ():
            balances[split.participant] -= split.amount

    return dict(balances)


def get_balance_response(expenses: Iterable[ExpenseLike] | None) -> dict:
    """
    Builds the balance payload for POST /balances.

    balance_sum is zero whenever every expense carries splits that reconcile
    with its amount. Un-split expenses contribute credit only, so a non-zero
    sum is expected for them and is not an error.
    """
    balances = compute_balances(expenses)
    return {
        "balances": [
            {"participant": participant, "balance": balance}
            for participant, balance in balances.items()
        ],
        "balance_sum": sum(balances.values(), ZERO),
    }
