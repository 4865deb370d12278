"""
services/settlement_service.py — Settlement optimisation.

Turns net balances into a short list of debtor → creditor payments.

Algorithm (greedy largest-debt / largest-credit matching):
  1. Debtors are balances below -0.01, creditors are balances above 0.01.
     Anything within ±0.01 of zero is already settled.
  2. Both lists are sorted by magnitude, largest first. The sort is stable,
     so equal magnitudes keep the order in which participants were first seen.
  3. Two cursors walk the lists. Each step pays min(debt, credit) from the
     current debtor to the current creditor, and advances whichever side
     dropped below 0.01.
  4. The walk stops when either list runs out. Leftover residue is dropped.

This produces at most (participants - 1) settlements in O(n log n). It is
not guaranteed to find the minimum number of transactions (that problem is
NP-hard in general). Replacing it would change the pairings callers see.

Layer rules:
  - No Flask imports. No HTTP knowledge. No logging.
  - Every function is pure and keeps no state between calls.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal

from tripsettle.app.models.settlement import (
    ParticipantPosition,
    Settlement,
    SettlementSummary,
)
from tripsettle.app.money import SETTLEMENT_THRESHOLD, ZERO, round_cents
from tripsettle.app.services.balance_service import (
    ExpenseLike,
    coerce_expenses,
    compute_balances,
)


def simplify_debts(balances: Mapping[str, Decimal]) -> list[Settlement]:
    """
    Greedy debt simplification over precomputed balances.

    Args:
        balances: {participant: net_balance} from compute_balances().

    Returns:
        Settlements in emission order. An empty list means everyone is
        within 0.01 of even.
    """
    # Largest creditor first, largest debtor first. Magnitudes only.
    creditors = sorted(
        [(pid, amt) for pid, amt in balances.items() if amt > SETTLEMENT_THRESHOLD],
        key=lambda x: x[1],
        reverse=True,
    )
    debtors = sorted(
        [(pid, -amt) for pid, amt in balances.items() if amt < -SETTLEMENT_THRESHOLD],
        key=lambda x: x[1],
        reverse=True,
    )

    settlements: list[Settlement] = []
    i = j = 0

    while i < len(debtors) and j < len(creditors):
        did, debt = debtors[i]
        cid, credit = creditors[j]

        transfer = min(debt, credit)
        if transfer > SETTLEMENT_THRESHOLD:
            settlements.append(Settlement(did, cid, round_cents(transfer)))

        debtors[i] = (did, debt - transfer)
        creditors[j] = (cid, credit - transfer)

        if debtors[i][1] < SETTLEMENT_THRESHOLD:
            i += 1
        if creditors[j][1] < SETTLEMENT_THRESHOLD:
            j += 1

    return settlements


def settle(expenses: Iterable[ExpenseLike] | None) -> list[Settlement]:
    """
    Computes who pays whom to clear every balance across `expenses`.

    Balances are netted across all expenses before matching, so two expenses
    that partly cancel each other yield one payment, not two.
    """
    return simplify_debts(compute_balances(expenses))


def summarize(expenses: Iterable[ExpenseLike] | None) -> SettlementSummary:
    """Expense count, total amount and distinct participants (payers and split members)."""
    records = coerce_expenses(expenses)

    participants: set[str] = set()
    for record in records:
        participants.add(record.payer)
        participants.update(s.participant for s in record.splits or ())

    return SettlementSummary(
        total_expenses=len(records),
        total_amount=sum((r.amount for r in records), ZERO),
        participant_count=len(participants),
    )


def position_for(participant: str, settlements: Sequence[Settlement]) -> ParticipantPosition:
    """Totals one participant pays and receives under a settlement plan."""
    owes = sum(
        (s.amount for s in settlements if s.from_participant == participant),
        ZERO,
    )
    owed = sum(
        (s.amount for s in settlements if s.to_participant == participant),
        ZERO,
    )
    return ParticipantPosition(
        participant=participant,
        total_owes=owes,
        total_owed=owed,
        net_balance=owed - owes,
    )


def get_settlement_response(
        expenses: Iterable[ExpenseLike] | None,
        participant: str | None = None,
) -> dict:
    """
    Builds the payload for POST /settlements.

    When `participant` is given, the payload also carries that participant's
    position (what they owe, what they are owed, and the net).
    """
    records = coerce_expenses(expenses)
    settlements = settle(records)

    payload = {
        "settlements": [s.to_dict() for s in settlements],
        "summary": summarize(records).to_dict(),
    }
    if participant is not None:
        payload["position"] = position_for(participant, settlements).to_dict()
    return payload
