"""
models/settlement.py — Settlement recommendations and their summaries.

A Settlement is a recommendation, never a recorded payment: nothing here is
persisted and nothing tracks whether it was paid.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Settlement:
    from_participant: str    # debtor
    to_participant:   str    # creditor
    amount:           Decimal

    def to_dict(self) -> dict:
        return {
            "from":   self.from_participant,
            "to":     self.to_participant,
            "amount": self.amount,
        }


@dataclass(frozen=True)
class SettlementSummary:
    total_expenses:    int
    total_amount:      Decimal
    participant_count: int

    def to_dict(self) -> dict:
        return {
            "total_expenses":    self.total_expenses,
            "total_amount":      self.total_amount,
            "participant_count": self.participant_count,
        }


@dataclass(frozen=True)
class ParticipantPosition:
    """One participant's side of a settlement plan."""

    participant: str
    total_owes:  Decimal    # sum of settlements this participant pays
    total_owed:  Decimal    # sum of settlements paid to this participant
    net_balance: Decimal    # total_owed - total_owes

    def to_dict(self) -> dict:
        return {
            "participant": self.participant,
            "total_owes":  self.total_owes,
            "total_owed":  self.total_owed,
            "net_balance": self.net_balance,
        }
