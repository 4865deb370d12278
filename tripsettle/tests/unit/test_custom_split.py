"""
tests/unit/test_custom_split.py — Unit tests for split_service.split_custom
and the split preview helpers.

What this file proves:
  - Percentage splits round each share half-up and fold the rounding error
    into the first entry, so sum(splits) == amount exactly
  - A rounding error never drives a share below zero
  - Fixed-amount splits are returned as given, without redistribution
  - Results keep the input order and are deterministic
  - split_custom validates before calculating (fail-fast)
  - resolve_splits dispatches on split mode
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from tripsettle.app.errors import (
    AppError,
    MixedSplitModes,
    NoParticipants,
    SplitSumMismatch,
)
from tripsettle.app.models.expense import SplitMode
from tripsettle.app.models.split import SplitInput, SplitResult
from tripsettle.app.services.split_service import (
    amount_from_percentage,
    per_person_amount,
    percentage_from_amount,
    resolve_splits,
    split_custom,
)


def _pct(participant: str, percentage: str) -> dict:
    return {"participant": participant, "percentage": percentage}


def _amt(participant: str, amount: str) -> dict:
    return {"participant": participant, "amount": amount}


def _total(splits: list[SplitResult]) -> Decimal:
    return sum((s.amount for s in splits), Decimal("0.00"))


# ── Percentage mode ────────────────────────────────────────────────────────

def test_percentage_split_exact():
    result = split_custom(Decimal("100.00"), [_pct("A", "50"), _pct("B", "30"), _pct("C", "20")])

    assert result == [
        SplitResult("A", Decimal("50.00")),
        SplitResult("B", Decimal("30.00")),
        SplitResult("C", Decimal("20.00")),
    ]


def test_percentage_rounding_error_goes_to_first_entry():
    """
    $10.00 at 33.33 / 33.33 / 33.34 % → 3.33, 3.33, 3.33 (sum 9.99).
    The missing cent is added to the first entry.
    """
    result = split_custom(
        Decimal("10.00"),
        [_pct("A", "33.33"), _pct("B", "33.33"), _pct("C", "33.34")],
    )

    assert [s.amount for s in result] == [Decimal("3.34"), Decimal("3.33"), Decimal("3.33")]
    assert _total(result) == Decimal("10.00")


def test_percentage_rounding_excess_taken_from_first_entry():
    """$0.05 at 50/50 % → 0.03 + 0.03 (half-up) = 0.06; first entry gives back a cent."""
    result = split_custom(Decimal("0.05"), [_pct("A", "50"), _pct("B", "50")])

    assert [s.amount for s in result] == [Decimal("0.02"), Decimal("0.03")]
    assert _total(result) == Decimal("0.05")


def test_percentages_within_tolerance_of_100_still_sum_exactly():
    """33.3333 × 3 = 99.9999 %, accepted; amounts still reconcile to the cent."""
    result = split_custom(
        Decimal("100.00"),
        [_pct("A", "33.3333"), _pct("B", "33.3333"), _pct("C", "33.3333")],
    )

    assert [s.amount for s in result] == [Decimal("33.34"), Decimal("33.33"), Decimal("33.33")]
    assert _total(result) == Decimal("100.00")


def test_rounding_error_never_makes_a_share_negative():
    """
    $0.01 at 0 / 50 / 50 % → 0.00, 0.01, 0.01 (sum 0.02). The first entry
    cannot give back a cent it does not have, so the next entry does.
    """
    result = split_custom(
        Decimal("0.01"),
        [_pct("A", "0"), _pct("B", "50"), _pct("C", "50")],
    )

    assert all(s.amount >= Decimal("0.00") for s in result)
    assert [s.amount for s in result] == [Decimal("0.00"), Decimal("0.00"), Decimal("0.01")]
    assert _total(result) == Decimal("0.01")


def test_percentage_sum_invariant_for_many_amounts():
    percentages = ["12.5", "37.5", "16.67", "33.33"]
    for amount_str in ["0.01", "0.99", "1.00", "19.99", "333.33", "1000.01", "98765.43"]:
        inputs = [_pct(f"p{i}", p) for i, p in enumerate(percentages)]
        result = split_custom(Decimal(amount_str), inputs)
        assert _total(result) == Decimal(amount_str), amount_str


def test_float_percentages_are_accepted():
    result = split_custom(60.0, [_pct("A", 50.0), _pct("B", 50.0)])

    assert [s.amount for s in result] == [Decimal("30.00"), Decimal("30.00")]


# ── Amount mode ────────────────────────────────────────────────────────────

def test_amount_split_returned_as_given():
    result = split_custom(Decimal("100.00"), [_amt("A", "60.00"), _amt("B", "40.00")])

    assert result == [
        SplitResult("A", Decimal("60.00")),
        SplitResult("B", Decimal("40.00")),
    ]


def test_amount_split_within_tolerance_is_not_redistributed():
    """33.33 × 3 = 99.99 against 100.00 is within 0.01; no cent is added."""
    result = split_custom(
        Decimal("100.00"),
        [_amt("A", "33.33"), _amt("B", "33.33"), _amt("C", "33.33")],
    )

    assert [s.amount for s in result] == [Decimal("33.33")] * 3


def test_amount_split_accepts_split_input_instances():
    inputs = [
        SplitInput("A", amount=Decimal("25.50")),
        SplitInput("B", amount=Decimal("74.50")),
    ]
    result = split_custom("100", inputs)

    assert _total(result) == Decimal("100.00")


def test_amount_split_mismatch_raises():
    with pytest.raises(SplitSumMismatch):
        split_custom(Decimal("100.00"), [_amt("A", "50.00"), _amt("B", "40.00")])


def test_validates_before_calculating():
    with pytest.raises(MixedSplitModes):
        split_custom(Decimal("100.00"), [_amt("A", "50.00"), _pct("B", "50")])


def test_result_order_matches_input_and_is_deterministic():
    inputs = [_pct("C", "20"), _pct("A", "50"), _pct("B", "30")]

    first = split_custom(Decimal("77.77"), inputs)
    second = split_custom(Decimal("77.77"), inputs)

    assert [s.participant for s in first] == ["C", "A", "B"]
    assert first == second


# ── resolve_splits ─────────────────────────────────────────────────────────

def test_resolve_none_mode_assigns_full_amount_to_payer():
    result = resolve_splits(Decimal("42.00"), payer="A", mode=SplitMode.NONE)

    assert result == [SplitResult("A", Decimal("42.00"))]


def test_resolve_equal_mode_uses_participants():
    result = resolve_splits("10.00", payer="A", mode="equal", participants=["B", "C", "A"])

    assert result[0] == SplitResult("B", Decimal("3.34"))


def test_resolve_equal_mode_without_participants_raises():
    with pytest.raises(NoParticipants):
        resolve_splits("10.00", payer="A", mode=SplitMode.EQUAL)


def test_resolve_custom_mode_uses_inputs():
    result = resolve_splits(
        "90.00",
        payer="A",
        mode="custom",
        inputs=[_pct("A", "50"), _pct("B", "50")],
    )

    assert [s.amount for s in result] == [Decimal("45.00"), Decimal("45.00")]


def test_resolve_unknown_mode_raises_invalid_split_mode():
    with pytest.raises(AppError) as exc:
        resolve_splits("10.00", payer="A", mode="thirds")

    assert exc.value.code == "INVALID_SPLIT_MODE"
    assert exc.value.http_status == 400


# ── Preview helpers ────────────────────────────────────────────────────────

def test_per_person_amount_truncates():
    assert per_person_amount("10.00", 3) == Decimal("3.33")
    assert per_person_amount("10.00", 0) == Decimal("0.00")


def test_amount_from_percentage_matches_split_share():
    assert amount_from_percentage("10.00", "33.33") == Decimal("3.33")
    assert amount_from_percentage("0.05", "50") == Decimal("0.03")


def test_percentage_from_amount():
    assert percentage_from_amount("30.00", "10.00") == Decimal("33.33")
    assert percentage_from_amount("0", "10.00") == Decimal("0.00")
