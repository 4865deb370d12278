"""
services/split_service.py — Split validation and split calculation.

This file is the SINGLE SOURCE OF TRUTH for how one expense amount is divided
among participants. Routes and other services call into it; they never
re-derive shares themselves.

Rounding rules:
  - Equal split: the per-participant base share is truncated to cents
    (ROUND_DOWN). The remainder goes to the FIRST participant in input order.
  - Percentage split: each share is rounded half-up to cents. The rounding
    error goes to the FIRST entry.
  - Fixed-amount split: shares are taken as given; no redistribution.
  The first-participant tie-break is fixed. It is not configurable.

Layer rules:
  - No Flask imports. No HTTP knowledge. No logging.
  - Receives plain values, returns SplitResult lists or raises a SplitError.
  - Every function is pure: same input, same output.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal
from typing import Any

from tripsettle.app.errors import (
    AmbiguousSplitMode,
    AppError,
    DuplicateParticipant,
    EmptySplitSet,
    ErrorCode,
    InvalidAmount,
    MissingParticipant,
    MissingSplitValue,
    MixedSplitModes,
    NoParticipants,
    NonPositiveSplitAmount,
    PercentageOutOfRange,
    SplitSumMismatch,
)
from tripsettle.app.models.expense import SplitMode
from tripsettle.app.models.split import CustomSplitMode, SplitInput, SplitResult
from tripsettle.app.money import (
    HUNDRED,
    SUM_TOLERANCE,
    ZERO,
    Numeric,
    floor_cents,
    money,
    round_cents,
    to_decimal,
)

SplitInputLike = SplitInput | Mapping[str, Any]


# ── Private helpers ────────────────────────────────────────────────────────

def _require_positive_amount(amount: Numeric) -> Decimal:
    """Returns amount as cents, or raises InvalidAmount if it is not > 0."""
    value = money(amount, field="amount")
    if value <= ZERO:
        raise InvalidAmount(
            f"Amount must be greater than zero, got {value}.",
            field="amount",
        )
    return value


def _require_participant(participant: Any, index: int) -> None:
    if not isinstance(participant, str) or not participant.strip():
        raise MissingParticipant(
            f"Split entry {index} has no participant identifier.",
            field="participant",
        )


def _require_unique(participants: Iterable[str]) -> None:
    """Raises DuplicateParticipant for the first identifier seen twice."""
    seen: set[str] = set()
    for participant in participants:
        if participant in seen:
            raise DuplicateParticipant(
                f"Participant {participant!r} appears more than once.",
                field="participant",
            )
        seen.add(participant)


def _check_entry(entry: SplitInput, index: int) -> CustomSplitMode:
    """
    Per-entry checks, in order:
      identifier present → exactly one of amount/percentage →
      amount > 0 → percentage within [0, 100].
    Returns the entry's mode.
    """
    _require_participant(entry.participant, index)

    if entry.amount is not None and entry.percentage is not None:
        raise AmbiguousSplitMode(
            f"Split for {entry.participant!r} sets both amount and percentage.",
            field="participant",
        )
    if entry.amount is None and entry.percentage is None:
        raise MissingSplitValue(
            f"Split for {entry.participant!r} sets neither amount nor percentage.",
            field="participant",
        )

    if entry.mode is CustomSplitMode.AMOUNT:
        if entry.amount <= ZERO:
            raise NonPositiveSplitAmount(
                f"Split amount for {entry.participant!r} must be greater than zero, "
                f"got {entry.amount}.",
                field="amount",
            )
        return CustomSplitMode.AMOUNT

    if not ZERO <= entry.percentage <= HUNDRED:
        raise PercentageOutOfRange(
            f"Split percentage for {entry.participant!r} must be between 0 and 100, "
            f"got {entry.percentage}.",
            field="percentage",
        )
    return CustomSplitMode.PERCENTAGE


def _reconcile(amount: Decimal, entries: Sequence[SplitInput], mode: CustomSplitMode) -> None:
    """
    Confirms the entries add up: percentages to 100, amounts to `amount`,
    each within SUM_TOLERANCE. Raises SplitSumMismatch otherwise.
    """
    if mode is CustomSplitMode.PERCENTAGE:
        total = sum((e.percentage for e in entries), ZERO)
        if abs(total - HUNDRED) > SUM_TOLERANCE:
            raise SplitSumMismatch(
                f"Percentages must sum to 100, got {total}.",
                field="splits",
            )
        return

    total = sum((e.amount for e in entries), ZERO)
    difference = abs(total - amount)
    if difference > SUM_TOLERANCE:
        direction = "exceed" if total > amount else "fall short of"
        raise SplitSumMismatch(
            f"Split amounts ({total}) {direction} the expense amount ({amount}) "
            f"by {difference}.",
            field="splits",
        )


def _coerce_inputs(inputs: Iterable[SplitInputLike] | None) -> list[SplitInput]:
    return [SplitInput.coerce(i) for i in (inputs or [])]


def _validated(amount: Numeric, inputs: Iterable[SplitInputLike] | None) -> tuple[Decimal, list[SplitInput], CustomSplitMode]:
    """Runs every validation step and returns the normalised request."""
    total = _require_positive_amount(amount)

    entries = _coerce_inputs(inputs)
    if not entries:
        raise EmptySplitSet("At least one split entry is required.", field="splits")

    modes = [_check_entry(entry, index) for index, entry in enumerate(entries)]

    if len(set(modes)) > 1:
        raise MixedSplitModes(
            "Cannot mix amounts and percentages in one split set.",
            field="splits",
        )

    _require_unique(e.participant for e in entries)

    mode = modes[0]
    _reconcile(total, entries, mode)
    return total, entries, mode


def _percentage_shares(amount: Decimal, entries: Sequence[SplitInput]) -> list[Decimal]:
    """
    Half-up share per entry, with the rounding error folded into the first
    entry. A negative error is taken from the first entry as far as its
    share allows, then from the following entries in order, so no share
    ever goes below zero.
    """
    shares = [round_cents(amount * e.percentage / HUNDRED) for e in entries]
    error = amount - sum(shares, ZERO)

    if error >= ZERO:
        shares[0] += error
        return shares

    for index, share in enumerate(shares):
        taken = min(share, -error)
        shares[index] -= taken
        error += taken
        if error == ZERO:
            break
    return shares


# ── Public service functions ───────────────────────────────────────────────

def validate_splits(amount: Numeric, inputs: Iterable[SplitInputLike] | None) -> None:
    """
    Validates a custom split request. Returns None on success.

    Checks, in order, each failing fast:
      1. amount > 0                                     InvalidAmount
      2. at least one entry                             EmptySplitSet
      3. every entry names a participant                MissingParticipant
         and sets exactly one of amount/percentage      AmbiguousSplitMode / MissingSplitValue
      4. amounts > 0                                    NonPositiveSplitAmount
      5. percentages within [0, 100]                    PercentageOutOfRange
      6. all entries share one mode                     MixedSplitModes
      7. no participant appears twice                   DuplicateParticipant
      8. totals reconcile within 0.01                    SplitSumMismatch
    """
    _validated(amount, inputs)


def split_equally(amount: Numeric, participants: Sequence[str]) -> list[SplitResult]:
    """
    Divides amount evenly among participants.

    Every participant receives the base share truncated to cents; the first
    participant (input order) also receives the remainder, so
    sum(result amounts) == amount exactly.

        split_equally("10.00", ["A", "B", "C"])  →  A=3.34, B=3.33, C=3.33

    Raises:
        NoParticipants        -- participants is empty.
        InvalidAmount         -- amount is not > 0.
        MissingParticipant    -- an identifier is blank.
        DuplicateParticipant  -- an identifier appears twice.
    """
    participants = list(participants or [])
    if not participants:
        raise NoParticipants("Cannot split an expense among zero participants.", field="participants")

    total = _require_positive_amount(amount)

    for index, participant in enumerate(participants):
        _require_participant(participant, index)
    _require_unique(participants)

    n = len(participants)
    base = floor_cents(total / Decimal(n))
    remainder = total - base * n

    return [
        SplitResult(participant, base + remainder if index == 0 else base)
        for index, participant in enumerate(participants)
    ]


def split_custom(amount: Numeric, inputs: Iterable[SplitInputLike]) -> list[SplitResult]:
    """
    Divides amount according to caller-supplied amounts or percentages.
    The request is validated first (see validate_splits); results keep the
    input order.

    Percentage mode:
        split_custom("100.00", [{"participant": "A", "percentage": 50},
                                {"participant": "B", "percentage": 30},
                                {"participant": "C", "percentage": 20}])
        → A=50.00, B=30.00, C=20.00

    Amount mode returns the given amounts rounded to cents.
    """
    total, entries, mode = _validated(amount, inputs)

    if mode is CustomSplitMode.PERCENTAGE:
        shares = _percentage_shares(total, entries)
    else:
        shares = [round_cents(e.amount) for e in entries]

    return [SplitResult(e.participant, share) for e, share in zip(entries, shares)]


def resolve_splits(
        amount: Numeric,
        payer: str,
        mode: SplitMode | str,
        participants: Sequence[str] | None = None,
        inputs: Iterable[SplitInputLike] | None = None,
) -> list[SplitResult]:
    """
    Produces the splits stored with a new expense.

      mode='equal'  → split_equally(amount, participants)
      mode='custom' → split_custom(amount, inputs)
      mode='none'   → the payer carries the full amount alone.

    Raises AppError(INVALID_SPLIT_MODE, 400) for an unknown mode, or the
    SplitError of whichever calculator rejects the request.
    """
    try:
        split_mode = SplitMode(mode)
    except ValueError:
        raise AppError(
            ErrorCode.INVALID_SPLIT_MODE,
            f"{mode!r} is not a valid split mode. "
            f"Valid values: {', '.join(m.value for m in SplitMode)}.",
            400,
            field="split_mode",
        ) from None

    if split_mode is SplitMode.EQUAL:
        return split_equally(amount, participants or [])

    if split_mode is SplitMode.CUSTOM:
        return split_custom(amount, inputs or [])

    total = _require_positive_amount(amount)
    _require_participant(payer, 0)
    return [SplitResult(payer, total)]


# ── Preview helpers ────────────────────────────────────────────────────────
# Used by clients while a split is being edited. They never raise for an
# empty or zero input; they return 0.00 so a half-filled form still renders.

def per_person_amount(total: Numeric, count: int) -> Decimal:
    """Base equal share (truncated to cents), before the remainder is assigned."""
    if count <= 0:
        return ZERO
    return floor_cents(money(total) / Decimal(count))


def amount_from_percentage(total: Numeric, percentage: Numeric) -> Decimal:
    """The share split_custom would compute for one percentage entry."""
    return round_cents(money(total) * to_decimal(percentage) / HUNDRED)


def percentage_from_amount(total: Numeric, amount: Numeric) -> Decimal:
    """amount as a percentage of total, truncated to two decimal places."""
    total_value = money(total)
    if total_value == ZERO:
        return ZERO
    return floor_cents(money(amount) / total_value * HUNDRED)
