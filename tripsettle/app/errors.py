"""
errors.py — AppError base class, error code registry and typed split errors.

Every error raised by the split/settlement engine and every error returned by
the HTTP layer uses a code defined here.
Do not raise strings or generic exceptions from service or route code.

Rules:
  - Error codes are a versioned contract. They do not change once published.
  - Error messages are human-readable prose. They may be improved at any time.
  - Engine errors are caller-input errors. They are never transient and must
    never be retried.
"""

from __future__ import annotations


class AppError(Exception):

    def __init__(
            self,
            code: str,
            message: str,
            http_status: int,
            field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code        = code
        self.message     = message
        self.http_status = http_status
        self.field       = field  # which request field caused the error

    def to_dict(self) -> dict:
        payload = {
            "code":    self.code,
            "message": self.message,
        }
        if self.field is not None:
            payload["field"] = self.field
        return {"error": payload}

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.code!r}, "
            f"http_status={self.http_status}, "
            f"message={self.message!r})"
        )


# ── Error Code Registry ────────────────────────────────────────────────────
#
# Organised by category. HTTP status is indicated in the comment.
#
# IMPORTANT: these are the string values sent in the API response.
# Do not rename them without a major version bump.
# ──────────────────────────────────────────────────────────────────────────

class ErrorCode:

    # ── Schema / Input Errors (400) ────────────────────────────────────────
    MISSING_FIELD              = "MISSING_FIELD"
    INVALID_FIELD              = "INVALID_FIELD"
    INVALID_AMOUNT_PRECISION   = "INVALID_AMOUNT_PRECISION"
    INVALID_SPLIT_MODE         = "INVALID_SPLIT_MODE"
    UNEXPECTED_SPLIT_DATA      = "UNEXPECTED_SPLIT_DATA"
    TOO_MANY_ITEMS             = "TOO_MANY_ITEMS"

    # ── Malformed top-level request (422) ──────────────────────────────────
    INVALID_AMOUNT             = "INVALID_AMOUNT"
    EMPTY_SPLIT_SET            = "EMPTY_SPLIT_SET"
    NO_PARTICIPANTS            = "NO_PARTICIPANTS"

    # ── Per-entry mode violations (422) ────────────────────────────────────
    MISSING_PARTICIPANT        = "MISSING_PARTICIPANT"
    AMBIGUOUS_SPLIT_MODE       = "AMBIGUOUS_SPLIT_MODE"
    MISSING_SPLIT_VALUE        = "MISSING_SPLIT_VALUE"
    MIXED_SPLIT_MODES          = "MIXED_SPLIT_MODES"

    # ── Out-of-range values (422) ──────────────────────────────────────────
    NON_POSITIVE_SPLIT_AMOUNT  = "NON_POSITIVE_SPLIT_AMOUNT"
    PERCENTAGE_OUT_OF_RANGE    = "PERCENTAGE_OUT_OF_RANGE"

    # ── Reconciliation (422) ───────────────────────────────────────────────
    SPLIT_SUM_MISMATCH         = "SPLIT_SUM_MISMATCH"
    DUPLICATE_PARTICIPANT      = "DUPLICATE_PARTICIPANT"

    # ── System Errors (500) ────────────────────────────────────────────────
    INTERNAL_ERROR             = "INTERNAL_ERROR"


# ── Typed engine errors ────────────────────────────────────────────────────
#
# One subclass per violated rule so callers can catch exactly what they care
# about (`except MixedSplitModes`) or the whole family (`except SplitError`).
# The HTTP layer only needs AppError: code and status travel with the class.
# ──────────────────────────────────────────────────────────────────────────

class SplitError(AppError):
    """Base class for every split/settlement engine error (422)."""

    code: str = ErrorCode.INVALID_FIELD
    http_status: int = 422

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(type(self).code, message, type(self).http_status, field=field)


class InvalidAmount(SplitError):
    code = ErrorCode.INVALID_AMOUNT


class EmptySplitSet(SplitError):
    code = ErrorCode.EMPTY_SPLIT_SET


class NoParticipants(SplitError):
    code = ErrorCode.NO_PARTICIPANTS


class MissingParticipant(SplitError):
    code = ErrorCode.MISSING_PARTICIPANT


class AmbiguousSplitMode(SplitError):
    code = ErrorCode.AMBIGUOUS_SPLIT_MODE


class MissingSplitValue(SplitError):
    code = ErrorCode.MISSING_SPLIT_VALUE


class MixedSplitModes(SplitError):
    code = ErrorCode.MIXED_SPLIT_MODES


class NonPositiveSplitAmount(SplitError):
    code = ErrorCode.NON_POSITIVE_SPLIT_AMOUNT


class PercentageOutOfRange(SplitError):
    code = ErrorCode.PERCENTAGE_OUT_OF_RANGE


class SplitSumMismatch(SplitError):
    code = ErrorCode.SPLIT_SUM_MISMATCH


class DuplicateParticipant(SplitError):
    code = ErrorCode.DUPLICATE_PARTICIPANT
