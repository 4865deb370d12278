"""
routes/splits.py — Split calculation route handlers.

Layer rules:
  - Parse, validate, call ONE service, return envelope.
  - No business logic. No arithmetic on amounts.

Endpoints (base url_prefix=/api/v1/splits):
  POST /splits/equal     → 200  equal split
  POST /splits/custom    → 200  split by amounts or percentages
  POST /splits/validate  → 200  {"valid": true}, or the violated rule (422)
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from tripsettle.app.schemas.expense_schema import CustomSplitSchema, EqualSplitSchema
from tripsettle.app.services import split_service

splits_bp = Blueprint("splits", __name__)


def _max_participants() -> int:
    return current_app.config["MAX_PARTICIPANTS_PER_SPLIT"]


@splits_bp.route("/equal", methods=["POST"])
def split_equally():
    """POST /splits/equal — {amount, participants[]} → {splits[]}"""
    data = EqualSplitSchema(max_participants=_max_participants()).load(
        request.get_json(force=True) or {}
    )
    splits = split_service.split_equally(data["amount"], data["participants"])
    return jsonify({
        "data": {"splits": [s.to_dict() for s in splits]},
        "warnings": [],
    }), 200


@splits_bp.route("/custom", methods=["POST"])
def split_custom():
    """POST /splits/custom — {amount, splits[{participant, amount|percentage}]} → {splits[]}"""
    data = CustomSplitSchema(max_participants=_max_participants()).load(
        request.get_json(force=True) or {}
    )
    splits = split_service.split_custom(data["amount"], data["splits"])
    return jsonify({
        "data": {"splits": [s.to_dict() for s in splits]},
        "warnings": [],
    }), 200


@splits_bp.route("/validate", methods=["POST"])
def validate_splits():
    """
    POST /splits/validate — same body as /splits/custom.
    A failed check propagates as its SplitError and is rendered by the
    global AppError handler.
    """
    data = CustomSplitSchema(max_participants=_max_participants()).load(
        request.get_json(force=True) or {}
    )
    split_service.validate_splits(data["amount"], data["splits"])
    return jsonify({"data": {"valid": True}, "warnings": []}), 200
