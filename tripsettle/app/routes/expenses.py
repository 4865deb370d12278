"""
routes/expenses.py — Expense split resolution.

The trip/expense store calls this when an expense is created or edited, and
persists the returned splits itself. Nothing is stored here.

Endpoints (base url_prefix=/api/v1/expenses):
  POST /expenses/splits  → 200  splits for split_mode none | equal | custom
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from tripsettle.app.schemas.expense_schema import ExpenseSplitsSchema
from tripsettle.app.services import split_service

expenses_bp = Blueprint("expenses", __name__)


@expenses_bp.route("/splits", methods=["POST"])
def resolve_expense_splits():
    """POST /expenses/splits — {payer, amount, split_mode, participants?, splits?} → {splits[]}"""
    schema = ExpenseSplitsSchema(
        max_participants=current_app.config["MAX_PARTICIPANTS_PER_SPLIT"],
    )
    data = schema.load(request.get_json(force=True) or {})

    splits = split_service.resolve_splits(
        amount=data["amount"],
        payer=data["payer"],
        mode=data["split_mode"],
        participants=data["participants"],
        inputs=data["splits"],
    )
    return jsonify({
        "data": {
            "payer": data["payer"],
            "amount": data["amount"],
            "split_mode": data["split_mode"].value,
            "splits": [s.to_dict() for s in splits],
        },
        "warnings": [],
    }), 200
