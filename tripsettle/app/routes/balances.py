"""
routes/balances.py — Balance route handlers.

Layer rules:
  - Parse, validate, call ONE service, return envelope.
  - No business logic.

Endpoints (base url_prefix=/api/v1/balances):
  POST /balances  → 200  net balance per participant + balance_sum
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from tripsettle.app.schemas.settlement_schema import ExpenseBatchSchema
from tripsettle.app.services import balance_service

balances_bp = Blueprint("balances", __name__)


@balances_bp.route("", methods=["POST"])
def get_balances():
    """
    POST /balances — {expenses[]} → {balances[], balance_sum}

    balance_sum is "0.00" when every expense carries reconciled splits.
    Un-split expenses credit their payer only, so the sum is then non-zero
    and the client must not treat it as an error.
    """
    schema = ExpenseBatchSchema(
        max_expenses=current_app.config["MAX_EXPENSES_PER_REQUEST"],
    )
    data = schema.load(request.get_json(force=True) or {})

    result = balance_service.get_balance_response(data["expenses"])
    return jsonify({"data": result, "warnings": []}), 200
