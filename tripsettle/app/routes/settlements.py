"""
routes/settlements.py — Settlement route handlers.

Settlements returned here are recommendations. Recording or executing a
payment is the caller's business.

Endpoints (base url_prefix=/api/v1/settlements):
  POST /settlements  → 200  {settlements[], summary, position?}
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from tripsettle.app.schemas.settlement_schema import SettleRequestSchema
from tripsettle.app.services import settlement_service

settlements_bp = Blueprint("settlements", __name__)


@settlements_bp.route("", methods=["POST"])
def compute_settlements():
    """
    POST /settlements — {expenses[], participant?}

    Balances are netted across all expenses, then matched greedily
    (largest debtor with largest creditor).
    """
    schema = SettleRequestSchema(
        max_expenses=current_app.config["MAX_EXPENSES_PER_REQUEST"],
    )
    data = schema.load(request.get_json(force=True) or {})

    result = settlement_service.get_settlement_response(
        data["expenses"],
        participant=data["participant"],
    )
    current_app.logger.debug(
        "Computed %d settlement(s) for %d expense(s).",
        len(result["settlements"]),
        len(data["expenses"]),
    )
    return jsonify({"data": result, "warnings": []}), 200
