"""
tests/integration/test_split_routes.py — Integration tests for split endpoints.

Endpoints covered:
  POST /splits/equal       → 200 (equal split)
  POST /splits/custom      → 200 (amount or percentage split)
  POST /splits/validate    → 200 {"valid": true} or 422
  POST /expenses/splits    → 200 (splits for split_mode none | equal | custom)

Checked here:
  - Monetary amounts are serialised as strings with exactly 2 dp
  - sum(splits) == amount for equal and percentage splits
  - Engine rule violations are 422 with their typed code
  - Schema violations (shape, precision, limits) are 400
"""

from __future__ import annotations

from decimal import Decimal

import pytest


def _post(client, path: str, body: dict):
    return client.post(f"/api/v1{path}", json=body)


def _amounts(resp) -> list[str]:
    return [s["amount"] for s in resp.get_json()["data"]["splits"]]


def _error(resp) -> dict:
    return resp.get_json()["error"]


# ═══════════════════════════════════════════════════════════════════════════
# POST /splits/equal
# ═══════════════════════════════════════════════════════════════════════════

class TestEqualSplit:

    def test_remainder_goes_to_first_participant(self, client):
        resp = _post(client, "/splits/equal", {"amount": "10.00", "participants": ["A", "B", "C"]})

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["warnings"] == []
        assert body["data"]["splits"] == [
            {"participant": "A", "amount": "3.34"},
            {"participant": "B", "amount": "3.33"},
            {"participant": "C", "amount": "3.33"},
        ]

    def test_numeric_amount_is_returned_as_string(self, client):
        resp = _post(client, "/splits/equal", {"amount": 100, "participants": ["A", "B"]})

        assert _amounts(resp) == ["50.00", "50.00"]

    def test_sum_matches_amount(self, client):
        resp = _post(client, "/splits/equal", {"amount": "1000.01", "participants": list("ABCDEFG")})

        assert sum(Decimal(a) for a in _amounts(resp)) == Decimal("1000.01")

    def test_no_participants_is_422(self, client):
        resp = _post(client, "/splits/equal", {"amount": "10.00", "participants": []})

        assert resp.status_code == 422
        assert _error(resp)["code"] == "NO_PARTICIPANTS"

    @pytest.mark.parametrize("amount", ["0", "-5.00"])
    def test_non_positive_amount_is_422(self, client, amount):
        resp = _post(client, "/splits/equal", {"amount": amount, "participants": ["A"]})

        assert resp.status_code == 422
        assert _error(resp)["code"] == "INVALID_AMOUNT"
        assert _error(resp)["field"] == "amount"

    def test_duplicate_participant_is_422(self, client):
        resp = _post(client, "/splits/equal", {"amount": "10.00", "participants": ["A", "A"]})

        assert resp.status_code == 422
        assert _error(resp)["code"] == "DUPLICATE_PARTICIPANT"

    def test_three_decimal_places_is_400(self, client):
        resp = _post(client, "/splits/equal", {"amount": "10.001", "participants": ["A"]})

        assert resp.status_code == 400
        assert _error(resp) == {
            "code": "INVALID_AMOUNT_PRECISION",
            "message": "Amount must have at most 2 decimal places.",
            "field": "amount",
        }

    def test_missing_participants_is_400(self, client):
        resp = _post(client, "/splits/equal", {"amount": "10.00"})

        assert resp.status_code == 400
        assert _error(resp)["code"] == "MISSING_FIELD"
        assert _error(resp)["field"] == "participants"

    def test_participant_limit_is_400(self, client):
        resp = _post(client, "/splits/equal", {
            "amount": "100.00",
            "participants": [f"p{i}" for i in range(21)],
        })

        assert resp.status_code == 400
        assert _error(resp)["code"] == "TOO_MANY_ITEMS"


# ═══════════════════════════════════════════════════════════════════════════
# POST /splits/custom
# ═══════════════════════════════════════════════════════════════════════════

class TestCustomSplit:

    def test_percentage_split(self, client):
        resp = _post(client, "/splits/custom", {
            "amount": "100.00",
            "splits": [
                {"participant": "A", "percentage": 50},
                {"participant": "B", "percentage": 30},
                {"participant": "C", "percentage": 20},
            ],
        })

        assert resp.status_code == 200
        assert _amounts(resp) == ["50.00", "30.00", "20.00"]

    def test_percentage_rounding_error_on_first_entry(self, client):
        resp = _post(client, "/splits/custom", {
            "amount": "10.00",
            "splits": [
                {"participant": "A", "percentage": "33.33"},
                {"participant": "B", "percentage": "33.33"},
                {"participant": "C", "percentage": "33.34"},
            ],
        })

        assert _amounts(resp) == ["3.34", "3.33", "3.33"]

    def test_amount_split(self, client):
        resp = _post(client, "/splits/custom", {
            "amount": "100.00",
            "splits": [
                {"participant": "A", "amount": "60.00"},
                {"participant": "B", "amount": "40.00"},
            ],
        })

        assert resp.status_code == 200
        assert _amounts(resp) == ["60.00", "40.00"]

    def test_mixed_modes_is_422(self, client):
        resp = _post(client, "/splits/custom", {
            "amount": "100.00",
            "splits": [
                {"participant": "A", "amount": "50.00"},
                {"participant": "B", "percentage": 50},
            ],
        })

        assert resp.status_code == 422
        assert _error(resp)["code"] == "MIXED_SPLIT_MODES"

    def test_sum_mismatch_is_422(self, client):
        resp = _post(client, "/splits/custom", {
            "amount": "100.00",
            "splits": [
                {"participant": "A", "percentage": 50},
                {"participant": "B", "percentage": 40},
            ],
        })

        assert resp.status_code == 422
        assert _error(resp)["code"] == "SPLIT_SUM_MISMATCH"

    def test_empty_splits_is_422(self, client):
        resp = _post(client, "/splits/custom", {"amount": "100.00", "splits": []})

        assert resp.status_code == 422
        assert _error(resp)["code"] == "EMPTY_SPLIT_SET"

    def test_nested_precision_error_names_the_entry(self, client):
        resp = _post(client, "/splits/custom", {
            "amount": "100.00",
            "splits": [
                {"participant": "A", "amount": "50.00"},
                {"participant": "B", "amount": "49.999"},
            ],
        })

        assert resp.status_code == 400
        assert _error(resp)["code"] == "INVALID_AMOUNT_PRECISION"
        assert _error(resp)["field"] == "splits.1.amount"


# ═══════════════════════════════════════════════════════════════════════════
# POST /splits/validate
# ═══════════════════════════════════════════════════════════════════════════

class TestValidateSplits:

    def test_valid_request(self, client):
        resp = _post(client, "/splits/validate", {
            "amount": "100.00",
            "splits": [
                {"participant": "A", "percentage": 100},
            ],
        })

        assert resp.status_code == 200
        assert resp.get_json()["data"] == {"valid": True}

    @pytest.mark.parametrize("entry, code", [
        ({"participant": "A", "amount": "100.00", "percentage": 100}, "AMBIGUOUS_SPLIT_MODE"),
        ({"participant": "A"},                                        "MISSING_SPLIT_VALUE"),
        ({"participant": "A", "amount": "0.00"},                      "NON_POSITIVE_SPLIT_AMOUNT"),
        ({"participant": "A", "percentage": 101},                     "PERCENTAGE_OUT_OF_RANGE"),
    ])
    def test_entry_rules_are_422(self, client, entry, code):
        resp = _post(client, "/splits/validate", {"amount": "100.00", "splits": [entry]})

        assert resp.status_code == 422
        assert _error(resp)["code"] == code


# ═══════════════════════════════════════════════════════════════════════════
# POST /expenses/splits
# ═══════════════════════════════════════════════════════════════════════════

class TestExpenseSplits:

    def test_none_mode_payer_carries_full_amount(self, client):
        resp = _post(client, "/expenses/splits", {"payer": "A", "amount": "42.00"})

        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["split_mode"] == "none"
        assert data["amount"] == "42.00"
        assert data["splits"] == [{"participant": "A", "amount": "42.00"}]

    def test_equal_mode(self, client):
        resp = _post(client, "/expenses/splits", {
            "payer": "A",
            "amount": "10.00",
            "split_mode": "equal",
            "participants": ["A", "B", "C"],
        })

        assert resp.status_code == 200
        assert _amounts(resp) == ["3.34", "3.33", "3.33"]

    def test_custom_mode(self, client):
        resp = _post(client, "/expenses/splits", {
            "payer": "A",
            "amount": "80.00",
            "split_mode": "custom",
            "splits": [
                {"participant": "B", "percentage": 25},
                {"participant": "C", "percentage": 75},
            ],
        })

        assert _amounts(resp) == ["20.00", "60.00"]

    def test_equal_mode_without_participants_is_422(self, client):
        resp = _post(client, "/expenses/splits", {"payer": "A", "amount": "10.00", "split_mode": "equal"})

        assert resp.status_code == 422
        assert _error(resp)["code"] == "NO_PARTICIPANTS"

    def test_unknown_split_mode_is_400(self, client):
        resp = _post(client, "/expenses/splits", {"payer": "A", "amount": "10.00", "split_mode": "thirds"})

        assert resp.status_code == 400
        assert _error(resp)["code"] == "INVALID_SPLIT_MODE"
        assert _error(resp)["field"] == "split_mode"

    def test_data_for_other_mode_is_400(self, client):
        resp = _post(client, "/expenses/splits", {
            "payer": "A",
            "amount": "10.00",
            "split_mode": "equal",
            "participants": ["A", "B"],
            "splits": [{"participant": "A", "amount": "10.00"}],
        })

        assert resp.status_code == 400
        assert _error(resp)["code"] == "UNEXPECTED_SPLIT_DATA"
        assert _error(resp)["field"] == "splits"
