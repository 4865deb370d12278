"""
app/__init__.py — Flask application factory.

Pattern: create_app(config_name) creates and returns a configured Flask app.
         Nothing is initialised at import time, so tests can build isolated
         app instances and the engine modules can be imported without Flask
         ever starting.

Responsibilities:
  1. Load configuration from config_by_name[config_name]
  2. Set the app logger level from LOG_LEVEL
  3. Register all route blueprints under /api/v1
  4. Register global error handlers (AppError → JSON, Exception → 500)
  5. Register a custom JSON provider to serialise Decimal as string
     (monetary amounts are transmitted as strings, never JS numbers)
"""

from __future__ import annotations

import traceback
from decimal import Decimal

from flask import Flask, jsonify, request
from flask.json.provider import DefaultJSONProvider
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from tripsettle.config import config_by_name, validate_production_config


# ── Custom JSON provider ───────────────────────────────────────────────────
# Flask's default JSON encoder does not handle Decimal.

class DecimalJSONProvider(DefaultJSONProvider):
    """
    Extends Flask's default JSON provider to serialise Decimal as str.

    Example: Decimal("10.50") → "10.50" (not 10.5 or 10.500000001)
    """

    def default(self, o):
        if isinstance(o, Decimal):
            return str(o)
        return super().default(o)


# ── Application factory ────────────────────────────────────────────────────

def create_app(config_name: str = "development") -> Flask:
    """
    Creates and returns a configured Flask application instance.

    Args:
        config_name: One of "development", "testing", "production".
                     Resolved via config_by_name in config.py.
                     Defaults to "development".
    """
    app = Flask(__name__)
    app.json_provider_class = DecimalJSONProvider
    app.json = DecimalJSONProvider(app)

    # ── Configuration ──────────────────────────────────────────────────────
    config_class = config_by_name.get(config_name, config_by_name["development"])
    app.config.from_object(config_class)
    app.json.sort_keys = app.config["JSON_SORT_KEYS"]

    if config_name == "production":
        validate_production_config(app)  # raises ValueError if misconfigured

    app.logger.setLevel(app.config["LOG_LEVEL"])

    # ── Blueprints ─────────────────────────────────────────────────────────
    _register_blueprints(app)

    # ── Error handlers ─────────────────────────────────────────────────────
    _register_error_handlers(app)
    _register_cors(app)

    return app


def _register_blueprints(app: Flask) -> None:
    """
    Registers all route blueprints under the /api/v1 prefix.
    Route files only specify paths relative to their resource.
    """
    from tripsettle.app.routes.balances import balances_bp
    from tripsettle.app.routes.expenses import expenses_bp
    from tripsettle.app.routes.settlements import settlements_bp
    from tripsettle.app.routes.splits import splits_bp

    app.register_blueprint(splits_bp,      url_prefix="/api/v1/splits")
    app.register_blueprint(expenses_bp,    url_prefix="/api/v1/expenses")
    app.register_blueprint(balances_bp,    url_prefix="/api/v1/balances")
    app.register_blueprint(settlements_bp, url_prefix="/api/v1/settlements")


def _first_error(messages, path: tuple = ()) -> tuple[str | None, str]:
    """
    Walks a marshmallow messages structure to its first leaf message.

    Returns (dotted field path or None, message). Nested list/dict errors
    such as {"splits": {0: {"amount": ["..."]}}} become ("splits.0.amount", "...").
    """
    if isinstance(messages, dict):
        for key, value in messages.items():
            next_path = path if key == "_schema" else path + (str(key),)
            return _first_error(value, next_path)
    elif isinstance(messages, list):
        if messages:
            return _first_error(messages[0], path)
    else:
        return (".".join(path) or None), str(messages)
    return (".".join(path) or None), "Invalid input."


def _register_error_handlers(app: Flask) -> None:
    """
    Registers global error handlers.

    Handlers:
      AppError        → structured JSON error envelope with the correct HTTP status
                        (every engine SplitError is an AppError)
      ValidationError → marshmallow schema errors as MISSING_FIELD /
                        INVALID_FIELD / registered-code responses (400)
      HTTPException   → passed through unchanged (404, 405, ...)
      Exception       → generic INTERNAL_ERROR (500); full traceback logged

    Stack traces never leave the server.
    """
    from tripsettle.app.errors import AppError, ErrorCode

    known_codes = {
        value for name, value in vars(ErrorCode).items() if not name.startswith("_")
    }

    @app.errorhandler(AppError)
    def handle_app_error(error: AppError):
        """Routes never catch AppError; they let it propagate here."""
        return jsonify(error.to_dict()), error.http_status

    @app.errorhandler(ValidationError)
    def handle_validation_error(error: ValidationError):
        """
        Returns the FIRST schema error only: one error, not many.

        If the message is already a registered ErrorCode it is used as the
        code directly; otherwise MISSING_FIELD or INVALID_FIELD is inferred.
        """
        field, raw_message = _first_error(error.messages)

        if raw_message in known_codes:
            code = raw_message
            message = _code_to_message(code)
        elif raw_message.startswith("Missing data for required field"):
            code = ErrorCode.MISSING_FIELD
            message = raw_message
        else:
            code = ErrorCode.INVALID_FIELD
            message = raw_message

        response_body = {"error": {"code": code, "message": message}}
        if field is not None:
            response_body["error"]["field"] = field

        return jsonify(response_body), 400

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        """
        Catches all unhandled exceptions and returns a generic 500 response.
        The full traceback goes to the application logger only.
        """
        if isinstance(error, HTTPException):
            return error

        app.logger.error(
            "Unhandled exception on %s %s: %s\n%s",
            request.method,
            request.path,
            str(error),
            traceback.format_exc(),
        )
        return jsonify({
            "error": {
                "code": ErrorCode.INTERNAL_ERROR,
                "message": "An unexpected error occurred. Please try again later.",
            }
        }), 500


def _register_cors(app: Flask) -> None:
    """
    Adds CORS headers for browser-based local development.

    Enabled when DEBUG or TESTING is true so a frontend served from another
    local port can call the API.
    """

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        allow_all = bool(app.config.get("DEBUG") or app.config.get("TESTING"))

        if allow_all:
            response.headers["Access-Control-Allow-Origin"] = origin if origin else "*"
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Methods"] = "POST, OPTIONS"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"

        return response


def _code_to_message(code: str) -> str:
    """
    Returns a human-readable default message for a known error code.
    Used when a ValidationError message IS the error code constant itself.
    """
    _messages = {
        "INVALID_AMOUNT_PRECISION": "Amount must have at most 2 decimal places.",
        "INVALID_SPLIT_MODE": "split_mode must be 'none', 'equal' or 'custom'.",
        "UNEXPECTED_SPLIT_DATA": "This field is not used by the chosen split_mode.",
        "TOO_MANY_ITEMS": "The list exceeds the maximum number of items for one request.",
    }
    return _messages.get(code, "Invalid input.")
