import os
from pathlib import Path

from dotenv import load_dotenv


_PACKAGE_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _PACKAGE_DIR.parent

# Root .env is canonical; tripsettle/.env remains a local fallback.
load_dotenv(_PROJECT_ROOT / ".env")
load_dotenv(_PACKAGE_DIR / ".env")


def _first_non_empty_env(*names: str, default: str) -> str:
    """Returns the first non-empty env var value from `names`, else `default`."""
    for name in names:
        value = os.getenv(name)
        if value is not None and value != "":
            return value
    return default


def _parse_int_env(*names: str, default: int) -> int:
    """Parses the first non-empty env var in `names` as int, else returns `default`."""
    raw = _first_non_empty_env(*names, default=str(default))
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


class BaseConfig:

    SECRET_KEY: str = _first_non_empty_env(
        "SECRET_KEY",
        default="change-me-in-production",
    )

    JSON_SORT_KEYS: bool = False

    # Request size limits. Enforced by the request schemas, never by the
    # engine, which accepts any in-memory collection.
    MAX_EXPENSES_PER_REQUEST:   int = _parse_int_env("MAX_EXPENSES_PER_REQUEST", default=1000)
    MAX_PARTICIPANTS_PER_SPLIT: int = _parse_int_env("MAX_PARTICIPANTS_PER_SPLIT", default=100)

    LOG_LEVEL: str = _first_non_empty_env("LOG_LEVEL", default="INFO").upper()


class DevelopmentConfig(BaseConfig):
    DEBUG:   bool = True
    TESTING: bool = False

    LOG_LEVEL: str = _first_non_empty_env("LOG_LEVEL", default="DEBUG").upper()


class TestingConfig(BaseConfig):

    DEBUG:   bool = True
    TESTING: bool = True

    MAX_EXPENSES_PER_REQUEST:   int = 50
    MAX_PARTICIPANTS_PER_SPLIT: int = 20


class ProductionConfig(BaseConfig):

    DEBUG:   bool = False
    TESTING: bool = False

    LOG_LEVEL: str = _first_non_empty_env("LOG_LEVEL", default="WARNING").upper()


def validate_production_config(app) -> None:
    """
    Fail-fast guard for production configuration.

    Must be called in the app factory immediately after
    app.config.from_object(ProductionConfig):

        app.config.from_object(ProductionConfig)
        validate_production_config(app)   # raises ValueError if misconfigured

    Raises ValueError if any required production value is missing or insecure.
    """
    if app.config.get("SECRET_KEY") == "change-me-in-production":
        raise ValueError(
            "SECRET_KEY must be set to a strong random value in production. "
            "Do not use the default placeholder."
        )
    for name in ("MAX_EXPENSES_PER_REQUEST", "MAX_PARTICIPANTS_PER_SPLIT"):
        if app.config.get(name, 0) < 1:
            raise ValueError(f"{name} must be a positive integer.")


# ── Config selector ────────────────────────────────────────────────────────
#
# Used by the app factory:
#   from tripsettle.config import config_by_name
#   app.config.from_object(config_by_name[flask_env])
# ──────────────────────────────────────────────────────────────────────────

config_by_name: dict[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing":     TestingConfig,
    "production":  ProductionConfig,
}
