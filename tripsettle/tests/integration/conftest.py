"""
tests/integration/conftest.py — Fixtures for all integration tests.

Design:
  - The app is created once per session using create_app("testing").
  - Nothing is persisted, so there is no per-test cleanup: every request
    carries the whole expense list it is computed from.
  - TestingConfig lowers the request limits (50 expenses, 20 participants)
    so limit tests stay small.

Request helpers live in each test module. They are plain functions, not
fixtures, so they can be called with arbitrary arguments.
"""

from __future__ import annotations

import pytest

from tripsettle.app import create_app


# ═══════════════════════════════════════════════════════════════════════════
# Session-scoped app fixture
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture(scope="session")
def app():
    """Creates the Flask application in 'testing' mode once for the entire session."""
    flask_app = create_app("testing")
    yield flask_app


# ═══════════════════════════════════════════════════════════════════════════
# Client fixture
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def client(app):
    """Flask test client. Each test gets a fresh client (function-scoped)."""
    return app.test_client()
