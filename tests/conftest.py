"""
Pytest configuration and shared fixtures for all tests.

This file is automatically loaded by pytest and provides:
  - Common test fixtures (requesting user, user factory, seeded RNG)
  - Test configuration (env vars, logging, etc.)
"""

import os
import random

import pytest

from groupmatch.models import User


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """
    Setup test environment variables before running any tests.

    This ensures tests run with predictable configuration and don't
    depend on local .env files.
    """
    test_env = {
        "DEBUG": "True",
        "LANGSMITH_ENABLED": "False",
    }

    for key, value in test_env.items():
        os.environ[key] = value


@pytest.fixture
def make_user():
    """
    Factory for User records with sensible defaults.

    Example:
        def test_something(make_user):
            bob = make_user("bob", age=30, city="Irvine")
    """
    def _make(user_id: str, **overrides) -> User:
        fields = {
            "id": user_id,
            "name": user_id.title(),
            "age": 28,
            "gender": "Female",
            "city": "Irvine",
            "vibe": "Chill",
            "ethnicity": "Asian",
            "religion": "None",
        }
        fields.update(overrides)
        return User(**fields)

    return _make


@pytest.fixture
def me(make_user):
    """The requesting user: 28, female, living in Irvine."""
    return make_user("me", name="Me")


@pytest.fixture
def rng():
    """Deterministic random source."""
    return random.Random(1234)
