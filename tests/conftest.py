"""
Root Pytest Fixtures.

Shared fixtures available to all test types. The fakes themselves live in
tests/fakes.py.
"""

import random
from datetime import datetime

import pytest

from tests.fakes import (
    FakeImageHost,
    FakeMessageRepository,
    FakeScientistRepository,
    FakeVerifier,
)


@pytest.fixture
def scientist_repo() -> FakeScientistRepository:
    return FakeScientistRepository()


@pytest.fixture
def message_repo() -> FakeMessageRepository:
    return FakeMessageRepository()


@pytest.fixture
def image_host() -> FakeImageHost:
    return FakeImageHost()


@pytest.fixture
def verifier() -> FakeVerifier:
    return FakeVerifier()


@pytest.fixture
def rng() -> random.Random:
    """Seeded randomness so colour and image picks are repeatable."""
    return random.Random(1234)


@pytest.fixture
def base_time() -> datetime:
    return datetime(2024, 5, 1, 12, 0, 0)
