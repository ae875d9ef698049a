"""Fixtures for the new-repository watcher tests."""

import json
from datetime import datetime
from unittest.mock import MagicMock

import pytest

from infrastructure.notifications import (
    DeliveryOutcome,
    Destination,
    NotificationDispatcher,
    StrategyName,
)
from infrastructure.persistence import ChangeSetDetector, EntityRecord


@pytest.fixture
def baseline_path(tmp_path):
    return tmp_path / "repositories.json"


@pytest.fixture
def detector(baseline_path):
    return ChangeSetDetector(baseline_path, clock=lambda: datetime(2026, 5, 4, 8, 0, 0))


@pytest.fixture
def seed_baseline(baseline_path):
    def _seed(names):
        baseline_path.write_text(json.dumps(names), encoding="utf-8")

    return _seed


@pytest.fixture
def read_baseline(baseline_path):
    return lambda: json.loads(baseline_path.read_text(encoding="utf-8"))


@pytest.fixture
def dispatcher():
    """Mock dispatcher that delivers every message directly."""
    mock = MagicMock(spec=NotificationDispatcher)
    mock.deliver.return_value = DeliveryOutcome(
        attempted=[StrategyName.DIRECT], succeeded=StrategyName.DIRECT
    )
    return mock


@pytest.fixture
def target():
    return Destination(email="lead@example.com")


@pytest.fixture
def repos():
    def _repos(*names):
        return [EntityRecord(name) for name in names]

    return _repos
