"""Fixtures for baseline persistence tests."""

import json
from datetime import datetime

import pytest

from infrastructure.persistence import ChangeSetDetector


@pytest.fixture
def baseline_path(tmp_path):
    return tmp_path / "state" / "repositories.json"


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2026, 3, 1, 9, 30, 15)


@pytest.fixture
def detector(baseline_path, fixed_clock):
    return ChangeSetDetector(baseline_path, clock=fixed_clock)


@pytest.fixture
def write_baseline(baseline_path):
    """Write raw baseline content (list of names or arbitrary text)."""

    def _write(content):
        baseline_path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            baseline_path.write_text(content, encoding="utf-8")
        else:
            baseline_path.write_text(json.dumps(content), encoding="utf-8")
        return baseline_path

    return _write


@pytest.fixture
def read_baseline(baseline_path):
    def _read():
        return json.loads(baseline_path.read_text(encoding="utf-8"))

    return _read
