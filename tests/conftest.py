"""Pytest configuration helpers.

Put the project's `src/` directory on `sys.path` so `esg_risk` imports
resolve without an install, and provide an in-memory stand-in for the
portfolio backend.
"""
from pathlib import Path
import sys

import pytest


ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


class FakeBackend:
    """Serves canned aggregates; an Exception instance as value is raised instead."""

    def __init__(self, breakdowns=None, esg_score=None, stressed=None):
        self.breakdowns = breakdowns or {}
        self.esg_score = esg_score
        self.stressed = stressed or {}
        self.calls = []

    @staticmethod
    def _serve(value):
        if isinstance(value, Exception):
            raise value
        return value

    def get_breakdown(self, portfolio_id, dimension):
        key = getattr(dimension, "value", dimension)
        self.calls.append(("breakdown", portfolio_id, key))
        return self._serve(self.breakdowns[key])

    def get_esg_score(self, portfolio_id):
        self.calls.append(("esg", portfolio_id))
        return self._serve(self.esg_score)

    def get_stressed_value(self, portfolio_id, scenario_id):
        self.calls.append(("stress", portfolio_id, scenario_id))
        if scenario_id not in self.stressed:
            raise KeyError(scenario_id)
        return self._serve(self.stressed[scenario_id])


@pytest.fixture
def fake_backend_factory():
    return FakeBackend
