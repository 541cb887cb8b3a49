"""Stress test models.

`ScenarioDefinition` is static catalog configuration. `ScenarioOutcome`
is the per-scenario tagged result of one backend evaluation (a missing
`value` marks a failed evaluation). `StressSummary` and
`StressTestReport` are derived from the outcomes and never persisted.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class RiskBand(str, Enum):
    LOW = "Low Risk"
    MEDIUM = "Medium Risk"
    HIGH = "High Risk"


class ScenarioDefinition(BaseModel):
    id: str
    name: str
    description: str
    risk_level: str   # qualitative severity shown next to the scenario
    timeframe: str
    affected_sectors: List[str] = Field(default_factory=list)


class ScenarioOutcome(BaseModel):
    scenario_id: str
    # Post-stress total exposure as returned by the backend; None when the
    # evaluation failed.
    value: Optional[float] = None

    @property
    def succeeded(self) -> bool:
        return self.value is not None

    def impact(self, original_total: float) -> Optional[float]:
        """Absolute loss versus the pre-stress total (None for failed outcomes)."""
        if self.value is None:
            return None
        return original_total - self.value


class ScenarioImpact(BaseModel):
    """Chart-ready view of one successful scenario."""

    scenario_id: str
    name: str
    value: float
    impact: float
    loss_pct: float


class StressSummary(BaseModel):
    worst_case: Optional[ScenarioOutcome] = None
    best_case: Optional[ScenarioOutcome] = None
    risk_score: float = 0.0


class StressTestReport(BaseModel):
    portfolio_id: int
    original_total: float
    outcomes: List[ScenarioOutcome]
    summary: StressSummary
    impacts: List[ScenarioImpact] = Field(default_factory=list)
    risk_band: RiskBand
