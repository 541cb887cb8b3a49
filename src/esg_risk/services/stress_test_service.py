"""Stress test scenario aggregation.

Each catalog scenario is evaluated by the backend independently and
concurrently. A failed evaluation is recorded as an outcome without a
value and the summary is computed over the successful outcomes only:

- worst / best case: minimum / maximum post-stress value (first in
  catalog order on ties);
- risk score: mean loss percentage versus the pre-stress total, floored
  at 0 after averaging.
"""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Protocol, Sequence
import logging

from esg_risk.data_models.stress_scenario import (
    RiskBand,
    ScenarioDefinition,
    ScenarioImpact,
    ScenarioOutcome,
    StressSummary,
    StressTestReport,
)


logger = logging.getLogger(__name__)


SCENARIO_CATALOG: Sequence[ScenarioDefinition] = (
    ScenarioDefinition(
        id="oil-shock",
        name="Oil Price Shock",
        description="Sudden 50% drop in oil prices affecting energy sector",
        risk_level="High",
        timeframe="Immediate",
        affected_sectors=["Energy", "Utilities"],
    ),
    ScenarioDefinition(
        id="climate-policy",
        name="Climate Policy Impact",
        description="New environmental regulations penalizing carbon-intensive sectors",
        risk_level="Medium",
        timeframe="6-12 months",
        affected_sectors=["Energy", "Utilities", "Manufacturing"],
    ),
    ScenarioDefinition(
        id="market-crash",
        name="Market Crash",
        description="Broad market decline affecting all holdings equally",
        risk_level="Extreme",
        timeframe="Immediate",
        affected_sectors=["All Sectors"],
    ),
)

SCENARIOS_BY_ID: Dict[str, ScenarioDefinition] = {s.id: s for s in SCENARIO_CATALOG}

HIGH_RISK_THRESHOLD = 40.0
MEDIUM_RISK_THRESHOLD = 20.0


class StressValueSource(Protocol):
    def get_stressed_value(self, portfolio_id: int, scenario_id: str) -> float:
        ...


def _loss_pct(original_total: float, value: float) -> float:
    return (original_total - value) / original_total * 100.0


def _evaluate_scenario(source: StressValueSource, portfolio_id: int, scenario_id: str) -> ScenarioOutcome:
    try:
        value = float(source.get_stressed_value(portfolio_id, scenario_id))
    except Exception as e:
        logger.warning("Stress scenario %s failed for portfolio %s: %s", scenario_id, portfolio_id, e)
        return ScenarioOutcome(scenario_id=scenario_id, value=None)
    return ScenarioOutcome(scenario_id=scenario_id, value=value)


def fetch_scenario_outcomes(
    source: StressValueSource,
    portfolio_id: int,
    scenarios: Sequence[ScenarioDefinition] = SCENARIO_CATALOG,
) -> List[ScenarioOutcome]:
    """Evaluate all scenarios concurrently and wait for every one to settle.

    Returns one outcome per scenario in catalog order. Failures never
    escape this function; they become outcomes without a value.
    """
    if not scenarios:
        return []

    with ThreadPoolExecutor(max_workers=len(scenarios)) as executor:
        futures = [
            executor.submit(_evaluate_scenario, source, portfolio_id, s.id)
            for s in scenarios
        ]
        # join barrier: collect in submission order once all have finished
        outcomes = [f.result() for f in futures]

    n_ok = sum(1 for o in outcomes if o.succeeded)
    logger.info("Evaluated %d/%d stress scenarios for portfolio %s", n_ok, len(outcomes), portfolio_id)
    return outcomes


def summarize_outcomes(outcomes: Sequence[ScenarioOutcome], original_total: float) -> StressSummary:
    """Reduce scenario outcomes to worst case, best case and risk score.

    Failed outcomes are ignored. With no successful outcome both cases are
    None and the risk score is 0; a zero `original_total` also gives a
    risk score of 0.
    """

    present = [o for o in outcomes if o.value is not None]
    if not present:
        return StressSummary(worst_case=None, best_case=None, risk_score=0.0)

    worst = present[0]
    best = present[0]
    for o in present[1:]:
        if o.value < worst.value:
            worst = o
        if o.value > best.value:
            best = o

    if original_total == 0:
        logger.warning("Pre-stress total is zero; risk score set to 0")
        risk_score = 0.0
    else:
        avg_loss = sum(_loss_pct(original_total, o.value) for o in present) / len(present)
        # floor applies to the average, not to each scenario
        risk_score = max(0.0, avg_loss)

    return StressSummary(worst_case=worst, best_case=best, risk_score=risk_score)


def compute_scenario_impacts(outcomes: Sequence[ScenarioOutcome], original_total: float) -> List[ScenarioImpact]:
    """Chart rows for successful outcomes, lowest post-stress value first."""
    impacts: List[ScenarioImpact] = []
    for o in outcomes:
        if o.value is None:
            continue
        definition = SCENARIOS_BY_ID.get(o.scenario_id)
        impacts.append(
            ScenarioImpact(
                scenario_id=o.scenario_id,
                name=definition.name if definition is not None else o.scenario_id,
                value=o.value,
                impact=original_total - o.value,
                loss_pct=_loss_pct(original_total, o.value) if original_total != 0 else 0.0,
            )
        )
    impacts.sort(key=lambda i: i.value)
    return impacts


def classify_risk_score(risk_score: float) -> RiskBand:
    if risk_score > HIGH_RISK_THRESHOLD:
        return RiskBand.HIGH
    if risk_score > MEDIUM_RISK_THRESHOLD:
        return RiskBand.MEDIUM
    return RiskBand.LOW


def evaluate_stress_scenarios(
    source: StressValueSource,
    portfolio_id: int,
    original_total: float,
    scenarios: Sequence[ScenarioDefinition] = SCENARIO_CATALOG,
) -> StressTestReport:
    """Run every scenario for `portfolio_id` and aggregate the results."""

    outcomes = fetch_scenario_outcomes(source, portfolio_id, scenarios)
    summary = summarize_outcomes(outcomes, original_total)

    return StressTestReport(
        portfolio_id=portfolio_id,
        original_total=original_total,
        outcomes=outcomes,
        summary=summary,
        impacts=compute_scenario_impacts(outcomes, original_total),
        risk_band=classify_risk_score(summary.risk_score),
    )