"""Portfolio analytics orchestration.

Fetches raw aggregates through the backend client and hands them to the
pure analyzers. Backend failures on breakdown or ESG reads are not caught
here: they reach the caller as `BackendError`. Only individual stress
scenarios are allowed to fail quietly (see `stress_test_service`).
"""
from __future__ import annotations

import logging

from esg_risk.data_models.breakdown import BreakdownDimension, BreakdownResult
from esg_risk.data_models.esg_score import ESGResult
from esg_risk.data_models.portfolio_overview import PortfolioOverview
from esg_risk.data_models.stress_scenario import StressTestReport
from esg_risk.services.backend_client import PortfolioBackendClient
from esg_risk.services.breakdown_service import compute_exposure_total, normalize_exposures
from esg_risk.services.esg_service import classify_esg_score, decompose_esg_score
from esg_risk.services.stress_test_service import evaluate_stress_scenarios


logger = logging.getLogger(__name__)


def analyze_breakdown(
    client: PortfolioBackendClient,
    portfolio_id: int,
    dimension: BreakdownDimension | str = BreakdownDimension.SECTOR,
) -> BreakdownResult:
    dim = BreakdownDimension(dimension)
    exposures = client.get_breakdown(portfolio_id, dim)
    result = BreakdownResult(
        dimension=dim,
        total=compute_exposure_total(exposures),
        entries=normalize_exposures(exposures),
    )
    logger.info(
        "Portfolio %s %s breakdown: %d categories, total %.2f",
        portfolio_id,
        dim.value,
        len(result.entries),
        result.total,
    )
    return result


def analyze_esg(client: PortfolioBackendClient, portfolio_id: int) -> ESGResult:
    score = client.get_esg_score(portfolio_id)
    logger.info("Portfolio %s ESG score %.2f", portfolio_id, score)
    return ESGResult(
        total_score=score,
        label=classify_esg_score(score),
        pillars=decompose_esg_score(score),
    )


def run_stress_test(client: PortfolioBackendClient, portfolio_id: int) -> StressTestReport:
    """Stress-test a portfolio against the scenario catalog.

    The pre-stress total is the sum of the sector breakdown; if that read
    fails the whole stress test fails.
    """
    exposures = client.get_breakdown(portfolio_id, BreakdownDimension.SECTOR)
    original_total = compute_exposure_total(exposures)
    report = evaluate_stress_scenarios(client, portfolio_id, original_total)
    logger.info(
        "Portfolio %s stress test: risk score %.1f (%s)",
        portfolio_id,
        report.summary.risk_score,
        report.risk_band.value,
    )
    return report


def build_portfolio_overview(client: PortfolioBackendClient, portfolio_id: int) -> PortfolioOverview:
    return PortfolioOverview(
        portfolio_id=portfolio_id,
        sector_breakdown=analyze_breakdown(client, portfolio_id, BreakdownDimension.SECTOR),
        region_breakdown=analyze_breakdown(client, portfolio_id, BreakdownDimension.REGION),
        esg=analyze_esg(client, portfolio_id),
        stress_test=run_stress_test(client, portfolio_id),
    )
