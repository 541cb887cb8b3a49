"""Combined analytics for one portfolio, as rendered by the dashboard."""
from __future__ import annotations

from pydantic import BaseModel

from esg_risk.data_models.breakdown import BreakdownResult
from esg_risk.data_models.esg_score import ESGResult
from esg_risk.data_models.stress_scenario import StressTestReport


class PortfolioOverview(BaseModel):
    portfolio_id: int
    sector_breakdown: BreakdownResult
    region_breakdown: BreakdownResult
    esg: ESGResult
    stress_test: StressTestReport
