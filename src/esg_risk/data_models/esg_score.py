from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel


class ESGPillar(str, Enum):
    ENVIRONMENTAL = "Environmental"
    SOCIAL = "Social"
    GOVERNANCE = "Governance"


class ESGPillarScore(BaseModel):
    """Weighted share of the portfolio ESG score attributed to one pillar."""

    name: ESGPillar
    value: float
    full_mark: float = 100.0


class ESGResult(BaseModel):
    total_score: float
    label: str  # Excellent / Good / Fair / Poor
    pillars: List[ESGPillarScore]
