"""ESG composite decomposition.

The backend reports one weighted-average ESG score per portfolio. The
dashboard splits it into Environmental / Social / Governance pillars with
fixed weights. Changing a weight is a configuration change and the weights
must keep summing to 1.0 so the pillars add back up to the total.
"""
from __future__ import annotations

from typing import List, Tuple

from esg_risk.data_models.esg_score import ESGPillar, ESGPillarScore


ENVIRONMENTAL_WEIGHT = 0.35
SOCIAL_WEIGHT = 0.30
GOVERNANCE_WEIGHT = 0.35

PILLAR_WEIGHTS: Tuple[Tuple[ESGPillar, float], ...] = (
    (ESGPillar.ENVIRONMENTAL, ENVIRONMENTAL_WEIGHT),
    (ESGPillar.SOCIAL, SOCIAL_WEIGHT),
    (ESGPillar.GOVERNANCE, GOVERNANCE_WEIGHT),
)

PILLAR_FULL_MARK = 100.0

# (lower bound, label), checked top-down
ESG_SCORE_LABELS: Tuple[Tuple[float, str], ...] = (
    (80.0, "Excellent"),
    (60.0, "Good"),
    (40.0, "Fair"),
)


def decompose_esg_score(total_score: float) -> List[ESGPillarScore]:
    """Split `total_score` into the three pillar scores.

    Always returns Environmental, Social, Governance in that order. The
    score is not clamped to [0, 100]; NaN or infinite input yields NaN or
    infinite pillar values.
    """
    return [
        ESGPillarScore(name=pillar, value=total_score * weight, full_mark=PILLAR_FULL_MARK)
        for pillar, weight in PILLAR_WEIGHTS
    ]


def classify_esg_score(score: float) -> str:
    for lower, label in ESG_SCORE_LABELS:
        if score >= lower:
            return label
    return "Poor"
