"""Diversification breakdown models.

A breakdown is the backend's category -> exposure map for one dimension
(sector or region), relabelled into display-ready entries.
"""
from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class BreakdownDimension(str, Enum):
    """Dimension along which the backend groups portfolio exposure."""

    SECTOR = "sector"
    REGION = "region"


class BreakdownEntry(BaseModel):
    """One category of a normalized breakdown.

    `value` is the input weight rounded to 2 decimals; `percentage` is the
    share of the (unrounded) total rounded to 1 decimal, or 0.0 when the
    total is zero.
    """

    name: str
    value: float
    percentage: float


class BreakdownResult(BaseModel):
    dimension: BreakdownDimension
    total: float
    entries: List[BreakdownEntry] = Field(default_factory=list)
