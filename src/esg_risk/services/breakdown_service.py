"""Diversification breakdown normalization.

Turns the backend's category -> exposure map into a sorted list of
`BreakdownEntry` objects annotated with their share of the total. Also
provides a CSV loader so exported breakdowns can be analysed offline.
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Mapping
import logging

import pandas as pd

from esg_risk.data_models.breakdown import BreakdownEntry


logger = logging.getLogger(__name__)


def compute_exposure_total(exposures: Mapping[str, float]) -> float:
    """Sum of all exposure values (0.0 for an empty map)."""
    return float(sum(exposures.values(), 0.0))


def normalize_exposures(exposures: Mapping[str, float]) -> List[BreakdownEntry]:
    """Normalize an exposure map into percentage-annotated entries.

    Behaviour:
    - The total is summed once from the raw values, before any rounding.
    - `value` is rounded to 2 decimals and `percentage` (raw value / total)
      to 1 decimal.
    - If the total is zero every percentage is 0.0.
    - Entries are ordered by raw value descending; equal values keep the
      iteration order of the input map.
    - Negative and non-finite values are passed through untouched.
    """

    total = compute_exposure_total(exposures)
    if exposures and total == 0.0:
        logger.warning("Exposure total is zero for %d categories; percentages set to 0", len(exposures))

    # sorted() is stable, so ties stay in insertion order
    ranked = sorted(exposures.items(), key=lambda item: item[1], reverse=True)

    entries: List[BreakdownEntry] = []
    for name, raw in ranked:
        pct = (raw / total) * 100.0 if total != 0.0 else 0.0
        entries.append(
            BreakdownEntry(
                name=name,
                value=round(float(raw), 2),
                percentage=round(float(pct), 1),
            )
        )
    return entries


def breakdown_to_frame(entries: List[BreakdownEntry]) -> pd.DataFrame:
    """Tabulate breakdown entries (columns: name, value, percentage)."""
    return pd.DataFrame(
        [e.model_dump() for e in entries],
        columns=["name", "value", "percentage"],
    )


def load_exposures_from_csv(
    csv_path: Path | str,
    name_column: str = "name",
    value_column: str = "value",
) -> Dict[str, float]:
    """Load an exposure map from a CSV export.

    Rows sharing a category name are summed; the first occurrence fixes
    the position of the category in the returned map.
    """

    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"Exposure CSV file not found: {path}")

    df = pd.read_csv(path)
    df.columns = [str(c).strip() for c in df.columns]

    missing = {name_column, value_column} - set(df.columns)
    if missing:
        raise ValueError(f"Missing required columns in exposure CSV: {sorted(missing)}")
    if df.empty:
        raise ValueError(f"No rows found in {path}")

    exposures: Dict[str, float] = {}
    for _, row in df.iterrows():
        raw_name = row[name_column]
        name = "" if pd.isna(raw_name) else str(raw_name).strip()
        if not name:
            logger.warning("Skipping row with blank %s (value %s)", name_column, row[value_column])
            continue
        raw = row[value_column]
        if pd.isna(raw):
            logger.warning("Missing %s for category %s; treating as 0", value_column, name)
            value = 0.0
        else:
            value = float(raw)
        exposures[name] = exposures.get(name, 0.0) + value

    logger.info("Loaded %d exposure categories from %s", len(exposures), path)
    return exposures
