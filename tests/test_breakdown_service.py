import math

import pytest

from esg_risk.services.breakdown_service import (
    breakdown_to_frame,
    compute_exposure_total,
    normalize_exposures,
)


def test_energy_tech_healthcare_example():
    entries = normalize_exposures({"Energy": 40, "Tech": 35, "Healthcare": 25})

    assert [e.name for e in entries] == ["Energy", "Tech", "Healthcare"]
    assert [e.value for e in entries] == [40.0, 35.0, 25.0]
    assert [e.percentage for e in entries] == [40.0, 35.0, 25.0]


def test_sorted_descending_regardless_of_input_order():
    entries = normalize_exposures({"Utilities": 5.0, "Energy": 50.0, "Tech": 20.0, "Banks": 25.0})
    assert [e.name for e in entries] == ["Energy", "Banks", "Tech", "Utilities"]


def test_ties_keep_input_order():
    entries = normalize_exposures({"B": 10.0, "A": 10.0, "C": 30.0, "D": 10.0})
    assert [e.name for e in entries] == ["C", "B", "A", "D"]


def test_rounding_of_value_and_percentage():
    entries = normalize_exposures({"X": 1.23456, "Y": 2.0})
    x = next(e for e in entries if e.name == "X")
    assert x.value == 1.23
    # 1.23456 / 3.23456 * 100 = 38.167...
    assert x.percentage == 38.2


def test_percentage_uses_unrounded_total():
    # rounded values would sum to 0.02 and give 50% each
    entries = normalize_exposures({"A": 0.014, "B": 0.006})
    assert entries[0].value == 0.01
    assert entries[0].percentage == 70.0
    assert entries[1].percentage == 30.0


def test_empty_map_gives_empty_list():
    assert normalize_exposures({}) == []
    assert compute_exposure_total({}) == 0.0


def test_zero_total_gives_zero_percentages():
    entries = normalize_exposures({"A": 0.0, "B": 0.0})
    assert len(entries) == 2
    assert all(e.percentage == 0.0 for e in entries)


def test_zero_total_from_offsetting_negative_values():
    entries = normalize_exposures({"Long": 10.0, "Short": -10.0})
    assert [e.name for e in entries] == ["Long", "Short"]
    assert all(e.percentage == 0.0 for e in entries)


def test_negative_values_pass_through():
    entries = normalize_exposures({"Long": 150.0, "Short": -50.0})
    assert entries[0].percentage == 150.0
    assert entries[1].value == -50.0
    assert entries[1].percentage == -50.0


def test_non_finite_values_propagate():
    entries = normalize_exposures({"A": float("nan"), "B": 1.0})
    assert any(math.isnan(e.value) for e in entries)
    assert all(math.isnan(e.percentage) for e in entries)


def test_breakdown_to_frame_columns():
    df = breakdown_to_frame(normalize_exposures({"Europe": 60.0, "Asia": 40.0}))
    assert list(df.columns) == ["name", "value", "percentage"]
    assert df["name"].tolist() == ["Europe", "Asia"]
    assert df["percentage"].sum() == pytest.approx(100.0)


def test_breakdown_to_frame_empty():
    df = breakdown_to_frame([])
    assert df.empty
    assert list(df.columns) == ["name", "value", "percentage"]
