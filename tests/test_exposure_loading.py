from pathlib import Path

import pytest

from esg_risk.services.breakdown_service import load_exposures_from_csv


def _write_csv(path: Path, header: str, rows: list[str]):
    path.write_text("\n".join([header] + rows), encoding="utf-8")


def test_load_exposures_basic(tmp_path):
    p = tmp_path / "sector.csv"
    _write_csv(p, "name,value", ["Energy,40", "Tech,35.5", "Healthcare,24.5"])

    exposures = load_exposures_from_csv(p)
    assert list(exposures) == ["Energy", "Tech", "Healthcare"]
    assert exposures["Tech"] == pytest.approx(35.5)


def test_duplicate_names_are_summed_in_first_seen_order(tmp_path):
    p = tmp_path / "holdings.csv"
    _write_csv(p, "sector,weight", ["Tech,10", "Energy,5", "Tech,15"])

    exposures = load_exposures_from_csv(p, name_column="sector", value_column="weight")
    assert list(exposures.items()) == [("Tech", 25.0), ("Energy", 5.0)]


def test_missing_value_treated_as_zero(tmp_path):
    p = tmp_path / "gaps.csv"
    _write_csv(p, "name,value", ["Energy,", "Tech,3"])
    assert load_exposures_from_csv(p) == {"Energy": 0.0, "Tech": 3.0}


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_exposures_from_csv(tmp_path / "nope.csv")


def test_missing_columns(tmp_path):
    p = tmp_path / "bad.csv"
    _write_csv(p, "category,amount", ["Energy,1"])
    with pytest.raises(ValueError):
        load_exposures_from_csv(p)


def test_no_rows(tmp_path):
    p = tmp_path / "empty.csv"
    _write_csv(p, "name,value", [])
    with pytest.raises(ValueError):
        load_exposures_from_csv(p)


def test_blank_names_are_skipped(tmp_path, caplog):
    p = tmp_path / "blank_name.csv"
    _write_csv(p, "name,value", [",4", "Tech,3", "  ,2"])

    with caplog.at_level("WARNING"):
        exposures = load_exposures_from_csv(p)
    assert exposures == {"Tech": 3.0}
    assert "nan" not in exposures
    assert "blank name" in caplog.text
