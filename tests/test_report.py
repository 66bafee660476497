"""Tests for the end-to-end comparison with stand-in pipelines."""

import numpy as np
import pandas as pd
import pytest
import matplotlib.pyplot as plt

from de_benchmark import dispatch
from de_benchmark.report import ComparisonConfig, ComparisonReport, compare_methods


def _stand_in(shift, drop):
    def runner(se, group, levels):
        genes = list(se.row_names)[drop:]
        n = len(genes)
        p = (np.arange(n) + 1) / (n + 1)
        p = np.roll(p, shift)
        return pd.DataFrame({
            "gene": genes,
            "log_fc": np.linspace(-2, 2, n),
            "p_value": p,
            "adj_p_value": np.minimum(p * 1.5, 1.0),
        })
    return runner


@pytest.fixture
def stand_ins(monkeypatch):
    monkeypatch.setitem(dispatch._METHODS, "m1", _stand_in(0, 0))
    monkeypatch.setitem(dispatch._METHODS, "m2", _stand_in(0, 10))
    monkeypatch.setitem(dispatch._METHODS, "m3", _stand_in(100, 5))
    yield
    plt.close("all")


def test_compare_methods(mock_se, mock_group, stand_ins):
    plt.close("all")
    config = ComparisonConfig(methods=["m1", "m2", "m3"])
    report = compare_methods(mock_se, mock_group, config)

    assert isinstance(report, ComparisonReport)
    assert list(report.results) == ["m1", "m2", "m3"]
    # Inner join keeps genes tested by every method
    assert len(report.joined) == 190
    assert len(report.concordance) == 3
    assert set(report.correlations) == {"p_value", "adj_p_value", "log_fc"}
    assert not report.discordant.empty
    assert set(report.discordant["high_method"]) | set(report.discordant["low_method"]) <= {"m1", "m2", "m3"}
    assert {"volcano_m1", "pairs_p_value", "concordance_p_value"} <= set(report.figures)
    assert plt.get_fignums() == []

    summary = report.summary_table()
    assert summary.loc[summary["method"] == "m2", "n_tested"].item() == 190
    assert summary.loc[summary["method"] == "shared", "n_tested"].item() == 190


def test_report_without_plots(mock_se, mock_group, stand_ins):
    report = compare_methods(mock_se, mock_group, ComparisonConfig(methods=["m1", "m2"], plot=False))
    assert report.figures == {}
    assert report.results["m1"].figure is None


def test_save(tmp_path, mock_se, mock_group, stand_ins):
    report = compare_methods(mock_se, mock_group, ComparisonConfig(methods=["m1", "m3"]))
    path = report.save(tmp_path / "out", dpi=40)
    text = path.read_text()
    assert path.name == "report.md"
    assert "## Concordance" in text
    assert "![pairs_p_value](pairs_p_value.png)" in text
    assert (tmp_path / "out" / "volcano_m3.png").exists()


def test_method_kwargs_forwarded(mock_se, mock_group, monkeypatch):
    seen = {}

    def runner(se, group, levels, flag=False):
        seen["flag"] = flag
        return _stand_in(0, 0)(se, group, levels)

    monkeypatch.setitem(dispatch._METHODS, "k1", runner)
    monkeypatch.setitem(dispatch._METHODS, "k2", _stand_in(0, 0))
    config = ComparisonConfig(methods=["k1", "k2"], plot=False, method_kwargs={"k1": {"flag": True}})
    compare_methods(mock_se, mock_group, config)
    assert seen["flag"] is True
