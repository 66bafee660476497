"""Tests for the method dispatcher that do not need R."""

import numpy as np
import pandas as pd
import pytest
import matplotlib.pyplot as plt

from de_benchmark import dispatch
from de_benchmark.dispatch import DEResult, run_de, normalize_result, available_methods, RESULT_COLUMNS


@pytest.fixture
def fake_method(monkeypatch):
    """Register a pipeline that reports every gene, with NaNs for the last five."""
    calls = {}

    def runner(se, group, levels, scale=1.0):
        calls["levels"] = levels
        calls["group"] = group
        genes = list(se.row_names)
        n = len(genes)
        p = np.linspace(1e-6, 1.0, n)
        adj = np.minimum(p * 2, 1.0)
        adj[-5:] = np.nan
        return pd.DataFrame({
            "gene": genes,
            "log_fc": np.linspace(-3, 3, n) * scale,
            "log_cpm": np.ones(n),
            "p_value": p,
            "adj_p_value": adj,
        })

    monkeypatch.setitem(dispatch._METHODS, "fake", runner)
    return calls


def test_builtin_methods_registered():
    assert {"edger", "deseq2", "limma"} <= set(available_methods())


def test_unknown_method_raises(mock_se, mock_group):
    with pytest.raises(ValueError, match="Unknown differential expression method 'voodoo'"):
        run_de(mock_se, mock_group, "voodoo")


def test_group_must_match_samples(mock_se, fake_method):
    with pytest.raises(ValueError):
        run_de(mock_se, ["WT", "Mut"], "fake", plot=False)


def test_result_schema_and_untestable_genes_dropped(mock_se, mock_group, fake_method):
    res = run_de(mock_se, mock_group, "fake", plot=False)
    assert isinstance(res, DEResult)
    assert list(res.table.columns) == RESULT_COLUMNS
    assert res.n_tested == 195
    assert len(res.raw) == 200
    assert set(res.table["gene"]) <= set(mock_se.row_names)
    assert res.figure is None
    assert res.levels == ["WT", "Mut"]


def test_levels_and_kwargs_forwarded(mock_se, mock_group, fake_method):
    res = run_de(mock_se, mock_group, "fake", levels=["Mut", "WT"], plot=False, scale=2.0)
    assert fake_method["levels"] == ["Mut", "WT"]
    assert res.table["log_fc"].iloc[0] == pytest.approx(-6.0)


def test_diagnostic_plot(mock_se, mock_group, fake_method, tmp_path):
    plt.close("all")
    for _ in range(3):
        res = run_de(mock_se, mock_group, "fake")
    assert isinstance(res.figure, plt.Figure)
    # Figures are not left open in pyplot but can still be written
    assert plt.get_fignums() == []
    res.figure.savefig(tmp_path / "volcano.png")
    assert (tmp_path / "volcano.png").stat().st_size > 0


def test_significant(mock_se, mock_group, fake_method):
    res = run_de(mock_se, mock_group, "fake", plot=False)
    sig = res.significant(0.05)
    assert (sig["adj_p_value"] < 0.05).all()
    assert len(sig) > 0


def test_normalize_result_requires_columns():
    with pytest.raises(ValueError, match="lacks columns"):
        normalize_result(pd.DataFrame({"gene": ["a"], "p_value": [0.1]}))


def test_register_method_warns_on_override(monkeypatch):
    monkeypatch.setattr(dispatch, "_METHODS", dict(dispatch._METHODS))
    with pytest.warns(UserWarning, match="Overriding"):
        dispatch.register_method("edger")(lambda se, group, levels: None)
