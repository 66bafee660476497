"""
Tests for the limma-voom wrappers, calling R through rpy2.
"""

import importlib

import numpy as np
import pytest

from de_benchmark.design import make_design
from de_benchmark.io import drop_zero_rows

from conftest import requires_r

pytestmark = [pytest.mark.r, requires_r("limma", "edgeR")]


@pytest.fixture(scope="module")
def limma():
    return importlib.import_module("de_benchmark.limma")


@pytest.fixture
def design(mock_se, mock_group):
    return make_design(mock_group, sample_names=list(mock_se.column_names))


@pytest.fixture
def voomed(limma, mock_se, design):
    return limma.voom(drop_zero_rows(mock_se), design)


def test_voom_assays(voomed):
    assert "log_expr" in voomed.assay_names
    assert "weights" in voomed.assay_names
    weights = np.asarray(voomed.assays["weights"])
    assert weights.shape == voomed.shape
    assert (weights > 0).all()


def test_effective_lib_sizes(limma, mock_se):
    import de_benchmark.edger as edger
    plain = limma.effective_lib_sizes(mock_se)
    np.testing.assert_allclose(plain, np.asarray(mock_se.assays["counts"]).sum(axis=0))
    normed = limma.effective_lib_sizes(edger.calc_norm_factors(drop_zero_rows(mock_se)))
    assert not np.allclose(plain, normed)


def test_voom_design_rows_checked(limma, mock_se, design):
    with pytest.raises(ValueError):
        limma.voom(mock_se, design.iloc[:4])


def test_lm_fit_top_table(limma, voomed, design):
    model = limma.lm_fit(voomed, design)
    assert isinstance(model, limma.LimmaModel)
    assert model.ebayes is None
    table = model.e_bayes().top_table(sort_by="none")
    assert list(table["gene"]) == list(voomed.row_names)
    for col in ("log_fc", "ave_expr", "t_statistic", "p_value", "adj_p_value", "b_statistic"):
        assert col in table.columns


def test_top_table_runs_e_bayes(limma, voomed, design):
    table = limma.top_table(limma.lm_fit(voomed, design))
    # Sorted by p-value by default
    assert table["p_value"].is_monotonic_increasing


def test_planted_genes_detected(limma, voomed, design):
    table = limma.lm_fit(voomed, design).e_bayes().top_table(sort_by="none")
    up = table[table["gene"].isin([f"YGENE{i:03d}" for i in range(20)])]
    assert (up["log_fc"] > 0).mean() > 0.9


def test_unknown_sort(limma, voomed, design):
    with pytest.raises(ValueError):
        limma.top_table(limma.lm_fit(voomed, design), sort_by="bogus")
