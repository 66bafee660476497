"""
Tests for the DESeq2 wrappers, calling R through rpy2.
"""

import importlib

import numpy as np
import pytest

from de_benchmark.io import drop_zero_rows

from conftest import requires_r

pytestmark = [pytest.mark.r, requires_r("DESeq2")]


@pytest.fixture(scope="module")
def deseq2():
    return importlib.import_module("de_benchmark.deseq2")


@pytest.fixture
def fitted(deseq2, mock_se, mock_group):
    return deseq2.deseq(deseq2.deseq_dataset(drop_zero_rows(mock_se), mock_group))


def test_dataset_levels(deseq2, mock_se, mock_group):
    model = deseq2.deseq_dataset(mock_se, mock_group)
    assert model.levels == ["WT", "Mut"]
    assert not model.fitted


def test_results_require_fit(deseq2, mock_se, mock_group):
    model = deseq2.deseq_dataset(mock_se, mock_group)
    with pytest.raises(ValueError, match="deseq"):
        deseq2.results(model)


def test_results_table(deseq2, fitted):
    assert fitted.fitted
    table = deseq2.results(fitted)
    assert list(table.columns) == ["gene", "base_mean", "log_fc", "lfc_se", "stat", "p_value", "adj_p_value"]
    assert len(table) == len(fitted.feature_names)
    tested = table.dropna(subset=["p_value"])
    assert tested["p_value"].between(0, 1).all()


def test_planted_genes_detected(deseq2, fitted):
    table = deseq2.results(fitted)
    up = table[table["gene"].isin([f"YGENE{i:03d}" for i in range(20)])]
    assert (up["log_fc"] > 0).mean() > 0.9
    assert up["adj_p_value"].median() < 0.05


def test_contrast_reversal(deseq2, fitted):
    forward = deseq2.results(fitted)
    reverse = deseq2.results(fitted, contrast=["condition", "WT", "Mut"])
    np.testing.assert_allclose(forward["log_fc"], -reverse["log_fc"], atol=1e-6)


def test_bad_contrast(deseq2, fitted):
    with pytest.raises(ValueError):
        deseq2.results(fitted, contrast=["condition", "Mut"])


def test_lfc_shrink(deseq2, fitted):
    raw = deseq2.results(fitted)
    shrunk = deseq2.lfc_shrink(fitted)
    assert list(shrunk["gene"]) == list(raw["gene"])
    # Normal-prior shrinkage pulls estimates towards zero
    assert shrunk["log_fc"].abs().sum() <= raw["log_fc"].abs().sum()
