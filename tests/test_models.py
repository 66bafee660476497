"""Tests for the model containers returned by the R wrappers."""

import dataclasses
import importlib

import pytest


@pytest.mark.parametrize(
    "module, name, expected",
    [
        ("de_benchmark.edger.estimate_disp", "EdgeRModel",
         ["sample_names", "feature_names", "levels", "dge", "common_dispersion"]),
        ("de_benchmark.deseq2.deseq_dataset", "DESeq2Model",
         ["sample_names", "feature_names", "levels", "dds", "fitted", "fit_type"]),
        ("de_benchmark.limma.lm_fit", "LimmaModel",
         ["sample_names", "feature_names", "lm_fit", "design", "ebayes", "method"]),
    ],
)
def test_model_fields(skip_r_checks, module, name, expected):
    cls = getattr(importlib.import_module(module), name)
    assert [f.name for f in dataclasses.fields(cls)] == expected


def test_unfitted_deseq2_model_rejected(skip_r_checks):
    deseq2 = importlib.import_module("de_benchmark.deseq2.deseq_dataset")
    with pytest.raises(ValueError, match="deseq"):
        deseq2.check_deseq2_model(deseq2.DESeq2Model(dds=object()), fitted=True)
