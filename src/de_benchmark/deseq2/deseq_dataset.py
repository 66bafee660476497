"""
Build and fit DESeq2 datasets.

This module provides the DESeq2Model dataclass wrapping an R
``DESeqDataSet``, deseq_dataset() to create it from a SummarizedExperiment
and deseq() to run size factor estimation, dispersion shrinkage and the
Wald test.
"""

from __future__ import annotations
from typing import Any, List, Optional, Sequence, TypeVar
from dataclasses import dataclass, replace

from .utils import _prep_deseq2
from ..checks import check_se, check_assay_exists, check_group, n_samples
from ..design import group_levels
from ..r_init import counts_to_r, r_factor

# Type variable for SummarizedExperiment variants
SE = TypeVar("SE")


@dataclass
class DESeq2Model:
    """Container for a DESeq2 dataset.

    Attributes:
        sample_names: Sample names (column names) from the input SE.
        feature_names: Feature names (row names) from the input SE.
        levels: Condition levels, reference first.
        dds: R ``DESeqDataSet``.
        fitted: Whether ``DESeq()`` has been run on ``dds``.
        fit_type: Dispersion fit type used by ``DESeq()``.
    """
    sample_names: Optional[Sequence[str]] = None
    feature_names: Optional[Sequence[str]] = None
    levels: Optional[List[str]] = None
    dds: Optional[Any] = None
    fitted: bool = False
    fit_type: Optional[str] = None

    def deseq(self, fit_type: str = "parametric", **kwargs: Any) -> "DESeq2Model":
        """Convenience method that delegates to the deseq function."""
        return deseq(self, fit_type=fit_type, **kwargs)

    def results(self, contrast: Optional[Sequence[str]] = None, alpha: float = 0.1, **kwargs: Any):
        """Convenience method that delegates to the results function."""
        from .results import results as _results
        return _results(self, contrast=contrast, alpha=alpha, **kwargs)

    def lfc_shrink(self, contrast: Optional[Sequence[str]] = None, type: str = "normal", **kwargs: Any):
        """Convenience method that delegates to the lfc_shrink function."""
        from .results import lfc_shrink as _lfc_shrink
        return _lfc_shrink(self, contrast=contrast, type=type, **kwargs)


def check_deseq2_model(model: Any, fitted: bool = False) -> None:
    """Check that input is a DESeq2Model, optionally one that has been fitted."""
    if not isinstance(model, DESeq2Model):
        raise TypeError(f"Expected a DESeq2Model, got {type(model).__name__}")
    if model.dds is None:
        raise ValueError("DESeq2Model.dds is None - no dataset has been built")
    if fitted and not model.fitted:
        raise ValueError("DESeq2Model has not been fitted - call deseq() first")


def deseq_dataset(
    se: SE,
    group: Sequence[str],
    assay: str = "counts",
    levels: Optional[Sequence[str]] = None,
) -> DESeq2Model:
    """
    Create a ``DESeqDataSet`` with design ``~ condition``.

    Wraps ``DESeq2::DESeqDataSetFromMatrix``. The condition factor uses the
    first level as reference.

    Args:
        se: Input SummarizedExperiment with an integer count assay.
        group: Condition labels, one per sample.
        assay: Counts assay name. Default: "counts".
        levels: Level order, reference first. Default: first appearance.

    Returns:
        DESeq2Model: Unfitted model.

    Example:
        >>> import de_benchmark.deseq2 as deseq2
        >>> model = deseq2.deseq_dataset(se, group).deseq()
        >>> res = model.results()
    """
    check_se(se)
    check_assay_exists(se, assay)
    check_group(group, n_samples(se))
    lv = group_levels(group, levels)

    r, pkg = _prep_deseq2()
    counts_r = counts_to_r(se, assay)

    col_data = r.ro.baseenv["data.frame"](
        condition=r_factor(group, lv),
        **{"row.names": r.StrVector([str(s) for s in se.column_names])}
    )

    dds = pkg.DESeqDataSetFromMatrix(
        countData=counts_r,
        colData=col_data,
        design=r.ro.Formula("~ condition"),
    )

    return DESeq2Model(
        sample_names=se.column_names,
        feature_names=se.row_names,
        levels=lv,
        dds=dds,
    )


def deseq(
    model: DESeq2Model,
    fit_type: str = "parametric",
    test: str = "Wald",
    quiet: bool = True,
    **kwargs: Any
) -> DESeq2Model:
    """
    Run the DESeq2 pipeline on a dataset.

    Wraps ``DESeq2::DESeq``: median-of-ratios size factors, gene-wise
    dispersions shrunk towards the fitted trend, and a negative-binomial
    GLM Wald test.

    Args:
        model: DESeq2Model from deseq_dataset().
        fit_type: Dispersion trend: "parametric", "local", "mean" or "glmGamPoi".
        test: "Wald" or "LRT". Default: "Wald".
        quiet: Suppress DESeq2 progress messages. Default: True.
        **kwargs: Additional args forwarded to R function.

    Returns:
        DESeq2Model with ``fitted=True``.
    """
    check_deseq2_model(model)

    r, pkg = _prep_deseq2()
    dds = pkg.DESeq(model.dds, test=test, fitType=fit_type, quiet=quiet, **kwargs)

    return replace(model, dds=dds, fitted=True, fit_type=fit_type)
