"""
Extract DESeq2 result tables using DESeq2::results and DESeq2::lfcShrink.
"""

from __future__ import annotations
from typing import Any, List, Optional, Sequence
import pandas as pd

from .utils import _prep_deseq2
from .deseq_dataset import DESeq2Model, check_deseq2_model
from ..r_init import r_to_pandas

_COLUMN_MAP = {
    "baseMean": "base_mean",
    "log2FoldChange": "log_fc",
    "lfcSE": "lfc_se",
    "stat": "stat",
    "pvalue": "p_value",
    "padj": "adj_p_value",
}


def _resolve_contrast(model: DESeq2Model, contrast: Optional[Sequence[str]]) -> List[str]:
    if contrast is None:
        return ["condition", model.levels[1], model.levels[0]]
    contrast = [str(c) for c in contrast]
    if len(contrast) != 3:
        raise ValueError(
            "`contrast` must be [factor, numerator level, denominator level], "
            f"got {contrast}"
        )
    return contrast


def _to_table(res_r: Any) -> pd.DataFrame:
    df = r_to_pandas(res_r)
    df = df.reset_index(names="gene")
    df["gene"] = df["gene"].astype(str)
    return df.rename(columns=_COLUMN_MAP)


def results(
    model: DESeq2Model,
    contrast: Optional[Sequence[str]] = None,
    alpha: float = 0.1,
    independent_filtering: bool = True,
    adjust_method: str = "BH",
    **kwargs: Any
) -> pd.DataFrame:
    """
    Extract Wald test results from a fitted DESeq2 model.

    Wraps ``DESeq2::results``. DESeq2 applies independent filtering and the
    p-value adjustment itself; genes it considers untestable (all-zero,
    count outliers, filtered for low mean) carry NaN p-values or adjusted
    p-values.

    Args:
        model: Fitted DESeq2Model.
        contrast: ``[factor, numerator, denominator]``.
            Default: ``["condition", levels[1], levels[0]]``.
        alpha: Significance level used to tune independent filtering. Default: 0.1.
        independent_filtering: Apply independent filtering. Default: True.
        adjust_method: p-value adjustment method. Default: "BH".
        **kwargs: Additional args forwarded to R function.

    Returns:
        pd.DataFrame with columns ``gene``, ``base_mean``, ``log_fc``,
        ``lfc_se``, ``stat``, ``p_value``, ``adj_p_value`` in input order.
    """
    check_deseq2_model(model, fitted=True)

    r, pkg = _prep_deseq2()
    res = pkg.results(
        model.dds,
        contrast=r.StrVector(_resolve_contrast(model, contrast)),
        alpha=alpha,
        independentFiltering=independent_filtering,
        pAdjustMethod=adjust_method,
        **kwargs
    )
    return _to_table(res)


def lfc_shrink(
    model: DESeq2Model,
    contrast: Optional[Sequence[str]] = None,
    type: str = "normal",
    **kwargs: Any
) -> pd.DataFrame:
    """
    Shrink log fold-changes with ``DESeq2::lfcShrink``.

    Only ``type="normal"`` accepts a contrast; "apeglm" and "ashr" need
    the corresponding R packages and a ``coef`` passed through kwargs.

    Returns:
        pd.DataFrame with the same column names as results(); ``log_fc``
        holds the shrunken estimates.
    """
    check_deseq2_model(model, fitted=True)

    r, pkg = _prep_deseq2()
    if type == "normal":
        kwargs["contrast"] = r.StrVector(_resolve_contrast(model, contrast))
    res = pkg.lfcShrink(model.dds, type=type, quiet=True, **kwargs)
    return _to_table(res)
