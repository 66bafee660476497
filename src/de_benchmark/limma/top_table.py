"""
Extract result tables using limma::topTable.
"""

from __future__ import annotations
from typing import Any, Optional, Union
import pandas as pd

from .utils import _prep_limma
from .lm_fit import LimmaModel, check_limma_model
from ..r_init import r_to_pandas

# Python-side sort keys to topTable's sort.by values
_SORT_BY = {"PValue": "P", "logFC": "logFC", "AveExpr": "AveExpr", "B": "B", "t": "t", "none": "none"}


def top_table(
    model: LimmaModel,
    coef: Optional[Union[int, str]] = None,
    n: Optional[int] = None,
    adjust_method: str = "BH",
    sort_by: str = "PValue",
    **kwargs: Any
) -> pd.DataFrame:
    """
    Extract ranked genes from a moderated linear model fit.

    Wraps ``limma::topTable``. Runs eBayes with defaults if it has not been
    run yet.

    Args:
        model: LimmaModel (eBayes is applied if the ebayes slot is empty).
        coef: Coefficient to extract (name, or 1-based index).
            Default: last design column.
        n: Number of genes (None = all).
        adjust_method: Multiple testing method. Default: "BH".
        sort_by: "PValue", "logFC", "AveExpr", "B", "t" or "none". Default: "PValue".
        **kwargs: Additional args forwarded to R function.

    Returns:
        pd.DataFrame: Results table with columns ``gene``, ``log_fc``,
        ``ave_expr``, ``t_statistic``, ``p_value``, ``adj_p_value``,
        ``b_statistic``.
    """
    from .e_bayes import e_bayes

    check_limma_model(model)
    if sort_by not in _SORT_BY:
        raise ValueError(f"Unknown sort_by {sort_by!r}; expected one of {list(_SORT_BY)}")

    r, limma_pkg = _prep_limma()

    if model.ebayes is None:
        model = e_bayes(model)
    eb = model.ebayes

    if n is None:
        n = int(r.r2py(r.ro.baseenv["nrow"](eb)))

    if coef is None:
        coef = model.design.shape[1] if model.design is not None else 1

    call_kwargs = {"number": n, "adjust.method": adjust_method, "coef": coef, "sort.by": _SORT_BY[sort_by]}
    call_kwargs.update(kwargs)

    top_r = limma_pkg.topTable(eb, **call_kwargs)
    df = r_to_pandas(top_r)

    df = df.reset_index(names="gene")
    df["gene"] = df["gene"].astype(str)
    return df.rename(columns={
        'P.Value': 'p_value',
        'logFC': 'log_fc',
        'adj.P.Val': 'adj_p_value',
        'AveExpr': 'ave_expr',
        't': 't_statistic',
        'B': 'b_statistic'
    })
