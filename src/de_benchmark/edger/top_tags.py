"""
Extract result tables using edgeR::topTags.

This module provides a functional interface to extract results from
an edgeR test object (e.g., from exactTest) as a pandas DataFrame.
"""

from __future__ import annotations
from typing import Any, Optional
import pandas as pd

from .utils import _prep_edger
from ..r_init import r_to_pandas

_COLUMN_MAP = {
    "PValue": "p_value",
    "FDR": "adj_p_value",
    "FWER": "adj_p_value",
    "logFC": "log_fc",
    "logCPM": "log_cpm",
    "LR": "lr_statistic",
    "F": "f_statistic",
}


def top_tags(
    test_obj: Any,
    n: Optional[int] = None,
    adjust_method: str = "BH",
    sort_by: str = "PValue",
    **kwargs
) -> pd.DataFrame:
    """
    Extract top-ranked genes from a test result.

    Wraps ``edgeR::topTags``. Returns a DataFrame with standardized
    column names for convenient downstream analysis.

    Args:
        test_obj: R object from exactTest or similar edgeR test.
        n: Number of top genes to return. None = all genes.
        adjust_method: Multiple testing correction method. Default: "BH".
        sort_by: "PValue", "logFC" or "none" (keep input order). Default: "PValue".
        **kwargs: Additional args forwarded to R function.

    Returns:
        pd.DataFrame: Results table with standardized columns:
            - gene: gene identifier (from row names)
            - log_fc: log2 fold-change
            - log_cpm: average log2 counts per million
            - p_value: raw p-value
            - adj_p_value: adjusted p-value
    """
    r, pkg = _prep_edger()

    if n is None:
        n = int(r.r2py(r.ro.baseenv["nrow"](test_obj)))

    top_r = pkg.topTags(
        test_obj,
        n=n,
        **{"adjust.method": adjust_method, "sort.by": sort_by},
        **kwargs
    )

    table_r = r.ro.baseenv["$"](top_r, "table")
    df = r_to_pandas(table_r)

    df = df.reset_index(names="gene")
    df["gene"] = df["gene"].astype(str)
    return df.rename(columns=_COLUMN_MAP)
