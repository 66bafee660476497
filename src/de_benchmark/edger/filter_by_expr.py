"""
Filter genes by expression using edgeR::filterByExpr.

This module provides a functional interface to compute an expression filter
mask for genes in a SummarizedExperiment.
"""

from __future__ import annotations
from typing import Optional, Sequence, TypeVar
import numpy as np
import pandas as pd

from .utils import _prep_edger
from ..checks import check_se, check_assay_exists, check_group, check_design, n_samples
from ..design import group_levels
from ..r_init import counts_to_r, pandas_to_r_matrix, r_factor

# Type variable for SummarizedExperiment variants
SE = TypeVar("SE")


def filter_by_expr(
    se: SE,
    group: Optional[Sequence[str]] = None,
    assay: str = "counts",
    design: Optional[pd.DataFrame] = None,
    lib_size: Optional[Sequence] = None,
    min_count: float = 10,
    min_total_count: float = 15,
    large_n: int = 10,
    min_prop: float = 0.7,
    **kwargs
) -> np.ndarray:
    """
    Compute expression filter mask using edgeR's filterByExpr.

    Returns a boolean mask indicating which genes pass the expression
    filter. Does NOT modify the SE - use the mask to subset manually.

    Args:
        se: Input SummarizedExperiment with a count assay.
        group: Optional group labels; the smallest group size sets how many
            samples must pass ``min_count``.
        assay: Name of the counts assay. Default: "counts".
        design: Optional design matrix as pandas DataFrame.
        lib_size: Optional library sizes.
        min_count: Minimum CPM-equivalent count required in enough samples. Default: 10.
        min_total_count: Minimum total count across all samples. Default: 15.
        large_n: Number of samples per group considered large. Default: 10.
        min_prop: Minimum proportion of samples in the smallest group. Default: 0.7.
        **kwargs: Additional args forwarded to R function.

    Returns:
        Boolean numpy array mask (True = keep gene).

    Example:
        >>> import de_benchmark.edger as edger
        >>> mask = edger.filter_by_expr(se, group=["WT"] * 3 + ["Mut"] * 3)
        >>> se_filtered = se[mask.tolist(), :]
    """
    check_se(se)
    check_assay_exists(se, assay)

    r, pkg = _prep_edger()
    rmat = counts_to_r(se, assay)

    if group is not None:
        check_group(group, n_samples(se))
        group_r = r_factor(group, group_levels(group))
    else:
        group_r = r.ro.NULL
    if design is not None:
        check_design(design, n_samples(se))
        design_r = pandas_to_r_matrix(design)
    else:
        design_r = r.ro.NULL
    lib_size_r = r.ro.NULL if lib_size is None else r.FloatVector(np.asarray(lib_size, dtype=float))

    mask_r = pkg.filterByExpr(
        rmat,
        design=design_r,
        group=group_r,
        **{
            "lib.size": lib_size_r,
            "min.count": min_count,
            "min.total.count": min_total_count,
            "large.n": large_n,
            "min.prop": min_prop,
        },
        **kwargs
    )

    return np.asarray(mask_r, dtype=bool)
