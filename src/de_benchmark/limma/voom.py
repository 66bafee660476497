"""
Run voom transformation using limma::voom.

This module provides a functional interface to perform voom transformation
and store results as assays in a SummarizedExperiment.
"""

from __future__ import annotations
from typing import Optional, Sequence, TypeVar, Union
import numpy as np
import pandas as pd

from .utils import _prep_limma
from ..checks import check_se, check_assay_exists, check_design, n_samples
from ..r_init import counts_to_r, pandas_to_r_matrix, r_to_numpy

# Type variable for SummarizedExperiment variants
SE = TypeVar("SE")


def effective_lib_sizes(se: SE, assay: str = "counts") -> np.ndarray:
    """Column sums scaled by ``column_data['norm.factors']`` when present."""
    lib_size = np.asarray(se.assays[assay]).sum(axis=0).astype(float)
    coldata = se.get_column_data()
    if coldata is not None and "norm.factors" in coldata.column_names:
        lib_size = lib_size * np.asarray(coldata["norm.factors"], dtype=float)
    return lib_size


def voom(
    se: SE,
    design: pd.DataFrame,
    assay: str = "counts",
    lib_size: Optional[Union[pd.Series, Sequence, np.ndarray]] = None,
    log_expr_assay: str = "log_expr",
    weights_assay: str = "weights",
    span: float = 0.5,
    in_place: bool = False,
    **kwargs
) -> SE:
    """
    Run voom transformation on counts to compute log-CPM and weights.

    Wraps ``limma::voom``. Results stored as assays: 'log_expr' and 'weights'.

    Args:
        se: Input SummarizedExperiment with a count assay.
        design: Design matrix (samples × covariates) as pandas DataFrame.
        assay: Input counts assay name. Default: "counts".
        lib_size: Library sizes per sample. Default: column sums times
            ``column_data['norm.factors']`` when present.
        log_expr_assay: Name for log-expression assay. Default: "log_expr".
        weights_assay: Name for weights assay. Default: "weights".
        span: Lowess span of the mean-variance trend. Default: 0.5.
        in_place: If True, modify se in place. Default: False.
        **kwargs: Additional args forwarded to R function.

    Returns:
        SummarizedExperiment with log_expr and weights assays.

    Example:
        >>> import de_benchmark.limma as limma
        >>> se = limma.voom(se, design)
        >>> log_expr = np.asarray(se.assays["log_expr"])
    """
    check_se(se)
    check_assay_exists(se, assay)
    check_design(design, n_samples(se))

    r, limma_pkg = _prep_limma()

    counts_r = counts_to_r(se, assay)
    design_r = pandas_to_r_matrix(design)

    if lib_size is None:
        lib_size = effective_lib_sizes(se, assay)
    lib_size_r = r.FloatVector(np.asarray(lib_size, dtype=float))

    voom_out = limma_pkg.voom(
        counts_r, design_r,
        plot=False,
        span=span,
        **{"lib.size": lib_size_r},
        **kwargs
    )

    E = r_to_numpy(r.ro.baseenv["[["](voom_out, "E"))
    weights = r_to_numpy(r.ro.baseenv["[["](voom_out, "weights"))

    output = se._define_output(in_place=in_place)
    new_assays = dict(output.assays)
    new_assays[log_expr_assay] = E
    new_assays[weights_assay] = weights
    output._assays = new_assays
    return output
