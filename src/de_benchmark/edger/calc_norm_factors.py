"""
Compute normalization factors using edgeR::calcNormFactors.

This module provides a functional interface to calculate normalization factors
and store them in the column_data of a SummarizedExperiment.
"""

from __future__ import annotations
from typing import Optional, TypeVar
import numpy as np

from .utils import _prep_edger
from ..checks import check_se, check_assay_exists
from ..r_init import counts_to_r

# Type variable for SummarizedExperiment variants
SE = TypeVar("SE")


def calc_norm_factors(
    se: SE,
    assay: str = "counts",
    method: str = "TMM",
    refColumn: Optional[int] = None,
    logratioTrim: float = 0.3,
    sumTrim: float = 0.05,
    doWeighting: bool = True,
    Acutoff: float = -1e10,
    p: float = 0.75,
    in_place: bool = False,
    **kwargs
) -> SE:
    """
    Compute normalization factors and store in column_data.

    Wraps ``edgeR::calcNormFactors``. The normalization factors are
    converted to a Python array and stored in column_data['norm.factors'].

    Args:
        se: Input SummarizedExperiment with a count assay.
        assay: Name of the counts assay. Default: "counts".
        method: Normalization method: "TMM", "TMMwsp", "RLE", "upperquartile", or "none".
        refColumn: Reference column for normalization (0-indexed, or None for auto).
        logratioTrim: Amount of trimming of the log-ratios (TMM only).
        sumTrim: Amount of trimming of intensity values (TMM only).
        doWeighting: Whether to use weighted trimmed mean (TMM only).
        Acutoff: Cutoff on average log-expression (TMM only).
        p: Quantile for upperquartile normalization.
        in_place: If True, modify se in place. Default: False.
        **kwargs: Additional args forwarded to R function.

    Returns:
        SummarizedExperiment with 'norm.factors' in column_data.

    Example:
        >>> import de_benchmark.edger as edger
        >>> se = edger.calc_norm_factors(se, method="TMM")
        >>> se.column_data["norm.factors"]
    """
    check_se(se)
    check_assay_exists(se, assay)

    r, pkg = _prep_edger()
    rmat = counts_to_r(se, assay)

    # R columns are 1-based
    refColumn_r = r.ro.NULL if refColumn is None else refColumn + 1

    r_factors = pkg.calcNormFactors(
        rmat,
        method=method,
        refColumn=refColumn_r,
        logratioTrim=logratioTrim,
        sumTrim=sumTrim,
        doWeighting=doWeighting,
        Acutoff=Acutoff,
        p=p,
        **kwargs
    )

    norm_factors = np.asarray(r_factors, dtype=float)

    output = se._define_output(in_place=in_place)
    coldata = output.get_column_data()
    if coldata is not None:
        new_coldata = coldata.set_column("norm.factors", norm_factors)
    else:
        from biocframe import BiocFrame
        new_coldata = BiocFrame({"norm.factors": norm_factors})

    return output.set_column_data(new_coldata, in_place=True)


def get_norm_factors(se: SE) -> Optional[np.ndarray]:
    """Return stored normalization factors, or None if not computed."""
    coldata = se.get_column_data()
    if coldata is not None and "norm.factors" in coldata.column_names:
        return np.asarray(coldata["norm.factors"], dtype=float)
    return None
