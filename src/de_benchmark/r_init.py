"""
Conversion helpers between Python containers and R objects.

All R access goes through the lazy rpy2 environment from ``bioc2ri``, so
importing this module does not start R.

Usage:
    >>> from de_benchmark.r_init import counts_to_r, r_factor
    >>> counts_r = counts_to_r(se, assay="counts")
    >>> group_r = r_factor(["WT", "WT", "Mut"], levels=["WT", "Mut"])
"""

from __future__ import annotations
from typing import Any, Optional, Sequence
import numpy as np
import pandas as pd

from .checks import check_se, check_assay_exists


def get_r():
    """Return the shared rpy2 environment."""
    from bioc2ri.lazy_r_env import get_r_environment
    return get_r_environment()


def numpy_to_r_matrix(
    mat: np.ndarray,
    rownames: Optional[Sequence[str]] = None,
    colnames: Optional[Sequence[str]] = None,
) -> Any:
    """Convert a 2D numpy array to an R matrix, optionally with dimnames."""
    from bioc2ri import numpy_plugin
    from bioc2ri.rnames import set_rownames, set_colnames

    np_eng = numpy_plugin()
    rmat = np_eng.py2r(np.asarray(mat))
    if rownames is not None:
        rmat = set_rownames(rmat, np_eng.py2r(np.asarray(rownames, dtype=str)))
    if colnames is not None:
        rmat = set_colnames(rmat, np_eng.py2r(np.asarray(colnames, dtype=str)))
    return rmat


def pandas_to_r_matrix(df: pd.DataFrame) -> Any:
    """Convert a numeric DataFrame to an R matrix keeping index/columns as dimnames."""
    return numpy_to_r_matrix(
        df.to_numpy(dtype=float),
        rownames=[str(i) for i in df.index],
        colnames=[str(c) for c in df.columns],
    )


def counts_to_r(se: Any, assay: str = "counts") -> Any:
    """
    Convert a count assay of a SummarizedExperiment to an integer R matrix.

    Row and column names of the SE become the R dimnames, so gene
    identifiers survive the round trip through R result tables.

    Args:
        se: SummarizedExperiment-like object.
        assay: Name of the counts assay. Default: "counts".

    Returns:
        R integer matrix (genes × samples).
    """
    check_se(se)
    check_assay_exists(se, assay)

    counts = np.asarray(se.assays[assay])
    if not np.issubdtype(counts.dtype, np.integer):
        rounded = np.rint(counts)
        if not np.allclose(counts, rounded):
            raise ValueError(f"Assay '{assay}' must hold integer counts")
        counts = rounded
    # R integers are 32-bit
    if counts.size and counts.max() > np.iinfo(np.int32).max:
        raise ValueError(
            f"Assay '{assay}' holds counts above {np.iinfo(np.int32).max}, "
            "which R integer matrices cannot represent"
        )
    counts = counts.astype(np.int32)

    rownames = list(se.row_names) if se.row_names is not None else None
    colnames = list(se.column_names) if se.column_names is not None else None
    return numpy_to_r_matrix(counts, rownames=rownames, colnames=colnames)


def r_factor(labels: Sequence[str], levels: Sequence[str]) -> Any:
    """Build an R factor with an explicit level order (first level = reference)."""
    r = get_r()
    return r.ro.baseenv["factor"](
        r.StrVector([str(x) for x in labels]),
        levels=r.StrVector([str(x) for x in levels]),
    )


def r_to_pandas(r_obj: Any) -> pd.DataFrame:
    """Convert an R data.frame (or anything ``as.data.frame`` accepts) to pandas."""
    r = get_r()
    r_df = r.ro.baseenv["as.data.frame"](r_obj)
    with r.localconverter(r.default_converter + r.pandas2ri.converter):
        df = r.get_conversion().rpy2py(r_df)
    return df


def r_to_numpy(r_obj: Any) -> np.ndarray:
    """Convert an R vector or matrix to a numpy array."""
    r = get_r()
    with r.localconverter(r.default_converter + r.numpy2ri.converter):
        arr = r.get_conversion().rpy2py(r_obj)
    return np.asarray(arr)
