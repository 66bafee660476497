"""
Fit linear model using limma::lmFit.

This module provides the LimmaModel dataclass for storing fit results
and the lm_fit function for fitting the model.
"""

from __future__ import annotations
from typing import Any, Literal, Optional, Sequence, TypeVar, Union
from dataclasses import dataclass
import numpy as np
import pandas as pd

from .utils import _prep_limma
from ..checks import check_se, check_assay_exists, check_design, n_samples
from ..r_init import numpy_to_r_matrix, pandas_to_r_matrix

# Type variable for SummarizedExperiment variants
SE = TypeVar("SE")


@dataclass
class LimmaModel:
    """Container for limma linear model fit results.

    This dataclass stores the R fit objects and sample/feature names from
    lm_fit. Use with e_bayes() and top_table() for downstream analysis.

    Attributes:
        sample_names: Sample names (column names) from the input SE.
        feature_names: Feature names (row names) from the input SE.
        lm_fit: R object from lmFit.
        design: Design matrix used for fitting.
        ebayes: R object from eBayes (optional).
        method: Fitting method used.
    """
    sample_names: Optional[Sequence[str]] = None
    feature_names: Optional[Sequence[str]] = None
    lm_fit: Optional[Any] = None
    design: Optional[pd.DataFrame] = None
    ebayes: Optional[Any] = None
    method: Optional[str] = None

    def e_bayes(
        self,
        proportion: float = 0.01,
        trend: bool = False,
        robust: bool = False,
        **kwargs: Any
    ) -> "LimmaModel":
        """
        Apply empirical Bayes moderation.

        Convenience method that delegates to the e_bayes function.
        """
        from .e_bayes import e_bayes as _e_bayes
        return _e_bayes(self, proportion=proportion, trend=trend, robust=robust, **kwargs)

    def top_table(
        self,
        coef: Optional[Union[int, str]] = None,
        n: Optional[int] = None,
        adjust_method: str = "BH",
        sort_by: str = "PValue",
        **kwargs: Any
    ) -> pd.DataFrame:
        """
        Extract the results table.

        Convenience method that delegates to the top_table function.
        """
        from .top_table import top_table as _top_table
        return _top_table(self, coef=coef, n=n, adjust_method=adjust_method, sort_by=sort_by, **kwargs)


def check_limma_model(model: Any) -> None:
    """Check that input is a LimmaModel with lm_fit set."""
    if not isinstance(model, LimmaModel):
        raise TypeError(
            f"Expected a LimmaModel, got {type(model).__name__}"
        )
    if model.lm_fit is None:
        raise ValueError("LimmaModel.lm_fit is None - model has not been fitted")


def lm_fit(
    se: SE,
    design: pd.DataFrame,
    assay: str = "log_expr",
    weights_assay: Optional[str] = "weights",
    method: Literal["ls", "robust"] = "ls",
    **kwargs: Any,
) -> LimmaModel:
    """
    Fit linear model to expression data using limma::lmFit.

    Args:
        se: Input SummarizedExperiment with an expression assay (e.g. from voom()).
        design: Design matrix (samples × covariates) as pandas DataFrame.
        assay: Expression assay to use. Default: "log_expr".
        weights_assay: Precision weights assay, used when present. Default: "weights".
        method: Fitting method ("ls" or "robust"). Default: "ls".
        **kwargs: Additional args forwarded to R function.

    Returns:
        LimmaModel: Container with fitted model.

    Raises:
        TypeError: If inputs are invalid.
        KeyError: If assay doesn't exist.

    Example:
        >>> import de_benchmark.limma as limma
        >>> model = limma.lm_fit(limma.voom(se, design), design)
        >>> results = model.e_bayes().top_table()
    """
    check_se(se)
    check_assay_exists(se, assay)
    check_design(design, n_samples(se))

    r, limma_pkg = _prep_limma()

    rownames = list(se.row_names) if se.row_names is not None else None
    colnames = list(se.column_names) if se.column_names is not None else None
    exprs_r = numpy_to_r_matrix(
        np.asarray(se.assays[assay], dtype=float), rownames=rownames, colnames=colnames
    )
    design_r = pandas_to_r_matrix(design)

    if weights_assay is not None and weights_assay in se.assay_names:
        weights_r = numpy_to_r_matrix(np.asarray(se.assays[weights_assay], dtype=float))
    else:
        weights_r = r.ro.NULL

    fit = limma_pkg.lmFit(
        exprs_r,
        design_r,
        weights=weights_r,
        method=method,
        **kwargs,
    )

    return LimmaModel(
        sample_names=se.column_names,
        feature_names=se.row_names,
        lm_fit=fit,
        design=design,
        method=method,
    )
