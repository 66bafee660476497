"""
Estimate negative-binomial dispersions using edgeR::estimateDisp.

This module provides the EdgeRModel dataclass holding the R ``DGEList``
with estimated dispersions, and the estimate_disp function creating it.
"""

from __future__ import annotations
from typing import Any, List, Optional, Sequence, TypeVar
from dataclasses import dataclass

from .utils import _prep_edger
from .calc_norm_factors import get_norm_factors
from ..checks import check_se, check_assay_exists, check_group, n_samples
from ..design import group_levels
from ..r_init import counts_to_r, r_factor

# Type variable for SummarizedExperiment variants
SE = TypeVar("SE")


@dataclass
class EdgeRModel:
    """Container for an edgeR ``DGEList`` with estimated dispersions.

    Attributes:
        sample_names: Sample names (column names) from the input SE.
        feature_names: Feature names (row names) from the input SE.
        levels: Group levels, reference first.
        dge: R ``DGEList`` object returned by estimateDisp.
        common_dispersion: Common dispersion estimate.
    """
    sample_names: Optional[Sequence[str]] = None
    feature_names: Optional[Sequence[str]] = None
    levels: Optional[List[str]] = None
    dge: Optional[Any] = None
    common_dispersion: Optional[float] = None

    def exact_test(self, pair: Optional[Sequence[str]] = None, adjust_method: str = "BH"):
        """
        Run the exact test on this model.

        Convenience method that delegates to the exact_test function.
        """
        from .exact_test import exact_test as _exact_test
        return _exact_test(self, pair=pair, adjust_method=adjust_method)


def estimate_disp(
    se: SE,
    group: Sequence[str],
    assay: str = "counts",
    levels: Optional[Sequence[str]] = None,
    robust: bool = False,
    **kwargs
) -> EdgeRModel:
    """
    Estimate common, trended and tagwise dispersions.

    Builds an edgeR ``DGEList`` from the count assay (using
    ``column_data['norm.factors']`` when present) and wraps
    ``edgeR::estimateDisp`` in classic, group-based mode, as required by
    ``exactTest``.

    Args:
        se: Input SummarizedExperiment with a count assay.
        group: Group labels, one per sample.
        assay: Counts assay name. Default: "counts".
        levels: Group level order, reference first. Default: first appearance.
        robust: Use robust empirical Bayes for tagwise dispersions. Default: False.
        **kwargs: Additional args forwarded to estimateDisp.

    Returns:
        EdgeRModel: Container with the DGEList and dispersions.

    Example:
        >>> import de_benchmark.edger as edger
        >>> se = edger.calc_norm_factors(se)
        >>> model = edger.estimate_disp(se, group)
        >>> results = model.exact_test()
    """
    check_se(se)
    check_assay_exists(se, assay)
    check_group(group, n_samples(se))
    lv = group_levels(group, levels)

    r, pkg = _prep_edger()
    rmat = counts_to_r(se, assay)

    dge_kwargs = {"group": r_factor(group, lv)}
    norm_factors = get_norm_factors(se)
    if norm_factors is not None:
        dge_kwargs["norm.factors"] = r.FloatVector(norm_factors)
    dge = pkg.DGEList(counts=rmat, **dge_kwargs)

    dge = pkg.estimateDisp(dge, robust=robust, **kwargs)
    common = r.ro.baseenv["$"](dge, "common.dispersion")

    return EdgeRModel(
        sample_names=se.column_names,
        feature_names=se.row_names,
        levels=lv,
        dge=dge,
        common_dispersion=float(common[0]),
    )
