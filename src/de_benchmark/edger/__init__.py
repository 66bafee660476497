"""edgeR: negative-binomial exact test.

This module provides Python wrappers for the R edgeR package via rpy2.

Functional API:
    >>> import de_benchmark.edger as edger
    >>> mask = edger.filter_by_expr(se, group=group)
    >>> se = edger.calc_norm_factors(se[mask.tolist(), :], method="TMM")
    >>> model = edger.estimate_disp(se, group)
    >>> results = edger.exact_test(model)
"""

# Check/install edgeR R package on module import
from ..r_utils import ensure_r_dependencies, METHOD_R_PACKAGES
ensure_r_dependencies(METHOD_R_PACKAGES["edger"])

from .calc_norm_factors import calc_norm_factors, get_norm_factors
from .filter_by_expr import filter_by_expr
from .estimate_disp import estimate_disp, EdgeRModel
from .exact_test import exact_test
from .top_tags import top_tags
from .utils import _prep_edger

__all__ = [
    "calc_norm_factors",
    "get_norm_factors",
    "filter_by_expr",
    "estimate_disp",
    "exact_test",
    "top_tags",
    "EdgeRModel",
    "_prep_edger",
]
