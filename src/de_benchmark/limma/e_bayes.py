"""
Apply empirical Bayes moderation using limma::eBayes.
"""

from __future__ import annotations
from typing import Any
from dataclasses import replace

from .utils import _prep_limma
from .lm_fit import LimmaModel, check_limma_model


def e_bayes(
    model: LimmaModel,
    proportion: float = 0.01,
    trend: bool = False,
    robust: bool = False,
    **kwargs: Any
) -> LimmaModel:
    """
    Compute empirical Bayes moderated statistics.

    Wraps ``limma::eBayes``. Returns a new LimmaModel with the ebayes slot set.

    Args:
        model: LimmaModel from lm_fit().
        proportion: Assumed proportion of DE genes. Default: 0.01.
        trend: Fit mean-variance trend. Default: False.
        robust: Use robust empirical Bayes. Default: False.
        **kwargs: Additional args forwarded to R function.

    Returns:
        LimmaModel: With ebayes slot set.
    """
    check_limma_model(model)

    _, limma_pkg = _prep_limma()

    call_kwargs = {"proportion": proportion, "trend": trend, "robust": robust}
    call_kwargs.update(kwargs)

    eb = limma_pkg.eBayes(model.lm_fit, **call_kwargs)

    return replace(model, ebayes=eb)
