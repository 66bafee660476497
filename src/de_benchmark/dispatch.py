"""
Differential expression dispatcher.

``run_de`` selects one of the registered pipelines by name, runs it on a
count matrix and a two-group label vector, and normalizes the output to
the common result schema (``gene``, ``log_fc``, ``p_value``,
``adj_p_value``).

Each pipeline performs its own library-size normalization and its own
low-count filtering, so the set of tested genes differs between methods.

Example:
    >>> from de_benchmark import run_de
    >>> res = run_de(se, group, "edger")
    >>> res.table.head()
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from .checks import check_se, check_group, n_samples
from .design import group_levels, make_design

RESULT_COLUMNS = ["gene", "log_fc", "p_value", "adj_p_value"]

Runner = Callable[..., pd.DataFrame]
_METHODS: Dict[str, Runner] = {}


@dataclass
class DEResult:
    """Output of one differential expression run.

    Attributes:
        method: Registered method name.
        table: Common-schema table, one row per tested gene, in input order.
        raw: Method-specific table as returned by the wrapped package.
        levels: Group levels, reference first.
        figure: Diagnostic volcano plot, if requested.
    """
    method: str
    table: pd.DataFrame
    raw: pd.DataFrame
    levels: List[str] = field(default_factory=list)
    figure: Optional[Any] = None

    @property
    def n_tested(self) -> int:
        return len(self.table)

    def significant(self, fdr_threshold: float = 0.05) -> pd.DataFrame:
        """Rows with adjusted p-value below the threshold."""
        return self.table[self.table["adj_p_value"] < fdr_threshold]


def register_method(name: str):
    """
    Register a pipeline under ``name``.

    The decorated callable receives ``(se, group, levels, **kwargs)`` and
    returns a table holding at least the columns of ``RESULT_COLUMNS``.
    A warning is issued when an existing registration is replaced.
    """
    def decorator(runner: Runner) -> Runner:
        if name in _METHODS:
            warnings.warn(f"Overriding differential expression method {name!r}", stacklevel=2)
        _METHODS[name] = runner
        return runner
    return decorator


def available_methods() -> List[str]:
    """Names of the registered pipelines."""
    return list(_METHODS)


def _subset_rows(se: Any, mask: np.ndarray) -> Any:
    return se[np.flatnonzero(mask).tolist(), :]


@register_method("edger")
def _run_edger(se, group, levels, norm_method: str = "TMM", **kwargs) -> pd.DataFrame:
    from . import edger

    keep = edger.filter_by_expr(se, group=group)
    se = edger.calc_norm_factors(_subset_rows(se, keep), method=norm_method)
    model = edger.estimate_disp(se, group, levels=levels, **kwargs)
    return edger.exact_test(model)


@register_method("deseq2")
def _run_deseq2(se, group, levels, fit_type: str = "parametric", alpha: float = 0.1, **kwargs) -> pd.DataFrame:
    from . import deseq2

    model = deseq2.deseq(deseq2.deseq_dataset(se, group, levels=levels), fit_type=fit_type, **kwargs)
    return deseq2.results(model, alpha=alpha)


@register_method("limma")
def _run_limma(se, group, levels, norm_method: str = "TMM", robust: bool = False, **kwargs) -> pd.DataFrame:
    from . import edger, limma

    keep = edger.filter_by_expr(se, group=group)
    se = edger.calc_norm_factors(_subset_rows(se, keep), method=norm_method)
    design = make_design(group, levels, sample_names=list(se.column_names))
    se = limma.voom(se, design, **kwargs)
    model = limma.lm_fit(se, design).e_bayes(robust=robust)
    return model.top_table(sort_by="none")


def normalize_result(raw: pd.DataFrame) -> pd.DataFrame:
    """
    Reduce a method-specific table to the common schema.

    Genes without a p-value or adjusted p-value (untestable for that
    method) are dropped.
    """
    missing = [c for c in RESULT_COLUMNS if c not in raw.columns]
    if missing:
        raise ValueError(f"Result table lacks columns {missing}")
    table = raw[RESULT_COLUMNS].dropna(subset=["p_value", "adj_p_value"])
    table = table.astype({"gene": str, "log_fc": float, "p_value": float, "adj_p_value": float})
    return table.reset_index(drop=True)


def run_de(
    se: Any,
    group: Sequence[str],
    method: str,
    levels: Optional[Sequence[str]] = None,
    plot: bool = True,
    fdr_threshold: float = 0.05,
    logfc_threshold: float = 1.0,
    **kwargs: Any
) -> DEResult:
    """
    Run one differential expression pipeline.

    Args:
        se: SummarizedExperiment with a ``"counts"`` assay.
        group: Two-group label vector aligned with the samples.
        method: Registered method name ("edger", "deseq2", "limma").
        levels: Level order, reference first. Default: first appearance.
        plot: Draw the diagnostic volcano plot. Default: True.
        fdr_threshold: FDR threshold highlighted in the plot.
        logfc_threshold: |logFC| threshold highlighted in the plot.
        **kwargs: Forwarded to the method's pipeline.

    Returns:
        DEResult

    Raises:
        ValueError: If ``method`` is not registered, or the group vector
            is not a two-level vector matching the samples.
    """
    if method not in _METHODS:
        raise ValueError(
            f"Unknown differential expression method {method!r}; "
            f"available: {available_methods()}"
        )
    check_se(se)
    check_group(group, n_samples(se))
    lv = group_levels(group, levels)
    group = [str(g) for g in group]

    raw = _METHODS[method](se, group, lv, **kwargs)
    table = normalize_result(raw)
    if table.empty:
        warnings.warn(f"Method {method!r} returned no testable genes", stacklevel=2)

    figure = None
    if plot:
        import matplotlib.pyplot as plt
        from .plotting import volcano_plot
        figure = volcano_plot(
            table,
            fdr_threshold=fdr_threshold,
            logfc_threshold=logfc_threshold,
            title=f"{method}: {lv[1]} vs {lv[0]}",
        )
        # Detach from pyplot; the figure can still be saved
        plt.close(figure)

    return DEResult(method=method, table=table, raw=raw, levels=lv, figure=figure)
