"""de_benchmark: compare edgeR, DESeq2 and limma-voom on RNA-seq counts.

The R-backed method wrappers are loaded lazily so that importing the
package does not start R or check R dependencies.

Usage:
    >>> import de_benchmark as deb
    >>> se = deb.drop_zero_rows(deb.load_cohorts({"WT": "WT.tsv", "Mut": "Snf2.tsv"}))
    >>> group = deb.get_group(se)
    >>> res = deb.run_de(se, group, "edger")   # edgeR is checked/loaded now
    >>> report = deb.compare_methods(se, group)
"""

from __future__ import annotations

import importlib

# Core exports that don't require R
from .io import read_counts, counts_to_se, load_cohorts, drop_zero_rows, get_group
from .design import group_levels, make_design
from .dispatch import DEResult, run_de, available_methods, register_method, RESULT_COLUMNS
from .compare import (
    ConcordanceMetrics,
    join_results,
    pairwise_concordance,
    all_pairwise_concordance,
    correlation_matrix,
    find_discordant,
    gene_profile,
)
from .report import ComparisonConfig, ComparisonReport, compare_methods
from .r_utils import ensure_r_dependencies, r_packages_installed
from .plotting import volcano_plot, pairwise_pvalue_plot, concordance_heatmap

__all__ = [
    "read_counts",
    "counts_to_se",
    "load_cohorts",
    "drop_zero_rows",
    "get_group",
    "group_levels",
    "make_design",
    "DEResult",
    "run_de",
    "available_methods",
    "register_method",
    "RESULT_COLUMNS",
    "ConcordanceMetrics",
    "join_results",
    "pairwise_concordance",
    "all_pairwise_concordance",
    "correlation_matrix",
    "find_discordant",
    "gene_profile",
    "ComparisonConfig",
    "ComparisonReport",
    "compare_methods",
    "ensure_r_dependencies",
    "r_packages_installed",
    "volcano_plot",
    "pairwise_pvalue_plot",
    "concordance_heatmap",
    # Lazy-loaded submodules
    "edger",
    "deseq2",
    "limma",
]

# Submodules to be lazily loaded
_LAZY_SUBMODULES = {"edger", "deseq2", "limma"}


def __getattr__(name: str):
    """Lazy loading of submodules per PEP 562."""
    if name in _LAZY_SUBMODULES:
        module = importlib.import_module(f".{name}", __name__)
        globals()[name] = module
        return module
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__():
    return list(__all__)
