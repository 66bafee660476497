"""
Cross-method comparison of differential expression results.

Result tables are aligned on gene identifiers with an inner join: a gene
filtered out by any one method is absent from every comparison.

Example:
    >>> joined = join_results({"edger": res_e, "deseq2": res_d, "limma": res_l})
    >>> correlation_matrix(joined, column="p_value")
    >>> find_discordant(joined, high=0.75, low=0.25)
"""

from __future__ import annotations

import itertools
import warnings
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd
from scipy import stats

from .dispatch import DEResult, RESULT_COLUMNS

TableLike = Union[DEResult, pd.DataFrame]

_VALUE_COLUMNS = [c for c in RESULT_COLUMNS if c != "gene"]


def _as_table(result: TableLike) -> pd.DataFrame:
    table = result.table if isinstance(result, DEResult) else result
    missing = [c for c in RESULT_COLUMNS if c not in table.columns]
    if missing:
        raise ValueError(f"Result table lacks columns {missing}")
    return table


def methods_in(joined: pd.DataFrame, column: str = "p_value") -> List[str]:
    """Method names present in a joined table, in column order."""
    prefix = f"{column}_"
    return [c[len(prefix):] for c in joined.columns if c.startswith(prefix)]


def join_results(results: Mapping[str, TableLike]) -> pd.DataFrame:
    """
    Inner-join per-method result tables on ``gene``.

    Args:
        results: Mapping of method name to DEResult or common-schema table.

    Returns:
        DataFrame with a ``gene`` column and ``{column}_{method}`` for
        ``log_fc``, ``p_value`` and ``adj_p_value`` of every method.
        Rows follow the gene order of the first table.

    Raises:
        ValueError: If fewer than two results are given.
    """
    if len(results) < 2:
        raise ValueError("At least two results are needed for a comparison")

    joined: Optional[pd.DataFrame] = None
    for method, result in results.items():
        table = _as_table(result)[RESULT_COLUMNS]
        table = table.rename(columns={c: f"{c}_{method}" for c in _VALUE_COLUMNS})
        joined = table if joined is None else joined.merge(table, on="gene", how="inner")

    if joined.empty:
        warnings.warn("No gene is shared by all methods", stacklevel=2)
    return joined.reset_index(drop=True)


@dataclass
class ConcordanceMetrics:
    """
    Agreement between two methods on their shared genes.

    Attributes:
        method_a: First method in the comparison
        method_b: Second method in the comparison
        column: Column compared by rank correlation
        n_genes: Number of genes both methods tested
        spearman_rho: Spearman correlation of ``column``
        spearman_pvalue: Significance of the rank correlation
        logfc_pearson_r: Pearson correlation of log fold-changes
        direction_agreement: Fraction of genes with the same logFC sign
        threshold: Adjusted p-value threshold for significance calls
        n_both_significant: Genes significant in both methods
        n_a_only: Genes significant only in method A
        n_b_only: Genes significant only in method B
    """
    method_a: str
    method_b: str
    column: str
    n_genes: int
    spearman_rho: float
    spearman_pvalue: float
    logfc_pearson_r: float
    direction_agreement: float
    threshold: float
    n_both_significant: int
    n_a_only: int
    n_b_only: int

    @property
    def jaccard_index(self) -> float:
        """Overlap of significant calls, 0 when neither method calls any."""
        union = self.n_both_significant + self.n_a_only + self.n_b_only
        if union == 0:
            return 0.0
        return self.n_both_significant / union

    def to_dict(self) -> dict:
        return {
            "method_a": self.method_a,
            "method_b": self.method_b,
            "column": self.column,
            "n_genes": self.n_genes,
            "spearman_rho": self.spearman_rho,
            "spearman_pvalue": self.spearman_pvalue,
            "logfc_pearson_r": self.logfc_pearson_r,
            "direction_agreement": self.direction_agreement,
            "threshold": self.threshold,
            "n_both_sig": self.n_both_significant,
            "n_a_only": self.n_a_only,
            "n_b_only": self.n_b_only,
            "jaccard": self.jaccard_index,
        }

    def summary(self) -> str:
        lines = [
            f"Concordance: {self.method_a} vs {self.method_b}",
            f"  Genes compared: {self.n_genes}",
            f"  Spearman rho ({self.column}): {self.spearman_rho:.3f} (p={self.spearman_pvalue:.2e})",
            f"  logFC Pearson r: {self.logfc_pearson_r:.3f}",
            f"  Direction agreement: {self.direction_agreement:.1%}",
            f"  Significant (adj p < {self.threshold}): both {self.n_both_significant}, "
            f"{self.method_a} only {self.n_a_only}, {self.method_b} only {self.n_b_only}",
            f"  Jaccard index: {self.jaccard_index:.3f}",
        ]
        return "\n".join(lines)


def pairwise_concordance(
    joined: pd.DataFrame,
    method_a: str,
    method_b: str,
    column: str = "p_value",
    threshold: float = 0.05,
) -> ConcordanceMetrics:
    """
    Compute concordance metrics between two methods of a joined table.

    Raises:
        KeyError: If a method's columns are missing.
        ValueError: If fewer than 3 genes are shared.
    """
    for m in (method_a, method_b):
        for c in (column, "log_fc", "adj_p_value"):
            if f"{c}_{m}" not in joined.columns:
                raise KeyError(f"Column '{c}_{m}' not found in joined table")
    if len(joined) < 3:
        raise ValueError(
            f"At least 3 shared genes are needed for a correlation, got {len(joined)}"
        )

    rho, rho_p = stats.spearmanr(joined[f"{column}_{method_a}"], joined[f"{column}_{method_b}"])
    r, _ = stats.pearsonr(joined[f"log_fc_{method_a}"], joined[f"log_fc_{method_b}"])

    sign_a = np.sign(joined[f"log_fc_{method_a}"].to_numpy())
    sign_b = np.sign(joined[f"log_fc_{method_b}"].to_numpy())
    sig_a = joined[f"adj_p_value_{method_a}"].to_numpy() < threshold
    sig_b = joined[f"adj_p_value_{method_b}"].to_numpy() < threshold

    return ConcordanceMetrics(
        method_a=method_a,
        method_b=method_b,
        column=column,
        n_genes=len(joined),
        spearman_rho=float(rho),
        spearman_pvalue=float(rho_p),
        logfc_pearson_r=float(r),
        direction_agreement=float(np.mean(sign_a == sign_b)),
        threshold=threshold,
        n_both_significant=int(np.sum(sig_a & sig_b)),
        n_a_only=int(np.sum(sig_a & ~sig_b)),
        n_b_only=int(np.sum(~sig_a & sig_b)),
    )


def all_pairwise_concordance(
    joined: pd.DataFrame,
    methods: Optional[Sequence[str]] = None,
    column: str = "p_value",
    threshold: float = 0.05,
) -> List[ConcordanceMetrics]:
    """ConcordanceMetrics for every unordered pair of methods."""
    methods = list(methods) if methods is not None else methods_in(joined, column)
    return [
        pairwise_concordance(joined, a, b, column=column, threshold=threshold)
        for a, b in itertools.combinations(methods, 2)
    ]


def correlation_matrix(
    joined: pd.DataFrame,
    column: str = "p_value",
    method: str = "spearman",
    methods: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """
    Square method × method correlation matrix of one column.

    Args:
        joined: Joined comparison table.
        column: "p_value", "adj_p_value" or "log_fc".
        method: "spearman" or "pearson".
        methods: Subset/order of methods. Default: all in ``joined``.

    Returns:
        Symmetric DataFrame with 1.0 on the diagonal.
    """
    corr_funcs = {"spearman": stats.spearmanr, "pearson": stats.pearsonr}
    if method not in corr_funcs:
        raise ValueError(f"Unknown correlation method {method!r}; use 'spearman' or 'pearson'")
    methods = list(methods) if methods is not None else methods_in(joined, column)

    matrix = pd.DataFrame(np.eye(len(methods)), index=methods, columns=methods)
    for a, b in itertools.combinations(methods, 2):
        value, _ = corr_funcs[method](joined[f"{column}_{a}"], joined[f"{column}_{b}"])
        matrix.loc[a, b] = matrix.loc[b, a] = float(value)
    return matrix


def find_discordant(
    joined: pd.DataFrame,
    high: float = 0.75,
    low: float = 0.25,
    column: str = "adj_p_value",
    methods: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """
    Genes one method calls clearly null while another leans significant.

    A gene is reported for every ordered pair of methods where the first
    method's ``column`` exceeds ``high`` and the second's is below ``low``.

    Returns:
        DataFrame with columns ``gene``, ``high_method``, ``low_method``,
        ``high_value``, ``low_value`` plus every method's ``log_fc``,
        sorted by ``low_value``.
    """
    if low >= high:
        raise ValueError(f"`low` ({low}) must be smaller than `high` ({high})")
    methods = list(methods) if methods is not None else methods_in(joined, column)

    frames = []
    logfc_cols = [f"log_fc_{m}" for m in methods if f"log_fc_{m}" in joined.columns]
    for hi, lo in itertools.permutations(methods, 2):
        mask = (joined[f"{column}_{hi}"] > high) & (joined[f"{column}_{lo}"] < low)
        if not mask.any():
            continue
        sub = joined.loc[mask, ["gene", f"{column}_{hi}", f"{column}_{lo}"] + logfc_cols]
        sub = sub.rename(columns={f"{column}_{hi}": "high_value", f"{column}_{lo}": "low_value"})
        sub.insert(1, "high_method", hi)
        sub.insert(2, "low_method", lo)
        frames.append(sub)

    columns = ["gene", "high_method", "low_method", "high_value", "low_value"] + logfc_cols
    if not frames:
        return pd.DataFrame(columns=columns)
    out = pd.concat(frames, ignore_index=True)[columns]
    return out.sort_values("low_value", kind="stable").reset_index(drop=True)


def gene_profile(se: Any, gene: str, group: Sequence[str], assay: str = "counts") -> pd.DataFrame:
    """
    Raw counts of one gene per sample with group labels, for manual
    inspection of discordant genes.
    """
    row_names = list(se.row_names)
    if gene not in row_names:
        raise KeyError(f"Gene '{gene}' not found")
    counts = np.asarray(se.assays[assay])[row_names.index(gene)]
    return pd.DataFrame({
        "sample": list(se.column_names),
        "group": [str(g) for g in group],
        "count": counts,
    })
