"""
End-to-end method comparison and its rendered report.

Usage:
    >>> from de_benchmark import load_cohorts, drop_zero_rows, get_group
    >>> from de_benchmark.report import compare_methods
    >>> se = drop_zero_rows(load_cohorts({"WT": "WT.tsv", "Mut": "Snf2.tsv"}))
    >>> report = compare_methods(se, get_group(se))
    >>> report.save("comparison")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd

from .compare import (
    ConcordanceMetrics,
    all_pairwise_concordance,
    correlation_matrix,
    find_discordant,
    join_results,
)
from .dispatch import DEResult, run_de


@dataclass
class ComparisonConfig:
    """Settings of a method comparison run."""
    methods: Sequence[str] = ("edger", "deseq2", "limma")
    levels: Optional[Sequence[str]] = None
    discordance_high: float = 0.75
    discordance_low: float = 0.25
    fdr_threshold: float = 0.05
    logfc_threshold: float = 1.0
    correlation_method: str = "spearman"
    plot: bool = True
    method_kwargs: Dict[str, Dict[str, Any]] = field(default_factory=dict)


@dataclass
class ComparisonReport:
    """Everything produced by compare_methods()."""
    config: ComparisonConfig
    results: Dict[str, DEResult]
    joined: pd.DataFrame
    concordance: List[ConcordanceMetrics]
    correlations: Dict[str, pd.DataFrame]
    discordant: pd.DataFrame
    figures: Dict[str, Any] = field(default_factory=dict)

    def summary_table(self) -> pd.DataFrame:
        """Tested and significant gene counts per method."""
        rows = []
        for name, res in self.results.items():
            rows.append({
                "method": name,
                "n_tested": res.n_tested,
                "n_significant": len(res.significant(self.config.fdr_threshold)),
            })
        rows.append({"method": "shared", "n_tested": len(self.joined), "n_significant": None})
        return pd.DataFrame(rows)

    def concordance_table(self) -> pd.DataFrame:
        return pd.DataFrame([c.to_dict() for c in self.concordance])

    def to_markdown(self, figure_files: Optional[Dict[str, str]] = None) -> str:
        """Render the report as markdown, linking figure files when given."""
        cfg = self.config
        parts = [
            "# Differential expression method comparison",
            "",
            f"Methods: {', '.join(self.results)}",
            "",
            "## Genes tested",
            "",
            "```",
            self.summary_table().to_string(index=False),
            "```",
            "",
            "## Concordance",
            "",
            "```",
            self.concordance_table().to_string(index=False, float_format=lambda x: f"{x:.4g}"),
            "```",
        ]
        for column, matrix in self.correlations.items():
            parts += [
                "",
                f"### {cfg.correlation_method.title()} correlation of {column}",
                "",
                "```",
                matrix.to_string(float_format=lambda x: f"{x:.3f}"),
                "```",
            ]
        parts += [
            "",
            f"## Discordant genes (adj. p > {cfg.discordance_high} vs < {cfg.discordance_low})",
            "",
        ]
        if self.discordant.empty:
            parts.append("None.")
        else:
            parts += ["```", self.discordant.to_string(index=False, float_format=lambda x: f"{x:.4g}"), "```"]
        if figure_files:
            parts += ["", "## Figures", ""]
            parts += [f"![{name}]({fname})" for name, fname in figure_files.items()]
        return "\n".join(parts) + "\n"

    def save(self, outdir: Union[str, Path], dpi: int = 150) -> Path:
        """
        Write figures as PNG and the markdown report to ``outdir``.

        Returns:
            Path of the written ``report.md``.
        """
        outdir = Path(outdir)
        outdir.mkdir(parents=True, exist_ok=True)
        figure_files = {}
        for name, fig in self.figures.items():
            fname = f"{name}.png"
            fig.savefig(outdir / fname, dpi=dpi, bbox_inches="tight", facecolor="white")
            figure_files[name] = fname
        path = outdir / "report.md"
        path.write_text(self.to_markdown(figure_files))
        print(f"Report saved to: {path}")
        return path


def compare_methods(
    se: Any,
    group: Sequence[str],
    config: Optional[ComparisonConfig] = None,
) -> ComparisonReport:
    """
    Run every configured method and compare their results.

    Library errors from any method propagate unchanged.

    Args:
        se: SummarizedExperiment with a ``"counts"`` assay.
        group: Two-group label vector aligned with the samples.
        config: Comparison settings. Default: ComparisonConfig().

    Returns:
        ComparisonReport
    """
    import matplotlib.pyplot as plt
    from .plotting import concordance_heatmap, pairwise_pvalue_plot

    config = config if config is not None else ComparisonConfig()

    results: Dict[str, DEResult] = {}
    for method in config.methods:
        results[method] = run_de(
            se,
            group,
            method,
            levels=config.levels,
            plot=config.plot,
            fdr_threshold=config.fdr_threshold,
            logfc_threshold=config.logfc_threshold,
            **config.method_kwargs.get(method, {}),
        )

    joined = join_results(results)
    methods = list(results)
    concordance = all_pairwise_concordance(joined, methods, threshold=config.fdr_threshold)
    correlations = {
        column: correlation_matrix(joined, column=column, method=config.correlation_method, methods=methods)
        for column in ("p_value", "adj_p_value", "log_fc")
    }
    discordant = find_discordant(
        joined,
        high=config.discordance_high,
        low=config.discordance_low,
        methods=methods,
    )

    figures: Dict[str, Any] = {}
    if config.plot:
        for method, res in results.items():
            figures[f"volcano_{method}"] = res.figure
        figures["pairs_p_value"] = pairwise_pvalue_plot(joined, methods, column="p_value")
        figures["pairs_adj_p_value"] = pairwise_pvalue_plot(joined, methods, column="adj_p_value")
        figures["concordance_p_value"] = concordance_heatmap(
            correlations["p_value"], title=f"{config.correlation_method.title()} correlation of p-values"
        )
        for fig in figures.values():
            plt.close(fig)

    return ComparisonReport(
        config=config,
        results=results,
        joined=joined,
        concordance=concordance,
        correlations=correlations,
        discordant=discordant,
        figures=figures,
    )
