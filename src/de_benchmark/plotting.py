"""Plots for differential expression results and cross-method comparisons."""

from typing import Optional, Sequence

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns


def _neg_log10(values: pd.Series) -> pd.Series:
    """-log10 with zeros clipped to the smallest positive value present."""
    values = values.astype(float)
    positive = values[values > 0]
    floor = positive.min() if len(positive) else np.finfo(float).tiny
    return -np.log10(values.clip(lower=floor))


def volcano_plot(
    results: pd.DataFrame,
    logfc_col: str = "log_fc",
    fdr_col: str = "adj_p_value",
    fdr_threshold: float = 0.05,
    logfc_threshold: float = 1.0,
    figsize: tuple = (10, 8),
    title: str = "Volcano Plot",
    xlabel: str = "log₂(Fold Change)",
    ylabel: str = "-log₁₀(Adjusted p-value)",
    save_path: str = None,
    ax: Optional[plt.Axes] = None,
    **kwargs
) -> plt.Figure:
    """
    Scatter effect size against significance for one result table.

    Args:
        results: DataFrame with differential expression results
        logfc_col: Column name for log fold change (default: "log_fc")
        fdr_col: Column name for adjusted p-value (default: "adj_p_value")
        fdr_threshold: FDR significance threshold (default: 0.05)
        logfc_threshold: Log fold change threshold for highlighting (default: 1.0)
        figsize: Figure size tuple (default: (10, 8))
        title: Plot title
        xlabel: X-axis label
        ylabel: Y-axis label
        save_path: Path to save figure (optional)
        ax: Existing axes to draw into (optional)
        **kwargs: Additional arguments for customization
            - point_size: Size of points (default: 12)
            - sig_color: Color for significant points (default: '#e74c3c' - red)
            - nonsig_color: Color for non-significant points (default: '#95a5a6' - gray)
            - text_color: Color for axis text (default: '#2c3e50' - dark)
            - alpha: Transparency (default: 0.7)
            - dpi: DPI for saved figure (default: 300)

    Returns:
        matplotlib.figure.Figure: The figure object

    Examples:
        >>> fig = volcano_plot(result.table, title="Mut vs WT (edgeR)")
    """
    point_size = kwargs.get('point_size', 12)
    sig_color = kwargs.get('sig_color', '#e74c3c')
    nonsig_color = kwargs.get('nonsig_color', '#95a5a6')
    text_color = kwargs.get('text_color', '#2c3e50')
    alpha = kwargs.get('alpha', 0.7)
    dpi = kwargs.get('dpi', 300)

    df = results[[logfc_col, fdr_col]].dropna().copy()
    df['neg_log10_fdr'] = _neg_log10(df[fdr_col])

    sig_mask = (df[fdr_col] < fdr_threshold) & (np.abs(df[logfc_col]) > logfc_threshold)

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize, dpi=100)
    else:
        fig = ax.figure

    # Non-significant points first so they sit behind
    non_sig = df[~sig_mask]
    ax.scatter(
        non_sig[logfc_col],
        non_sig['neg_log10_fdr'],
        s=point_size,
        color=nonsig_color,
        alpha=alpha * 0.5,
        edgecolors='none',
        label='Not significant',
        zorder=1
    )

    sig = df[sig_mask]
    ax.scatter(
        sig[logfc_col],
        sig['neg_log10_fdr'],
        s=point_size * 1.3,
        color=sig_color,
        alpha=alpha,
        edgecolors='none',
        label=f'FDR < {fdr_threshold}, |logFC| > {logfc_threshold}',
        zorder=2
    )

    ax.axvline(-logfc_threshold, color='#34495e', linestyle='--', linewidth=1.5, alpha=0.6, zorder=0)
    ax.axvline(logfc_threshold, color='#34495e', linestyle='--', linewidth=1.5, alpha=0.6, zorder=0)
    ax.axhline(-np.log10(fdr_threshold), color='#34495e', linestyle='--', linewidth=1.5, alpha=0.6, zorder=0)

    ax.set_xlabel(xlabel, fontsize=13, fontweight='bold', color=text_color)
    ax.set_ylabel(ylabel, fontsize=13, fontweight='bold', color=text_color)
    ax.set_title(title, fontsize=15, fontweight='bold', color=text_color, pad=20)
    ax.grid(True, alpha=0.2, linestyle=':', linewidth=0.8)
    ax.set_axisbelow(True)
    ax.legend(loc='upper right', frameon=True, fontsize=10, framealpha=0.95)

    n_sig = int(sig_mask.sum())
    stats_text = f'Significant: {n_sig}/{len(df)}\n'
    stats_text += f'Up-regulated: {int((sig_mask & (df[logfc_col] > 0)).sum())}\n'
    stats_text += f'Down-regulated: {int((sig_mask & (df[logfc_col] < 0)).sum())}'
    ax.text(
        0.02, 0.98,
        stats_text,
        transform=ax.transAxes,
        fontsize=10,
        verticalalignment='top',
        bbox=dict(boxstyle='round', facecolor='white', alpha=0.85, edgecolor=text_color),
        family='monospace',
        color=text_color
    )

    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=dpi, bbox_inches='tight', facecolor='white')
        print(f"Figure saved to: {save_path}")

    return fig


def pairwise_pvalue_plot(
    joined: pd.DataFrame,
    methods: Sequence[str],
    column: str = "p_value",
    log: bool = True,
    height: float = 2.5,
) -> plt.Figure:
    """
    Pair grid of one result column across methods.

    Args:
        joined: Joined comparison table (see ``compare.join_results``).
        methods: Methods whose ``{column}_{method}`` columns are plotted.
        column: Base column name, e.g. "p_value" or "adj_p_value".
        log: Plot -log10 of the values. Default: True.
        height: Height of each facet in inches.

    Returns:
        matplotlib.figure.Figure
    """
    data = pd.DataFrame({
        m: _neg_log10(joined[f"{column}_{m}"]) if log else joined[f"{column}_{m}"]
        for m in methods
    })
    grid = sns.PairGrid(data, corner=True, height=height)
    grid.map_lower(sns.scatterplot, s=6, alpha=0.4, edgecolor="none")
    grid.map_diag(sns.histplot, bins=40)
    label = f"-log10 {column}" if log else column
    grid.figure.suptitle(f"Pairwise {label}", y=1.02)
    return grid.figure


def concordance_heatmap(matrix: pd.DataFrame, title: str = "Method concordance") -> plt.Figure:
    """Annotated heatmap of a square method × method correlation matrix."""
    fig, ax = plt.subplots(figsize=(1.5 * len(matrix) + 2, 1.2 * len(matrix) + 1.5))
    sns.heatmap(matrix, annot=True, fmt=".2f", cmap="RdYlGn", vmin=-1, vmax=1, square=True, ax=ax)
    ax.set_title(title)
    fig.tight_layout()
    return fig
