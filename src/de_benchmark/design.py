"""Group labels and two-group design matrices."""

from __future__ import annotations
from typing import List, Optional, Sequence
import pandas as pd


def group_levels(group: Sequence[str], levels: Optional[Sequence[str]] = None) -> List[str]:
    """
    Resolve the ordered levels of a two-group label vector.

    The first level is the reference: effect sizes are reported as
    log2(second / first).

    Args:
        group: One label per sample.
        levels: Explicit level order. Default: order of first appearance.

    Returns:
        List with exactly two level names.

    Raises:
        ValueError: If there are not exactly two levels, or if ``levels``
            misses a label present in ``group``.

    Example:
        >>> group_levels(["WT", "WT", "Mut", "Mut"])
        ['WT', 'Mut']
    """
    labels = [str(g) for g in group]
    if levels is None:
        resolved = list(pd.unique(pd.Series(labels, dtype=object)))
    else:
        resolved = [str(lv) for lv in levels]
        missing = sorted(set(labels) - set(resolved))
        if missing:
            raise ValueError(f"Labels {missing} are not among levels {resolved}")
    if len(resolved) != 2:
        raise ValueError(
            f"Exactly two groups are required for a pairwise comparison, got {resolved}"
        )
    return resolved


def make_design(
    group: Sequence[str],
    levels: Optional[Sequence[str]] = None,
    sample_names: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """
    Build the ``~ group`` design matrix for a two-group comparison.

    Returns:
        DataFrame with columns ``Intercept`` and the second level's name
        (1.0 for samples of that level), indexed by sample names.

    Example:
        >>> make_design(["WT", "Mut"], sample_names=["s1", "s2"])
            Intercept  Mut
        s1        1.0  0.0
        s2        1.0  1.0
    """
    lv = group_levels(group, levels)
    labels = [str(g) for g in group]
    index = list(sample_names) if sample_names is not None else list(range(len(labels)))
    if len(index) != len(labels):
        raise ValueError("`sample_names` and `group` must have the same length")
    return pd.DataFrame(
        {
            "Intercept": [1.0] * len(labels),
            lv[1]: [1.0 if g == lv[1] else 0.0 for g in labels],
        },
        index=index,
    )
