"""
Loading raw count matrices into SummarizedExperiment objects.

Count files are tab-delimited without a header row: the first column holds
gene identifiers, every further column the raw counts of one sample.

Usage:
    >>> from de_benchmark.io import load_cohorts, drop_zero_rows
    >>> se = load_cohorts({"WT": "WT.tsv", "Mut": "Snf2.tsv"})
    >>> se = drop_zero_rows(se)
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Union
import numpy as np
import pandas as pd

from .checks import check_se, check_assay_exists, check_group

PathLike = Union[str, Path]


def _validate_counts(df: pd.DataFrame, source: str) -> pd.DataFrame:
    if df.empty:
        raise ValueError(f"No counts found in {source}")
    if df.index.has_duplicates:
        dups = df.index[df.index.duplicated()].unique().tolist()[:5]
        raise ValueError(f"Duplicate gene identifiers in {source}: {dups}")
    values = df.to_numpy(dtype=float)
    if np.isnan(values).any():
        raise ValueError(f"Missing values in {source}")
    if (values < 0).any():
        raise ValueError(f"Negative counts in {source}")
    if not np.array_equal(values, np.floor(values)):
        raise ValueError(f"Non-integer counts in {source}")
    return df.astype(np.int64)


def read_counts(path: PathLike, sample_prefix: Optional[str] = None) -> pd.DataFrame:
    """
    Read one headerless, tab-delimited count matrix.

    Args:
        path: File with gene identifiers in the first column.
        sample_prefix: Prefix for generated sample names. Default: file stem.

    Returns:
        Integer DataFrame (genes × samples) with sample columns named
        ``"{prefix}_1"``, ``"{prefix}_2"``, ...

    Raises:
        ValueError: On empty input, duplicate gene identifiers, missing,
            negative or non-integer counts.
    """
    path = Path(path)
    prefix = sample_prefix if sample_prefix is not None else path.stem
    # Gene identifiers are kept verbatim ("0001", "NA", ...)
    df = pd.read_csv(path, sep="\t", header=None, index_col=0, dtype={0: str}, keep_default_na=False, na_values=[""])
    df.index.name = None
    df.columns = [f"{prefix}_{i + 1}" for i in range(df.shape[1])]
    return _validate_counts(df, str(path))


def counts_to_se(counts: pd.DataFrame, group: Sequence[str]) -> Any:
    """
    Wrap a genes × samples count table and its group labels.

    Args:
        counts: Integer counts with gene identifiers as index and sample
            names as columns.
        group: One label per column, positionally aligned.

    Returns:
        SummarizedExperiment with a ``"counts"`` assay and ``"group"`` in
        ``column_data``.
    """
    from biocframe import BiocFrame
    from summarizedexperiment import SummarizedExperiment

    check_group(group, counts.shape[1])
    column_names = [str(c) for c in counts.columns]
    column_data = BiocFrame(
        {"group": np.asarray([str(g) for g in group], dtype=object)},
        row_names=column_names,
    )
    return SummarizedExperiment(
        assays={"counts": counts.to_numpy()},
        row_names=[str(g) for g in counts.index],
        column_names=column_names,
        column_data=column_data,
    )


def load_cohorts(paths: Mapping[str, PathLike]) -> Any:
    """
    Read one count file per group and concatenate them column-wise.

    Gene identifiers must agree as sets across files; later files are
    reordered to the row order of the first.

    Args:
        paths: Mapping of group label to count file, in level order,
            e.g. ``{"WT": "WT.tsv", "Mut": "Snf2.tsv"}``.

    Returns:
        SummarizedExperiment whose ``group`` labels repeat each label for
        the columns of its file.

    Raises:
        ValueError: If no files are given or gene identifiers differ.
    """
    if not paths:
        raise ValueError("At least one count file is required")

    frames: List[pd.DataFrame] = []
    group: List[str] = []
    for label, path in paths.items():
        df = read_counts(path, sample_prefix=str(label))
        if frames:
            reference = frames[0].index
            if set(df.index) != set(reference):
                only_here = sorted(set(df.index) - set(reference))[:5]
                only_there = sorted(set(reference) - set(df.index))[:5]
                raise ValueError(
                    f"Gene identifiers of {path} differ from the first file "
                    f"(extra: {only_here}, missing: {only_there})"
                )
            df = df.loc[reference]
        frames.append(df)
        group.extend([str(label)] * df.shape[1])

    counts = pd.concat(frames, axis=1)
    return counts_to_se(counts, group)


def drop_zero_rows(se: Any, assay: str = "counts") -> Any:
    """Remove genes with zero counts in every sample."""
    check_se(se)
    check_assay_exists(se, assay)
    counts = np.asarray(se.assays[assay])
    keep = np.flatnonzero(counts.sum(axis=1) > 0)
    return se[keep.tolist(), :]


def get_group(se: Any, column: str = "group") -> List[str]:
    """Return the group labels stored in ``column_data``."""
    coldata = se.get_column_data()
    if coldata is None or column not in coldata.column_names:
        raise KeyError(f"Column '{column}' not found in column_data.")
    return [str(g) for g in coldata[column]]
