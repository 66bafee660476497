"""
Input validation utilities.

Provides centralized checks for SummarizedExperiment variants, group
vectors and design matrices shared by the edgeR, DESeq2 and limma wrappers.
"""

from __future__ import annotations
from typing import Any, Optional, Sequence
import pandas as pd


def check_se(se: Any, name: str = "se") -> None:
    """Check that input is a SummarizedExperiment-like object.

    Accepts any object with assays and assay_names attributes
    (duck typing for SE, RSE, SCE).
    """
    required_attrs = ["assays", "assay_names"]
    for attr in required_attrs:
        if not hasattr(se, attr):
            raise TypeError(
                f"Expected `{name}` to be a SummarizedExperiment-like object, "
                f"got {type(se).__name__} which lacks '{attr}'"
            )


def check_assay_exists(se: Any, assay: str) -> None:
    """Check that the specified assay exists in the SummarizedExperiment."""
    if assay not in se.assay_names:
        available = list(se.assay_names)
        raise KeyError(
            f"Assay '{assay}' not found. Available assays: {available}"
        )


def n_samples(se: Any) -> int:
    """Number of sample columns in a SummarizedExperiment."""
    return se.shape[1]


def check_group(group: Sequence, n: Optional[int] = None) -> None:
    """Check that a group label vector matches the number of samples."""
    if isinstance(group, (str, bytes)):
        raise TypeError("`group` must be a sequence of labels, not a string")
    if n is not None and len(group) != n:
        raise ValueError(
            f"Group vector has {len(group)} labels but expected {n} samples"
        )


def check_design(design: Any, n_samples: Optional[int] = None) -> None:
    """Check that design is a valid pandas DataFrame."""
    if not isinstance(design, pd.DataFrame):
        raise TypeError(
            f"Expected `design` to be a pandas DataFrame, "
            f"got {type(design).__name__}"
        )
    if n_samples is not None and len(design) != n_samples:
        raise ValueError(
            f"Design matrix has {len(design)} rows but expected {n_samples} samples"
        )
