import matplotlib
matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from de_benchmark.io import counts_to_se
from de_benchmark.r_utils import r_packages_installed


def requires_r(*packages):
    """Skip unless rpy2 loads and the given R packages are installed."""
    return pytest.mark.skipif(
        not r_packages_installed(packages),
        reason=f"R packages {list(packages)} not available",
    )


@pytest.fixture
def mock_counts():
    """Negative-binomial counts, 200 genes × 8 samples, first 20 genes up 4x in Mut."""
    rng = np.random.default_rng(42)
    n_genes, n_per_group = 200, 4
    means = rng.gamma(shape=2.0, scale=100.0, size=n_genes)
    mu = np.repeat(means[:, None], 2 * n_per_group, axis=1)
    mu[:20, n_per_group:] *= 4
    dispersion = 0.1
    counts = rng.negative_binomial(1 / dispersion, 1 / (1 + mu * dispersion))
    counts[190:] = 0  # all-zero genes
    genes = [f"YGENE{i:03d}" for i in range(n_genes)]
    samples = [f"WT_{i + 1}" for i in range(n_per_group)] + [f"Mut_{i + 1}" for i in range(n_per_group)]
    return pd.DataFrame(counts, index=genes, columns=samples)


@pytest.fixture
def mock_group():
    return ["WT"] * 4 + ["Mut"] * 4


@pytest.fixture
def mock_se(mock_counts, mock_group):
    return counts_to_se(mock_counts, mock_group)


def make_table(genes, log_fc, p_value, adj_p_value):
    return pd.DataFrame({
        "gene": list(genes),
        "log_fc": list(log_fc),
        "p_value": list(p_value),
        "adj_p_value": list(adj_p_value),
    })


@pytest.fixture
def skip_r_checks(monkeypatch):
    """Mark the R packages as checked so R-backed modules import without R."""
    from de_benchmark import r_utils
    monkeypatch.setattr(r_utils, "_checked_packages", {"edgeR", "limma", "DESeq2"})
