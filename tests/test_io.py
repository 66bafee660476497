"""Tests for loading count files into SummarizedExperiment objects."""

import numpy as np
import pandas as pd
import pytest

from de_benchmark.io import read_counts, counts_to_se, load_cohorts, drop_zero_rows, get_group


def _write_counts(path, genes, matrix):
    lines = ["\t".join([g] + [str(v) for v in row]) for g, row in zip(genes, matrix)]
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def cohort_files(tmp_path):
    genes = ["YAL001C", "YAL002W", "YAL003W", "YAL004W"]
    wt = _write_counts(tmp_path / "WT.tsv", genes, [[5, 7, 6], [0, 0, 0], [100, 90, 110], [1, 0, 2]])
    # Same genes, different order
    mut = _write_counts(
        tmp_path / "Snf2.tsv",
        [genes[2], genes[0], genes[3], genes[1]],
        [[300, 280], [4, 8], [0, 1], [0, 0]],
    )
    return wt, mut


class TestReadCounts:

    def test_sample_names_from_prefix(self, cohort_files):
        df = read_counts(cohort_files[0], sample_prefix="WT")
        assert list(df.columns) == ["WT_1", "WT_2", "WT_3"]
        assert list(df.index) == ["YAL001C", "YAL002W", "YAL003W", "YAL004W"]
        assert df.loc["YAL003W", "WT_2"] == 90

    def test_prefix_defaults_to_file_stem(self, cohort_files):
        df = read_counts(cohort_files[1])
        assert list(df.columns) == ["Snf2_1", "Snf2_2"]

    def test_negative_counts_rejected(self, tmp_path):
        path = _write_counts(tmp_path / "bad.tsv", ["g1", "g2"], [[1, -1], [2, 3]])
        with pytest.raises(ValueError, match="Negative"):
            read_counts(path)

    def test_fractional_counts_rejected(self, tmp_path):
        path = _write_counts(tmp_path / "bad.tsv", ["g1", "g2"], [[1, 2.5], [2, 3]])
        with pytest.raises(ValueError, match="Non-integer"):
            read_counts(path)

    def test_gene_identifiers_kept_verbatim(self, tmp_path):
        genes = ["0001", "0002", "NA", "N/A", "nan", "1e5"]
        path = _write_counts(tmp_path / "ids.tsv", genes, [[i, i + 1] for i in range(len(genes))])
        df = read_counts(path)
        assert list(df.index) == genes
        assert df.loc["NA"].tolist() == [2, 3]

    def test_empty_count_field_rejected(self, tmp_path):
        path = tmp_path / "gap.tsv"
        path.write_text("g1\t1\t2\ng2\t\t3\n")
        with pytest.raises(ValueError, match="Missing values"):
            read_counts(path)

    def test_duplicate_genes_rejected(self, tmp_path):
        path = _write_counts(tmp_path / "dup.tsv", ["g1", "g1"], [[1, 2], [2, 3]])
        with pytest.raises(ValueError, match="Duplicate"):
            read_counts(path)


class TestLoadCohorts:

    def test_concatenates_and_aligns_genes(self, cohort_files):
        wt, mut = cohort_files
        se = load_cohorts({"WT": wt, "Mut": mut})
        assert se.shape == (4, 5)
        assert list(se.column_names) == ["WT_1", "WT_2", "WT_3", "Mut_1", "Mut_2"]
        assert get_group(se) == ["WT", "WT", "WT", "Mut", "Mut"]
        counts = np.asarray(se.assays["counts"])
        # YAL003W row reordered from the Mut file
        assert list(counts[2]) == [100, 90, 110, 300, 280]

    def test_mismatched_genes_rejected(self, cohort_files, tmp_path):
        other = _write_counts(tmp_path / "other.tsv", ["X1", "X2"], [[1, 2], [3, 4]])
        with pytest.raises(ValueError, match="differ"):
            load_cohorts({"WT": cohort_files[0], "Mut": other})

    def test_requires_a_file(self):
        with pytest.raises(ValueError):
            load_cohorts({})


class TestFiltering:

    def test_drop_zero_rows(self, cohort_files):
        se = load_cohorts({"WT": cohort_files[0], "Mut": cohort_files[1]})
        filtered = drop_zero_rows(se)
        assert filtered.shape == (3, 5)
        assert "YAL002W" not in list(filtered.row_names)
        # YAL004W has a single nonzero count and is kept
        assert "YAL004W" in list(filtered.row_names)

    def test_drop_zero_rows_mock(self, mock_se, mock_counts):
        filtered = drop_zero_rows(mock_se)
        n_nonzero = int((mock_counts.sum(axis=1) > 0).sum())
        assert filtered.shape == (n_nonzero, 8)
        assert all(not g.startswith("YGENE19") for g in filtered.row_names)

    def test_group_length_mismatch(self, mock_counts):
        with pytest.raises(ValueError, match="labels"):
            counts_to_se(mock_counts, ["WT", "Mut"])

    def test_missing_group_column(self, mock_se):
        with pytest.raises(KeyError):
            get_group(mock_se, column="condition")
