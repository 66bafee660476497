"""Tests for group level resolution and design matrices."""

import pytest

from de_benchmark.design import group_levels, make_design


def test_levels_follow_first_appearance():
    assert group_levels(["WT", "WT", "Mut"]) == ["WT", "Mut"]
    assert group_levels(["Mut", "WT"]) == ["Mut", "WT"]


def test_explicit_levels():
    assert group_levels(["Mut", "WT"], levels=["WT", "Mut"]) == ["WT", "Mut"]


def test_levels_must_cover_labels():
    with pytest.raises(ValueError, match="not among levels"):
        group_levels(["WT", "Mut", "Other"], levels=["WT", "Mut"])


@pytest.mark.parametrize("group", [["WT", "WT"], ["A", "B", "C"]])
def test_exactly_two_levels(group):
    with pytest.raises(ValueError, match="two groups"):
        group_levels(group)


def test_make_design():
    design = make_design(["WT", "Mut", "WT"], sample_names=["s1", "s2", "s3"])
    assert list(design.columns) == ["Intercept", "Mut"]
    assert list(design.index) == ["s1", "s2", "s3"]
    assert design["Mut"].tolist() == [0.0, 1.0, 0.0]
    assert design["Intercept"].tolist() == [1.0, 1.0, 1.0]


def test_make_design_length_mismatch():
    with pytest.raises(ValueError):
        make_design(["WT", "Mut"], sample_names=["s1"])
