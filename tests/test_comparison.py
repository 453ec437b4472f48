"""Tests for design vs. as-cast pattern comparison."""

from __future__ import annotations

from conftest import BOTTOM_XS, make_pattern
from strandanalysis.model.comparison import DifferenceType, compare_patterns, format_comparison
from strandanalysis.model.patterns import StrandLayer, StrandSize


def test_same_pattern_matches(bottom_pattern) -> None:
    comparison = compare_patterns(bottom_pattern, bottom_pattern)

    assert not comparison.has_differences
    assert comparison.summary == "Design and cast patterns match (1047-6-050)"


def test_missing_patterns_are_reported(bottom_pattern) -> None:
    assert compare_patterns(None, None).summary == "No bottom strand pattern specified"
    assert compare_patterns(None, bottom_pattern, StrandLayer.TOP).summary == \
        "No design pattern specified for top strands"
    assert compare_patterns(bottom_pattern, None).summary == "No cast pattern specified for bottom strands"


def test_size_mismatches(bottom_pattern) -> None:
    cast = make_pattern("mixed", BOTTOM_XS, sizes=["3/8", "1/2", "1/2", "1/2", "1/2", "3/8"])
    comparison = compare_patterns(bottom_pattern, cast)

    assert comparison.count(DifferenceType.SIZE_MISMATCH) == 2
    assert [d.position for d in comparison.differences] == [1, 6]
    first = comparison.differences[0]
    assert first.design_size is StrandSize.SIZE_1_2
    assert first.cast_size is StrandSize.SIZE_3_8
    assert first.description == 'Bottom Strand 1 size mismatch: Design=1/2", Cast=3/8"'
    assert comparison.summary == "2 difference(s) found: 2 size mismatch(es)"


def test_missing_and_extra_strands(bottom_pattern) -> None:
    short = make_pattern("short", BOTTOM_XS[:4])
    long = make_pattern("long", BOTTOM_XS + (47.0,))

    missing = compare_patterns(bottom_pattern, short)
    extra = compare_patterns(bottom_pattern, long)

    assert missing.count(DifferenceType.MISSING_IN_CAST) == 2
    assert [d.position for d in missing.differences] == [5, 6]
    assert extra.count(DifferenceType.MISSING_IN_DESIGN) == 1
    assert extra.differences[0].position == 7
    assert extra.summary == "1 difference(s) found: 1 extra strand(s) in cast"


def test_location_mismatch_beyond_tolerance(bottom_pattern) -> None:
    moved = list(BOTTOM_XS)
    moved[2] += 0.75
    moved[3] += 0.25  # inside tolerance
    comparison = compare_patterns(bottom_pattern, make_pattern("moved", moved))

    assert comparison.count(DifferenceType.LOCATION_MISMATCH) == 1
    difference = comparison.differences[0]
    assert difference.position == 3
    assert difference.cast_location.x == BOTTOM_XS[2] + 0.75


def test_different_ids_with_identical_strands() -> None:
    design = make_pattern("a", BOTTOM_XS, name="A")
    cast = make_pattern("b", BOTTOM_XS, name="B")

    comparison = compare_patterns(design, cast)

    assert not comparison.has_differences
    assert comparison.summary == "Different patterns but no strand differences detected (Design: A, Cast: B)"


def test_format_comparison_numbers_differences(bottom_pattern) -> None:
    cast = make_pattern("mixed", BOTTOM_XS, sizes=["3/8", "1/2", "1/2", "1/2", "1/2", "3/8"])
    text = format_comparison(compare_patterns(bottom_pattern, cast))

    lines = text.splitlines()
    assert lines[0].startswith("2 difference(s) found")
    assert lines[2].startswith("1. Bottom Strand 1")
    assert lines[3].startswith("2. Bottom Strand 6")
