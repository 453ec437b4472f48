from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if SRC.exists() and str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from strandanalysis.model.patterns import StrandCoordinate, StrandPattern  # noqa: E402
from strandanalysis.model.products import lookup  # noqa: E402

ASSETS = ROOT / "assets"

BOTTOM_XS = (1.375, 10.78125, 19.59375, 28.40625, 37.21875, 46.625)


def make_pattern(pattern_id, xs, y=2.46, sizes=None, **kwargs) -> StrandPattern:
    sizes = sizes or ["1/2"] * len(xs)
    return StrandPattern(
        id=pattern_id,
        name=kwargs.pop("name", pattern_id),
        strand_3_8=sum(1 for s in sizes if s == "3/8"),
        strand_1_2=sum(1 for s in sizes if s == "1/2"),
        strand_0_6=sum(1 for s in sizes if s == "0.6"),
        coordinates=tuple(StrandCoordinate(x, y) for x in xs),
        sizes=tuple(sizes),
        **kwargs,
    )


@pytest.fixture
def geometry_1047():
    return lookup("1047")


@pytest.fixture
def bottom_pattern() -> StrandPattern:
    """Six 1/2" strands; derived plank width 48.625"."""
    return make_pattern("1047-6-050", BOTTOM_XS)


@pytest.fixture
def top_pattern() -> StrandPattern:
    return make_pattern("1047-top-2", (6.125, 41.875), y=9.0, sizes=["3/8", "3/8"])


@pytest.fixture
def assets_dir() -> Path:
    return ASSETS
