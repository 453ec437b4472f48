"""
Strand Patterns, Strand Identity and Cut Specification
======================================================
Plain data owned by the external pattern library. Nothing here computes
anything beyond simple derived quantities (counts, total area).

Classes:
    StrandSize: Diameter class with nominal diameter and area.
    StrandPattern: Ordered strand coordinates for one layer of a plank.
    StrandId: (layer, 1-based position) identity of a strand.
    CutSpec: Cut width and keeper side for a saw-cut plank.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional, Tuple

from strandanalysis.model.exceptions import InvalidCutSpec


# ------------------------------------------------------------------------------
# Enums
# ------------------------------------------------------------------------------
class StrandSize(StrEnum):
    SIZE_3_8 = "3/8"
    SIZE_1_2 = "1/2"
    SIZE_0_6 = "0.6"

    @property
    def diameter(self) -> float:
        return _STRAND_PROPERTIES[self][0]

    @property
    def area(self) -> float:
        return _STRAND_PROPERTIES[self][1]


# diameter (in), area (in²)
_STRAND_PROPERTIES = {
    StrandSize.SIZE_3_8: (0.375, 0.085),
    StrandSize.SIZE_1_2: (0.5, 0.153),
    StrandSize.SIZE_0_6: (0.6, 0.217),
}


class StrandLayer(StrEnum):
    BOTTOM = "bottom"
    TOP = "top"

    @property
    def prefix(self) -> str:
        return "B" if self is StrandLayer.BOTTOM else "T"


class PatternPosition(StrEnum):
    """Where a library pattern places its strands."""
    TOP = "Top"
    BOTTOM = "Bottom"
    BOTH = "Both"


class StrandEnd(StrEnum):
    E1 = "E1"
    E2 = "E2"


class KeeperSide(StrEnum):
    """Which part of a saw-cut plank is shipped."""
    L1 = "L1"  # left side kept
    L2 = "L2"  # right side kept


# ------------------------------------------------------------------------------
# Data Structures
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class StrandCoordinate:
    x: float  # from the uncut left edge
    y: float  # from the bottom face


@dataclass(frozen=True, order=True)
class StrandId:
    layer: StrandLayer
    position: int  # 1-based, pattern order

    def __post_init__(self):
        object.__setattr__(self, 'layer', StrandLayer(self.layer))
        if self.position < 1:
            raise ValueError(f"Strand position must be 1-based, got {self.position}.")

    @property
    def label(self) -> str:
        return f"{self.layer.prefix}{self.position}"

    def __str__(self) -> str:
        return self.label

    @classmethod
    def parse(cls, label: str) -> StrandId:
        """
        Parse "B3", "T1" or a bare "3" (bottom, as older records stored it).
        """
        match = re.fullmatch(r"\s*([BbTt]?)\s*(\d+)\s*", str(label))
        if not match:
            raise ValueError(f"Not a strand label: {label!r}")
        prefix, number = match.groups()
        layer = StrandLayer.TOP if prefix.upper() == "T" else StrandLayer.BOTTOM
        return cls(layer=layer, position=int(number))


@dataclass(frozen=True)
class StrandPattern:
    """
    One strand pattern from the library.

    `coordinates` and `sizes` are parallel and ordered left to right; the
    1-based index into them is the strand position.
    """
    id: str
    name: str
    strand_3_8: int = 0
    strand_1_2: int = 0
    strand_0_6: int = 0
    coordinates: Tuple[StrandCoordinate, ...] = field(default_factory=tuple)
    sizes: Tuple[StrandSize, ...] = field(default_factory=tuple)
    required_force_lbs: Optional[float] = None

    pattern_id: str = ""
    product_type: str = ""
    position: PatternPosition = PatternPosition.BOTTOM
    pulling_force_pct: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, 'coordinates', tuple(self.coordinates))
        object.__setattr__(self, 'sizes', tuple(StrandSize(s) for s in self.sizes))
        if self.sizes and self.coordinates and len(self.sizes) != len(self.coordinates):
            raise ValueError(
                f"Pattern '{self.id}': {len(self.sizes)} sizes for {len(self.coordinates)} coordinates."
            )

    @property
    def strand_count(self) -> int:
        """Count from the per-size totals (what the library says)."""
        return self.strand_3_8 + self.strand_1_2 + self.strand_0_6

    @property
    def total_area(self) -> float:
        return (
            self.strand_3_8 * StrandSize.SIZE_3_8.area
            + self.strand_1_2 * StrandSize.SIZE_1_2.area
            + self.strand_0_6 * StrandSize.SIZE_0_6.area
        )

    @property
    def e_value(self) -> Optional[float]:
        """Average strand height above the bottom face, None without coordinates."""
        if not self.coordinates:
            return None
        return sum(c.y for c in self.coordinates) / len(self.coordinates)

    def size_at(self, position: int) -> Optional[StrandSize]:
        """Size of the strand at a 1-based position, if recorded."""
        if 1 <= position <= len(self.sizes):
            return self.sizes[position - 1]
        return None

    def strand_ids(self, layer: StrandLayer) -> list[StrandId]:
        return [StrandId(layer, i + 1) for i in range(len(self.coordinates))]


@dataclass(frozen=True)
class CutSpec:
    cut_width: float
    keeper_side: KeeperSide

    def __post_init__(self):
        object.__setattr__(self, 'keeper_side', KeeperSide(self.keeper_side))
        if self.cut_width < 0:
            raise InvalidCutSpec(f"Cut width cannot be negative ({self.cut_width}\").")

    def validate_against(self, full_width: float) -> None:
        """Reject (never clamp) a cut wider than the plank it is taken from."""
        if self.cut_width > full_width:
            raise InvalidCutSpec(
                f"Cut width {self.cut_width}\" exceeds full plank width {full_width}\"."
            )


def make_cut_spec(
    cut_width: Optional[float],
    keeper_side: Optional[str]
) -> Optional[CutSpec]:
    """
    Build a CutSpec from loose form values.
    No width means full-width product; a width without a side is an error.
    """
    if cut_width is None:
        return None
    if not keeper_side:
        raise InvalidCutSpec(f"Cut width {cut_width}\" given without a keeper side.")
    try:
        side = KeeperSide(str(keeper_side).strip().upper())
    except ValueError:
        raise InvalidCutSpec(f"Unknown keeper side '{keeper_side}'.") from None
    try:
        width = float(cut_width)
    except (TypeError, ValueError):
        raise InvalidCutSpec(f"Cut width must be a number, got {cut_width!r}.") from None
    return CutSpec(cut_width=width, keeper_side=side)
