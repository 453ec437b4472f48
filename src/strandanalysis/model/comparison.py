"""Design vs. as-cast strand pattern comparison."""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional, Tuple

from strandanalysis.config import LOCATION_TOLERANCE_IN
from strandanalysis.model.patterns import StrandCoordinate, StrandLayer, StrandPattern, StrandSize


class DifferenceType(StrEnum):
    MISSING_IN_CAST = "missing_in_cast"
    MISSING_IN_DESIGN = "missing_in_design"
    SIZE_MISMATCH = "size_mismatch"
    LOCATION_MISMATCH = "location_mismatch"


@dataclass(frozen=True)
class StrandDifference:
    position: int  # 1-based
    layer: StrandLayer
    issue: DifferenceType
    description: str
    design_size: Optional[StrandSize] = None
    cast_size: Optional[StrandSize] = None
    design_location: Optional[StrandCoordinate] = None
    cast_location: Optional[StrandCoordinate] = None


@dataclass(frozen=True)
class PatternComparison:
    layer: StrandLayer
    design_name: Optional[str]
    cast_name: Optional[str]
    differences: Tuple[StrandDifference, ...]
    summary: str

    @property
    def has_differences(self) -> bool:
        return bool(self.differences)

    def count(self, issue: DifferenceType) -> int:
        return sum(1 for d in self.differences if d.issue is issue)


def _at(items: tuple, i: int):
    return items[i] if i < len(items) else None


def compare_patterns(
    design: Optional[StrandPattern],
    cast: Optional[StrandPattern],
    layer: StrandLayer = StrandLayer.BOTTOM,
    tolerance: float = LOCATION_TOLERANCE_IN,
) -> PatternComparison:
    """
    Strand-by-strand comparison of the design pattern against what was cast.

    Strands are matched by position. A location differs when either
    coordinate is off by more than `tolerance` inches.
    """
    name = layer.value
    label = layer.value.capitalize()

    def result(differences: Tuple[StrandDifference, ...], summary: str) -> PatternComparison:
        return PatternComparison(
            layer=layer,
            design_name=design.name if design else None,
            cast_name=cast.name if cast else None,
            differences=differences,
            summary=summary,
        )

    if design is None and cast is None:
        return result((), f"No {name} strand pattern specified")
    if design is None:
        return result((), f"No design pattern specified for {name} strands")
    if cast is None:
        return result((), f"No cast pattern specified for {name} strands")
    if design.id == cast.id:
        return result((), f"Design and cast patterns match ({design.name})")

    differences = []
    for i in range(max(len(design.sizes), len(cast.sizes))):
        position = i + 1
        design_size = _at(design.sizes, i)
        cast_size = _at(cast.sizes, i)

        if design_size and not cast_size:
            differences.append(StrandDifference(
                position, layer, DifferenceType.MISSING_IN_CAST,
                f'{label} Strand {position} ({design_size}") exists in design but missing in cast pattern',
                design_size=design_size,
            ))
            continue
        if cast_size and not design_size:
            differences.append(StrandDifference(
                position, layer, DifferenceType.MISSING_IN_DESIGN,
                f'{label} Strand {position} ({cast_size}") exists in cast but missing in design pattern',
                cast_size=cast_size,
            ))
            continue

        if design_size != cast_size:
            differences.append(StrandDifference(
                position, layer, DifferenceType.SIZE_MISMATCH,
                f'{label} Strand {position} size mismatch: Design={design_size}", Cast={cast_size}"',
                design_size=design_size, cast_size=cast_size,
            ))

        design_xy = _at(design.coordinates, i)
        cast_xy = _at(cast.coordinates, i)
        if design_xy and cast_xy and (
            abs(design_xy.x - cast_xy.x) > tolerance or abs(design_xy.y - cast_xy.y) > tolerance
        ):
            differences.append(StrandDifference(
                position, layer, DifferenceType.LOCATION_MISMATCH,
                f'{label} Strand {position} location mismatch: '
                f'Design=({design_xy.x}", {design_xy.y}"), Cast=({cast_xy.x}", {cast_xy.y}")',
                design_location=design_xy, cast_location=cast_xy,
            ))

    if not differences:
        return result((), f"Different patterns but no strand differences detected "
                          f"(Design: {design.name}, Cast: {cast.name})")

    counts = [
        (DifferenceType.MISSING_IN_CAST, "strand(s) missing in cast"),
        (DifferenceType.MISSING_IN_DESIGN, "extra strand(s) in cast"),
        (DifferenceType.SIZE_MISMATCH, "size mismatch(es)"),
        (DifferenceType.LOCATION_MISMATCH, "location mismatch(es)"),
    ]
    parts = []
    for issue, text in counts:
        n = sum(1 for d in differences if d.issue is issue)
        if n:
            parts.append(f"{n} {text}")

    return result(tuple(differences), f"{len(differences)} difference(s) found: {', '.join(parts)}")


def format_comparison(comparison: PatternComparison) -> str:
    if not comparison.has_differences:
        return comparison.summary
    lines = [comparison.summary, ""]
    lines.extend(f"{i}. {d.description}" for i, d in enumerate(comparison.differences, start=1))
    return "\n".join(lines)
