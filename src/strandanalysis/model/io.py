"""
Input/Output Boundary (JSON)
Reads strand pattern libraries and analysis jobs, and flattens reports into
JSON-ready dictionaries for exporters.

The record shapes follow the external pattern library and slippage form
(camelCase keys, strand sizes as '3/8' / '1/2' / '0.6').
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from strandanalysis.model.exceptions import RecordFormatError, StrandAnalysisError, UnknownPattern
from strandanalysis.model.measurements import format_measurement
from strandanalysis.model.patterns import (
    CutSpec, PatternPosition, StrandCoordinate, StrandPattern, make_cut_spec,
)
from strandanalysis.model.report import SlippageReport
from strandanalysis.model.slippage import ExceedsThreshold, ScopeStats, SlippageReading, readings_from_rows

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
# Patterns
# ------------------------------------------------------------------------------
def pattern_from_dict(data: Mapping[str, Any]) -> StrandPattern:
    """Build a StrandPattern from one library record."""
    try:
        coordinates = tuple(
            StrandCoordinate(x=float(c["x"]), y=float(c["y"]))
            for c in data.get("strandCoordinates") or []
        )
        return StrandPattern(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            strand_3_8=int(data.get("strand_3_8", 0)),
            strand_1_2=int(data.get("strand_1_2", 0)),
            strand_0_6=int(data.get("strand_0_6", 0)),
            coordinates=coordinates,
            sizes=tuple(data.get("strandSizes") or ()),
            required_force_lbs=data.get("requiredForce"),
            pattern_id=str(data.get("patternId", "")),
            product_type=str(data.get("productType", "")),
            position=PatternPosition(data.get("position", PatternPosition.BOTTOM.value)),
            pulling_force_pct=data.get("pullingForce"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise RecordFormatError(f"Invalid strand pattern record {data.get('id', '?')!r}: {e}") from e


def pattern_to_dict(pattern: StrandPattern) -> Dict[str, Any]:
    return {
        "id": pattern.id,
        "patternId": pattern.pattern_id,
        "name": pattern.name,
        "productType": pattern.product_type,
        "position": pattern.position.value,
        "strand_3_8": pattern.strand_3_8,
        "strand_1_2": pattern.strand_1_2,
        "strand_0_6": pattern.strand_0_6,
        "strandSizes": [s.value for s in pattern.sizes],
        "strandCoordinates": [{"x": c.x, "y": c.y} for c in pattern.coordinates],
        "requiredForce": pattern.required_force_lbs,
        "pullingForce": pattern.pulling_force_pct,
        "totalArea": round(pattern.total_area, 4),
    }


class PatternRepository:
    """
    Read-only library of strand patterns, passed explicitly to the analysis.
    """
    def __init__(self, patterns: Iterable[StrandPattern] = ()) -> None:
        self._patterns: Dict[str, StrandPattern] = {}
        for pattern in patterns:
            if pattern.id in self._patterns:
                logger.warning(f"Duplicate pattern id '{pattern.id}', keeping the last one.")
            self._patterns[pattern.id] = pattern

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> PatternRepository:
        return cls(pattern_from_dict(r) for r in records)

    @classmethod
    def from_json_file(cls, filepath: str) -> PatternRepository:
        logger.info(f"Loading strand patterns from: {filepath}")
        try:
            with open(filepath, mode='r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read pattern library: {e}")
            raise

        records = data.get("patterns", []) if isinstance(data, dict) else data
        repo = cls.from_records(records)
        logger.info(f"Loaded {len(repo)} strand patterns.")
        return repo

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, pattern_id: object) -> bool:
        return pattern_id in self._patterns

    def get(self, pattern_id: str) -> StrandPattern:
        try:
            return self._patterns[pattern_id]
        except KeyError:
            raise UnknownPattern(pattern_id) from None

    def find_by_pattern_id(self, pattern_id: str) -> Optional[StrandPattern]:
        """Look up by the library's display number (e.g. '101-75')."""
        return next((p for p in self._patterns.values() if p.pattern_id == pattern_id), None)

    def by_position(self, position: PatternPosition) -> List[StrandPattern]:
        return [p for p in self._patterns.values() if p.position is position]

    def for_product(self, product_type: str) -> List[StrandPattern]:
        return [p for p in self._patterns.values() if p.product_type == product_type]

    def names(self) -> List[str]:
        return [p.name for p in self._patterns.values()]

    def merged(self, other: PatternRepository) -> PatternRepository:
        """New repository with `other`'s patterns overriding ours."""
        return PatternRepository([*self._patterns.values(), *other._patterns.values()])


# ------------------------------------------------------------------------------
# Jobs
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class AnalysisJob:
    """One slippage analysis as captured on the form."""
    product_type: str
    strand_pattern: str
    readings: tuple[SlippageReading, ...] = ()
    cut_spec: Optional[CutSpec] = None
    top_strand_pattern: Optional[str] = None
    cast_strand_pattern: Optional[str] = None
    cast_top_strand_pattern: Optional[str] = None
    project_name: str = ""
    mark_number: str = ""
    inline_patterns: tuple[StrandPattern, ...] = field(default_factory=tuple)


def job_from_dict(data: Mapping[str, Any]) -> AnalysisJob:
    try:
        return AnalysisJob(
            product_type=str(data["productType"]),
            strand_pattern=str(data["strandPattern"]),
            readings=tuple(readings_from_rows(data.get("slippages", []))),
            cut_spec=make_cut_spec(data.get("productWidth"), data.get("productSide")),
            top_strand_pattern=data.get("topStrandPattern"),
            cast_strand_pattern=data.get("castStrandPattern"),
            cast_top_strand_pattern=data.get("castTopStrandPattern"),
            project_name=str(data.get("projectName", "")),
            mark_number=str(data.get("markNumber", "")),
            inline_patterns=tuple(pattern_from_dict(p) for p in data.get("patterns", [])),
        )
    except StrandAnalysisError:
        raise
    except KeyError as e:
        raise RecordFormatError(f"Analysis job is missing {e}") from e
    except (TypeError, ValueError, AttributeError) as e:
        raise RecordFormatError(f"Malformed analysis job: {e}") from e


def load_job(filepath: str) -> AnalysisJob:
    logger.info(f"Loading analysis job from: {filepath}")
    with open(filepath, mode='r', encoding='utf-8') as f:
        return job_from_dict(json.load(f))


# ------------------------------------------------------------------------------
# Reports
# ------------------------------------------------------------------------------
def _scope_to_dict(scope: ScopeStats) -> Dict[str, Any]:
    total = format_measurement(scope.total, scope.exceeds)
    average = format_measurement(scope.average, scope.exceeds)
    return {
        "total": scope.total,
        "average": scope.average,
        "count": scope.count,
        "exceeds": scope.exceeds,
        "totalDisplay": total.value_text,
        "totalFraction": total.fraction_text,
        "averageDisplay": average.value_text,
        "averageFraction": average.fraction_text,
    }


def report_to_dict(report: SlippageReport) -> Dict[str, Any]:
    """Flatten a report into plain JSON types."""
    cross_section = report.cross_section
    cut = report.cut_spec
    stats = report.statistics

    strands = []
    for strand_id, entry in report.strands.items():
        ends = {}
        if entry.stats is not None:
            for end, value in entry.stats.ends.items():
                ends[end.value] = {
                    "value": value.effective,
                    "exceeds": isinstance(value, ExceedsThreshold),
                }
        strands.append({
            "id": strand_id.label,
            "layer": strand_id.layer.value,
            "position": strand_id.position,
            "size": entry.size.value if entry.size else None,
            "x": entry.plank_position.x,
            "y": entry.plank_position.y,
            "displayX": entry.display_position.x,
            "visible": entry.visible,
            "active": entry.active,
            "ends": ends,
            "stats": _scope_to_dict(entry.stats.stats) if entry.stats else None,
        })

    return {
        "productType": report.geometry.product_type,
        "cut": None if cut is None else {"width": cut.cut_width, "keeperSide": cut.keeper_side.value},
        "crossSection": {
            "displayWidth": cross_section.display_width,
            "height": cross_section.height,
            "xOffset": cross_section.x_offset,
            "outline": cross_section.outline.to_polyline(max_length=0.25).tolist(),
            "voids": [
                {
                    "index": v.index,
                    "cx": v.center.x,
                    "cy": v.center.y,
                    "rx": v.semi_axis_x,
                    "ry": v.semi_axis_y,
                    "clipped": v.clipped,
                }
                for v in cross_section.voids
            ],
        },
        "activeStrands": sorted(s.label for s in report.active_strands),
        "strands": strands,
        "statistics": {
            "layers": {
                layer.value: {
                    "end1": _scope_to_dict(group.end1),
                    "end2": _scope_to_dict(group.end2),
                    "overall": _scope_to_dict(group.overall),
                }
                for layer, group in stats.layers.items()
            },
            "end1": _scope_to_dict(stats.combined.end1),
            "end2": _scope_to_dict(stats.combined.end2),
            "grand": _scope_to_dict(stats.grand),
        },
        "comparisons": [
            {
                "layer": c.layer.value,
                "summary": c.summary,
                "differences": [d.description for d in c.differences],
            }
            for c in report.comparisons
        ],
    }
