"""
Slippage Report Assembly
========================
Bundles the cross-section, the active strand set and the slippage statistics
into one immutable structure for renderers and exporters.

No I/O happens here; see `strandanalysis.model.io.report_to_dict` for a
JSON-ready form.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Iterable, List, Mapping, Optional

from strandanalysis.model.active_strands import resolve_active_ids
from strandanalysis.model.comparison import PatternComparison, compare_patterns
from strandanalysis.model.cross_section import CrossSection, build_cross_section
from strandanalysis.model.geometry_primitives import Point
from strandanalysis.model.patterns import CutSpec, StrandId, StrandLayer, StrandPattern, StrandSize
from strandanalysis.model.products import ProductGeometry
from strandanalysis.model.slippage import SlippageReading, SlippageStatisticsResult, StrandStats, compute

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StrandReportEntry:
    strand_id: StrandId
    size: Optional[StrandSize]
    plank_position: Point    # on the uncut plank
    display_position: Point  # in the cross-section's display frame
    visible: bool
    active: bool
    stats: Optional[StrandStats]  # None when no reading was taken


@dataclass(frozen=True)
class SlippageReport:
    cross_section: CrossSection
    active_strands: FrozenSet[StrandId]
    statistics: SlippageStatisticsResult
    strands: Mapping[StrandId, StrandReportEntry]
    bottom_pattern: StrandPattern
    top_pattern: Optional[StrandPattern] = None
    comparisons: tuple[PatternComparison, ...] = ()

    @property
    def geometry(self) -> ProductGeometry:
        return self.cross_section.geometry

    @property
    def cut_spec(self) -> Optional[CutSpec]:
        return self.cross_section.cut_spec

    def entries(self, layer: StrandLayer) -> List[StrandReportEntry]:
        return [e for sid, e in self.strands.items() if sid.layer is layer]

    @property
    def readings_outside_active_set(self) -> List[StrandId]:
        """Strands that have readings but were cut away (usually a data-entry slip)."""
        return [sid for sid in self.statistics.strands if sid not in self.active_strands]


def _entries_for(
    pattern: StrandPattern,
    layer: StrandLayer,
    cross_section: CrossSection,
    active: FrozenSet[StrandId],
    statistics: SlippageStatisticsResult,
) -> List[StrandReportEntry]:
    entries = []
    for strand_id, coord in zip(pattern.strand_ids(layer), pattern.coordinates):
        entries.append(StrandReportEntry(
            strand_id=strand_id,
            size=pattern.size_at(strand_id.position),
            plank_position=Point(coord.x, coord.y),
            display_position=Point(cross_section.to_local_x(coord.x), coord.y),
            visible=cross_section.is_visible(coord.x),
            active=strand_id in active,
            stats=statistics.strands.get(strand_id),
        ))
    return entries


def assemble_report(
    geometry: ProductGeometry,
    bottom_pattern: StrandPattern,
    readings: Iterable[SlippageReading],
    cut_spec: Optional[CutSpec] = None,
    top_pattern: Optional[StrandPattern] = None,
    cast_bottom: Optional[StrandPattern] = None,
    cast_top: Optional[StrandPattern] = None,
) -> SlippageReport:
    """
    Build the full report for one plank.

    Raises:
        InvalidCutSpec: if the cut is wider than the plank.
        DuplicateReading: if a strand end was entered twice.
    """
    cross_section = build_cross_section(geometry, cut_spec)
    active = resolve_active_ids(bottom_pattern, top_pattern, cut_spec, catalog_width=geometry.full_width)
    statistics = compute(readings)

    entries = _entries_for(bottom_pattern, StrandLayer.BOTTOM, cross_section, active, statistics)
    if top_pattern is not None:
        entries += _entries_for(top_pattern, StrandLayer.TOP, cross_section, active, statistics)

    comparisons = []
    if cast_bottom is not None:
        comparisons.append(compare_patterns(bottom_pattern, cast_bottom, StrandLayer.BOTTOM))
    if cast_top is not None:
        comparisons.append(compare_patterns(top_pattern, cast_top, StrandLayer.TOP))

    report = SlippageReport(
        cross_section=cross_section,
        active_strands=active,
        statistics=statistics,
        strands=MappingProxyType({e.strand_id: e for e in entries}),
        bottom_pattern=bottom_pattern,
        top_pattern=top_pattern,
        comparisons=tuple(comparisons),
    )

    stray = report.readings_outside_active_set
    if stray:
        logger.warning(f"Readings entered for inactive strands: {', '.join(map(str, stray))}")
    return report
