"""
Slippage Statistics
===================
Aggregates per-strand, per-end slippage readings into the totals and averages
used on the summary cards and in the compliance report.

Readings beyond the gauge's 1" range are recorded as a flag, not a number.
They are carried as `ExceedsThreshold`, enter the arithmetic at the threshold
value (a lower bound), and mark every total and average they feed so the
display reads ">".

Classes:
    SlippageReading: One strand end as entered on the form.
    Known / ExceedsThreshold: Interpreted value of a reading.
    ScopeStats: Total, count and exceeds flag for any group of readings.
    SlippageStatisticsResult: Every scope, per strand, per end, per layer, grand.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from strandanalysis.config import SLIPPAGE_THRESHOLD_IN
from strandanalysis.model.exceptions import DuplicateReading, RecordFormatError
from strandanalysis.model.measurements import MeasurementDisplay, MeasurementStatus, classify, format_measurement, parse
from strandanalysis.model.patterns import StrandEnd, StrandId, StrandLayer

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
# Values
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class Known:
    """A measured slippage in inches."""
    value: float

    @property
    def effective(self) -> float:
        return self.value

    @property
    def exceeds(self) -> bool:
        return False


@dataclass(frozen=True)
class ExceedsThreshold:
    """Slippage beyond the gauge range; only the lower bound is known."""
    threshold: float = SLIPPAGE_THRESHOLD_IN

    @property
    def effective(self) -> float:
        return self.threshold

    @property
    def exceeds(self) -> bool:
        return True


SlippageValue = Union[Known, ExceedsThreshold]


@dataclass(frozen=True)
class SlippageReading:
    strand_id: StrandId
    end: StrandEnd
    raw_text: str = ""
    exceeds_one: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'end', StrandEnd(self.end))

    @property
    def status(self) -> MeasurementStatus:
        return classify(self.raw_text)

    def value(self) -> SlippageValue:
        """Blank or unreadable text counts as zero."""
        if self.exceeds_one:
            return ExceedsThreshold()
        parsed = parse(self.raw_text)
        return Known(parsed if parsed is not None else 0.0)


# ------------------------------------------------------------------------------
# Statistics
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class ScopeStats:
    """Sum over some set of readings. Combine scopes with `+`."""
    total: float = 0.0
    count: int = 0
    exceeds: bool = False

    @classmethod
    def of(cls, value: SlippageValue) -> ScopeStats:
        return cls(total=value.effective, count=1, exceeds=value.exceeds)

    def __add__(self, other: ScopeStats) -> ScopeStats:
        return ScopeStats(
            total=self.total + other.total,
            count=self.count + other.count,
            exceeds=self.exceeds or other.exceeds,
        )

    @property
    def average(self) -> float:
        if self.count == 0:
            return 0.0
        return self.total / self.count

    def display_total(self) -> MeasurementDisplay:
        return format_measurement(self.total, self.exceeds)

    def display_average(self) -> MeasurementDisplay:
        return format_measurement(self.average, self.exceeds)


EMPTY_SCOPE = ScopeStats()


@dataclass(frozen=True)
class StrandStats:
    strand_id: StrandId
    ends: Mapping[StrandEnd, SlippageValue]
    stats: ScopeStats

    @property
    def total(self) -> float:
        return self.stats.total

    @property
    def exceeds(self) -> bool:
        return self.stats.exceeds

    def end_value(self, end: StrandEnd) -> Optional[SlippageValue]:
        return self.ends.get(end)


@dataclass(frozen=True)
class GroupStats:
    """Per-end and overall statistics for a group of strands (one layer or all)."""
    end1: ScopeStats = EMPTY_SCOPE
    end2: ScopeStats = EMPTY_SCOPE

    @property
    def overall(self) -> ScopeStats:
        return self.end1 + self.end2

    def __add__(self, other: GroupStats) -> GroupStats:
        return GroupStats(end1=self.end1 + other.end1, end2=self.end2 + other.end2)


@dataclass(frozen=True)
class SlippageStatisticsResult:
    strands: Mapping[StrandId, StrandStats] = field(default_factory=lambda: MappingProxyType({}))
    layers: Mapping[StrandLayer, GroupStats] = field(default_factory=lambda: MappingProxyType({}))
    combined: GroupStats = GroupStats()

    @property
    def grand(self) -> ScopeStats:
        return self.combined.overall

    @property
    def any_exceeds(self) -> bool:
        return self.grand.exceeds

    def layer(self, layer: StrandLayer) -> GroupStats:
        return self.layers.get(layer, GroupStats())

    def strands_in(self, layer: StrandLayer) -> List[StrandStats]:
        return [s for sid, s in self.strands.items() if sid.layer is layer]


def compute(readings: Iterable[SlippageReading]) -> SlippageStatisticsResult:
    """
    Aggregate readings into per-strand, per-end, per-layer and grand statistics.

    Only strands and ends present in `readings` are counted; averages divide
    by the number of readings in each scope.

    Raises:
        DuplicateReading: if a strand end is given more than once.
    """
    per_strand: Dict[StrandId, Dict[StrandEnd, SlippageValue]] = {}
    for reading in readings:
        ends = per_strand.setdefault(reading.strand_id, {})
        if reading.end in ends:
            raise DuplicateReading(f"Two readings for {reading.strand_id} {reading.end}.")
        ends[reading.end] = reading.value()

    strands: Dict[StrandId, StrandStats] = {}
    layers: Dict[StrandLayer, GroupStats] = {}
    for strand_id in sorted(per_strand):
        ends = per_strand[strand_id]
        stats = EMPTY_SCOPE
        group = GroupStats()
        for end in (StrandEnd.E1, StrandEnd.E2):
            if end not in ends:
                continue
            scope = ScopeStats.of(ends[end])
            stats = stats + scope
            group = group + (GroupStats(end1=scope) if end is StrandEnd.E1 else GroupStats(end2=scope))

        strands[strand_id] = StrandStats(
            strand_id=strand_id,
            ends=MappingProxyType(dict(ends)),
            stats=stats,
        )
        layers[strand_id.layer] = layers.get(strand_id.layer, GroupStats()) + group

    combined = GroupStats()
    for layer in (StrandLayer.BOTTOM, StrandLayer.TOP):
        if layer in layers:
            combined = combined + layers[layer]

    result = SlippageStatisticsResult(
        strands=MappingProxyType(strands),
        layers=MappingProxyType(layers),
        combined=combined,
    )
    logger.debug(
        f"Slippage statistics: {len(strands)} strands, {result.grand.count} readings, "
        f"total {result.grand.total:.3f}, exceeds={result.grand.exceeds}"
    )
    return result


_TRUE_FLAGS = ("true", "yes", "1")
_FALSE_FLAGS = ("false", "no", "0", "")


def _parse_flag(value: Any, key: str) -> bool:
    """Checkbox values arrive as JSON booleans or, from older exports, as strings."""
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    text = str(value).strip().lower()
    if text in _TRUE_FLAGS:
        return True
    if text in _FALSE_FLAGS:
        return False
    raise RecordFormatError(f"{key} must be true or false, got {value!r}.")


def readings_from_rows(
    rows: Iterable[Mapping[str, Any]],
    layer: Optional[StrandLayer] = None,
) -> List[SlippageReading]:
    """
    Convert form rows into readings.

    A row looks like {"strandId": "B1", "leftSlippage": "0.5", "rightSlippage": "",
    "leftExceedsOne": False, "rightExceedsOne": True}. The left value is end E1.
    `layer` overrides the layer for rows whose id has no B/T prefix; an
    explicit "strandSource" of "top"/"bottom" is honoured too.
    """
    readings: List[SlippageReading] = []
    for row in rows:
        try:
            strand_id = StrandId.parse(row["strandId"])
            label = str(row["strandId"]).strip().upper()
            source = row.get("strandSource")
            if label[:1] not in ("B", "T"):
                if source:
                    strand_id = StrandId(StrandLayer(str(source).lower()), strand_id.position)
                elif layer is not None:
                    strand_id = StrandId(layer, strand_id.position)
        except (KeyError, ValueError) as e:
            raise RecordFormatError(f"Bad slippage row {dict(row)!r}: {e}") from e

        for end, text_key, flag_key in (
            (StrandEnd.E1, "leftSlippage", "leftExceedsOne"),
            (StrandEnd.E2, "rightSlippage", "rightExceedsOne"),
        ):
            readings.append(SlippageReading(
                strand_id=strand_id,
                end=end,
                raw_text=str(row.get(text_key) or ""),
                exceeds_one=_parse_flag(row.get(flag_key), flag_key),
            ))
    return readings
