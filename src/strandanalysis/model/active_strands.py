"""
Active Strand Resolution
========================
Decides which strands of a pattern remain in the product after the plank is
saw-cut to a narrower width.

Strand x coordinates are measured on the uncut plank. The uncut width is not
taken from the pattern record; it is derived from the outermost strand plus
the standard concrete cover.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional

from strandanalysis.config import CONCRETE_COVER_IN, WIDTH_TOLERANCE_IN
from strandanalysis.model.exceptions import InvalidCutSpec
from strandanalysis.model.patterns import CutSpec, KeeperSide, StrandId, StrandLayer, StrandPattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActiveStrandSet:
    """
    Either every strand (`indices is None`) or an explicit set of 1-based
    positions. An empty set is a valid result.
    """
    indices: Optional[FrozenSet[int]] = None

    @classmethod
    def all(cls) -> ActiveStrandSet:
        return cls(indices=None)

    @classmethod
    def of(cls, indices: Iterable[int]) -> ActiveStrandSet:
        return cls(indices=frozenset(indices))

    @property
    def all_active(self) -> bool:
        return self.indices is None

    def __contains__(self, position: object) -> bool:
        if self.indices is None:
            return isinstance(position, int) and position >= 1
        return position in self.indices

    def indices_for(self, count: int) -> list[int]:
        """Sorted active positions for a pattern of `count` strands."""
        if self.indices is None:
            return list(range(1, count + 1))
        return sorted(i for i in self.indices if 1 <= i <= count)


ALL_ACTIVE = ActiveStrandSet.all()


def derived_full_width(pattern: StrandPattern) -> Optional[float]:
    """Rightmost strand plus concrete cover, None if the pattern has no coordinates."""
    if not pattern.coordinates:
        return None
    return max(c.x for c in pattern.coordinates) + CONCRETE_COVER_IN


def resolve_active(
    pattern: StrandPattern,
    cut_spec: Optional[CutSpec] = None,
    layer: StrandLayer = StrandLayer.BOTTOM,
    catalog_width: Optional[float] = None,
) -> ActiveStrandSet:
    """
    Active strand positions of `pattern` for the given cut.

    Args:
        pattern: Strand pattern with coordinates on the uncut plank.
        cut_spec: Cut width and keeper side; None means a full-width product.
        layer: Layer the pattern belongs to. Top strands are never filtered.
        catalog_width: Catalog width of the product, checked against the
            width derived from the pattern (mismatch only logs a warning).

    Raises:
        InvalidCutSpec: if the cut is wider than the derived plank width.
    """
    if cut_spec is None:
        return ALL_ACTIVE

    if layer is StrandLayer.TOP:
        # Top strands have never been filtered by cut width; kept pending
        # product-owner confirmation.
        logger.debug(f"Pattern '{pattern.id}': top strands ignore the {cut_spec.cut_width}\" cut.")
        return ALL_ACTIVE

    full_width = derived_full_width(pattern)
    if full_width is None:
        logger.warning(f"Pattern '{pattern.id}' has no strand coordinates; no strands can be resolved.")
        return ActiveStrandSet.of(())

    if catalog_width is not None and abs(full_width - catalog_width) > WIDTH_TOLERANCE_IN:
        logger.warning(
            f"Pattern '{pattern.id}': derived width {full_width:.3f}\" "
            f"(max x + {CONCRETE_COVER_IN}\" cover) differs from catalog width {catalog_width}\"."
        )

    if cut_spec.cut_width > full_width:
        raise InvalidCutSpec(
            f"Cut width {cut_spec.cut_width}\" exceeds the plank width {full_width}\" "
            f"derived from pattern '{pattern.id}'."
        )

    if cut_spec.keeper_side is KeeperSide.L1:
        active = [i for i, c in enumerate(pattern.coordinates, start=1) if c.x <= cut_spec.cut_width]
    else:
        cut_position = full_width - cut_spec.cut_width
        active = [i for i, c in enumerate(pattern.coordinates, start=1) if c.x >= cut_position]

    logger.debug(
        f"Pattern '{pattern.id}': {len(active)}/{len(pattern.coordinates)} strands active "
        f"for {cut_spec.cut_width}\" {cut_spec.keeper_side}: {active}"
    )
    return ActiveStrandSet.of(active)


def resolve_active_ids(
    bottom: Optional[StrandPattern],
    top: Optional[StrandPattern] = None,
    cut_spec: Optional[CutSpec] = None,
    catalog_width: Optional[float] = None,
) -> FrozenSet[StrandId]:
    """Active strands of both layers as StrandIds."""
    ids = set()
    for pattern, layer in ((bottom, StrandLayer.BOTTOM), (top, StrandLayer.TOP)):
        if pattern is None:
            continue
        active = resolve_active(pattern, cut_spec, layer=layer, catalog_width=catalog_width)
        ids.update(StrandId(layer, i) for i in active.indices_for(len(pattern.coordinates)))
    return frozenset(ids)
