"""
Cross-Section Outline Builder
=============================
Builds the plank outline and the visible core voids for any catalog product,
uncut or saw-cut to a narrower width.

The outline is a closed BoundaryLoop, traced clockwise in the local display
frame (x=0 at the rendered left edge, y=0 at the bottom face):

    bottom-left corner -> up the left edge -> top edge
    -> down the right edge -> bottom-right corner -> bottom edge

An edge that keeps the factory keyway gets the corner fillet and the keyway
profile; a saw-cut edge is a plain vertical line.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple, TYPE_CHECKING

import numpy as np

from strandanalysis.model.geometry_primitives import Arc, BoundaryLoop, Point
from strandanalysis.model.exceptions import InvalidCutSpec
from strandanalysis.model.geometry_utils import ellipse_to_polyline, is_simple_polygon
from strandanalysis.model.patterns import CutSpec, KeeperSide
from strandanalysis.model.products import ProductGeometry

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoreVoid:
    """An elliptical core in display coordinates."""
    index: int  # 0-based core number on the uncut plank
    center: Point
    semi_axis_x: float
    semi_axis_y: float
    clipped: bool  # partly outside the visible window

    @property
    def left(self) -> float:
        return self.center.x - self.semi_axis_x

    @property
    def right(self) -> float:
        return self.center.x + self.semi_axis_x

    def to_polyline(self, n_segments: int = 64) -> npt.NDArray[np.float64]:
        return ellipse_to_polyline(self.center, self.semi_axis_x, self.semi_axis_y, n_segments)


@dataclass(frozen=True)
class CrossSection:
    """Everything a renderer needs to draw one plank end."""
    geometry: ProductGeometry
    cut_spec: Optional[CutSpec]
    outline: BoundaryLoop
    voids: Tuple[CoreVoid, ...]
    display_width: float
    x_offset: float  # plank x of the display frame's left edge

    @property
    def height(self) -> float:
        return self.geometry.height

    def to_local_x(self, plank_x: float) -> float:
        """Map an x measured on the uncut plank into the display frame."""
        return plank_x - self.x_offset

    def is_visible(self, plank_x: float) -> bool:
        local_x = self.to_local_x(plank_x)
        return 0.0 <= local_x <= self.display_width


def _window(geometry: ProductGeometry, cut_spec: Optional[CutSpec]) -> Tuple[float, float]:
    """(display_width, x_offset) for the requested cut."""
    if cut_spec is None:
        return geometry.full_width, 0.0

    cut_spec.validate_against(geometry.full_width)
    if cut_spec.keeper_side is KeeperSide.L2:
        return cut_spec.cut_width, geometry.full_width - cut_spec.cut_width
    return cut_spec.cut_width, 0.0


def _left_keyway(geometry: ProductGeometry) -> List[Point]:
    return [Point(depth, height) for depth, height in geometry.keyway_profile]


def _right_keyway(geometry: ProductGeometry, width: float) -> List[Point]:
    """Mirror of the left profile at x = width, top to bottom."""
    return [Point(depth, height).mirror_x(width / 2) for depth, height in reversed(geometry.keyway_profile)]


def _bottom_left_fillet(r: float) -> Arc:
    return Arc(start=Point(r, 0.0), center=Point(r, r), end=Point(0.0, r), label="keyway")


def _bottom_right_fillet(r: float, width: float) -> Arc:
    return Arc(start=Point(width, r), center=Point(width - r, r), end=Point(width - r, 0.0), label="keyway")


def build_outline(geometry: ProductGeometry, cut_spec: Optional[CutSpec] = None) -> BoundaryLoop:
    """
    Closed outline of the plank end in the local display frame.

    Raises:
        InvalidCutSpec: if the cut is wider than the plank, or so narrow that
            the kept keyway folds back over the saw-cut edge.
    """
    width, _ = _window(geometry, cut_spec)
    h = geometry.height
    r = geometry.bottom_corner_radius

    keep_left = cut_spec is None or cut_spec.keeper_side is KeeperSide.L1
    keep_right = cut_spec is None or cut_spec.keeper_side is KeeperSide.L2

    loop = BoundaryLoop()

    # 1. Bottom-left corner and left edge
    if keep_left:
        if r > 0:
            loop.add_entities([_bottom_left_fillet(r)])
            loop.add_polyline(_left_keyway(geometry), label="keyway")
        else:
            loop.add_polyline([Point(0.0, 0.0)] + _left_keyway(geometry), label="keyway")
    else:
        loop.add_polyline([Point(0.0, 0.0), Point(0.0, h)], label="cut")

    # 2. Top edge and right edge
    if keep_right:
        right_profile = _right_keyway(geometry, width)
        loop.add_polyline(right_profile[:1], label="top")
        loop.add_polyline(right_profile[1:], label="keyway")
        if r > 0:
            loop.add_polyline([Point(width, r)], label="keyway")
            loop.add_entities([_bottom_right_fillet(r, width)])
        else:
            loop.add_polyline([Point(width, 0.0)], label="keyway")
    else:
        loop.add_polyline([Point(width, h)], label="top")
        loop.add_polyline([Point(width, 0.0)], label="cut")

    # 3. Bottom edge back to the start
    loop.close_loop()
    loop.entities[-1] = replace(loop.entities[-1], label="bottom")

    if not is_simple_polygon(loop.vertices()):
        raise InvalidCutSpec(
            f"Cut width {width}\" is too narrow for the {geometry.product_type} keyway."
        )

    logger.debug(
        f"Outline for {geometry.product_type} "
        f"({'uncut' if cut_spec is None else f'{cut_spec.cut_width}in {cut_spec.keeper_side}'}): "
        f"{len(loop.entities)} entities"
    )
    return loop


def build_core_voids(geometry: ProductGeometry, cut_spec: Optional[CutSpec] = None) -> List[CoreVoid]:
    """
    Core ellipses that overlap the visible window, in display coordinates.
    A core only touching the window edge is left out.
    """
    width, x_offset = _window(geometry, cut_spec)
    a = geometry.core_width / 2
    b = geometry.core_height / 2
    center_y = geometry.bottom_flange + b

    voids = []
    for i in range(geometry.num_cores):
        left = geometry.core_left_edge(i) - x_offset
        right = left + geometry.core_width
        if right <= 0.0 or left >= width:
            continue
        voids.append(CoreVoid(
            index=i,
            center=Point(left + a, center_y),
            semi_axis_x=a,
            semi_axis_y=b,
            clipped=left < 0.0 or right > width,
        ))
    return voids


def build_cross_section(geometry: ProductGeometry, cut_spec: Optional[CutSpec] = None) -> CrossSection:
    width, x_offset = _window(geometry, cut_spec)
    return CrossSection(
        geometry=geometry,
        cut_spec=cut_spec,
        outline=build_outline(geometry, cut_spec),
        voids=tuple(build_core_voids(geometry, cut_spec)),
        display_width=width,
        x_offset=x_offset,
    )
