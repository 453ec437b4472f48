"""Hollow-core Product Geometry (Catalog)."""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from strandanalysis.model.exceptions import UnknownProductType

# (depth into the edge, height above the bottom face), inches
KeywayPoint = Tuple[float, float]


# ------------------------------------------------------------------------------
# Data Structures
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class ProductGeometry:
    """
    Static cross-section of one hollow-core product family.

    The keyway profile describes the LEFT edge of an uncut plank, bottom to top.
    The right edge is its mirror image.
    """
    product_type: str
    description: str

    full_width: float
    height: float
    top_flange: float
    bottom_flange: float

    core_width: float
    core_height: float
    edge_to_first_core: float
    core_spacing: float
    num_cores: int

    bottom_corner_radius: float
    keyway_profile: Tuple[KeywayPoint, ...]

    def __post_init__(self):
        if self.full_width <= 0 or self.height <= 0:
            raise ValueError(f"{self.product_type}: plank dimensions must be positive.")
        if self.bottom_flange + self.core_height + self.top_flange > self.height + 1e-9:
            raise ValueError(f"{self.product_type}: flanges and cores exceed the plank height.")

        # Normalise lists coming from JSON into tuples so the entry stays hashable
        object.__setattr__(
            self, 'keyway_profile', tuple((float(d), float(h)) for d, h in self.keyway_profile)
        )
        profile = self.keyway_profile
        if not profile:
            raise ValueError(f"{self.product_type}: keyway profile is empty.")

        heights = [h for _, h in profile]
        if any(b <= a for a, b in zip(heights, heights[1:])):
            raise ValueError(f"{self.product_type}: keyway heights must be strictly increasing.")
        if heights[0] < self.bottom_corner_radius:
            raise ValueError(f"{self.product_type}: keyway must start above the corner radius.")
        if abs(heights[-1] - self.height) > 1e-9:
            raise ValueError(f"{self.product_type}: keyway must end at the top of the plank.")
        if any(d < 0 or d >= self.full_width / 2 for d, _ in profile):
            raise ValueError(f"{self.product_type}: keyway depth out of range.")

        if self.num_cores > 0 and self.core_right_edge(self.num_cores - 1) > self.full_width + 1e-9:
            raise ValueError(f"{self.product_type}: cores do not fit in the plank width.")

    @property
    def core_pitch(self) -> float:
        return self.core_width + self.core_spacing

    def core_left_edge(self, index: int) -> float:
        """Left edge of core `index` (0-based), measured from the uncut left edge."""
        return self.edge_to_first_core + index * self.core_pitch

    def core_right_edge(self, index: int) -> float:
        return self.core_left_edge(index) + self.core_width

    @property
    def top_keyway_depth(self) -> float:
        return self.keyway_profile[-1][0]


def _scaled_keyway(height: float) -> Tuple[KeywayPoint, ...]:
    """
    The family keyway is drawn for an 8" plank. Deeper planks keep the same
    depths and stretch the heights, so the draft angle is preserved.
    """
    factor = height / 8.0
    return tuple((d, h * factor) for d, h in _KEYWAY_8IN)


_KEYWAY_8IN: Tuple[KeywayPoint, ...] = (
    (0.0, 0.5),        # After radius
    (0.25, 0.625),     # 1/4", 5/8"
    (0.5625, 5.0),     # 9/16", 5"
    (0.75, 5.125),     # 3/4", 5 1/8"
    (0.8125, 6.875),   # 13/16", 6 7/8"
    (0.625, 7.0),      # 5/8", 7"
    (0.75, 7.5),       # 3/4", 7 1/2"
    (1.25, 8.0),       # 1 1/4", top
)


# 1. Flat Dictionary for Lookup
_CATALOG: Dict[str, ProductGeometry] = {
    "8048": ProductGeometry(
        product_type="8048",
        description='8" x 48" hollow-core, 6 cores',
        full_width=48.0,
        height=8.0,
        top_flange=1.25,
        bottom_flange=1.25,
        core_width=6.0,
        core_height=5.5,
        edge_to_first_core=2.25,
        core_spacing=1.5,
        num_cores=6,
        bottom_corner_radius=0.5,
        keyway_profile=_scaled_keyway(8.0),
    ),
    "1047": ProductGeometry(
        product_type="1047",
        description='10" x 48" hollow-core, 5 cores',
        full_width=48.0,
        height=10.0,
        top_flange=1.375,
        bottom_flange=1.375,
        core_width=7.25,
        core_height=7.25,
        edge_to_first_core=2.75,
        core_spacing=1.5625,
        num_cores=5,
        bottom_corner_radius=0.625,
        keyway_profile=_scaled_keyway(10.0),
    ),
    "1247": ProductGeometry(
        product_type="1247",
        description='12" x 48" hollow-core, 5 cores',
        full_width=48.0,
        height=12.0,
        top_flange=1.5,
        bottom_flange=1.5,
        core_width=7.5,
        core_height=9.0,
        edge_to_first_core=2.5,
        core_spacing=1.375,
        num_cores=5,
        bottom_corner_radius=0.75,
        keyway_profile=_scaled_keyway(12.0),
    ),
    "1250": ProductGeometry(
        product_type="1250",
        description='12" x 48" hollow-core, 5 cores',
        full_width=48.0,
        height=12.0,
        top_flange=1.5,
        bottom_flange=1.5,
        core_width=8.0,
        core_height=9.0,
        edge_to_first_core=2.5,
        core_spacing=1.25,
        num_cores=5,
        bottom_corner_radius=0.75,
        keyway_profile=_scaled_keyway(12.0),
    ),
    "1648": ProductGeometry(
        product_type="1648",
        description='16" x 48" hollow-core, 5 cores',
        full_width=48.0,
        height=16.0,
        top_flange=1.75,
        bottom_flange=1.75,
        core_width=7.5,
        core_height=12.5,
        edge_to_first_core=2.5,
        core_spacing=1.375,
        num_cores=5,
        bottom_corner_radius=1.0,
        keyway_profile=_scaled_keyway(16.0),
    ),
    "1650": ProductGeometry(
        product_type="1650",
        description='16" x 48" hollow-core, 5 cores',
        full_width=48.0,
        height=16.0,
        top_flange=1.5,
        bottom_flange=1.5,
        core_width=8.0,
        core_height=13.0,
        edge_to_first_core=2.25,
        core_spacing=1.25,
        num_cores=5,
        bottom_corner_radius=1.0,
        keyway_profile=_scaled_keyway(16.0),
    ),
}

PRODUCT_CATALOG: Mapping[str, ProductGeometry] = MappingProxyType(_CATALOG)


def lookup(product_type: str) -> ProductGeometry:
    """Return the geometry for `product_type` or raise UnknownProductType."""
    key = str(product_type).strip()
    try:
        return PRODUCT_CATALOG[key]
    except KeyError:
        raise UnknownProductType(key) from None


def available_product_types() -> List[str]:
    return list(PRODUCT_CATALOG.keys())
