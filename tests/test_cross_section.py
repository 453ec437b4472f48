"""Tests for the plank outline and core void builder."""

from __future__ import annotations

import pytest

from strandanalysis.model.cross_section import build_core_voids, build_cross_section, build_outline
from strandanalysis.model.exceptions import InvalidCutSpec
from strandanalysis.model.geometry_primitives import Arc, Line
from strandanalysis.model.geometry_utils import is_simple_polygon
from strandanalysis.model.patterns import CutSpec, KeeperSide
from strandanalysis.model.products import available_product_types, lookup


def _vertex_set(points, mirror_about=None):
    result = set()
    for p in points:
        x = 2 * mirror_about - p.x if mirror_about is not None else p.x
        result.add((round(x, 9), round(p.y, 9)))
    return result


def test_uncut_outline_is_closed_and_mirror_symmetric(geometry_1047) -> None:
    outline = build_outline(geometry_1047)
    vertices = outline.vertices()

    assert outline.is_closed
    assert _vertex_set(vertices) == _vertex_set(vertices, mirror_about=geometry_1047.full_width / 2)


def test_uncut_outline_has_two_fillets_and_spans_the_plank(geometry_1047) -> None:
    outline = build_outline(geometry_1047)

    arcs = [e for e in outline.entities if isinstance(e, Arc)]
    assert len(arcs) == 2
    assert all(a.radius == pytest.approx(geometry_1047.bottom_corner_radius) for a in arcs)
    assert outline.bounds() == pytest.approx((0.0, 0.0, 48.0, 10.0), abs=1e-9)


def test_outline_is_traced_clockwise(geometry_1047) -> None:
    area = build_outline(geometry_1047).signed_area()

    assert area < 0
    assert 0.9 * 48.0 * 10.0 < abs(area) < 48.0 * 10.0


def test_left_keeper_has_straight_right_edge(geometry_1047) -> None:
    outline = build_outline(geometry_1047, CutSpec(24.0, KeeperSide.L1))

    cut_edges = [e for e in outline.entities if e.label == "cut"]
    assert len(cut_edges) == 1
    edge = cut_edges[0]
    assert isinstance(edge, Line)
    assert (edge.start.x, edge.start.y) == (24.0, 10.0)
    assert (edge.end.x, edge.end.y) == (24.0, 0.0)

    # fillet and keyway only on the kept left edge
    arcs = [e for e in outline.entities if isinstance(e, Arc)]
    assert len(arcs) == 1
    assert arcs[0].center.x < 12.0
    assert outline.bounds() == pytest.approx((0.0, 0.0, 24.0, 10.0), abs=1e-9)


def test_right_keeper_mirrors_left_keeper(geometry_1047) -> None:
    left = build_outline(geometry_1047, CutSpec(24.0, KeeperSide.L1))
    right = build_outline(geometry_1047, CutSpec(24.0, KeeperSide.L2))

    cut_edge = next(e for e in right.entities if e.label == "cut")
    assert (cut_edge.start.x, cut_edge.end.x) == (0.0, 0.0)
    assert _vertex_set(right.vertices()) == _vertex_set(left.vertices(), mirror_about=12.0)


def test_last_entity_is_the_bottom_edge(geometry_1047) -> None:
    for cut in (None, CutSpec(24.0, KeeperSide.L1), CutSpec(24.0, KeeperSide.L2)):
        outline = build_outline(geometry_1047, cut)
        assert outline.entities[-1].label == "bottom"
        assert outline.entities[-1].start.y == 0.0
        assert outline.entities[-1].end.y == 0.0


@pytest.mark.parametrize("product_type", available_product_types())
@pytest.mark.parametrize("cut", [None, (24.0, "L1"), (24.0, "L2"), (12.0, "L1"), (6.0, "L2")])
def test_outline_never_self_intersects(product_type, cut) -> None:
    cut_spec = CutSpec(*cut) if cut else None
    outline = build_outline(lookup(product_type), cut_spec)

    assert outline.is_closed
    assert is_simple_polygon(outline.vertices())


def test_full_width_cut_keeps_straight_edge(geometry_1047) -> None:
    outline = build_outline(geometry_1047, CutSpec(48.0, KeeperSide.L1))

    assert any(e.label == "cut" for e in outline.entities)
    assert is_simple_polygon(outline.vertices())


def test_cut_wider_than_plank_is_rejected(geometry_1047) -> None:
    with pytest.raises(InvalidCutSpec):
        build_outline(geometry_1047, CutSpec(48.5, KeeperSide.L1))
    with pytest.raises(InvalidCutSpec):
        build_core_voids(geometry_1047, CutSpec(60.0, KeeperSide.L2))


def test_negative_cut_width_is_rejected() -> None:
    with pytest.raises(InvalidCutSpec):
        CutSpec(-1.0, KeeperSide.L1)


@pytest.mark.parametrize("side", ["L1", "L2"])
def test_cut_narrower_than_keyway_is_rejected(geometry_1047, side) -> None:
    with pytest.raises(InvalidCutSpec, match="too narrow"):
        build_outline(geometry_1047, CutSpec(0.5, side))
    with pytest.raises(InvalidCutSpec):
        build_cross_section(geometry_1047, CutSpec(0.0, side))


@pytest.mark.parametrize("product_type", available_product_types())
def test_narrow_cut_clearing_the_keyway_is_accepted(product_type) -> None:
    outline = build_outline(lookup(product_type), CutSpec(2.0, KeeperSide.L2))

    assert is_simple_polygon(outline.vertices())
    assert outline.bounds()[2] == pytest.approx(2.0)


def test_uncut_plank_shows_every_core(geometry_1047) -> None:
    voids = build_core_voids(geometry_1047)

    assert [v.index for v in voids] == [0, 1, 2, 3, 4]
    assert not any(v.clipped for v in voids)
    assert voids[0].center.x == pytest.approx(2.75 + 7.25 / 2)
    assert voids[0].center.y == pytest.approx(1.375 + 7.25 / 2)
    assert voids[1].center.x - voids[0].center.x == pytest.approx(geometry_1047.core_pitch)


def test_left_keeper_clips_core_crossing_the_cut(geometry_1047) -> None:
    voids = build_core_voids(geometry_1047, CutSpec(24.0, KeeperSide.L1))

    assert [v.index for v in voids] == [0, 1, 2]
    assert [v.clipped for v in voids] == [False, False, True]
    assert voids[2].left < 24.0 < voids[2].right


def test_right_keeper_shifts_cores_into_display_frame(geometry_1047) -> None:
    voids = build_core_voids(geometry_1047, CutSpec(24.0, KeeperSide.L2))

    assert [v.index for v in voids] == [2, 3, 4]
    assert voids[0].clipped
    assert voids[0].left == pytest.approx(20.375 - 24.0)
    assert voids[1].left == pytest.approx(29.1875 - 24.0)
    assert not voids[2].clipped


def test_core_void_polyline_is_closed(geometry_1047) -> None:
    void = build_core_voids(geometry_1047)[0]
    ring = void.to_polyline(n_segments=32)

    assert ring.shape == (33, 2)
    assert ring[0] == pytest.approx(ring[-1])
    assert ring[:, 0].max() == pytest.approx(void.right)


def test_cross_section_maps_plank_x_to_display_frame(geometry_1047) -> None:
    section = build_cross_section(geometry_1047, CutSpec(24.0, KeeperSide.L2))

    assert section.display_width == 24.0
    assert section.x_offset == 24.0
    assert section.to_local_x(28.40625) == pytest.approx(4.40625)
    assert section.is_visible(46.625)
    assert not section.is_visible(19.59375)
    assert section.height == 10.0
