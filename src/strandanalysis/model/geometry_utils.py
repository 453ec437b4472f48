from __future__ import annotations

from typing import Sequence

import numpy as np

from strandanalysis.model.geometry_primitives import Point


def ellipse_to_polyline(
    center: Point,
    a: float,
    b: float,
    n_segments: int
) -> np.ndarray:
    """
    Discretize an ellipse in XY into an (N,2) polyline (closed).

    Args:
        center: (x, y) coordinates of the ellipse center.
        a: Semi-axis along x.
        b: Semi-axis along y.
        n_segments: Number of segments to use for discretization.

    Returns:
        An array of shape (n, 2) containing the (x, y) coordinates of the points along the ellipse.
    """
    theta = np.linspace(0.0, 2.0 * np.pi, n_segments, endpoint=False)
    pts = np.c_[center.x + a * np.cos(theta), center.y + b * np.sin(theta)]

    # close the ring
    if not np.allclose(pts[0], pts[-1]):
        pts = np.vstack((pts, pts[0]))

    return pts


def segments_intersect(p1: Point, p2: Point, p3: Point, p4: Point, eps: float = 1e-12) -> bool:
    """
    True if the closed segments p1-p2 and p3-p4 share at least one point.
    Collinear overlapping segments count as intersecting.
    """
    def orient(a: Point, b: Point, c: Point) -> float:
        return (b.x - a.x) * (c.y - a.y) - (b.y - a.y) * (c.x - a.x)

    def on_segment(a: Point, b: Point, c: Point) -> bool:
        return (min(a.x, b.x) - eps <= c.x <= max(a.x, b.x) + eps
                and min(a.y, b.y) - eps <= c.y <= max(a.y, b.y) + eps)

    d1 = orient(p3, p4, p1)
    d2 = orient(p3, p4, p2)
    d3 = orient(p1, p2, p3)
    d4 = orient(p1, p2, p4)

    if ((d1 > eps and d2 < -eps) or (d1 < -eps and d2 > eps)) and \
            ((d3 > eps and d4 < -eps) or (d3 < -eps and d4 > eps)):
        return True

    if abs(d1) <= eps and on_segment(p3, p4, p1): return True
    if abs(d2) <= eps and on_segment(p3, p4, p2): return True
    if abs(d3) <= eps and on_segment(p1, p2, p3): return True
    if abs(d4) <= eps and on_segment(p1, p2, p4): return True
    return False


def is_simple_polygon(points: Sequence[Point]) -> bool:
    """
    Check that a closed polygon (last vertex joins the first) does not
    self-intersect. Adjacent edges may share their common vertex.
    O(n^2), fine for outlines with a few dozen vertices.
    """
    n = len(points)
    if n < 3:
        return False

    edges = [(points[i], points[(i + 1) % n]) for i in range(n)]
    for i in range(n):
        for j in range(i + 1, n):
            # neighbours share a vertex by construction
            if j == i + 1 or (i == 0 and j == n - 1):
                continue
            if segments_intersect(*edges[i], *edges[j]):
                return False
    return True
