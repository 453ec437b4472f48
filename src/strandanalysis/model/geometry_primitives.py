"""
Geometric Primitives for cross-section outlines.

All coordinates are inches in the plank's local frame: x grows to the right,
y grows upwards from the bottom face.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Union, TYPE_CHECKING
import numpy as np
import math

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class Vector:
    """A 2D vector representing direction and magnitude."""
    x: float
    y: float

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self.x - other.x, self.y - other.y)

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def dot(self, other: Vector) -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: Vector) -> float:
        """Z component of the 3D cross product."""
        return self.x * other.y - self.y * other.x

    def angle_to(self, other: Vector) -> float:
        """Returns the signed angle in radians from this vector to another."""
        return math.atan2(self.cross(other), self.dot(other))


@dataclass(frozen=True)
class Point:
    """A point in the cross-section plane."""
    x: float
    y: float

    def __add__(self, other: Vector) -> Point:
        # Point + Vector = Point (Translation)
        if isinstance(other, Vector):
            return Point(self.x + other.x, self.y + other.y)
        raise TypeError("Can only add a Vector to a Point.")

    def __sub__(self, other: Union[Vector, Point]) -> Union[Vector, Point]:
        # Point - Point = Vector (Direction)
        if isinstance(other, Point):
            return Vector(self.x - other.x, self.y - other.y)
        # Point - Vector = Point (Inverse translation)
        if isinstance(other, Vector):
            return Point(self.x - other.x, self.y - other.y)
        raise TypeError("Can only subtract a Vector or Point from a Point.")

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def mirror_x(self, axis_x: float) -> Point:
        """Reflect across the vertical line x = axis_x."""
        return Point(2.0 * axis_x - self.x, self.y)

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y])


@dataclass(frozen=True)
class Line:
    """A straight segment between two points."""
    start: Point
    end: Point
    label: Optional[str] = None

    def discretize(self, max_length: Optional[float] = None) -> npt.NDArray[np.float64]:
        if max_length is None:
            return np.array([self.start.to_array(), self.end.to_array()])

        resolution = max(2, math.ceil(self.length / max_length) + 1)
        return np.linspace(self.start.to_array(), self.end.to_array(), resolution)

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)


@dataclass(frozen=True)
class Arc:
    """
    A circular arc defined by start, center and end.
    Always follows the shorter way round, which is all a corner fillet needs.
    """
    start: Point
    center: Point
    end: Point
    label: Optional[str] = None

    @property
    def radius(self) -> float:
        return (self.start - self.center).magnitude

    @property
    def sweep(self) -> float:
        """Signed sweep angle in radians (positive = counter-clockwise)."""
        return (self.start - self.center).angle_to(self.end - self.center)

    @property
    def length(self) -> float:
        return self.radius * abs(self.sweep)

    def discretize(self, max_length: Optional[float] = None) -> npt.NDArray[np.float64]:
        """Generates points along the arc from `start` to `end` around `center`."""
        if max_length is not None:
            resolution = max(2, math.ceil(self.length / max_length) + 1)
        else:
            resolution = 17

        v_s = self.start - self.center
        ang_s = math.atan2(v_s.y, v_s.x)
        angles = np.linspace(ang_s, ang_s + self.sweep, resolution)

        x = self.center.x + self.radius * np.cos(angles)
        y = self.center.y + self.radius * np.sin(angles)
        return np.column_stack((x, y))


# Union type for list handling
GeometricEntity = Union[Line, Arc]


@dataclass
class BoundaryLoop:
    """
    A single closed loop describing a plank outline.
    Entities are stored head-to-tail; `close_loop` adds the final segment.
    """
    entities: List[GeometricEntity] = field(default_factory=list)

    def add_entities(self, new_entities: List[GeometricEntity]) -> None:
        self.entities.extend(new_entities)

    def add_polyline(self, points: List[Point], label: Optional[str] = None) -> None:
        """
        Append straight segments through `points`, starting from the current end
        of the loop. Zero-length segments are skipped.
        """
        current = self.entities[-1].end if self.entities else None
        for point in points:
            if current is not None and current.distance_to(point) > 1e-9:
                self.entities.append(Line(start=current, end=point, label=label))
            current = point

    def close_loop(self) -> None:
        """
        Automatically adds a line from the last point back to the first point
        if they are not coincident.
        """
        if not self.entities:
            return

        first_point = self.entities[0].start
        last_point = self.entities[-1].end

        if first_point.distance_to(last_point) > 1e-6:
            self.entities.append(Line(start=last_point, end=first_point))

    @property
    def is_closed(self) -> bool:
        if not self.entities:
            return False
        return self.entities[0].start.distance_to(self.entities[-1].end) <= 1e-6

    def vertices(self) -> List[Point]:
        """Start point of every entity, in path order."""
        return [e.start for e in self.entities]

    def to_polyline(self, max_length: Optional[float] = None) -> npt.NDArray[np.float64]:
        """
        Dense (N, 2) array of the loop for plotting. Arcs are discretised;
        shared endpoints between consecutive entities are not repeated.
        """
        chunks = []
        for entity in self.entities:
            pts = entity.discretize(max_length=max_length)
            chunks.append(pts[:-1])
        if not chunks:
            return np.empty((0, 2))
        return np.vstack(chunks)

    def bounds(self) -> tuple[float, float, float, float]:
        """(x_min, y_min, x_max, y_max) of the discretised loop."""
        pts = self.to_polyline()
        x_min, y_min = pts.min(axis=0)
        x_max, y_max = pts.max(axis=0)
        return float(x_min), float(y_min), float(x_max), float(y_max)

    def signed_area(self) -> float:
        """Shoelace area of the discretised loop (negative when clockwise)."""
        pts = self.to_polyline(max_length=0.05)
        x, y = pts[:, 0], pts[:, 1]
        return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))
