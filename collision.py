# collision.py
"""
Outline geometry for containment and distance queries.

An Outline is a closed polygon built from an ordered list of tracked
points (e.g. a body contour from a vision tracker). It is rebuilt from
scratch whenever new points arrive and never edited in place. Containment
uses a bounding-box rejection followed by horizontal ray casting; the
crossing count is computed by a Numba-jitted kernel that serves both the
single-point and the batch query, so both always agree.
"""
import logging
import numpy as np
from numba import jit
from typing import List, Sequence

from constants import PARALLEL_EPSILON, RAY_OVERSHOOT
from vector import ZERO, VectorLike, as_vectors, normalize_or_zero

# --- Data Contracts ---
#
# class Outline:
#   - from_points(points: Sequence[VectorLike]) -> Outline:
#     - Inputs: ordered points of a closed polygon; segment i joins point i
#       to point (i + 1) mod N.
#     - Outputs: Outline. Empty input gives a degenerate outline with no
#       segments, zero bounds and zero velocity; it contains nothing.
#
#   - contains(point) -> bool / contains_points(points) -> np.ndarray[bool]:
#     - Invariants: A point is inside iff the ray from it to
#       (bounds.max.x + 1, y) crosses an odd number of segments. Segments
#       nearly parallel to the ray (|r x s| < 1e-4) never count. Points on
#       the boundary get an arbitrary but repeatable answer.
#
#   - centroid() -> np.ndarray:
#     - Outputs: mean of the segment start points. This is the vertex
#       average, not the area-weighted polygon centroid; the two differ for
#       unevenly sampled outlines.


@jit(nopython=True)
def _ray_crosses_segment(px, py, ray_end_x, ray_end_y, sx0, sy0, sx1, sy1, epsilon):
    rx = ray_end_x - px
    ry = ray_end_y - py
    sx = sx1 - sx0
    sy = sy1 - sy0
    qx = sx0 - px
    qy = sy0 - py

    r_cross_s = rx * sy - ry * sx
    if abs(r_cross_s) < epsilon:
        return False

    t = (qx * sy - qy * sx) / r_cross_s
    u = (qx * ry - qy * rx) / r_cross_s
    return t >= 0.0 and t <= 1.0 and u >= 0.0 and u <= 1.0


@jit(nopython=True)
def _contains_points_numba(points, starts, ends, min_x, min_y, max_x, max_y, epsilon, overshoot):
    """
    Numba-jitted even-odd test for a batch of points.

    Each point is first rejected against the bounding box, then a
    horizontal ray is cast to the right edge of the box plus `overshoot`.
    """
    count = points.shape[0]
    inside = np.zeros(count, dtype=np.bool_)
    ray_end_x = max_x + overshoot

    for i in range(count):
        px = points[i, 0]
        py = points[i, 1]
        if px < min_x or px > max_x or py < min_y or py > max_y:
            continue

        crossings = 0
        for j in range(starts.shape[0]):
            if _ray_crosses_segment(
                px, py, ray_end_x, py,
                starts[j, 0], starts[j, 1], ends[j, 0], ends[j, 1],
                epsilon,
            ):
                crossings += 1
        inside[i] = crossings % 2 == 1

    return inside


class AABB:
    """Axis-aligned bounding box with inclusive edges."""
    def __init__(self, min_corner: VectorLike, max_corner: VectorLike):
        self.min = as_vectors(min_corner).copy()
        self.max = as_vectors(max_corner).copy()

    def contains(self, point: VectorLike) -> bool:
        x, y = as_vectors(point)
        return bool(self.min[0] <= x <= self.max[0] and self.min[1] <= y <= self.max[1])

    def intersects(self, other: "AABB") -> bool:
        return bool(
            self.min[0] <= other.max[0]
            and self.max[0] >= other.min[0]
            and self.min[1] <= other.max[1]
            and self.max[1] >= other.min[1]
        )

    def __repr__(self) -> str:
        return f"AABB(min={self.min.tolist()}, max={self.max.tolist()})"


class LineSegment:
    """A directed outline edge with its unit normal (-dy, dx)."""
    def __init__(self, start: VectorLike, end: VectorLike):
        self.start = as_vectors(start).copy()
        self.end = as_vectors(end).copy()
        direction = self.end - self.start
        self.normal = normalize_or_zero(np.array([-direction[1], direction[0]]))

    def closest_point(self, point: VectorLike) -> np.ndarray:
        segment = self.end - self.start
        seg_len_sq = float(np.dot(segment, segment))
        if seg_len_sq == 0.0:
            return self.start.copy()
        t = float(np.dot(as_vectors(point) - self.start, segment)) / seg_len_sq
        return self.start + segment * min(max(t, 0.0), 1.0)

    def distance_to(self, point: VectorLike) -> float:
        return float(np.linalg.norm(as_vectors(point) - self.closest_point(point)))


class Outline:
    """
    Closed polygon with precomputed bounds.

    Built with `Outline.from_points`; `velocity` is always zero for now and
    is kept for motion-compensated collision later.
    """
    def __init__(self, starts: np.ndarray, ends: np.ndarray, bounds: AABB):
        self.starts = starts
        self.ends = ends
        self.bounds = bounds
        self.velocity = ZERO.copy()

        direction = ends - starts
        self.normals = normalize_or_zero(np.column_stack((-direction[:, 1], direction[:, 0])))

    @classmethod
    def from_points(cls, points: Sequence[VectorLike]) -> "Outline":
        points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        if len(points) == 0:
            logging.debug("Outline built from no points; containment is always False.")
            return cls(np.zeros((0, 2)), np.zeros((0, 2)), AABB(ZERO, ZERO))

        starts = np.ascontiguousarray(points)
        ends = np.ascontiguousarray(np.roll(points, -1, axis=0))
        bounds = AABB(points.min(axis=0), points.max(axis=0))
        logging.debug(f"Outline built with {len(starts)} segments, bounds {bounds}.")
        return cls(starts, ends, bounds)

    @property
    def segments(self) -> List[LineSegment]:
        return [LineSegment(start, end) for start, end in zip(self.starts, self.ends)]

    def __len__(self) -> int:
        return len(self.starts)

    def contains_points(self, points: VectorLike) -> np.ndarray:
        """Batch containment for an (N, 2) array of points."""
        points = np.ascontiguousarray(np.asarray(points, dtype=np.float64).reshape(-1, 2))
        return _contains_points_numba(
            points, self.starts, self.ends,
            float(self.bounds.min[0]), float(self.bounds.min[1]),
            float(self.bounds.max[0]), float(self.bounds.max[1]),
            PARALLEL_EPSILON, RAY_OVERSHOOT,
        )

    def contains(self, point: VectorLike) -> bool:
        return bool(self.contains_points(point)[0])

    def centroid(self) -> np.ndarray:
        """Vertex average of the outline; see the data contract above."""
        if len(self.starts) == 0:
            return ZERO.copy()
        return self.starts.mean(axis=0)

    def distance_to(self, point: VectorLike) -> float:
        """Distance from `point` to the nearest edge; inf for an empty outline."""
        if len(self.starts) == 0:
            return float('inf')
        point = as_vectors(point)
        segment = self.ends - self.starts
        seg_len_sq = np.sum(segment * segment, axis=1)
        safe_len_sq = np.where(seg_len_sq > 0.0, seg_len_sq, 1.0)
        t = np.sum((point - self.starts) * segment, axis=1) / safe_len_sq
        t = np.where(seg_len_sq > 0.0, np.clip(t, 0.0, 1.0), 0.0)
        closest = self.starts + segment * t[:, np.newaxis]
        return float(np.min(np.linalg.norm(point - closest, axis=1)))
