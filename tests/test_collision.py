import numpy as np
import pytest

from collision import AABB, LineSegment, Outline

SQUARE = [(50.0, 50.0), (150.0, 50.0), (150.0, 150.0), (50.0, 150.0)]
L_SHAPE = [(0.0, 0.0), (10.0, 0.0), (10.0, 4.0), (4.0, 4.0), (4.0, 10.0), (0.0, 10.0)]


def test_square_containment():
    outline = Outline.from_points(SQUARE)
    assert outline.contains((100.0, 100.0))
    assert not outline.contains((200.0, 200.0))


def test_boundary_answer_is_stable():
    outline = Outline.from_points(SQUARE)
    answers = {outline.contains((50.0, 50.0)) for _ in range(10)}
    assert len(answers) == 1
    edge = {outline.contains((100.0, 50.0)) for _ in range(10)}
    assert len(edge) == 1


def test_concave_outline():
    outline = Outline.from_points(L_SHAPE)
    assert outline.contains((2.0, 2.0))
    assert outline.contains((2.0, 8.0))
    assert outline.contains((8.0, 2.0))
    # Inside the bounding box but in the notch of the L.
    assert not outline.contains((7.0, 7.0))


def test_batch_and_single_queries_agree():
    outline = Outline.from_points(L_SHAPE)
    rng = np.random.default_rng(11)
    points = rng.uniform(-2.0, 12.0, size=(300, 2))
    batch = outline.contains_points(points)
    assert batch.dtype == np.bool_
    assert list(batch) == [outline.contains(p) for p in points]


def test_contains_points_accepts_float32_particle_positions():
    outline = Outline.from_points(SQUARE)
    positions = np.array([[100.0, 100.0], [10.0, 10.0]], dtype=np.float32)
    assert list(outline.contains_points(positions)) == [True, False]


def test_segments_wrap_around():
    outline = Outline.from_points(SQUARE)
    assert len(outline) == 4
    last = outline.segments[-1]
    np.testing.assert_array_equal(last.start, [50.0, 150.0])
    np.testing.assert_array_equal(last.end, [50.0, 50.0])
    np.testing.assert_allclose(outline.segments[0].normal, [0.0, 1.0])
    np.testing.assert_allclose(outline.normals[1], [-1.0, 0.0])


def test_bounds_and_velocity():
    outline = Outline.from_points(L_SHAPE)
    np.testing.assert_array_equal(outline.bounds.min, [0.0, 0.0])
    np.testing.assert_array_equal(outline.bounds.max, [10.0, 10.0])
    np.testing.assert_array_equal(outline.velocity, [0.0, 0.0])


def test_empty_outline_is_degenerate():
    outline = Outline.from_points([])
    assert len(outline) == 0
    assert outline.segments == []
    np.testing.assert_array_equal(outline.bounds.min, [0.0, 0.0])
    np.testing.assert_array_equal(outline.bounds.max, [0.0, 0.0])
    assert not outline.contains((0.0, 0.0))
    assert not outline.contains((5.0, 5.0))
    np.testing.assert_array_equal(outline.centroid(), [0.0, 0.0])
    assert outline.distance_to((1.0, 1.0)) == float('inf')


def test_centroid_is_vertex_average():
    np.testing.assert_allclose(Outline.from_points(SQUARE).centroid(), [100.0, 100.0])
    # Uneven sampling pulls the vertex average away from the area centroid (1, 1).
    uneven = Outline.from_points([(0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (2.0, 2.0), (0.0, 2.0)])
    np.testing.assert_allclose(uneven.centroid(), [1.0, 0.8])


def test_outline_distance():
    outline = Outline.from_points(SQUARE)
    assert outline.distance_to((100.0, 0.0)) == pytest.approx(50.0)
    assert outline.distance_to((100.0, 100.0)) == pytest.approx(50.0)
    assert outline.distance_to((150.0, 90.0)) == pytest.approx(0.0)


def test_line_segment_closest_point_clamps():
    segment = LineSegment((0.0, 0.0), (10.0, 0.0))
    np.testing.assert_allclose(segment.closest_point((5.0, 5.0)), [5.0, 0.0])
    np.testing.assert_allclose(segment.closest_point((-3.0, 4.0)), [0.0, 0.0])
    assert segment.distance_to((-3.0, 4.0)) == pytest.approx(5.0)
    assert segment.distance_to((13.0, 4.0)) == pytest.approx(5.0)


def test_zero_length_segment():
    segment = LineSegment((2.0, 2.0), (2.0, 2.0))
    np.testing.assert_array_equal(segment.normal, [0.0, 0.0])
    np.testing.assert_array_equal(segment.closest_point((5.0, 6.0)), [2.0, 2.0])
    assert segment.distance_to((5.0, 6.0)) == pytest.approx(5.0)


def test_aabb_contains_and_intersects():
    box = AABB((0.0, 0.0), (10.0, 10.0))
    assert box.contains((10.0, 0.0))
    assert not box.contains((10.1, 5.0))
    assert box.intersects(AABB((10.0, 10.0), (20.0, 20.0)))
    assert not box.intersects(AABB((11.0, 0.0), (20.0, 5.0)))
