import dataclasses

import numpy as np
import pytest

from forces import (
    Attractor, Gravity, Repulsor, Wind, attractor, evaluate_field, force_from_dict,
    forces_from_config, gravity, repulsor, wind,
)


def test_gravity_ignores_position():
    g = gravity(0.0, 98.0)
    np.testing.assert_allclose(g.evaluate_at([0.0, 0.0]), [0.0, 98.0])
    np.testing.assert_allclose(g.evaluate_at([-300.0, 12.5]), [0.0, 98.0])


def test_evaluate_field_keeps_batch_shape():
    positions = np.zeros((5, 2))
    assert evaluate_field(gravity(1.0, 2.0), positions).shape == (5, 2)
    assert evaluate_field(attractor((1.0, 1.0), 1.0, 10.0), positions).shape == (5, 2)


def test_wind_factory_has_no_turbulence():
    w = wind((10.0, 0.0), 5.0)
    assert w.turbulence == 0.0
    np.testing.assert_allclose(w.evaluate_at([123.0, 456.0]), [5.0, 0.0])


def test_wind_turbulence_is_position_dependent():
    w = Wind((1.0, 0.0), 5.0, 2.0)
    np.testing.assert_allclose(w.evaluate_at([0.0, 0.0]), [5.0, 2.0])
    x, y = 10.0, 20.0
    expected = [5.0 + np.sin(0.1 * x) * 2.0, np.cos(0.1 * y) * 2.0]
    np.testing.assert_allclose(w.evaluate_at([x, y]), expected)


def test_wind_with_zero_direction_is_turbulence_only():
    w = Wind((0.0, 0.0), 5.0, 1.0)
    np.testing.assert_allclose(w.evaluate_at([0.0, 0.0]), [0.0, 1.0])


def test_attractor_inverse_square_with_smoothing():
    a = attractor((0.0, 0.0), 10.0, 100.0)
    magnitude = 10.0 / (25.0 + 1.0)
    np.testing.assert_allclose(a.evaluate_at([3.0, 4.0]), [-0.6 * magnitude, -0.8 * magnitude])


def test_repulsor_points_away_from_anchor():
    r = repulsor((0.0, 0.0), 10.0, 100.0)
    magnitude = 10.0 / (25.0 + 1.0)
    np.testing.assert_allclose(r.evaluate_at([3.0, 4.0]), [0.6 * magnitude, 0.8 * magnitude])


@pytest.mark.parametrize("force_cls", [Attractor, Repulsor])
def test_point_fields_are_zero_at_anchor_and_outside_radius(force_cls):
    force = force_cls((50.0, 50.0), 100.0, 10.0)
    with np.errstate(all='raise'):
        at_anchor = force.evaluate_at([50.0, 50.0])
    np.testing.assert_array_equal(at_anchor, [0.0, 0.0])
    np.testing.assert_array_equal(force.evaluate_at([60.0, 50.0]), [0.0, 0.0])
    np.testing.assert_array_equal(force.evaluate_at([80.0, 80.0]), [0.0, 0.0])
    assert np.any(force.evaluate_at([55.0, 50.0]) != 0.0)


def test_forces_are_immutable():
    g = Gravity((0.0, 1.0))
    g.evaluate_at([1.0, 1.0])
    assert g == Gravity((0.0, 1.0))
    with pytest.raises(dataclasses.FrozenInstanceError):
        g.vector = (1.0, 0.0)


def test_unknown_force_object_is_rejected():
    with pytest.raises(TypeError):
        evaluate_field(object(), [0.0, 0.0])


def test_force_from_dict_variants():
    forces = forces_from_config([
        {"type": "gravity", "vector": [0, 98]},
        {"type": "wind", "direction": [1, 0], "strength": 5, "turbulence": 0.5},
        {"type": "attractor", "position": [1, 2], "strength": 3, "radius": 4},
        {"type": "repulsor", "position": [1, 2], "strength": 3, "radius": 4},
    ])
    assert forces == [
        Gravity((0.0, 98.0)),
        Wind((1.0, 0.0), 5.0, 0.5),
        Attractor((1.0, 2.0), 3.0, 4.0),
        Repulsor((1.0, 2.0), 3.0, 4.0),
    ]


def test_force_from_dict_rejects_unknown_type():
    with pytest.raises(ValueError):
        force_from_dict({"type": "vortex"})
