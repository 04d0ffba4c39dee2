import numpy as np

from forces import Gravity, Wind
from main import build_emitters, build_forces, outline_from_tracking
from particle import ParticleConfig


def test_too_few_tracking_values_means_no_outline():
    assert outline_from_tracking(None) is None
    assert outline_from_tracking([]) is None
    assert outline_from_tracking([1.0, 2.0, 3.0]) is None


def test_tracking_values_become_closed_outline():
    outline = outline_from_tracking([50, 50, 150, 50, 150, 150, 50, 150])
    assert len(outline) == 4
    assert outline.contains((100.0, 100.0))


def test_trailing_unpaired_value_is_ignored():
    outline = outline_from_tracking([0, 0, 10, 0, 10, 10, 99])
    assert len(outline) == 3


def test_build_forces_defaults_to_configured_gravity():
    config = ParticleConfig(gravity=(0.0, 42.0))
    assert build_forces(None, config) == [Gravity((0.0, 42.0))]
    assert build_forces([], config) == []
    parsed = build_forces([{"type": "wind", "direction": [1, 0], "strength": 2}], config)
    assert parsed == [Wind((1.0, 0.0), 2.0, 0.0)]


def test_build_emitters_applies_overrides_over_config():
    config = ParticleConfig(spawn_rate=12.0, particle_lifetime=3.0)
    rng = np.random.default_rng(0)
    emitters = build_emitters(
        [{"position": [1.0, 2.0]}, {"position": [3.0, 4.0], "rate": 5.0, "enabled": False}],
        config, rng,
    )
    assert [e.rate for e in emitters] == [12.0, 5.0]
    assert [e.enabled for e in emitters] == [True, False]
    assert all(e.particle_lifetime == 3.0 for e in emitters)
    np.testing.assert_array_equal(emitters[1].position, [3.0, 4.0])
    assert emitters[0].rng is rng
