import json

import pytest

from utils import FrameClock, load_config


def test_frame_clock_first_frame_and_cap():
    clock = FrameClock()
    assert clock.tick(10.0) == pytest.approx(0.016)
    assert clock.tick(10.02) == pytest.approx(0.02)
    assert clock.tick(12.0) == pytest.approx(0.1)
    assert clock.tick(11.0) == 0.0


def test_load_config_round_trip(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"particle_config": {"max_particles": 7}}))
    assert load_config(str(path)) == {"particle_config": {"max_particles": 7}}


def test_load_config_errors_propagate(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.json"))
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    with pytest.raises(json.JSONDecodeError):
        load_config(str(broken))
