# particle.py
"""
Particle record layout and the per-step integration rule.

Particles are stored as rows of a NumPy structured array with a fixed,
explicit layout (PARTICLE_DTYPE). The rendering side reads that array as a
raw instance buffer, so field order and sizes must not change. The
integration rule is written once, vectorised over any number of rows, and
is shared by single `Particle` objects and the whole `ParticleSystem`.
"""
import logging
import numpy as np
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Sequence, Tuple

from constants import DRAG_FACTOR
from forces import Force, evaluate_field
from vector import VectorLike

# --- Data Contracts ---
#
# PARTICLE_DTYPE (64 bytes, little-endian float32 fields, no implicit padding):
#   offset  0  position   2 x f4
#   offset  8  velocity   2 x f4
#   offset 16  life       f4   (seconds remaining; alive while > 0)
#   offset 20  size       f4
#   offset 24  color      4 x f4 (RGBA)
#   offset 40  mass       f4
#   offset 44  _padding   3 x f4 (zero; rounds the record up to 64 bytes)
#
# integrate_particles(particles: np.ndarray, dt: float, forces: Sequence[Force]) -> None:
#   - Inputs:
#     - particles: structured array of PARTICLE_DTYPE, any length.
#     - dt: time step in seconds.
#     - forces: read-only force list.
#   - Outputs: None
#   - Side Effects: Updates position, velocity and life in place.
#   - Invariants: Rows are independent of one another.

PARTICLE_DTYPE = np.dtype({
    'names': ['position', 'velocity', 'life', 'size', 'color', 'mass', '_padding'],
    'formats': [('<f4', (2,)), ('<f4', (2,)), '<f4', '<f4', ('<f4', (4,)), '<f4', ('<f4', (3,))],
    'offsets': [0, 8, 16, 20, 24, 40, 44],
    'itemsize': 64,
})

DEFAULT_MASS = 1.0


def make_particles(
    positions: VectorLike,
    velocities: VectorLike,
    life: Any,
    size: Any,
    colors: Any,
    mass: Any = DEFAULT_MASS,
) -> np.ndarray:
    """
    Builds a structured array of new particles.

    `positions` and `velocities` have shape (N, 2) and `colors` (N, 4);
    the scalar fields broadcast, so a single lifetime can be given for all.
    """
    positions = np.asarray(positions, dtype=np.float32).reshape(-1, 2)
    count = positions.shape[0]
    particles = np.zeros(count, dtype=PARTICLE_DTYPE)
    particles['position'] = positions
    particles['velocity'] = np.asarray(velocities, dtype=np.float32).reshape(-1, 2)
    particles['life'] = life
    particles['size'] = size
    particles['color'] = np.asarray(colors, dtype=np.float32).reshape(-1, 4)
    particles['mass'] = mass
    return particles


def integrate_particles(particles: np.ndarray, dt: float, forces: Sequence[Force]) -> None:
    """
    Advances every row of `particles` by one semi-implicit Euler step.

    Velocity is updated first from the summed force / mass, the position is
    then advanced with that new velocity, and finally the fixed drag factor
    is applied to the velocity and `dt` is taken off the remaining life.
    """
    if len(particles) == 0:
        return

    positions = particles['position'].astype(np.float64)
    total_force = np.zeros_like(positions)
    for force in forces:
        total_force += evaluate_field(force, positions)

    acceleration = total_force / particles['mass'].astype(np.float64)[:, np.newaxis]
    velocities = particles['velocity'] + acceleration * dt

    particles['position'] = positions + velocities * dt
    particles['velocity'] = velocities * DRAG_FACTOR
    particles['life'] -= np.float32(dt)


class Particle:
    """
    A single particle, backed by a one-row structured array.

    Useful for callers that create particles one at a time; the system
    itself works on whole arrays.
    """
    __slots__ = ('record',)

    def __init__(
        self,
        position: VectorLike,
        velocity: VectorLike,
        life: float,
        size: float,
        color: Sequence[float],
        mass: float = DEFAULT_MASS,
    ):
        self.record = make_particles([position], [velocity], life, size, [color], mass)

    @classmethod
    def from_record(cls, record: np.ndarray) -> "Particle":
        """Wraps a copy of a single PARTICLE_DTYPE row."""
        particle = cls.__new__(cls)
        particle.record = np.array(record, dtype=PARTICLE_DTYPE).reshape(1)
        return particle

    def update(self, dt: float, forces: Sequence[Force]) -> None:
        integrate_particles(self.record, dt, forces)

    def is_alive(self) -> bool:
        return bool(self.record['life'][0] > 0.0)

    def pos(self) -> np.ndarray:
        return self.record['position'][0].astype(np.float64)

    def vel(self) -> np.ndarray:
        return self.record['velocity'][0].astype(np.float64)

    @property
    def life(self) -> float:
        return float(self.record['life'][0])

    @property
    def size(self) -> float:
        return float(self.record['size'][0])

    @property
    def mass(self) -> float:
        return float(self.record['mass'][0])

    @property
    def color(self) -> Tuple[float, float, float, float]:
        return tuple(float(c) for c in self.record['color'][0])

    def __repr__(self) -> str:
        x, y = self.pos()
        return f"Particle(pos=({x:.2f}, {y:.2f}), life={self.life:.3f})"


@dataclass(frozen=True)
class ParticleConfig:
    """
    Per-system configuration.

    `drag_coefficient` is carried for callers but is not used by
    `integrate_particles`, which applies the fixed DRAG_FACTOR.
    """
    max_particles: int = 10000
    spawn_rate: float = 500.0
    particle_lifetime: float = 5.0
    particle_size: float = 3.0
    gravity: Tuple[float, float] = (0.0, 100.0)
    drag_coefficient: float = 0.99

    def __post_init__(self):
        if self.max_particles <= 0:
            msg = f"Configuration error: max_particles must be positive, got {self.max_particles}."
            logging.critical(msg)
            raise ValueError(msg)

    @classmethod
    def from_dict(cls, params: Optional[Dict[str, Any]]) -> "ParticleConfig":
        """Reads the `particle_config` section; missing keys keep their defaults."""
        params = params or {}
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in params.items() if key in known}
        if 'gravity' in values:
            gx, gy = values['gravity']
            values['gravity'] = (float(gx), float(gy))
        ignored = sorted(set(params) - known)
        if ignored:
            logging.warning(f"Ignoring unknown particle_config keys: {ignored}")
        return cls(**values)
