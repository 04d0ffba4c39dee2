# forces.py
"""
Force fields acting on particles.

A force is one of a closed set of immutable variants (Gravity, Wind,
Attractor, Repulsor). Each is a pure function of position: evaluating it
never mutates it, so the same list can be shared by every particle in a
frame. All evaluation goes through `evaluate_field`, which accepts either a
single position of shape (2,) or a batch of shape (N, 2).
"""
import logging
import numpy as np
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple, Union

from constants import FIELD_SOFTENING, TURBULENCE_FREQUENCY
from vector import VectorLike, as_vectors, normalize_or_zero

# --- Data Contracts ---
#
# evaluate_field(force: Force, positions: VectorLike) -> np.ndarray:
#   - Inputs:
#     - force: one of Gravity, Wind, Attractor, Repulsor.
#     - positions: shape (2,) or (N, 2).
#   - Outputs: float64 array with the same shape as `positions`.
#   - Side Effects: None.
#   - Invariants: Never returns NaN for finite inputs. Attractor and
#     Repulsor return zero at the anchor and outside their radius.

Vector2 = Tuple[float, float]


@dataclass(frozen=True)
class Gravity:
    """Constant acceleration, independent of position."""
    vector: Vector2

    def evaluate_at(self, position: VectorLike) -> np.ndarray:
        return evaluate_field(self, position)


@dataclass(frozen=True)
class Wind:
    """
    Directional push with a cheap, deterministic pseudo-turbulence.

    The turbulence term is (sin(0.1 x), cos(0.1 y)) * turbulence, so the
    wind varies smoothly across space. It is not physically based.
    """
    direction: Vector2
    strength: float
    turbulence: float = 0.0

    def evaluate_at(self, position: VectorLike) -> np.ndarray:
        return evaluate_field(self, position)


@dataclass(frozen=True)
class Attractor:
    """Pulls towards `position` within `radius`, strength / (d^2 + 1)."""
    position: Vector2
    strength: float
    radius: float

    def evaluate_at(self, position: VectorLike) -> np.ndarray:
        return evaluate_field(self, position)


@dataclass(frozen=True)
class Repulsor:
    """Pushes away from `position` within `radius`, strength / (d^2 + 1)."""
    position: Vector2
    strength: float
    radius: float

    def evaluate_at(self, position: VectorLike) -> np.ndarray:
        return evaluate_field(self, position)


Force = Union[Gravity, Wind, Attractor, Repulsor]


def _point_field(offset: np.ndarray, strength: float, radius: float) -> np.ndarray:
    """Inverse-square falloff along `offset`, zero outside radius or at d == 0."""
    dist_sq = np.sum(offset * offset, axis=-1)
    inside = (dist_sq < radius * radius) & (dist_sq > 0.0)
    magnitude = np.where(inside, strength / (dist_sq + FIELD_SOFTENING), 0.0)
    return normalize_or_zero(offset) * magnitude[..., np.newaxis]


def evaluate_field(force: Force, positions: VectorLike) -> np.ndarray:
    """
    Evaluates `force` at one or many positions.

    This is the only place that knows the variants: a new kind of force
    needs a dataclass above and a branch here.
    """
    positions = as_vectors(positions)

    if isinstance(force, Gravity):
        return np.broadcast_to(as_vectors(force.vector), positions.shape).copy()

    if isinstance(force, Wind):
        base = normalize_or_zero(force.direction) * force.strength
        turbulence = np.stack(
            [
                np.sin(positions[..., 0] * TURBULENCE_FREQUENCY),
                np.cos(positions[..., 1] * TURBULENCE_FREQUENCY),
            ],
            axis=-1,
        ) * force.turbulence
        return base + turbulence

    if isinstance(force, Attractor):
        return _point_field(as_vectors(force.position) - positions, force.strength, force.radius)

    if isinstance(force, Repulsor):
        return _point_field(positions - as_vectors(force.position), force.strength, force.radius)

    raise TypeError(f"Unsupported force type: {type(force).__name__}")


def gravity(x: float, y: float) -> Gravity:
    return Gravity((float(x), float(y)))


def wind(direction: VectorLike, strength: float) -> Wind:
    """Wind without turbulence."""
    dx, dy = direction
    return Wind((float(dx), float(dy)), float(strength), 0.0)


def attractor(position: VectorLike, strength: float, radius: float) -> Attractor:
    px, py = position
    return Attractor((float(px), float(py)), float(strength), float(radius))


def repulsor(position: VectorLike, strength: float, radius: float) -> Repulsor:
    px, py = position
    return Repulsor((float(px), float(py)), float(strength), float(radius))


def force_from_dict(params: Dict[str, Any]) -> Force:
    """Builds a force from a `forces` entry of config.json."""
    kind = params.get('type')
    if kind == 'gravity':
        x, y = params['vector']
        return gravity(x, y)
    if kind == 'wind':
        dx, dy = params['direction']
        return Wind((float(dx), float(dy)), float(params['strength']), float(params.get('turbulence', 0.0)))
    if kind == 'attractor':
        return attractor(params['position'], params['strength'], params['radius'])
    if kind == 'repulsor':
        return repulsor(params['position'], params['strength'], params['radius'])

    msg = f"Configuration error: unknown force type {kind!r}."
    logging.critical(msg)
    raise ValueError(msg)


def forces_from_config(entries: List[Dict[str, Any]]) -> List[Force]:
    forces = [force_from_dict(entry) for entry in entries]
    logging.debug(f"Parsed {len(forces)} forces from configuration.")
    return forces
