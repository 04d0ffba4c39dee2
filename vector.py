# vector.py
"""
2D vector helpers.

Vectors are plain NumPy arrays whose last axis has length 2, so the same
helpers work on a single vector of shape (2,) and on a batch of shape
(N, 2). Addition, subtraction and scaling are NumPy's own operators; this
module adds the few operations that need a convention, most importantly
normalize-or-zero: a zero-length vector normalizes to the zero vector
instead of producing NaN.
"""
import numpy as np
from typing import Sequence, Union

VectorLike = Union[np.ndarray, Sequence[float]]

ZERO = np.zeros(2, dtype=np.float64)


def vec2(x: float, y: float) -> np.ndarray:
    """Builds a float64 vector of shape (2,)."""
    return np.array([x, y], dtype=np.float64)


def as_vectors(v: VectorLike) -> np.ndarray:
    """Converts a vector or a batch of vectors to a float64 array."""
    return np.asarray(v, dtype=np.float64)


def dot(a: VectorLike, b: VectorLike) -> np.ndarray:
    return np.sum(as_vectors(a) * as_vectors(b), axis=-1)


def length_squared(v: VectorLike) -> np.ndarray:
    v = as_vectors(v)
    return np.sum(v * v, axis=-1)


def length(v: VectorLike) -> np.ndarray:
    return np.sqrt(length_squared(v))


def distance(a: VectorLike, b: VectorLike) -> np.ndarray:
    return length(as_vectors(a) - as_vectors(b))


def normalize_or_zero(v: VectorLike) -> np.ndarray:
    """
    Returns the unit vector(s) pointing along `v`.

    Zero-length (or non-finite length) inputs map to the zero vector.
    """
    v = as_vectors(v)
    norm = np.sqrt(np.sum(v * v, axis=-1, keepdims=True))
    valid = (norm > 0.0) & np.isfinite(norm)
    safe_norm = np.where(valid, norm, 1.0)
    return np.where(valid, v / safe_norm, 0.0)


def reflect(velocity: VectorLike, normal: VectorLike) -> np.ndarray:
    """Reflects a velocity off a surface with the given unit normal."""
    velocity = as_vectors(velocity)
    normal = as_vectors(normal)
    return velocity - 2.0 * dot(velocity, normal)[..., np.newaxis] * normal


def clamp_length(v: VectorLike, max_length: float) -> np.ndarray:
    """Scales vectors longer than `max_length` back down to it."""
    v = as_vectors(v)
    norm = length(v)[..., np.newaxis]
    too_long = norm > max_length
    return np.where(too_long, normalize_or_zero(v) * max_length, v)


def lerp(a: VectorLike, b: VectorLike, t: float) -> np.ndarray:
    a = as_vectors(a)
    return a + (as_vectors(b) - a) * t
