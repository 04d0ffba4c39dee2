# simulation.py
"""
Per-frame orchestration of the particle population.

The ParticleSystem owns a fixed-capacity buffer of PARTICLE_DTYPE records
(sized once from `max_particles`) and the list of emitters. Each call to
`update` integrates the live particles, prunes the dead ones and then lets
every emitter top the population up to the capacity.
"""
import logging
import numpy as np
from typing import Iterable, List, Optional, Sequence, Union

from emitter import Emitter
from forces import Force
from particle import PARTICLE_DTYPE, Particle, ParticleConfig, integrate_particles

# --- Data Contracts ---
#
# class ParticleSystem:
#   - __init__(self, config: Optional[ParticleConfig] = None):
#     - Side Effects: Allocates a zeroed buffer of config.max_particles rows.
#
#   - update(self, dt: float, forces: Sequence[Force]) -> None:
#     - Side Effects, in this order:
#       1. integrates every live particle against `forces`;
#       2. removes every particle with life <= 0, keeping survivor order;
#       3. appends each emitter's spawns while below max_particles, the
#          excess of that frame is discarded.
#       Increments self.generation.
#     - Invariants:
#       - particle_count() <= config.max_particles.
#       - No live particle has life <= 0 after the call.
#       - Particles spawned in step 3 are not integrated until the next call.
#
#   - particles -> np.ndarray: read-only view of the live prefix of the buffer.


class ParticleSystem:
    """
    Owns the particle buffer and the emitters, and advances them per frame.
    """
    def __init__(self, config: Optional[ParticleConfig] = None):
        self.config = config if config is not None else ParticleConfig()
        self.emitters: List[Emitter] = []
        self._buffer = np.zeros(self.config.max_particles, dtype=PARTICLE_DTYPE)
        self._count = 0
        # Bumped whenever rows may have moved, been removed or been added.
        # Spatial grids record it at rebuild time to detect stale indices.
        self.generation = 0

        logging.info(
            f"ParticleSystem initialized with capacity {self.config.max_particles} "
            f"({PARTICLE_DTYPE.itemsize} bytes per particle)."
        )

    @property
    def particles(self) -> np.ndarray:
        """Live particles. The view is read-only and is invalidated by `update`."""
        view = self._buffer[:self._count]
        view.flags.writeable = False
        return view

    def particle_count(self) -> int:
        return self._count

    def add_emitter(self, emitter: Emitter) -> None:
        self.emitters.append(emitter)
        logging.debug(f"Emitter added; {len(self.emitters)} emitters registered.")

    def add_particles(self, new_particles: Union[np.ndarray, Particle, Iterable[Particle]]) -> int:
        """
        Appends particles created by the caller, in order, while below capacity.

        Returns the number of particles accepted; the rest are dropped.
        """
        records = self._as_records(new_particles)
        accepted = self._append(records)
        self.generation += 1
        return accepted

    def update(self, dt: float, forces: Sequence[Force]) -> None:
        """Advances the system by one frame of `dt` seconds."""
        live = self._buffer[:self._count]
        integrate_particles(live, dt, forces)

        alive = live['life'] > 0.0
        survivors = int(np.count_nonzero(alive))
        if survivors != self._count:
            self._buffer[:survivors] = live[alive]
            self._count = survivors

        for emitter in self.emitters:
            spawned = emitter.emit(dt)
            if len(spawned):
                self._append(spawned)

        self.generation += 1

    def clear(self) -> None:
        """Removes every particle; emitters are kept."""
        self._count = 0
        self.generation += 1

    def as_bytes(self) -> memoryview:
        """Byte snapshot of the live particles, stride PARTICLE_DTYPE.itemsize."""
        return memoryview(self._buffer[:self._count].tobytes())

    def _append(self, records: np.ndarray) -> int:
        free = self.config.max_particles - self._count
        accepted = min(free, len(records))
        if accepted > 0:
            self._buffer[self._count:self._count + accepted] = records[:accepted]
            self._count += accepted
        return accepted

    @staticmethod
    def _as_records(new_particles: Union[np.ndarray, Particle, Iterable[Particle]]) -> np.ndarray:
        if isinstance(new_particles, np.ndarray):
            return new_particles.astype(PARTICLE_DTYPE, copy=False)
        if isinstance(new_particles, Particle):
            return new_particles.record
        rows = [particle.record for particle in new_particles]
        if not rows:
            return np.zeros(0, dtype=PARTICLE_DTYPE)
        return np.concatenate(rows)
