# spatial_grid.py
"""
Uniform hash grid for broad-phase proximity queries.

The grid maps integer cell coordinates to lists of particle indices. It
stores indices only: they point into the particle array as it was when
the grid was filled, and become stale as soon as that array is pruned or
refilled. Rebuild the grid after every `ParticleSystem.update` before
querying it. Passing the system's `generation` to `rebuild` and to the
queries turns a forgotten rebuild into a StaleGridError instead of silently
wrong indices.
"""
import logging
import math
import numpy as np
from typing import Dict, List, Optional, Tuple

from vector import VectorLike, as_vectors

# --- Data Contracts ---
#
# class SpatialGrid:
#   - query_nearby(self, position, radius, generation=None) -> List[int]:
#     - Outputs: every index stored in the (2k+1) x (2k+1) block of cells
#       around the cell of `position`, k = ceil(radius / cell_size), in cell
#       order then insertion order.
#     - Invariants: Any index inserted at a point within `radius` of
#       `position` is returned (no false negatives). Indices from farther
#       away may also be returned; filter them with an exact distance test,
#       or use query_within.
#   - Not safe for concurrent inserts.

Cell = Tuple[int, int]


class StaleGridError(RuntimeError):
    """Raised when a grid is queried against a newer particle generation."""


class SpatialGrid:
    """
    Sparse uniform grid: only cells that received an index are stored.
    """
    def __init__(self, width: float, height: float, cell_size: float):
        if cell_size <= 0:
            msg = f"Configuration error: cell_size must be positive, got {cell_size}."
            logging.critical(msg)
            raise ValueError(msg)

        self.width = width
        self.height = height
        self.cell_size = float(cell_size)
        self.cells: Dict[Cell, List[int]] = {}
        self.generation: Optional[int] = None

        logging.info(
            f"Spatial grid created for a {width}x{height} world, "
            f"cell size {self.cell_size:.2f}px "
            f"(~{math.ceil(width / self.cell_size)}x{math.ceil(height / self.cell_size)} cells)."
        )

    def cell_of(self, position: VectorLike) -> Cell:
        x, y = as_vectors(position)
        return (math.floor(x / self.cell_size), math.floor(y / self.cell_size))

    def clear(self) -> None:
        self.cells.clear()
        self.generation = None

    def insert(self, index: int, position: VectorLike) -> None:
        self.cells.setdefault(self.cell_of(position), []).append(index)
        self.generation = None

    def rebuild(self, positions: VectorLike, generation: Optional[int] = None) -> None:
        """Clears the grid and inserts row i of `positions` as index i."""
        self.cells.clear()
        positions = np.asarray(positions, dtype=np.float64).reshape(-1, 2)
        cell_coords = np.floor(positions / self.cell_size).astype(np.int64)
        for index, (cx, cy) in enumerate(cell_coords.tolist()):
            self.cells.setdefault((cx, cy), []).append(index)
        self.generation = generation

    def query_nearby(
        self, position: VectorLike, radius: float, generation: Optional[int] = None
    ) -> List[int]:
        """Broad-phase candidates around `position`; may include far indices."""
        self._check_generation(generation)
        cell_radius = math.ceil(radius / self.cell_size)
        center_x, center_y = self.cell_of(position)

        result: List[int] = []
        for dy in range(-cell_radius, cell_radius + 1):
            for dx in range(-cell_radius, cell_radius + 1):
                indices = self.cells.get((center_x + dx, center_y + dy))
                if indices:
                    result.extend(indices)
        return result

    def query_within(
        self,
        position: VectorLike,
        radius: float,
        positions: VectorLike,
        generation: Optional[int] = None,
    ) -> List[int]:
        """Indices whose point in `positions` lies within `radius` of `position`."""
        candidates = self.query_nearby(position, radius, generation)
        if not candidates:
            return []
        positions = np.asarray(positions, dtype=np.float64).reshape(-1, 2)
        offsets = positions[candidates] - as_vectors(position)
        dist_sq = np.sum(offsets * offsets, axis=1)
        return [index for index, hit in zip(candidates, dist_sq <= radius * radius) if hit]

    def __len__(self) -> int:
        return sum(len(indices) for indices in self.cells.values())

    def _check_generation(self, generation: Optional[int]) -> None:
        if generation is not None and generation != self.generation:
            raise StaleGridError(
                f"Grid was built for generation {self.generation}, "
                f"queried with generation {generation}; rebuild it first."
            )
