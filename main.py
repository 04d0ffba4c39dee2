# main.py
"""
Host driver for the particle engine.

This script plays the part of the embedding application:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Builds the particle system, its emitters and the force list.
4. Runs the frame loop: tick the system, ingest the tracked outline,
   rebuild the spatial grid and (optionally) draw a preview.
5. Logs a profile summary and shuts down.
"""
import logging
import time
from typing import Any, Dict, List, Optional, Sequence
from utils import setup_logging, load_config, FrameClock
import numpy as np
import cProfile
import pstats
import io

from collision import Outline
from constants import MAX_FRAME_DT, MIN_TRACKING_VALUES
from emitter import Emitter
from forces import Force, Gravity, forces_from_config
from particle import ParticleConfig


def outline_from_tracking(coords: Optional[Sequence[float]]) -> Optional[Outline]:
    """
    Turns flat tracker output [x0, y0, x1, y1, ...] into an Outline.

    Fewer than MIN_TRACKING_VALUES values means the tracker has no subject;
    that is reported as None rather than as a degenerate outline.
    """
    if coords is None or len(coords) < MIN_TRACKING_VALUES:
        return None
    values = np.asarray(coords, dtype=np.float64)
    # A trailing unpaired value is ignored.
    points = values[:len(values) - len(values) % 2].reshape(-1, 2)
    return Outline.from_points(points)


def build_emitters(
    entries: List[Dict[str, Any]], config: ParticleConfig, rng: np.random.Generator
) -> List[Emitter]:
    """Creates one emitter per `emitters` entry; omitted values use the config defaults."""
    emitters = []
    for entry in entries:
        overrides = {key: value for key, value in entry.items() if key != 'position'}
        emitters.append(Emitter.from_config(entry['position'], config, rng=rng, **overrides))
    return emitters


def build_forces(entries: Optional[List[Dict[str, Any]]], config: ParticleConfig) -> List[Force]:
    """Parses the force list, falling back to the configured default gravity."""
    if entries is None:
        return [Gravity(config.gravity)]
    return forces_from_config(entries)


def main():
    """
    The main function to run the particle engine.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Particle Engine Starting ---")

    run_params = config.get('run_control', {})
    grid_params = config.get('spatial_grid', {})
    vis_params = config.get('visualization', {})

    from simulation import ParticleSystem
    from spatial_grid import SpatialGrid

    # --- Component Initialization ---
    particle_config = ParticleConfig.from_dict(config.get('particle_config'))
    system = ParticleSystem(particle_config)

    rng = np.random.default_rng(run_params.get('seed'))
    for emitter in build_emitters(config.get('emitters', []), particle_config, rng):
        system.add_emitter(emitter)

    forces = build_forces(config.get('forces'), particle_config)
    outline = outline_from_tracking(config.get('outline', {}).get('points'))
    if outline is None:
        logging.info("No outline available from tracking input.")
    else:
        logging.info(f"Outline loaded with {len(outline)} segments.")

    world_width, world_height = grid_params.get('world_size', [1280, 720])
    grid = SpatialGrid(world_width, world_height, grid_params.get('cell_size', 32.0))

    visualizer = None
    if vis_params.get('enabled', False):
        from visualization import Visualizer
        visualizer = Visualizer(tuple(vis_params.get('window_size', (world_width, world_height))))

    profiler = cProfile.Profile()

    log_throttle = run_params.get('log_throttle_steps', 60)
    max_steps = run_params.get('max_steps', 600)
    fixed_dt = min(run_params.get('delta_time', 1.0 / 60.0), MAX_FRAME_DT)
    clock = FrameClock()

    running = True
    step_num = 0

    profiler.enable()
    while running:
        # A live preview follows the wall clock; headless runs use a fixed step.
        dt = clock.tick(time.perf_counter()) if visualizer is not None else fixed_dt

        system.update(dt, forces)
        step_num += 1

        positions = system.particles['position']
        grid.rebuild(positions, generation=system.generation)

        if visualizer is not None and not visualizer.draw(system, outline):
            running = False

        # Hot loops must throttle logs
        if step_num % log_throttle == 0:
            logging.info(f"Frame {step_num}/{max_steps}: {system.particle_count()} particles")
            if outline is not None and system.particle_count():
                inside = int(np.count_nonzero(outline.contains_points(positions)))
                logging.debug(f"Frame {step_num} | Particles inside outline: {inside}")
            if system.particle_count():
                centre = positions.mean(axis=0)
                nearby = grid.query_within(
                    centre, grid.cell_size, positions, generation=system.generation
                )
                logging.debug(f"Frame {step_num} | Particles near centre of mass: {len(nearby)}")

        if step_num >= max_steps:
            logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
            running = False
    profiler.disable()

    if visualizer is not None:
        visualizer.close()
    logging.info(f"Frame loop finished with {system.particle_count()} particles.")

    # --- Performance Profile Output ---
    logging.info("--- Performance Profile ---")
    s = io.StringIO()
    stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
    stats.print_stats(20)
    logging.info(f"\n{s.getvalue()}")

    logging.info("--- Particle Engine Shutting Down ---")


if __name__ == "__main__":
    main()
