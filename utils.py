# utils.py
"""
Utility functions for the particle engine.

Logging setup, configuration loading and the frame clock: helpers shared by
the host driver and the tests that do not belong to the physics or
geometry modules.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any, Optional

from constants import FIRST_FRAME_DT, MAX_FRAME_DT

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary with an optional "logging" key holding
#       "level", "format" and "log_file". A null "log_file" disables the
#       file handler.
#   - Side Effects: Replaces the root logger's handlers with a console
#     handler and, if enabled, a rotating file handler (1MB x 5).
#
# class FrameClock:
#   - tick(self, timestamp: float) -> float:
#     - Inputs: a monotonically increasing timestamp in seconds.
#     - Outputs: dt in seconds, FIRST_FRAME_DT on the first call and never
#       more than max_dt afterwards.

def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the root logger from the "logging" section of the config.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/particles.log')

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=1024*1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path}")

def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
        logging.info("Configuration loaded successfully.")
        return config
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise


class FrameClock:
    """
    Converts host timestamps into clamped simulation time steps.
    """
    def __init__(self, max_dt: float = MAX_FRAME_DT, first_dt: float = FIRST_FRAME_DT):
        self.max_dt = max_dt
        self.first_dt = first_dt
        self._last_timestamp: Optional[float] = None

    def tick(self, timestamp: float) -> float:
        if self._last_timestamp is None:
            dt = self.first_dt
        else:
            dt = min(max(timestamp - self._last_timestamp, 0.0), self.max_dt)
        self._last_timestamp = timestamp
        return dt
