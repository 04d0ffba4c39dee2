# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are fundamental to the engine itself, such as the fixed drag factor
of the integrator or the numeric thresholds used by the geometry code, and
are not part of the experimental configuration in `config.json`.
"""

# --- Physics ---
# Multiplicative velocity drag applied after every integration step.
# This is intentionally independent of ParticleConfig.drag_coefficient.
DRAG_FACTOR = 0.99
# Spatial frequency of the wind pseudo-turbulence (sin/cos of 0.1 * x).
TURBULENCE_FREQUENCY = 0.1
# Smoothing term of the attractor/repulsor falloff: strength / (d^2 + 1).
FIELD_SOFTENING = 1.0

# --- Geometry ---
# |r x s| below this value means the ray is parallel to the segment.
PARALLEL_EPSILON = 1e-4
# Distance past the right edge of the bounds where the containment ray ends.
RAY_OVERSHOOT = 1.0

# --- Frame clock ---
# dt used on the very first frame, before a previous timestamp exists.
FIRST_FRAME_DT = 0.016
# Upper bound on dt to keep integration error small at low frame rates.
MAX_FRAME_DT = 0.1

# --- Tracking input ---
# Fewer flat coordinate values than this is treated as "no outline".
MIN_TRACKING_VALUES = 4

# --- Preview settings ---
FPS = 60
WINDOW_SIZE = (1280, 720)
BACKGROUND_COLOR = (12, 12, 20)
OUTLINE_COLOR = (255, 120, 60)
# Alpha value for the motion blur effect (0-255). Lower is a longer trail.
MOTION_BLUR_ALPHA = 60
