"""
Project settings (constants + small helpers).
Units are scaled simulation units: world units for length, time units for
time. Screen quantities are pixels.
"""
from __future__ import annotations

import math
import os
from typing import Optional

# Paths
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
OUTPUT_DIR = os.path.join(BASE_DIR, "outputs")

# Run
VALIDATE_ON_IMPORT = False
RUN_ID_PREFIX = "run"

# Integrator
DT = 0.05
BOUNDS_LIMIT = 320.0
TRAIL_LENGTH = 3000

# Default parameters (the initial state of the control panel)
DEFAULT_MASS = 2.0
DEFAULT_CHARGE = 1.0
DEFAULT_VELOCITY = (5.0, 0.0, 2.0)
DEFAULT_B_FIELD = (0.0, 0.0, 2.0)

# Control ranges: (min, max, step)
CHARGE_RANGE = (-5.0, 5.0, 0.5)
MASS_RANGE = (0.5, 10.0, 0.5)
VELOCITY_RANGE = (-20.0, 20.0, 0.5)
B_FIELD_RANGE = (-5.0, 5.0, 0.1)

# Camera
CAMERA_DISTANCE = 400.0
FOV = 600.0
SCREEN_OFFSET_X = 100.0  # room for the control panel overlay
PITCH_MIN = -math.pi / 2
PITCH_MAX = math.pi / 2
ZOOM_MIN = 0.1
ZOOM_MAX = 5.0
DEFAULT_PITCH = 0.3
DEFAULT_YAW = -math.pi / 2
DEFAULT_ZOOM = 1.2
DRAG_SENSITIVITY = 0.005  # rad per pixel
WHEEL_SENSITIVITY = 0.001  # zoom per wheel delta unit
WHEEL_DELTA_PER_STEP = 100.0  # browser-style delta for one wheel notch

# Scene
AXIS_DRAW_EXTENT = 100_000.0
LABEL_PADDING = 25.0
CULL_PADDING = 50.0
FIELD_GRID_SPACING = 120.0
FIELD_GRID_COUNT = 4  # -4..4 -> 9 samples per axis
FIELD_MIN_MAGNITUDE = 0.1
FIELD_ARROW_SCALE = 8.0
FIELD_ARROW_HEAD = 10.0
VELOCITY_ARROW_SCALE = 0.6
VELOCITY_ARROW_HEAD = 5.0
ARROW_MIN_MAGNITUDE = 0.1
ARROW_HEAD_ANGLE = math.pi / 12
ARROW_SHAFT_WIDTH = 0.5
PARTICLE_RADIUS = 2.0
TRAJECTORY_WIDTH = 2.0

# Colors
BACKGROUND_INNER = "#1e293b"
BACKGROUND_OUTER = "#020617"
AXIS_COLOR = "#475569"
AXIS_LABEL_COLORS = {"X": "#f87171", "Y": "#4ade80", "Z": "#60a5fa"}
FIELD_ARROW_COLOR = (148 / 255, 163 / 255, 184 / 255, 0.15)
TRAJECTORY_COLOR = "#22d3ee"
VELOCITY_COLOR = "#facc15"
POSITIVE_COLOR = "#ef4444"
NEGATIVE_COLOR = "#3b82f6"
NEUTRAL_COLOR = "#94a3b8"
HUD_COLOR = "#64748b"

# Window / animation
WINDOW_SIZE = (12.0, 8.0)  # inches
WINDOW_DPI = 100
FRAME_INTERVAL_MS = 16

# Headless export
EXPORT_STEPS = 1000
EXPORT_SIZE = (1200, 800)  # pixels

# Explain service
EXPLAIN_API_KEY_ENV = "GEMINI_API_KEY"
EXPLAIN_API_KEY_FALLBACK_ENV = "API_KEY"
EXPLAIN_MODEL = "gemini-3-flash-preview"
EXPLAIN_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
EXPLAIN_TIMEOUT_SEC = 30.0


def clamp(value: float, lo: float, hi: float) -> float:
    return max(float(lo), min(float(hi), float(value)))


def clamp_pitch(val: float) -> float:
    return clamp(val, PITCH_MIN, PITCH_MAX)


def clamp_zoom(val: float) -> float:
    return clamp(val, ZOOM_MIN, ZOOM_MAX)


def get_export_steps(val: Optional[int] = None) -> int:
    out = EXPORT_STEPS if val is None else int(val)
    return max(1, out)


def validate_settings() -> None:
    if DT <= 0:
        raise ValueError("DT must be > 0")
    if BOUNDS_LIMIT <= 0:
        raise ValueError("BOUNDS_LIMIT must be > 0")
    if TRAIL_LENGTH <= 0:
        raise ValueError("TRAIL_LENGTH must be > 0")
    if DEFAULT_MASS <= 0:
        raise ValueError("DEFAULT_MASS must be > 0")
    if MASS_RANGE[0] <= 0:
        raise ValueError("MASS_RANGE must start above 0")
    if ZOOM_MIN <= 0 or ZOOM_MAX < ZOOM_MIN:
        raise ValueError("ZOOM_MIN must be > 0 and ZOOM_MAX >= ZOOM_MIN")
    if PITCH_MAX < PITCH_MIN:
        raise ValueError("PITCH_MAX must be >= PITCH_MIN")
    if CAMERA_DISTANCE <= 0 or FOV <= 0:
        raise ValueError("CAMERA_DISTANCE and FOV must be > 0")
    if FIELD_GRID_COUNT < 0 or FIELD_GRID_SPACING <= 0:
        raise ValueError("field grid must have COUNT >= 0 and SPACING > 0")
    if EXPLAIN_TIMEOUT_SEC <= 0:
        raise ValueError("EXPLAIN_TIMEOUT_SEC must be > 0")


if VALIDATE_ON_IMPORT:
    validate_settings()
