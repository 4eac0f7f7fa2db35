# lorentzsim/cli.py
import math

import numpy as np

from lorentzsim.physics.params import SimulationParams, InvalidParameterError
from lorentzsim.physics.vector import Vector3
from lorentzsim.config import settings
from lorentzsim.config.settings import (
    DEFAULT_MASS,
    DEFAULT_CHARGE,
    DEFAULT_VELOCITY,
    DEFAULT_B_FIELD,
    get_export_steps,
)


def _to_3d_array(v):
    """Pad a scalar or short sequence to a (3,) float array; zeros fill the rest."""
    arr = np.atleast_1d(np.asarray(v, dtype=float))
    if arr.ndim != 1 or arr.size > 3:
        raise ValueError(f"Cannot coerce {v!r} to 3D vector")
    return np.concatenate([arr, np.zeros(3 - arr.size)])


def _ask(prompt, default, parse, error):
    """
    Prompt until parse() accepts the answer. Enter or EOF gives the default.
    parse raises ValueError to reject.
    """
    while True:
        try:
            user = input(prompt)
        except EOFError:
            return default
        if user.strip() == "" and default is not None:
            return default
        try:
            return parse(user)
        except (ValueError, TypeError):
            print(f"❌ {error}")


def _finite_float(text):
    val = float(text)
    if not math.isfinite(val):
        raise ValueError(text)
    return val


def get_float(prompt, default=None):
    """Finite float from stdin; non-interactive runs get the default."""
    default = float(default) if default is not None else None
    return _ask(prompt, default, _finite_float, "Please enter a valid number.")


def get_int(prompt, default=None, min_val=None, max_val=None):
    def parse(text):
        val = int(text)
        if (min_val is not None and val < min_val) or (max_val is not None and val > max_val):
            raise ValueError
        return val
    default = int(default) if default is not None else None
    return _ask(prompt, default, parse, "Invalid integer input.")


def get_vector(prompt, default):
    """
    Read "x y z" (spaces or commas); missing trailing components are 0.
    """
    def parse(text):
        parts = [_finite_float(p) for p in text.replace(",", " ").split()]
        if not parts:
            raise ValueError
        return Vector3.from_array(_to_3d_array(parts))

    default_txt = " ".join(f"{c:g}" for c in default)
    return _ask(f"{prompt} [default {default_txt}]: ", Vector3(*default), parse,
                "Please enter up to three numbers, e.g. 5 0 2")


def choose_mode():
    """
    Choose run mode.
      1 -> INTERACTIVE (window with controls) [recommended]
      2 -> EXPORT (headless run, images + JSON summary)
    """
    print("\n⚙️  Run Mode")
    print("  1) INTERACTIVE (Recommended) — 3D window with controls")
    print("  2) EXPORT — headless run, saves images and summary")

    try:
        choice = input("Select mode [1]: ").strip()
    except EOFError:
        choice = ""

    if choice == "2":
        return "export"
    return "interactive"


def create_params():
    print("\n🧲 Particle & Field Configuration")

    while True:
        charge = get_float(f"Charge q [default {DEFAULT_CHARGE}]: ", default=DEFAULT_CHARGE)
        mass = get_float(f"Mass m (> 0) [default {DEFAULT_MASS}]: ", default=DEFAULT_MASS)
        velocity = get_vector("Velocity v (x y z)", DEFAULT_VELOCITY)
        b_field = get_vector("Magnetic field B (x y z)", DEFAULT_B_FIELD)
        try:
            params = SimulationParams(mass=mass, charge=charge, velocity=velocity, b_field=b_field).validate()
        except InvalidParameterError as e:
            print(f"❌ {e}")
            continue
        break

    print(f"✔ q={params.charge:g}, m={params.mass:g}, v={tuple(params.velocity)}, B={tuple(params.b_field)}")
    return params


def ask_steps(default=None):
    """
    Ask for the number of steps of a headless run.
    """
    if default is None:
        default = getattr(settings, "EXPORT_STEPS", 1000)
    val = get_int(f"\nSteps to simulate [default {int(default)}]: ", default=default, min_val=1)
    return get_export_steps(val)


def run_cli():
    print("======================================")
    print("   LORENTZ FORCE SIMULATOR (CLI)      ")
    print("======================================")

    params = create_params()
    mode = choose_mode()

    steps = None
    if mode == "export":
        steps = ask_steps()

    print("\n✅ CLI input complete.")
    print(f"→ Mode: {mode}")
    if steps is not None:
        print(f"→ Steps: {steps} (dt={settings.DT})")

    return params, mode, steps
