import os
import json
import logging
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from lorentzsim.cli import run_cli
from lorentzsim.simulation.runner import SimulationLoop, run_simulation
from lorentzsim.physics.diagnostics import summarize
from lorentzsim.visualization.camera import CameraState
from lorentzsim.visualization.scene import compose_frame
from lorentzsim.visualization.canvas import render_to_file
from lorentzsim.visualization.plots import plot_energy_over_time, plot_trajectory_views
from lorentzsim.config import settings
from lorentzsim.config.settings import EXPORT_SIZE, RUN_ID_PREFIX

# --- Setup logger ------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-7s  %(message)s",
    datefmt="%H:%M:%S"
)
log = logging.getLogger("main")


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def save_json(obj: Any, name_prefix: str) -> str:
    out_dir = Path(getattr(settings, "OUTPUT_DIR", "outputs"))
    out_dir.mkdir(parents=True, exist_ok=True)
    filename = out_dir / f"{name_prefix}_{_timestamp()}.json"
    with open(filename, "w") as f:
        json.dump(obj, f, indent=2, default=lambda o: repr(o))
    return str(filename)


def export_run(params, steps: int) -> dict:
    """
    Headless run: simulate, save a rendered frame, diagnostic plots and a
    JSON summary. Returns the summary.
    """
    out_dir = getattr(settings, "OUTPUT_DIR", "outputs")
    os.makedirs(out_dir, exist_ok=True)

    final_state, records = run_simulation(params, steps)
    log.info("Simulated %d steps, t=%.2f", len(records), final_state.time)

    artifacts = {}
    width, height = EXPORT_SIZE
    frame = compose_frame(final_state, params, CameraState(), width, height)
    try:
        artifacts["frame"] = render_to_file(frame, os.path.join(out_dir, f"{RUN_ID_PREFIX}_{_timestamp()}_frame.png"))
        artifacts["energy_plot"] = plot_energy_over_time(records, out_dir)
        artifacts["trajectory_plot"] = plot_trajectory_views(final_state, out_dir)
    except (OSError, ValueError) as e:
        log.warning("Plotting failed: %s", e)

    summary = {
        "meta": {
            "dt": settings.DT,
            "steps_requested": steps,
            "steps_run": len(records),
            "halted": len(records) < steps,
            "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        },
        "params": {
            "mass": params.mass,
            "charge": params.charge,
            "velocity": list(params.velocity),
            "b_field": list(params.b_field),
        },
        "final_position": list(final_state.position),
        "final_velocity": list(final_state.velocity),
        "diagnostics": summarize(params, final_state),
        "artifacts": artifacts,
    }
    summary_file = save_json(summary, "run_summary")
    log.info("Saved run summary: %s", summary_file)
    return summary


def main():
    try:
        params, mode, steps = run_cli()
        log.info("Starting: mode=%s", mode)

        if mode == "export":
            export_run(params, int(steps))
            return

        # imported here so export mode works without a GUI backend
        from lorentzsim.visualization.animation import animate_simulation
        animate_simulation(SimulationLoop(params, playing=False))

    except Exception:
        log.error("Fatal exception during run:")
        traceback.print_exc()


if __name__ == "__main__":
    main()
