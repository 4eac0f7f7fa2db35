import os
import matplotlib.pyplot as plt
from lorentzsim.config.settings import OUTPUT_DIR


def plot_energy_over_time(records, output_dir=OUTPUT_DIR):
    """
    Plot speed and kinetic energy vs time. Both should stay flat: the
    magnetic force does no work, so any slope is integrator drift.
    """
    os.makedirs(output_dir, exist_ok=True)

    times = [r["time"] for r in records]
    speeds = [r["speed"] for r in records]
    energies = [r["kinetic_energy"] for r in records]

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(10, 6), sharex=True)
    ax1.plot(times, speeds)
    ax1.set_ylabel("|v|")
    ax1.set_title("Speed and Kinetic Energy Over Time")
    ax2.plot(times, energies, color="tab:orange")
    ax2.set_ylabel("Kinetic Energy")
    ax2.set_xlabel("Time")

    save_path = os.path.join(output_dir, "energy_over_time.png")
    fig.tight_layout()
    fig.savefig(save_path)
    plt.close(fig)

    print(f"[OK] Saved: {save_path}")
    return save_path


def plot_trajectory_views(state, output_dir=OUTPUT_DIR):
    """
    Plot the trajectory history projected on the XY, XZ and YZ planes.
    """
    os.makedirs(output_dir, exist_ok=True)

    pts = state.history_array()

    fig, axes = plt.subplots(1, 3, figsize=(15, 5))
    for ax, (i, j), name in zip(axes, [(0, 1), (0, 2), (1, 2)], ["XY", "XZ", "YZ"]):
        if len(pts):
            ax.plot(pts[:, i], pts[:, j], color="#0891b2", linewidth=1)
            ax.plot(pts[-1, i], pts[-1, j], "o", color="#ef4444")
        ax.set_xlabel(name[0])
        ax.set_ylabel(name[1])
        ax.set_title(f"{name} plane")
        ax.set_aspect("equal", adjustable="datalim")

    save_path = os.path.join(output_dir, "trajectory_views.png")
    fig.tight_layout()
    fig.savefig(save_path)
    plt.close(fig)

    print(f"[OK] Saved: {save_path}")
    return save_path
