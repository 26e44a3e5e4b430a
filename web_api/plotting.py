"""Tempo Trace Plotting Utilities.

Generate visualizations of the estimated tempo and confidence over a tap
sequence, against the ground truth tempo.
"""

import io

import matplotlib.pyplot as plt
import numpy as np


def generate_tempo_plot(
    sequence_name: str,
    tap_times: list[float],
    bpms: list[float],
    confidences: list[float],
    expected_bpm: float,
    tolerance_bpm: float = 2.0,
    accepted: list[bool] | None = None,
) -> bytes:
    """Generate a plot of the BPM trace with the expected tempo and confidence.

    Args:
        sequence_name: Name of the tap sequence
        tap_times: Tap timestamps in seconds
        bpms: Estimated BPM after each tap
        confidences: Confidence after each tap
        expected_bpm: Ground truth tempo
        tolerance_bpm: Half-width of the accepted band around the truth
        accepted: Whether each tap entered the history (rejected taps are marked)

    Returns:
        Bytes of the generated PNG image
    """
    fig, (ax_bpm, ax_conf) = plt.subplots(
        2, 1, figsize=(10, 5), height_ratios=[2, 1], sharex=True
    )

    times = np.asarray(tap_times, dtype=float)
    bpm_values = np.asarray(bpms, dtype=float)

    # --- Top subplot: tempo ---
    ax_bpm.axhspan(
        expected_bpm - tolerance_bpm,
        expected_bpm + tolerance_bpm,
        color="green",
        alpha=0.15,
        label="Tolerance",
    )
    ax_bpm.axhline(expected_bpm, color="green", linestyle="-", label="Ground Truth")
    ax_bpm.plot(times, bpm_values, color="steelblue", marker="o", markersize=3, label="Estimate")

    if accepted is not None and len(times) > 1:
        # The first tap has no interval to judge
        rejected = [i for i, ok in enumerate(accepted) if not ok and i > 0]
        if rejected:
            ax_bpm.scatter(
                times[rejected],
                bpm_values[rejected],
                color="red",
                marker="x",
                zorder=3,
                label="Rejected Tap",
            )

    ax_bpm.set_title(f"Tempo Trace: {sequence_name}")
    ax_bpm.set_ylabel("BPM")
    ax_bpm.legend(loc="upper right", fontsize=8)
    ax_bpm.grid(True, alpha=0.3)

    # --- Bottom subplot: confidence ---
    ax_conf.step(times, confidences, where="post", color="darkorange")
    ax_conf.set_ylim(-0.05, 1.05)
    ax_conf.set_xlabel("Time (s)")
    ax_conf.set_ylabel("Confidence")
    ax_conf.grid(True, alpha=0.3)

    plt.tight_layout()

    # Save to buffer
    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=100)
    plt.close(fig)

    buf.seek(0)
    return buf.getvalue()
