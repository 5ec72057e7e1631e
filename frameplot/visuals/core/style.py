"""Plot styling helpers for visuals."""

import matplotlib.pyplot as plt


def setup_axes_style(ax: plt.Axes, geom: str = "point") -> None:
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.spines["left"].set_linewidth(1.5)
    ax.spines["bottom"].set_linewidth(1.5)
    ax.spines["left"].set_color("grey")
    ax.spines["bottom"].set_color("grey")
    ax.grid(True, color="#e7eef9", linestyle="--", linewidth=0.8, alpha=0.7)
    ax.set_axisbelow(True)
    if geom == "bar":
        ax.grid(False, axis="x")
    ax.xaxis.labelpad = 8
    ax.yaxis.labelpad = 8
