"""
Convergence plots for interior-point solves.

Plots the relative duality gap and the duality measure μ per iteration on
a log scale, from the ``history`` of a LinIpm solve.
"""

from pathlib import Path
from typing import List, Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from ..lp.linipm import IterationRecord


def plot_convergence(
    history: List[IterationRecord],
    output: Optional[Path] = None,
    dpi: int = 150,
    show: bool = False,
    title: Optional[str] = None,
) -> plt.Figure:
    """
    Plot relative error and μ against the iteration number.

    Parameters
    ----------
    history : list of IterationRecord
        Iteration trace of a solve (``LinIpm.history``).
    output : Path, optional
        Save figure to this path (.png or .pdf).
    dpi : int
        Resolution for PNG output.
    show : bool
        Display plot interactively.
    title : str, optional
        Figure title.

    Returns
    -------
    matplotlib.figure.Figure
    """
    if not history:
        raise ValueError("Empty iteration history")

    its = np.array([rec.it for rec in history])
    err = np.array([rec.error for rec in history])
    mu = np.array([rec.mu for rec in history])

    fig, ax = plt.subplots(figsize=(7, 4.5))

    # Zero values cannot be drawn on a log axis
    tiny = np.finfo(float).tiny
    ax.semilogy(its, np.maximum(err, tiny), "b-o", markersize=4,
                label="relative gap")
    ax.semilogy(its, np.maximum(mu, tiny), "r--s", markersize=4,
                label=r"$\mu$")

    ax.set_xlabel("iteration", fontsize=12)
    ax.set_ylabel("value", fontsize=12)
    if title:
        ax.set_title(title)
    ax.grid(True, which="both", alpha=0.3)
    ax.legend()
    fig.tight_layout()

    if output is not None:
        output = Path(output)
        output.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output, dpi=dpi, bbox_inches="tight")
        print(f"Saved: {output}")

    if show:
        plt.show()

    return fig
