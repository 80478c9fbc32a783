"""
Plotting module.

Implements:
- Convergence trace (relative gap and μ per iteration) with matplotlib
"""

from .convergence import plot_convergence

__all__ = ["plot_convergence"]
