"""
Tests for convergence plots.
"""

import pytest

from linipm.lp.linipm import IterationRecord, LinIpm
from linipm.lp.problems import wyndor_problem
from linipm.plot.convergence import plot_convergence


def test_plot_from_solve(tmp_path):
    p = wyndor_problem()
    ipm = LinIpm(p.A, p.b, p.c)
    ipm.solve()
    out = tmp_path / "figs" / "wyndor.pdf"
    fig = plot_convergence(ipm.history, output=out, title="wyndor")
    assert out.exists()
    assert len(fig.axes[0].get_lines()) == 2


def test_zero_values_are_drawable(tmp_path):
    history = [IterationRecord(it=0, fx=1.0, error=0.0, mu=0.0, x_min=0.5, s_min=0.0)]
    out = tmp_path / "zero.png"
    plot_convergence(history, output=out)
    assert out.exists()


def test_empty_history():
    with pytest.raises(ValueError):
        plot_convergence([])
