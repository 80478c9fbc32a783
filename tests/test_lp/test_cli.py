"""
Tests for the command-line driver.
"""

import json

import numpy as np
import pytest

from linipm.lp.cli import build_parser, main
from linipm.lp.problems import save_problem, wyndor_problem


class TestParser:

    def test_source_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_sources_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--demo", "vertex", "--problem", "x.npz"])

    def test_defaults(self):
        args = build_parser().parse_args(["--demo", "vertex"])
        assert args.nmaxit == 50
        assert args.tol == 1e-8
        assert args.feastol is None
        assert args.solver == "superlu"


class TestMain:

    def test_demo_with_output_and_certificate(self, tmp_path, capsys):
        out = tmp_path / "res" / "vertex.json"
        code = main(["--demo", "vertex", "--certify-dps", "40",
                     "--output", str(out)])
        assert code == 0
        summary = json.loads(out.read_text())
        assert summary["problem"] == "vertex"
        assert summary["fun"] == pytest.approx(-8.0, abs=1e-5)
        assert summary["certificate"]["dps"] == 40
        assert "Converged" in capsys.readouterr().out

    def test_problem_file(self, tmp_path):
        path = save_problem(wyndor_problem(), tmp_path / "wyndor.npz")
        assert main(["--problem", str(path), "--solver", "dense"]) == 0

    def test_random_demo(self):
        assert main(["--demo", "random", "--nl", "4", "--nx", "10", "--seed", "2"]) == 0

    def test_missing_file(self, tmp_path, capsys):
        code = main(["--problem", str(tmp_path / "missing.npz")])
        assert code == 1
        assert "ERROR" in capsys.readouterr().err

    def test_invalid_random_dimensions(self, capsys):
        code = main(["--demo", "random", "--nl", "5", "--nx", "3"])
        assert code == 1
        assert "Need 0 < nl < nx" in capsys.readouterr().err

    def test_incomplete_problem_file(self, tmp_path, capsys):
        path = tmp_path / "partial.npz"
        np.savez(path, b=np.ones(2))
        code = main(["--problem", str(path)])
        assert code == 1
        assert "missing arrays" in capsys.readouterr().err

    def test_solver_failure(self, capsys):
        code = main(["--demo", "wyndor", "--nmaxit", "1"])
        assert code == 2
        assert "ConvergenceError" in capsys.readouterr().err

    def test_plot(self, tmp_path):
        fig_path = tmp_path / "trace.png"
        assert main(["--demo", "wyndor", "--plot", str(fig_path)]) == 0
        assert fig_path.exists()
