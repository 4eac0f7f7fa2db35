# tests/test_cli.py
import builtins
import json
import os

import pytest

from lorentzsim import cli
from lorentzsim.config import settings
from lorentzsim.physics.vector import Vector3


def feed(monkeypatch, answers):
    """Answer input() prompts in order; EOF once exhausted."""
    it = iter(answers)

    def fake_input(prompt=""):
        try:
            return next(it)
        except StopIteration:
            raise EOFError
    monkeypatch.setattr(builtins, "input", fake_input)


class TestPrompts:

    def test_get_float_retries_on_garbage_and_nan(self, monkeypatch):
        feed(monkeypatch, ["abc", "nan", "2.5"])
        assert cli.get_float("q: ", default=1.0) == 2.5

    def test_get_float_default_on_enter_and_eof(self, monkeypatch):
        feed(monkeypatch, [""])
        assert cli.get_float("q: ", default=1.0) == 1.0
        assert cli.get_float("q: ", default=3.0) == 3.0

    def test_get_vector_forms(self, monkeypatch):
        feed(monkeypatch, ["1, 2, 3", "4", "1 2", "", "1 2 3 4", "inf 0 0", "7 8 9"])
        assert cli.get_vector("v", (0, 0, 0)) == Vector3(1, 2, 3)
        assert cli.get_vector("v", (0, 0, 0)) == Vector3(4, 0, 0)
        assert cli.get_vector("v", (0, 0, 0)) == Vector3(1, 2, 0)
        assert cli.get_vector("v", (5, 0, 2)) == Vector3(5, 0, 2)
        # the next two inputs are rejected, then 7 8 9 is accepted
        assert cli.get_vector("v", (0, 0, 0)) == Vector3(7, 8, 9)

    def test_get_int_limits(self, monkeypatch):
        feed(monkeypatch, ["0", "x", "15"])
        assert cli.get_int("n: ", default=10, min_val=1) == 15

    def test_choose_mode(self, monkeypatch):
        feed(monkeypatch, ["2"])
        assert cli.choose_mode() == "export"
        assert cli.choose_mode() == "interactive"


class TestCreateParams:

    def test_defaults_when_non_interactive(self, monkeypatch):
        feed(monkeypatch, [])
        p = cli.create_params()
        assert p.mass == settings.DEFAULT_MASS
        assert p.velocity == Vector3(*settings.DEFAULT_VELOCITY)

    def test_rejects_non_positive_mass(self, monkeypatch):
        feed(monkeypatch, ["1", "-2", "", "", "-1", "3", "1 0 0", "0 0 1"])
        p = cli.create_params()
        assert p.charge == -1.0
        assert p.mass == 3.0
        assert p.velocity == Vector3(1, 0, 0)
        assert p.b_field == Vector3(0, 0, 1)


class TestRunCli:

    def test_export_mode(self, monkeypatch):
        monkeypatch.setattr(settings, "EXPORT_STEPS", 1000)
        feed(monkeypatch, ["", "", "", "", "2", "250"])
        params, mode, steps = cli.run_cli()
        assert mode == "export"
        assert steps == 250
        assert settings.EXPORT_STEPS == 1000

    def test_export_steps_default(self, monkeypatch):
        monkeypatch.setattr(settings, "EXPORT_STEPS", 400)
        feed(monkeypatch, ["", "", "", "", "2", ""])
        _, mode, steps = cli.run_cli()
        assert (mode, steps) == ("export", 400)

    def test_interactive_mode_has_no_steps(self, monkeypatch):
        feed(monkeypatch, [])
        _, mode, steps = cli.run_cli()
        assert (mode, steps) == ("interactive", None)


def test_export_run_writes_artifacts(monkeypatch, tmp_path, params):
    from lorentzsim import main

    monkeypatch.setattr(settings, "OUTPUT_DIR", str(tmp_path))
    summary = main.export_run(params, 40)

    assert summary["meta"]["steps_run"] == 40
    assert summary["meta"]["halted"] is False
    assert summary["diagnostics"]["trajectory"] == "helical"
    for key in ("frame", "energy_plot", "trajectory_plot"):
        assert os.path.exists(summary["artifacts"][key])
    written = [f for f in os.listdir(tmp_path) if f.startswith("run_summary_")]
    assert len(written) == 1
    with open(tmp_path / written[0]) as f:
        assert json.load(f)["params"]["velocity"] == [5.0, 0.0, 2.0]
