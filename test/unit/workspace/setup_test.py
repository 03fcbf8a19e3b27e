"""Tests for the workspace paths."""

import pytest
from pydantic import ValidationError

from transit_emissions.workspace.setup import TransitPaths


def test_paths_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("TRANSIT_INPUT", str(tmp_path / "in"))
    monkeypatch.setenv("TRANSIT_OUTPUT", str(tmp_path / "out"))
    paths = TransitPaths()
    assert paths.input_dir == tmp_path / "in"
    assert paths.input_dir.is_dir()
    assert paths.output_dir.is_dir()
    assert paths.output_file("x.csv") == tmp_path / "out" / "x.csv"


def test_path_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("TRANSIT_INPUT", str(tmp_path / "in"))
    monkeypatch.setenv("TRANSIT_OUTPUT", str(tmp_path / "out"))
    TransitPaths.set_path_overrides(output_dir=str(tmp_path / "elsewhere"))
    paths = TransitPaths()
    assert paths.input_dir == tmp_path / "in"
    assert paths.output_dir == tmp_path / "elsewhere"


def test_paths_are_required(monkeypatch, tmp_path):
    monkeypatch.delenv("TRANSIT_INPUT", raising=False)
    monkeypatch.delenv("TRANSIT_OUTPUT", raising=False)
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ValidationError):
        TransitPaths()
