"""
Global pytest fixtures for svgdoppel unit tests.
Provide an isolated baseline tree (figs_root), a TestContext bound to it
(context) and small plot factories.
"""

from __future__ import annotations

import shutil
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

from svgdoppel import DoppelgangerConfig, Expectation, TestContext


@pytest.fixture
def figs_root(tmp_path: Path) -> Path:
    """Return the (not yet created) baseline root of one test."""
    return tmp_path / "figs"


@pytest.fixture
def context(tmp_path: Path, figs_root: Path) -> TestContext:
    """Return a context named "Plot Tests" writing into *figs_root*."""
    return TestContext(
        name="Plot Tests",
        figs_root=figs_root,
        candidate_dir=tmp_path / "candidates",
        config=DoppelgangerConfig(log_path=tmp_path / "mismatch.log"),
    )


@pytest.fixture
def line_plot():
    """Factory of zero-argument pyplot drawing functions."""

    def make(values):
        def draw():
            plt.plot(values)

        return draw

    return make


@pytest.fixture
def write_deps(figs_root: Path):
    """Write ``deps.txt`` into *figs_root* from ``name=version`` pairs."""

    def write(**versions: str) -> Path:
        figs_root.mkdir(parents=True, exist_ok=True)
        path = figs_root / "deps.txt"
        path.write_text(
            "".join(f"{name}: {ver}\n" for name, ver in versions.items()),
            encoding="utf-8",
        )
        return path

    return write


@pytest.fixture
def write_current_deps(write_deps):
    """Record the installed matplotlib as the baseline engine."""
    return lambda: write_deps(matplotlib=matplotlib.__version__)


def promote(exp: Expectation) -> Path:
    """Copy the candidate of *exp* over its baseline."""
    shutil.copyfile(exp.case.candidate_path, exp.case.baseline_path)
    return exp.case.baseline_path


@pytest.fixture(name="promote")
def promote_fixture():
    return promote
