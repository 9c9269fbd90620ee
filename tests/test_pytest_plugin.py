"""Runs of the pytest plugin in throwaway projects (pytester)."""

from __future__ import annotations

import textwrap

import matplotlib
import pytest

TEST_MODULE = """
import matplotlib.pyplot as plt
from svgdoppel import check_figure

VALUES = {values}


def draw():
    plt.plot(VALUES)


def test_plot():
    check_figure("My Plot", draw)
"""


@pytest.fixture
def project(pytester):
    pytester.makeconftest('pytest_plugins = ["svgdoppel.pytest_plugin"]')
    return pytester


def write_module(pytester, values, body=TEST_MODULE):
    # source length differs per call so cached bytecode is never reused
    return pytester.makepyfile(test_plots=textwrap.dedent(body).format(values=values))


def write_deps(directory, version=matplotlib.__version__):
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "deps.txt").write_text(f"matplotlib: {version}\n")


def test_new_figure_skips_the_test(project):
    write_module(project, [1, 2, 3])
    result = project.runpytest("-rs")
    result.assert_outcomes(skipped=1)
    result.stdout.fnmatch_lines(["*Figure not generated yet: my-plot.svg*"])
    assert not (project.path / "figs" / "plots" / "my-plot.svg").exists()


def test_regenerate_then_match_then_fail(project):
    write_module(project, [1, 2, 3])

    result = project.runpytest("--doppelganger-regenerate")
    result.assert_outcomes(passed=1)
    result.stdout.fnmatch_lines(["*svgdoppel*", "1 baseline(s) regenerated", "*my-plot.svg"])
    baseline = project.path / "figs" / "plots" / "my-plot.svg"
    assert baseline.read_text(encoding="utf-8").lstrip().startswith("<?xml")

    project.runpytest().assert_outcomes(passed=1)

    write_deps(project.path / "figs")
    write_module(project, [3, 2, 1, 0])
    result = project.runpytest()
    result.assert_outcomes(failed=1)
    result.stdout.fnmatch_lines(["*Figures don't match: my-plot.svg*"])


def test_mismatch_without_manifest_is_skipped(project):
    write_module(project, [1, 2, 3])
    project.runpytest("--doppelganger-regenerate").assert_outcomes(passed=1)

    write_module(project, [3, 2, 1, 0])
    result = project.runpytest("-rs")
    result.assert_outcomes(skipped=1)
    result.stdout.fnmatch_lines(["*cannot determine baseline engine version*"])


def test_regenerate_replaces_mismatching_baseline(project):
    write_module(project, [1, 2, 3])
    project.runpytest("--doppelganger-regenerate").assert_outcomes(passed=1)
    baseline = project.path / "figs" / "plots" / "my-plot.svg"
    before = baseline.read_bytes()

    write_deps(project.path / "figs")
    write_module(project, [3, 2, 1, 0])
    project.runpytest("--doppelganger-regenerate").assert_outcomes(passed=1)
    assert baseline.read_bytes() != before
    project.runpytest().assert_outcomes(passed=1)


def test_all_checks_of_a_test_run(project):
    write_module(project, [1, 2, 3])
    project.runpytest("--doppelganger-regenerate").assert_outcomes(passed=1)
    write_deps(project.path / "figs")

    write_module(
        project,
        [3, 2, 1, 0],
        body=TEST_MODULE
        + """

def test_two_plots():
    check_figure("My Plot", draw)
    check_figure("Second Plot", draw)
""",
    )
    result = project.runpytest("-k", "two_plots")
    result.assert_outcomes(failed=1, deselected=1)
    result.stdout.fnmatch_lines(
        [
            "*Figures don't match: my-plot.svg*",
            "*Also skipped:*",
            "*Figure not generated yet: second-plot.svg*",
        ]
    )


def test_fixture(project):
    project.makepyfile(
        test_fixture="""
        import numpy as np


        def test_image(doppelganger):
            exp = doppelganger("Eye", np.eye(4))
            assert exp.case.baseline_path.parent.name == "fixture"
        """
    )
    result = project.runpytest("-rs")
    result.assert_outcomes(skipped=1)
    result.stdout.fnmatch_lines(["*Figure not generated yet: eye.svg*"])


def test_ini_options(project):
    project.makeini(
        """
        [pytest]
        doppelganger_figs_dir = baselines
        doppelganger_log_path = logs/mismatch.log
        """
    )
    write_module(project, [1, 2, 3])
    project.runpytest("--doppelganger-regenerate").assert_outcomes(passed=1)
    assert (project.path / "baselines" / "plots" / "my-plot.svg").exists()
    assert not (project.path / "figs").exists()

    write_deps(project.path / "baselines")
    write_module(project, [3, 2, 1, 0])
    project.runpytest().assert_outcomes(failed=1)
    log = (project.path / "logs" / "mismatch.log").read_text(encoding="utf-8")
    assert ">> Failed doppelganger: my-plot" in log


def test_passing_test_without_figures_is_untouched(project):
    project.makepyfile(
        test_plain="""
        def test_nothing():
            assert True
        """
    )
    project.runpytest().assert_outcomes(passed=1)
