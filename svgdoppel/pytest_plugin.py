"""
pytest integration for svgdoppel.

Every test item runs inside its own :class:`~svgdoppel.context.TestContext`:

* figures are stored under ``<test dir>/<doppelganger_figs_dir>/<context>/``
  where the context is the test module name without its ``test_`` prefix;
* figure expectations are recorded instead of raised, so every check of a
  test runs; afterwards a broken one fails the test and a skipped one
  skips it;
* with ``--doppelganger-regenerate`` the checks never fail and new or
  mismatching figures become the baselines at the end of the session.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path

import pytest

from .collector import CaseCollector
from .config import DoppelgangerConfig
from .context import TestContext, activate
from .core import check_figure
from .expectation import ExpectationLog
from .naming import context_name

logger = logging.getLogger(__name__)

_CONFIG_KEY = pytest.StashKey[DoppelgangerConfig]()
_COLLECTOR_KEY = pytest.StashKey["CaseCollector | None"]()
_CANDIDATES_KEY = pytest.StashKey[Path]()
_PROMOTED_KEY = pytest.StashKey["list[Path]"]()


def pytest_addoption(parser):
    group = parser.getgroup("svgdoppel", "SVG figure regression")
    group.addoption(
        "--doppelganger-regenerate",
        action="store_true",
        default=False,
        help="Overwrite baselines of new and mismatching figures with current output",
    )
    parser.addini(
        "doppelganger_figs_dir",
        "Baseline directory, relative to each test module (default: figs)",
        default="figs",
    )
    parser.addini(
        "doppelganger_log_path",
        "File receiving the SVG sources of mismatching figures",
        default="",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "svg: test compares SVG figures")

    log_path = config.getini("doppelganger_log_path") or None
    if log_path is not None:
        log_path = config.rootpath / log_path
    config.stash[_CONFIG_KEY] = DoppelgangerConfig(
        figs_dir=config.getini("doppelganger_figs_dir"), log_path=log_path
    )
    regenerate = config.getoption("doppelganger_regenerate")
    config.stash[_COLLECTOR_KEY] = CaseCollector() if regenerate else None
    config.stash[_CANDIDATES_KEY] = Path(tempfile.mkdtemp(prefix="svgdoppel-"))
    config.stash[_PROMOTED_KEY] = []


def pytest_unconfigure(config):
    candidates = config.stash.get(_CANDIDATES_KEY, None)
    if candidates is not None:
        shutil.rmtree(candidates, ignore_errors=True)


def item_context(item: pytest.Item) -> TestContext:
    """Build the figure-check context of a test item."""
    cfg = item.config.stash[_CONFIG_KEY]
    return TestContext(
        name=context_name(item.path.name),
        figs_root=item.path.parent / cfg.figs_dir,
        candidate_dir=item.config.stash[_CANDIDATES_KEY],
        collector=item.config.stash[_COLLECTOR_KEY],
        handler=ExpectationLog(),
        config=cfg,
    )


def _fail(msg: str) -> None:
    pytest.fail(msg, pytrace=False)


@pytest.hookimpl(wrapper=True)
def pytest_runtest_call(item):
    ctx = item_context(item)
    with activate(ctx):
        result = yield
    # regeneration runs only record; baselines are replaced at session end
    if ctx.collector is None:
        ctx.handler.raise_for_outcome(fail=_fail, skip=pytest.skip)
    return result


def pytest_sessionfinish(session, exitstatus):
    collector = session.config.stash.get(_COLLECTOR_KEY, None)
    if collector is None:
        return
    session.config.stash[_PROMOTED_KEY] = collector.validate()


def pytest_terminal_summary(terminalreporter, exitstatus, config):
    collector = config.stash.get(_COLLECTOR_KEY, None)
    if collector is None:
        return
    promoted = config.stash.get(_PROMOTED_KEY, [])
    terminalreporter.section("svgdoppel")
    terminalreporter.write_line(f"{len(promoted)} baseline(s) regenerated")
    for path in promoted:
        terminalreporter.write_line(f"  {path}")
    if collector.dependencies:
        terminalreporter.write_line("dependencies: " + ", ".join(collector.dependencies))


@pytest.fixture
def doppelganger():
    """Return :func:`svgdoppel.check_figure` bound to the running test."""
    return check_figure
