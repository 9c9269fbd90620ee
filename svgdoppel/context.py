# svgdoppel/context.py
"""
The handle describing where and how figure checks of a test run.

A context is activated around a test (the pytest plugin does this for
every test item) and torn down afterwards.  Code can also build one and
pass it explicitly to :func:`svgdoppel.check_figure`.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from pathlib import Path

from .collector import CaseCollector
from .config import DoppelgangerConfig
from .expectation import Handler


@dataclass
class TestContext:
    """Figure-check settings of the currently running test."""

    __test__ = False  # keep pytest from collecting this class

    name: str = ""
    figs_root: Path = field(default_factory=lambda: Path.cwd() / "figs")
    candidate_dir: Path | None = None
    collector: CaseCollector | None = None
    handler: Handler | None = None
    config: DoppelgangerConfig = field(default_factory=DoppelgangerConfig)

    def __post_init__(self) -> None:
        self.figs_root = Path(self.figs_root)
        if self.candidate_dir is not None:
            self.candidate_dir = Path(self.candidate_dir)

    @classmethod
    def default(cls, config: DoppelgangerConfig | None = None) -> TestContext:
        """Context used when no test framework integration is active."""
        config = config or DoppelgangerConfig()
        return cls(figs_root=Path.cwd() / config.figs_dir, config=config)

    @property
    def manifest_path(self) -> Path:
        return self.figs_root / self.config.deps_file


_ACTIVE: ContextVar[TestContext | None] = ContextVar("svgdoppel_context", default=None)


@contextmanager
def activate(ctx: TestContext) -> Iterator[TestContext]:
    """Make *ctx* the current context for the duration of the block."""
    token = _ACTIVE.set(ctx)
    try:
        yield ctx
    finally:
        _ACTIVE.reset(token)


def current_context() -> TestContext:
    ctx = _ACTIVE.get()
    return ctx if ctx is not None else TestContext.default()


def active_collector(context: TestContext | None = None) -> CaseCollector | None:
    """Return the collector of *context* (or of the current one), if any."""
    ctx = context if context is not None else current_context()
    return ctx.collector


def add_dependency(names: str | Iterable[str], context: TestContext | None = None) -> None:
    """
    Record that the cases depend on the packages *names*.

    Forwarded to the active collector; does nothing outside a review
    session.
    """
    collector = active_collector(context)
    if collector is None:
        return
    if isinstance(names, str):
        names = [names]
    for name in names:
        collector.add_dependency(name)
