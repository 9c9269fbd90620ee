# svgdoppel/case.py
"""
Case record threaded through the comparison pipeline.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

from .exceptions import InvalidInput, RenderingFailure
from .naming import normalize

if TYPE_CHECKING:
    from .context import TestContext

logger = logging.getLogger(__name__)

Renderer = Callable[[Any, Path, str], None]


class Outcome(str, Enum):
    """Terminal state of one figure comparison."""

    NEW = "unvalidated-new"
    MATCHED = "matched"
    MISMATCHED = "mismatched"
    SKIPPED_MISMATCH = "skipped-mismatch"


# outcome already set -> outcomes it may still move to
_TRANSITIONS: dict[Outcome, frozenset[Outcome]] = {
    Outcome.MISMATCHED: frozenset({Outcome.SKIPPED_MISMATCH}),
}


@dataclass(frozen=True)
class Case:
    """Identity, file locations and state of one figure comparison."""

    name: str
    baseline_path: Path
    candidate_path: Path
    verbose: bool = False
    outcome: Outcome | None = None
    title: str | None = None

    def __post_init__(self) -> None:
        if not self.name or normalize(self.name) != self.name:
            raise InvalidInput(f"case name is not normalized: {self.name!r}")

    @property
    def file_name(self) -> str:
        return f"{self.name}.svg"

    def with_outcome(self, outcome: Outcome) -> Case:
        """Return a copy carrying *outcome*; the receiver is left untouched."""
        if self.outcome is not None and outcome not in _TRANSITIONS.get(
            self.outcome, frozenset()
        ):
            raise InvalidInput(
                f"case {self.name!r} is already {self.outcome.value}, "
                f"cannot become {outcome.value}"
            )
        return replace(self, outcome=outcome)


def baseline_path_for(
    name: str, context: TestContext, explicit_path: str | Path | None = None
) -> Path:
    """
    Return ``<figs_root>/<sub-path>/<name>.svg``.

    *explicit_path* wins over the context name when it is not None; the empty
    string stores the figure directly in the figs root.
    """
    if explicit_path is None:
        sub = Path(normalize(context.name or ""))
    else:
        sub = Path(explicit_path)
        if sub.is_absolute():
            raise InvalidInput(
                f"path must be relative to the figs directory, got {explicit_path!r}"
            )
    return context.figs_root / sub / f"{name}.svg"


@contextmanager
def candidate_file(name: str, directory: str | Path | None = None) -> Iterator[Path]:
    """
    Reserve a temporary ``.svg`` file for a rendering.

    The file is removed again if the body raises, so a failing renderer
    never leaves a half-written candidate behind.
    """
    if directory is not None:
        Path(directory).mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=f"{name}-", suffix=".svg", dir=directory)
    os.close(fd)
    path = Path(tmp)
    try:
        yield path
    except BaseException:
        path.unlink(missing_ok=True)
        raise


def render_candidate(
    fig: Any,
    name: str,
    title: str,
    renderer: Renderer,
    directory: str | Path | None = None,
) -> Path:
    """Run *renderer* into a fresh candidate file and return its path."""
    with candidate_file(name, directory) as path:
        renderer(fig, path, title)
        if not path.exists() or path.stat().st_size == 0:
            raise RenderingFailure(f"renderer wrote nothing for figure {title!r}")
    logger.debug("Rendered %s to %s", name, path)
    return path


def build_case(
    title: str,
    context: TestContext,
    explicit_path: str | Path | None = None,
    *,
    candidate_path: Path,
    verbose: bool = False,
) -> Case:
    """
    Create the Case for *title* under *context*.

    The directory chain of the baseline is created here, before anything
    can be written into it.
    """
    name = normalize(title)
    if not name:
        raise InvalidInput(f"title {title!r} has no alphanumeric characters")
    baseline = baseline_path_for(name, context, explicit_path)
    baseline.parent.mkdir(parents=True, exist_ok=True)
    return Case(
        name=name,
        baseline_path=baseline,
        candidate_path=Path(candidate_path),
        verbose=verbose,
        title=title,
    )
