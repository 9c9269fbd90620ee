# svgdoppel/core.py: figure checks against approved SVG baselines.
from __future__ import annotations

import logging
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from .case import Case, Outcome, Renderer, build_case, render_candidate
from .compare import compare_files
from .context import TestContext, activate, add_dependency, current_context
from .exceptions import InvalidInput
from .expectation import (
    Expectation,
    deliver,
    match_exp,
    mismatch_exp,
    new_exp,
    skipped_mismatch_exp,
)
from .naming import normalize
from .renderers import dependencies_of, write_svg
from .versions import DepsManifest, GateResult, check_versions_match, system_version

# ------------------------------------------------------------------
# Module-level logger
# ------------------------------------------------------------------
logger = logging.getLogger(__name__)

# ------------------------------------------------------------------
# If user hasn’t configured logging, fall back to console INFO output
# ------------------------------------------------------------------
if not logger.hasHandlers():
    _h = logging.StreamHandler()
    _h.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(_h)
    logger.setLevel(logging.INFO)


def check_figure(
    title: str,
    fig: Any,
    path: str | Path | None = None,
    verbose: bool = False,
    renderer: Renderer = write_svg,
    context: TestContext | None = None,
) -> Expectation:
    """
    Check that *fig* still looks like its approved baseline.

    If the figure has never been validated, the check is skipped.  If it
    has been validated but the new rendering differs, a failure is
    delivered, unless the baseline was produced by another version of the
    rendering engine, in which case the failure is downgraded to a skip.

    Parameters:
    - title: Figure title. Its normalized form names the SVG file.
    - fig: The figure to check: a matplotlib Figure or Axes, a function
      drawing with pyplot, an xarray/pandas object, a numpy array or any
      Renderable.
    - path: Directory relative to the figs root. None uses the test
      context name; "" stores the file in the figs root itself.
    - verbose: Log the SVG sources, useful when tests run remotely.
    - renderer: Callable (fig, path, title) writing deterministic SVG.
    - context: Explicit test context. Defaults to the active one.

    Returns:
    - The delivered Expectation.
    """
    ctx = context if context is not None else current_context()
    with activate(ctx), candidate_scope(ctx) as candidate_dir:
        exp = _check(title, fig, path, verbose, renderer, ctx, candidate_dir)
        return deliver(exp, ctx.handler)


@contextmanager
def candidate_scope(ctx: TestContext) -> Iterator[Path | None]:
    """
    Yield the directory candidates of one check are rendered into.

    Without a candidate directory or a collector nothing reads the
    candidate after the check; it goes to a temporary directory that is
    removed once the check is delivered.
    """
    if ctx.candidate_dir is not None or ctx.collector is not None:
        yield ctx.candidate_dir
        return
    with tempfile.TemporaryDirectory(prefix="svgdoppel-") as tmp:
        yield Path(tmp)


def _check(
    title: str,
    fig: Any,
    path: str | Path | None,
    verbose: bool,
    renderer: Renderer,
    ctx: TestContext,
    candidate_dir: Path | None,
) -> Expectation:
    fig_name = normalize(title)
    if not fig_name:
        raise InvalidInput(f"title {title!r} has no alphanumeric characters")

    candidate = render_candidate(fig, fig_name, title, renderer, candidate_dir)
    add_dependency(dependencies_of(fig), ctx)
    case = build_case(title, ctx, path, candidate_path=candidate, verbose=verbose)

    if case.baseline_path.exists():
        return compare_figs(case, ctx)

    case = case.with_outcome(Outcome.NEW)
    maybe_collect_case(case, ctx)
    maybe_print_svgs(case, ctx)
    logger.debug("No baseline for %s at %s", case.name, case.baseline_path)
    return new_exp(f"Figure not generated yet: {case.file_name}", case)


def compare_figs(case: Case, ctx: TestContext) -> Expectation:
    """Classify a case whose baseline exists."""
    if compare_files(case.candidate_path, case.baseline_path):
        case = case.with_outcome(Outcome.MATCHED)
        maybe_collect_case(case, ctx)
        logger.debug("Figures match: %s", case.file_name)
        return match_exp(f"Figures match: {case.file_name}", case)

    case = case.with_outcome(Outcome.MISMATCHED)
    maybe_collect_case(case, ctx)
    push_log(case, ctx.config.log_path)
    logger.warning("Figures don't match: %s (%s)", case.file_name, case.baseline_path)
    maybe_print_svgs(case, ctx)

    gate = check_engines(case, ctx)
    if gate.skipped:
        case = case.with_outcome(Outcome.SKIPPED_MISMATCH)
        maybe_collect_case(case, ctx)
        return skipped_mismatch_exp(gate.reason, case)

    return mismatch_exp(f"Figures don't match: {case.file_name}\n", case)


def check_engines(case: Case, ctx: TestContext) -> GateResult:
    """Run the version gate of every configured engine; the first skip wins."""
    manifest = DepsManifest.read(ctx.manifest_path)
    for name, strip_minor in ctx.config.engines.items():
        result = check_versions_match(
            case,
            name,
            system_version(name),
            manifest=manifest,
            strip_minor=strip_minor,
        )
        if result.skipped:
            return result
    return GateResult.ok()


def maybe_collect_case(case: Case, ctx: TestContext) -> None:
    if ctx.collector is not None:
        ctx.collector.add_case(case)


def maybe_print_svgs(case: Case, ctx: TestContext) -> None:
    """
    Log the SVG sources of a verbose case.

    Skipped while a collector is active: the review session shows them
    itself.  For a new case only the candidate exists.
    """
    if case.verbose and ctx.collector is None:
        logger.info(svg_files_lines(case))


def svg_files_lines(case: Case) -> str:
    lines = [f"> Testcase: {case.name}", case.candidate_path.read_text(encoding="utf-8")]
    if case.outcome is not Outcome.NEW and case.baseline_path.exists():
        lines += [
            f"> Baseline: {case.baseline_path}",
            case.baseline_path.read_text(encoding="utf-8"),
        ]
    return "\n".join(lines)


def push_log(case: Case, log_path: Path | None) -> bool:
    """
    Append the sources of a mismatching case to *log_path*.

    Returns False when no log file is configured.
    """
    if log_path is None:
        return False
    log_path = Path(log_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with log_path.open("a", encoding="utf-8") as fp:
        fp.write(f"\n\n>> Failed doppelganger: {case.name} ({case.baseline_path})\n\n")
        fp.write(svg_files_lines(case))
        fp.write("\n")
    return True
