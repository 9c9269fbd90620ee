# ------------------------------------------------------------------
# 0) lightweight first: pure-utility modules (no heavy imports)
# ------------------------------------------------------------------
from .exceptions import (
    DoppelgangerError,
    InternalInvariantViolation,
    InvalidInput,
    RenderingFailure,
)
from .naming import normalize

# ------------------------------------------------------------------
# 1) case records, comparison, version gate
# ------------------------------------------------------------------
from .case import Case, Outcome, build_case
from .collector import CaseCollector
from .compare import compare_files
from .config import DoppelgangerConfig
from .context import TestContext, activate, active_collector, add_dependency, current_context
from .expectation import (
    Expectation,
    ExpectationFailure,
    ExpectationKind,
    ExpectationLog,
    FigureSkipWarning,
    Severity,
    deliver,
)
from .versions import DepsManifest, GateResult, check_versions_match, compare_versions

# ------------------------------------------------------------------
# 2) rendering + public entry point (ordered: renderers → core)
# ------------------------------------------------------------------
from .renderers import Renderable, as_renderable, write_svg
from .core import check_figure

# ------------------------------------------------------------------
# 3) public symbol table
# ------------------------------------------------------------------
__all__: list[str] = [
    # entry points
    "check_figure",
    "add_dependency",
    "write_svg",
    # records
    "Case",
    "Outcome",
    "Expectation",
    "ExpectationKind",
    "Severity",
    "GateResult",
    # pipeline pieces
    "normalize",
    "build_case",
    "compare_files",
    "check_versions_match",
    "compare_versions",
    "DepsManifest",
    "deliver",
    "ExpectationLog",
    # rendering
    "Renderable",
    "as_renderable",
    # context / session
    "TestContext",
    "activate",
    "current_context",
    "active_collector",
    "CaseCollector",
    "DoppelgangerConfig",
    # errors
    "DoppelgangerError",
    "InvalidInput",
    "RenderingFailure",
    "InternalInvariantViolation",
    "ExpectationFailure",
    "FigureSkipWarning",
]

__version__ = "0.1.0"
