# svgdoppel/expectation.py
"""
Expectation signals and their delivery to the host test framework.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from .case import Case

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    SKIP = "skip"
    ERROR = "error"


class ExpectationKind(str, Enum):
    NEW = "new"
    MATCH = "match"
    MISMATCH = "mismatch"
    VERSION_SKIPPED_MISMATCH = "version-skipped-mismatch"


_BROKEN = frozenset({Severity.FAILURE, Severity.ERROR})


@dataclass(frozen=True)
class Expectation:
    """Result of one figure check, as seen by the test framework."""

    message: str
    case: Case
    severity: Severity
    kind: ExpectationKind

    @property
    def broken(self) -> bool:
        return self.severity in _BROKEN

    @property
    def skipped(self) -> bool:
        return self.severity is Severity.SKIP


class ExpectationFailure(AssertionError):
    """A broken expectation raised into the test."""

    def __init__(self, expectation: Expectation):
        super().__init__(expectation.message)
        self.expectation = expectation


class FigureSkipWarning(UserWarning):
    """Emitted for skipped figure checks when nothing intercepts them."""


Handler = Callable[[Expectation], None]


# ------------------------------------------------------------------
# Constructors, one per expectation kind
# ------------------------------------------------------------------
def new_exp(msg: str, case: Case) -> Expectation:
    return Expectation(msg, case, Severity.SKIP, ExpectationKind.NEW)


def match_exp(msg: str, case: Case) -> Expectation:
    return Expectation(msg, case, Severity.SUCCESS, ExpectationKind.MATCH)


def mismatch_exp(msg: str, case: Case) -> Expectation:
    return Expectation(msg, case, Severity.FAILURE, ExpectationKind.MISMATCH)


def skipped_mismatch_exp(msg: str, case: Case) -> Expectation:
    return Expectation(
        msg, case, Severity.SKIP, ExpectationKind.VERSION_SKIPPED_MISMATCH
    )


# ------------------------------------------------------------------
# Delivery
# ------------------------------------------------------------------
def deliver(exp: Expectation, handler: Handler | None = None) -> Expectation:
    """
    Hand *exp* to the host framework.

    With a *handler* installed the expectation is passed to it and the
    caller carries on, so one broken figure does not stop the rest of the
    test.  Without one, broken expectations raise ExpectationFailure and
    skips are emitted as FigureSkipWarning.
    """
    if handler is not None:
        handler(exp)
        return exp
    if exp.broken:
        raise ExpectationFailure(exp)
    if exp.skipped:
        warnings.warn(exp.message, FigureSkipWarning, stacklevel=3)
    return exp


@dataclass
class ExpectationLog:
    """
    Handler that records every expectation of a test.

    Call :meth:`raise_for_outcome` once the test body is done to turn the
    record into a single failure or skip.
    """

    expectations: list[Expectation] = field(default_factory=list)

    def __call__(self, exp: Expectation) -> None:
        logger.debug("%s: %s", exp.kind.value, exp.case.name)
        self.expectations.append(exp)

    @property
    def failures(self) -> list[Expectation]:
        return [e for e in self.expectations if e.broken]

    @property
    def skips(self) -> list[Expectation]:
        return [e for e in self.expectations if e.skipped]

    def of_kind(self, kind: ExpectationKind) -> list[Expectation]:
        return [e for e in self.expectations if e.kind is kind]

    def summary(self, exps: list[Expectation] | None = None) -> str:
        exps = self.expectations if exps is None else exps
        return "\n".join(e.message.rstrip("\n") for e in exps)

    def raise_for_outcome(
        self,
        fail: Callable[[str], object] | None = None,
        skip: Callable[[str], object] | None = None,
    ) -> None:
        """
        Raise for the worst recorded expectation.

        *fail* and *skip* let the host framework supply its own outcome
        functions (e.g. ``pytest.fail`` / ``pytest.skip``).  Skips are
        appended to a failure message so nothing recorded is lost.
        """
        if self.failures:
            msg = self.summary(self.failures)
            if self.skips:
                msg += "\n\nAlso skipped:\n" + self.summary(self.skips)
            if fail is not None:
                fail(msg)
            raise ExpectationFailure(self.failures[0])
        if self.skips:
            msg = self.summary(self.skips)
            if skip is not None:
                skip(msg)
            warnings.warn(msg, FigureSkipWarning, stacklevel=2)
