# svgdoppel/exceptions.py
"""
Exception hierarchy for svgdoppel.

Outcome kinds (missing baseline, mismatch, engine drift) are *not*
exceptions; they travel as :class:`~svgdoppel.expectation.Expectation`
values.  Only genuine errors live here.
"""

from __future__ import annotations


class DoppelgangerError(Exception):
    """Base class for all svgdoppel errors."""


class InvalidInput(DoppelgangerError, ValueError):
    """Raised for malformed titles, paths or unsupported figure objects."""


class RenderingFailure(DoppelgangerError, RuntimeError):
    """Raised when a renderer returns without producing a candidate file."""


class InternalInvariantViolation(DoppelgangerError, RuntimeError):
    """Raised when version comparison ends in an impossible relation."""


__all__ = [
    "DoppelgangerError",
    "InvalidInput",
    "RenderingFailure",
    "InternalInvariantViolation",
]
