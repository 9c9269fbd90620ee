# svgdoppel/collector.py
"""
Session-wide accumulation of cases for later review or promotion.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from pathlib import Path

from .case import Case, Outcome

logger = logging.getLogger(__name__)

# outcomes whose candidate should replace the baseline on validation
PENDING = (Outcome.NEW, Outcome.MISMATCHED, Outcome.SKIPPED_MISMATCH)


class CaseCollector:
    """Collects the cases and dependencies seen during one review session."""

    def __init__(self) -> None:
        self.cases: dict[Path, Case] = {}
        self.dependencies: list[str] = []

    def add_case(self, case: Case) -> None:
        """Record *case*; a later state of the same baseline replaces it."""
        self.cases[case.baseline_path] = case

    def add_dependency(self, name: str) -> None:
        if name not in self.dependencies:
            self.dependencies.append(name)

    def cases_with(self, *outcomes: Outcome) -> list[Case]:
        return [c for c in self.cases.values() if c.outcome in outcomes]

    @property
    def pending(self) -> list[Case]:
        return self.cases_with(*PENDING)

    def validate(self, cases: Iterable[Case] | None = None) -> list[Path]:
        """
        Promote candidates to baselines.

        Parameters
        ----------
        cases : iterable of Case, optional
            Cases to promote. Defaults to every new or mismatched case.

        Returns
        -------
        list[Path]
            Baseline files that were written.
        """
        promoted: list[Path] = []
        for case in self.pending if cases is None else cases:
            if not case.candidate_path.exists():
                logger.warning(
                    "Candidate of %s is gone, cannot promote it", case.name
                )
                continue
            case.baseline_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(case.candidate_path, case.baseline_path)
            logger.info("Validated %s -> %s", case.name, case.baseline_path)
            promoted.append(case.baseline_path)
        return promoted
