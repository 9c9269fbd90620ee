# SPDX-License-Identifier: MIT
"""
Engine-version bookkeeping for baselines.

Rendering engines change their SVG output slightly between releases.  A
failed comparison is therefore only reported as a regression when the
engine that produced the baseline is the one installed now; otherwise the
mismatch is downgraded to a skip asking for revalidation.

The manifest (``deps.txt`` next to the baselines) is a flat list of lines::

    matplotlib: 3.9.2
    FreeType: 2.6.1
"""

from __future__ import annotations

import importlib.metadata
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterator

from packaging.version import InvalidVersion, Version

from .exceptions import InternalInvariantViolation, InvalidInput

if TYPE_CHECKING:
    from .case import Case

logger = logging.getLogger(__name__)

REVALIDATE_HINT = "pytest --doppelganger-regenerate"


@dataclass(frozen=True)
class VersionRecord:
    """One ``name: version`` line of the manifest."""

    name: str
    version: str

    @classmethod
    def from_line(cls, line: str) -> VersionRecord | None:
        name, sep, version = line.partition(":")
        if not sep or not name.strip():
            return None
        return cls(name.strip(), version.strip())


class DepsManifest:
    """Engine versions recorded alongside the baselines."""

    def __init__(self, records: list[VersionRecord] | None = None, path: Path | None = None):
        self.records = list(records or [])
        self.path = path

    @classmethod
    def read(cls, path: str | Path) -> DepsManifest:
        """Parse *path*; a missing file gives an empty manifest."""
        path = Path(path)
        if not path.exists():
            logger.debug("No engine manifest at %s", path)
            return cls([], path)
        records = []
        for line in path.read_text(encoding="utf-8").splitlines():
            rec = VersionRecord.from_line(line)
            if rec is not None:
                records.append(rec)
        return cls(records, path)

    def __iter__(self) -> Iterator[VersionRecord]:
        return iter(self.records)

    def __contains__(self, name: object) -> bool:
        return any(rec.name == name for rec in self.records)

    def raw(self, name: str) -> str | None:
        """Return the recorded version string of *name* (first entry wins)."""
        for rec in self.records:
            if rec.name == name:
                return rec.version
        return None

    def version(self, name: str, strip_minor: bool = False) -> Version | None:
        """Return the parsed version of *name*, or None when unknown."""
        raw = self.raw(name)
        if raw is None:
            return None
        try:
            ver = Version(raw)
        except InvalidVersion:
            logger.warning("Unparseable %s version %r in %s", name, raw, self.path)
            return None
        return strip_trailing(ver) if strip_minor else ver


def as_version(ver: str | Version) -> Version:
    return ver if isinstance(ver, Version) else Version(str(ver))


def strip_trailing(ver: Version) -> Version:
    """Drop the last release component: ``2.6.1`` -> ``2.6``."""
    release = ver.release
    if len(release) < 2:
        return ver
    return Version(".".join(str(part) for part in release[:-1]))


# ------------------------------------------------------------------
# Installed engine versions
# ------------------------------------------------------------------
def matplotlib_version() -> Version:
    import matplotlib

    return Version(matplotlib.__version__)


def freetype_version() -> Version:
    from matplotlib import ft2font

    return Version(ft2font.__freetype_version__)


ENGINE_VERSIONS: dict[str, Callable[[], Version]] = {
    "matplotlib": matplotlib_version,
    "FreeType": freetype_version,
}


def system_version(name: str) -> Version:
    """
    Return the installed version of engine *name*.

    Known engines are asked directly; anything else is looked up as an
    installed distribution.  An engine that is not installed raises
    InvalidInput.
    """
    getter = ENGINE_VERSIONS.get(name)
    if getter is not None:
        return getter()
    try:
        return Version(importlib.metadata.version(name))
    except importlib.metadata.PackageNotFoundError as err:
        raise InvalidInput(f"engine {name!r} is not installed") from err


# ------------------------------------------------------------------
# Gate
# ------------------------------------------------------------------
@dataclass(frozen=True)
class GateResult:
    """Either a pass or a skip carrying the reason."""

    skipped: bool = False
    reason: str = ""

    @classmethod
    def ok(cls) -> GateResult:
        return cls()

    @classmethod
    def skip(cls, reason: str) -> GateResult:
        return cls(skipped=True, reason=reason)

    @property
    def passed(self) -> bool:
        return not self.skipped


def compare_versions(
    dependency: str, recorded: Version | None, current: str | Version
) -> GateResult:
    """Decide whether a baseline made with *recorded* can be trusted now."""
    current = as_version(current)

    if recorded is None:
        return GateResult.skip(
            "Failed doppelganger but cannot determine baseline engine version "
            f"for {dependency}.\n"
            f"Please revalidate cases with a more recent svgdoppel ({REVALIDATE_HINT})"
        )
    if recorded < current:
        return GateResult.skip(
            "Failed doppelganger was generated with an older engine version "
            f"({dependency} {recorded} < {current}).\n"
            f"Please revalidate cases with {REVALIDATE_HINT}"
        )
    if recorded > current:
        return GateResult.skip(
            "Failed doppelganger was generated with a newer engine version "
            f"({dependency} {recorded} > {current}).\n"
            f"Please install {dependency} {recorded} on your system"
        )
    if recorded != current:
        raise InternalInvariantViolation(
            f"Unexpected version relation for {dependency}: {recorded!r} vs {current!r}"
        )
    return GateResult.ok()


def check_versions_match(
    case: Case,
    dependency: str,
    system_ver: str | Version,
    *,
    manifest: DepsManifest,
    strip_minor: bool = False,
) -> GateResult:
    """
    Gate a failed comparison of *case* on the version of *dependency*.

    Only called once the comparator has already found a mismatch.
    """
    current = as_version(system_ver)
    if strip_minor:
        current = strip_trailing(current)
    recorded = manifest.version(dependency, strip_minor=strip_minor)
    result = compare_versions(dependency, recorded, current)
    if result.skipped:
        logger.info(
            "Mismatch of %s downgraded to skip: %s baseline=%s installed=%s",
            case.name,
            dependency,
            recorded,
            current,
        )
    return result
