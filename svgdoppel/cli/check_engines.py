#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
CLI: svgdoppel-check-engines

Compare the engine versions recorded next to the baselines with the
installed ones and report what the version gate would decide.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from svgdoppel.config import DoppelgangerConfig
from svgdoppel.exceptions import InvalidInput
from svgdoppel.versions import (
    DepsManifest,
    compare_versions,
    strip_trailing,
    system_version,
)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for svgdoppel-check-engines."""
    parser = argparse.ArgumentParser(
        description="Check baseline engine versions against the installed ones",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Default engines (matplotlib, patch level ignored)
  svgdoppel-check-engines tests/figs

  # Also check FreeType, compare full versions
  svgdoppel-check-engines tests/figs --engine matplotlib --engine FreeType --no-strip
        """,
    )
    parser.add_argument("figs_dir", type=Path, help="Baseline directory holding deps.txt")
    parser.add_argument(
        "--engine",
        action="append",
        dest="engines",
        help="Engine to check (repeatable, default: configured engines)",
    )
    parser.add_argument(
        "--deps-file",
        default="deps.txt",
        help="Manifest file name inside FIGS_DIR (default: deps.txt)",
    )
    parser.add_argument(
        "--no-strip",
        action="store_true",
        help="Compare full versions instead of dropping the trailing component",
    )
    ns = parser.parse_args(argv)

    manifest = DepsManifest.read(ns.figs_dir / ns.deps_file)
    if ns.engines:
        engines = {name: not ns.no_strip for name in ns.engines}
    else:
        engines = {
            name: strip and not ns.no_strip
            for name, strip in DoppelgangerConfig.DEFAULT_ENGINES.items()
        }

    status = 0
    for name, strip in engines.items():
        try:
            current = system_version(name)
        except InvalidInput as err:
            print(f"{name}: {err} [error]")
            status = 1
            continue
        if strip:
            current = strip_trailing(current)
        recorded = manifest.version(name, strip_minor=strip)
        result = compare_versions(name, recorded, current)
        verdict = "ok" if result.passed else "skip"
        print(f"{name}: baseline={recorded or '-'} installed={current} [{verdict}]")
        if result.skipped:
            print("  " + result.reason.replace("\n", "\n  "))
            status = 1
    return status


if __name__ == "__main__":
    sys.exit(main())
