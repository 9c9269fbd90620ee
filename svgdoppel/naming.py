# svgdoppel/naming.py
from __future__ import annotations

import re

from .exceptions import InvalidInput

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def normalize(title: str, sep: str = "-") -> str:
    """
    Convert a human title into a file- and URL-safe identifier.

    ``"Disp Histogram!!"`` becomes ``"disp-histogram"``.  The result only
    contains ``[a-z0-9]`` and single separators, never at either end, so
    ``normalize(normalize(s)) == normalize(s)``.  A title without any
    alphanumeric character yields ``""``.
    """
    if not isinstance(title, str):
        raise InvalidInput(
            f"title must be a single string, got {type(title).__name__}"
        )
    s = _NON_ALNUM_RE.sub(sep, title.lower())
    s = re.sub(f"{re.escape(sep)}{{2,}}", sep, s)
    return s.strip(sep)


def context_name(module_name: str) -> str:
    """
    Derive a context name from a test module file name.

    ``test_plots.py`` and ``test-plots.py`` both give ``"plots"``.
    """
    stem = module_name.rsplit("/", 1)[-1]
    if stem.endswith(".py"):
        stem = stem[:-3]
    for prefix in ("test_", "test-"):
        if stem.startswith(prefix):
            stem = stem[len(prefix):]
            break
    return normalize(stem)
