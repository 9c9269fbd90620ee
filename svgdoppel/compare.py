from __future__ import annotations

from pathlib import Path


def compare_files(candidate_path: str | Path, baseline_path: str | Path) -> bool:
    """
    Return True if both files hold exactly the same bytes.

    Paths are resolved to their canonical absolute form first.  There is no
    tolerance of any kind: whitespace or attribute-order differences count.
    """
    candidate = Path(candidate_path).resolve(strict=True)
    baseline = Path(baseline_path).resolve(strict=True)
    if candidate == baseline:
        return True
    if candidate.stat().st_size != baseline.stat().st_size:
        return False
    return candidate.read_bytes() == baseline.read_bytes()
