from __future__ import annotations

import os
from pathlib import Path
from typing import Any

LOG_PATH_ENV = "SVGDOPPEL_LOG_PATH"


class DoppelgangerConfig:
    """
    Stores rendering and baseline-store settings.
    """

    # ----------------------------------------------------------------
    # Default figure settings (720 x 576 px canvas)
    # ----------------------------------------------------------------
    DEFAULT_FIGURE = {"figsize": (10, 8), "dpi": 72}

    # ----------------------------------------------------------------
    # rcParams applied while the SVG is written
    # ----------------------------------------------------------------
    DEFAULT_SVG_RC = {
        "svg.hashsalt": "svgdoppel",  # stable clip-path / glyph ids
        "svg.fonttype": "none",  # keep text as <text>, not glyph paths
        "svg.image_inline": True,
        "path.simplify": True,
    }

    # ----------------------------------------------------------------
    # Keyword arguments forwarded to `Figure.savefig`
    # ----------------------------------------------------------------
    DEFAULT_SAVEFIG = {
        "format": "svg",
        # no timestamp, no engine version string in <metadata>
        "metadata": {"Date": None, "Creator": None},
    }

    # ----------------------------------------------------------------
    # Engines gated when a comparison fails.
    # name -> strip the trailing version component before comparing
    # ----------------------------------------------------------------
    DEFAULT_ENGINES = {"matplotlib": True}

    def __init__(
        self,
        figs_dir: str | Path = "figs",
        deps_file: str = "deps.txt",
        figure: dict | None = None,
        svg_rc: dict | None = None,
        savefig: dict | None = None,
        engines: dict[str, bool] | None = None,
        log_path: str | Path | None = None,
    ):
        """
        Initialize the DoppelgangerConfig instance.

        Parameters:
        - figs_dir: Baseline root, relative to the test directory.
        - deps_file: Name of the engine-version manifest inside *figs_dir*.
        - figure: Overrides for DEFAULT_FIGURE (figsize, dpi).
        - svg_rc: Overrides for DEFAULT_SVG_RC.
        - savefig: Overrides for DEFAULT_SAVEFIG.
        - engines: Replaces DEFAULT_ENGINES when given.
        - log_path: File receiving mismatch dumps. Falls back to the
          SVGDOPPEL_LOG_PATH environment variable.
        """
        self.figs_dir = Path(figs_dir)
        self.deps_file = deps_file

        fig_opts = {**self.DEFAULT_FIGURE, **(figure or {})}
        self.figsize = tuple(fig_opts["figsize"])
        self.dpi = fig_opts["dpi"]

        self.svg_rc = {**self.DEFAULT_SVG_RC, **(svg_rc or {})}
        self.savefig = {**self.DEFAULT_SAVEFIG, **(savefig or {})}
        self.engines = dict(self.DEFAULT_ENGINES if engines is None else engines)

        if log_path is None:
            log_path = os.environ.get(LOG_PATH_ENV) or None
        self.log_path = Path(log_path) if log_path else None

    def savefig_kwargs(self) -> dict[str, Any]:
        """Return a fresh copy of the savefig kwargs (metadata included)."""
        kwargs = dict(self.savefig)
        if isinstance(kwargs.get("metadata"), dict):
            kwargs["metadata"] = dict(kwargs["metadata"])
        return kwargs
