# svgdoppel/renderers.py
"""
Adapters turning plot objects into deterministic SVG files.

Every supported plot family is wrapped in a :class:`Renderable`.  The
default renderer :func:`write_svg` picks the adapter with
:func:`as_renderable` and writes the file with the SVG rcParams of the
active configuration (fixed hash salt, text kept as text, no timestamp).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable

import matplotlib as mpl
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import xarray as xr
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from .config import DoppelgangerConfig
from .context import current_context
from .exceptions import InvalidInput


class Renderable(ABC):
    """Something that can write itself to an SVG file."""

    # packages a baseline of this plot family depends on
    dependencies: tuple[str, ...] = ("matplotlib",)

    def __init__(self, config: DoppelgangerConfig | None = None) -> None:
        self.config = config or current_context().config

    @abstractmethod
    def render_to(self, path: Path, title: str) -> None:  # noqa: D401
        """Write the SVG of this object to *path*."""
        ...

    # ---------- Helper ---------- #

    def _save(self, fig: Figure, path: Path) -> None:
        with mpl.rc_context(self.config.svg_rc):
            fig.savefig(path, **self.config.savefig_kwargs())

    def _new_figure(self) -> tuple[Figure, Axes]:
        return plt.subplots(figsize=self.config.figsize, dpi=self.config.dpi)


@contextmanager
def temporary_suptitle(figure: Figure | None, title: str) -> Iterator[None]:
    """
    Show *title* as the suptitle of *figure* inside the block.

    Figures that already carry a suptitle keep it.  The figure is left as
    it was found.
    """
    if not title or figure is None or figure.get_suptitle():
        yield
        return
    previous = figure._suptitle
    text = figure.suptitle(title)
    try:
        yield
    finally:
        if previous is None:
            text.remove()
            figure._suptitle = None
        else:
            previous.set_text("")


class FigureRenderable(Renderable):
    """A matplotlib Figure; *title* becomes its suptitle unless it has one."""

    def __init__(self, figure: Figure, config: DoppelgangerConfig | None = None) -> None:
        super().__init__(config)
        self.figure = figure

    def render_to(self, path: Path, title: str) -> None:
        with temporary_suptitle(self.figure, title):
            self._save(self.figure, path)


class AxesRenderable(FigureRenderable):
    """A single Axes; the whole parent figure is written."""

    def __init__(self, ax: Axes, config: DoppelgangerConfig | None = None) -> None:
        super().__init__(ax.figure, config)
        self.ax = ax


class CallableRenderable(Renderable):
    """
    A zero-argument function drawing with pyplot.

    It runs on a fresh figure of the configured size.  If it returns a
    Figure (or Axes) that one is written instead.  All figures created
    here are closed afterwards.
    """

    def __init__(self, func: Callable[[], Any], config: DoppelgangerConfig | None = None) -> None:
        super().__init__(config)
        self.func = func

    def render_to(self, path: Path, title: str) -> None:
        fig, _ = self._new_figure()
        opened = [fig]
        try:
            result = self.func()
            if isinstance(result, Axes):
                result = result.figure
            target = result if isinstance(result, Figure) else plt.gcf()
            if target is not fig:
                opened.append(target)
            FigureRenderable(target, self.config).render_to(path, title)
        finally:
            for f in opened:
                plt.close(f)


class PlotMethodRenderable(Renderable):
    """Objects exposing ``.plot(ax=...)`` such as xarray and pandas containers."""

    def __init__(
        self,
        obj: Any,
        dependencies: tuple[str, ...] = ("matplotlib",),
        config: DoppelgangerConfig | None = None,
    ) -> None:
        super().__init__(config)
        self.obj = obj
        self.dependencies = dependencies

    def render_to(self, path: Path, title: str) -> None:
        fig, ax = self._new_figure()
        try:
            self.obj.plot(ax=ax)
            if title:
                ax.set_title(title)
            self._save(fig, path)
        finally:
            plt.close(fig)


class ArrayRenderable(Renderable):
    """A numpy array: 1-D as a line, 2-D as an image."""

    def __init__(self, array: np.ndarray, config: DoppelgangerConfig | None = None) -> None:
        super().__init__(config)
        if array.ndim not in (1, 2):
            raise InvalidInput(f"only 1-D or 2-D arrays can be drawn, got {array.ndim}-D")
        self.array = array

    def render_to(self, path: Path, title: str) -> None:
        fig, ax = self._new_figure()
        try:
            if self.array.ndim == 1:
                ax.plot(self.array)
            else:
                ax.imshow(self.array, interpolation="nearest")
            if title:
                ax.set_title(title)
            self._save(fig, path)
        finally:
            plt.close(fig)


class SavefigRenderable(Renderable):
    """Duck-typed objects with a ``savefig`` method (e.g. seaborn grids)."""

    def __init__(self, obj: Any, config: DoppelgangerConfig | None = None) -> None:
        super().__init__(config)
        self.obj = obj

    def render_to(self, path: Path, title: str) -> None:
        figure = getattr(self.obj, "figure", None)
        if not isinstance(figure, Figure):
            title = ""
        with temporary_suptitle(figure, title), mpl.rc_context(self.config.svg_rc):
            self.obj.savefig(path, **self.config.savefig_kwargs())


def as_renderable(obj: Any, config: DoppelgangerConfig | None = None) -> Renderable:
    """Wrap *obj* in the adapter of its plot family."""
    if isinstance(obj, Renderable):
        return obj
    if isinstance(obj, Figure):
        return FigureRenderable(obj, config)
    if isinstance(obj, Axes):
        return AxesRenderable(obj, config)
    if isinstance(obj, xr.DataArray):
        return PlotMethodRenderable(obj, ("xarray", "matplotlib"), config)
    if isinstance(obj, (pd.Series, pd.DataFrame)):
        return PlotMethodRenderable(obj, ("pandas", "matplotlib"), config)
    if isinstance(obj, np.ndarray):
        return ArrayRenderable(obj, config)
    if callable(getattr(obj, "savefig", None)):
        return SavefigRenderable(obj, config)
    if callable(obj):
        return CallableRenderable(obj, config)
    raise InvalidInput(f"don't know how to draw a {type(obj).__name__}")


def dependencies_of(obj: Any) -> tuple[str, ...]:
    """Packages the baseline of *obj* depends on; empty if *obj* is not drawable."""
    try:
        return as_renderable(obj).dependencies
    except InvalidInput:
        return ()


def write_svg(fig: Any, path: str | Path, title: str = "") -> None:
    """
    Default renderer: write *fig* as deterministic SVG to *path*.

    Parameters
    ----------
    fig : Figure, Axes, callable, DataArray, Series, DataFrame, ndarray or Renderable
        The plot to write.
    path : str or Path
        Destination file.
    title : str
        Figure title, added when the plot has none.
    """
    as_renderable(fig).render_to(Path(path), title)
