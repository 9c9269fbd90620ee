import re

import pytest

from svgdoppel import InvalidInput, normalize
from svgdoppel.naming import context_name

NORMALIZED = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")

TITLES = [
    "Disp Histogram!!",
    "my-plot",
    "  leading and trailing  ",
    "--already--dashed--",
    "MiXeD_Case.Title",
    "unicode: température °C",
    "tab\tand\nnewline",
    "123",
    "a",
]


def test_normalize_example():
    assert normalize("Disp Histogram!!") == "disp-histogram"


@pytest.mark.parametrize("title", TITLES)
def test_normalize_yields_safe_identifier(title):
    assert NORMALIZED.match(normalize(title))


@pytest.mark.parametrize("title", TITLES + ["!!!", ""])
def test_normalize_is_idempotent(title):
    once = normalize(title)
    assert normalize(once) == once


def test_normalize_without_alphanumerics_is_empty():
    assert normalize("!!! ???") == ""
    assert normalize("") == ""


def test_normalize_collapses_and_strips():
    assert normalize("__a   b__") == "a-b"
    assert normalize("A.B", sep="_") == "a_b"


@pytest.mark.parametrize("bad", [None, 3, ["a", "b"], b"bytes"])
def test_normalize_rejects_non_strings(bad):
    with pytest.raises(InvalidInput, match="single string"):
        normalize(bad)


@pytest.mark.parametrize(
    "module, expected",
    [
        ("test_plots.py", "plots"),
        ("test-Scatter Plots.py", "scatter-plots"),
        ("tests/test_maps.py", "maps"),
        ("figures.py", "figures"),
    ],
)
def test_context_name(module, expected):
    assert context_name(module) == expected
