import importlib.metadata

import matplotlib
import pytest
from packaging.version import Version

from svgdoppel.cli.check_engines import main
from svgdoppel.versions import strip_trailing

MPL_STRIPPED = strip_trailing(Version(matplotlib.__version__))


def test_matching_manifest_exits_zero(figs_root, write_current_deps, capsys):
    write_current_deps()
    assert main([str(figs_root)]) == 0
    out = capsys.readouterr().out
    assert f"matplotlib: baseline={MPL_STRIPPED} installed={MPL_STRIPPED} [ok]" in out


def test_missing_manifest_exits_one(tmp_path, capsys):
    assert main([str(tmp_path)]) == 1
    out = capsys.readouterr().out
    assert "baseline=- " in out
    assert "[skip]" in out
    assert "  Failed doppelganger but cannot determine baseline engine version" in out


def test_older_baseline(figs_root, write_deps, capsys):
    write_deps(matplotlib="1.0.0")
    assert main([str(figs_root)]) == 1
    assert "older engine version" in capsys.readouterr().out


def test_no_strip_compares_full_versions(figs_root, write_deps, capsys):
    write_deps(matplotlib=f"{MPL_STRIPPED}.999")
    assert main([str(figs_root)]) == 0
    capsys.readouterr()
    assert main([str(figs_root), "--no-strip"]) == 1
    assert "newer engine version" in capsys.readouterr().out


def test_explicit_engines_and_deps_file(tmp_path, capsys):
    installed = importlib.metadata.version("packaging")
    (tmp_path / "versions.txt").write_text(f"packaging: {installed}\n")
    argv = [str(tmp_path), "--engine", "packaging", "--deps-file", "versions.txt", "--no-strip"]
    assert main(argv) == 0
    assert f"packaging: baseline={Version(installed)}" in capsys.readouterr().out


def test_one_skipping_engine_fails_the_run(figs_root, write_current_deps, capsys):
    write_current_deps()
    assert main([str(figs_root), "--engine", "matplotlib", "--engine", "packaging"]) == 1
    out = capsys.readouterr().out
    assert "matplotlib:" in out and "packaging:" in out


def test_figs_dir_is_required(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2


def test_missing_engine_is_reported(figs_root, write_current_deps, capsys):
    write_current_deps()
    argv = [str(figs_root), "--engine", "no-such-svg-engine", "--engine", "matplotlib"]
    assert main(argv) == 1
    out = capsys.readouterr().out
    assert "no-such-svg-engine: engine 'no-such-svg-engine' is not installed [error]" in out
    assert "matplotlib: baseline=" in out
