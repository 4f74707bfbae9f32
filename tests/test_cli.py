import shutil

import pytest

from svg_inliner import cli


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    """Keep the CLI from reconfiguring the test session's logging."""
    calls = []
    monkeypatch.setattr(cli, "setup_logging", lambda debug=False: calls.append(debug))
    return calls


@pytest.fixture
def workdir(tmp_path, fixtures_dir):
    target = tmp_path / "site"
    shutil.copytree(fixtures_dir, target)
    return target


def test_stdout(workdir, capsys):
    code = cli.main([str(workdir / "svg.html"), "--stdout", "--root", str(workdir)])
    captured = capsys.readouterr()
    assert code == 0
    assert 'viewBox="0 0 16 16"' in captured.out


def test_output_file(workdir, tmp_path, capsys):
    out = tmp_path / "result.html"
    code = cli.main([str(workdir / "img.html"), "-o", str(out), "--root", str(workdir)])
    assert code == 0
    assert "<svg" in out.read_text(encoding="utf-8")
    assert f"Wrote {out}" in capsys.readouterr().out


def test_out_dir_with_several_inputs(workdir, tmp_path):
    out_dir = tmp_path / "dist"
    code = cli.main([
        str(workdir / "svg.html"), str(workdir / "img.html"),
        "--out-dir", str(out_dir), "--root", str(workdir),
    ])
    assert code == 0
    assert sorted(p.name for p in out_dir.iterdir()) == ["img.html", "svg.html"]


def test_in_place(workdir):
    code = cli.main([str(workdir / "svg.html"), "--root", str(workdir)])
    assert code == 0
    assert "<path" in (workdir / "svg.html").read_text(encoding="utf-8")


def test_option_flags(workdir, capsys):
    code = cli.main([
        str(workdir / "custom-selectors.html"), "--stdout", "--root", str(workdir),
        "--selector", ".select-me", "--selector", ".also-select-me", "--attrs", ".*",
    ])
    out = capsys.readouterr().out
    assert code == 0
    assert out.count("<path") == 2
    assert 'src="do-not-select-me.svg"' in out


def test_spritesheet_flags(workdir, capsys):
    code = cli.main([
        str(workdir / "spritesheet.html"), "--stdout", "--root", str(workdir),
        "--spritesheet", "--spritesheet-class", "icons",
    ])
    out = capsys.readouterr().out
    assert code == 0
    assert 'class="icons"' in out
    assert out.count("<symbol") == 3


def test_debug_flag_reaches_logging_setup(workdir, no_logging_setup):
    cli.main([str(workdir / "no-img.html"), "--stdout", "--debug"])
    assert no_logging_setup == [True]


class TestExitCodes:
    """Failures map to distinct exit codes and an ``error:`` line."""

    def test_usage_error(self, capsys):
        assert cli.main([]) == 2
        assert "error:" in capsys.readouterr().err

    def test_output_with_several_inputs(self, workdir, capsys):
        code = cli.main([str(workdir / "svg.html"), str(workdir / "img.html"), "-o", "x.html"])
        err = capsys.readouterr().err
        assert code == 2
        assert "hint: Use --out-dir" in err

    def test_invalid_option(self, workdir, capsys):
        code = cli.main([str(workdir / "svg.html"), "--stdout", "--root", str(workdir / "nowhere")])
        assert code == 2
        assert "Invalid option: root" in capsys.readouterr().err

    def test_invalid_selector(self, workdir, capsys):
        code = cli.main([str(workdir / "svg.html"), "--stdout", "--selector", "img[["])
        assert code == 2
        assert "Invalid option: selectors" in capsys.readouterr().err

    def test_unresolved_reference(self, workdir, capsys):
        code = cli.main([str(workdir / "nonexistent-src.html"), "--stdout", "--root", str(workdir)])
        captured = capsys.readouterr()
        assert code == 3
        assert "Invalid source path: does-not-exist.svg" in captured.err
        assert captured.out == ""

    def test_load_error(self, workdir, capsys):
        (workdir / "github.svg").write_bytes(b"")
        code = cli.main([str(workdir / "svg.html"), "--stdout", "--root", str(workdir)])
        assert code == 3
        assert "Could not load SVG file" in capsys.readouterr().err

    def test_missing_input(self, tmp_path, capsys):
        code = cli.main([str(tmp_path / "missing.html"), "--stdout"])
        assert code == 2
        assert "Input file not found" in capsys.readouterr().err
