from __future__ import annotations

from pathlib import Path

import pytest

from not_in_toc.cli import ScanMode, ScanOptions, main, parse_args


def _write(path: Path, text: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _run(args: list[str], capsys: pytest.CaptureFixture[str]) -> str:
    main(args + ["--log-level", "WARNING"])
    return capsys.readouterr().out


def test_parse_args_requires_exactly_one_mode(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        parse_args(["-d", str(tmp_path)])
    with pytest.raises(SystemExit):
        parse_args(["-d", str(tmp_path), "-o", "-m"])

    args = parse_args(["-d", str(tmp_path), "--find-orphaned-images", "-r", "-v"])
    options = ScanOptions.from_args(args)
    assert options.mode is ScanMode.ORPHANED_IMAGES
    assert options.recursive and options.verbose and not options.ignore_redirects


def test_missing_directory_aborts_before_scanning(tmp_path: Path) -> None:
    missing = tmp_path / "nope"
    with pytest.raises(SystemExit) as excinfo:
        main(["-d", str(missing), "-o"])
    assert "does not exist" in str(excinfo.value.code)


def test_missing_docfx_marker_is_fatal(tmp_path: Path) -> None:
    if any((parent / "docfx.json").is_file() for parent in [tmp_path, *tmp_path.parents]):
        pytest.skip("docfx.json exists above the temporary directory")
    with pytest.raises(SystemExit) as excinfo:
        main(["-d", str(tmp_path), "-m"])
    assert "docfx.json" in str(excinfo.value.code)


def test_orphaned_topics_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write(tmp_path / "docfx.json", "{}")
    _write(tmp_path / "TOC.md", "# [A](a.md)\n")
    a = _write(tmp_path / "a.md", "# A")
    b = _write(tmp_path / "b.md", "# B")

    out = _run(["-d", str(tmp_path), "-o"], capsys)

    assert f"Searching the {tmp_path} directory" in out
    assert f"{b}\n" in out
    assert f"{a}\n" not in out
    assert "Found 1 total .md files that are not referenced in a TOC." in out


def test_redirected_topic_toggle(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write(tmp_path / "docfx.json", "{}")
    _write(tmp_path / "TOC.md", "")
    a = _write(tmp_path / "a.md", "redirect_url: /new/location\n")

    assert str(a) not in _run(["-d", str(tmp_path), "-o", "-g"], capsys)
    assert str(a) in _run(["-d", str(tmp_path), "-o"], capsys)


def test_multiples_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write(tmp_path / "docfx.json", "{}")
    _write(tmp_path / "TOC.md", "# [A](a.md)\n# [Also A](a.md)\n")
    a = _write(tmp_path / "a.md")

    out = _run(["-d", str(tmp_path), "-m"], capsys)

    assert f"Topic '{a}' appears more than once in a TOC file." in out


def test_orphaned_images_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    logo = _write(tmp_path / "media" / "logo.png")
    _write(tmp_path / "a.md", "No pictures here.\n")

    out = _run(["-d", str(tmp_path), "-i"], capsys)

    assert "The following media files are not referenced from any .md file:" in out
    assert str(logo) in out


def test_multiples_verbose_output_shows_unknown_toc_targets(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _write(tmp_path / "docfx.json", "{}")
    _write(tmp_path / "TOC.md", "# [A](a.md)\n# [Typo](typo.md)\n")
    _write(tmp_path / "a.md")

    assert "typo.md" in _run(["-d", str(tmp_path), "-m", "-v"], capsys)
    assert "typo.md" not in _run(["-d", str(tmp_path), "-m"], capsys)
