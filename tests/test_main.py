from __future__ import annotations

from pathlib import Path

import pytest

import main


def test_generate_prints_manifest(sample_tree: Path, capsys) -> None:
    assert main.main([str(sample_tree)]) == 0
    captured = capsys.readouterr()
    lines = captured.out.splitlines()
    assert len(lines) == 3
    assert {ln.split(" : ")[0] for ln in lines[:2]} == {"a.txt", "sub/b.log"}
    assert lines[-1].startswith("Manifest checksum: ")
    assert captured.err == ""


def test_default_root_is_current_directory(sample_tree: Path, capsys, monkeypatch) -> None:
    monkeypatch.chdir(sample_tree)
    assert main.main([]) == 0
    assert "sub/b.log : " in capsys.readouterr().out


def test_end_to_end_verify(sample_tree: Path, tmp_path: Path, capsys) -> None:
    main.main([str(sample_tree)])
    manifest = tmp_path / "manifest.txt"
    manifest.write_text(capsys.readouterr().out, encoding="utf-8")

    assert main.main(["--verify", str(manifest)]) == 0
    assert capsys.readouterr().out == "Valid\n"

    kept = [ln for ln in manifest.read_text(encoding="utf-8").splitlines(keepends=True) if not ln.startswith("sub/b.log")]
    manifest.write_text("".join(kept), encoding="utf-8")
    assert main.main(["--verify", str(manifest)]) == 1
    assert capsys.readouterr().out == "Corrupted\n"


def test_verify_invalid_prints_nothing_on_stdout(tmp_path: Path, capsys) -> None:
    manifest = tmp_path / "manifest.txt"
    manifest.write_text("a.txt : 00000001\n", encoding="utf-8")
    assert main.main(["--verify", str(manifest)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Invalid or missing checksum line" in captured.err


def test_exclusion_flags(tmp_path: Path, capsys) -> None:
    root = tmp_path / "tree"
    root.mkdir()
    for name in ["keep.py", "secret.txt", "run.sh"]:
        (root / name).write_text(name, encoding="utf-8")

    assert main.main([str(root), "-e", "secret.txt", "-E", "*.sh", "--sort"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert [ln.split(" : ")[0] for ln in lines[:-1]] == ["keep.py"]


@pytest.mark.parametrize("argv", [["-e"], ["-E"], ["--verify"], ["--bogus"], ["--verify", "m", "--watch"]])
def test_usage_errors_exit_non_zero_without_output(argv, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main.main(argv)
    assert excinfo.value.code != 0
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err


def test_version_flag(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main.main(["-v"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out.strip() == "commit: unknown"


def test_failed_verify_sends_alert(tmp_path: Path, capsys, monkeypatch) -> None:
    manifest = tmp_path / "manifest.txt"
    manifest.write_text("a.txt : 00000001\nManifest checksum: 00000000\n", encoding="utf-8")
    calls = []
    monkeypatch.setattr(main, "send_alert", lambda *args: calls.append(args))

    assert main.main(["--verify", str(manifest), "--webhook", "https://hooks.invalid/x"]) == 1
    assert len(calls) == 1
    subject, stored, computed, url = calls[0]
    assert subject == str(manifest)
    assert stored == "00000000"
    assert computed != stored
    assert url == "https://hooks.invalid/x"


def test_valid_verify_does_not_alert(sample_tree: Path, tmp_path: Path, capsys, monkeypatch) -> None:
    main.main([str(sample_tree)])
    manifest = tmp_path / "manifest.txt"
    manifest.write_text(capsys.readouterr().out, encoding="utf-8")
    monkeypatch.setattr(main, "send_alert", lambda *args: pytest.fail("alert sent for a valid manifest"))

    assert main.main(["--verify", str(manifest), "--webhook", "https://hooks.invalid/x"]) == 0


def test_watch_flag_starts_monitor(sample_tree: Path, monkeypatch) -> None:
    seen = {}

    def fake_start(root, exclusion, sort_entries, webhook_url):
        seen.update(root=root, exclusion=exclusion, sort=sort_entries, url=webhook_url)

    monkeypatch.setattr(main, "start_monitoring", fake_start)
    assert main.main([str(sample_tree), "--watch", "-e", "tmp"]) == 0
    assert seen["root"] == str(sample_tree)
    assert seen["exclusion"].exclude_name == "tmp"
    assert seen["sort"] is False
    assert seen["url"] is None
