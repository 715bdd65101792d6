"""
End-to-end tests for the vpacker CLI on a real temporary directory.
"""
import os
import struct

import pytest
import yaml

import vpacker.cli as cli_mod


@pytest.fixture
def game_dir(tmp_path):
    root = tmp_path / "game"
    unit = root / "data" / "x"
    unit.mkdir(parents=True)
    (unit / "a.txt").write_bytes(b"hello")
    os.utime(unit / "a.txt", (1000, 1000))
    (root / "data" / "empty").mkdir()
    return root


def read_header(path):
    return struct.unpack_from("<4siii", path.read_bytes(), 0)


def test_cli_packs_each_unit(game_dir, tmp_path):
    out = tmp_path / "out"
    cli_mod.main([str(game_dir), "--output-dir", str(out)])

    assert sorted(p.name for p in out.iterdir()) == ["empty.vp", "x.vp"]
    # data/x wrapped in the synthetic 'data' root: data, x, a.txt, .., ..
    assert read_header(out / "x.vp") == (b"VPVP", 2, 21, 5)
    assert read_header(out / "empty.vp") == (b"VPVP", 2, 16, 4)


def test_cli_single_small_file_without_wrapping(game_dir, tmp_path):
    cfg_path = tmp_path / "vpacker.yaml"
    cfg_path.write_text(yaml.safe_dump({"archive": {"root_name": None}}))
    out = tmp_path / "out"

    cli_mod.main([str(game_dir), "-c", str(cfg_path), "-o", str(out)])

    blob = (out / "x.vp").read_bytes()
    assert read_header(out / "x.vp") == (b"VPVP", 2, 21, 3)
    assert blob[16:21] == b"hello"
    assert len(blob) == 21 + 3 * 44
    assert read_header(out / "empty.vp") == (b"VPVP", 2, 16, 2)


def test_cli_splits_with_max_size(tmp_path):
    unit = tmp_path / "game" / "data" / "big"
    unit.mkdir(parents=True)
    for name in ("a", "b", "c"):
        (unit / name).write_bytes(b"z" * 40)
    out = tmp_path / "out"

    cli_mod.main([str(tmp_path / "game"), "-o", str(out), "--max-size", "100"])

    assert sorted(p.name for p in out.iterdir()) == ["big-01.vp", "big-02.vp"]


def test_cli_fails_when_archive_exists(game_dir, tmp_path, capsys):
    out = tmp_path / "out"
    out.mkdir()
    (out / "x.vp").write_bytes(b"")
    with pytest.raises(SystemExit) as exc:
        cli_mod.main([str(game_dir), "-o", str(out)])
    assert exc.value.code == 1
    assert "already exists" in capsys.readouterr().err


def test_cli_fails_without_data_dir(tmp_path):
    (tmp_path / "game").mkdir()
    with pytest.raises(SystemExit) as exc:
        cli_mod.main([str(tmp_path / "game"), "-o", str(tmp_path / "out")])
    assert exc.value.code == 1


def test_cli_rejects_bad_max_size(game_dir, tmp_path):
    with pytest.raises(SystemExit) as exc:
        cli_mod.main([str(game_dir), "-o", str(tmp_path / "out"), "--max-size", "-5"])
    assert exc.value.code == 2


def test_cli_show_tree_and_dry_run(game_dir, tmp_path, capsys):
    out = tmp_path / "out"
    cli_mod.main([str(game_dir), "-o", str(out), "--show-tree", "--dry-run"])
    printed = capsys.readouterr().out
    assert "file: " in printed and "a.txt" in printed
    assert not out.exists() or list(out.iterdir()) == []


def test_cli_log_file_relative_to_output_dir(game_dir, tmp_path):
    cfg_path = tmp_path / "vpacker.json"
    cfg_path.write_text('{"logging": {"level": "INFO", "file": "vpacker.log"}}')
    out = tmp_path / "out"

    cli_mod.main([str(game_dir), "-c", str(cfg_path), "-o", str(out)])

    log_text = (out / "vpacker.log").read_text(encoding="utf-8")
    assert "VPACKER RUN START" in log_text
    assert "Wrote" in log_text
