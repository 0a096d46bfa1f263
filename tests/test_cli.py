"""
End-to-end tests for the command-line entry point.
"""

import os

import pytest

from hrdups.cli import build_parser, main, config_from_args


def make_tree(root, make_file):
    make_file(root / "a" / "1.txt", "X")
    make_file(root / "a" / "2.txt", "X")
    make_file(root / "b" / "3.txt", "Y")


class TestParser:
    def test_flags(self):
        args = build_parser().parse_args(["-p", "-r", "-k", "-vv", "one", "two"])
        cfg = config_from_args(args)
        assert cfg.roots == ["one", "two"]
        assert cfg.verbose == 2
        assert cfg.dedupe.pretend and cfg.dedupe.remove and cfg.dedupe.keep_empty_dirs

    def test_default_root(self):
        cfg = config_from_args(build_parser().parse_args([]))
        assert cfg.roots == ["./"]

    def test_help_exits_without_scanning(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0
        out = capsys.readouterr().out
        assert "--pretend" in out
        assert "Building hash map" not in out

    def test_tuning_flags(self):
        cfg = config_from_args(build_parser().parse_args(["--algorithm", "blake3", "--chunk-bytes", "512"]))
        assert cfg.scanner.algorithm == "blake3"
        assert cfg.scanner.chunk_bytes == 512

    def test_non_positive_chunk_is_usage_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--chunk-bytes", "0"])
        assert exc_info.value.code == 2
        assert "Building hash map" not in capsys.readouterr().out


class TestMain:
    def test_hardlinks_example_tree(self, tmp_path, make_file, capsys):
        make_tree(tmp_path, make_file)
        assert main([str(tmp_path)]) == 0

        one, two, three = tmp_path / "a" / "1.txt", tmp_path / "a" / "2.txt", tmp_path / "b" / "3.txt"
        assert os.stat(one).st_ino == os.stat(two).st_ino
        assert os.stat(three).st_nlink == 1
        out = capsys.readouterr().out
        assert out.startswith("Building hash map...\n")
        assert "Hard-linking...\nGroup 1:\n" in out
        assert out.endswith("Done!\nSaved 0.00MiB\n")

    def test_pretend(self, tmp_path, make_file, capsys):
        make_tree(tmp_path, make_file)
        assert main(["--pretend", str(tmp_path)]) == 0
        assert os.stat(tmp_path / "a" / "1.txt").st_nlink == 1
        assert os.stat(tmp_path / "a" / "2.txt").st_nlink == 1
        assert "Group 1:" in capsys.readouterr().out

    def test_verbose_hashing_output(self, tmp_path, make_file, capsys):
        make_tree(tmp_path, make_file)
        main(["-p", "-v", str(tmp_path)])
        out = capsys.readouterr().out
        # 3.txt is hashed but belongs to no group, so only the hashing line names it
        assert out.count(str(tmp_path / "b" / "3.txt")) == 1
        assert "\t" + str(tmp_path / "b" / "3.txt") + "\n" in out

    def test_scan_error_reported_and_exit_zero(self, tmp_path, make_file, capsys):
        make_tree(tmp_path, make_file)
        assert main([str(tmp_path), str(tmp_path / "missing")]) == 0
        captured = capsys.readouterr()
        assert captured.err.startswith("Warning: Cannot open")
        assert "Done!" in captured.out
        assert os.stat(tmp_path / "a" / "1.txt").st_nlink == 2

    def test_fatal_executor_error_exit_zero(self, tmp_path, make_file, capsys, monkeypatch):
        make_tree(tmp_path, make_file)

        def refuse(path):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(os, "unlink", refuse)
        assert main([str(tmp_path)]) == 0
        captured = capsys.readouterr()
        assert captured.err.startswith("Error: Cannot delete file")
        assert "Permission denied" in captured.err
        assert "Done!" not in captured.out

    def test_remove_through_symlinked_root_keeps_data(self, tmp_path, make_file, capsys):
        data = make_file(tmp_path / "real" / "only.txt", "precious")
        os.symlink(tmp_path / "real", tmp_path / "alias")

        assert main(["--remove", "--keep", str(tmp_path / "alias"), str(tmp_path / "real")]) == 0

        assert data.read_text() == "precious"
        out = capsys.readouterr().out
        assert "Group 1:" not in out
        assert out.endswith("Saved 0.00MiB\n")
