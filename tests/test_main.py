# Copyright (C) 2025 Richard Owen
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""Tests for the lineup command line interface."""

from lineup.formation import create_formation_from_stream
from lineup.main import main
from lineup.visualizer import viewer


def _load(path):
    """Read a formation file written by the CLI."""
    with open(path, encoding="utf-8") as stream:
        return create_formation_from_stream(stream)


class TestCommands:
    """Sub-command behaviour and exit codes."""

    def test_methods_lists_builtins(self, capsys) -> None:
        """The shipped strategies are listed in registration order."""
        assert main(["methods"]) == 0
        assert capsys.readouterr().out.split()[:3] == ["Static", "UvA", "KNN"]

    def test_new_writes_a_readable_file(self, tmp_path) -> None:
        """A new file starts with a comment and loads back."""
        out = tmp_path / "sub" / "uva.conf"
        assert main(["new", "UvA", str(out)]) == 0
        text = out.read_text(encoding="utf-8")
        assert text.startswith("# UvA formation created by lineup\nFormation UvA 2\n")
        formation = _load(out)
        assert formation is not None
        assert formation.method_name() == "UvA"

    def test_new_unknown_method(self, tmp_path, capsys) -> None:
        """Unknown strategies fail without writing anything."""
        out = tmp_path / "x.conf"
        assert main(["new", "Bogus", str(out)]) == 1
        assert not out.exists()
        assert "Unknown formation method 'Bogus'" in capsys.readouterr().out

    def test_show_prints_every_player(self, tmp_path, capsys) -> None:
        """One line per player follows the summary line."""
        out = tmp_path / "static.conf"
        main(["new", "Static", str(out)])
        capsys.readouterr()
        assert main(["show", str(out), "--focus", "10", "-5"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith("Static v2 | focus (10.00, -5.00)")
        assert len(lines) == 12
        assert "Goalie" in lines[1] and "center" in lines[1]
        assert "symmetry->2" in lines[3]
        assert "( -20.00,    8.00)" in lines[3]

    def test_missing_file(self, tmp_path, capsys) -> None:
        """Reading a missing file fails cleanly."""
        assert main(["show", str(tmp_path / "none.conf")]) == 1
        assert "No formation file found" in capsys.readouterr().out

    def test_invalid_file(self, tmp_path, capsys) -> None:
        """Reading garbage fails cleanly."""
        bad = tmp_path / "bad.conf"
        bad.write_text("Formation Static 2\nBegin Roles\n", encoding="utf-8")
        assert main(["train", str(bad)]) == 1
        assert "Could not read a formation" in capsys.readouterr().out

    def test_binary_file(self, tmp_path, capsys) -> None:
        """Bytes that are not UTF-8 fail like any other unreadable file."""
        bad = tmp_path / "binary.conf"
        bad.write_bytes(b"Formation Static 2\n\xff\xfe\x00\x81\n")
        assert main(["show", str(bad)]) == 1
        assert "Could not read a formation" in capsys.readouterr().out

    def test_train_writes_output(self, tmp_path) -> None:
        """Training a KNN file writes a loadable copy."""
        src = tmp_path / "knn.conf"
        dst = tmp_path / "trained.conf"
        main(["new", "KNN", str(src)])
        assert main(["train", str(src), "-o", str(dst)]) == 0
        trained = _load(dst)
        assert trained is not None
        assert len(trained.samples()) == 1

    def test_train_in_place(self, tmp_path) -> None:
        """Without -o the input file is rewritten."""
        src = tmp_path / "static.conf"
        main(["new", "Static", str(src)])
        assert main(["train", str(src)]) == 0
        assert src.read_text(encoding="utf-8").startswith("Formation Static 2\n")

    def test_view_without_pygame(self, tmp_path, monkeypatch, capsys) -> None:
        """The view command reports a missing pygame installation."""
        src = tmp_path / "static.conf"
        main(["new", "Static", str(src)])
        monkeypatch.setattr(viewer, "pygame", None)
        assert main(["view", str(src)]) == 1
        assert "pygame is not installed" in capsys.readouterr().out

    def test_debug_dir_collects_logs(self, tmp_path) -> None:
        """A debug directory receives a session log."""
        logs = tmp_path / "logs"
        assert main(["--debug-dir", str(logs), "new", "Static", str(tmp_path / "s.conf")]) == 0
        files = list(logs.glob("formation_debug_*.txt"))
        assert len(files) == 1
        assert "ROLE_UPDATE" in files[0].read_text(encoding="utf-8")
