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
"""Tests for the formation debug logger."""

from lineup.formation import StaticFormation
from lineup.utils.debug import FormationDebugger


class TestFormationDebugger:
    """Structured log output."""

    def test_memory_only_session(self) -> None:
        """Without an output directory nothing is written to disk."""
        debugger = FormationDebugger(output_dir=None)
        assert debugger.log_file is None
        debugger.log_error("unit", "something odd")
        events = debugger.get_recent_events()
        assert len(events) == 1
        assert events[0].startswith("00001 [")
        assert "ERROR: Type: unit | Details: something odd" in events[0]

    def test_session_file(self, tmp_path) -> None:
        """Entries are streamed to a session file."""
        debugger = FormationDebugger(output_dir=str(tmp_path / "logs"))
        debugger.log_format_error("Static", 7, "bad line")
        debugger.close()

        files = list((tmp_path / "logs").glob("formation_debug_*.txt"))
        assert len(files) == 1
        content = files[0].read_text(encoding="utf-8")
        assert content.startswith("=== Formation Debug Session:")
        assert "FORMAT_ERROR: Method: Static | Line: 7 | Details: bad line" in content

    def test_recent_events_limit(self) -> None:
        """Only the newest entries are returned."""
        debugger = FormationDebugger(output_dir=None)
        for i in range(30):
            debugger.log_formation_event("KNN", "train", f"run {i}")
        events = debugger.get_recent_events(limit=5)
        assert len(events) == 5
        assert events[-1].endswith("run 29")

    def test_formation_lifecycle_is_logged(self) -> None:
        """Default creation and training of a formation reach the log."""
        formation = StaticFormation()
        formation.debugger = FormationDebugger(output_dir=None)
        formation.create_default_data()
        formation.train()
        events = formation.debugger.get_recent_events(limit=50)
        assert sum("ROLE_UPDATE" in e and "accepted" in e for e in events) == 11
        assert any("Event: default" in e for e in events)
        assert any("Event: train" in e for e in events)
