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
"""Tests for reading and writing complete formation documents."""

import io

import pytest

from lineup.formation import (
    SampleData,
    SampleDataSet,
    StaticFormation,
    UvAFormation,
    create_formation,
    create_formation_from_stream,
)
from lineup.geometry import Vector2D
from lineup.utils.debug import FormationDebugger

METHODS = ["Static", "UvA", "KNN"]
FOCUS_POINTS = [Vector2D(0.0, 0.0), Vector2D(12.0, -8.0), Vector2D(-30.0, 20.0)]


def _trained(method: str, make_layout_sample):
    """Create a default formation with a few samples and train it."""
    formation = create_formation(method)
    formation.create_default_data()
    for x, y in [(15.0, 10.0), (-25.0, -5.0), (30.0, -20.0)]:
        formation.samples().add_data(make_layout_sample(x, y))
    formation.train()
    return formation


def _text(formation) -> str:
    """Print ``formation`` to a string."""
    return formation.print(io.StringIO()).getvalue()


def _static_text() -> str:
    """Document of a default static formation."""
    formation = StaticFormation()
    formation.create_default_data()
    centre = Vector2D(0.0, 0.0)
    formation.samples().add_data(SampleData(centre, formation.get_positions(centre)))
    return _text(formation)


class TestRoundTrip:
    """Printed documents restore equivalent formations."""

    @pytest.mark.parametrize("method", METHODS)
    def test_round_trip_preserves_behaviour(self, method: str, make_layout_sample) -> None:
        """Roles, samples and positions survive print then read."""
        original = _trained(method, make_layout_sample)
        text = _text(original)
        loaded = create_formation_from_stream(io.StringIO(text))

        assert loaded is not None
        assert type(loaded) is type(original)
        assert loaded.version() == original.version()
        for n in range(1, 12):
            assert loaded.get_symmetry_number(n) == original.get_symmetry_number(n)
            assert loaded.get_role_name(n) == original.get_role_name(n)
        assert loaded.samples().data() == original.samples().data()
        for focus in FOCUS_POINTS:
            assert loaded.get_positions(focus) == original.get_positions(focus)

    @pytest.mark.parametrize("method", METHODS)
    def test_printing_is_stable(self, method: str, make_layout_sample) -> None:
        """Reading and printing again reproduces the same text."""
        text = _text(_trained(method, make_layout_sample))
        assert _text(create_formation_from_stream(io.StringIO(text))) == text

    def test_document_layout(self) -> None:
        """Header, role block, configuration and samples appear in order."""
        lines = _static_text().splitlines()
        assert lines[0] == "Formation Static 2"
        assert lines[1] == "Begin Roles"
        assert lines[2] == "1 Goalie 0"
        assert lines[4] == "3 CenterBack 2"
        assert lines[13] == "End Roles"
        assert lines[14] == "Begin Positions"
        assert "3 " not in [line[:2] for line in lines[15:22]]
        assert lines[22] == "End Positions"
        assert lines[-2] == "End Samples"
        assert lines[-1] == "End"

    def test_comments_and_blank_lines_anywhere(self) -> None:
        """Comment and blank lines between any two lines are ignored."""
        lines = _static_text().splitlines()
        noisy = "\n".join(f"# note {i}\n\n{line}" for i, line in enumerate(lines)) + "\n# trailing\n"
        loaded = create_formation_from_stream(io.StringIO(noisy))
        assert loaded is not None
        assert loaded.get_role_name(11) == "CenterForward"

    def test_print_comment_output_is_skipped(self) -> None:
        """Comments written by print_comment read back as nothing."""
        formation = StaticFormation()
        formation.create_default_data()
        stream = io.StringIO()
        formation.print_comment(stream, "first line\nsecond line")
        formation.print(stream)
        assert stream.getvalue().startswith("# first line\n# second line\nFormation Static 2\n")
        assert create_formation_from_stream(io.StringIO(stream.getvalue())) is not None

    def test_partially_named_formation_is_not_printed(self) -> None:
        """Printing with unnamed players writes nothing and says who is missing."""
        formation = create_formation("Static")
        formation.debugger = FormationDebugger(output_dir=None)
        assert formation.update_role(1, -1, "CB")
        assert formation.update_role(2, 1, "CB")
        assert formation.unnamed_players() == list(range(3, 12))

        stream = io.StringIO()
        with pytest.raises(ValueError, match="no role name"):
            formation.print(stream)
        assert stream.getvalue() == ""
        assert any("print_refused" in e for e in formation.debugger.get_recent_events())

        for n in range(3, 12):
            formation.update_role(n, 0, f"P{n}")
        assert formation.unnamed_players() == []
        loaded = create_formation_from_stream(io.StringIO(_text(formation)))
        assert loaded is not None
        assert loaded.get_symmetry_number(2) == 1

    def test_roles_in_any_order(self) -> None:
        """A mirror may be listed before its reference."""
        lines = _static_text().splitlines()
        role_lines = lines[2:13]
        shuffled = lines[:2] + list(reversed(role_lines)) + lines[13:]
        loaded = create_formation_from_stream(io.StringIO("\n".join(shuffled)))
        assert loaded is not None
        assert loaded.get_symmetry_number(3) == 2


class TestVersions:
    """Format version handling."""

    def test_version_one_has_count_less_samples(self, make_layout_sample) -> None:
        """Version 1 documents load and print without a sample count."""
        text = _text(_trained("Static", make_layout_sample))
        v1 = text.replace("Formation Static 2", "Formation Static 1", 1).replace("Begin Samples 3", "Begin Samples")
        loaded = create_formation_from_stream(io.StringIO(v1))
        assert loaded is not None
        assert loaded.version() == 1
        assert len(loaded.samples()) == 3
        assert _text(loaded) == v1

    def test_unsupported_version_is_rejected(self) -> None:
        """Direct reads refuse versions outside the supported range."""
        text = _static_text().replace("Formation Static 2", "Formation Static 9", 1)
        assert not StaticFormation().read(io.StringIO(text))

    def test_wrong_method_name_is_rejected(self) -> None:
        """A strategy refuses a document written by another strategy."""
        assert not UvAFormation().read(io.StringIO(_static_text()))


class TestMalformedDocuments:
    """Structural problems make reading fail."""

    @pytest.mark.parametrize(
        "old, new",
        [
            ("5 SideBack 4\n", ""),  # missing role
            ("5 SideBack 4\n", "4 SideBack -1\n"),  # duplicate role
            ("3 CenterBack 2\n", "3 CenterBack 6\n"),  # mirrors a CENTER player
            ("3 CenterBack 2\n", "3 CenterBack 3\n"),  # mirrors itself
            ("6 DefensiveHalf 0\n", "6 Defensive Half 0\n"),  # spaced name
            ("Begin Samples 1", "Begin Samples 2"),  # count mismatch
            ("Ball 0.0 0.0", "Ball zero 0.0"),  # bad number
            ("End Positions\n", "3 -20.0 8.0\nEnd Positions\n"),  # SYMMETRY position
            ("1 -50.0 0.0\n", ""),  # missing position
            ("End Samples\nEnd\n", "End Samples\n"),  # missing end tag
        ],
    )
    def test_rejected(self, old: str, new: str) -> None:
        """Each corruption of a valid document is refused."""
        text = _static_text()
        assert old in text
        assert create_formation_from_stream(io.StringIO(text.replace(old, new, 1))) is None
        assert not StaticFormation().read(io.StringIO(text.replace(old, new, 1)))

    def test_failure_is_logged_with_line_number(self) -> None:
        """The debugger learns where parsing stopped."""
        text = _static_text().replace("3 CenterBack 2\n", "3 CenterBack 2 extra\n", 1)
        formation = StaticFormation()
        formation.debugger = FormationDebugger(output_dir=None)
        assert not formation.read(io.StringIO(text))
        events = formation.debugger.get_recent_events()
        assert any("FORMAT_ERROR" in e and "Line: 5" in e for e in events)


class TestSharedSamples:
    """The sample set is shared by reference."""

    def test_set_samples_aliases(self, make_layout_sample) -> None:
        """Edits through the caller's handle are visible to the formation."""
        formation = StaticFormation()
        formation.create_default_data()
        shared = SampleDataSet()
        formation.set_samples(shared)
        shared.add_data(make_layout_sample(10.0, 0.0))
        assert formation.samples() is shared
        assert len(formation.samples()) == 1

    def test_read_refills_the_same_instance(self, make_layout_sample) -> None:
        """Reading replaces the contents, not the container."""
        text = _text(_trained("Static", make_layout_sample))
        formation = StaticFormation()
        handle = formation.samples()
        assert formation.read(io.StringIO(text))
        assert formation.samples() is handle
        assert len(handle) == 3

    def test_two_formations_share_one_set(self, make_layout_sample) -> None:
        """Formations holding the same set see each other's samples."""
        first = create_formation("Static")
        second = create_formation("UvA")
        second.set_samples(first.samples())
        first.samples().add_data(make_layout_sample(5.0, 5.0))
        assert len(second.samples()) == 1
