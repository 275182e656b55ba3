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
"""Tests for the planar vector helper."""

from lineup.geometry import Vector2D


class TestVector2D:
    """Unit tests for Vector2D."""

    def test_arithmetic(self) -> None:
        """Add, subtract and scale component-wise."""
        a = Vector2D(1.0, 2.0)
        b = Vector2D(3.0, -4.0)
        assert a + b == Vector2D(4.0, -2.0)
        assert b - a == Vector2D(2.0, -6.0)
        assert a * 2 == Vector2D(2.0, 4.0)

    def test_magnitude_and_distance(self) -> None:
        """Measure length and separation."""
        assert abs(Vector2D(3.0, 4.0).magnitude() - 5.0) < 1e-9
        assert Vector2D(0.0, 0.0).magnitude() == 0.0
        assert abs(Vector2D(1.0, 1.0).distance_to(Vector2D(4.0, 5.0)) - 5.0) < 1e-9
        assert Vector2D(2.0, 2.0).distance_to(Vector2D(2.0, 2.0)) == 0.0

    def test_mirrored_negates_lateral_axis_only(self) -> None:
        """Mirroring keeps x and flips y."""
        assert Vector2D(-10.0, 5.0).mirrored() == Vector2D(-10.0, -5.0)
        assert Vector2D(7.0, 0.0).mirrored() == Vector2D(7.0, 0.0)

    def test_mirrored_twice_is_identity(self) -> None:
        """Two reflections return the original point."""
        v = Vector2D(12.5, -3.25)
        assert v.mirrored().mirrored() == v

    def test_copy_is_independent(self) -> None:
        """Mutating a copy leaves the source untouched."""
        v = Vector2D(1.0, 2.0)
        c = v.copy()
        c.x = 9.0
        assert v.x == 1.0
        assert c == Vector2D(9.0, 2.0)
