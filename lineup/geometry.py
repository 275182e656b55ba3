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
"""Planar vector helper shared by formations and sample data."""
import math
from dataclasses import dataclass


@dataclass
class Vector2D:
    """Two-dimensional point or offset on the pitch.

    ``x`` is the longitudinal axis (towards the opponent goal) and ``y`` the
    lateral axis. Mirroring a formation slot negates ``y`` only.

    Parameters
    ----------
    x : float
        Longitudinal component measured in metres.
    y : float
        Lateral component measured in metres.
    """

    x: float
    y: float

    def __add__(self, other: "Vector2D") -> "Vector2D":
        """Return ``self`` shifted by ``other``."""
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2D") -> "Vector2D":
        """Return the offset from ``other`` to ``self``."""
        return Vector2D(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vector2D":
        """Return the vector scaled by ``scalar``."""
        return Vector2D(self.x * scalar, self.y * scalar)

    def magnitude(self) -> float:
        """Return the length of the vector.

        Returns
        -------
        float
            Length in metres.
        """
        return math.sqrt(self.x * self.x + self.y * self.y)

    def distance_to(self, other: "Vector2D") -> float:
        """Return how far ``other`` lies from ``self``.

        Parameters
        ----------
        other : Vector2D
            Point to measure to.

        Returns
        -------
        float
            Distance in metres.
        """
        return (other - self).magnitude()

    def mirrored(self) -> "Vector2D":
        """Return the reflection of ``self`` across the longitudinal axis.

        Returns
        -------
        Vector2D
            Copy with the lateral component negated.
        """
        return Vector2D(self.x, -self.y)

    def copy(self) -> "Vector2D":
        """Return an independent copy of the vector.

        Returns
        -------
        Vector2D
            New vector holding the same components.
        """
        return Vector2D(self.x, self.y)
