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
"""Formation that keeps every player on a fixed spot regardless of the ball."""
from dataclasses import dataclass, field
from typing import List, Optional, TextIO

from lineup.formation.base import Formation
from lineup.formation.reader import FormationReader, format_float
from lineup.formation.sample_data import PLAYER_COUNT
from lineup.geometry import Vector2D


@dataclass
class StaticRole:
    """Stored parameters of one player in a static formation.

    Parameters
    ----------
    name : str
        Role name.
    position : Vector2D
        Fixed target position.
    """

    name: str
    position: Vector2D = field(default_factory=lambda: Vector2D(0.0, 0.0))


class StaticFormation(Formation):
    """Fixed positions, one per SIDE or CENTER player.

    Training replaces each position with the mean of the player's sampled
    positions.
    """

    METHOD_NAME = "Static"

    def __init__(self) -> None:
        """Create a formation with no roles assigned yet."""
        super().__init__()
        self._roles: List[Optional[StaticRole]] = [None] * PLAYER_COUNT

    def method_name(self) -> str:
        """Return the strategy name.

        Returns
        -------
        str
            Registry key and header token of this strategy.
        """
        return self.METHOD_NAME

    def create_default_data(self) -> None:
        """Assign the default roles and their reference positions."""
        positions = self._apply_default_roles()
        for number, position in positions.items():
            if not self.is_symmetry_type(number):
                self._roles[number - 1].position = position
        self._log_event("default", "default layout applied")

    def create_new_role(self, player_number: int, role_name: str, side_type: str) -> None:
        """Create a role record placed on the centre spot.

        Parameters
        ----------
        player_number : int
            Player being named.
        role_name : str
            Role name to store.
        side_type : str
            Classification of the player (unused; every player stores a position).
        """
        self._roles[player_number - 1] = StaticRole(name=role_name)

    def set_role_name(self, player_number: int, role_name: str) -> None:
        """Rename an existing role record.

        Parameters
        ----------
        player_number : int
            Player to rename.
        role_name : str
            New role name.
        """
        self._roles[player_number - 1].name = role_name

    def get_role_name(self, player_number: int) -> str:
        """Return the stored role name.

        Parameters
        ----------
        player_number : int
            Player to look up.

        Returns
        -------
        str
            Role name, empty when unassigned or out of range.
        """
        if not self.is_valid_number(player_number):
            return ""
        role = self._roles[player_number - 1]
        return role.name if role else ""

    def set_position(self, player_number: int, position: Vector2D) -> bool:
        """Move a SIDE or CENTER player's fixed spot.

        Parameters
        ----------
        player_number : int
            Player to move.
        position : Vector2D
            New fixed position.

        Returns
        -------
        bool
            ``False`` for invalid, unnamed or SYMMETRY players.
        """
        if not self.is_valid_number(player_number) or self.is_symmetry_type(player_number):
            return False
        role = self._roles[player_number - 1]
        if role is None:
            return False
        role.position = position.copy()
        return True

    def compute_position(self, player_number: int, focus_point: Vector2D) -> Vector2D:
        """Return the fixed spot of ``player_number``.

        Parameters
        ----------
        player_number : int
            SIDE or CENTER player.
        focus_point : Vector2D
            Ignored by this strategy.

        Returns
        -------
        Vector2D
            Copy of the stored position, the centre spot for an unnamed player.
        """
        role = self._roles[player_number - 1]
        if role is None:
            return Vector2D(0.0, 0.0)
        return role.position.copy()

    def train(self) -> None:
        """Set each fixed spot to the mean of the player's training points."""
        for number in range(1, PLAYER_COUNT + 1):
            role = self._roles[number - 1]
            if role is None or self.is_symmetry_type(number):
                continue
            points = self.training_points(number)
            if not points:
                continue
            role.position = Vector2D(
                sum(pos.x for _, pos in points) / len(points),
                sum(pos.y for _, pos in points) / len(points),
            )
        self._log_event("train", f"samples={len(self.samples())}")

    def read_conf(self, reader: FormationReader) -> bool:
        """Read roles followed by the ``Begin Positions`` block.

        Parameters
        ----------
        reader : FormationReader
            Reader positioned just after the header.

        Returns
        -------
        bool
            ``True`` when both blocks were read.
        """
        self.read_roles(reader)
        for number, (x, y) in self.read_player_records(reader, "Positions", 2).items():
            self._roles[number - 1].position = Vector2D(
                reader.parse_float(x, "x"),
                reader.parse_float(y, "y"),
            )
        return True

    def print_conf(self, stream: TextIO) -> TextIO:
        """Write roles followed by the ``Begin Positions`` block.

        Parameters
        ----------
        stream : TextIO
            Destination text stream.

        Returns
        -------
        TextIO
            The same ``stream`` for chaining.
        """
        self.print_roles(stream)
        stream.write("Begin Positions\n")
        for number in range(1, PLAYER_COUNT + 1):
            if self.is_symmetry_type(number):
                continue
            pos = self.compute_position(number, Vector2D(0.0, 0.0))
            stream.write(f"{number} {format_float(pos.x)} {format_float(pos.y)}\n")
        stream.write("End Positions\n")
        return stream
