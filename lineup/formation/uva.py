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
"""Home-position formation where players are pulled towards the ball.

Each SIDE or CENTER player owns a home position and two attraction factors.
For a focus point ``f`` the target is::

    x = clamp(home.x + attraction_x * f.x, min_x, max_x)
    y = clamp(home.y + attraction_y * f.y, -half_width, half_width)

with ``x`` additionally capped at ``f.x`` for players that must stay behind the
ball. This is the classic UvA Trilearn style strategic positioning.
"""
from dataclasses import dataclass
from typing import List, Optional, TextIO, Tuple

from lineup.config import LINEUP_CONFIG
from lineup.formation.base import Formation
from lineup.formation.reader import FormationReader, format_float
from lineup.formation.sample_data import PLAYER_COUNT
from lineup.geometry import Vector2D


@dataclass
class UvARole:
    """Stored parameters of one player in an attraction formation.

    Parameters
    ----------
    name : str
        Role name.
    home : Vector2D
        Position taken when the focus point is on the centre spot.
    attraction_x : float
        Fraction of the focus ``x`` offset the player follows.
    attraction_y : float
        Fraction of the focus ``y`` offset the player follows.
    min_x : float
        Lowest ``x`` the player may take.
    max_x : float
        Highest ``x`` the player may take.
    behind_ball : bool
        Whether the player never moves ahead of the focus point.
    """

    name: str
    home: Vector2D
    attraction_x: float
    attraction_y: float
    min_x: float
    max_x: float
    behind_ball: bool


def _clamp(value: float, low: float, high: float) -> float:
    """Limit ``value`` to the closed range ``[low, high]``.

    Parameters
    ----------
    value : float
        Value to limit.
    low : float
        Lower bound.
    high : float
        Upper bound.

    Returns
    -------
    float
        The clamped value.
    """
    return max(low, min(high, value))


def _fit_axis(pairs: List[Tuple[float, float]]) -> Tuple[float, float]:
    """Least-squares fit of ``target = home + attraction * focus`` on one axis.

    Parameters
    ----------
    pairs : List[Tuple[float, float]]
        ``(focus, target)`` coordinate pairs.

    Returns
    -------
    Tuple[float, float]
        ``(home, attraction)``; attraction is zero when the focus never varies.
    """
    count = len(pairs)
    mean_focus = sum(f for f, _ in pairs) / count
    mean_target = sum(t for _, t in pairs) / count
    variance = sum((f - mean_focus) ** 2 for f, _ in pairs)
    if variance < 1e-9:
        return mean_target, 0.0
    covariance = sum((f - mean_focus) * (t - mean_target) for f, t in pairs)
    attraction = covariance / variance
    return mean_target - attraction * mean_focus, attraction


class UvAFormation(Formation):
    """Attraction based positioning with per-player home spots."""

    METHOD_NAME = "UvA"

    def __init__(self) -> None:
        """Create a formation with no roles assigned yet."""
        super().__init__()
        self._roles: List[Optional[UvARole]] = [None] * PLAYER_COUNT

    def method_name(self) -> str:
        """Return the strategy name.

        Returns
        -------
        str
            Registry key and header token of this strategy.
        """
        return self.METHOD_NAME

    def create_default_data(self) -> None:
        """Assign the default roles with home spots at the default layout.

        Every record is rebuilt from the configured attraction and pitch bounds,
        discarding trained or loaded parameters.
        """
        self._roles = [None] * PLAYER_COUNT
        positions = self._apply_default_roles()
        for number, position in positions.items():
            if not self.is_symmetry_type(number):
                self._roles[number - 1].home = position
        self._log_event("default", "default layout applied")

    def create_new_role(self, player_number: int, role_name: str, side_type: str) -> None:
        """Create a role record with configured attraction and full-length bounds.

        Parameters
        ----------
        player_number : int
            Player being named.
        role_name : str
            Role name to store.
        side_type : str
            Classification of the player (unused; every player stores parameters).
        """
        cfg = LINEUP_CONFIG.uva
        half_length = LINEUP_CONFIG.pitch.half_length
        self._roles[player_number - 1] = UvARole(
            name=role_name,
            home=Vector2D(0.0, 0.0),
            attraction_x=cfg.attraction_x,
            attraction_y=cfg.attraction_y,
            min_x=-half_length,
            max_x=half_length,
            behind_ball=cfg.behind_ball,
        )

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

    def role_parameters(self, player_number: int) -> Optional[UvARole]:
        """Return the parameter record of a SIDE or CENTER player.

        Parameters
        ----------
        player_number : int
            Player to look up.

        Returns
        -------
        UvARole | None
            The live record, ``None`` for invalid, unnamed or SYMMETRY players.
        """
        if not self.is_valid_number(player_number) or self.is_symmetry_type(player_number):
            return None
        return self._roles[player_number - 1]

    def compute_position(self, player_number: int, focus_point: Vector2D) -> Vector2D:
        """Apply the attraction rule for ``player_number``.

        Parameters
        ----------
        player_number : int
            SIDE or CENTER player.
        focus_point : Vector2D
            Current focus point.

        Returns
        -------
        Vector2D
            Target position, the centre spot for an unnamed player.
        """
        role = self._roles[player_number - 1]
        if role is None:
            return Vector2D(0.0, 0.0)

        x = role.home.x + role.attraction_x * focus_point.x
        if role.behind_ball:
            x = min(x, focus_point.x)
        x = _clamp(x, role.min_x, role.max_x)

        half_width = LINEUP_CONFIG.pitch.half_width
        y = _clamp(role.home.y + role.attraction_y * focus_point.y, -half_width, half_width)
        return Vector2D(x, y)

    def train(self) -> None:
        """Fit home spots and attraction factors to the training points by least squares.

        The ``x`` bounds become the extreme sampled ``x`` values of the player.
        """
        for number in range(1, PLAYER_COUNT + 1):
            role = self._roles[number - 1]
            if role is None or self.is_symmetry_type(number):
                continue
            points = self.training_points(number)
            if not points:
                continue
            home_x, role.attraction_x = _fit_axis([(focus.x, pos.x) for focus, pos in points])
            home_y, role.attraction_y = _fit_axis([(focus.y, pos.y) for focus, pos in points])
            role.home = Vector2D(home_x, home_y)
            role.min_x = min(pos.x for _, pos in points)
            role.max_x = max(pos.x for _, pos in points)
        self._log_event("train", f"samples={len(self.samples())}")

    def read_conf(self, reader: FormationReader) -> bool:
        """Read roles followed by the ``Begin Parameters`` block.

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
        for number, fields in self.read_player_records(reader, "Parameters", 7).items():
            home_x, home_y, attr_x, attr_y, min_x, max_x = (reader.parse_float(v, "parameter") for v in fields[:6])
            behind_ball = reader.parse_int(fields[6], "behind-ball flag")
            if behind_ball not in (0, 1):
                raise reader.error(f"behind-ball flag of player {number} must be 0 or 1")
            if min_x > max_x:
                raise reader.error(f"x bounds of player {number} are inverted")
            role = self._roles[number - 1]
            role.home = Vector2D(home_x, home_y)
            role.attraction_x = attr_x
            role.attraction_y = attr_y
            role.min_x = min_x
            role.max_x = max_x
            role.behind_ball = bool(behind_ball)
        return True

    def print_conf(self, stream: TextIO) -> TextIO:
        """Write roles followed by the ``Begin Parameters`` block.

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
        stream.write("Begin Parameters\n")
        for number in range(1, PLAYER_COUNT + 1):
            role = self.role_parameters(number)
            if role is None:
                continue
            values = (role.home.x, role.home.y, role.attraction_x, role.attraction_y, role.min_x, role.max_x)
            stream.write(f"{number} {' '.join(format_float(v) for v in values)} {int(role.behind_ball)}\n")
        stream.write("End Parameters\n")
        return stream
