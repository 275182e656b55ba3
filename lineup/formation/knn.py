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
"""Formation that blends the samples nearest to the focus point."""
from typing import List, Optional, TextIO, Tuple

from lineup.config import LINEUP_CONFIG
from lineup.formation.base import Formation
from lineup.formation.reader import FormationReader, format_float
from lineup.formation.sample_data import PLAYER_COUNT, SampleData
from lineup.geometry import Vector2D


class KNNFormation(Formation):
    """Inverse-distance weighting over the ``k`` nearest training samples.

    Positions come from the lookup table built by the last :meth:`train`
    call, not from the live sample set, so editing the samples has no effect
    until the formation is retrained. Reading a formation trains it once the
    samples block is loaded.
    """

    METHOD_NAME = "KNN"

    def __init__(self) -> None:
        """Create an untrained formation with configured neighbour settings."""
        super().__init__()
        self._role_names: List[str] = [""] * PLAYER_COUNT
        self._neighbours = LINEUP_CONFIG.knn.neighbours
        self._power = LINEUP_CONFIG.knn.power
        self._table: List[SampleData] = []

    def method_name(self) -> str:
        """Return the strategy name.

        Returns
        -------
        str
            Registry key and header token of this strategy.
        """
        return self.METHOD_NAME

    @property
    def neighbours(self) -> int:
        """Return the number of samples blended per query."""
        return self._neighbours

    @property
    def power(self) -> float:
        """Return the inverse-distance weighting exponent."""
        return self._power

    def set_parameters(self, neighbours: int, power: float) -> bool:
        """Change the neighbour count and weighting exponent.

        Parameters
        ----------
        neighbours : int
            Number of samples blended per query, at least one.
        power : float
            Positive weighting exponent.

        Returns
        -------
        bool
            ``False`` when either value is out of range.
        """
        if neighbours < 1 or power <= 0:
            return False
        self._neighbours = neighbours
        self._power = power
        return True

    def create_default_data(self) -> None:
        """Assign the default roles and seed an empty sample set with the default layout."""
        positions = self._apply_default_roles()
        if len(self.samples()) == 0:
            players = [positions[number] for number in range(1, PLAYER_COUNT + 1)]
            self.samples().add_data(SampleData(ball=Vector2D(0.0, 0.0), players=players))
        self.train()
        self._log_event("default", "default layout applied")

    def create_new_role(self, player_number: int, role_name: str, side_type: str) -> None:
        """Store the role name; sample data carries all positional information.

        Parameters
        ----------
        player_number : int
            Player being named.
        role_name : str
            Role name to store.
        side_type : str
            Classification of the player (unused).
        """
        self._role_names[player_number - 1] = role_name

    def set_role_name(self, player_number: int, role_name: str) -> None:
        """Rename the role of ``player_number``.

        Parameters
        ----------
        player_number : int
            Player to rename.
        role_name : str
            New role name.
        """
        self._role_names[player_number - 1] = role_name

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
        return self._role_names[player_number - 1]

    def _weights(self, focus_point: Vector2D) -> List[Tuple[SampleData, float]]:
        """Select the nearest samples and their normalised weights.

        Parameters
        ----------
        focus_point : Vector2D
            Query focus point.

        Returns
        -------
        List[Tuple[SampleData, float]]
            Samples paired with weights summing to one; empty when untrained.
        """
        if not self._table:
            return []
        ranked = sorted(
            ((sample.ball.distance_to(focus_point), index) for index, sample in enumerate(self._table)),
        )
        closest_distance, closest_index = ranked[0]
        if closest_distance < LINEUP_CONFIG.knn.exact_match_distance:
            return [(self._table[closest_index], 1.0)]

        nearest = ranked[: self._neighbours]
        raw = [(self._table[index], 1.0 / distance**self._power) for distance, index in nearest]
        total = sum(weight for _, weight in raw)
        return [(sample, weight / total) for sample, weight in raw]

    def _sample_position(self, sample: SampleData, player_number: int) -> Vector2D:
        """Return the sample's position for a player, averaged with its mirrored partners.

        Parameters
        ----------
        sample : SampleData
            Training sample.
        player_number : int
            SIDE or CENTER player.

        Returns
        -------
        Vector2D
            Mean of the player's own position and the mirrored positions of
            every player that mirrors it.
        """
        positions = [sample.position_of(player_number)]
        positions.extend(sample.position_of(m).mirrored() for m in self.symmetry_players_of(player_number))
        return Vector2D(
            sum(p.x for p in positions) / len(positions),
            sum(p.y for p in positions) / len(positions),
        )

    def compute_position(self, player_number: int, focus_point: Vector2D) -> Vector2D:
        """Blend the nearest samples' positions for ``player_number``.

        Parameters
        ----------
        player_number : int
            SIDE or CENTER player.
        focus_point : Vector2D
            Current focus point.

        Returns
        -------
        Vector2D
            Weighted position, the centre spot while untrained.
        """
        x = y = 0.0
        for sample, weight in self._weights(focus_point):
            pos = self._sample_position(sample, player_number)
            x += pos.x * weight
            y += pos.y * weight
        return Vector2D(x, y)

    def train(self) -> None:
        """Rebuild the lookup table from the current sample set."""
        self._table = self.samples().data()
        self._log_event("train", f"samples={len(self._table)}")

    def read_conf(self, reader: FormationReader) -> bool:
        """Read roles followed by the neighbour parameters.

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
        reader.expect("Begin", "Parameters")
        neighbours: Optional[int] = None
        power: Optional[float] = None
        for _ in range(2):
            key, value = reader.parse_fields(reader.next_tokens(), 2, "parameter")
            if key == "neighbours" and neighbours is None:
                neighbours = reader.parse_int(value, "neighbour count")
            elif key == "power" and power is None:
                power = reader.parse_float(value, "power")
            else:
                raise reader.error(f"unexpected parameter '{key}'")
        reader.expect("End", "Parameters")
        if not self.set_parameters(neighbours, power):
            raise reader.error(f"invalid neighbour parameters k={neighbours} power={power}")
        return True

    def read_samples(self, reader: FormationReader) -> bool:
        """Read the samples block and train on it.

        Parameters
        ----------
        reader : FormationReader
            Reader positioned at the ``Begin Samples`` line.

        Returns
        -------
        bool
            ``True`` when the block was read completely.
        """
        if not super().read_samples(reader):
            return False
        self.train()
        return True

    def print_conf(self, stream: TextIO) -> TextIO:
        """Write roles followed by the neighbour parameters.

        The lookup table is not written. Reading the document trains on the
        printed samples, so sample edits made since the last :meth:`train`
        take effect in the reloaded formation.

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
        stream.write(f"neighbours {self._neighbours}\n")
        stream.write(f"power {format_float(self._power)}\n")
        stream.write("End Parameters\n")
        return stream
