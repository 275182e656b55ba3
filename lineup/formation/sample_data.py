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
"""Training samples pairing a focus point with a full team snapshot.

A :class:`SampleDataSet` is shared by reference: a formation and an external
editor may hold the same instance, and every change made through one holder is
visible to the other. Formations never copy the container, they only alias it.
"""
from dataclasses import dataclass
from typing import Iterator, List, Optional, TextIO

from lineup.config import LINEUP_CONFIG
from lineup.formation.reader import FormationReader, format_float
from lineup.geometry import Vector2D

PLAYER_COUNT = 11


@dataclass
class SampleData:
    """One training example: the focus point and where each player should stand.

    Parameters
    ----------
    ball : Vector2D
        Focus point (usually the ball) the snapshot was taken for.
    players : List[Vector2D]
        Eleven positions ordered by player number.
    """

    ball: Vector2D
    players: List[Vector2D]

    def __post_init__(self) -> None:
        """Ensure the snapshot covers exactly eleven players."""
        if len(self.players) != PLAYER_COUNT:
            raise ValueError(f"Sample must hold {PLAYER_COUNT} player positions, got {len(self.players)}")

    def position_of(self, player_number: int) -> Vector2D:
        """Return the sampled position of ``player_number``.

        Parameters
        ----------
        player_number : int
            Player number in ``1..11``.

        Returns
        -------
        Vector2D
            Stored position for that player.
        """
        return self.players[player_number - 1]


class SampleDataSet:
    """Ordered, size-limited collection of :class:`SampleData`.

    Mutators return ``False`` instead of raising when a request cannot be
    honoured, leaving the set unchanged.
    """

    def __init__(self) -> None:
        """Create an empty data set."""
        self._data: List[SampleData] = []

    def __len__(self) -> int:
        """Return the number of stored samples."""
        return len(self._data)

    def __iter__(self) -> Iterator[SampleData]:
        """Iterate over samples in stored order."""
        return iter(self._data)

    def __getitem__(self, index: int) -> SampleData:
        """Return the sample at ``index``."""
        return self._data[index]

    def data(self) -> List[SampleData]:
        """Return a shallow copy of the stored samples.

        Returns
        -------
        List[SampleData]
            Samples in stored order.
        """
        return list(self._data)

    def clear(self) -> None:
        """Remove every sample."""
        self._data.clear()

    def existing_index(self, ball: Vector2D, threshold: Optional[float] = None) -> int:
        """Return the index of a sample whose focus lies within ``threshold`` of ``ball``.

        Parameters
        ----------
        ball : Vector2D
            Focus point to look up.
        threshold : float | None
            Matching radius; defaults to the configured near distance.

        Returns
        -------
        int
            Index of the first matching sample, ``-1`` when none matches.
        """
        if threshold is None:
            threshold = LINEUP_CONFIG.samples.near_distance_threshold
        for index, sample in enumerate(self._data):
            if sample.ball.distance_to(ball) < threshold:
                return index
        return -1

    def nearest_index(self, ball: Vector2D) -> int:
        """Return the index of the sample whose focus is closest to ``ball``.

        Parameters
        ----------
        ball : Vector2D
            Query focus point.

        Returns
        -------
        int
            Index of the nearest sample, ``-1`` for an empty set.
        """
        best_index = -1
        best_distance = float("inf")
        for index, sample in enumerate(self._data):
            distance = sample.ball.distance_to(ball)
            if distance < best_distance:
                best_index = index
                best_distance = distance
        return best_index

    def _accepts(self, data: SampleData, ignore_index: int = -1) -> bool:
        """Return whether ``data`` keeps its distance from every other sample.

        Parameters
        ----------
        data : SampleData
            Candidate sample.
        ignore_index : int
            Index excluded from the comparison (the slot being replaced).

        Returns
        -------
        bool
            ``True`` when no other sample is too close.
        """
        threshold = LINEUP_CONFIG.samples.near_distance_threshold
        for index, sample in enumerate(self._data):
            if index == ignore_index:
                continue
            if sample.ball.distance_to(data.ball) < threshold:
                return False
        return True

    def add_data(self, data: SampleData) -> bool:
        """Append ``data`` to the end of the set.

        Parameters
        ----------
        data : SampleData
            Sample to append.

        Returns
        -------
        bool
            ``False`` when the set is full or a sample already covers the focus point.
        """
        if len(self._data) >= LINEUP_CONFIG.samples.max_data_size:
            return False
        if not self._accepts(data):
            return False
        self._data.append(data)
        return True

    def insert_data(self, index: int, data: SampleData) -> bool:
        """Insert ``data`` before position ``index``.

        Parameters
        ----------
        index : int
            Target position in ``0..len(self)``.
        data : SampleData
            Sample to insert.

        Returns
        -------
        bool
            ``False`` for an invalid index, a full set or a too-close focus point.
        """
        if not 0 <= index <= len(self._data):
            return False
        if len(self._data) >= LINEUP_CONFIG.samples.max_data_size:
            return False
        if not self._accepts(data):
            return False
        self._data.insert(index, data)
        return True

    def replace_data(self, index: int, data: SampleData) -> bool:
        """Overwrite the sample stored at ``index``.

        Parameters
        ----------
        index : int
            Position of the sample to replace.
        data : SampleData
            Replacement sample.

        Returns
        -------
        bool
            ``False`` for an invalid index or a focus point too close to another sample.
        """
        if not 0 <= index < len(self._data):
            return False
        if not self._accepts(data, ignore_index=index):
            return False
        self._data[index] = data
        return True

    def remove_data(self, index: int) -> bool:
        """Delete the sample stored at ``index``.

        Parameters
        ----------
        index : int
            Position of the sample to delete.

        Returns
        -------
        bool
            ``False`` for an invalid index.
        """
        if not 0 <= index < len(self._data):
            return False
        del self._data[index]
        return True

    def change_data_index(self, old_index: int, new_index: int) -> bool:
        """Move a sample to a new position, shifting the samples in between.

        Parameters
        ----------
        old_index : int
            Current position of the sample.
        new_index : int
            Position the sample should occupy afterwards.

        Returns
        -------
        bool
            ``False`` when either index is out of range.
        """
        size = len(self._data)
        if not 0 <= old_index < size or not 0 <= new_index < size:
            return False
        sample = self._data.pop(old_index)
        self._data.insert(new_index, sample)
        return True

    def read(self, reader: FormationReader) -> bool:
        """Replace the contents with the SAMPLES block read from ``reader``.

        Both layouts are accepted: ``Begin Samples <count>`` (checked against
        the samples actually read) and the count-less ``Begin Samples``. Loaded
        samples obey the same size and focus distance limits as :meth:`add_data`.

        Parameters
        ----------
        reader : FormationReader
            Reader positioned at the ``Begin Samples`` line.

        Returns
        -------
        bool
            ``True`` once the block has been consumed.

        Raises
        ------
        FormationFormatError
            If the block is malformed, too large, or holds two samples whose
            focus points are closer than the near distance threshold.
        """
        args = reader.expect("Begin", "Samples")
        expected: Optional[int] = None
        if len(args) == 1:
            expected = reader.parse_int(args[0], "sample count")
            if expected < 0:
                raise reader.error(f"negative sample count {expected}")
        elif args:
            raise reader.error("unexpected tokens after 'Begin Samples'")

        threshold = LINEUP_CONFIG.samples.near_distance_threshold
        loaded: List[SampleData] = []
        while not reader.next_starts_with("End", "Samples"):
            sample = self._read_sample(reader, len(loaded) + 1)
            if any(other.ball.distance_to(sample.ball) < threshold for other in loaded):
                raise reader.error(f"sample {len(loaded) + 1} lies within {threshold} of an earlier sample")
            loaded.append(sample)
            if len(loaded) > LINEUP_CONFIG.samples.max_data_size:
                raise reader.error(f"more than {LINEUP_CONFIG.samples.max_data_size} samples")
        reader.expect("End", "Samples")

        if expected is not None and expected != len(loaded):
            raise reader.error(f"sample count {expected} does not match {len(loaded)} samples read")

        self._data = loaded
        return True

    @staticmethod
    def _read_sample(reader: FormationReader, index: int) -> SampleData:
        """Read one ``----- n -----`` sample record.

        Parameters
        ----------
        reader : FormationReader
            Reader positioned at the sample separator line.
        index : int
            One-based index the separator must carry.

        Returns
        -------
        SampleData
            Parsed sample.
        """
        tokens = reader.parse_fields(reader.next_tokens(), 3, "sample separator")
        if tokens[0] != "-----" or tokens[2] != "-----" or reader.parse_int(tokens[1], "sample index") != index:
            raise reader.error(f"expected separator for sample {index}")

        ball_tokens = reader.parse_fields(reader.expect("Ball"), 2, "ball position")
        ball = Vector2D(
            reader.parse_float(ball_tokens[0], "ball x"),
            reader.parse_float(ball_tokens[1], "ball y"),
        )

        players: List[Vector2D] = []
        for number in range(1, PLAYER_COUNT + 1):
            fields = reader.parse_fields(reader.next_tokens(), 3, "player position")
            if reader.parse_int(fields[0], "player number") != number:
                raise reader.error(f"expected position of player {number}")
            players.append(
                Vector2D(
                    reader.parse_float(fields[1], "player x"),
                    reader.parse_float(fields[2], "player y"),
                )
            )
        return SampleData(ball=ball, players=players)

    def print(self, stream: TextIO, with_count: bool = True) -> TextIO:
        """Write the SAMPLES block to ``stream``.

        Parameters
        ----------
        stream : TextIO
            Destination text stream.
        with_count : bool
            Whether the ``Begin Samples`` line carries the sample count.

        Returns
        -------
        TextIO
            The same ``stream`` for chaining.
        """
        stream.write(f"Begin Samples {len(self._data)}\n" if with_count else "Begin Samples\n")
        for index, sample in enumerate(self._data, start=1):
            stream.write(f"----- {index} -----\n")
            stream.write(f"Ball {format_float(sample.ball.x)} {format_float(sample.ball.y)}\n")
            for number, pos in enumerate(sample.players, start=1):
                stream.write(f"{number} {format_float(pos.x)} {format_float(pos.y)}\n")
        stream.write("End Samples\n")
        return stream
