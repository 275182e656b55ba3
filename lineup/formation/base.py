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
"""Shared formation scaffolding for every positioning strategy.

A formation maps a focus point (usually the ball) to a target position for
each of the eleven players. This module holds what all strategies have in
common:

* the role table: every player is SIDE, CENTER or SYMMETRY, where a SYMMETRY
  player copies a SIDE player's position mirrored across the pitch axis,
* position lookup, which resolves SYMMETRY players through their reference so
  a strategy only ever computes SIDE and CENTER positions,
* the persisted text format, split into a header, a strategy specific
  configuration block and the training samples block.

Concrete strategies subclass :class:`Formation` and fill in the hooks that
raise ``NotImplementedError`` here.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional, TextIO, Tuple

from lineup.config import LINEUP_CONFIG
from lineup.formation.reader import FormationFormatError, FormationReader
from lineup.formation.sample_data import PLAYER_COUNT, SampleDataSet
from lineup.geometry import Vector2D

if TYPE_CHECKING:
    from lineup.utils.debug import FormationDebugger

SIDE = "side"
CENTER = "center"
SYMMETRY = "symmetry"


def read_header_tokens(reader: FormationReader) -> Tuple[str, int]:
    """Consume the header line and return its method name and version.

    Parameters
    ----------
    reader : FormationReader
        Reader positioned at the start of a formation document.

    Returns
    -------
    Tuple[str, int]
        Strategy name token and format version.

    Raises
    ------
    FormationFormatError
        If the header line is malformed.
    """
    tokens = reader.parse_fields(reader.expect(LINEUP_CONFIG.serialization.header_tag), 2, "header")
    return tokens[0], reader.parse_int(tokens[1], "version")


def is_supported_version(version: int) -> bool:
    """Return whether ``version`` lies in the accepted format range.

    Parameters
    ----------
    version : int
        Format version taken from a header.

    Returns
    -------
    bool
        ``True`` for versions the reader understands.
    """
    cfg = LINEUP_CONFIG.serialization
    return cfg.min_version <= version <= cfg.current_version


class Formation:
    """Base class for positioning strategies.

    A freshly constructed formation has every player classified as SIDE, no
    role names and an empty sample set. Callers normally follow construction
    with :meth:`create_default_data` or :meth:`read`.

    The sample set is held by reference. :meth:`samples` returns the very
    instance the formation trains from, and :meth:`set_samples` aliases the
    caller's instance without copying it.
    """

    def __init__(self) -> None:
        """Initialise an all-SIDE role table and an empty sample set."""
        self._version = LINEUP_CONFIG.serialization.current_version
        self._symmetry_numbers: List[int] = [-1] * PLAYER_COUNT
        self._samples = SampleDataSet()
        self.debugger: Optional["FormationDebugger"] = None

    # ------------------------------------------------------------------
    # strategy hooks

    def method_name(self) -> str:
        """Return the strategy name used as registry key and header token.

        Returns
        -------
        str
            Single-token strategy identifier.
        """
        raise NotImplementedError

    def create_default_data(self) -> None:
        """Populate all eleven roles and the strategy parameters with defaults."""
        raise NotImplementedError

    def create_new_role(self, player_number: int, role_name: str, side_type: str) -> None:
        """Create the strategy's parameter record for a newly named player.

        Parameters
        ----------
        player_number : int
            Player being named for the first time.
        role_name : str
            Role name to store.
        side_type : str
            Classification the player has just received.
        """
        raise NotImplementedError

    def set_role_name(self, player_number: int, role_name: str) -> None:
        """Rename the role of an already named player.

        Parameters
        ----------
        player_number : int
            Player whose role is renamed.
        role_name : str
            New role name.
        """
        raise NotImplementedError

    def get_role_name(self, player_number: int) -> str:
        """Return the role name of ``player_number``.

        Parameters
        ----------
        player_number : int
            Player to look up.

        Returns
        -------
        str
            Role name, or an empty string when none is assigned or the number is invalid.
        """
        raise NotImplementedError

    def compute_position(self, player_number: int, focus_point: Vector2D) -> Vector2D:
        """Compute the position of a SIDE or CENTER player.

        Parameters
        ----------
        player_number : int
            Valid, non-SYMMETRY player number.
        focus_point : Vector2D
            Current focus point.

        Returns
        -------
        Vector2D
            Target position for the player.
        """
        raise NotImplementedError

    def train(self) -> None:
        """Fit the strategy parameters to the current sample set."""
        raise NotImplementedError

    def read_conf(self, reader: FormationReader) -> bool:
        """Read the strategy specific configuration block.

        Parameters
        ----------
        reader : FormationReader
            Reader positioned just after the header.

        Returns
        -------
        bool
            ``True`` when the block was read completely.
        """
        raise NotImplementedError

    def print_conf(self, stream: TextIO) -> TextIO:
        """Write the strategy specific configuration block.

        Parameters
        ----------
        stream : TextIO
            Destination text stream.

        Returns
        -------
        TextIO
            The same ``stream`` for chaining.
        """
        raise NotImplementedError

    # ------------------------------------------------------------------
    # version and samples

    def version(self) -> int:
        """Return the data format version of this formation.

        Returns
        -------
        int
            Version read from the last header, or the current version for new instances.
        """
        return self._version

    def samples(self) -> SampleDataSet:
        """Return the shared training sample set.

        Returns
        -------
        SampleDataSet
            The instance held by this formation, not a copy.
        """
        return self._samples

    def set_samples(self, samples: SampleDataSet) -> None:
        """Share ``samples`` with this formation.

        Parameters
        ----------
        samples : SampleDataSet
            Sample set to alias; later edits by any holder are visible to all.
        """
        self._samples = samples

    # ------------------------------------------------------------------
    # role classification

    @staticmethod
    def is_valid_number(player_number: int) -> bool:
        """Return whether ``player_number`` identifies a formation slot.

        Parameters
        ----------
        player_number : int
            Candidate player number.

        Returns
        -------
        bool
            ``True`` for ``1..11``.
        """
        return 1 <= player_number <= PLAYER_COUNT

    def is_side_type(self, player_number: int) -> bool:
        """Return whether the player is an original SIDE player.

        Parameters
        ----------
        player_number : int
            Player to check.

        Returns
        -------
        bool
            ``False`` for other classifications and invalid numbers.
        """
        if not self.is_valid_number(player_number):
            return False
        return self._symmetry_numbers[player_number - 1] < 0

    def is_center_type(self, player_number: int) -> bool:
        """Return whether the player is a CENTER player.

        Parameters
        ----------
        player_number : int
            Player to check.

        Returns
        -------
        bool
            ``False`` for other classifications and invalid numbers.
        """
        if not self.is_valid_number(player_number):
            return False
        return self._symmetry_numbers[player_number - 1] == 0

    def is_symmetry_type(self, player_number: int) -> bool:
        """Return whether the player mirrors another player.

        Parameters
        ----------
        player_number : int
            Player to check.

        Returns
        -------
        bool
            ``False`` for other classifications and invalid numbers.
        """
        if not self.is_valid_number(player_number):
            return False
        return self._symmetry_numbers[player_number - 1] > 0

    def get_symmetry_number(self, player_number: int) -> int:
        """Return the symmetry number stored for ``player_number``.

        Parameters
        ----------
        player_number : int
            Player to look up.

        Returns
        -------
        int
            Referenced player for SYMMETRY, ``0`` for CENTER, ``-1`` for SIDE
            and for invalid player numbers.
        """
        if not self.is_valid_number(player_number):
            return -1
        return self._symmetry_numbers[player_number - 1]

    def get_side_type(self, player_number: int) -> Optional[str]:
        """Return the classification label of ``player_number``.

        Parameters
        ----------
        player_number : int
            Player to look up.

        Returns
        -------
        str | None
            ``"side"``, ``"center"`` or ``"symmetry"``; ``None`` for invalid numbers.
        """
        if not self.is_valid_number(player_number):
            return None
        symmetry = self._symmetry_numbers[player_number - 1]
        if symmetry < 0:
            return SIDE
        if symmetry == 0:
            return CENTER
        return SYMMETRY

    def symmetry_players_of(self, player_number: int) -> List[int]:
        """Return the players that currently mirror ``player_number``.

        Parameters
        ----------
        player_number : int
            Referenced player.

        Returns
        -------
        List[int]
            Mirroring player numbers in ascending order; empty for invalid numbers.
        """
        if not self.is_valid_number(player_number):
            return []
        return [index + 1 for index, ref in enumerate(self._symmetry_numbers) if ref == player_number]

    def _role_update_problem(self, player_number: int, symmetry_number: int, role_name: str) -> Optional[str]:
        """Explain why a role update must be rejected.

        Parameters
        ----------
        player_number : int
            Player whose role would change.
        symmetry_number : int
            Requested symmetry number.
        role_name : str
            Requested role name.

        Returns
        -------
        str | None
            Reason for rejection, ``None`` when the update is allowed.
        """
        if not self.is_valid_number(player_number):
            return "player number out of range"
        if not role_name or any(ch.isspace() for ch in role_name):
            return "role name must be a single non-empty token"
        if symmetry_number > 0:
            if symmetry_number == player_number:
                return "player cannot mirror itself"
            if not self.is_valid_number(symmetry_number):
                return "symmetry reference out of range"
            if not self.is_side_type(symmetry_number):
                return f"player {symmetry_number} is not a SIDE player"
        if symmetry_number >= 0:
            mirrors = self.symmetry_players_of(player_number)
            if mirrors:
                return f"player is still mirrored by {mirrors}"
        return None

    def update_role(self, player_number: int, symmetry_number: int, role_name: str) -> bool:
        """Reclassify a player and assign its role name.

        A negative ``symmetry_number`` makes the player SIDE, zero makes it
        CENTER and a positive value makes it mirror that SIDE player. A player
        that others still mirror can only stay SIDE; retype its mirrors first.
        Nothing changes when the update is rejected.

        Parameters
        ----------
        player_number : int
            Player to update, ``1..11``.
        symmetry_number : int
            Requested classification as described above.
        role_name : str
            Role name; must be a non-empty token without whitespace.

        Returns
        -------
        bool
            ``True`` when the update was applied.
        """
        problem = self._role_update_problem(player_number, symmetry_number, role_name)
        if problem is not None:
            self._log_role_update(player_number, symmetry_number, role_name, False, problem)
            return False

        self._symmetry_numbers[player_number - 1] = max(symmetry_number, -1)
        side_type = self.get_side_type(player_number)
        if self.get_role_name(player_number):
            self.set_role_name(player_number, role_name)
        else:
            self.create_new_role(player_number, role_name, side_type)

        self._log_role_update(player_number, symmetry_number, role_name, True)
        return True

    def _apply_default_roles(self) -> Dict[int, Vector2D]:
        """Assign the configured default roles and return their reference positions.

        Returns
        -------
        Dict[int, Vector2D]
            Default position of every player for a focus point at the centre spot.
        """
        self._symmetry_numbers = [-1] * PLAYER_COUNT
        positions: Dict[int, Vector2D] = {}
        for number, role_name, symmetry, x, y in LINEUP_CONFIG.layout.roles:
            self.update_role(number, symmetry, role_name)
            positions[number] = Vector2D(x, y)
        return positions

    # ------------------------------------------------------------------
    # positions

    def get_position(self, player_number: int, focus_point: Vector2D) -> Optional[Vector2D]:
        """Return the target position of ``player_number`` for ``focus_point``.

        SYMMETRY players take their reference player's position with the
        lateral coordinate negated.

        Parameters
        ----------
        player_number : int
            Player to position.
        focus_point : Vector2D
            Current focus point, usually the ball.

        Returns
        -------
        Vector2D | None
            Target position, ``None`` for an invalid player number.
        """
        if not self.is_valid_number(player_number):
            return None
        symmetry = self._symmetry_numbers[player_number - 1]
        if symmetry > 0:
            return self.compute_position(symmetry, focus_point).mirrored()
        return self.compute_position(player_number, focus_point)

    def get_positions(self, focus_point: Vector2D) -> List[Vector2D]:
        """Return the target positions of all players for ``focus_point``.

        Parameters
        ----------
        focus_point : Vector2D
            Current focus point, usually the ball.

        Returns
        -------
        List[Vector2D]
            Eleven positions ordered by player number.
        """
        return [self.get_position(number, focus_point) for number in range(1, PLAYER_COUNT + 1)]

    def training_points(self, player_number: int) -> List[Tuple[Vector2D, Vector2D]]:
        """Collect ``(focus, position)`` pairs describing one SIDE or CENTER player.

        Every sample contributes the player's own position plus the mirrored
        position of each player that mirrors it.

        Parameters
        ----------
        player_number : int
            Player whose training data is gathered.

        Returns
        -------
        List[Tuple[Vector2D, Vector2D]]
            Focus point and target position pairs in sample order.
        """
        if not self.is_valid_number(player_number):
            return []
        mirrors = self.symmetry_players_of(player_number)
        points: List[Tuple[Vector2D, Vector2D]] = []
        for sample in self._samples:
            points.append((sample.ball, sample.position_of(player_number)))
            for mirror in mirrors:
                points.append((sample.ball, sample.position_of(mirror).mirrored()))
        return points

    # ------------------------------------------------------------------
    # reading

    def read(self, stream: TextIO) -> bool:
        """Read a complete formation document from ``stream``.

        The header, configuration and samples blocks are read in order and
        the first failure aborts the read. A formation that failed to read may
        be partially updated and should be discarded.

        Parameters
        ----------
        stream : TextIO
            Text stream positioned at the header line.

        Returns
        -------
        bool
            ``True`` when the whole document was accepted.
        """
        reader = FormationReader(stream)
        try:
            if not self.read_header(reader):
                raise reader.error("header rejected")
            if not self.read_conf(reader):
                raise reader.error("configuration block rejected")
            self._validate_roles(reader)
            if not self.read_samples(reader):
                raise reader.error("samples block rejected")
            reader.expect(LINEUP_CONFIG.serialization.end_tag)
        except FormationFormatError as exc:
            if self.debugger:
                self.debugger.log_format_error(self.method_name(), exc.line_number, exc.message)
            return False

        self._log_event("read", f"version={self._version} samples={len(self._samples)}")
        return True

    def read_header(self, reader: FormationReader) -> bool:
        """Read and verify the header line.

        Parameters
        ----------
        reader : FormationReader
            Reader positioned at the header line.

        Returns
        -------
        bool
            ``True`` when the header names this strategy with a supported version.

        Raises
        ------
        FormationFormatError
            If the header is malformed, names another strategy or carries an
            unsupported version.
        """
        name, version = read_header_tokens(reader)
        if name != self.method_name():
            raise reader.error(f"header names '{name}', expected '{self.method_name()}'")
        if not is_supported_version(version):
            raise reader.error(f"unsupported version {version}")
        self._version = version
        return True

    def read_samples(self, reader: FormationReader) -> bool:
        """Read the samples block into the shared sample set.

        The existing :class:`SampleDataSet` instance is refilled in place so
        other holders of the handle see the loaded samples.

        Parameters
        ----------
        reader : FormationReader
            Reader positioned at the ``Begin Samples`` line.

        Returns
        -------
        bool
            ``True`` when the block was read completely.
        """
        return self._samples.read(reader)

    def read_roles(self, reader: FormationReader) -> None:
        """Read the ``Begin Roles`` block shared by all strategies.

        Each of the eleven lines holds ``<number> <role-name> <symmetry-number>``
        in any order. SIDE and CENTER players are applied before SYMMETRY
        players so references resolve regardless of line order.

        Parameters
        ----------
        reader : FormationReader
            Reader positioned at the ``Begin Roles`` line.

        Raises
        ------
        FormationFormatError
            If a line is malformed, a player is missing or repeated, or the
            classifications are inconsistent.
        """
        reader.expect("Begin", "Roles")
        entries: Dict[int, Tuple[str, int]] = {}
        for _ in range(PLAYER_COUNT):
            tokens = reader.parse_fields(reader.next_tokens(), 3, "role")
            number = reader.parse_int(tokens[0], "player number")
            if not self.is_valid_number(number):
                raise reader.error(f"player number {number} out of range")
            if number in entries:
                raise reader.error(f"duplicate role for player {number}")
            entries[number] = (tokens[1], reader.parse_int(tokens[2], "symmetry number"))
        reader.expect("End", "Roles")

        self._symmetry_numbers = [-1] * PLAYER_COUNT
        ordered = sorted(entries.items(), key=lambda item: (item[1][1] > 0, item[0]))
        for number, (role_name, symmetry) in ordered:
            if not self.update_role(number, symmetry, role_name):
                raise reader.error(f"inconsistent role '{role_name}' for player {number}")

    def read_player_records(self, reader: FormationReader, block: str, field_count: int) -> Dict[int, List[str]]:
        """Read a ``Begin <block>`` section holding one line per SIDE or CENTER player.

        Each line is ``<number>`` followed by ``field_count`` values. SYMMETRY
        players must not appear, every other player must appear exactly once.

        Parameters
        ----------
        reader : FormationReader
            Reader positioned at the ``Begin <block>`` line.
        block : str
            Section name, for example ``"Positions"``.
        field_count : int
            Number of values following the player number.

        Returns
        -------
        Dict[int, List[str]]
            Raw value tokens keyed by player number.

        Raises
        ------
        FormationFormatError
            If a line is malformed, unexpected, repeated or missing.
        """
        reader.expect("Begin", block)
        records: Dict[int, List[str]] = {}
        while not reader.next_starts_with("End", block):
            tokens = reader.parse_fields(reader.next_tokens(), field_count + 1, f"{block} record")
            number = reader.parse_int(tokens[0], "player number")
            if not self.is_valid_number(number) or self.is_symmetry_type(number):
                raise reader.error(f"no {block} record expected for player {number}")
            if number in records:
                raise reader.error(f"duplicate {block} record for player {number}")
            records[number] = tokens[1:]
        reader.expect("End", block)

        missing = [n for n in range(1, PLAYER_COUNT + 1) if not self.is_symmetry_type(n) and n not in records]
        if missing:
            raise reader.error(f"missing {block} records for players {missing}")
        return records

    def unnamed_players(self) -> List[int]:
        """Return the players that have no role name yet.

        Returns
        -------
        List[int]
            Player numbers in ascending order; empty once every role is named.
        """
        return [n for n in range(1, PLAYER_COUNT + 1) if not self.get_role_name(n)]

    def _validate_roles(self, reader: FormationReader) -> None:
        """Check that every player is named and every mirror references a SIDE player.

        Parameters
        ----------
        reader : FormationReader
            Reader used to locate the error.

        Raises
        ------
        FormationFormatError
            If a role is unnamed or a SYMMETRY reference is dangling.
        """
        for number in range(1, PLAYER_COUNT + 1):
            if not self.get_role_name(number):
                raise reader.error(f"player {number} has no role")
            if self.is_symmetry_type(number) and not self.is_side_type(self.get_symmetry_number(number)):
                raise reader.error(f"player {number} mirrors a non-SIDE player")

    # ------------------------------------------------------------------
    # printing

    def print(self, stream: TextIO) -> TextIO:
        """Write the complete formation document to ``stream``.

        The output reads back through :meth:`read` into an equivalent formation.
        Every player must have a role name; otherwise nothing is written.

        Parameters
        ----------
        stream : TextIO
            Destination text stream.

        Returns
        -------
        TextIO
            The same ``stream`` for chaining.

        Raises
        ------
        ValueError
            If some players have no role name yet.
        """
        unnamed = self.unnamed_players()
        if unnamed:
            message = f"players {unnamed} have no role name"
            if self.debugger:
                self.debugger.log_error("print_refused", f"{self.method_name()}: {message}")
            raise ValueError(f"cannot print formation: {message}")
        self.print_header(stream)
        self.print_conf(stream)
        self.print_samples(stream)
        stream.write(f"{LINEUP_CONFIG.serialization.end_tag}\n")
        return stream

    def print_comment(self, stream: TextIO, message: str) -> TextIO:
        """Write ``message`` as comment lines the reader will skip.

        Parameters
        ----------
        stream : TextIO
            Destination text stream.
        message : str
            Comment text; each line becomes one comment line.

        Returns
        -------
        TextIO
            The same ``stream`` for chaining.
        """
        marker = LINEUP_CONFIG.serialization.comment_marker
        for line in message.splitlines() or [""]:
            stream.write(f"{marker} {line}".rstrip() + "\n")
        return stream

    def print_header(self, stream: TextIO) -> TextIO:
        """Write the header line.

        Parameters
        ----------
        stream : TextIO
            Destination text stream.

        Returns
        -------
        TextIO
            The same ``stream`` for chaining.
        """
        stream.write(f"{LINEUP_CONFIG.serialization.header_tag} {self.method_name()} {self._version}\n")
        return stream

    def print_samples(self, stream: TextIO) -> TextIO:
        """Write the samples block in the layout of this formation's version.

        Parameters
        ----------
        stream : TextIO
            Destination text stream.

        Returns
        -------
        TextIO
            The same ``stream`` for chaining.
        """
        return self._samples.print(stream, with_count=self._version >= 2)

    def print_roles(self, stream: TextIO) -> TextIO:
        """Write the ``Begin Roles`` block shared by all strategies.

        Parameters
        ----------
        stream : TextIO
            Destination text stream.

        Returns
        -------
        TextIO
            The same ``stream`` for chaining.
        """
        stream.write("Begin Roles\n")
        for number in range(1, PLAYER_COUNT + 1):
            stream.write(f"{number} {self.get_role_name(number)} {self.get_symmetry_number(number)}\n")
        stream.write("End Roles\n")
        return stream

    # ------------------------------------------------------------------
    # logging

    def _log_event(self, event_type: str, details: str) -> None:
        """Emit a formation event when a debugger is attached.

        Parameters
        ----------
        event_type : str
            Short category label such as ``"train"``.
        details : str
            Free-form description of the event.
        """
        if not self.debugger:
            return
        self.debugger.log_formation_event(self.method_name(), event_type, details)

    def _log_role_update(
        self,
        player_number: int,
        symmetry_number: int,
        role_name: str,
        accepted: bool,
        reason: Optional[str] = None,
    ) -> None:
        """Emit a role update record when a debugger is attached.

        Parameters
        ----------
        player_number : int
            Player targeted by the update.
        symmetry_number : int
            Requested symmetry number.
        role_name : str
            Requested role name.
        accepted : bool
            Whether the update was applied.
        reason : str | None
            Explanation for a rejection.
        """
        if not self.debugger:
            return
        self.debugger.log_role_update(
            self.method_name(), player_number, symmetry_number, role_name, accepted, reason
        )
