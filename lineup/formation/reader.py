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
"""Line tokenizer for the persisted formation text format.

Formation documents are line oriented: every meaningful line is a whitespace
separated list of tokens. Comment lines (starting with the configured marker)
and blank lines may appear anywhere and carry no meaning, so the reader drops
them before any block parser sees the input. Parsers report malformed input by
raising :class:`FormationFormatError`, which remembers the offending line.
"""
from typing import List, Optional, TextIO

from lineup.config import LINEUP_CONFIG


def format_float(value: float) -> str:
    """Render ``value`` with the shortest text that reads back to the same float.

    Parameters
    ----------
    value : float
        Number to render.

    Returns
    -------
    str
        Round-trip safe representation such as ``"-10.0"`` or ``"0.1"``.
    """
    return repr(float(value))


class FormationFormatError(ValueError):
    """Raised when a formation document does not match the expected layout.

    Parameters
    ----------
    message : str
        Description of the problem.
    line_number : int, default=0
        One-based line number where the problem was detected, ``0`` if unknown.
    """

    def __init__(self, message: str, line_number: int = 0) -> None:
        """Store the failure description and location.

        Parameters
        ----------
        message : str
            Description of the problem.
        line_number : int
            One-based line number where the problem was detected.
        """
        location = f"line {line_number}: " if line_number else ""
        super().__init__(f"{location}{message}")
        self.message = message
        self.line_number = line_number


class FormationReader:
    """Iterate over the meaningful lines of a formation document.

    Parameters
    ----------
    stream : TextIO
        Text stream positioned at the start of the document.
    comment_marker : str | None, default=None
        Comment prefix; defaults to the configured serialization marker.
    """

    def __init__(self, stream: TextIO, comment_marker: Optional[str] = None) -> None:
        """Wrap ``stream`` for token-level reading.

        Parameters
        ----------
        stream : TextIO
            Text stream positioned at the start of the document.
        comment_marker : str | None
            Comment prefix; ``None`` uses the configured marker.
        """
        self._stream = stream
        self._comment_marker = comment_marker or LINEUP_CONFIG.serialization.comment_marker
        self._line_number = 0
        self._pending: Optional[List[str]] = None
        self._pending_line_number = 0

    @property
    def line_number(self) -> int:
        """Return the line number of the most recently consumed line."""
        return self._line_number

    def _fetch(self) -> Optional[List[str]]:
        """Read raw lines until a non-comment, non-blank line is found.

        Returns
        -------
        List[str] | None
            Tokens of the next meaningful line, ``None`` at end of input.
        """
        while True:
            line = self._stream.readline()
            if not line:
                return None
            self._pending_line_number += 1
            stripped = line.strip()
            if not stripped or stripped.startswith(self._comment_marker):
                continue
            return stripped.split()

    def peek_tokens(self) -> Optional[List[str]]:
        """Return the tokens of the next meaningful line without consuming it.

        Returns
        -------
        List[str] | None
            Token list, or ``None`` when the input is exhausted.
        """
        if self._pending is None:
            self._pending = self._fetch()
        return self._pending

    def next_tokens(self) -> List[str]:
        """Consume and return the tokens of the next meaningful line.

        Returns
        -------
        List[str]
            Token list of the consumed line.

        Raises
        ------
        FormationFormatError
            If the input ends before another meaningful line.
        """
        tokens = self.peek_tokens()
        if tokens is None:
            raise FormationFormatError("unexpected end of input", self._pending_line_number)
        self._pending = None
        self._line_number = self._pending_line_number
        return tokens

    def at_end(self) -> bool:
        """Return whether no meaningful line remains.

        Returns
        -------
        bool
            ``True`` when the input is exhausted.
        """
        return self.peek_tokens() is None

    def expect(self, *keywords: str) -> List[str]:
        """Consume a line that must start with ``keywords``.

        Parameters
        ----------
        *keywords : str
            Leading tokens the line must carry, in order.

        Returns
        -------
        List[str]
            The tokens following the keywords.

        Raises
        ------
        FormationFormatError
            If the line does not start with ``keywords``.
        """
        tokens = self.next_tokens()
        if tokens[: len(keywords)] != list(keywords):
            raise self.error(f"expected '{' '.join(keywords)}', found '{' '.join(tokens)}'")
        return tokens[len(keywords) :]

    def next_starts_with(self, *keywords: str) -> bool:
        """Return whether the next meaningful line starts with ``keywords``.

        Parameters
        ----------
        *keywords : str
            Leading tokens to compare against.

        Returns
        -------
        bool
            ``True`` when the upcoming line matches.
        """
        tokens = self.peek_tokens()
        if tokens is None:
            return False
        return tokens[: len(keywords)] == list(keywords)

    def error(self, message: str) -> FormationFormatError:
        """Build a format error pointing at the most recently consumed line.

        Parameters
        ----------
        message : str
            Description of the problem.

        Returns
        -------
        FormationFormatError
            Error carrying the current line number.
        """
        return FormationFormatError(message, self._line_number)

    def parse_int(self, token: str, what: str) -> int:
        """Convert ``token`` to an integer.

        Parameters
        ----------
        token : str
            Raw token text.
        what : str
            Name of the field, used in the error message.

        Returns
        -------
        int
            Parsed value.

        Raises
        ------
        FormationFormatError
            If ``token`` is not an integer literal.
        """
        try:
            return int(token)
        except ValueError as exc:
            raise self.error(f"invalid {what} '{token}'") from exc

    def parse_float(self, token: str, what: str) -> float:
        """Convert ``token`` to a float.

        Parameters
        ----------
        token : str
            Raw token text.
        what : str
            Name of the field, used in the error message.

        Returns
        -------
        float
            Parsed value.

        Raises
        ------
        FormationFormatError
            If ``token`` is not a finite numeric literal.
        """
        try:
            value = float(token)
        except ValueError as exc:
            raise self.error(f"invalid {what} '{token}'") from exc
        if value != value or value in (float("inf"), float("-inf")):
            raise self.error(f"non-finite {what} '{token}'")
        return value

    def parse_fields(self, tokens: List[str], count: int, what: str) -> List[str]:
        """Check that a line carries exactly ``count`` tokens.

        Parameters
        ----------
        tokens : List[str]
            Tokens of the line.
        count : int
            Required number of tokens.
        what : str
            Name of the record, used in the error message.

        Returns
        -------
        List[str]
            The unchanged ``tokens``.

        Raises
        ------
        FormationFormatError
            If the token count differs.
        """
        if len(tokens) != count:
            raise self.error(f"{what} needs {count} fields, found {len(tokens)}")
        return tokens
