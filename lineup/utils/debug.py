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
"""Structured logging utilities used to trace formation edits and loading."""
import time
from collections import deque
from pathlib import Path
from threading import Lock
from typing import Deque, List, Optional, TextIO, Tuple


class FormationDebugger:
    """Helper object that records formation telemetry and optionally streams it to disk.

    Parameters
    ----------
    output_dir : str | None, default="debug_logs"
        Directory where session logs are created; created automatically when
        missing. ``None`` keeps the log in memory only.
    """

    def __init__(self, output_dir: Optional[str] = "debug_logs") -> None:
        """Open the first session, creating the output directory when needed.

        Parameters
        ----------
        output_dir : str | None
            Filesystem directory where log files are created, or ``None`` to
            keep entries in the in-memory ring buffer only.
        """
        self.output_dir = Path(output_dir) if output_dir is not None else None
        self.log_file: Optional[TextIO] = None
        self.session_start = time.strftime("%Y%m%d_%H%M%S")
        self._lock = Lock()
        self._line_number = 1
        self._recent_events: Deque[Tuple[int, str]] = deque(maxlen=200)
        self.start_new_session()

    def start_new_session(self) -> None:
        """Open a fresh session file, closing any previous one."""
        if self.log_file:
            self.log_file.close()
            self.log_file = None

        if self.output_dir is None:
            return

        self.output_dir.mkdir(parents=True, exist_ok=True)
        filename = f"formation_debug_{self.session_start}.txt"
        self.log_file = open(self.output_dir / filename, "w", encoding="utf-8")
        self.log_file.write(f"=== Formation Debug Session: {time.strftime('%Y-%m-%d %H:%M:%S')} ===\n\n")

    def log_role_update(
        self,
        method_name: str,
        player_number: int,
        symmetry_number: int,
        role_name: str,
        accepted: bool,
        reason: str | None = None,
    ) -> None:
        """Log an attempt to change a player's role classification.

        Parameters
        ----------
        method_name : str
            Strategy name of the formation being edited.
        player_number : int
            Player whose role was targeted.
        symmetry_number : int
            Requested symmetry number (negative SIDE, zero CENTER, positive SYMMETRY).
        role_name : str
            Requested role name.
        accepted : bool
            Whether the update was applied.
        reason : str | None
            Short explanation for a rejected update.
        """
        status = "accepted" if accepted else "rejected"
        reason_str = f" | Reason: {reason}" if reason else ""
        self._write_log(
            "ROLE_UPDATE",
            f"Method: {method_name} | "
            f"Player {player_number} | "
            f"Symmetry: {symmetry_number} | "
            f"Role: {role_name!r} | "
            f"Status: {status}"
            f"{reason_str}",
        )

    def log_format_error(self, method_name: str, line_number: int, description: str) -> None:
        """Log a failure to parse a persisted formation.

        Parameters
        ----------
        method_name : str
            Strategy name of the formation being read.
        line_number : int
            One-based line of the input where parsing stopped, ``0`` when unknown.
        description : str
            Human-readable explanation of the failure.
        """
        self._write_log("FORMAT_ERROR", f"Method: {method_name} | Line: {line_number} | Details: {description}")

    def log_formation_event(self, method_name: str, event_type: str, description: str) -> None:
        """Log a formation lifecycle event (creation, read, training, etc.).

        Parameters
        ----------
        method_name : str
            Strategy name of the formation concerned.
        event_type : str
            Short label identifying the event category.
        description : str
            What happened, for example the number of samples trained on.
        """
        self._write_log("FORMATION_EVENT", f"Method: {method_name} | Event: {event_type} | Details: {description}")

    def log_error(self, error_type: str, description: str) -> None:
        """Log a failure that is not tied to a particular line of input.

        Parameters
        ----------
        error_type : str
            Short error category such as ``"unknown_method"``.
        description : str
            What went wrong.
        """
        self._write_log("ERROR", f"Type: {error_type} | Details: {description}")

    def _write_log(self, event_type: str, details: str) -> None:
        """Write a log entry to the ring buffer and, when open, the session file.

        Parameters
        ----------
        event_type : str
            Entry category, written in upper case.
        details : str
            Pipe separated entry body.
        """
        timestamp = time.strftime("%H:%M:%S")
        log_entry = f"[{timestamp}] {event_type}: {details}"

        with self._lock:
            line_no = self._line_number
            self._line_number += 1
            self._recent_events.append((line_no, log_entry))

            if self.log_file:
                self.log_file.write(f"{log_entry}\n")
                self.log_file.flush()

    def get_recent_events(self, limit: int = 20) -> List[str]:
        """Return the newest entries, numbered, for the CLI or viewer.

        Parameters
        ----------
        limit : int
            How many entries to return.

        Returns
        -------
        List[str]
            At most ``limit`` entries, oldest first, each prefixed with its sequence number.
        """
        with self._lock:
            selected = list(self._recent_events)[-limit:]
        return [f"{line_no:05d} {entry}" for line_no, entry in selected]

    def close(self) -> None:
        """Close the session file, keeping the in-memory history."""
        if self.log_file:
            self.log_file.close()
            self.log_file = None
