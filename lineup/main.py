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
"""Command line entry point for creating, inspecting and training formation files."""
import argparse
from pathlib import Path
from typing import List, Optional

from lineup.formation.base import Formation
from lineup.formation.registry import create_formation, create_formation_from_stream, creators
from lineup.geometry import Vector2D
from lineup.utils.debug import FormationDebugger


def load_formation(path: Path, debugger: Optional[FormationDebugger] = None) -> Optional[Formation]:
    """Read a formation file, reporting problems on stdout.

    Parameters
    ----------
    path : Path
        File to read.
    debugger : FormationDebugger | None
        Debugger attached to the loaded formation.

    Returns
    -------
    Formation | None
        The loaded formation, or ``None`` when the file is missing or invalid.
    """
    if not path.exists():
        print(f"No formation file found at {path}")
        return None
    try:
        with open(path, encoding="utf-8") as stream:
            formation = create_formation_from_stream(stream, debugger)
    except (OSError, UnicodeDecodeError) as exc:
        if debugger:
            debugger.log_error("unreadable_file", f"{path}: {exc}")
        formation = None
    if formation is None:
        print(f"Could not read a formation from {path}")
    return formation


def save_formation(formation: Formation, path: Path, comment: Optional[str] = None) -> None:
    """Write ``formation`` to ``path``, optionally preceded by a comment.

    Parameters
    ----------
    formation : Formation
        Formation to persist.
    path : Path
        Destination file; parent directories are created.
    comment : str | None
        Text written as comment lines before the header.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as stream:
        if comment:
            formation.print_comment(stream, comment)
        formation.print(stream)


def print_positions(formation: Formation, focus: Vector2D) -> None:
    """Print one line per player with its role and computed position.

    Parameters
    ----------
    formation : Formation
        Formation to query.
    focus : Vector2D
        Focus point used for every player.
    """
    print(f"{formation.method_name()} v{formation.version()} | focus ({focus.x:.2f}, {focus.y:.2f})")
    for number, pos in enumerate(formation.get_positions(focus), start=1):
        side_type = formation.get_side_type(number)
        if formation.is_symmetry_type(number):
            side_type = f"{side_type}->{formation.get_symmetry_number(number)}"
        print(f"{number:2d} {formation.get_role_name(number):<16} {side_type:<12} ({pos.x:7.2f}, {pos.y:7.2f})")


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for all sub-commands.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser.
    """
    parser = argparse.ArgumentParser(prog="lineup", description="Create, inspect and train team formations")
    parser.add_argument("--debug-dir", type=str, default=None, help="Directory for formation debug logs")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("methods", help="List registered formation methods")

    new = commands.add_parser("new", help="Write a default formation file")
    new.add_argument("method", help="Formation method name")
    new.add_argument("output", type=Path, help="File to create")

    show = commands.add_parser("show", help="Print player positions for a focus point")
    show.add_argument("file", type=Path, help="Formation file")
    show.add_argument("--focus", type=float, nargs=2, default=(0.0, 0.0), metavar=("X", "Y"))

    train = commands.add_parser("train", help="Retrain a formation from its samples")
    train.add_argument("file", type=Path, help="Formation file")
    train.add_argument("-o", "--output", type=Path, default=None, help="Output file (defaults to FILE)")

    view = commands.add_parser("view", help="Open the interactive formation viewer")
    view.add_argument("file", type=Path, help="Formation file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command line interface.

    Parameters
    ----------
    argv : List[str] | None
        Arguments without the program name; defaults to ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit status, ``0`` on success.
    """
    args = build_parser().parse_args(argv)
    debugger = FormationDebugger(args.debug_dir) if args.debug_dir else None
    try:
        return _run(args, debugger)
    finally:
        if debugger:
            debugger.close()


def _run(args: argparse.Namespace, debugger: Optional[FormationDebugger]) -> int:
    """Dispatch a parsed command.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed command line.
    debugger : FormationDebugger | None
        Debugger attached to every formation the command touches.

    Returns
    -------
    int
        Process exit status.
    """
    if args.command == "methods":
        for name in creators().names():
            print(name)
        return 0

    if args.command == "new":
        formation = create_formation(args.method)
        if formation is None:
            print(f"Unknown formation method '{args.method}'. Available: {', '.join(creators().names())}")
            return 1
        formation.debugger = debugger
        formation.create_default_data()
        save_formation(formation, args.output, comment=f"{formation.method_name()} formation created by lineup")
        print(f"Wrote {formation.method_name()} formation to {args.output}")
        return 0

    formation = load_formation(args.file, debugger)
    if formation is None:
        return 1

    if args.command == "show":
        print_positions(formation, Vector2D(*args.focus))
        return 0

    if args.command == "train":
        formation.train()
        output = args.output or args.file
        save_formation(formation, output)
        print(f"Trained {formation.method_name()} formation on {len(formation.samples())} samples, wrote {output}")
        return 0

    # view
    from lineup.visualizer.viewer import pygame, start_viewer

    if pygame is None:
        print("pygame is not installed; install the 'viewer' extra to use the viewer")
        return 1
    start_viewer(formation)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
