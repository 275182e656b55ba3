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
"""Name-keyed construction of formation strategies.

The registry maps strategy names to zero-argument creators. The process-wide
instance returned by :func:`creators` is filled with the built-in strategies
on first use, in a fixed order, and afterwards only changes through explicit
:meth:`FormationCreators.register` calls made during start-up. Lookups and
registrations are not synchronised; register everything before formations
are created from several threads.
"""
import io
from typing import Callable, Dict, List, Optional, TextIO

from lineup.formation.base import Formation, is_supported_version, read_header_tokens
from lineup.formation.knn import KNNFormation
from lineup.formation.reader import FormationFormatError, FormationReader
from lineup.formation.static import StaticFormation
from lineup.formation.uva import UvAFormation
from lineup.utils.debug import FormationDebugger

FormationCreator = Callable[[], Formation]


class FormationCreators:
    """Mapping from strategy names to formation creators."""

    def __init__(self) -> None:
        """Create an empty registry."""
        self._creators: Dict[str, FormationCreator] = {}

    def __contains__(self, name: object) -> bool:
        """Return whether ``name`` is registered."""
        return name in self._creators

    def __len__(self) -> int:
        """Return the number of registered strategies."""
        return len(self._creators)

    def register(self, name: str, creator: FormationCreator) -> bool:
        """Register ``creator`` under ``name``.

        Parameters
        ----------
        name : str
            Strategy name; must be a single non-empty token.
        creator : FormationCreator
            Zero-argument callable returning a fresh formation.

        Returns
        -------
        bool
            ``False`` when the name is invalid or already taken.
        """
        if not name or any(ch.isspace() for ch in name) or name in self._creators:
            return False
        self._creators[name] = creator
        return True

    def unregister(self, name: str) -> bool:
        """Remove the creator registered under ``name``.

        Parameters
        ----------
        name : str
            Strategy name to remove.

        Returns
        -------
        bool
            ``False`` when nothing was registered under ``name``.
        """
        return self._creators.pop(name, None) is not None

    def get(self, name: str) -> Optional[FormationCreator]:
        """Return the creator registered under ``name``.

        Parameters
        ----------
        name : str
            Strategy name to look up.

        Returns
        -------
        FormationCreator | None
            The creator, or ``None`` for an unknown name.
        """
        return self._creators.get(name)

    def names(self) -> List[str]:
        """Return the registered names in registration order.

        Returns
        -------
        List[str]
            Strategy names.
        """
        return list(self._creators)


def register_builtin_formations(registry: FormationCreators) -> None:
    """Register the strategies shipped with the package.

    Parameters
    ----------
    registry : FormationCreators
        Registry to populate; names already present are left untouched.
    """
    registry.register(StaticFormation.METHOD_NAME, StaticFormation)
    registry.register(UvAFormation.METHOD_NAME, UvAFormation)
    registry.register(KNNFormation.METHOD_NAME, KNNFormation)


_CREATORS: Optional[FormationCreators] = None


def creators() -> FormationCreators:
    """Return the process-wide registry, populating it with built-ins on first use.

    Returns
    -------
    FormationCreators
        The shared registry instance.
    """
    global _CREATORS
    if _CREATORS is None:
        _CREATORS = FormationCreators()
        register_builtin_formations(_CREATORS)
    return _CREATORS


def create_formation(name: str) -> Optional[Formation]:
    """Create a default-state formation for the strategy called ``name``.

    The result has every player classified as SIDE and no samples; call
    ``create_default_data`` to fill in a usable layout.

    Parameters
    ----------
    name : str
        Registered strategy name.

    Returns
    -------
    Formation | None
        A fresh formation, or ``None`` when ``name`` is not registered.
    """
    creator = creators().get(name)
    if creator is None:
        return None
    return creator()


def create_formation_from_stream(
    stream: TextIO, debugger: Optional[FormationDebugger] = None
) -> Optional[Formation]:
    """Create a formation from a persisted document.

    The header is inspected first to choose the strategy; the full document
    is then read by the new instance.

    Parameters
    ----------
    stream : TextIO
        Text stream positioned at the start of a formation document.
    debugger : FormationDebugger | None
        Debugger attached to the new formation and told about failures.

    Returns
    -------
    Formation | None
        The loaded formation, or ``None`` when the strategy is unknown, the
        version is unsupported or any block fails to parse.
    """
    text = stream.read()
    header_reader = FormationReader(io.StringIO(text))
    try:
        name, version = read_header_tokens(header_reader)
    except FormationFormatError as exc:
        if debugger:
            debugger.log_format_error("?", exc.line_number, exc.message)
        return None

    if not is_supported_version(version):
        if debugger:
            debugger.log_format_error(name, header_reader.line_number, f"unsupported version {version}")
        return None

    formation = create_formation(name)
    if formation is None:
        if debugger:
            debugger.log_error("unknown_method", f"no formation registered as '{name}'")
        return None

    formation.debugger = debugger
    if not formation.read(io.StringIO(text)):
        return None
    return formation
