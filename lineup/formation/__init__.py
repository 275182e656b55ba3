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
from __future__ import annotations

from .base import CENTER, SIDE, SYMMETRY, Formation
from .knn import KNNFormation
from .reader import FormationFormatError, FormationReader
from .registry import (
    FormationCreators,
    create_formation,
    create_formation_from_stream,
    creators,
    register_builtin_formations,
)
from .sample_data import PLAYER_COUNT, SampleData, SampleDataSet
from .static import StaticFormation
from .uva import UvAFormation

__all__ = [
    "CENTER",
    "SIDE",
    "SYMMETRY",
    "PLAYER_COUNT",
    "Formation",
    "StaticFormation",
    "UvAFormation",
    "KNNFormation",
    "FormationFormatError",
    "FormationReader",
    "SampleData",
    "SampleDataSet",
    "FormationCreators",
    "creators",
    "create_formation",
    "create_formation_from_stream",
    "register_builtin_formations",
]
