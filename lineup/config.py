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
"""Central configuration for formation tuning parameters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(slots=True)
class PitchConfig:
    """Pitch extents used to bound computed positions.

    Coordinates are centred on the kick-off spot. ``x`` runs along the length
    of the pitch towards the opponent goal and ``y`` runs across it.

    Parameters
    ----------
    half_length : float, default=52.5
        Distance from the centre spot to either goal line in metres.
    half_width : float, default=34.0
        Distance from the centre spot to either touchline in metres.
    """

    half_length: float = 52.5
    half_width: float = 34.0


@dataclass(slots=True)
class SerializationConfig:
    """Tokens and version limits of the persisted formation text format.

    Parameters
    ----------
    comment_marker : str, default="#"
        Prefix identifying comment lines; such lines are skipped by the reader.
    header_tag : str, default="Formation"
        Leading token of the header line.
    end_tag : str, default="End"
        Token terminating a complete formation document.
    min_version : int, default=1
        Oldest format version the reader accepts.
    current_version : int, default=2
        Version assigned to newly created formations and the newest accepted.
    """

    comment_marker: str = "#"
    header_tag: str = "Formation"
    end_tag: str = "End"
    min_version: int = 1
    current_version: int = 2


@dataclass(slots=True)
class SampleConfig:
    """Limits applied to the training sample container.

    Parameters
    ----------
    max_data_size : int, default=128
        Maximum number of samples held by one data set.
    near_distance_threshold : float, default=0.5
        Minimum separation between the focus points of two samples.
    """

    max_data_size: int = 128
    near_distance_threshold: float = 0.5


@dataclass(slots=True)
class DefaultLayoutConfig:
    """Default 4-3-3 layout applied by ``create_default_data``.

    Parameters
    ----------
    roles : Tuple[Tuple[int, str, int, float, float], ...]
        One entry per player: ``(number, role_name, symmetry_number, x, y)``
        evaluated for a focus point at the centre spot. Entries are ordered so
        that every referenced SIDE player precedes its mirror.
    """

    roles: Tuple[Tuple[int, str, int, float, float], ...] = (
        (1, "Goalie", 0, -50.0, 0.0),
        (2, "CenterBack", -1, -20.0, -8.0),
        (3, "CenterBack", 2, -20.0, 8.0),
        (4, "SideBack", -1, -18.0, -18.0),
        (5, "SideBack", 4, -18.0, 18.0),
        (6, "DefensiveHalf", 0, -15.0, 0.0),
        (7, "OffensiveHalf", -1, 0.0, -12.0),
        (8, "OffensiveHalf", 7, 0.0, 12.0),
        (9, "SideForward", -1, 10.0, -22.0),
        (10, "SideForward", 9, 10.0, 22.0),
        (11, "CenterForward", 0, 10.0, 0.0),
    )


@dataclass(slots=True)
class UvAConfig:
    """Defaults for the attraction based ``UvA`` strategy.

    Parameters
    ----------
    attraction_x : float, default=0.5
        Longitudinal fraction of the focus offset a player follows.
    attraction_y : float, default=0.25
        Lateral fraction of the focus offset a player follows.
    behind_ball : bool, default=False
        Whether new roles stay level with or behind the focus point.
    """

    attraction_x: float = 0.5
    attraction_y: float = 0.25
    behind_ball: bool = False


@dataclass(slots=True)
class KNNConfig:
    """Defaults for the nearest-sample ``KNN`` strategy.

    Parameters
    ----------
    neighbours : int, default=3
        Number of nearest samples blended for each query.
    power : float, default=2.0
        Exponent of the inverse-distance weighting.
    exact_match_distance : float, default=1e-6
        Focus distance below which a sample is returned verbatim.
    """

    neighbours: int = 3
    power: float = 2.0
    exact_match_distance: float = 1e-6


@dataclass(slots=True)
class ViewerConfig:
    """Window settings for the optional pygame formation viewer.

    Parameters
    ----------
    screen_size : Tuple[int, int], default=(1050, 680)
        Initial window size in pixels.
    fps : int, default=30
        Redraw rate of the viewer loop.
    player_radius : int, default=10
        Radius in pixels of a drawn player marker.
    """

    screen_size: Tuple[int, int] = (1050, 680)
    fps: int = 30
    player_radius: int = 10


@dataclass(slots=True)
class LineupConfig:
    """Top-level container for all configuration blocks.

    Parameters
    ----------
    pitch : PitchConfig, default=PitchConfig()
        Pitch dimension configuration.
    serialization : SerializationConfig, default=SerializationConfig()
        Text format tokens and supported versions.
    samples : SampleConfig, default=SampleConfig()
        Training sample container limits.
    layout : DefaultLayoutConfig, default=DefaultLayoutConfig()
        Default role layout.
    uva : UvAConfig, default=UvAConfig()
        Attraction strategy defaults.
    knn : KNNConfig, default=KNNConfig()
        Nearest-sample strategy defaults.
    viewer : ViewerConfig, default=ViewerConfig()
        Viewer window settings.
    """

    pitch: PitchConfig = field(default_factory=PitchConfig)
    serialization: SerializationConfig = field(default_factory=SerializationConfig)
    samples: SampleConfig = field(default_factory=SampleConfig)
    layout: DefaultLayoutConfig = field(default_factory=DefaultLayoutConfig)
    uva: UvAConfig = field(default_factory=UvAConfig)
    knn: KNNConfig = field(default_factory=KNNConfig)
    viewer: ViewerConfig = field(default_factory=ViewerConfig)


LINEUP_CONFIG = LineupConfig()
"""Singleton-style access to the formation configuration."""
