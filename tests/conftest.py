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
"""Shared fixtures for formation tests."""

from __future__ import annotations

from typing import Callable, Dict

import pytest

from lineup.config import LINEUP_CONFIG
from lineup.formation.sample_data import PLAYER_COUNT, SampleData
from lineup.geometry import Vector2D


def layout_sample(ball_x: float, ball_y: float, attraction_x: float = 0.5, attraction_y: float = 0.25) -> SampleData:
    """Build a sample from the default layout shifted towards the ball.

    SIDE and CENTER players move by ``attraction * ball``; SYMMETRY players are
    the exact mirror of their reference so the sample is symmetric.
    """
    positions: Dict[int, Vector2D] = {}
    roles = LINEUP_CONFIG.layout.roles
    for number, _, symmetry, x, y in roles:
        if symmetry <= 0:
            positions[number] = Vector2D(x + attraction_x * ball_x, y + attraction_y * ball_y)
    for number, _, symmetry, _, _ in roles:
        if symmetry > 0:
            positions[number] = positions[symmetry].mirrored()
    return SampleData(Vector2D(ball_x, ball_y), [positions[n] for n in range(1, PLAYER_COUNT + 1)])


def offset_sample(ball_x: float, ball_y: float, offset: float = 0.0) -> SampleData:
    """Build a sample with every player on a simple diagonal."""
    players = [Vector2D(float(n) + offset, -float(n) + offset) for n in range(1, PLAYER_COUNT + 1)]
    return SampleData(Vector2D(ball_x, ball_y), players)


@pytest.fixture
def make_layout_sample() -> Callable[..., SampleData]:
    """Return the symmetric default-layout sample builder."""
    return layout_sample


@pytest.fixture
def make_sample() -> Callable[..., SampleData]:
    """Return the simple diagonal sample builder."""
    return offset_sample
