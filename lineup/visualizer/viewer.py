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
"""Interactive pygame window showing a formation's response to the focus point."""
from typing import Optional, Tuple

try:
    import pygame
except Exception:
    pygame = None

from lineup.config import LINEUP_CONFIG
from lineup.formation.base import CENTER, SIDE, Formation
from lineup.geometry import Vector2D

GREEN = (38, 160, 72)
LINE = (245, 245, 245)
BALL = (245, 245, 245)
TEXT = (20, 20, 20)
SIDE_TYPE_COLOURS = {
    SIDE: (30, 90, 200),
    CENTER: (240, 200, 40),
}
SYMMETRY_COLOUR = (200, 30, 30)


def world_to_screen(pos: Vector2D, pitch_rect: Tuple[int, int, int, int]) -> Tuple[int, int]:
    """Map a pitch coordinate to a pixel inside ``pitch_rect``.

    Parameters
    ----------
    pos : Vector2D
        Pitch coordinate in metres, origin at the centre spot.
    pitch_rect : Tuple[int, int, int, int]
        ``(left, top, width, height)`` of the drawn pitch in pixels.

    Returns
    -------
    Tuple[int, int]
        Screen pixel; ``+y`` on the pitch is drawn upwards.
    """
    cfg = LINEUP_CONFIG.pitch
    left, top, width, height = pitch_rect
    sx = int((pos.x + cfg.half_length) / (2 * cfg.half_length) * width) + left
    sy = int((cfg.half_width - pos.y) / (2 * cfg.half_width) * height) + top
    return sx, sy


def screen_to_world(pixel: Tuple[int, int], pitch_rect: Tuple[int, int, int, int]) -> Vector2D:
    """Map a pixel inside ``pitch_rect`` back to a pitch coordinate.

    Parameters
    ----------
    pixel : Tuple[int, int]
        Screen pixel, for example the mouse position.
    pitch_rect : Tuple[int, int, int, int]
        ``(left, top, width, height)`` of the drawn pitch in pixels.

    Returns
    -------
    Vector2D
        Pitch coordinate clamped to the field of play.
    """
    cfg = LINEUP_CONFIG.pitch
    left, top, width, height = pitch_rect
    x = (pixel[0] - left) / max(width, 1) * 2 * cfg.half_length - cfg.half_length
    y = cfg.half_width - (pixel[1] - top) / max(height, 1) * 2 * cfg.half_width
    x = max(-cfg.half_length, min(cfg.half_length, x))
    y = max(-cfg.half_width, min(cfg.half_width, y))
    return Vector2D(x, y)


def start_viewer(
    formation: Formation,
    screen_size: Optional[Tuple[int, int]] = None,
    fps: Optional[int] = None,
) -> None:
    """Open a window that positions the team for the focus point under the mouse.

    SIDE players are drawn blue, CENTER players yellow and SYMMETRY players
    red. Press ``t`` to retrain the formation from its samples and ``q`` to
    quit. If ``pygame`` is not installed the function returns immediately.

    Parameters
    ----------
    formation : Formation
        Formation to display.
    screen_size : Tuple[int, int] | None
        Initial window size; defaults to the configured viewer size.
    fps : int | None
        Redraw rate; defaults to the configured viewer rate.
    """
    if pygame is None:
        return

    cfg = LINEUP_CONFIG.viewer
    screen_size = screen_size or cfg.screen_size
    fps = fps or cfg.fps

    pygame.init()
    screen = pygame.display.set_mode(screen_size, pygame.RESIZABLE)
    pygame.display.set_caption(f"Formation: {formation.method_name()}")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont(None, 18)

    focus = Vector2D(0.0, 0.0)
    running = True
    while running:
        margin = 12
        pitch_rect = (margin, margin, screen_size[0] - 2 * margin, screen_size[1] - 2 * margin)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_q:
                    running = False
                elif event.key == pygame.K_t:
                    formation.train()
            elif event.type == pygame.VIDEORESIZE:
                screen_size = (event.w, event.h)
                screen = pygame.display.set_mode(screen_size, pygame.RESIZABLE)
            elif event.type == pygame.MOUSEMOTION:
                focus = screen_to_world(event.pos, pitch_rect)

        screen.fill((0, 0, 0))
        pitch = pygame.Rect(*pitch_rect)
        pygame.draw.rect(screen, GREEN, pitch)
        pygame.draw.rect(screen, LINE, pitch, 4)
        pygame.draw.line(screen, LINE, (pitch.centerx, pitch.top), (pitch.centerx, pitch.bottom), 2)
        center_radius = int((9.15 / (2 * LINEUP_CONFIG.pitch.half_length)) * pitch.width)
        pygame.draw.circle(screen, LINE, pitch.center, center_radius, 2)

        # Training samples as small markers
        for sample in formation.samples():
            pygame.draw.circle(screen, LINE, world_to_screen(sample.ball, pitch_rect), 3, 1)

        for number, pos in enumerate(formation.get_positions(focus), start=1):
            sx, sy = world_to_screen(pos, pitch_rect)
            colour = SIDE_TYPE_COLOURS.get(formation.get_side_type(number), SYMMETRY_COLOUR)
            pygame.draw.circle(screen, colour, (sx, sy), cfg.player_radius)
            txt = font.render(str(number), True, TEXT)
            screen.blit(txt, (sx - txt.get_width() // 2, sy - txt.get_height() // 2))
            role = font.render(formation.get_role_name(number), True, LINE)
            screen.blit(role, (sx - role.get_width() // 2, sy + cfg.player_radius + 2))

        pygame.draw.circle(screen, BALL, world_to_screen(focus, pitch_rect), 6)

        hud = f"{formation.method_name()} v{formation.version()} | focus ({focus.x:.1f}, {focus.y:.1f})"
        screen.blit(font.render(hud, True, LINE), (margin + 8, margin + 8))

        pygame.display.flip()
        clock.tick(fps)

    pygame.quit()
