from __future__ import annotations

from typing import Optional, Tuple

import pygame

from falling_blocks.game import COLOR_RGB, ActivePiece, Board, Color, PieceKind, Phase, SessionState, template_for


BACKGROUND = (10, 10, 14)
EMPTY_CELL = (20, 20, 26)
TEXT_COLOR = (230, 230, 230)

PANEL_CELLS = 6


def _color_for_value(v: int) -> Tuple[int, int, int]:
    if v == 0:
        return EMPTY_CELL
    return COLOR_RGB.get(Color(abs(v)), (200, 200, 200))


def window_size(board_width: int, board_height: int, cell_size: int = 30, margin: int = 20) -> Tuple[int, int]:
    width = margin * 3 + (board_width + PANEL_CELLS) * cell_size
    height = margin * 2 + board_height * cell_size
    return width, height


class Renderer:
    """Draws the board, the falling piece, the next piece and the score panel.

    `surface` is drawn into on every `render` call; the display is flipped
    when `surface` is the display surface.
    """

    def __init__(self, surface: pygame.Surface, cell_size: int = 30, margin: int = 20) -> None:
        self.surface = surface
        self.cell_size = cell_size
        self.margin = margin
        self._font: Optional[pygame.font.Font] = None

    def _cell_rect(self, x0: int, y0: int, x: int, y: int) -> pygame.Rect:
        return pygame.Rect(
            x0 + x * self.cell_size,
            y0 + y * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )

    def _draw_grid(self, board: Board, active: Optional[ActivePiece]) -> None:
        state = board.snapshot(overlay=active)
        h, w = state.shape
        for y in range(h):
            for x in range(w):
                color = _color_for_value(int(state[y, x]))
                pygame.draw.rect(self.surface, color, self._cell_rect(self.margin, self.margin, x, y))

    def _draw_next(self, board: Board, next_kind: PieceKind) -> int:
        x0 = self.margin * 2 + board.width * self.cell_size
        y0 = self.margin
        template = template_for(next_kind)
        shape = template.shape
        for py in range(shape.shape[0]):
            for px in range(shape.shape[1]):
                if shape[py, px]:
                    rect = self._cell_rect(x0, y0 + self.cell_size, px, py)
                    pygame.draw.rect(self.surface, COLOR_RGB[template.color], rect)
        self._text("NEXT", x0, y0)
        return y0 + self.cell_size * 6

    def _draw_stats(self, state: SessionState, x0: int, y0: int) -> None:
        lines = [
            f"Score {state.score}",
            f"Lines {state.lines}",
            f"Level {state.level}",
            f"High {state.high_score}",
        ]
        if state.phase is Phase.IDLE:
            lines.append("P to start")
        elif state.phase is Phase.PAUSED:
            lines.append("Paused")
        elif state.phase is Phase.GAME_OVER:
            lines.extend(["Game Over", "R to restart"])
        for i, text in enumerate(lines):
            self._text(text, x0, y0 + i * 28)

    def _text(self, text: str, x: int, y: int) -> None:
        if not pygame.font.get_init():
            return
        if self._font is None:
            self._font = pygame.font.SysFont(None, 28)
        self.surface.blit(self._font.render(text, True, TEXT_COLOR), (x, y))

    def render(
        self,
        board: Board,
        active: Optional[ActivePiece],
        next_kind: PieceKind,
        state: SessionState,
    ) -> None:
        self.surface.fill(BACKGROUND)
        self._draw_grid(board, active)
        stats_y = self._draw_next(board, next_kind)
        self._draw_stats(state, self.margin * 2 + board.width * self.cell_size, stats_y)
        if pygame.display.get_init() and pygame.display.get_surface() is self.surface:
            pygame.display.flip()
