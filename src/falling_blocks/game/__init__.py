"""Game module for Falling Blocks.

Exports the rules engine and supporting classes:
- Board: Grid of landed cells, merging and line clearing
- ActivePiece / PieceKind: Tetromino templates and clockwise rotation
- is_valid_placement: Collision check for a shape at an anchor
- PieceController: Spawn, move, rotate and hard-drop targeting
- ScoringRules: Line scores, levels and gravity intervals
- GameClock / ManualTimer: Level-driven gravity timer
- GameSession: Lifecycle state machine and command dispatcher
"""

from .grid import Board
from .pieces import COLOR_RGB, ActivePiece, Color, PieceKind, PieceTemplate, rotate_cw, template_for
from .collision import is_valid_placement
from .controller import MoveResult, PieceController
from .rules import ScoringRules
from .clock import GameClock, ManualTimer, Timer
from .exceptions import CorruptHighScoreError
from .storage import HighScoreStore, JsonHighScoreStore, MemoryHighScoreStore, parse_high_score
from .core import Command, GameConfig, GameSession, NullRenderer, Phase, Renderer, SessionState

__all__ = [
    "Board",
    "COLOR_RGB",
    "ActivePiece",
    "Color",
    "PieceKind",
    "PieceTemplate",
    "rotate_cw",
    "template_for",
    "is_valid_placement",
    "MoveResult",
    "PieceController",
    "ScoringRules",
    "GameClock",
    "ManualTimer",
    "Timer",
    "CorruptHighScoreError",
    "HighScoreStore",
    "JsonHighScoreStore",
    "MemoryHighScoreStore",
    "parse_high_score",
    "Command",
    "GameConfig",
    "GameSession",
    "NullRenderer",
    "Phase",
    "Renderer",
    "SessionState",
]
