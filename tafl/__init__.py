"""
Tafl rule engine.
Move validation, custodian captures, win detection and undo for an 11x11
King's-escape board game.
"""

from .board import Board
from .config import config
from .exceptions import OccupancyError, PieceHistoryError, TaflError
from .game import Game
from .piece import Piece
from .player import Player
from .report import GameReport, build_report, format_report
from .types import Move, PieceKind, Position, Side, WinReason

__all__ = [
    "config",
    "Board",
    "Game",
    "GameReport",
    "Move",
    "OccupancyError",
    "Piece",
    "PieceHistoryError",
    "PieceKind",
    "Player",
    "Position",
    "Side",
    "TaflError",
    "WinReason",
    "build_report",
    "format_report",
]
