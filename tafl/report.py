"""End-of-game statistics.

Everything here is computed from the engine's read accessors; the engine
itself only decides when a report is due.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Sequence, Tuple

from .config import config
from .piece import Piece
from .player import Player
from .types import Move, Position, WinReason

if TYPE_CHECKING:
    from .game import Game


@dataclass(slots=True)
class PieceTrail:
    """Squares a piece left on each of its moves, then where it stands now."""

    piece: Piece
    positions: List[Position] = field(default_factory=list)

    @property
    def move_count(self) -> int:
        return len(self.positions) - 1


@dataclass(slots=True)
class GameReport:
    winner: Player
    reason: WinReason
    # Winner's trails first, then the loser's
    trails: List[List[PieceTrail]]
    kills: List[Tuple[Piece, int]]
    distances: List[Tuple[Piece, int]]
    crowded_squares: List[Tuple[Position, int]]


def piece_trails(moves: Sequence[Move]) -> List[PieceTrail]:
    """Group a move stack by piece, fewest moves first, ties by id."""
    by_piece: Dict[Piece, PieceTrail] = {}
    for mv in moves:
        trail = by_piece.setdefault(mv.piece, PieceTrail(mv.piece))
        trail.positions.append(mv.old_position)
    for piece, trail in by_piece.items():
        trail.positions.append(piece.position)
    return sorted(by_piece.values(), key=lambda t: (t.move_count, t.piece.piece_id))


def kill_tally(pieces: Sequence[Piece]) -> List[Tuple[Piece, int]]:
    scored = [(p, p.kills) for p in pieces if p.kills != 0]
    return sorted(scored, key=lambda item: (item[1], item[0].piece_id))


def travel_distances(pieces: Sequence[Piece]) -> List[Tuple[Piece, int]]:
    travelled = [(p, p.distance_travelled()) for p in pieces]
    travelled = [item for item in travelled if item[1] != 0]
    return sorted(travelled, key=lambda item: (-item[1], item[0].piece_id))


def crowded_squares(visits: Dict[Position, set], minimum: int = 2) -> List[Tuple[Position, int]]:
    """Squares visited by at least ``minimum`` distinct pieces."""
    counted = [(pos, len(pieces)) for pos, pieces in visits.items() if len(pieces) >= minimum]
    return sorted(counted, key=lambda item: (-item[1], item[0].x, item[0].y))


def build_report(game: "Game") -> GameReport:
    winner = game.winner
    if winner is None or game.win_reason is None:
        raise ValueError("Cannot report on a game without a winner")
    loser = game.second_player if winner is game.first_player else game.first_player

    pieces = game.all_pieces
    return GameReport(
        winner=winner,
        reason=game.win_reason,
        trails=[
            piece_trails(game.move_history(winner)),
            piece_trails(game.move_history(loser)),
        ],
        kills=kill_tally(pieces),
        distances=travel_distances(pieces),
        crowded_squares=crowded_squares(game.pieces_per_square()),
    )


def format_report(report: GameReport, width: int | None = None) -> List[str]:
    """Render the classic text report, one string per line."""
    rule = "*" * (config.REPORT_RULE_WIDTH if width is None else width)
    lines: List[str] = []
    for trails in report.trails:
        for trail in trails:
            lines.append(f"{trail.piece}: [{', '.join(str(p) for p in trail.positions)}]")
    lines.append(rule)
    lines.extend(f"{piece}: {kills} kills" for piece, kills in report.kills)
    lines.append(rule)
    lines.extend(f"{piece}: {distance} squares" for piece, distance in report.distances)
    lines.append(rule)
    lines.extend(f"{pos}{count} pieces" for pos, count in report.crowded_squares)
    lines.append(rule)
    return lines
