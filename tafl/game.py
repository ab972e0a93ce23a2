from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

import numpy as np
from loguru import logger

from .board import Board
from .config import config
from .piece import Piece
from .player import Player
from .report import GameReport, build_report, format_report
from .types import DIRECTIONS, Move, Position, Side, WinReason


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


@dataclass(slots=True)
class Game:
    """Rule engine for an 11x11 Tafl game.

    The defenders (first player) guard a King who must reach a corner; the
    attackers (second player) move first and win by surrounding the King.
    ``move`` either commits a full turn or rejects it without touching any
    state. Each committed turn is kept on its player's move stack, paired
    with one entry on the mover's position history, so ``undo_last_move``
    can revert it exactly.
    """

    board: Board = field(default_factory=Board)
    log_report: bool = field(default_factory=lambda: config.LOG_REPORT)
    first_player: Player = field(init=False)
    second_player: Player = field(init=False)
    second_player_turn: bool = field(default=True, init=False)
    game_finished: bool = field(default=False, init=False)
    win_reason: Optional[WinReason] = field(default=None, init=False)
    last_report: Optional[GameReport] = field(default=None, init=False)
    _moves: Dict[Side, List[Move]] = field(default_factory=dict, init=False, repr=False)
    _roster: List[Piece] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        self.first_player = Player(Side.DEFENDER)
        self.second_player = Player(Side.ATTACKER)
        self._moves = {Side.DEFENDER: [], Side.ATTACKER: []}
        self.reset()

    # --- Queries ---
    @property
    def board_size(self) -> int:
        return self.board.size

    @property
    def is_second_player_turn(self) -> bool:
        return self.second_player_turn

    @property
    def is_game_finished(self) -> bool:
        return self.game_finished

    @property
    def current_player(self) -> Player:
        return self.second_player if self.second_player_turn else self.first_player

    @property
    def winner(self) -> Optional[Player]:
        for player in (self.first_player, self.second_player):
            if player.has_won:
                return player
        return None

    @property
    def pieces(self) -> List[Piece]:
        """Live pieces."""
        return list(self.board.pieces)

    @property
    def all_pieces(self) -> List[Piece]:
        """Every piece created since the last reset, captured ones included."""
        return list(self._roster)

    def piece_at(self, position: Optional[Position]) -> Optional[Piece]:
        return self.board.piece_at(position)

    def move_history(self, player: Player) -> List[Move]:
        return list(self._moves[player.side])

    def pieces_per_square(self) -> Dict[Position, Set[Piece]]:
        return self.board.pieces_per_square()

    def board_array(self) -> np.ndarray:
        return self.board.to_array()

    def visit_heatmap(self) -> np.ndarray:
        return self.board.visit_heatmap()

    # --- Setup ---
    def reset(self) -> None:
        self.game_finished = False
        self.second_player_turn = True
        self.win_reason = None
        self.last_report = None
        self.first_player.reset()
        self.second_player.reset()

        pieces: List[Piece] = []
        for piece_id, (x, y) in enumerate(config.ATTACKER_START, start=1):
            pieces.append(Piece.pawn(self.second_player, piece_id, x, y))
        for piece_id, (x, y) in enumerate(config.DEFENDER_START, start=1):
            if piece_id == config.KING_ID:
                pieces.append(Piece.king(self.first_player, piece_id, x, y))
            else:
                pieces.append(Piece.pawn(self.first_player, piece_id, x, y))
        self._install(pieces)

    def arrange(self, pieces: Iterable[Piece], second_player_turn: bool = True) -> None:
        """Start from a custom position instead of the standard layout.

        Pieces must belong to this game's players and sit on distinct,
        on-board squares. All history and win state is cleared.
        """
        pieces = list(pieces)
        seen: Set[Position] = set()
        for piece in pieces:
            if piece.owner is not self.first_player and piece.owner is not self.second_player:
                raise ValueError(f"{piece} does not belong to this game")
            if not self.board.in_bounds(piece.position):
                raise ValueError(f"{piece} is off the board at {piece.position}")
            if piece.position in seen:
                raise ValueError(f"Two pieces arranged on {piece.position}")
            seen.add(piece.position)

        self.reset()
        self.second_player_turn = second_player_turn
        for piece in pieces:
            piece.reset()
        self._install(pieces)

    def _install(self, pieces: List[Piece]) -> None:
        for stack in self._moves.values():
            stack.clear()
        self.board.clear()
        self._roster = list(pieces)
        for piece in pieces:
            self.board.add(piece)
            self.board.record_visit(piece, piece.position)

    # --- Rules: legality ---
    def _squares_between(self, a: Position, b: Position) -> Iterator[Position]:
        step = Position(_sign(b.x - a.x), _sign(b.y - a.y))
        square = a.step(step)
        while square != b:
            yield square
            square = square.step(step)

    def _check_move(self, a: Optional[Position], b: Optional[Position]) -> Tuple[Optional[Piece], str]:
        """Return (piece, "") when the move is legal, else (None, reason)."""
        if self.game_finished:
            return None, "game is finished"
        if not self.board.in_bounds(a) or not self.board.in_bounds(b):
            return None, "off the board"
        if a == b:
            return None, "source equals destination"
        if a.x != b.x and a.y != b.y:
            return None, "not a straight line"
        target = self.board.piece_at(a)
        if target is None:
            return None, "no piece on source square"
        if target.owner is not self.current_player:
            return None, f"not {target.owner}'s turn"
        for square in self._squares_between(a, b):
            if self.board.piece_at(square) is not None:
                return None, f"path blocked at {square}"
        if self.board.piece_at(b) is not None:
            return None, "destination occupied"
        if self.board.is_corner(b) and not target.is_king:
            return None, "only the King may enter a corner"
        return target, ""

    def is_legal(self, a: Position, b: Position) -> bool:
        return self._check_move(a, b)[0] is not None

    def legal_destinations(self, position: Optional[Position]) -> List[Position]:
        """All squares the piece on ``position`` may move to this turn."""
        destinations: List[Position] = []
        if not self.board.in_bounds(position):
            return destinations
        for direction in DIRECTIONS:
            square = position.step(direction)
            while self.board.in_bounds(square) and self.board.piece_at(square) is None:
                if self.is_legal(position, square):
                    destinations.append(square)
                square = square.step(direction)
        return destinations

    # --- Rules: captures ---
    def _attack(self, attacker: Piece, direction: Position) -> Optional[Piece]:
        if not attacker.can_capture:
            return None

        neighbor = self.board.piece_at(attacker.position.step(direction))
        if neighbor is None or attacker.is_ally(neighbor):
            return None

        # Square across the neighbor from the attacker
        far_position = attacker.position.step(direction, 2)
        far = self.board.piece_at(far_position)

        if neighbor.is_king:
            if self._king_surrounded(attacker, neighbor, far_position, direction):
                return neighbor
            return None

        if (
            self.board.is_corner(far_position)
            or not self.board.in_bounds(far_position)
            or (far is not None and not far.is_king and attacker.is_ally(far))
        ):
            return neighbor
        return None

    def _king_surrounded(
        self, attacker: Piece, king: Piece, far_position: Position, direction: Position
    ) -> bool:
        kx, ky = king.position.x, king.position.y
        if direction.x != 0:
            flanks = (Position(kx, ky + 1), Position(kx, ky - 1))
        else:
            flanks = (Position(kx + 1, ky), Position(kx - 1, ky))
        return all(
            not self.board.in_bounds(square) or attacker.is_ally(self.board.piece_at(square))
            for square in (far_position, *flanks)
        )

    # --- Applying a move ---
    def move(self, a: Position, b: Position) -> bool:
        """Attempt a turn from ``a`` to ``b``. False means rejected, nothing changed."""
        target, reason = self._check_move(a, b)
        if target is None:
            logger.debug(f"Rejected move {a} -> {b}: {reason}")
            return False

        old_position = target.position
        target.position = b

        if target.is_king and self.board.is_corner(b):
            self._commit(Move(target, old_position))
            self._win(WinReason.KING_ESCAPED)
            return True

        victims = tuple(
            victim
            for victim in (self._attack(target, direction) for direction in DIRECTIONS)
            if victim is not None
        )
        for victim in victims:
            self.board.remove(victim)
        if victims:
            logger.debug(f"{target} captured {', '.join(str(v) for v in victims)} at {b}")
        target.add_kills(len(victims))
        self._commit(Move(target, old_position, victims))

        # Win state is applied only once the move record is complete
        if any(victim.is_king for victim in victims):
            self._win(WinReason.KING_CAPTURED)
        elif not self.second_player_turn and not self.board.pieces_of(self.second_player):
            self._win(WinReason.ATTACKERS_ELIMINATED)
        else:
            self.second_player_turn = not self.second_player_turn
        return True

    def _commit(self, move: Move) -> None:
        piece = move.piece
        piece.push_position(piece.position)
        self.board.record_visit(piece, piece.position)
        self._moves[self.current_player.side].append(move)

    def _win(self, reason: WinReason) -> None:
        self.game_finished = True
        self.win_reason = reason
        winner = self.current_player
        winner.win()
        logger.info(f"Game over: {winner} side wins ({reason.value})")

        self.last_report = build_report(self)
        if self.log_report:
            for line in format_report(self.last_report):
                logger.info(line)

    # --- Undo ---
    def undo_last_move(self) -> None:
        """Revert the last move of the player who is not about to move."""
        # The winning move never flips the turn, so popping here would revert
        # the loser's move while the game stays finished
        if self.game_finished:
            logger.debug("Undo ignored: game is finished")
            return

        # The player about to move undoes the opponent's last turn
        stack = self._moves[Side.DEFENDER if self.second_player_turn else Side.ATTACKER]
        if not stack:
            logger.debug("Undo ignored: no move to revert")
            return

        move = stack.pop()
        piece = move.piece
        self.board.unrecord_visit(piece, piece.position)
        piece.pop_position()
        piece.position = move.old_position
        self.board.add_all(move.victims)
        self.second_player_turn = not self.second_player_turn
