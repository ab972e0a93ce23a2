from __future__ import annotations

from dataclasses import dataclass, field

from .types import Side


@dataclass(slots=True, eq=False)
class Player:
    side: Side
    has_won: bool = field(default=False, init=False)

    @property
    def is_player_one(self) -> bool:
        """Defenders are the first player; attackers move first regardless."""
        return self.side == Side.DEFENDER

    def win(self) -> None:
        self.has_won = True

    def reset(self) -> None:
        self.has_won = False

    def __str__(self) -> str:
        return self.side.name.lower()
