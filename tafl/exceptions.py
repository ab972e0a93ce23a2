class TaflError(Exception):
    """Base exception for rule engine errors."""

    pass


class OccupancyError(TaflError):
    """Raised in strict mode when two live pieces share a square."""

    pass


class PieceHistoryError(TaflError):
    """Raised when a piece's position history would be left empty."""

    pass
