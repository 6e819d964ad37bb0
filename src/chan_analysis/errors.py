"""Exceptions raised by the Chan analysis pipeline."""


class ChanAnalysisError(ValueError):
    """Base class for analysis input errors."""


class InsufficientDataError(ChanAnalysisError):
    """Not enough input to derive any structure (e.g. no bars at all)."""


class InvalidOrderingError(ChanAnalysisError):
    """Bars are not in strictly ascending time order."""

    def __init__(self, position: int, previous_time: int, time: int):
        self.position = position
        self.previous_time = previous_time
        self.time = time
        super().__init__(
            f"Bars must be in chronological order. "
            f"Bar {position} time {time} <= bar {position - 1} time {previous_time}"
        )
