class ManualClock:
    """Logical clock advanced explicitly by the caller (sequencer or tests)."""

    def __init__(self, start: int = 1):
        if start < 0:
            raise ValueError(f"clock cannot start below zero: {start}")
        self._height = start

    def height(self) -> int:
        return self._height

    def advance(self, ticks: int = 1) -> int:
        if ticks < 0:
            raise ValueError(f"clock cannot move backwards: {ticks}")
        self._height += ticks
        return self._height
