from typing import Protocol


class ClockPort(Protocol):
    """
    Logical clock supplied by the external sequencing authority.

    Heights are monotonically non-decreasing; every period and cool-down
    computation is expressed in heights, never wall-clock time.
    """

    def height(self) -> int:
        """Return the current logical-clock height."""
        ...
