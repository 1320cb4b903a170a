"""
Control component models.

Owner-only enable/disable switch gating every other mutating operation.
"""

from __future__ import annotations

from dataclasses import dataclass

from escrow_gate.domain.errors import EngineError


@dataclass(frozen=True)
class SetActiveInput:
    """Input for disable/enable."""

    caller: str
    active: bool


@dataclass(frozen=True)
class ControlOutput:
    """Output for disable/enable."""

    active: bool | None = None
    success: bool = False
    error: EngineError | None = None
