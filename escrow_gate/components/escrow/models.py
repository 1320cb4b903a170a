"""
Escrow component models.

Inputs and outputs for per-sponsor fund management.
"""

from __future__ import annotations

from dataclasses import dataclass

from escrow_gate.domain.entities import Fund, FundSettings
from escrow_gate.domain.errors import EngineError

# --- Input Models ---


@dataclass(frozen=True)
class CreateFundInput:
    """Owner creates the escrow fund for a sponsor."""

    caller: str
    sponsor: str
    min_score: int
    payout_amount: int
    period_length: int


@dataclass(frozen=True)
class FundFundInput:
    """Anyone tops up a sponsor's fund."""

    caller: str
    sponsor: str
    amount: int


@dataclass(frozen=True)
class UpdateSettingsInput:
    """Sponsor changes the settings of its own fund."""

    caller: str
    min_score: int
    payout_amount: int
    period_length: int


@dataclass(frozen=True)
class DeactivateFundInput:
    caller: str


@dataclass(frozen=True)
class WithdrawFundsInput:
    caller: str


# --- Output Models ---


@dataclass(frozen=True)
class FundOutput:
    """Output for fund operations."""

    fund: Fund | None = None
    settings: FundSettings | None = None
    amount: int = 0  # amount moved by fund/withdraw
    success: bool = False
    error: EngineError | None = None
