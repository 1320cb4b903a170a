"""
Disbursement component models.
"""

from __future__ import annotations

from dataclasses import dataclass

from escrow_gate.domain.entities import Beneficiary, Fund
from escrow_gate.domain.errors import EngineError

# --- Input Models ---


@dataclass(frozen=True)
class RequestDisbursementInput:
    """The caller claims a payout from the sponsor's fund as beneficiary."""

    caller: str
    sponsor: str


@dataclass(frozen=True)
class CheckDisbursementInput:
    """Read-only eligibility check for a (beneficiary, fund) pair."""

    beneficiary_id: str
    sponsor: str


# --- Output Models ---


@dataclass(frozen=True)
class DisbursementOutput:
    amount: int = 0
    beneficiary: Beneficiary | None = None
    fund: Fund | None = None
    success: bool = False
    error: EngineError | None = None


@dataclass(frozen=True)
class DisbursementCheckOutput:
    """
    Result of a read-only eligibility check.

    blocker is the first failing precondition, None when eligible.
    """

    eligible: bool
    blocker: EngineError | None = None
