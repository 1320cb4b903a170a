"""
Ledger port interface.

External value-transfer primitive. The engine custodies fund balances in
its escrow identity and moves value through this port for funding,
withdrawal and disbursement.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

# --- Models ---


@dataclass(frozen=True)
class TransferResult:
    """
    Outcome of a ledger transfer.

    Attributes:
        ok: Whether the value moved
        reason: Failure description when ok is False
    """

    ok: bool
    reason: str | None = None


# --- Port Interface ---


class LedgerPort(Protocol):
    """
    Port for moving value between identities.

    Implementations:
    - InMemoryLedger: dict-backed balances with failure injection (dev/tests)
    - LedgerJournal: per-operation wrapper that can reverse its transfers
    """

    def transfer(self, amount: int, sender: str, recipient: str) -> TransferResult:
        """
        Move amount from sender to recipient.

        Must be all-or-nothing: a failed transfer moves nothing.

        Args:
            amount: Positive amount in base units
            sender: Paying identity (may be the escrow identity)
            recipient: Receiving identity (may be the escrow identity)

        Returns:
            TransferResult describing the outcome
        """
        ...
