"""
In-memory ledger adapter.

Dict-backed implementation of LedgerPort. Holds identity balances
(including the engine's escrow identity) and lets tests force transfer
failures.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from escrow_gate.core.ports.ledger import LedgerPort, TransferResult

logger = logging.getLogger(__name__)


@dataclass
class InMemoryLedger:
    """
    Ledger with balances held in a dict.

    Transfers fail when the sender cannot cover the amount, when the amount
    is not positive, or when a failure has been injected for the sender.

    This adapter satisfies the LedgerPort protocol.
    """

    balances: dict[str, int] = field(default_factory=dict)
    _failing_senders: set[str] = field(default_factory=set)
    _fail_all: bool = False

    def transfer(self, amount: int, sender: str, recipient: str) -> TransferResult:
        if amount <= 0:
            return TransferResult(ok=False, reason=f"non-positive amount {amount}")

        if self._fail_all or sender in self._failing_senders:
            logger.debug("InMemoryLedger: injected failure for sender=%s", sender)
            return TransferResult(ok=False, reason="transfer rejected by ledger")

        available = self.balances.get(sender, 0)
        if available < amount:
            return TransferResult(
                ok=False,
                reason=f"{sender} holds {available}, needs {amount}",
            )

        self.balances[sender] = available - amount
        self.balances[recipient] = self.balances.get(recipient, 0) + amount

        logger.debug(
            "InMemoryLedger.transfer: amount=%d sender=%s recipient=%s",
            amount,
            sender,
            recipient,
        )
        return TransferResult(ok=True)

    def balance_of(self, identity: str) -> int:
        return self.balances.get(identity, 0)

    # --- Testing Helpers ---

    def mint(self, identity: str, amount: int) -> None:
        """Credit an identity out of thin air (test setup)."""
        self.balances[identity] = self.balances.get(identity, 0) + amount

    def fail_transfers_from(self, sender: str) -> None:
        """Make every transfer paid by sender fail."""
        self._failing_senders.add(sender)

    def set_fail_all(self, fail: bool) -> None:
        """Make every transfer fail (or stop doing so)."""
        self._fail_all = fail

    def clear_failures(self) -> None:
        self._failing_senders.clear()
        self._fail_all = False


# Verify protocol compliance at module load time
def _verify_protocol_compliance() -> None:
    """Verify InMemoryLedger satisfies LedgerPort protocol."""
    ledger: LedgerPort = InMemoryLedger()
    _ = ledger.transfer(1, "a", "b")


_verify_protocol_compliance()
