"""
Ledger journal - transfer log with compensating rollback.

Wraps a LedgerPort for the span of one engine operation. Every successful
transfer is recorded; leaving the context with an exception issues the
reverse transfers, newest first, so value never moves on the ledger
without a matching engine commit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from escrow_gate.core.ports.ledger import LedgerPort, TransferResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JournalEntry:
    amount: int
    sender: str
    recipient: str


class LedgerJournal:
    """LedgerPort that remembers what it moved until committed or rolled back."""

    def __init__(self, ledger: LedgerPort):
        self._ledger = ledger
        self.entries: list[JournalEntry] = []

    def __enter__(self) -> LedgerJournal:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()

    def transfer(self, amount: int, sender: str, recipient: str) -> TransferResult:
        result = self._ledger.transfer(amount, sender, recipient)
        if result.ok:
            self.entries.append(JournalEntry(amount, sender, recipient))
        return result

    def commit(self) -> None:
        self.entries.clear()

    def rollback(self) -> None:
        """Reverse every recorded transfer, newest first."""
        while self.entries:
            entry = self.entries.pop()
            result = self._ledger.transfer(entry.amount, entry.recipient, entry.sender)
            if result.ok:
                logger.warning(
                    "Reversed transfer of %d from %s to %s",
                    entry.amount,
                    entry.sender,
                    entry.recipient,
                )
            else:
                logger.error(
                    "Could not reverse transfer of %d from %s to %s: %s",
                    entry.amount,
                    entry.sender,
                    entry.recipient,
                    result.reason,
                )
