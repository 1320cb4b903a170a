"""
Escrow component ports.

Funding and withdrawal move value through the external ledger.
"""

from escrow_gate.core.ports.ledger import LedgerPort, TransferResult

__all__ = ["LedgerPort", "TransferResult"]
