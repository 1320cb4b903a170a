"""
Disbursement component ports.

Payouts move value through the ledger; cool-down is measured on the
logical clock.
"""

from escrow_gate.core.ports.clock import ClockPort
from escrow_gate.core.ports.ledger import LedgerPort, TransferResult

__all__ = ["ClockPort", "LedgerPort", "TransferResult"]
