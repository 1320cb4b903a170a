# escrow-gate ports (Protocol interfaces); no implementations here

from escrow_gate.core.ports.clock import ClockPort
from escrow_gate.core.ports.ledger import LedgerPort, TransferResult
from escrow_gate.core.ports.state import StateStorePort

__all__ = [
    "ClockPort",
    "LedgerPort",
    "StateStorePort",
    "TransferResult",
]
