"""
escrow-gate: quorum-gated escrow disbursement engine.

Public entry point is `EscrowEngine`; components under
`escrow_gate.components` hold the pure operation logic.
"""

from escrow_gate.engine import EscrowEngine

__all__ = ["EscrowEngine"]

__version__ = "0.1.0"
