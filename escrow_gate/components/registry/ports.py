"""
Registry component ports.

Registration and eligibility updates are stamped with the logical clock.
"""

from escrow_gate.core.ports.clock import ClockPort

__all__ = ["ClockPort"]
