"""
Disbursement component.

Public API for eligibility checks and payouts.
"""

from .component import (
    cooldown_elapsed,
    evaluate_preconditions,
    run,
    run_check,
    run_request_disbursement,
)
from .models import (
    CheckDisbursementInput,
    DisbursementCheckOutput,
    DisbursementOutput,
    RequestDisbursementInput,
)
from .ports import ClockPort, LedgerPort

__all__ = [
    # Functions
    "cooldown_elapsed",
    "evaluate_preconditions",
    "run",
    "run_check",
    "run_request_disbursement",
    # Models
    "CheckDisbursementInput",
    "DisbursementCheckOutput",
    "DisbursementOutput",
    "RequestDisbursementInput",
    # Ports
    "ClockPort",
    "LedgerPort",
]
