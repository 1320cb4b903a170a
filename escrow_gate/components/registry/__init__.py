"""
Registry component.

Public API for beneficiary registration and eligibility records.
"""

from .component import run, run_deactivate, run_register, run_update_eligibility
from .models import (
    BeneficiaryOutput,
    DeactivateBeneficiaryInput,
    RegisterBeneficiaryInput,
    UpdateEligibilityInput,
)
from .ports import ClockPort

__all__ = [
    # Functions
    "run",
    "run_deactivate",
    "run_register",
    "run_update_eligibility",
    # Models
    "BeneficiaryOutput",
    "DeactivateBeneficiaryInput",
    "RegisterBeneficiaryInput",
    "UpdateEligibilityInput",
    # Ports
    "ClockPort",
]
