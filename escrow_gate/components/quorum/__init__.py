"""
Quorum component.

Public API for attestor management and per-period attestations.
"""

from .component import run, run_add_attestor, run_record_attestation, run_remove_attestor
from .models import (
    AddAttestorInput,
    AttestationOutput,
    AttestorOutput,
    RecordAttestationInput,
    RemoveAttestorInput,
)

__all__ = [
    # Functions
    "run",
    "run_add_attestor",
    "run_record_attestation",
    "run_remove_attestor",
    # Models
    "AddAttestorInput",
    "AttestationOutput",
    "AttestorOutput",
    "RecordAttestationInput",
    "RemoveAttestorInput",
]
