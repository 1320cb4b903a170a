"""
Quorum component models.

Attestor membership and per-period attestation lists.
"""

from __future__ import annotations

from dataclasses import dataclass

from escrow_gate.domain.errors import EngineError

# --- Input Models ---


@dataclass(frozen=True)
class AddAttestorInput:
    caller: str
    attestor: str


@dataclass(frozen=True)
class RemoveAttestorInput:
    caller: str
    attestor: str


@dataclass(frozen=True)
class RecordAttestationInput:
    """An attestor confirms a beneficiary's progress for the current period."""

    caller: str
    beneficiary_id: str


# --- Output Models ---


@dataclass(frozen=True)
class AttestorOutput:
    attestor: str | None = None
    is_attestor: bool = False
    success: bool = False
    error: EngineError | None = None


@dataclass(frozen=True)
class AttestationOutput:
    """Output with the attestation count after recording."""

    period: int | None = None
    count: int = 0
    success: bool = False
    error: EngineError | None = None
