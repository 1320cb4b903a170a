from __future__ import annotations

from dataclasses import dataclass

from escrow_gate.domain.entities import Beneficiary, EligibilityRecord
from escrow_gate.domain.errors import EngineError


@dataclass(frozen=True)
class RegisterBeneficiaryInput:
    caller: str
    beneficiary_id: str
    name: str
    org: str
    program: str


@dataclass(frozen=True)
class UpdateEligibilityInput:
    caller: str
    beneficiary_id: str
    score: int
    credit_units: int
    term: int


@dataclass(frozen=True)
class DeactivateBeneficiaryInput:
    caller: str
    beneficiary_id: str


@dataclass(frozen=True)
class BeneficiaryOutput:
    beneficiary: Beneficiary | None = None
    eligibility: EligibilityRecord | None = None
    success: bool = False
    error: EngineError | None = None
