"""
Registry component - beneficiaries and their eligibility records.

Invariants:
- A beneficiary id is registered at most once, even after deactivation
- Beneficiaries are soft-deleted, never removed
- Inactive beneficiaries are reported as not found
- Eligibility records are written only by attestors
- The escrow account is never a beneficiary
"""

from __future__ import annotations

import logging

from escrow_gate.domain.entities import Beneficiary, EligibilityRecord, EngineState
from escrow_gate.domain.errors import EngineError
from escrow_gate.domain.policy import AccessControl

from .models import (
    BeneficiaryOutput,
    DeactivateBeneficiaryInput,
    RegisterBeneficiaryInput,
    UpdateEligibilityInput,
)
from .ports import ClockPort

logger = logging.getLogger(__name__)


def run_register(
    inp: RegisterBeneficiaryInput,
    *,
    state: EngineState,
    policy: AccessControl,
    clock: ClockPort,
) -> BeneficiaryOutput:
    if not state.active:
        return BeneficiaryOutput(error=EngineError.of("contract_disabled"))

    if not policy.is_owner(inp.caller) or policy.is_escrow(inp.beneficiary_id):
        return BeneficiaryOutput(error=EngineError.of("unauthorized"))

    if inp.beneficiary_id in state.beneficiaries:
        return BeneficiaryOutput(error=EngineError.of("beneficiary_already_exists"))

    beneficiary = Beneficiary(
        id=inp.beneficiary_id,
        name=inp.name,
        org=inp.org,
        program=inp.program,
        enrolled_at=clock.height(),
    )
    record = EligibilityRecord()
    state.beneficiaries[inp.beneficiary_id] = beneficiary
    state.eligibility_records[inp.beneficiary_id] = record
    state.total_beneficiaries += 1

    logger.info("Beneficiary %s registered", inp.beneficiary_id)
    return BeneficiaryOutput(beneficiary=beneficiary, eligibility=record, success=True)


def run_update_eligibility(
    inp: UpdateEligibilityInput,
    *,
    state: EngineState,
    policy: AccessControl,
    clock: ClockPort,
) -> BeneficiaryOutput:
    if not state.active:
        return BeneficiaryOutput(error=EngineError.of("contract_disabled"))

    if not policy.is_attestor(state, inp.caller):
        return BeneficiaryOutput(error=EngineError.of("unauthorized"))

    beneficiary = state.active_beneficiary(inp.beneficiary_id)
    if beneficiary is None:
        return BeneficiaryOutput(error=EngineError.of("beneficiary_not_found"))

    if not policy.rules.limits.score.contains(inp.score):
        return BeneficiaryOutput(
            error=EngineError.of("invalid_score", f"Score {inp.score} is out of range")
        )

    if inp.credit_units < 0 or inp.term < 0:
        return BeneficiaryOutput(
            error=EngineError.of("invalid_amount", "Credit units and term must not be negative")
        )

    record = EligibilityRecord(
        score=inp.score,
        credit_units=inp.credit_units,
        term=inp.term,
        updated_at=clock.height(),
    )
    state.eligibility_records[inp.beneficiary_id] = record

    logger.info(
        "Eligibility of %s set to score=%d by %s", inp.beneficiary_id, inp.score, inp.caller
    )
    return BeneficiaryOutput(beneficiary=beneficiary, eligibility=record, success=True)


def run_deactivate(
    inp: DeactivateBeneficiaryInput, *, state: EngineState, policy: AccessControl
) -> BeneficiaryOutput:
    if not state.active:
        return BeneficiaryOutput(error=EngineError.of("contract_disabled"))

    if not policy.is_owner(inp.caller):
        return BeneficiaryOutput(error=EngineError.of("unauthorized"))

    beneficiary = state.active_beneficiary(inp.beneficiary_id)
    if beneficiary is None:
        return BeneficiaryOutput(error=EngineError.of("beneficiary_not_found"))

    beneficiary.active = False

    logger.info("Beneficiary %s deactivated", inp.beneficiary_id)
    return BeneficiaryOutput(beneficiary=beneficiary, success=True)


def run(
    inp: RegisterBeneficiaryInput | UpdateEligibilityInput | DeactivateBeneficiaryInput,
    *,
    state: EngineState,
    policy: AccessControl,
    clock: ClockPort | None = None,
) -> BeneficiaryOutput:
    if isinstance(inp, RegisterBeneficiaryInput):
        assert clock
        return run_register(inp, state=state, policy=policy, clock=clock)

    elif isinstance(inp, UpdateEligibilityInput):
        assert clock
        return run_update_eligibility(inp, state=state, policy=policy, clock=clock)

    elif isinstance(inp, DeactivateBeneficiaryInput):
        return run_deactivate(inp, state=state, policy=policy)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
