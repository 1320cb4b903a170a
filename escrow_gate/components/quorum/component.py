"""
Quorum component - distinct attestor confirmations per period.

Invariants:
- An attestor appears at most once per (beneficiary, period)
- Lists are append-only and never exceed the configured capacity
- Overflow is rejected, never truncated
- The period key comes from the beneficiary's disbursement cycle
"""

from __future__ import annotations

import logging

from escrow_gate.domain.entities import EngineState
from escrow_gate.domain.errors import EngineError
from escrow_gate.domain.policy import AccessControl

from .models import (
    AddAttestorInput,
    AttestationOutput,
    AttestorOutput,
    RecordAttestationInput,
    RemoveAttestorInput,
)

logger = logging.getLogger(__name__)


def run_add_attestor(
    inp: AddAttestorInput, *, state: EngineState, policy: AccessControl
) -> AttestorOutput:
    if not state.active:
        return AttestorOutput(error=EngineError.of("contract_disabled"))

    if not policy.is_owner(inp.caller):
        return AttestorOutput(error=EngineError.of("unauthorized"))

    state.attestors.add(inp.attestor)

    logger.info("Attestor %s added", inp.attestor)
    return AttestorOutput(attestor=inp.attestor, is_attestor=True, success=True)


def run_remove_attestor(
    inp: RemoveAttestorInput, *, state: EngineState, policy: AccessControl
) -> AttestorOutput:
    if not state.active:
        return AttestorOutput(error=EngineError.of("contract_disabled"))

    if not policy.is_owner(inp.caller):
        return AttestorOutput(error=EngineError.of("unauthorized"))

    state.attestors.discard(inp.attestor)

    logger.info("Attestor %s removed", inp.attestor)
    return AttestorOutput(attestor=inp.attestor, is_attestor=False, success=True)


def run_record_attestation(
    inp: RecordAttestationInput, *, state: EngineState, policy: AccessControl
) -> AttestationOutput:
    if not state.active:
        return AttestationOutput(error=EngineError.of("contract_disabled"))

    if not policy.is_attestor(state, inp.caller):
        return AttestationOutput(error=EngineError.of("unauthorized"))

    beneficiary = state.active_beneficiary(inp.beneficiary_id)
    if beneficiary is None:
        return AttestationOutput(error=EngineError.of("beneficiary_not_found"))

    period = beneficiary.current_period
    confirmations = state.verifications_for(inp.beneficiary_id, period)

    if inp.caller in confirmations:
        return AttestationOutput(
            period=period,
            count=len(confirmations),
            error=EngineError.of("already_verified"),
        )

    capacity = policy.rules.quorum.capacity
    if len(confirmations) >= capacity:
        return AttestationOutput(
            period=period,
            count=len(confirmations),
            error=EngineError.of(
                "verification_list_full", f"Period {period} already holds {capacity} attestations"
            ),
        )

    periods = state.verification_records.setdefault(inp.beneficiary_id, {})
    periods[period] = [*confirmations, inp.caller]
    count = len(periods[period])

    logger.info(
        "Attestation %d for %s in period %d recorded by %s",
        count,
        inp.beneficiary_id,
        period,
        inp.caller,
    )
    return AttestationOutput(period=period, count=count, success=True)


def run(
    inp: AddAttestorInput | RemoveAttestorInput | RecordAttestationInput,
    *,
    state: EngineState,
    policy: AccessControl,
) -> AttestorOutput | AttestationOutput:
    if isinstance(inp, AddAttestorInput):
        return run_add_attestor(inp, state=state, policy=policy)

    elif isinstance(inp, RemoveAttestorInput):
        return run_remove_attestor(inp, state=state, policy=policy)

    elif isinstance(inp, RecordAttestationInput):
        return run_record_attestation(inp, state=state, policy=policy)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
