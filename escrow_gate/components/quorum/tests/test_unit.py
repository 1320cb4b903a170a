"""
Unit tests for the quorum component.

Tests:
- Owner-only attestor set management
- Distinct attestations per (beneficiary, period)
- Capacity overflow is rejected
- Period key follows the disbursement cycle
"""

import pytest

from escrow_gate.components.quorum import (
    AddAttestorInput,
    AttestationOutput,
    RecordAttestationInput,
    RemoveAttestorInput,
    run,
    run_add_attestor,
    run_record_attestation,
    run_remove_attestor,
)
from escrow_gate.domain.entities import Beneficiary, EngineState
from escrow_gate.domain.policy import AccessControl
from escrow_gate.rules.models import QuorumRules, Rules

OWNER = "deployer"
STUDENT = "wallet_2"
ATTESTORS = [f"attestor_{i}" for i in range(7)]


@pytest.fixture
def policy() -> AccessControl:
    return AccessControl(Rules())


@pytest.fixture
def state() -> EngineState:
    return EngineState(
        beneficiaries={
            STUDENT: Beneficiary(
                id=STUDENT, name="Student", org="Uni", program="CS", enrolled_at=1
            )
        },
        attestors=set(ATTESTORS),
    )


def attest(state: EngineState, policy: AccessControl, caller: str) -> AttestationOutput:
    return run_record_attestation(
        RecordAttestationInput(caller=caller, beneficiary_id=STUDENT), state=state, policy=policy
    )


class TestAttestorSet:
    def test_owner_adds_and_removes(self, policy: AccessControl) -> None:
        state = EngineState()

        added = run_add_attestor(
            AddAttestorInput(caller=OWNER, attestor="v1"), state=state, policy=policy
        )
        assert added.success is True
        assert policy.is_attestor(state, "v1") is True

        removed = run_remove_attestor(
            RemoveAttestorInput(caller=OWNER, attestor="v1"), state=state, policy=policy
        )
        assert removed.success is True
        assert removed.is_attestor is False
        assert policy.is_attestor(state, "v1") is False

    def test_removing_unknown_attestor_is_noop(self, policy: AccessControl) -> None:
        state = EngineState()
        out = run_remove_attestor(
            RemoveAttestorInput(caller=OWNER, attestor="ghost"), state=state, policy=policy
        )
        assert out.success is True
        assert state.attestors == set()

    def test_non_owner_unauthorized(self, state: EngineState, policy: AccessControl) -> None:
        out = run_add_attestor(
            AddAttestorInput(caller=ATTESTORS[0], attestor="v9"), state=state, policy=policy
        )

        assert out.error is not None
        assert out.error.kind == "unauthorized"
        assert "v9" not in state.attestors

    def test_disabled_contract(self, state: EngineState, policy: AccessControl) -> None:
        state.active = False

        out = run_remove_attestor(
            RemoveAttestorInput(caller=OWNER, attestor=ATTESTORS[0]), state=state, policy=policy
        )

        assert out.error is not None
        assert out.error.kind == "contract_disabled"
        assert ATTESTORS[0] in state.attestors


class TestRecordAttestation:
    def test_counts_distinct_attestors(self, state: EngineState, policy: AccessControl) -> None:
        first = attest(state, policy, ATTESTORS[0])
        assert first.success is True
        assert first.period == 1
        assert first.count == 1

        attest(state, policy, ATTESTORS[1])
        third = attest(state, policy, ATTESTORS[2])

        assert third.count == 3
        assert state.verifications_for(STUDENT, 1) == ATTESTORS[:3]

    def test_duplicate_attestation_rejected(
        self, state: EngineState, policy: AccessControl
    ) -> None:
        attest(state, policy, ATTESTORS[0])

        out = attest(state, policy, ATTESTORS[0])

        assert out.error is not None
        assert out.error.kind == "already_verified"
        assert out.error.code == 1009
        assert state.verifications_for(STUDENT, 1) == [ATTESTORS[0]]

    def test_non_attestor_unauthorized(self, state: EngineState, policy: AccessControl) -> None:
        out = attest(state, policy, OWNER)

        assert out.error is not None
        assert out.error.kind == "unauthorized"
        assert state.verification_records == {}

    def test_inactive_beneficiary(self, state: EngineState, policy: AccessControl) -> None:
        state.beneficiaries[STUDENT].active = False

        out = attest(state, policy, ATTESTORS[0])

        assert out.error is not None
        assert out.error.kind == "beneficiary_not_found"

    def test_capacity_overflow_rejected(self, state: EngineState, policy: AccessControl) -> None:
        """Default capacity is 5; the sixth attestation is refused, not truncated."""
        for attestor in ATTESTORS[:5]:
            assert attest(state, policy, attestor).success

        out = attest(state, policy, ATTESTORS[5])

        assert out.error is not None
        assert out.error.kind == "verification_list_full"
        assert out.count == 5
        assert state.verifications_for(STUDENT, 1) == ATTESTORS[:5]

    def test_capacity_follows_rules(self, state: EngineState) -> None:
        policy = AccessControl(Rules(quorum=QuorumRules(threshold=1, capacity=1)))
        attest(state, policy, ATTESTORS[0])

        out = attest(state, policy, ATTESTORS[1])

        assert out.error is not None
        assert out.error.kind == "verification_list_full"

    def test_new_cycle_uses_new_period(self, state: EngineState, policy: AccessControl) -> None:
        """After a payout the same attestor may confirm again, in the next period."""
        attest(state, policy, ATTESTORS[0])
        state.beneficiaries[STUDENT].payout_count = 1

        out = attest(state, policy, ATTESTORS[0])

        assert out.success is True
        assert out.period == 2
        assert out.count == 1
        assert state.verifications_for(STUDENT, 1) == [ATTESTORS[0]]
        assert state.verifications_for(STUDENT, 2) == [ATTESTORS[0]]


def test_run_dispatches(state: EngineState, policy: AccessControl) -> None:
    out = run(
        RecordAttestationInput(caller=ATTESTORS[0], beneficiary_id=STUDENT),
        state=state,
        policy=policy,
    )
    assert out.success is True
