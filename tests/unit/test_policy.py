import pytest

from escrow_gate.domain.entities import EngineState
from escrow_gate.domain.policy import AccessControl
from escrow_gate.rules.models import EngineRules, Rules


@pytest.fixture
def policy():
    return AccessControl(Rules(engine=EngineRules(owner="alice")))


def test_owner_is_the_configured_identity(policy):
    assert policy.owner == "alice"
    assert policy.is_owner("alice") is True
    assert policy.is_owner("bob") is False


def test_owner_is_not_implicitly_an_attestor(policy):
    assert policy.is_attestor(EngineState(), "alice") is False


def test_attestor_membership_comes_from_state(policy):
    state = EngineState(attestors={"carol"})
    assert policy.is_attestor(state, "carol") is True

    state.attestors.discard("carol")
    assert policy.is_attestor(state, "carol") is False


def test_escrow_account_recognised():
    policy = AccessControl(Rules(engine=EngineRules(owner="alice", escrow_account="vault")))
    assert policy.is_escrow("vault") is True
    assert policy.is_escrow("alice") is False
