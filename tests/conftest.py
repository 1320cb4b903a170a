from pathlib import Path

import pytest

from escrow_gate.adapters.clock import ManualClock
from escrow_gate.adapters.ledger_memory import InMemoryLedger
from escrow_gate.engine import EscrowEngine
from escrow_gate.rules.loader import load_rules
from escrow_gate.rules.models import Rules
from tests.accounts import ATTESTORS, FUNDER, OWNER, SPONSOR, STARTING_BALANCE, STUDENT

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def rules_path() -> Path:
    return PROJECT_ROOT / "rules.yaml"


@pytest.fixture
def rules(rules_path: Path) -> Rules:
    """The shipped rules file, so tests fail fast if it drifts."""
    return load_rules(rules_path)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(start=1)


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Ledger where every test account starts with plenty of funds."""
    ledger = InMemoryLedger()
    for account in (OWNER, SPONSOR, STUDENT, FUNDER, *ATTESTORS):
        ledger.mint(account, STARTING_BALANCE)
    return ledger


@pytest.fixture
def engine(ledger: InMemoryLedger, clock: ManualClock, rules: Rules) -> EscrowEngine:
    return EscrowEngine(ledger=ledger, clock=clock, rules=rules)


@pytest.fixture
def funded_engine(engine: EscrowEngine) -> EscrowEngine:
    """
    Fund (min score 300, payout 5_000_000, period 90) holding 20_000_000,
    one registered beneficiary and three attestors. No score or
    attestations yet.
    """
    assert engine.create_fund(OWNER, SPONSOR, 300, 5_000_000, 90).success
    assert engine.fund_fund(FUNDER, SPONSOR, 20_000_000).success
    assert engine.register_beneficiary(
        OWNER, STUDENT, "John Doe", "University of Technology", "Computer Science"
    ).success
    for attestor in ATTESTORS:
        assert engine.add_attestor(OWNER, attestor).success
    return engine


@pytest.fixture
def eligible_engine(funded_engine: EscrowEngine) -> EscrowEngine:
    """funded_engine plus a passing score and a full quorum for period 1."""
    assert funded_engine.update_eligibility(ATTESTORS[0], STUDENT, 350, 60, 4).success
    for attestor in ATTESTORS:
        assert funded_engine.record_attestation(attestor, STUDENT).success
    return funded_engine
