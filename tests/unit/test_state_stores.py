"""
State store contract tests.

Both StateStorePort implementations must hand out private copies and
persist exactly what was saved.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from escrow_gate.adapters.sqlite.state_store import SQLiteStateStore, StaleStateError
from escrow_gate.adapters.state_memory import InMemoryStateStore
from escrow_gate.core.ports.state import StateStorePort
from escrow_gate.domain.entities import (
    Beneficiary,
    EligibilityRecord,
    EngineState,
    Fund,
    FundSettings,
)


def populated_state() -> EngineState:
    return EngineState(
        funds={
            "wallet_1": Fund(sponsor="wallet_1", balance=15_000_000, total_distributed=5_000_000),
            "wallet_9": Fund(sponsor="wallet_9", balance=3, active=False),
        },
        fund_settings={
            "wallet_1": FundSettings(min_score=300, payout_amount=5_000_000, period_length=90),
            "wallet_9": FundSettings(min_score=250, payout_amount=1_000_000, period_length=1),
        },
        beneficiaries={
            "wallet_2": Beneficiary(
                id="wallet_2",
                name="John Doe",
                org="University of Technology",
                program="Computer Science",
                enrolled_at=3,
                total_received=5_000_000,
                last_payout_at=12,
                payout_count=1,
            ),
            "wallet_8": Beneficiary(
                id="wallet_8", name="", org="Uni", program="Maths", enrolled_at=4, active=False
            ),
        },
        eligibility_records={
            "wallet_2": EligibilityRecord(score=350, credit_units=60, term=4, updated_at=7),
            "wallet_8": EligibilityRecord(),
        },
        attestors={"wallet_3", "wallet_4", "wallet_5"},
        verification_records={
            "wallet_2": {
                1: ["wallet_5", "wallet_3", "wallet_4"],
                2: ["wallet_4"],
            }
        },
        active=False,
        total_funds_created=2,
        total_beneficiaries=2,
        total_distributed=5_000_000,
    )


@pytest.fixture(params=["memory", "sqlite"])
def store(request: pytest.FixtureRequest, tmp_path: Path) -> StateStorePort:
    if request.param == "memory":
        return InMemoryStateStore()
    return SQLiteStateStore(str(tmp_path / "engine.db"))


class TestStateStoreContract:
    def test_fresh_store_is_empty(self, store: StateStorePort) -> None:
        assert store.load() == EngineState()

    def test_round_trip(self, store: StateStorePort) -> None:
        state = populated_state()

        store.save(state)

        assert store.load() == state

    def test_verification_order_preserved(self, store: StateStorePort) -> None:
        store.save(populated_state())

        loaded = store.load()

        assert loaded.verifications_for("wallet_2", 1) == ["wallet_5", "wallet_3", "wallet_4"]

    def test_loaded_copy_is_private(self, store: StateStorePort) -> None:
        store.save(populated_state())

        working = store.load()
        working.funds["wallet_1"].balance = 0
        working.attestors.clear()

        assert store.load() == populated_state()

    def test_save_replaces_previous_state(self, store: StateStorePort) -> None:
        store.save(populated_state())

        store.save(EngineState(total_funds_created=7))

        assert store.load() == EngineState(total_funds_created=7)


class TestSQLiteStateStore:
    def test_state_survives_reopen(self, tmp_path: Path) -> None:
        db_path = str(tmp_path / "engine.db")
        SQLiteStateStore(db_path).save(populated_state())

        assert SQLiteStateStore(db_path).load() == populated_state()

    def test_concurrent_writer_detected(self, tmp_path: Path) -> None:
        """A save based on an outdated load is refused, not silently applied."""
        db_path = str(tmp_path / "engine.db")
        first = SQLiteStateStore(db_path)
        second = SQLiteStateStore(db_path)
        first.load()
        second.load()

        first.save(populated_state())

        with pytest.raises(StaleStateError):
            second.save(EngineState(total_funds_created=99))
        assert second.load() == populated_state()

    def test_reload_clears_staleness(self, tmp_path: Path) -> None:
        db_path = str(tmp_path / "engine.db")
        first = SQLiteStateStore(db_path)
        second = SQLiteStateStore(db_path)
        first.save(populated_state())

        state = second.load()
        state.total_funds_created = 3
        second.save(state)

        assert first.load().total_funds_created == 3

    def test_consecutive_saves_from_one_store(self, tmp_path: Path) -> None:
        store = SQLiteStateStore(str(tmp_path / "engine.db"))

        store.save(EngineState(total_funds_created=1))
        store.save(EngineState(total_funds_created=2))

        assert store.load().total_funds_created == 2


class TestInMemoryStateStore:
    def test_initial_state_copied(self) -> None:
        initial = populated_state()
        store = InMemoryStateStore(initial)

        initial.total_distributed = 0

        assert store.load().total_distributed == 5_000_000
