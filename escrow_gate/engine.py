"""
EscrowEngine - single-writer facade over the engine components.

Every operation runs under one lock. Mutating operations load a private
working copy of the state, run the component against it and save the copy
only when the component reports success, so a rejected call or a failed
ledger transfer leaves the stores exactly as they were. Transfers go
through a LedgerJournal, so if the save itself raises, the value already
moved on the ledger is sent back before the error propagates.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from threading import Lock
from typing import Protocol, TypeVar

from escrow_gate.adapters.ledger_journal import LedgerJournal
from escrow_gate.adapters.sqlite.state_store import SQLiteStateStore
from escrow_gate.adapters.state_memory import InMemoryStateStore
from escrow_gate.components import control, disbursement, escrow, quorum, registry
from escrow_gate.core.ports.clock import ClockPort
from escrow_gate.core.ports.ledger import LedgerPort
from escrow_gate.core.ports.state import StateStorePort
from escrow_gate.domain.entities import (
    Beneficiary,
    ContractStats,
    EligibilityRecord,
    EngineState,
    Fund,
    FundSettings,
)
from escrow_gate.domain.errors import EngineError
from escrow_gate.domain.policy import AccessControl
from escrow_gate.rules.loader import configure_logging, load_rules
from escrow_gate.rules.models import Rules

logger = logging.getLogger(__name__)


class _Outcome(Protocol):
    @property
    def success(self) -> bool: ...


OutputT = TypeVar("OutputT", bound=_Outcome)


class EscrowEngine:
    def __init__(
        self,
        ledger: LedgerPort,
        clock: ClockPort,
        store: StateStorePort | None = None,
        rules: Rules | None = None,
    ):
        self.rules = rules if rules is not None else Rules()
        self.policy = AccessControl(self.rules)
        self.ledger = ledger
        self.clock = clock
        self.store = store if store is not None else InMemoryStateStore()
        self._lock = Lock()

    @classmethod
    def create(
        cls,
        *,
        ledger: LedgerPort,
        clock: ClockPort,
        rules_path: Path | None = None,
        db_path: str | None = None,
    ) -> EscrowEngine:
        """Build an engine from a rules file and an optional SQLite database."""
        rules = load_rules(rules_path) if rules_path is not None else Rules()
        configure_logging(rules)
        store: StateStorePort = (
            SQLiteStateStore(db_path) if db_path is not None else InMemoryStateStore()
        )
        logger.info(
            "Engine created (owner=%s, store=%s)",
            rules.engine.owner,
            db_path or "memory",
        )
        return cls(ledger=ledger, clock=clock, store=store, rules=rules)

    # --- Transaction helpers ---

    def _mutate(self, operation: Callable[[EngineState, LedgerPort], OutputT]) -> OutputT:
        with self._lock, LedgerJournal(self.ledger) as journal:
            state = self.store.load()
            out = operation(state, journal)
            if out.success:
                self.store.save(state)
            return out

    def _snapshot(self) -> EngineState:
        with self._lock:
            return self.store.load()

    # --- Contract state ---

    def disable(self, caller: str) -> control.ControlOutput:
        return self._mutate(lambda s, _: control.disable(caller, state=s, policy=self.policy))

    def enable(self, caller: str) -> control.ControlOutput:
        return self._mutate(lambda s, _: control.enable(caller, state=s, policy=self.policy))

    # --- Escrow ---

    def create_fund(
        self,
        caller: str,
        sponsor: str,
        min_score: int,
        payout_amount: int,
        period_length: int,
    ) -> escrow.FundOutput:
        inp = escrow.CreateFundInput(
            caller=caller,
            sponsor=sponsor,
            min_score=min_score,
            payout_amount=payout_amount,
            period_length=period_length,
        )
        return self._mutate(lambda s, _: escrow.run_create_fund(inp, state=s, policy=self.policy))

    def fund_fund(self, caller: str, sponsor: str, amount: int) -> escrow.FundOutput:
        inp = escrow.FundFundInput(caller=caller, sponsor=sponsor, amount=amount)
        return self._mutate(
            lambda s, ledger: escrow.run_fund_fund(inp, state=s, policy=self.policy, ledger=ledger)
        )

    def update_settings(
        self, caller: str, min_score: int, payout_amount: int, period_length: int
    ) -> escrow.FundOutput:
        inp = escrow.UpdateSettingsInput(
            caller=caller,
            min_score=min_score,
            payout_amount=payout_amount,
            period_length=period_length,
        )
        return self._mutate(
            lambda s, _: escrow.run_update_settings(inp, state=s, policy=self.policy)
        )

    def deactivate_fund(self, caller: str) -> escrow.FundOutput:
        inp = escrow.DeactivateFundInput(caller=caller)
        return self._mutate(lambda s, _: escrow.run_deactivate_fund(inp, state=s))

    def withdraw_funds(self, caller: str) -> escrow.FundOutput:
        inp = escrow.WithdrawFundsInput(caller=caller)
        return self._mutate(
            lambda s, ledger: escrow.run_withdraw_funds(
                inp, state=s, policy=self.policy, ledger=ledger
            )
        )

    # --- Registry ---

    def register_beneficiary(
        self, caller: str, beneficiary_id: str, name: str, org: str, program: str
    ) -> registry.BeneficiaryOutput:
        inp = registry.RegisterBeneficiaryInput(
            caller=caller, beneficiary_id=beneficiary_id, name=name, org=org, program=program
        )
        return self._mutate(
            lambda s, _: registry.run_register(inp, state=s, policy=self.policy, clock=self.clock)
        )

    def update_eligibility(
        self, caller: str, beneficiary_id: str, score: int, credit_units: int, term: int
    ) -> registry.BeneficiaryOutput:
        inp = registry.UpdateEligibilityInput(
            caller=caller,
            beneficiary_id=beneficiary_id,
            score=score,
            credit_units=credit_units,
            term=term,
        )
        return self._mutate(
            lambda s, _: registry.run_update_eligibility(
                inp, state=s, policy=self.policy, clock=self.clock
            )
        )

    def deactivate_beneficiary(
        self, caller: str, beneficiary_id: str
    ) -> registry.BeneficiaryOutput:
        inp = registry.DeactivateBeneficiaryInput(caller=caller, beneficiary_id=beneficiary_id)
        return self._mutate(lambda s, _: registry.run_deactivate(inp, state=s, policy=self.policy))

    # --- Quorum ---

    def add_attestor(self, caller: str, attestor: str) -> quorum.AttestorOutput:
        inp = quorum.AddAttestorInput(caller=caller, attestor=attestor)
        return self._mutate(lambda s, _: quorum.run_add_attestor(inp, state=s, policy=self.policy))

    def remove_attestor(self, caller: str, attestor: str) -> quorum.AttestorOutput:
        inp = quorum.RemoveAttestorInput(caller=caller, attestor=attestor)
        return self._mutate(
            lambda s, _: quorum.run_remove_attestor(inp, state=s, policy=self.policy)
        )

    def record_attestation(self, caller: str, beneficiary_id: str) -> quorum.AttestationOutput:
        inp = quorum.RecordAttestationInput(caller=caller, beneficiary_id=beneficiary_id)
        return self._mutate(
            lambda s, _: quorum.run_record_attestation(inp, state=s, policy=self.policy)
        )

    # --- Disbursement ---

    def request_disbursement(
        self, caller: str, sponsor: str
    ) -> disbursement.DisbursementOutput:
        inp = disbursement.RequestDisbursementInput(caller=caller, sponsor=sponsor)
        return self._mutate(
            lambda s, ledger: disbursement.run_request_disbursement(
                inp, state=s, rules=self.rules, ledger=ledger, clock=self.clock
            )
        )

    def check_disbursement(self, beneficiary_id: str, sponsor: str) -> EngineError | None:
        """First precondition that would block a payout right now, or None."""
        inp = disbursement.CheckDisbursementInput(beneficiary_id=beneficiary_id, sponsor=sponsor)
        with self._lock:
            state = self.store.load()
            out = disbursement.run_check(inp, state=state, rules=self.rules, clock=self.clock)
        return out.blocker

    def can_request_disbursement(self, beneficiary_id: str, sponsor: str) -> bool:
        return self.check_disbursement(beneficiary_id, sponsor) is None

    # --- Read-only queries ---

    def get_stats(self) -> ContractStats:
        state = self._snapshot()
        return ContractStats(
            active=state.active,
            total_funds_created=state.total_funds_created,
            total_beneficiaries=state.total_beneficiaries,
            total_distributed=state.total_distributed,
            owner=self.policy.owner,
        )

    def get_fund(self, sponsor: str) -> Fund | None:
        return self._snapshot().funds.get(sponsor)

    def get_settings(self, sponsor: str) -> FundSettings | None:
        return self._snapshot().fund_settings.get(sponsor)

    def get_beneficiary(self, beneficiary_id: str) -> Beneficiary | None:
        return self._snapshot().beneficiaries.get(beneficiary_id)

    def get_eligibility(self, beneficiary_id: str) -> EligibilityRecord | None:
        return self._snapshot().eligibility_records.get(beneficiary_id)

    def get_verifications(self, beneficiary_id: str, period: int) -> list[str]:
        return list(self._snapshot().verifications_for(beneficiary_id, period))

    def get_current_period(self, beneficiary_id: str) -> int | None:
        beneficiary = self._snapshot().beneficiaries.get(beneficiary_id)
        return beneficiary.current_period if beneficiary else None

    def is_attestor(self, identity: str) -> bool:
        return self.policy.is_attestor(self._snapshot(), identity)

    def is_owner(self, identity: str) -> bool:
        return self.policy.is_owner(identity)
