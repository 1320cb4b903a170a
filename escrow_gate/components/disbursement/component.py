"""
Disbursement component - eligibility check and atomic payout.

Preconditions are evaluated in a fixed order and the first failure wins:

1. contract active               -> contract_disabled
2. beneficiary exists and active -> beneficiary_not_found
3. fund exists and active        -> fund_not_found
4. cool-down elapsed             -> cooldown_not_elapsed
5. eligibility record exists     -> beneficiary_not_found
6. score >= fund minimum         -> invalid_score
7. quorum reached this period    -> insufficient_verifications
8. balance covers the payout     -> insufficient_funds

The payout commit (fund balance, fund total, beneficiary total, last payout
height, global total) happens only after the ledger transfer succeeds, and
all five updates happen together.

State machine per (beneficiary, fund):
Ineligible -> Eligible -> Disbursed -> Ineligible (cool-down restarts)
"""

from __future__ import annotations

import logging

from escrow_gate.domain.entities import EngineState
from escrow_gate.domain.errors import EngineError
from escrow_gate.rules.models import Rules

from .models import (
    CheckDisbursementInput,
    DisbursementCheckOutput,
    DisbursementOutput,
    RequestDisbursementInput,
)
from .ports import ClockPort, LedgerPort

logger = logging.getLogger(__name__)


def cooldown_elapsed(last_payout_at: int | None, height: int, period_length: int) -> bool:
    """A beneficiary that was never paid is always out of cool-down."""
    if last_payout_at is None:
        return True
    return height - last_payout_at >= period_length


def evaluate_preconditions(
    state: EngineState,
    rules: Rules,
    *,
    beneficiary_id: str,
    sponsor: str,
    height: int,
) -> EngineError | None:
    """Return the first failing precondition, or None when a payout may proceed."""
    if not state.active:
        return EngineError.of("contract_disabled")

    beneficiary = state.active_beneficiary(beneficiary_id)
    if beneficiary is None:
        return EngineError.of("beneficiary_not_found")

    fund = state.active_fund(sponsor)
    settings = state.fund_settings.get(sponsor)
    if fund is None or settings is None:
        return EngineError.of("fund_not_found")

    last_payout_at = beneficiary.last_payout_at
    if not cooldown_elapsed(last_payout_at, height, settings.period_length):
        assert last_payout_at is not None
        return EngineError.of(
            "cooldown_not_elapsed",
            f"Next payout available at height {last_payout_at + settings.period_length}",
        )

    record = state.eligibility_records.get(beneficiary_id)
    if record is None:
        return EngineError.of("beneficiary_not_found", "No eligibility record")

    if record.score < settings.min_score:
        return EngineError.of(
            "invalid_score", f"Score {record.score} is below the minimum {settings.min_score}"
        )

    confirmations = state.verifications_for(beneficiary_id, beneficiary.current_period)
    if len(confirmations) < rules.quorum.threshold:
        return EngineError.of(
            "insufficient_verifications",
            f"{len(confirmations)} of {rules.quorum.threshold} attestations "
            f"in period {beneficiary.current_period}",
        )

    if fund.balance < settings.payout_amount:
        return EngineError.of("insufficient_funds")

    return None


def run_check(
    inp: CheckDisbursementInput, *, state: EngineState, rules: Rules, clock: ClockPort
) -> DisbursementCheckOutput:
    blocker = evaluate_preconditions(
        state,
        rules,
        beneficiary_id=inp.beneficiary_id,
        sponsor=inp.sponsor,
        height=clock.height(),
    )
    return DisbursementCheckOutput(eligible=blocker is None, blocker=blocker)


def run_request_disbursement(
    inp: RequestDisbursementInput,
    *,
    state: EngineState,
    rules: Rules,
    ledger: LedgerPort,
    clock: ClockPort,
) -> DisbursementOutput:
    height = clock.height()
    error = evaluate_preconditions(
        state, rules, beneficiary_id=inp.caller, sponsor=inp.sponsor, height=height
    )
    if error:
        logger.debug(
            "Disbursement for %s from %s rejected: %s", inp.caller, inp.sponsor, error.kind
        )
        return DisbursementOutput(error=error)

    fund = state.funds[inp.sponsor]
    beneficiary = state.beneficiaries[inp.caller]
    amount = state.fund_settings[inp.sponsor].payout_amount

    result = ledger.transfer(amount, rules.engine.escrow_account, inp.caller)
    if not result.ok:
        logger.warning(
            "Disbursement transfer of %d to %s failed: %s", amount, inp.caller, result.reason
        )
        return DisbursementOutput(error=EngineError.of("transfer_failed", result.reason))

    fund.balance -= amount
    fund.total_distributed += amount
    beneficiary.total_received += amount
    beneficiary.last_payout_at = height
    beneficiary.payout_count += 1
    state.total_distributed += amount

    logger.info(
        "Disbursed %d from %s to %s at height %d", amount, inp.sponsor, inp.caller, height
    )
    return DisbursementOutput(amount=amount, beneficiary=beneficiary, fund=fund, success=True)


def run(
    inp: RequestDisbursementInput | CheckDisbursementInput,
    *,
    state: EngineState,
    rules: Rules,
    clock: ClockPort,
    ledger: LedgerPort | None = None,
) -> DisbursementOutput | DisbursementCheckOutput:
    if isinstance(inp, RequestDisbursementInput):
        assert ledger
        return run_request_disbursement(inp, state=state, rules=rules, ledger=ledger, clock=clock)

    elif isinstance(inp, CheckDisbursementInput):
        return run_check(inp, state=state, rules=rules, clock=clock)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
