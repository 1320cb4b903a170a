"""
Escrow component - per-sponsor fund ledger.

Invariants:
- A fund's balance never goes negative
- Balance moves only through a successful ledger transfer
- total_distributed is never touched here (withdrawal is a refund)
- A deactivated fund answers FundNotFound to funding and settings updates
- The escrow account never sponsors, funds or withdraws
"""

from __future__ import annotations

import logging

from escrow_gate.domain.entities import EngineState, Fund, FundSettings
from escrow_gate.domain.errors import EngineError
from escrow_gate.domain.policy import AccessControl
from escrow_gate.rules.models import Rules

from .models import (
    CreateFundInput,
    DeactivateFundInput,
    FundFundInput,
    FundOutput,
    UpdateSettingsInput,
    WithdrawFundsInput,
)
from .ports import LedgerPort

logger = logging.getLogger(__name__)


def validate_settings(
    rules: Rules, min_score: int, payout_amount: int, period_length: int
) -> EngineError | None:
    """Range checks shared by fund creation and settings updates."""
    if not rules.limits.score.contains(min_score):
        return EngineError.of("invalid_score", f"Minimum score {min_score} is out of range")
    if not rules.limits.amount.contains(payout_amount):
        return EngineError.of("invalid_amount", f"Payout amount {payout_amount} is out of range")
    if period_length <= 0:
        return EngineError.of(
            "invalid_amount", f"Period length must be positive, got {period_length}"
        )
    return None


def run_create_fund(
    inp: CreateFundInput, *, state: EngineState, policy: AccessControl
) -> FundOutput:
    if not state.active:
        return FundOutput(error=EngineError.of("contract_disabled"))

    if not policy.is_owner(inp.caller) or policy.is_escrow(inp.sponsor):
        return FundOutput(error=EngineError.of("unauthorized"))

    error = validate_settings(policy.rules, inp.min_score, inp.payout_amount, inp.period_length)
    if error:
        return FundOutput(error=error)

    if inp.sponsor in state.funds:
        return FundOutput(error=EngineError.of("fund_already_exists"))

    fund = Fund(sponsor=inp.sponsor)
    settings = FundSettings(
        min_score=inp.min_score,
        payout_amount=inp.payout_amount,
        period_length=inp.period_length,
    )
    state.funds[inp.sponsor] = fund
    state.fund_settings[inp.sponsor] = settings
    state.total_funds_created += 1

    logger.info("Fund created for sponsor %s (payout=%d)", inp.sponsor, inp.payout_amount)
    return FundOutput(fund=fund, settings=settings, success=True)


def run_fund_fund(
    inp: FundFundInput, *, state: EngineState, policy: AccessControl, ledger: LedgerPort
) -> FundOutput:
    if not state.active:
        return FundOutput(error=EngineError.of("contract_disabled"))

    if policy.is_escrow(inp.caller):
        return FundOutput(error=EngineError.of("unauthorized"))

    if not policy.rules.limits.amount.contains(inp.amount):
        return FundOutput(
            error=EngineError.of("invalid_amount", f"Amount {inp.amount} is out of range")
        )

    fund = state.active_fund(inp.sponsor)
    if fund is None:
        return FundOutput(error=EngineError.of("fund_not_found"))

    result = ledger.transfer(inp.amount, inp.caller, policy.rules.engine.escrow_account)
    if not result.ok:
        logger.warning("Funding of %s by %s failed: %s", inp.sponsor, inp.caller, result.reason)
        return FundOutput(error=EngineError.of("transfer_failed", result.reason))

    fund.balance += inp.amount

    logger.info("Fund %s credited %d by %s", inp.sponsor, inp.amount, inp.caller)
    return FundOutput(fund=fund, amount=inp.amount, success=True)


def run_update_settings(
    inp: UpdateSettingsInput, *, state: EngineState, policy: AccessControl
) -> FundOutput:
    if not state.active:
        return FundOutput(error=EngineError.of("contract_disabled"))

    if state.active_fund(inp.caller) is None:
        return FundOutput(error=EngineError.of("fund_not_found"))

    error = validate_settings(policy.rules, inp.min_score, inp.payout_amount, inp.period_length)
    if error:
        return FundOutput(error=error)

    settings = FundSettings(
        min_score=inp.min_score,
        payout_amount=inp.payout_amount,
        period_length=inp.period_length,
    )
    state.fund_settings[inp.caller] = settings

    logger.info("Settings updated for fund %s", inp.caller)
    return FundOutput(settings=settings, success=True)


def run_deactivate_fund(inp: DeactivateFundInput, *, state: EngineState) -> FundOutput:
    if not state.active:
        return FundOutput(error=EngineError.of("contract_disabled"))

    fund = state.active_fund(inp.caller)
    if fund is None:
        return FundOutput(error=EngineError.of("fund_not_found"))

    fund.active = False

    logger.info("Fund %s deactivated (balance %d retained)", inp.caller, fund.balance)
    return FundOutput(fund=fund, success=True)


def run_withdraw_funds(
    inp: WithdrawFundsInput, *, state: EngineState, policy: AccessControl, ledger: LedgerPort
) -> FundOutput:
    if not state.active:
        return FundOutput(error=EngineError.of("contract_disabled"))

    if policy.is_escrow(inp.caller):
        return FundOutput(error=EngineError.of("unauthorized"))

    # Deactivated funds can still be drained by their sponsor.
    fund = state.funds.get(inp.caller)
    if fund is None:
        return FundOutput(error=EngineError.of("fund_not_found"))

    if fund.balance <= 0:
        return FundOutput(error=EngineError.of("insufficient_funds", "Nothing to withdraw"))

    amount = fund.balance
    result = ledger.transfer(amount, policy.rules.engine.escrow_account, inp.caller)
    if not result.ok:
        logger.warning("Withdrawal for %s failed: %s", inp.caller, result.reason)
        return FundOutput(error=EngineError.of("transfer_failed", result.reason))

    fund.balance = 0

    logger.info("Fund %s withdrew %d", inp.caller, amount)
    return FundOutput(fund=fund, amount=amount, success=True)


def run(
    inp: CreateFundInput
    | FundFundInput
    | UpdateSettingsInput
    | DeactivateFundInput
    | WithdrawFundsInput,
    *,
    state: EngineState,
    policy: AccessControl,
    ledger: LedgerPort | None = None,
) -> FundOutput:
    if isinstance(inp, CreateFundInput):
        return run_create_fund(inp, state=state, policy=policy)

    elif isinstance(inp, FundFundInput):
        assert ledger
        return run_fund_fund(inp, state=state, policy=policy, ledger=ledger)

    elif isinstance(inp, UpdateSettingsInput):
        return run_update_settings(inp, state=state, policy=policy)

    elif isinstance(inp, DeactivateFundInput):
        return run_deactivate_fund(inp, state=state)

    elif isinstance(inp, WithdrawFundsInput):
        assert ledger
        return run_withdraw_funds(inp, state=state, policy=policy, ledger=ledger)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
