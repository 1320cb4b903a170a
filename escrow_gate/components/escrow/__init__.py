"""
Escrow component.

Public API for per-sponsor escrow funds.
"""

from .component import (
    run,
    run_create_fund,
    run_deactivate_fund,
    run_fund_fund,
    run_update_settings,
    run_withdraw_funds,
    validate_settings,
)
from .models import (
    CreateFundInput,
    DeactivateFundInput,
    FundFundInput,
    FundOutput,
    UpdateSettingsInput,
    WithdrawFundsInput,
)
from .ports import LedgerPort

__all__ = [
    # Functions
    "run",
    "run_create_fund",
    "run_deactivate_fund",
    "run_fund_fund",
    "run_update_settings",
    "run_withdraw_funds",
    "validate_settings",
    # Models
    "CreateFundInput",
    "DeactivateFundInput",
    "FundFundInput",
    "FundOutput",
    "UpdateSettingsInput",
    "WithdrawFundsInput",
    # Ports
    "LedgerPort",
]
