"""
Error taxonomy for engine operations.

Failures are returned as `EngineError` values on operation outputs;
nothing in the domain raises for a rejected call. Numeric codes are
stable so external callers can match on them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ErrorKind = Literal[
    "unauthorized",
    "insufficient_funds",
    "invalid_amount",
    "beneficiary_not_found",
    "fund_not_found",
    "invalid_score",
    "cooldown_not_elapsed",
    "insufficient_verifications",
    "already_verified",
    "contract_disabled",
    "beneficiary_already_exists",
    "verification_list_full",
    "transfer_failed",
    "fund_already_exists",
]

ERROR_CODES: dict[ErrorKind, int] = {
    "unauthorized": 1001,
    "insufficient_funds": 1002,
    "invalid_amount": 1003,
    "beneficiary_not_found": 1004,
    "fund_not_found": 1005,
    "invalid_score": 1006,
    "cooldown_not_elapsed": 1007,
    "insufficient_verifications": 1008,
    "already_verified": 1009,
    "contract_disabled": 1010,
    "beneficiary_already_exists": 1011,
    "verification_list_full": 1012,
    "transfer_failed": 1013,
    "fund_already_exists": 1014,
}

_DEFAULT_MESSAGES: dict[ErrorKind, str] = {
    "unauthorized": "Caller is not allowed to perform this operation",
    "insufficient_funds": "Fund balance is too low",
    "invalid_amount": "Amount or period is out of range",
    "beneficiary_not_found": "Beneficiary not found",
    "fund_not_found": "Fund not found",
    "invalid_score": "Score is out of range or below the fund minimum",
    "cooldown_not_elapsed": "Cool-down since the last payout has not elapsed",
    "insufficient_verifications": "Not enough attestations for the current period",
    "already_verified": "Attestor already confirmed this period",
    "contract_disabled": "Contract is disabled",
    "beneficiary_already_exists": "Beneficiary already registered",
    "verification_list_full": "Verification list for this period is full",
    "transfer_failed": "Ledger transfer failed",
    "fund_already_exists": "Sponsor already owns a fund",
}


@dataclass(frozen=True)
class EngineError:
    """A rejected operation."""

    kind: ErrorKind
    code: int
    message: str

    @classmethod
    def of(cls, kind: ErrorKind, message: str | None = None) -> EngineError:
        return cls(
            kind=kind,
            code=ERROR_CODES[kind],
            message=message or _DEFAULT_MESSAGES[kind],
        )
