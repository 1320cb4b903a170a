from pydantic import BaseModel, Field

# --- Identities ---

# Identities are opaque strings (account addresses, principals, user ids).
Identity = str

# --- Escrow ---


class FundSettings(BaseModel):
    min_score: int
    payout_amount: int
    period_length: int


class Fund(BaseModel):
    sponsor: Identity
    balance: int = 0
    total_distributed: int = 0
    active: bool = True


# --- Beneficiaries ---


class Beneficiary(BaseModel):
    id: Identity
    name: str
    org: str
    program: str
    enrolled_at: int
    active: bool = True
    total_received: int = 0
    last_payout_at: int | None = None
    payout_count: int = 0  # completed disbursement cycles

    @property
    def current_period(self) -> int:
        """
        Period key for attestations, starting at 1.

        Advances exactly when a disbursement commits and moves
        last_payout_at, so confirmations from a paid-out cycle never count
        towards the next one.
        """
        return self.payout_count + 1


class EligibilityRecord(BaseModel):
    score: int = 0
    credit_units: int = 0
    term: int = 0
    updated_at: int = 0


# --- Read models ---


class ContractStats(BaseModel):
    active: bool
    total_funds_created: int
    total_beneficiaries: int
    total_distributed: int
    owner: Identity


# --- Engine state ---


class EngineState(BaseModel):
    """
    Everything the engine persists.

    Six keyed stores plus four scalars. Components mutate a working copy;
    the engine hands the copy back to the state store only on success.
    """

    funds: dict[Identity, Fund] = Field(default_factory=dict)
    fund_settings: dict[Identity, FundSettings] = Field(default_factory=dict)
    beneficiaries: dict[Identity, Beneficiary] = Field(default_factory=dict)
    eligibility_records: dict[Identity, EligibilityRecord] = Field(default_factory=dict)
    attestors: set[Identity] = Field(default_factory=set)
    # beneficiary -> period -> attestors, in arrival order
    verification_records: dict[Identity, dict[int, list[Identity]]] = Field(
        default_factory=dict
    )

    active: bool = True
    total_funds_created: int = 0
    total_beneficiaries: int = 0
    total_distributed: int = 0

    def active_fund(self, sponsor: Identity) -> Fund | None:
        """Fund lookup that treats deactivated funds as absent."""
        fund = self.funds.get(sponsor)
        if fund is None or not fund.active:
            return None
        return fund

    def active_beneficiary(self, beneficiary_id: Identity) -> Beneficiary | None:
        """Beneficiary lookup that treats deactivated beneficiaries as absent."""
        beneficiary = self.beneficiaries.get(beneficiary_id)
        if beneficiary is None or not beneficiary.active:
            return None
        return beneficiary

    def verifications_for(self, beneficiary_id: Identity, period: int) -> list[Identity]:
        return self.verification_records.get(beneficiary_id, {}).get(period, [])
