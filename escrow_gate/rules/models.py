from pydantic import BaseModel, ConfigDict, Field, model_validator


class RangeRule(BaseModel):
    min: int
    max: int

    @model_validator(mode="after")
    def _check_bounds(self) -> "RangeRule":
        if self.min > self.max:
            raise ValueError(f"range min {self.min} exceeds max {self.max}")
        return self

    def contains(self, value: int) -> bool:
        return self.min <= value <= self.max


class EngineRules(BaseModel):
    # Raw deploying identity; never a wrapped or self-referential one.
    owner: str = "deployer"
    escrow_account: str = "escrow"


class LimitsRules(BaseModel):
    score: RangeRule = Field(default_factory=lambda: RangeRule(min=250, max=400))
    amount: RangeRule = Field(
        default_factory=lambda: RangeRule(min=1_000_000, max=1_000_000_000)
    )


class QuorumRules(BaseModel):
    threshold: int = Field(default=3, ge=1)
    capacity: int = Field(default=5, ge=1)

    @model_validator(mode="after")
    def _capacity_covers_threshold(self) -> "QuorumRules":
        if self.capacity < self.threshold:
            raise ValueError(
                f"quorum capacity {self.capacity} is below threshold {self.threshold}"
            )
        return self


class ObservabilityRules(BaseModel):
    log_level: str = "INFO"


class Rules(BaseModel):
    model_config = ConfigDict(extra="forbid")

    engine: EngineRules = Field(default_factory=EngineRules)
    limits: LimitsRules = Field(default_factory=LimitsRules)
    quorum: QuorumRules = Field(default_factory=QuorumRules)
    observability: ObservabilityRules = Field(default_factory=ObservabilityRules)
