from escrow_gate.rules.loader import DEFAULT_RULES_PATH, configure_logging, load_rules
from escrow_gate.rules.models import (
    EngineRules,
    LimitsRules,
    ObservabilityRules,
    QuorumRules,
    RangeRule,
    Rules,
)

__all__ = [
    "DEFAULT_RULES_PATH",
    "EngineRules",
    "LimitsRules",
    "ObservabilityRules",
    "QuorumRules",
    "RangeRule",
    "Rules",
    "configure_logging",
    "load_rules",
]
