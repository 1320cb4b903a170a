from escrow_gate.domain.entities import EngineState, Identity
from escrow_gate.rules.models import Rules


class AccessControl:
    """
    Role predicates for engine callers.

    Two roles exist: a single owner fixed by configuration, and a dynamic
    attestor set held in engine state.
    """

    def __init__(self, rules: Rules):
        self.rules = rules

    @property
    def owner(self) -> Identity:
        return self.rules.engine.owner

    def is_owner(self, caller: Identity) -> bool:
        return caller == self.owner

    def is_attestor(self, state: EngineState, caller: Identity) -> bool:
        return caller in state.attestors

    def is_escrow(self, identity: Identity) -> bool:
        """The engine's own custody account can never act as a participant."""
        return identity == self.rules.engine.escrow_account
