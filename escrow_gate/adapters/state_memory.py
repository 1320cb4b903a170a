from escrow_gate.domain.entities import EngineState


class InMemoryStateStore:
    """
    StateStorePort holding one EngineState in memory.

    Hands out deep copies so an uncommitted working copy can never leak
    into the stored state.
    """

    def __init__(self, initial: EngineState | None = None):
        self._state = initial.model_copy(deep=True) if initial else EngineState()

    def load(self) -> EngineState:
        return self._state.model_copy(deep=True)

    def save(self, state: EngineState) -> None:
        self._state = state.model_copy(deep=True)
