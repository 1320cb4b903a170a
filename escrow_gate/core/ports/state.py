from typing import Protocol

from escrow_gate.domain.entities import EngineState


class StateStorePort(Protocol):
    """
    Backing store for the engine's keyed stores and scalars.

    `load` must return a private copy: callers mutate it freely and the
    store only changes when that copy is passed to `save`.
    """

    def load(self) -> EngineState:
        ...

    def save(self, state: EngineState) -> None:
        ...
