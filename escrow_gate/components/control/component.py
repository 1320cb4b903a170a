"""
Control component - contract state toggle.

disable/enable are owner-only and are the only mutating operations not
gated by the active flag.
"""

from __future__ import annotations

import logging

from escrow_gate.domain.entities import EngineState
from escrow_gate.domain.errors import EngineError
from escrow_gate.domain.policy import AccessControl

from .models import ControlOutput, SetActiveInput

logger = logging.getLogger(__name__)


def run_set_active(
    inp: SetActiveInput, *, state: EngineState, policy: AccessControl
) -> ControlOutput:
    if not policy.is_owner(inp.caller):
        return ControlOutput(error=EngineError.of("unauthorized"))

    state.active = inp.active
    logger.info("Contract %s by %s", "enabled" if inp.active else "disabled", inp.caller)
    return ControlOutput(active=state.active, success=True)


def disable(caller: str, *, state: EngineState, policy: AccessControl) -> ControlOutput:
    return run_set_active(SetActiveInput(caller=caller, active=False), state=state, policy=policy)


def enable(caller: str, *, state: EngineState, policy: AccessControl) -> ControlOutput:
    return run_set_active(SetActiveInput(caller=caller, active=True), state=state, policy=policy)


def run(inp: SetActiveInput, *, state: EngineState, policy: AccessControl) -> ControlOutput:
    if isinstance(inp, SetActiveInput):
        return run_set_active(inp, state=state, policy=policy)

    raise ValueError(f"Unknown input type: {type(inp)}")
