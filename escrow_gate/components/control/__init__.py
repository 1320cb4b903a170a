"""
Control component.

Public API for the contract enable/disable toggle.
"""

from .component import disable, enable, run, run_set_active
from .models import ControlOutput, SetActiveInput

__all__ = [
    # Functions
    "disable",
    "enable",
    "run",
    "run_set_active",
    # Models
    "ControlOutput",
    "SetActiveInput",
]
