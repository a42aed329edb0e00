"""
bashsteps — conventions for idempotent, resumable step scripts.

Each step is preceded by a read-only check; if the check says the work is
already there the step is skipped, otherwise it runs. Re-running a script
after a failure therefore picks up where it stopped.
"""
from .decision import Decision, StepContext, current_context, decide, reset_context
from .defaults import (
    prev_cmd_failed,
    reportfailed,
    skip_group_if_unnecessary,
    skip_step_if_already_done,
    starting_group,
    starting_step,
)
from .environment import DATADIR_SENTINEL, EnvironmentContext, datadir_is_configured, setup_environment
from .exits import ScriptFailed, StepSkipped
from .hooks import HOOK_NAMES, Hooks, current_hooks, install_defaults, reset_hooks
from .loader import Runtime, load
from .runner import StepResult, check_status, run_cmd, run_group, run_step

__all__ = [
    "DATADIR_SENTINEL",
    "Decision",
    "EnvironmentContext",
    "HOOK_NAMES",
    "Hooks",
    "Runtime",
    "ScriptFailed",
    "StepContext",
    "StepResult",
    "StepSkipped",
    "check_status",
    "current_context",
    "current_hooks",
    "datadir_is_configured",
    "decide",
    "install_defaults",
    "load",
    "prev_cmd_failed",
    "reportfailed",
    "reset_context",
    "reset_hooks",
    "run_cmd",
    "run_group",
    "run_step",
    "setup_environment",
    "skip_group_if_unnecessary",
    "skip_step_if_already_done",
    "starting_group",
    "starting_step",
]
__version__ = "0.1.0"
