"""
runner.py — run checks and step bodies, and keep a skip inside its step

A skip hook ends "the rest of this step" by raising a SystemExit with code 0.
run_step() is the scope boundary: it catches that exit so only the step it
was raised in is abandoned and the calling script carries on with the next
one. Any other exit (255 from reportfailed, or a nonzero sys.exit) passes
through untouched.

    run_step("Install packages",
             check="dpkg -s nginx >/dev/null 2>&1",
             body=["apt-get", "install", "-y", "nginx"])

    run_group("Web tier", lambda: Path(marker).exists(),
              lambda: run_step(...),
              lambda: run_step(...))
"""
import logging
import shlex
import subprocess
import sys
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Union

from .decision import Decision, StepContext, current_context
from .hooks import Hooks, current_hooks

logger = logging.getLogger(__name__)

Command = Union[str, Sequence[str]]
Check = Union[None, Command, Callable[[], Any]]  # callable: exit status, or truthy when done
Body = Union[None, Command, Callable[[], Any]]


@dataclass
class StepResult:
    title: str
    decision: Decision
    value: Any = None

    @property
    def skipped(self) -> bool:
        return self.decision is Decision.SKIP


def _describe(cmd: Command) -> str:
    return cmd if isinstance(cmd, str) else " ".join(shlex.quote(str(a)) for a in cmd)


def run_cmd(cmd: Command, context: Optional[StepContext] = None) -> int:
    """Run a command (a string goes through the shell); record and return its exit status."""
    ctx = context if context is not None else current_context()
    shell = isinstance(cmd, str)
    argv = cmd if shell else [str(a) for a in cmd]
    logger.debug("→ %s", _describe(cmd))
    # keep our own protocol lines ahead of whatever the child prints
    for stream in (ctx.out, ctx.err, sys.stdout, sys.stderr):
        stream.flush()
    try:
        rc = subprocess.run(argv, shell=shell).returncode
    except FileNotFoundError as e:
        logger.error("%s: %s", _describe(cmd), e)
        rc = 127
    except PermissionError as e:
        logger.error("%s: %s", _describe(cmd), e)
        rc = 126
    logger.debug("exit %s: %s", rc, _describe(cmd))
    return ctx.record(rc)


def check_status(check: Check, context: Optional[StepContext] = None) -> int:
    """
    Exit status of a check: 0 means the work is already done.
    No check at all counts as "not done". A callable may return an exit
    status (int, CompletedProcess) or any other value, read by truthiness.
    """
    ctx = context if context is not None else current_context()
    if check is None:
        return ctx.record(1)
    if not callable(check):
        return run_cmd(check, ctx)
    result = check()
    if isinstance(result, (int, subprocess.CompletedProcess)):
        return ctx.record(result)
    # anything else: a truthy answer means "already done"
    return ctx.record(0 if result else 1)


def run_step(title: str, check: Check = None, body: Body = None,
             hooks: Optional[Hooks] = None, group: bool = False) -> StepResult:
    hooks = hooks if hooks is not None else current_hooks()
    if group:
        starting, skip = hooks.starting_group, hooks.skip_group_if_unnecessary
    else:
        starting, skip = hooks.starting_step, hooks.skip_step_if_already_done

    ctx = current_context()
    starting(title)
    status = check_status(check, ctx)
    try:
        skip(status)
    except SystemExit as e:
        if e.code not in (0, None):
            raise
        logger.debug("Skipped %s: %s", "group" if group else "step", title)
        ctx.record(0)
        return StepResult(title, Decision.SKIP)

    if body is not None and not callable(body):
        value = run_cmd(body, ctx)
        # reads the status run_cmd just recorded
        hooks.prev_cmd_failed(title, f"exited with {value}")
        return StepResult(title, Decision.CONTINUE, value)

    value = body() if body is not None else None
    # a finished step leaves a success status behind, like a subshell exiting 0
    ctx.record(0)
    return StepResult(title, Decision.CONTINUE, value)


def run_group(title: str, check: Check, *steps: Callable[[], Any],
              hooks: Optional[Hooks] = None) -> StepResult:
    def _body() -> List[Any]:
        return [s() for s in steps]

    return run_step(title, check, _body, hooks=hooks, group=True)
