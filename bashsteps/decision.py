"""
decision.py — the skip/do state machine shared by steps and groups

    IDLE --starting_*(title)--> TITLED --decide(status)--> SKIPPING | DOING --> IDLE

The only input is the exit status of the check command that ran just before
the decision. Status 0 means "already done": the step is skipped. Anything
else means the body has to run. The title is consumed by every decision.

Console lines are part of the contract (operators grep for them):
  ** Skipping step: <title>
  <blank>
  ** DOING STEP: <title>
"""
import logging
import subprocess
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Optional, TextIO

logger = logging.getLogger(__name__)


class Decision(Enum):
    SKIP = "skip"
    CONTINUE = "continue"


@dataclass(frozen=True)
class Vocabulary:
    noun: str   # used in the skip line
    label: str  # used in the DOING line


STEP = Vocabulary("step", "STEP")
GROUP = Vocabulary("group", "GROUP")


@dataclass
class StepContext:
    """
    Per-process state read and written by the default hooks.

    title:        Current Title, empty until starting_step/starting_group
    last_status:  exit status of the last command run through runner.run_cmd
    stdout/err:   None means "whatever sys.stdout/sys.stderr is right now"
    """
    title: str = ""
    last_status: int = 0
    stdout: Optional[TextIO] = None
    stderr: Optional[TextIO] = None

    @property
    def out(self) -> TextIO:
        return self.stdout if self.stdout is not None else sys.stdout

    @property
    def err(self) -> TextIO:
        return self.stderr if self.stderr is not None else sys.stderr

    def set_title(self, title: Optional[str]) -> None:
        if title:
            self.title = str(title)

    def take_title(self) -> str:
        title, self.title = self.title, ""
        return title

    def record(self, status) -> int:
        self.last_status = exit_status(status)
        return self.last_status

    def status_of(self, status=None) -> int:
        return self.last_status if status is None else exit_status(status)


_CONTEXT = StepContext()


def current_context() -> StepContext:
    return _CONTEXT


def reset_context() -> StepContext:
    """Start over with a fresh process-wide context (used by tests and forked children)."""
    global _CONTEXT
    _CONTEXT = StepContext()
    return _CONTEXT


def exit_status(value) -> int:
    """Normalize what a check produced into a shell-style exit status."""
    if isinstance(value, bool):
        return 0 if value else 1
    if isinstance(value, int):
        return value
    if isinstance(value, subprocess.CompletedProcess):
        return value.returncode
    raise TypeError(f"cannot interpret {value!r} as an exit status")


def decide(vocabulary: Vocabulary, status=None, context: Optional[StepContext] = None) -> Decision:
    ctx = context if context is not None else current_context()
    code = ctx.status_of(status)
    title = ctx.take_title()
    logger.debug("%s decision: status=%s title=%r", vocabulary.noun, code, title)
    if code == 0:
        print(f"** Skipping {vocabulary.noun}: {title}", file=ctx.out)
        return Decision.SKIP
    print("", file=ctx.out)
    print(f"** DOING {vocabulary.label}: {title}", file=ctx.out)
    return Decision.CONTINUE
