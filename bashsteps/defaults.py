"""
defaults.py — hook implementations bound when nobody up the chain bound their own

Typical use from a script (after bashsteps.load()):

    hooks.starting_step("Create data dir")
    run_cmd(["test", "-d", datadir])
    hooks.skip_step_if_already_done()
    run_cmd(["mkdir", "-p", datadir])
    hooks.prev_cmd_failed("could not create", datadir)

The skip hooks raise StepSkipped (exit 0) when the check succeeded; inside
runner.run_step that only ends the current step, outside it ends the process.
"""
import logging

from .decision import GROUP, STEP, Decision, current_context, decide
from .exits import ScriptFailed, StepSkipped

logger = logging.getLogger(__name__)


def starting_step(title=None):
    current_context().set_title(title)


def starting_group(title=None):
    current_context().set_title(title)


def _skip_if(vocabulary, status):
    ctx = current_context()
    title = ctx.title
    if decide(vocabulary, status, ctx) is Decision.SKIP:
        raise StepSkipped(vocabulary.noun, title)


def skip_step_if_already_done(status=None):
    _skip_if(STEP, status)


def skip_group_if_unnecessary(status=None):
    _skip_if(GROUP, status)


def reportfailed(*args):
    """Print the failure line to stderr and end the process with 255. Never returns."""
    ctx = current_context()
    detail = " ".join(str(a) for a in args)
    logger.debug("reportfailed called: %s", detail)
    print(f"Script failed...exiting. ({detail})", file=ctx.err)
    raise ScriptFailed(*args)


def prev_cmd_failed(*args, status=None):
    if current_context().status_of(status) != 0:
        reportfailed(*args)


# Older callers still use these names.
starting_dependents = starting_step
starting_checks = starting_step
skip_rest_if_already_done = skip_step_if_already_done
