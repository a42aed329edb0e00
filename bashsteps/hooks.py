"""
hooks.py — the hook registry and the define-if-absent injector

A hook bound by the caller, or inherited from an ancestor process, always
wins over the library default. Bindings travel to child processes as
environment variables holding an importable "module:qualname" path:

    BASHSTEPS_HOOK_STARTING_STEP=mypkg.steps:quiet_starting_step

install_defaults() fills only the empty slots and then exports every
binding, so a child that calls bashsteps.load() again ends up with exactly
the bindings its parent had.

Overrides are called the way the defaults are: starting_* with the title,
the skip hooks with the check's status, prev_cmd_failed with the failure
context only (the status is in current_context().last_status).
"""
import importlib
import logging
import os
from typing import Callable, Dict, Iterator, MutableMapping, Optional, Tuple

from . import defaults

logger = logging.getLogger(__name__)

ENV_PREFIX = "BASHSTEPS_HOOK_"

DEFAULT_HOOKS: Dict[str, Callable] = {
    "starting_step": defaults.starting_step,
    "skip_step_if_already_done": defaults.skip_step_if_already_done,
    "starting_group": defaults.starting_group,
    "skip_group_if_unnecessary": defaults.skip_group_if_unnecessary,
    "starting_dependents": defaults.starting_dependents,
    "starting_checks": defaults.starting_checks,
    "skip_rest_if_already_done": defaults.skip_rest_if_already_done,
    "prev_cmd_failed": defaults.prev_cmd_failed,
}
HOOK_NAMES: Tuple[str, ...] = tuple(DEFAULT_HOOKS)


class Hooks:
    """Bound hook callables, addressable as attributes (hooks.starting_step(...))."""

    def __init__(self, **bindings: Optional[Callable]):
        unknown = set(bindings) - set(HOOK_NAMES)
        if unknown:
            raise ValueError(f"unknown hook name(s): {', '.join(sorted(unknown))}")
        self._bound: Dict[str, Callable] = {k: v for k, v in bindings.items() if v is not None}

    def __getattr__(self, name: str):
        if name.startswith("_"):
            raise AttributeError(name)
        if name == "reportfailed":
            return defaults.reportfailed
        if name in HOOK_NAMES:
            try:
                return self._bound[name]
            except KeyError:
                raise AttributeError(f"hook {name!r} is not bound; call install_defaults() first") from None
        raise AttributeError(name)

    def __getitem__(self, name: str) -> Callable:
        return self._bound[name]

    def __contains__(self, name: str) -> bool:
        return name in self._bound

    def is_bound(self, name: str) -> bool:
        return name in self._bound

    def bind(self, name: str, fn: Callable) -> None:
        if name not in HOOK_NAMES:
            raise ValueError(f"unknown hook name: {name}")
        if not callable(fn):
            raise TypeError(f"hook {name!r} must be callable, got {fn!r}")
        self._bound[name] = fn

    def items(self) -> Iterator[Tuple[str, Callable]]:
        return iter(self._bound.items())


_HOOKS = Hooks()


def current_hooks() -> Hooks:
    return _HOOKS


def reset_hooks() -> Hooks:
    global _HOOKS
    _HOOKS = Hooks()
    return _HOOKS


def hook_env_key(name: str) -> str:
    return f"{ENV_PREFIX}{name.upper()}"


def callable_path(fn: Callable) -> Optional[str]:
    """Return "module:qualname" for fn, or None when a child process could not import it."""
    module = getattr(fn, "__module__", None)
    qualname = getattr(fn, "__qualname__", None)
    if not module or not qualname or module == "__main__" or "<" in qualname:
        return None
    return f"{module}:{qualname}"


def resolve_callable(path: str) -> Callable:
    module_name, _, attr = path.strip().partition(":")
    if not module_name or not attr:
        raise ValueError(f"expected 'module:qualname', got {path!r}")
    obj = importlib.import_module(module_name)
    for part in attr.split("."):
        obj = getattr(obj, part)
    if not callable(obj):
        raise TypeError(f"{path!r} is not callable")
    return obj


def _inherited(name: str, environ: MutableMapping[str, str]) -> Optional[Callable]:
    path = environ.get(hook_env_key(name))
    if not path:
        return None
    try:
        fn = resolve_callable(path)
    except (ImportError, AttributeError, ValueError, TypeError) as e:
        logger.warning("Ignoring inherited hook %s=%s: %s", hook_env_key(name), path, e)
        return None
    logger.debug("Inherited hook %s -> %s", name, path)
    return fn


def export_hook(name: str, fn: Callable, environ: MutableMapping[str, str]) -> bool:
    path = callable_path(fn)
    if path is None:
        logger.debug("Hook %s (%r) has no importable path; not propagated to children", name, fn)
        return False
    environ[hook_env_key(name)] = path
    return True


def install_defaults(hooks: Optional[Hooks] = None,
                     environ: Optional[MutableMapping[str, str]] = None) -> Hooks:
    """
    Make sure every hook name is bound without rebinding any that already are.

    Order: binding already on `hooks` > binding inherited via `environ` > default.
    Safe to call any number of times.
    """
    hooks = hooks if hooks is not None else current_hooks()
    env = os.environ if environ is None else environ
    for name in HOOK_NAMES:
        if not hooks.is_bound(name):
            hooks.bind(name, _inherited(name, env) or DEFAULT_HOOKS[name])
        export_hook(name, hooks[name], env)
    return hooks
