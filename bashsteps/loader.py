"""
loader.py — what a script does once, right at the top

    import bashsteps
    rt = bashsteps.load(__file__)
    rt.hooks.starting_step("Fetch sources")
    ...

load() runs the .env file, the hook injector and the directory setup in that
order. It is not triggered by importing the package; calling it again (for
instance in a child process) keeps every binding that already exists.
"""
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import MutableMapping, Optional

from . import config
from .environment import EnvironmentContext, setup_environment
from .hooks import Hooks, install_defaults

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Runtime:
    hooks: Hooks
    environment: EnvironmentContext


def load(script_path: Optional[str] = None,
         hooks: Optional[Hooks] = None,
         environ: Optional[MutableMapping[str, str]] = None,
         chdir: Optional[bool] = None,
         env_file: Optional[str] = None) -> Runtime:
    path = script_path if script_path is not None else (sys.argv[0] if sys.argv else "")
    script_dir = Path(os.path.realpath(path)).parent if path else None
    config.load_env_if_present(env_file, script_dir, environ)
    if chdir is None:
        chdir = config.chdir_enabled(environ)

    hooks = install_defaults(hooks, environ)
    environment = setup_environment(path, environ, chdir=chdir)
    logger.debug("bashsteps loaded for %s", path)
    return Runtime(hooks=hooks, environment=environment)
