"""
environment.py — code/data directory variables shared with every child process

On load:
  ORGCODEDIR   directory of the script after following symlinks to the real file
  LINKCODEDIR  directory of the path the script was invoked by (link not followed)
  CODEDIR      legacy name for LINKCODEDIR
  DATADIR      passed through, or DATADIR_SENTINEL when unset/empty

and the cwd is moved somewhere nothing can be written, so step code has to
address files through these absolute paths instead of relative ones.
"""
import logging
import os
import sys
from dataclasses import dataclass
from typing import MutableMapping, Optional

from . import config
from .defaults import reportfailed

logger = logging.getLogger(__name__)

DATADIR_SENTINEL = "DATADIR-should-be-set-by-main-script"


@dataclass(frozen=True)
class EnvironmentContext:
    orgcodedir: str
    linkcodedir: str
    datadir: str

    @property
    def codedir(self) -> str:
        return self.linkcodedir

    @property
    def datadir_configured(self) -> bool:
        return datadir_is_configured(self.datadir)

    def as_exports(self) -> dict:
        return {
            "ORGCODEDIR": self.orgcodedir,
            "LINKCODEDIR": self.linkcodedir,
            "CODEDIR": self.linkcodedir,
            "DATADIR": self.datadir,
        }


def datadir_is_configured(value: Optional[str]) -> bool:
    """The check downstream code is expected to make: only an absolute path counts."""
    return bool(value) and os.path.isabs(value)


def resolve_code_dirs(script_path: str) -> tuple[str, str]:
    """Return (orgcodedir, linkcodedir) for script_path. Raises OSError when it can't."""
    if not script_path:
        raise FileNotFoundError("no script path to resolve")
    link_path = os.path.abspath(script_path)
    if not os.path.lexists(link_path):
        raise FileNotFoundError(f"script path does not exist: {script_path}")
    real_path = os.path.realpath(link_path)
    if not os.path.exists(real_path):
        raise FileNotFoundError(f"script path is a dangling link: {script_path} -> {real_path}")
    # like `cd "$(dirname "$0")" && pwd -P`: the directory is resolved, the file is not
    linkcodedir = os.path.realpath(os.path.dirname(link_path))
    orgcodedir = os.path.dirname(real_path)
    return orgcodedir, linkcodedir


def enter_nonwritable_dir(target: Optional[str] = None) -> Optional[str]:
    target = target or config.nonwritable_dir()
    try:
        os.chdir(target)
    except OSError as e:
        logger.warning("Could not move cwd to %s (%s); relative paths stay usable", target, e)
        return None
    logger.debug("cwd -> %s", target)
    return target


def setup_environment(script_path: Optional[str] = None,
                      environ: Optional[MutableMapping[str, str]] = None,
                      chdir: bool = True,
                      nonwritable_dir: Optional[str] = None) -> EnvironmentContext:
    env = os.environ if environ is None else environ
    path = script_path if script_path is not None else (sys.argv[0] if sys.argv else "")
    try:
        orgcodedir, linkcodedir = resolve_code_dirs(path)
    except OSError as e:
        reportfailed("could not resolve code directories:", e)

    datadir = env.get("DATADIR") or DATADIR_SENTINEL
    ctx = EnvironmentContext(orgcodedir=orgcodedir, linkcodedir=linkcodedir, datadir=datadir)
    env.update(ctx.as_exports())
    logger.debug("ORGCODEDIR=%s LINKCODEDIR=%s DATADIR=%s", orgcodedir, linkcodedir, datadir)
    if not ctx.datadir_configured:
        logger.info("DATADIR is not an absolute path (%s)", datadir)

    if chdir:
        enter_nonwritable_dir(nonwritable_dir)
    return ctx
