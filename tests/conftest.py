"""
Pytest configuration and fixtures for bashsteps tests.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Dict, Generator

import pytest

from bashsteps.decision import reset_context
from bashsteps.hooks import ENV_PREFIX, reset_hooks

ROOT = Path(__file__).resolve().parents[1]

MANAGED_VARS = ("ORGCODEDIR", "LINKCODEDIR", "CODEDIR", "DATADIR", "BASHSTEPS_ENV_FILE", "BASHSTEPS_CHDIR")


# ============================================================================
# Process-wide state
# ============================================================================


@pytest.fixture(autouse=True)
def clean_state() -> Generator[None, None, None]:
    """Fresh context/hooks, no inherited bindings, environment and cwd restored afterwards."""
    saved_env = dict(os.environ)
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX) or key in MANAGED_VARS:
            del os.environ[key]
    reset_context()
    reset_hooks()
    cwd = os.getcwd()
    root_level = logging.getLogger().level

    yield

    os.chdir(cwd)
    os.environ.clear()
    os.environ.update(saved_env)
    # drop whatever setup_logging() installed; pytest's own handlers are subclasses
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(root_level)
    reset_context()
    reset_hooks()


@pytest.fixture
def environ() -> Dict[str, str]:
    """A private environment mapping so tests never touch os.environ."""
    return {}


# ============================================================================
# Child interpreter
# ============================================================================


@pytest.fixture
def child_env() -> Dict[str, str]:
    """Environment for `python -c` children that can import the package from the repo root."""
    env = {k: v for k, v in os.environ.items() if not k.startswith(ENV_PREFIX)}
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(ROOT), env.get("PYTHONPATH", "")]))
    return env


@pytest.fixture
def python() -> str:
    return sys.executable
