"""
config.py — environment-driven settings (optionally from a .env file)

  BASHSTEPS_ENV_FILE         — .env file to load (default: .env next to the script)
  BASHSTEPS_LOG_LEVEL        — DEBUG/INFO/WARNING/... [default: WARNING]
  BASHSTEPS_LOG_DIR          — write <script>.log there as well (optional)
  BASHSTEPS_NONWRITABLE_DIR  — cwd forced on load [default: /proc/self]
  BASHSTEPS_CHDIR            — set to "false" to keep the cwd on load [default: true]
  BASHSTEPS_HOOK_<NAME>      — inherited hook bindings (see hooks.py)

Values already present in the process environment always win over the file,
the same first-definition-wins rule the hooks follow.
"""
import logging
import os
from pathlib import Path
from typing import Mapping, MutableMapping, Optional

from dotenv import dotenv_values, load_dotenv

logger = logging.getLogger(__name__)

ENV_FILE_VAR = "BASHSTEPS_ENV_FILE"
LOG_LEVEL_VAR = "BASHSTEPS_LOG_LEVEL"
LOG_DIR_VAR = "BASHSTEPS_LOG_DIR"
NONWRITABLE_DIR_VAR = "BASHSTEPS_NONWRITABLE_DIR"
CHDIR_VAR = "BASHSTEPS_CHDIR"

DEFAULT_NONWRITABLE_DIR = "/proc/self"
DEFAULT_LOG_LEVEL = "WARNING"


def env_path(key: str, default: str | None = None) -> Optional[Path]:
    value = os.getenv(key, default if default is not None else "")
    return Path(value).expanduser().resolve() if value else None


def _bool_env(key: str, default: bool = False,
              environ: Mapping[str, str] | None = None) -> bool:
    v = (os.environ if environ is None else environ).get(key)
    if v is None:
        return default
    return str(v).strip().lower() in {"1", "true", "yes", "y", "on"}


def log_level(default: str = DEFAULT_LOG_LEVEL) -> int:
    name = (os.getenv(LOG_LEVEL_VAR) or default).strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def chdir_enabled(environ: Mapping[str, str] | None = None) -> bool:
    return _bool_env(CHDIR_VAR, True, environ)


def nonwritable_dir() -> str:
    return os.getenv(NONWRITABLE_DIR_VAR) or DEFAULT_NONWRITABLE_DIR


def load_env_if_present(env_file: str | os.PathLike | None = None,
                        script_dir: Path | None = None,
                        environ: MutableMapping[str, str] | None = None) -> Optional[Path]:
    """Load the first .env that exists: explicit arg, $BASHSTEPS_ENV_FILE, <script_dir>/.env."""
    env = os.environ if environ is None else environ
    candidates = []
    if env_file:
        candidates.append(Path(env_file).expanduser())
    if env.get(ENV_FILE_VAR):
        candidates.append(Path(env[ENV_FILE_VAR]).expanduser())
    if script_dir:
        candidates.append(script_dir / ".env")
    for path in candidates:
        if not path.is_file():
            continue
        if environ is None:
            load_dotenv(path, override=False)
        else:
            for key, value in dotenv_values(path).items():
                if value is not None and key not in environ:
                    environ[key] = value
        logger.debug("Loaded env file %s", path)
        return path
    return None
