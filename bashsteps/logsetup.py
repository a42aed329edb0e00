import logging
import sys
from pathlib import Path
from typing import Optional

from . import config


def setup_logging(level: Optional[int] = None, console: bool = True,
                  log_dir: Optional[Path] = None, name: str = "bashsteps") -> Optional[Path]:
    """
    Same layout as the rest of the tooling: optional per-script log file plus a
    console handler. The console handler writes to stderr because stdout carries
    the "** Skipping"/"** DOING" lines that operators parse.
    """
    if level is None:
        level = config.log_level()
    if log_dir is None:
        log_dir = config.env_path(config.LOG_DIR_VAR)

    handlers: list[logging.Handler] = []
    log_file = None
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"{name}.log"
        handlers.append(logging.FileHandler(log_file, encoding="utf-8", mode="w"))
    if console:
        handlers.append(logging.StreamHandler(sys.stderr))
    if not handlers:
        handlers.append(logging.NullHandler())
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )
    if log_file:
        logging.info("Logging → %s", log_file)
    return log_file
