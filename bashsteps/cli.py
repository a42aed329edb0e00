#!/usr/bin/env python3
"""
cli.py — the same conventions for plain shell scripts

  eval "$(bashsteps env "$0")"          # ORGCODEDIR, LINKCODEDIR, CODEDIR, DATADIR
  bashsteps step --title "Make dirs" --check 'test -d "$DATADIR/x"' -- mkdir -p "$DATADIR/x"
  bashsteps step --group --title "Web tier" --check 'test -f /etc/nginx/ok' -- ./web-tier.sh
  some_command || bashsteps reportfailed "some_command"

Exit codes:
  0   = step done or skipped
  255 = step body failed / reportfailed
  2   = usage error
"""
import argparse
import logging
import shlex
import sys
from pathlib import Path

from .defaults import reportfailed
from .hooks import callable_path, hook_env_key, install_defaults
from .loader import load
from .logsetup import setup_logging
from .runner import run_step


def _export_lines(runtime) -> list[str]:
    lines = [f"export {k}={shlex.quote(v)}" for k, v in runtime.environment.as_exports().items()]
    for name, fn in runtime.hooks.items():
        path = callable_path(fn)
        if path:
            lines.append(f"export {hook_env_key(name)}={shlex.quote(path)}")
    return lines


def _cmd_env(args) -> int:
    runtime = load(args.script, chdir=False, env_file=args.env_file)
    for line in _export_lines(runtime):
        print(line)
    return 0


def _cmd_step(args) -> int:
    body = list(args.body)
    if body and body[0] == "--":
        body = body[1:]
    hooks = install_defaults()
    result = run_step(args.title, check=args.check, body=body or None, hooks=hooks, group=args.group)
    logging.debug("%s: %s", result.title, result.decision.value)
    return 0


def _cmd_reportfailed(args) -> int:
    reportfailed(*args.args)
    return 255  # not reached


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(prog="bashsteps",
                                 description="Idempotent, resumable step helpers for shell scripts")
    ap.add_argument("--log-level", help="DEBUG/INFO/WARNING/ERROR (env BASHSTEPS_LOG_LEVEL otherwise)")
    ap.add_argument("--log-dir", help="Also write bashsteps.log here (env BASHSTEPS_LOG_DIR otherwise)")
    ap.add_argument("--env-file", help=".env file to load (env BASHSTEPS_ENV_FILE otherwise)")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_env = sub.add_parser("env", help="Print export lines for the code/data directory variables")
    p_env.add_argument("script", help="Path the calling script was invoked by (pass \"$0\")")
    p_env.set_defaults(func=_cmd_env)

    p_step = sub.add_parser("step", help="Run one step (or group) unless its check says it is done")
    p_step.add_argument("--title", default="", help="Title printed in the Skipping/DOING line")
    p_step.add_argument("--group", action="store_true", help="Use group vocabulary")
    p_step.add_argument("--check", help="Shell command; exit status 0 means already done")
    p_step.add_argument("body", nargs=argparse.REMAINDER, help="-- command to run when not done")
    p_step.set_defaults(func=_cmd_step)

    p_fail = sub.add_parser("reportfailed", help="Print the failure line and exit 255")
    p_fail.add_argument("args", nargs="*")
    p_fail.set_defaults(func=_cmd_reportfailed)

    args = ap.parse_args(argv)

    level = None
    if args.log_level:
        level = logging.getLevelName(args.log_level.upper())
        if not isinstance(level, int):
            ap.error(f"unknown log level: {args.log_level}")
    setup_logging(level=level, log_dir=Path(args.log_dir).expanduser() if args.log_dir else None)

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
