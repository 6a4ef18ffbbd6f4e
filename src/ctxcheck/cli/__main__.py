"""
Main Entry Point for the ctxcheck CLI.

This module handles argument parsing and dispatches to specific command
handlers defined in `ctxcheck.cli.commands`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from ctxcheck import __version__
from ctxcheck.cli import commands
from ctxcheck.utils.console import set_verbosity


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 clean, 1 issues found, 2 errors).
  """
  parser = argparse.ArgumentParser(description="ctxcheck: key/value context checker for structured logging and errors")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
  parser.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: CHECK ---
  cmd_check = subparsers.add_parser("check", help="Check source files for malformed context arguments")
  cmd_check.add_argument("paths", type=Path, nargs="+", help="Input source files or directories")
  cmd_check.add_argument(
    "--checks",
    nargs="+",
    default=None,
    help="Checks to run (default: from pyproject.toml, else all registered checks)",
  )
  cmd_check.add_argument("--json", action="store_true", help="Print diagnostics as a JSON array")
  cmd_check.add_argument(
    "--strict-keys",
    action="store_true",
    default=None,
    help="Report context keys whose type cannot be inferred (Overrides config)",
  )
  cmd_check.add_argument("--jobs", "-j", type=int, default=None, help="Number of files analyzed concurrently")
  cmd_check.add_argument("--exclude", nargs="*", default=None, help="Glob patterns of files to skip")

  # --- Command: APIS ---
  subparsers.add_parser("apis", help="List watched APIs and their entry rules")

  args = parser.parse_args(argv)
  set_verbosity(verbose=args.verbose, quiet=args.quiet)

  if args.command == "check":
    return commands.handle_check(args.paths, args.checks, args.json, args.strict_keys, args.jobs, args.exclude)

  elif args.command == "apis":
    return commands.handle_apis()

  return 0


if __name__ == "__main__":
  sys.exit(main())
