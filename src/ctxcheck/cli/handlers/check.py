"""
Check Command Handler.

Runs the configured context checks over files and directories and reports
the diagnostics, either as text lines or as a JSON array.
"""

import json
from pathlib import Path
from typing import List, Optional

from ctxcheck.config import RuntimeConfig
from ctxcheck.core.runner import CheckEngine
from ctxcheck.errors import ConfigError
from ctxcheck.utils.console import console, diagnostic_text, log_error, log_info, log_success


def handle_check(
  paths: List[Path],
  checks: Optional[List[str]] = None,
  json_mode: bool = False,
  strict_keys: Optional[bool] = None,
  jobs: Optional[int] = None,
  exclude: Optional[List[str]] = None,
) -> int:
  """
  Checks source files for malformed context arguments.

  Args:
      paths: Input source files or directories.
      checks: Checks to run (default: from config, else all).
      json_mode: If True, print a JSON array of diagnostics to stdout and suppress summaries.
      strict_keys: Report keys whose type cannot be inferred (overrides config).
      jobs: Number of files analyzed concurrently (overrides config).
      exclude: Additional glob patterns of files to skip.

  Returns:
      int: 0 if clean, 1 if diagnostics were reported, 2 on configuration or analysis errors.
  """
  missing = [p for p in paths if not p.exists()]
  if missing:
    for p in missing:
      log_error(f"Path not found: {p}")
    return 2

  try:
    config = RuntimeConfig.load(checks=checks, strict_unknown_keys=strict_keys, jobs=jobs, exclude=exclude)
    engine = CheckEngine(config)
  except ConfigError as e:
    log_error(str(e))
    return 2

  if not json_mode:
    if config.source:
      log_info(f"Using configuration from {config.source}")
    log_info(f"Running checks: {', '.join(api.name for api in engine.apis)}")

  result = engine.run(paths)

  if json_mode:
    print(json.dumps([d.model_dump(mode="json") for d in result.diagnostics], indent=2))
    return result.exit_code

  for diagnostic in result.diagnostics:
    console.print(diagnostic_text(diagnostic.position, diagnostic.check, diagnostic.message))

  n_files = len(result.files)
  n_diags = len(result.diagnostics)
  n_failed = sum(1 for f in result.files if not f.success)

  if n_failed:
    log_error(f"{n_failed} of {n_files} files could not be analyzed")
  if n_diags:
    console.print(f"[bold]Found {n_diags} issue(s) in {n_files} file(s).[/bold]")
  elif not n_failed:
    log_success(f"No issues found in {n_files} file(s).")

  return result.exit_code
