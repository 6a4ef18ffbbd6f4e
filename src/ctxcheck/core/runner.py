"""
File-Level Driver.

Discovers source files, parses them and runs the configured checks, one file
at a time. Each file is analyzed independently; with ``jobs > 1`` files are
distributed over a thread pool and results are re-ordered by path, so output
does not depend on scheduling.

Internal failures (unparsable files, rendering faults, unreadable files) are
recorded on the file's result and logged; they never abort the whole run
and are never silently dropped.
"""

import fnmatch
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable, List, Sequence

import libcst as cst
from pydantic import BaseModel, Field

from ctxcheck.apis import WatchedAPI
from ctxcheck.config import RuntimeConfig
from ctxcheck.core.diagnostics import Diagnostic
from ctxcheck.core.engine import analyze_module
from ctxcheck.errors import CtxCheckError
from ctxcheck.utils.console import log_error

logger = logging.getLogger(__name__)


class FileResult(BaseModel):
  """
  Outcome of checking one file.
  """

  path: str = Field(..., description="Path of the checked file.")
  diagnostics: List[Diagnostic] = Field(default_factory=list, description="Violations, ordered by position.")
  errors: List[str] = Field(default_factory=list, description="Internal failures that aborted the file.")

  @property
  def success(self) -> bool:
    """True if the file was fully analyzed."""
    return not self.errors


class RunResult(BaseModel):
  """
  Aggregated outcome of a run over many files.
  """

  files: List[FileResult] = Field(default_factory=list, description="Per-file results, ordered by path.")

  @property
  def diagnostics(self) -> List[Diagnostic]:
    """All diagnostics, ordered by path then position."""
    return [d for f in self.files for d in f.diagnostics]

  @property
  def has_errors(self) -> bool:
    """True if any file failed to be analyzed."""
    return any(not f.success for f in self.files)

  @property
  def exit_code(self) -> int:
    """
    Process exit status for the run.

    Returns:
        int: 2 on internal errors, 1 if violations were found, 0 otherwise.
    """
    if self.has_errors:
      return 2
    return 1 if self.diagnostics else 0


def discover_files(paths: Iterable[Path], exclude: Sequence[str] = ()) -> List[Path]:
  """
  Expands files and directories into the sorted list of Python files to check.

  Args:
      paths: Files or directories. Directories are searched recursively.
      exclude: Glob patterns matched against paths relative to the directory
          being searched (and against the plain path for explicit files).

  Returns:
      List[Path]: Unique files, sorted.
  """
  found = set()
  for root in paths:
    if root.is_file():
      candidates = [(root, root)]
    else:
      candidates = [(f, f.relative_to(root)) for f in root.rglob("*.py")]
    for f, rel in candidates:
      if any(fnmatch.fnmatch(rel.as_posix(), pattern) for pattern in exclude):
        continue
      found.add(f)
  return sorted(found)


class CheckEngine:
  """
  Runs the configured checks over files on disk.
  """

  def __init__(self, config: RuntimeConfig):
    """
    Initializes the engine.

    Args:
        config: Resolved runtime configuration.

    Raises:
        ConfigError: If the configured checks cannot be resolved.
    """
    self.config = config
    self.apis: List[WatchedAPI] = config.watched_apis()

  def run_source(self, code: str, path: str = "<string>") -> FileResult:
    """
    Checks in-memory source code.

    Args:
        code: Python source.
        path: Name used in diagnostics.

    Returns:
        FileResult: Diagnostics, or the error that aborted analysis.
    """
    try:
      module = cst.parse_module(code)
      diagnostics = analyze_module(module, self.apis, path=path, strict_unknown_keys=self.config.strict_unknown_keys)
    except (cst.ParserSyntaxError, CtxCheckError) as e:
      log_error(f"Failed to analyze {path}: {e}")
      return FileResult(path=path, errors=[f"{type(e).__name__}: {e}"])
    return FileResult(path=path, diagnostics=diagnostics)

  def run_file(self, path: Path) -> FileResult:
    """
    Reads and checks one file.

    Args:
        path: File to check.

    Returns:
        FileResult: Diagnostics, or the error that aborted analysis.
    """
    try:
      code = path.read_text("utf-8")
    except (OSError, UnicodeDecodeError) as e:
      log_error(f"Failed to read {path}: {e}")
      return FileResult(path=str(path), errors=[f"{type(e).__name__}: {e}"])
    return self.run_source(code, path=str(path))

  def run(self, paths: Iterable[Path]) -> RunResult:
    """
    Checks every Python file under `paths`.

    Args:
        paths: Files or directories.

    Returns:
        RunResult: Per-file results ordered by path.
    """
    files = discover_files(paths, self.config.exclude)
    logger.debug(f"Checking {len(files)} files with {[api.name for api in self.apis]}")

    if self.config.jobs <= 1 or len(files) <= 1:
      return RunResult(files=[self.run_file(f) for f in files])

    results: List[FileResult] = []
    with ThreadPoolExecutor(max_workers=self.config.jobs) as executor:
      futures = {executor.submit(self.run_file, f): f for f in files}
      for fut in as_completed(futures):
        results.append(fut.result())
    order = {str(f): i for i, f in enumerate(files)}
    results.sort(key=lambda r: order[r.path])
    return RunResult(files=results)
