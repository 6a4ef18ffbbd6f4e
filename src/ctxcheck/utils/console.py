"""
Central Logging and Console Utilities.

This module unifies output using the Python standard `logging` library,
backed by `rich` for formatting.

1.  **Standard Logging Integration**: Log records are rendered by a
    `RichHandler`. Helper functions (`log_info`, `log_success`, ...) route
    to standard logging channels.
2.  **Swappable Console**: A proxy around the Rich Console used for reports.
    Tests (or embedding tools) can redirect all output to a capture buffer
    via `set_console`.

By default reports go to stdout and log records to stderr, so machine
readable output (``check --json``) is never interleaved with logs.

Attributes:
    console (_ConsoleProxy): A global, stable reference to the active Rich Console.
"""

import logging
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text
from rich.theme import Theme

# Custom logging level for Success (higher than INFO, lower than WARNING)
SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

_THEME = Theme(
  {
    "logging.level.success": "green",
    "info": "dim cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "green",
    "path": "bold blue",
    "check": "magenta",
    "code": "bold magenta",
  }
)


class _ConsoleProxy:
  """
  A Proxy wrapper around `rich.console.Console`.

  All printing is forwarded to the backend console, which can be swapped at
  runtime while modules keep importing the same `console` object. Swapping
  the backend also re-targets the logging handler.

  Attributes:
      _backend (Console): The active Rich Console instance.
  """

  def __init__(self) -> None:
    """Initializes the proxy with stdout for reports and stderr for logs."""
    self._backend: Console = Console(theme=_THEME)
    self._configure_logging(Console(theme=_THEME, stderr=True))

  def set_backend(self, new_console: Console) -> None:
    """
    Injects a new Console backend used for both reports and logs.

    Args:
        new_console (Console): The new Rich Console instance to use.
    """
    self._backend = new_console
    self._configure_logging(new_console)

  def reset(self) -> None:
    """
    Restores the default stdout/stderr consoles.
    """
    self._backend = Console(theme=_THEME)
    self._configure_logging(Console(theme=_THEME, stderr=True))

  @property
  def backend(self) -> Console:
    """
    Access the raw backend console.

    Returns:
        Console: The currently active implementation.
    """
    return self._backend

  def _configure_logging(self, log_console: Console) -> None:
    """
    Replaces the root logger's RichHandler with one writing to `log_console`.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
      if isinstance(handler, RichHandler):
        root_logger.removeHandler(handler)

    rich_handler = RichHandler(
      console=log_console,
      show_time=False,
      omit_repeated_times=False,
      show_path=False,
      markup=False,
      rich_tracebacks=True,
    )

    root_logger.setLevel(logging.INFO)
    root_logger.addHandler(rich_handler)

  def print(self, *args: Any, **kwargs: Any) -> None:
    """
    Forwards `print` calls to the active backend.
    """
    self._backend.print(*args, **kwargs)

  def export_text(self, **kwargs: Any) -> str:
    """
    Forwards `export_text` (useful for output capturing).

    Returns:
        str: The captured text output.
    """
    return self._backend.export_text(**kwargs)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Global helper to inject a specific console instance.

  Args:
      new_console (Console): The configured Rich console to use globally.
  """
  console.set_backend(new_console)


def reset_console() -> None:
  """
  Global helper to reset logging and console to standard streams.
  """
  console.reset()


def set_verbosity(verbose: bool = False, quiet: bool = False) -> None:
  """
  Adjusts the root log level: DEBUG when verbose, WARNING when quiet.
  """
  level: Optional[int] = None
  if verbose:
    level = logging.DEBUG
  elif quiet:
    level = logging.WARNING
  if level is not None:
    logging.getLogger().setLevel(level)


def diagnostic_text(position: str, check: str, message: str) -> Text:
  """
  Builds a styled report line. Messages are never parsed as markup, since
  they quote source code containing brackets.

  Args:
      position (str): ``path:line:column``.
      check (str): Check name.
      message (str): Diagnostic message.

  Returns:
      Text: The styled line.
  """
  return Text.assemble((position, "path"), ": ", (f"[{check}]", "check"), " ", message)


def log_info(msg: str) -> None:
  """
  Logs an informational message via standard logging.
  """
  logging.info(f"ℹ️  {msg}")


def log_success(msg: str) -> None:
  """
  Logs a success message via standard logging.
  """
  logging.log(SUCCESS_LEVEL_NUM, f"✅ {msg}")


def log_warning(msg: str) -> None:
  """
  Logs a warning message via standard logging.
  """
  logging.warning(f"⚠️  {msg}")


def log_error(msg: str) -> None:
  """
  Logs an error message via standard logging.

  Args:
      msg (str): The message content.
  """
  logging.error(f"❌ {msg}")
