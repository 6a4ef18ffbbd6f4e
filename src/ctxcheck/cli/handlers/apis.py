"""
APIs Command Handler.

Lists the watched APIs known to the checker, including any definitions and
overrides from ``[tool.ctxcheck.apis]``.
"""

from rich.table import Table

from ctxcheck.config import RuntimeConfig
from ctxcheck.errors import ConfigError
from ctxcheck.utils.console import console, log_error


def handle_apis() -> int:
  """
  Prints a table of watched APIs and their entry rules.

  Returns:
      int: 0 on success, 2 if the configuration is invalid.
  """
  try:
    apis = RuntimeConfig.load().watched_apis()
  except ConfigError as e:
    log_error(str(e))
    return 2

  table = Table(title="Watched APIs")
  table.add_column("Check", style="cyan")
  table.add_column("Import Path", style="bold blue")
  table.add_column("Entry", style="magenta")
  table.add_column("Context From", justify="right")
  table.add_column("Min Args", justify="right")
  table.add_column("Requires Context", justify="center")
  table.add_column("Constructors", style="dim")

  for api in apis:
    constructors = ", ".join(sorted(api.constructors)) or "-"
    for i, (entry, rule) in enumerate(sorted(api.entries.items())):
      table.add_row(
        api.name if i == 0 else "",
        api.import_path if i == 0 else "",
        entry,
        str(rule.context_start),
        str(rule.min_args),
        "yes" if rule.requires_context else "",
        constructors if i == 0 else "",
      )

  console.print(table)
  return 0
