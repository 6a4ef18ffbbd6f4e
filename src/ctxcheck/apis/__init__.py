"""
Watched API Package.

Discovers and registers the built-in API definitions by importing every
module in this directory. Each module registers its `WatchedAPI` through
`register_api` as an import side effect, so adding a new checked package is a
matter of dropping a module here (or declaring it in ``[tool.ctxcheck.apis]``).
"""

import importlib
import pkgutil
from pathlib import Path
from typing import List

from ctxcheck.apis.base import (
  EntryRule,
  WatchedAPI,
  _API_REGISTRY,
  get_api,
  register_api,
  resolve_apis,
)

_EXCLUDED_MODULES = {"base", "__init__"}


def _auto_register_apis() -> None:
  """Imports all sibling modules so their definitions register themselves."""
  pkg_path = str(Path(__file__).parent)
  for _, module_name, _ in pkgutil.iter_modules([pkg_path]):
    if module_name in _EXCLUDED_MODULES:
      continue
    importlib.import_module(f".{module_name}", package=__name__)


_auto_register_apis()


def available_apis() -> List[str]:
  """
  Returns the names of all registered checks, in registration order.

  Returns:
      List[str]: e.g. ['logcheck', 'serrorscheck'].
  """
  return list(_API_REGISTRY.keys())


__all__ = [
  "EntryRule",
  "WatchedAPI",
  "available_apis",
  "get_api",
  "register_api",
  "resolve_apis",
]
