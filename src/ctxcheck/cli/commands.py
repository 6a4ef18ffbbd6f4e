"""
CLI Command Handlers Facade.

Re-exports the handlers from `ctxcheck.cli.handlers` so the entry point (and
tests patching it) have a single module to reference.
"""

from ctxcheck.cli.handlers.apis import handle_apis
from ctxcheck.cli.handlers.check import handle_check

__all__ = [
  "handle_apis",
  "handle_check",
]
