"""
Exception hierarchy for ctxcheck.

Convention violations found in analyzed code are reported as diagnostics,
not raised. The exceptions below signal faults of the checker itself and
abort the analysis of the current file.
"""


class CtxCheckError(Exception):
  """Base class for internal ctxcheck failures."""


class RenderError(CtxCheckError):
  """Raised when a syntax node cannot be rendered back to source text."""


class ConfigError(CtxCheckError, ValueError):
  """Raised for invalid configuration (unknown checks, malformed API tables)."""
