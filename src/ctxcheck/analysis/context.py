"""
Context Extraction and Validation.

Once a call is known to target a watched API, its trailing key/value
arguments (the *context*) are cut out according to the entry function's
`EntryRule` and validated:

- the context must have an even number of elements;
- every element at an even offset (a key) must be statically string-like.

Both checks always run, so one malformed call may yield several diagnostics.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import libcst as cst

from ctxcheck.analysis.types import TypeOracle
from ctxcheck.apis.base import WatchedAPI
from ctxcheck.core.diagnostics import DiagnosticReporter
from ctxcheck.enums import CallKind


@dataclass(frozen=True)
class CallSite:
  """
  One in-scope call expression.

  Only positional arguments are considered; keyword arguments and
  ``**mapping`` never carry context.
  """

  node: cst.Call
  method: str
  args: Tuple[cst.BaseExpression, ...]
  has_spread: bool
  kind: CallKind

  @classmethod
  def from_call(cls, node: cst.Call, kind: CallKind) -> "CallSite":
    """
    Builds a call site from a ``<receiver>.<method>(...)`` call.
    """
    assert isinstance(node.func, cst.Attribute)
    positional = [arg for arg in node.args if arg.keyword is None and arg.star != "**"]
    return cls(
      node=node,
      method=node.func.attr.value,
      args=tuple(arg.value for arg in positional if arg.star == ""),
      has_spread=any(arg.star == "*" for arg in positional),
      kind=kind,
    )


@dataclass(frozen=True)
class Extraction:
  """
  Outcome of context extraction for a checkable call.

  Exactly one of `context` (non-empty) or `missing_context` is meaningful.
  """

  context: Tuple[cst.BaseExpression, ...] = ()
  missing_context: bool = False


def extract_context(site: CallSite, api: WatchedAPI) -> Optional[Extraction]:
  """
  Cuts the context slice out of a call.

  Args:
      site: The in-scope call.
      api: The watched API whose entry table applies.

  Returns:
      None if nothing can or needs to be checked (not an entry function,
      argument spread, too few arguments), otherwise the extraction.
  """
  rule = api.rule_for(site.method)
  if rule is None:
    return None
  # A spread argument hides the real argument count.
  if site.has_spread:
    return None
  if rule.requires_context and len(site.args) < rule.context_start + 1:
    return Extraction(missing_context=True)
  if len(site.args) < rule.min_args:
    return None
  context = site.args[rule.context_start :]
  if not context:
    return None
  return Extraction(context=context)


class ContextValidator:
  """
  Checks context slices and reports violations.

  Attributes:
      oracle (TypeOracle): Static types of the file's expressions.
      reporter (DiagnosticReporter): Sink for violations.
      strict_unknown_keys (bool): Report keys whose type cannot be inferred.
  """

  def __init__(self, oracle: TypeOracle, reporter: DiagnosticReporter, strict_unknown_keys: bool = False):
    self.oracle = oracle
    self.reporter = reporter
    self.strict_unknown_keys = strict_unknown_keys

  def validate(self, site: CallSite, extraction: Extraction) -> None:
    """
    Runs all checks for one extracted call.

    Args:
        site: The call being checked.
        extraction: Result of `extract_context` for that call.
    """
    if extraction.missing_context:
      self.reporter.report_missing_context(site.node)
      return
    self.check_parity(site, extraction.context)
    self.check_keys(site, extraction.context)

  def check_parity(self, site: CallSite, context: Tuple[cst.BaseExpression, ...]) -> None:
    """Reports odd-length contexts at the first context argument."""
    if len(context) % 2 != 0:
      self.reporter.report_parity(site.node, context)

  def check_keys(self, site: CallSite, context: Tuple[cst.BaseExpression, ...]) -> None:
    """Reports every key (even offset) that is not string-like."""
    for key in context[::2]:
      key_type = self.oracle.type_of(key)
      if key_type is None:
        if self.strict_unknown_keys:
          self.reporter.report_key_type(site.node, key, "unknown")
        continue
      if not key_type.is_string_like():
        self.reporter.report_key_type(site.node, key, key_type.name)
