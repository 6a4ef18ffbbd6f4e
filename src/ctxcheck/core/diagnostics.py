"""
Diagnostics and Reporting.

A `Diagnostic` is the only output of the checker: a positioned, formatted
message plus the structured parameters it was formatted from (so JSON
consumers do not have to parse messages). The `DiagnosticReporter` formats
and collects diagnostics for one file and one watched API.
"""

from typing import Any, Dict, List, Mapping, Sequence

import libcst as cst
from libcst.metadata import CodeRange
from pydantic import BaseModel, ConfigDict, Field

from ctxcheck.apis.base import WatchedAPI
from ctxcheck.core.render import SourceRenderer, quote
from ctxcheck.enums import ViolationKind

PARITY_TEMPLATE = "context should be even: len={length} ctx={ctx}"
KEY_TYPE_TEMPLATE = "key should be string: type={type} name={name}"
MISSING_CONTEXT_TEMPLATE = "should have context: {expr}"
CALL_SUFFIX_TEMPLATE = " expr={expr}"


class Diagnostic(BaseModel):
  """
  A reported convention violation.
  """

  model_config = ConfigDict(frozen=True)

  path: str = Field(..., description="File the violation was found in.")
  line: int = Field(..., description="1-based line.")
  column: int = Field(..., description="1-based column.")
  check: str = Field(..., description="Name of the check that produced it (e.g. 'logcheck').")
  kind: ViolationKind = Field(..., description="Violation category.")
  message: str = Field(..., description="Formatted message.")
  params: Dict[str, Any] = Field(default_factory=dict, description="Values substituted into the message.")

  @property
  def position(self) -> str:
    """``path:line:column``."""
    return f"{self.path}:{self.line}:{self.column}"

  def format(self) -> str:
    """
    Formats the diagnostic as a single greppable line.

    Returns:
        str: e.g. ``app.py:3:22: [logcheck] context should be even: len=1 ctx=["key"]``.
    """
    return f"{self.position}: [{self.check}] {self.message}"


class DiagnosticReporter:
  """
  Formats and collects diagnostics for one file and one check.

  Nothing is deduplicated or suppressed; the collected list is ordered by
  position, keeping emission order for equal positions.
  """

  def __init__(
    self,
    path: str,
    api: WatchedAPI,
    positions: Mapping[cst.CSTNode, CodeRange],
    renderer: SourceRenderer,
  ):
    self.path = path
    self.api = api
    self._positions = positions
    self._renderer = renderer
    self._diagnostics: List[Diagnostic] = []

  @property
  def diagnostics(self) -> List[Diagnostic]:
    """Collected diagnostics, sorted by position."""
    return sorted(self._diagnostics, key=lambda d: (d.line, d.column))

  def report(self, node: cst.CSTNode, kind: ViolationKind, message: str, **params: Any) -> Diagnostic:
    """
    Records a diagnostic positioned at the start of `node`.

    Args:
        node: Node the diagnostic points at.
        kind: Violation category.
        message: Fully formatted message.
        **params: Structured message parameters.

    Returns:
        Diagnostic: The recorded diagnostic.
    """
    start = self._positions[node].start
    diagnostic = Diagnostic(
      path=self.path,
      line=start.line,
      column=start.column + 1,
      check=self.api.name,
      kind=kind,
      message=message,
      params=params,
    )
    self._diagnostics.append(diagnostic)
    return diagnostic

  def _with_call(self, message: str, call: cst.Call) -> str:
    if not self.api.render_call:
      return message
    return message + CALL_SUFFIX_TEMPLATE.format(expr=quote(self._renderer.render(call)))

  def report_parity(self, call: cst.Call, context: Sequence[cst.BaseExpression]) -> Diagnostic:
    """Odd context length, positioned at the first context element."""
    rendered = [self._renderer.render(arg) for arg in context]
    message = PARITY_TEMPLATE.format(length=len(context), ctx=f"[{','.join(rendered)}]")
    return self.report(
      context[0],
      ViolationKind.PARITY,
      self._with_call(message, call),
      length=len(context),
      ctx=rendered,
      expr=self._renderer.render(call),
    )

  def report_key_type(self, call: cst.Call, key: cst.BaseExpression, type_name: str) -> Diagnostic:
    """Non-string key, positioned at the key."""
    name = self._renderer.render(key)
    message = KEY_TYPE_TEMPLATE.format(type=quote(type_name), name=quote(name))
    return self.report(
      key,
      ViolationKind.KEY_TYPE,
      self._with_call(message, call),
      type=type_name,
      name=name,
      expr=self._renderer.render(call),
    )

  def report_missing_context(self, call: cst.Call) -> Diagnostic:
    """Required context absent, positioned at the call."""
    expr = self._renderer.render(call)
    return self.report(call, ViolationKind.MISSING_CONTEXT, MISSING_CONTEXT_TEMPLATE.format(expr=expr), expr=expr)
