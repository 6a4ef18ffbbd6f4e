"""
Context Checking Engine.

Ties the analysis passes together for one file and one watched API:

1.  **Target resolution**: find the local aliases of the package; files
    that do not import it are skipped without traversal.
2.  **Classification**: every call expression is classified against the API.
3.  **Extraction / Validation**: in-scope calls have their context cut out
    and checked, violations go to the reporter.

`analyze` is a pure function of its inputs. It keeps no state between files
and may be called concurrently for different files.
"""

import logging
from typing import Iterable, List, Optional

import libcst as cst
from libcst.metadata import MetadataWrapper, ParentNodeProvider, PositionProvider, ScopeProvider

from ctxcheck.analysis.classifier import CallClassifier
from ctxcheck.analysis.context import CallSite, ContextValidator, extract_context
from ctxcheck.analysis.imports import resolve_aliases
from ctxcheck.analysis.types import TypeOracle, infer_types
from ctxcheck.apis import WatchedAPI, available_apis, resolve_apis
from ctxcheck.core.diagnostics import Diagnostic, DiagnosticReporter
from ctxcheck.core.render import SourceRenderer

logger = logging.getLogger(__name__)


class ContextChecker(cst.CSTVisitor):
  """
  Visits every call expression of a module and checks the in-scope ones.

  Traversal continues into arguments, so calls nested inside other calls
  are checked as well.
  """

  def __init__(self, api: WatchedAPI, classifier: CallClassifier, validator: ContextValidator):
    self.api = api
    self.classifier = classifier
    self.validator = validator
    self.checked_calls = 0

  def visit_Call(self, node: cst.Call) -> Optional[bool]:
    kind = self.classifier.classify(node)
    if not kind.in_scope:
      return True

    site = CallSite.from_call(node, kind)
    extraction = extract_context(site, self.api)
    if extraction is not None:
      self.checked_calls += 1
      self.validator.validate(site, extraction)
    return True


def analyze(
  wrapper: MetadataWrapper,
  oracle: TypeOracle,
  api: WatchedAPI,
  path: str = "<string>",
  strict_unknown_keys: bool = False,
) -> List[Diagnostic]:
  """
  Checks one file against one watched API.

  Args:
      wrapper: Metadata wrapper of the parsed file. The oracle must have been
          built over ``wrapper.module``.
      oracle: Static types of the file's expressions.
      api: The watched package definition.
      path: File name used in diagnostics.
      strict_unknown_keys: Report keys whose type cannot be inferred.

  Returns:
      List[Diagnostic]: Violations ordered by position. Empty if the file
      does not import the package.

  Raises:
      RenderError: If a node involved in a violation cannot be rendered.
  """
  module = wrapper.module
  aliases = resolve_aliases(module, api)
  if not aliases:
    logger.debug(f"{path}: {api.import_path} not imported, skipping {api.name}")
    return []

  classifier = CallClassifier(
    api,
    aliases,
    scopes=wrapper.resolve(ScopeProvider),
    parents=wrapper.resolve(ParentNodeProvider),
  )
  reporter = DiagnosticReporter(path, api, wrapper.resolve(PositionProvider), SourceRenderer(module))
  validator = ContextValidator(oracle, reporter, strict_unknown_keys=strict_unknown_keys)

  checker = ContextChecker(api, classifier, validator)
  module.visit(checker)

  diagnostics = reporter.diagnostics
  logger.debug(
    f"{path}: {api.name} checked {checker.checked_calls} calls via {list(aliases)}, {len(diagnostics)} diagnostics"
  )
  return diagnostics


def analyze_module(
  module: cst.Module,
  apis: Iterable[WatchedAPI],
  path: str = "<string>",
  strict_unknown_keys: bool = False,
) -> List[Diagnostic]:
  """
  Checks one parsed module against several APIs, sharing the metadata and type passes.

  Args:
      module: Parsed source file.
      apis: Watched packages to check.
      path: File name used in diagnostics.
      strict_unknown_keys: Report keys whose type cannot be inferred.

  Returns:
      List[Diagnostic]: Violations of all checks ordered by position.
  """
  wrapper = MetadataWrapper(module)
  oracle = infer_types(wrapper.module)
  diagnostics: List[Diagnostic] = []
  for api in apis:
    diagnostics.extend(analyze(wrapper, oracle, api, path=path, strict_unknown_keys=strict_unknown_keys))
  return sorted(diagnostics, key=lambda d: (d.line, d.column))


def check_source(
  code: str,
  checks: Optional[List[str]] = None,
  path: str = "<string>",
  strict_unknown_keys: bool = False,
) -> List[Diagnostic]:
  """
  Parses source code and runs the named checks on it.

  Args:
      code: Python source.
      checks: Check names (default: all registered checks).
      path: File name used in diagnostics.
      strict_unknown_keys: Report keys whose type cannot be inferred.

  Returns:
      List[Diagnostic]: Violations ordered by position.

  Raises:
      libcst.ParserSyntaxError: If the code does not parse.
      ConfigError: If a check name is unknown.
  """
  apis = resolve_apis(checks if checks is not None else available_apis())
  return analyze_module(cst.parse_module(code), apis, path=path, strict_unknown_keys=strict_unknown_keys)
