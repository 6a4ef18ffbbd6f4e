"""
Call-Site Classification.

Decides whether a call expression targets a watched API. Three structural
patterns are recognised, each resolving at most one level of indirection:

1.  **Direct package call**: ``log.info(...)`` where ``log`` is the imported
    package and not a local variable shadowing it.
2.  **Bound variable call**: ``logger.info(...)`` where ``logger`` has exactly
    one binding, ``logger = log.new(...)``, to a constructor function.
3.  **Chained constructor call**: ``log.new(...).info(...)``.

Anything else (attributes of objects, subscripts, parameters, variables bound
more than once or by unpacking) is out of scope. Variables reached through
fields, parameters or further assignments are never followed.
"""

from typing import Dict, Mapping, Optional, Sequence

import libcst as cst
from libcst.metadata import Assignment, BaseAssignment, Scope

from ctxcheck.analysis.imports import dotted_name, imports_alias, imports_root_package, root_name
from ctxcheck.apis.base import WatchedAPI
from ctxcheck.enums import CallKind


def _is_import_binding(assignment: BaseAssignment) -> bool:
  return isinstance(assignment, Assignment) and isinstance(assignment.node, (cst.Import, cst.ImportFrom))


class CallClassifier:
  """
  Classifies calls of one file against one watched API.

  Bound variables are resolved lazily on first use and cached per binding,
  so each assignment is inspected at most once per file.

  Attributes:
      api (WatchedAPI): The watched package.
      aliases (Sequence[str]): Local names of the package in this file.
  """

  def __init__(
    self,
    api: WatchedAPI,
    aliases: Sequence[str],
    scopes: Mapping[cst.CSTNode, Optional[Scope]],
    parents: Mapping[cst.CSTNode, cst.CSTNode],
  ):
    """
    Initializes the classifier.

    Args:
        api: The watched package definition.
        aliases: Aliases returned by `resolve_aliases`.
        scopes: Resolved `ScopeProvider` metadata of the module.
        parents: Resolved `ParentNodeProvider` metadata of the module.
    """
    self.api = api
    self.aliases = tuple(aliases)
    self._scopes = scopes
    self._parents = parents
    self._bound_values: Dict[BaseAssignment, bool] = {}

  def classify(self, call: cst.Call) -> CallKind:
    """
    Classifies a call expression.

    Args:
        call: The call to inspect.

    Returns:
        CallKind: How the call reaches the watched API, or OUT_OF_SCOPE.
    """
    if not isinstance(call.func, cst.Attribute):
      return CallKind.OUT_OF_SCOPE
    receiver = call.func.value

    if isinstance(receiver, (cst.Name, cst.Attribute)):
      if self.is_package_ref(receiver):
        return CallKind.DIRECT_PACKAGE_CALL
      if isinstance(receiver, cst.Name) and self.is_bound_value(receiver):
        return CallKind.BOUND_VARIABLE_CALL
      return CallKind.OUT_OF_SCOPE

    if isinstance(receiver, cst.Call) and self.is_constructor_call(receiver):
      return CallKind.CHAINED_CONSTRUCTOR_CALL
    return CallKind.OUT_OF_SCOPE

  def is_package_ref(self, expr: cst.BaseExpression) -> bool:
    """
    True if `expr` denotes the watched package itself.

    The dotted name must be one of the aliases, and every binding of its
    root name in the visible scope must be an import of the watched package.
    For a plain alias each import must bind the package under that name.
    For a dotted alias (``scion.lib.log``) each import must bind the same
    top-level package and at least one must import the full path.
    """
    name = dotted_name(expr)
    if not name or name not in self.aliases:
      return False
    root = root_name(expr)
    assignments = self._assignments_of(root)
    if not assignments or not all(_is_import_binding(a) for a in assignments):
      return False

    exact = [imports_alias(a.node, self.api, name) for a in assignments]
    if "." not in name:
      return all(exact)
    return any(exact) and all(imports_root_package(a.node, root.value) for a in assignments)

  def is_constructor_call(self, expr: cst.BaseExpression) -> bool:
    """
    True if `expr` is ``<package>.<constructor>(...)``.
    """
    if not isinstance(expr, cst.Call) or not isinstance(expr.func, cst.Attribute):
      return False
    if expr.func.attr.value not in self.api.constructors:
      return False
    return self.is_package_ref(expr.func.value)

  def is_bound_value(self, name: cst.Name) -> bool:
    """
    True if `name` is a variable whose single binding is a constructor call.
    """
    assignments = self._assignments_of(name)
    if len(assignments) != 1:
      return False
    (assignment,) = assignments
    if assignment not in self._bound_values:
      self._bound_values[assignment] = self._binds_constructor(assignment)
    return self._bound_values[assignment]

  def _binds_constructor(self, assignment: BaseAssignment) -> bool:
    """
    Checks for ``name = <constructor call>`` or ``name: T = <constructor call>``.
    """
    if not isinstance(assignment, Assignment) or not isinstance(assignment.node, cst.Name):
      return False
    target = assignment.node
    parent = self._parents.get(target)

    if isinstance(parent, cst.AnnAssign):
      return parent.target is target and self.is_constructor_call(parent.value)
    if isinstance(parent, cst.AssignTarget):
      statement = self._parents.get(parent)
      if isinstance(statement, cst.Assign) and len(statement.targets) == 1:
        return self.is_constructor_call(statement.value)
    return False

  def _assignments_of(self, name: Optional[cst.Name]) -> Sequence[BaseAssignment]:
    if name is None:
      return ()
    scope = self._scopes.get(name)
    if scope is None:
      return ()
    return tuple(scope[name.value])
