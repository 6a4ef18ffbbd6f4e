"""
Import Resolution for Watched Packages.

Determines under which local names a watched package is visible in one file.
A file that never imports the package yields no aliases and is skipped by
the checker entirely.

Recognised forms (for ``import_path = "scion.lib.log"``)::

    import scion.lib.log              # visible as `scion.lib.log`
    import scion.lib.log as slog      # visible as `slog`
    from scion.lib import log         # visible as `log` (the short name)
    from scion.lib import log as l2   # visible as `l2`

Relative imports and star imports are never resolved.
"""

from typing import List, Optional, Tuple, Union

import libcst as cst

from ctxcheck.apis.base import WatchedAPI


def dotted_name(node: Optional[cst.CSTNode]) -> str:
  """
  Flattens a Name or a chain of Attributes over a Name to a dotted string.

  Args:
    node: The CST node representing the identifier.

  Returns:
    str: The dotted name (e.g. "scion.lib.log"), or an empty string if the
    node is anything other than a pure Name/Attribute chain.

  Example:
    >>> dotted_name(cst.Attribute(value=cst.Name("log"), attr=cst.Name("info")))
    'log.info'
  """
  if isinstance(node, cst.Name):
    return node.value
  if isinstance(node, cst.Attribute):
    base = dotted_name(node.value)
    return f"{base}.{node.attr.value}" if base else ""
  return ""


def root_name(node: cst.BaseExpression) -> Optional[cst.Name]:
  """Returns the leftmost Name of a dotted chain, or None for other shapes."""
  while isinstance(node, cst.Attribute):
    node = node.value
  return node if isinstance(node, cst.Name) else None


class ImportAliasScanner(cst.CSTVisitor):
  """
  Collects the local aliases bound to one import path.

  Attributes:
      import_path (str): Canonical dotted path of the watched package.
      default_alias (str): Name bound by ``from parent import pkg``.
      aliases (List[str]): Aliases in order of first appearance.
  """

  def __init__(self, import_path: str, default_alias: str):
    self.import_path = import_path
    self.default_alias = default_alias
    self.aliases: List[str] = []

  def _add(self, alias: str) -> None:
    if alias not in self.aliases:
      self.aliases.append(alias)

  def visit_Import(self, node: cst.Import) -> None:
    for alias in node.names:
      if dotted_name(alias.name) != self.import_path:
        continue
      if alias.asname and isinstance(alias.asname.name, cst.Name):
        self._add(alias.asname.name.value)
      else:
        self._add(self.import_path)

  def visit_ImportFrom(self, node: cst.ImportFrom) -> None:
    if node.relative or node.module is None or isinstance(node.names, cst.ImportStar):
      return
    module_name = dotted_name(node.module)
    for alias in node.names:
      if f"{module_name}.{dotted_name(alias.name)}" != self.import_path:
        continue
      if alias.asname and isinstance(alias.asname.name, cst.Name):
        self._add(alias.asname.name.value)
      else:
        self._add(self.default_alias)


def resolve_aliases(module: cst.Module, api: WatchedAPI) -> Tuple[str, ...]:
  """
  Finds every local name under which `api` is imported in `module`.

  Args:
      module: Parsed source file.
      api: The watched package definition.

  Returns:
      Tuple[str, ...]: Aliases (possibly dotted). Empty if the package is not imported.
  """
  scanner = ImportAliasScanner(api.import_path, api.default_alias)
  module.visit(scanner)
  return tuple(scanner.aliases)


def imports_alias(node: Union[cst.Import, cst.ImportFrom], api: WatchedAPI, alias: str) -> bool:
  """
  True if the single import statement `node` binds `api` under the local name `alias`.
  """
  scanner = ImportAliasScanner(api.import_path, api.default_alias)
  node.visit(scanner)
  return alias in scanner.aliases


def imports_root_package(node: Union[cst.Import, cst.ImportFrom], root: str) -> bool:
  """
  True if `node` is ``import <root>`` or ``import <root>.<sub>`` without an
  ``as`` clause, which binds the top-level package `root`.
  """
  if not isinstance(node, cst.Import):
    return False
  return any(alias.asname is None and dotted_name(alias.name).split(".")[0] == root for alias in node.names)
