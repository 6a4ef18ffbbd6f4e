"""
Static Type Inference for Context Keys.

This module provides the type oracle consulted by the context validator. A
single `TypeInferenceAnalyzer` pass walks a module and records an inferred
type for every expression it can reason about, without importing or
executing anything.

The analyzer tracks:
1.  **Literals**: strings, f-strings, numbers, containers.
2.  **Bindings**: assignments, annotated assignments, walrus, parameters.
3.  **Named types**: ``NewType``, ``str`` subclasses, string enums, aliases.
4.  **Calls**: constructors, annotated functions, builtins, ``str`` methods.
5.  **Control Flow**: branches, loops, try and match statements merge into `UnionType` values.
6.  **Scopes**: functions, classes, lambdas and comprehensions.

Expressions whose type cannot be derived are simply absent from the table;
callers decide how to treat "unknown".
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Union

import libcst as cst

from ctxcheck.analysis.imports import dotted_name
from ctxcheck.enums import TypeKind


@dataclass(frozen=True)
class StaticType:
  """
  An inferred value type.
  """

  name: str
  """Display name used in diagnostics (e.g. 'int', 'Key')."""

  kind: TypeKind
  """Underlying representation. Named string types have kind STRING."""

  def __str__(self) -> str:
    return self.name

  def is_string_like(self) -> bool:
    """True if the underlying representation is a string."""
    return self.kind is TypeKind.STRING


@dataclass(frozen=True)
class UnionType(StaticType):
  """
  Union of types resulting from control flow divergence or Optional/Union annotations.
  """

  types: Sequence[StaticType] = ()

  def is_string_like(self) -> bool:
    return bool(self.types) and all(t.is_string_like() for t in self.types)


@dataclass(frozen=True)
class TypeRef:
  """
  A name bound to a type (class, NewType, alias) rather than to a value.
  """

  instance: StaticType
  """Type of values produced by calling / annotating with this type."""

  is_enum: bool = False
  attributes: Dict[str, StaticType] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class FunctionRef:
  """
  A name bound to a function definition.
  """

  returns: Optional[StaticType] = None


Symbol = Union[StaticType, TypeRef, FunctionRef]

STR = StaticType("str", TypeKind.STRING)
BYTES = StaticType("bytes", TypeKind.BYTES)
INT = StaticType("int", TypeKind.INT)
FLOAT = StaticType("float", TypeKind.FLOAT)
COMPLEX = StaticType("complex", TypeKind.COMPLEX)
BOOL = StaticType("bool", TypeKind.BOOL)
NONE = StaticType("None", TypeKind.NONE)
ANY = StaticType("Any", TypeKind.OBJECT)
OBJECT = StaticType("object", TypeKind.OBJECT)
FUNCTION = StaticType("function", TypeKind.CALLABLE)


def _container(name: str) -> StaticType:
  return StaticType(name, TypeKind.CONTAINER)


_BUILTIN_TYPES: Dict[str, StaticType] = {
  "str": STR,
  "bytes": BYTES,
  "int": INT,
  "float": FLOAT,
  "complex": COMPLEX,
  "bool": BOOL,
  "object": OBJECT,
  "list": _container("list"),
  "dict": _container("dict"),
  "set": _container("set"),
  "frozenset": _container("frozenset"),
  "tuple": _container("tuple"),
  "bytearray": _container("bytearray"),
}

_BUILTIN_FUNCTIONS: Dict[str, StaticType] = {
  "len": INT,
  "hash": INT,
  "id": INT,
  "ord": INT,
  "repr": STR,
  "ascii": STR,
  "format": STR,
  "chr": STR,
  "hex": STR,
  "oct": STR,
  "bin": STR,
  "input": STR,
  "isinstance": BOOL,
  "callable": BOOL,
}

# Methods that return a plain `str` when called on any string value.
_STR_METHODS = {
  "capitalize",
  "casefold",
  "center",
  "expandtabs",
  "format",
  "format_map",
  "join",
  "ljust",
  "lower",
  "lstrip",
  "removeprefix",
  "removesuffix",
  "replace",
  "rjust",
  "rstrip",
  "strip",
  "swapcase",
  "title",
  "translate",
  "upper",
  "zfill",
}

_STRING_ENUM_BASES = {"StrEnum"}
_INT_ENUM_BASES = {"IntEnum", "IntFlag"}
_ENUM_BASES = {"Enum", "Flag"} | _STRING_ENUM_BASES | _INT_ENUM_BASES

_NUMERIC_RANK = {TypeKind.BOOL: 0, TypeKind.INT: 0, TypeKind.FLOAT: 1, TypeKind.COMPLEX: 2}
_NUMERIC_BY_RANK = {0: INT, 1: FLOAT, 2: COMPLEX}


def make_union(types: Iterable[StaticType]) -> StaticType:
  """
  Creates a deduplicated union, flattening nested unions.

  Args:
      types: Member types (at least one).

  Returns:
      The single member if all members are equal, else a `UnionType`.
  """
  unique: List[StaticType] = []
  seen = set()

  def collect(t: StaticType) -> None:
    if isinstance(t, UnionType):
      for inner in t.types:
        collect(inner)
    elif t.name not in seen:
      seen.add(t.name)
      unique.append(t)

  for t in types:
    collect(t)

  if len(unique) == 1:
    return unique[0]
  names = sorted(t.name for t in unique)
  return UnionType(f"Union[{', '.join(names)}]", TypeKind.UNION, tuple(unique))


def _leaf(node: cst.BaseExpression) -> str:
  """Last component of a dotted name (`typing.Optional` -> `Optional`)."""
  full = dotted_name(node)
  return full.rsplit(".", 1)[-1] if full else ""


class Scope:
  """
  A lexical scope (module, class, function, lambda or comprehension).

  Names bound in a class body are not visible from nested function scopes.
  """

  def __init__(self, parent: Optional["Scope"] = None, name: str = "<root>", is_class: bool = False):
    self.parent = parent
    self.name = name
    self.is_class = is_class
    self.symbols: Dict[str, Optional[Symbol]] = {}

  def set(self, name: str, symbol: Optional[Symbol]) -> None:
    """
    Binds a name. Binding None records the name as present but of unknown type.
    """
    self.symbols[name] = symbol

  def get(self, name: str) -> Optional[Symbol]:
    """
    Resolves a name through the enclosing scopes.
    """
    if name in self.symbols:
      return self.symbols[name]
    scope = self.parent
    while scope is not None:
      if not scope.is_class and name in scope.symbols:
        return scope.symbols[name]
      scope = scope.parent
    return None

  def snapshot(self) -> Dict[str, Optional[Symbol]]:
    """Returns a shallow copy of the bindings for branching."""
    return self.symbols.copy()


class TypeOracle:
  """
  Read-only view over the inference results of one module.
  """

  def __init__(self, table: Dict[cst.CSTNode, Symbol]):
    self._table = table

  def symbol_of(self, node: cst.CSTNode) -> Optional[Symbol]:
    """Returns the raw symbol recorded for a node (type, function or value)."""
    return self._table.get(node)

  def type_of(self, node: cst.BaseExpression) -> Optional[StaticType]:
    """
    Returns the static type of an expression used as a value.

    Class objects and functions used as values get 'type[...]' and
    'function' types respectively.

    Returns:
        The inferred type, or None if it cannot be determined.
    """
    symbol = self._table.get(node)
    if isinstance(symbol, TypeRef):
      return StaticType(f"type[{symbol.instance.name}]", TypeKind.TYPE)
    if isinstance(symbol, FunctionRef):
      return FUNCTION
    return symbol

  def is_string_like(self, node: cst.BaseExpression) -> Optional[bool]:
    """
    Tests whether an expression's underlying representation is a string.

    Returns:
        True/False when the type is known, None when it is not.
    """
    t = self.type_of(node)
    if t is None:
      return None
    return t.is_string_like()


class TypeInferenceAnalyzer(cst.CSTVisitor):
  """
  Populates the type table in a single traversal.

  Types flow bottom-up through `leave_*` handlers; bindings are applied when
  the binding statement is left, so a name is typed from its last visible
  assignment in source order.
  """

  def __init__(self) -> None:
    self.table: Dict[cst.CSTNode, Symbol] = {}
    self.root_scope = Scope(name="builtins")
    for name, t in _BUILTIN_TYPES.items():
      self.root_scope.set(name, TypeRef(t))
    for name, t in _BUILTIN_FUNCTIONS.items():
      self.root_scope.set(name, FunctionRef(t))
    self.current_scope = Scope(parent=self.root_scope, name="module")

  @classmethod
  def infer(cls, module: cst.Module) -> TypeOracle:
    """
    Runs the analysis over a module.

    Args:
        module: The module to analyze. Nodes of this exact tree are the keys of the result.

    Returns:
        TypeOracle: Lookup interface over the recorded types.
    """
    analyzer = cls()
    module.visit(analyzer)
    return TypeOracle(analyzer.table)

  def _record(self, node: cst.CSTNode, symbol: Optional[Symbol]) -> None:
    if symbol is not None:
      self.table[node] = symbol

  def _value_type(self, node: cst.CSTNode) -> Optional[StaticType]:
    symbol = self.table.get(node)
    return symbol if isinstance(symbol, StaticType) else None

  # --- Scoping ---

  def visit_ClassDef(self, node: cst.ClassDef) -> None:
    """Binds the class name and enters the class scope."""
    self.current_scope.set(node.name.value, self._class_ref(node))
    self.current_scope = Scope(parent=self.current_scope, name=f"class_{node.name.value}", is_class=True)

  def leave_ClassDef(self, node: cst.ClassDef) -> None:
    """Exits the class scope, attaching its typed attributes to the class reference."""
    class_scope = self.current_scope
    self.current_scope = class_scope.parent
    ref = self.current_scope.symbols.get(node.name.value)
    if isinstance(ref, TypeRef):
      attributes = {k: v for k, v in class_scope.symbols.items() if isinstance(v, StaticType)}
      self.current_scope.set(node.name.value, TypeRef(ref.instance, ref.is_enum, attributes))

  def _class_ref(self, node: cst.ClassDef) -> TypeRef:
    kind = TypeKind.OBJECT
    is_enum = False
    for base in node.bases:
      if base.keyword is not None:
        continue
      leaf = _leaf(base.value)
      base_ref = self.current_scope.get(leaf) if isinstance(base.value, cst.Name) else None
      if leaf in _ENUM_BASES or (isinstance(base_ref, TypeRef) and base_ref.is_enum):
        is_enum = True
      if leaf in _STRING_ENUM_BASES:
        kind = TypeKind.STRING
      elif leaf in _INT_ENUM_BASES and kind is TypeKind.OBJECT:
        kind = TypeKind.INT
      elif isinstance(base_ref, TypeRef) and base_ref.instance.kind in (TypeKind.STRING, TypeKind.INT):
        if kind is not TypeKind.STRING:
          kind = base_ref.instance.kind
    return TypeRef(StaticType(node.name.value, kind), is_enum=is_enum)

  def visit_FunctionDef(self, node: cst.FunctionDef) -> None:
    """Binds the function name and enters its scope with typed parameters."""
    returns = self._annotation_type(node.returns.annotation) if node.returns else None
    self.current_scope.set(node.name.value, FunctionRef(returns))
    self.current_scope = Scope(parent=self.current_scope, name=f"func_{node.name.value}")

    params = node.params
    for param in (*params.posonly_params, *params.params, *params.kwonly_params):
      ann = self._annotation_type(param.annotation.annotation) if param.annotation else None
      self.current_scope.set(param.name.value, ann)
    if isinstance(params.star_arg, cst.Param):
      self.current_scope.set(params.star_arg.name.value, _container("tuple"))
    if params.star_kwarg is not None:
      self.current_scope.set(params.star_kwarg.name.value, _container("dict"))

  def leave_FunctionDef(self, node: cst.FunctionDef) -> None:
    """Exits function scope."""
    if self.current_scope.parent:
      self.current_scope = self.current_scope.parent

  def visit_Lambda(self, node: cst.Lambda) -> bool:
    """
    Evaluates defaults in the enclosing scope, then the body in a scope of
    its own where every parameter is untyped.
    """
    params = node.params
    plain = (*params.posonly_params, *params.params, *params.kwonly_params)
    for param in plain:
      if param.default is not None:
        param.default.visit(self)

    self.current_scope = Scope(parent=self.current_scope, name="lambda")
    for param in plain:
      self.current_scope.set(param.name.value, None)
    if isinstance(params.star_arg, cst.Param):
      self.current_scope.set(params.star_arg.name.value, _container("tuple"))
    if params.star_kwarg is not None:
      self.current_scope.set(params.star_kwarg.name.value, _container("dict"))

    node.body.visit(self)
    self.current_scope = self.current_scope.parent
    return False

  def _visit_comprehension(self, for_in: cst.CompFor, results: Sequence[cst.BaseExpression]) -> bool:
    """
    The outermost iterable belongs to the enclosing scope; targets, conditions
    and results live in the comprehension's own scope.
    """
    for_in.iter.visit(self)
    self.current_scope = Scope(parent=self.current_scope, name="comprehension")

    comp_for: Optional[cst.CompFor] = for_in
    while comp_for is not None:
      if comp_for is not for_in:
        comp_for.iter.visit(self)
      iter_type = self._value_type(comp_for.iter)
      self._bind_target(comp_for.target, STR if iter_type is not None and iter_type.is_string_like() else None)
      for condition in comp_for.ifs:
        condition.visit(self)
      comp_for = comp_for.inner_for_in

    for result in results:
      result.visit(self)
    self.current_scope = self.current_scope.parent
    return False

  def visit_ListComp(self, node: cst.ListComp) -> bool:
    return self._visit_comprehension(node.for_in, (node.elt,))

  def visit_SetComp(self, node: cst.SetComp) -> bool:
    return self._visit_comprehension(node.for_in, (node.elt,))

  def visit_GeneratorExp(self, node: cst.GeneratorExp) -> bool:
    return self._visit_comprehension(node.for_in, (node.elt,))

  def visit_DictComp(self, node: cst.DictComp) -> bool:
    return self._visit_comprehension(node.for_in, (node.key, node.value))

  # --- Control Flow Support ---

  def visit_If(self, node: cst.If) -> bool:
    """
    Visits both branches from the same starting state and merges the results.
    """
    node.test.visit(self)
    start_state = self.current_scope.snapshot()

    node.body.visit(self)
    body_state = self.current_scope.snapshot()

    self.current_scope.symbols = start_state.copy()
    if node.orelse:
      node.orelse.visit(self)
    else_state = self.current_scope.snapshot()

    self.current_scope.symbols = self._merge_states(body_state, else_state)
    return False

  def visit_For(self, node: cst.For) -> bool:
    """
    Loops may execute zero times: the state after the body is merged with the state before it.
    """
    node.iter.visit(self)
    node.target.visit(self)
    iter_type = self._value_type(node.iter)
    self._bind_target(node.target, STR if iter_type is not None and iter_type.is_string_like() else None)

    start_state = self.current_scope.snapshot()
    node.body.visit(self)
    if node.orelse:
      node.orelse.visit(self)
    end_state = self.current_scope.snapshot()

    self.current_scope.symbols = self._merge_states(start_state, end_state)
    return False

  def visit_While(self, node: cst.While) -> bool:
    """Handle while loop logic."""
    node.test.visit(self)
    start_state = self.current_scope.snapshot()
    node.body.visit(self)
    if node.orelse:
      node.orelse.visit(self)
    end_state = self.current_scope.snapshot()
    self.current_scope.symbols = self._merge_states(start_state, end_state)
    return False

  def visit_Try(self, node: cst.Try) -> bool:
    """
    A handler may run after any prefix of the body, so handlers start from
    the merge of the states before and after the body. The outcomes of the
    body (with its else block) and of every handler are merged before the
    finally block runs.
    """
    start_state = self.current_scope.snapshot()
    node.body.visit(self)
    body_state = self.current_scope.snapshot()
    handler_start = self._merge_states(start_state, body_state)

    if node.orelse:
      node.orelse.visit(self)
    outcome = self.current_scope.snapshot()

    for handler in node.handlers:
      self.current_scope.symbols = handler_start.copy()
      handler.visit(self)
      outcome = self._merge_states(outcome, self.current_scope.snapshot())

    self.current_scope.symbols = outcome
    if node.finalbody:
      node.finalbody.visit(self)
    return False

  def visit_TryStar(self, node: cst.TryStar) -> bool:
    return self.visit_Try(node)

  def visit_Match(self, node: cst.Match) -> bool:
    """
    Every case starts from the state before the match. No case may match, so
    that state is part of the merge.
    """
    node.subject.visit(self)
    start_state = self.current_scope.snapshot()
    outcome = start_state

    for case in node.cases:
      self.current_scope.symbols = start_state.copy()
      case.visit(self)
      outcome = self._merge_states(outcome, self.current_scope.snapshot())

    self.current_scope.symbols = outcome
    return False

  def leave_MatchAs(self, node: cst.MatchAs) -> None:
    if node.name is not None:
      self._bind_target(node.name, None)

  def leave_MatchStar(self, node: cst.MatchStar) -> None:
    if node.name is not None:
      self._bind_target(node.name, None)

  def leave_MatchMapping(self, node: cst.MatchMapping) -> None:
    if node.rest is not None:
      self._bind_target(node.rest, None)

  def _merge_states(
    self, state_a: Dict[str, Optional[Symbol]], state_b: Dict[str, Optional[Symbol]]
  ) -> Dict[str, Optional[Symbol]]:
    """
    Merges two binding maps. Conflicting value types become unions; a name
    bound in only one branch keeps that branch's type; unknown wins over known.
    """
    merged: Dict[str, Optional[Symbol]] = {}
    for k in set(state_a) | set(state_b):
      if k not in state_a:
        merged[k] = state_b[k]
      elif k not in state_b:
        merged[k] = state_a[k]
      else:
        a, b = state_a[k], state_b[k]
        if a == b:
          merged[k] = a
        elif isinstance(a, StaticType) and isinstance(b, StaticType):
          merged[k] = make_union([a, b])
        else:
          merged[k] = None
    return merged

  # --- Bindings ---

  def _bind_target(self, target: cst.BaseExpression, symbol: Optional[Symbol]) -> None:
    if isinstance(target, cst.Name):
      self.current_scope.set(target.value, symbol)
    elif isinstance(target, (cst.Tuple, cst.List)):
      for element in target.elements:
        self._bind_target(element.value, None)
    elif isinstance(target, cst.StarredElement):
      self._bind_target(target.value, None)

  def leave_Assign(self, node: cst.Assign) -> None:
    """
    Propagates the RHS type to every target. Tuple unpacking pairs elements
    when the RHS is a tuple display of the same length.
    """
    rhs = self.table.get(node.value)
    for target in node.targets:
      t = target.target
      if isinstance(t, (cst.Tuple, cst.List)) and isinstance(node.value, (cst.Tuple, cst.List)):
        if len(t.elements) == len(node.value.elements):
          for lhs_el, rhs_el in zip(t.elements, node.value.elements):
            self._bind_target(lhs_el.value, self.table.get(rhs_el.value))
          continue
      self._bind_target(t, rhs)

  def leave_AnnAssign(self, node: cst.AnnAssign) -> None:
    """
    Binds from the annotation, falling back to the value's type when the
    annotation carries no type (bare ``Final``) or is unresolved.
    """
    if not isinstance(node.target, cst.Name):
      return
    annotation = node.annotation.annotation
    value_symbol = self.table.get(node.value) if node.value is not None else None
    if _leaf(annotation) == "TypeAlias":
      symbol = value_symbol
    else:
      symbol = self._annotation_type(annotation) or value_symbol
    self.current_scope.set(node.target.value, symbol)

  def leave_AugAssign(self, node: cst.AugAssign) -> None:
    """Rebinds ``x op= y`` using the binary operator rules."""
    if not isinstance(node.target, cst.Name):
      return
    current = self.current_scope.get(node.target.value)
    operand = self._value_type(node.value)
    result = None
    if isinstance(current, StaticType) and operand is not None:
      result = self._binary_result(current, operand, node.operator)
    self.current_scope.set(node.target.value, result)

  def leave_NamedExpr(self, node: cst.NamedExpr) -> None:
    """Walrus binds and evaluates to its value. Inside a comprehension it binds in the enclosing scope."""
    symbol = self.table.get(node.value)
    self._record(node, symbol)
    if isinstance(node.target, cst.Name):
      scope = self.current_scope
      while scope.name == "comprehension" and scope.parent is not None:
        scope = scope.parent
      scope.set(node.target.value, symbol)

  def leave_Import(self, node: cst.Import) -> None:
    """Imported names are untyped; they shadow any earlier binding."""
    for alias in node.names:
      if alias.asname:
        self._bind_target(alias.asname.name, None)
      else:
        full_path = dotted_name(alias.name)
        self.current_scope.set(full_path.split(".")[0], None)

  def leave_ImportFrom(self, node: cst.ImportFrom) -> None:
    """Imported names are untyped; they shadow any earlier binding."""
    if isinstance(node.names, cst.ImportStar):
      return
    for alias in node.names:
      bind = alias.asname.name if alias.asname else alias.name
      self._bind_target(bind, None)

  def leave_WithItem(self, node: cst.WithItem) -> None:
    if node.asname:
      self._bind_target(node.asname.name, None)

  def leave_ExceptHandler(self, node: cst.ExceptHandler) -> None:
    if node.name:
      self._bind_target(node.name.name, None)

  def leave_ExceptStarHandler(self, node: cst.ExceptStarHandler) -> None:
    if node.name:
      self._bind_target(node.name.name, None)

  # --- Annotations ---

  def _annotation_type(self, node: Optional[cst.BaseExpression]) -> Optional[StaticType]:
    """
    Evaluates a type annotation to the type of values it describes.

    Returns:
        The described type, or None for unresolvable annotations and bare
        qualifiers (``Final``, ``ClassVar``) that defer to the assigned value.
    """
    if node is None:
      return None

    if isinstance(node, cst.SimpleString):
      # Forward reference: "Key"
      try:
        return self._annotation_type(cst.parse_expression(node.evaluated_value))
      except (cst.ParserSyntaxError, TypeError):
        return None

    if isinstance(node, cst.BinaryOperation) and isinstance(node.operator, cst.BitOr):
      left = self._annotation_type(node.left)
      right = self._annotation_type(node.right)
      return make_union([left, right]) if left and right else None

    if isinstance(node, cst.Subscript):
      return self._subscript_annotation(node)

    leaf = _leaf(node)
    if leaf == "None":
      return NONE
    if leaf == "Any":
      return ANY
    if leaf == "LiteralString":
      return STR
    if leaf in ("Final", "ClassVar", "TypeAlias"):
      return None
    if isinstance(node, cst.Name):
      symbol = self.current_scope.get(node.value)
      if isinstance(symbol, TypeRef):
        return symbol.instance
    return None

  def _subscript_annotation(self, node: cst.Subscript) -> Optional[StaticType]:
    leaf = _leaf(node.value)
    args = [el.slice.value for el in node.slice if isinstance(el.slice, cst.Index)]
    if not args:
      return None

    if leaf in ("Final", "ClassVar", "Annotated"):
      return self._annotation_type(args[0])
    if leaf in ("Optional", "Union"):
      members = [self._annotation_type(a) for a in args]
      if leaf == "Optional":
        members.append(NONE)
      if any(m is None for m in members):
        return None
      return make_union(members)
    if leaf == "Literal":
      members = []
      for a in args:
        t = self._literal_type(a)
        if t is None:
          return None
        members.append(t)
      return make_union(members)
    if leaf.lower() in ("type",):
      return StaticType(f"type[{dotted_name(args[0]) or '?'}]", TypeKind.TYPE)
    if leaf.lower() in _BUILTIN_TYPES and _BUILTIN_TYPES[leaf.lower()].kind is TypeKind.CONTAINER:
      return _BUILTIN_TYPES[leaf.lower()]
    if leaf in ("Sequence", "Mapping", "Iterable", "MutableMapping", "MutableSequence"):
      return _container(leaf)
    return self._annotation_type(node.value)

  def _literal_type(self, node: cst.BaseExpression) -> Optional[StaticType]:
    if isinstance(node, (cst.SimpleString, cst.ConcatenatedString)):
      return BYTES if self._is_bytes_literal(node) else STR
    if isinstance(node, cst.Integer):
      return INT
    if isinstance(node, cst.Name) and node.value in ("True", "False"):
      return BOOL
    if isinstance(node, cst.Name) and node.value == "None":
      return NONE
    return None

  @staticmethod
  def _is_bytes_literal(node: cst.BaseExpression) -> bool:
    while isinstance(node, cst.ConcatenatedString):
      node = node.left
    return isinstance(node, cst.SimpleString) and "b" in node.prefix.lower()

  # --- Literals ---

  def leave_SimpleString(self, node: cst.SimpleString) -> None:
    self._record(node, BYTES if self._is_bytes_literal(node) else STR)

  def leave_ConcatenatedString(self, node: cst.ConcatenatedString) -> None:
    self._record(node, BYTES if self._is_bytes_literal(node) else STR)

  def leave_FormattedString(self, node: cst.FormattedString) -> None:
    self._record(node, STR)

  def leave_Integer(self, node: cst.Integer) -> None:
    self._record(node, INT)

  def leave_Float(self, node: cst.Float) -> None:
    self._record(node, FLOAT)

  def leave_Imaginary(self, node: cst.Imaginary) -> None:
    self._record(node, COMPLEX)

  def leave_List(self, node: cst.List) -> None:
    self._record(node, _container("list"))

  def leave_Tuple(self, node: cst.Tuple) -> None:
    self._record(node, _container("tuple"))

  def leave_Set(self, node: cst.Set) -> None:
    self._record(node, _container("set"))

  def leave_Dict(self, node: cst.Dict) -> None:
    self._record(node, _container("dict"))

  def leave_ListComp(self, node: cst.ListComp) -> None:
    self._record(node, _container("list"))

  def leave_SetComp(self, node: cst.SetComp) -> None:
    self._record(node, _container("set"))

  def leave_DictComp(self, node: cst.DictComp) -> None:
    self._record(node, _container("dict"))

  def leave_GeneratorExp(self, node: cst.GeneratorExp) -> None:
    self._record(node, _container("generator"))

  def leave_Lambda(self, node: cst.Lambda) -> None:
    self._record(node, FUNCTION)

  # --- Usage Resolution ---

  def leave_Name(self, node: cst.Name) -> None:
    """
    Look up variable in scope.
    """
    if node.value in ("True", "False"):
      self._record(node, BOOL)
    elif node.value == "None":
      self._record(node, NONE)
    else:
      self._record(node, self.current_scope.get(node.value))

  def leave_Attribute(self, node: cst.Attribute) -> None:
    """
    Resolves class attributes and enum members (``Keys.USER`` -> ``Keys``).
    """
    base = self.table.get(node.value)
    if not isinstance(base, TypeRef):
      return
    attr = node.attr.value
    if base.is_enum and attr in base.attributes:
      self._record(node, base.instance)
    else:
      self._record(node, base.attributes.get(attr))

  def leave_Call(self, node: cst.Call) -> None:
    """
    Infers the result of a call.
    1. ``NewType("Key", base)`` yields a named type reference.
    2. Calling a type yields an instance; calling a function yields its return type.
    3. String methods on string receivers yield `str`.
    """
    if _leaf(node.func) == "NewType" and len(node.args) == 2:
      first = node.args[0].value
      base = self._annotation_type(node.args[1].value)
      if isinstance(first, cst.SimpleString) and base is not None:
        self._record(node, TypeRef(StaticType(str(first.evaluated_value), base.kind)))
      return

    func_symbol = self.table.get(node.func)
    if isinstance(func_symbol, TypeRef):
      self._record(node, func_symbol.instance)
      return
    if isinstance(func_symbol, FunctionRef):
      self._record(node, func_symbol.returns)
      return

    if isinstance(node.func, cst.Attribute):
      receiver = self._value_type(node.func.value)
      if receiver is not None and receiver.is_string_like() and node.func.attr.value in _STR_METHODS:
        self._record(node, STR)

  def leave_BinaryOperation(self, node: cst.BinaryOperation) -> None:
    left = self._value_type(node.left)
    right = self._value_type(node.right)
    if left is not None and right is not None:
      self._record(node, self._binary_result(left, right, node.operator))

  def _binary_result(
    self, left: StaticType, right: StaticType, op: Union[cst.BaseBinaryOp, cst.BaseAugOp]
  ) -> Optional[StaticType]:
    """
    Result type of ``left op right`` for string and numeric operands.
    """
    op_name = type(op).__name__.replace("Assign", "")
    if left.is_string_like():
      if op_name == "Add" and right.is_string_like():
        return STR
      if op_name == "Modulo":
        return STR
      if op_name == "Multiply" and right.kind in (TypeKind.INT, TypeKind.BOOL):
        return STR
      return None
    if right.is_string_like():
      if op_name == "Multiply" and left.kind in (TypeKind.INT, TypeKind.BOOL):
        return STR
      return None

    if left.kind in _NUMERIC_RANK and right.kind in _NUMERIC_RANK:
      rank = max(_NUMERIC_RANK[left.kind], _NUMERIC_RANK[right.kind])
      if op_name == "Divide":
        rank = max(rank, 1)
      return _NUMERIC_BY_RANK[rank]
    return None

  def leave_UnaryOperation(self, node: cst.UnaryOperation) -> None:
    if isinstance(node.operator, cst.Not):
      self._record(node, BOOL)
      return
    operand = self._value_type(node.expression)
    if operand is not None and operand.kind in _NUMERIC_RANK:
      self._record(node, _NUMERIC_BY_RANK[_NUMERIC_RANK[operand.kind]])

  def leave_Comparison(self, node: cst.Comparison) -> None:
    self._record(node, BOOL)

  def leave_BooleanOperation(self, node: cst.BooleanOperation) -> None:
    left = self._value_type(node.left)
    right = self._value_type(node.right)
    if left is not None and right is not None:
      self._record(node, make_union([left, right]))

  def leave_IfExp(self, node: cst.IfExp) -> None:
    """
    Infers type for ternary expression: `A if C else B`.
    """
    t1 = self._value_type(node.body)
    t2 = self._value_type(node.orelse)
    if t1 and t2:
      self._record(node, make_union([t1, t2]))

  def leave_Subscript(self, node: cst.Subscript) -> None:
    """Indexing or slicing a string yields a string."""
    value = self._value_type(node.value)
    if value is not None and value.is_string_like():
      self._record(node, STR)


def infer_types(module: cst.Module) -> TypeOracle:
  """
  Convenience wrapper around `TypeInferenceAnalyzer.infer`.
  """
  return TypeInferenceAnalyzer.infer(module)
