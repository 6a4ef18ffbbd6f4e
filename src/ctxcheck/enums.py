"""
Enumerations for ctxcheck.

This module defines the closed classifications shared by the analysis passes:
how a call reaches the watched API, and which representation an inferred
static type has.
"""

from enum import Enum


class CallKind(str, Enum):
  """
  Outcome of classifying a call expression against a watched API.

  Only the first three members are checked; everything else is `OUT_OF_SCOPE`.
  """

  DIRECT_PACKAGE_CALL = "direct"  # log.info(...)
  BOUND_VARIABLE_CALL = "bound"  # logger = log.new(); logger.info(...)
  CHAINED_CONSTRUCTOR_CALL = "chained"  # log.new().info(...)
  OUT_OF_SCOPE = "out_of_scope"

  @property
  def in_scope(self) -> bool:
    """True if calls of this kind are subject to context checks."""
    return self is not CallKind.OUT_OF_SCOPE


class TypeKind(str, Enum):
  """
  Underlying representation of an inferred static type.

  Named types (``NewType("Key", str)``, ``class Key(str)``) keep their own
  display name but share the kind of the type they are built on.
  """

  STRING = "string"
  BYTES = "bytes"
  INT = "int"
  FLOAT = "float"
  COMPLEX = "complex"
  BOOL = "bool"
  NONE = "none"
  CONTAINER = "container"  # list, dict, set, tuple
  CALLABLE = "callable"
  TYPE = "type"  # a class object used as a value
  OBJECT = "object"  # Any, object, user classes
  UNION = "union"


class ViolationKind(str, Enum):
  """
  Category of a reported convention violation.
  """

  PARITY = "parity"  # odd number of context elements
  KEY_TYPE = "key-type"  # non-string key
  MISSING_CONTEXT = "missing-context"  # required context absent
