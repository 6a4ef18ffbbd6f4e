"""
Watched API Definitions.

A `WatchedAPI` describes one package whose call conventions are enforced:
where it is imported from, which of its functions take a trailing key/value
context, and which of its functions return objects exposing those same
functions (constructors).

Definitions are immutable once created and are shared read-only by every
file analyzed during a run.
"""

from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ctxcheck.errors import ConfigError


class EntryRule(BaseModel):
  """
  Context extraction rule for one entry function.

  Example: ``wrap(msg, err, *ctx)`` is ``EntryRule(min_args=3, context_start=2)``.
  """

  model_config = ConfigDict(frozen=True)

  min_args: int = Field(..., ge=0, description="Positional arguments needed before any context is present.")
  context_start: int = Field(..., ge=0, description="Index of the first context argument.")
  requires_context: bool = Field(False, description="If True, calls without any context are violations.")


class WatchedAPI(BaseModel):
  """
  Immutable description of a watched package.
  """

  model_config = ConfigDict(frozen=True)

  name: str = Field(..., description="Check identifier, used in reports and for selection (e.g. 'logcheck').")
  doc: str = Field("", description="One line summary shown by the `apis` command.")
  import_path: str = Field(..., description="Canonical dotted import path (e.g. 'scion.lib.log').")
  entries: Dict[str, EntryRule] = Field(default_factory=dict, description="Entry function name -> extraction rule.")
  constructors: FrozenSet[str] = Field(default_factory=frozenset, description="Functions returning a watched object.")
  render_call: bool = Field(False, description="Append the rendered call (`expr=...`) to context diagnostics.")

  @field_validator("import_path")
  @classmethod
  def validate_import_path(cls, v: str) -> str:
    """
    Ensures the import path is a dotted sequence of identifiers.

    Args:
        v (str): The raw import path.

    Returns:
        str: The stripped import path.

    Raises:
        ValueError: If any component is not a valid identifier.
    """
    v_clean = v.strip()
    if not v_clean or not all(part.isidentifier() for part in v_clean.split(".")):
      raise ValueError(f"Invalid import path: '{v}'")
    return v_clean

  @property
  def default_alias(self) -> str:
    """The local name an un-aliased ``from parent import pkg`` binds."""
    return self.import_path.rsplit(".", 1)[-1]

  def rule_for(self, method: str) -> Optional[EntryRule]:
    """Returns the extraction rule for `method`, or None if it is not an entry function."""
    return self.entries.get(method)


_API_REGISTRY: Dict[str, WatchedAPI] = {}


def register_api(api: WatchedAPI) -> WatchedAPI:
  """
  Adds a watched API to the global registry.

  Registering the same name twice replaces the earlier definition, which is
  how configuration overrides are applied.

  Args:
      api: The definition to register.

  Returns:
      WatchedAPI: The registered definition (allows module level assignment).
  """
  _API_REGISTRY[api.name] = api
  return api


def get_api(name: str) -> Optional[WatchedAPI]:
  """
  Looks up a registered API by check name.

  Args:
      name: Check identifier (e.g. 'logcheck').

  Returns:
      The definition, or None if unknown.
  """
  return _API_REGISTRY.get(name)


def resolve_apis(names: List[str]) -> List[WatchedAPI]:
  """
  Resolves a list of check names to definitions, preserving order.

  Raises:
      ConfigError: If a name is not registered.
  """
  resolved = []
  for name in names:
    api = get_api(name)
    if api is None:
      raise ConfigError(f"Unknown check: '{name}'. Available checks: {sorted(_API_REGISTRY)}")
    resolved.append(api)
  return resolved
