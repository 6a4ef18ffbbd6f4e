"""
Runtime Configuration Store.

Settings are resolved in order of precedence: CLI arguments, the
``[tool.ctxcheck]`` table of the nearest ``pyproject.toml``, defaults.

Example ``pyproject.toml``::

    [tool.ctxcheck]
    checks = ["logcheck", "serrorscheck"]
    strict_unknown_keys = false
    jobs = 4
    exclude = ["tests/testdata/*"]

    [tool.ctxcheck.apis.logcheck]
    import_path = "myproject.log"

    [tool.ctxcheck.apis.auditcheck]
    import_path = "myproject.audit"
    entries = { record = { min_args = 1, context_start = 1 } }
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError

from ctxcheck.apis import WatchedAPI, available_apis, get_api
from ctxcheck.errors import ConfigError

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib


class RuntimeConfig(BaseModel):
  """
  Global configuration container for a checker run.
  """

  checks: Optional[List[str]] = Field(
    None, description="Checks to run. None selects every registered and configured check."
  )
  strict_unknown_keys: bool = Field(False, description="If True, keys of unknown type are reported.")
  jobs: int = Field(1, ge=1, description="Number of files analyzed concurrently.")
  exclude: List[str] = Field(default_factory=list, description="Glob patterns of files to skip.")
  apis: Dict[str, Dict[str, Any]] = Field(
    default_factory=dict, description="Per-check overrides, or complete definitions of new checks."
  )
  source: Optional[Path] = Field(None, description="pyproject.toml the settings were read from.")

  @property
  def effective_checks(self) -> List[str]:
    """
    Names of the checks to run.

    Returns:
        List[str]: The explicit selection, or all registered checks followed
        by checks only defined in `apis`.
    """
    if self.checks is not None:
      return list(self.checks)
    registered = available_apis()
    return registered + [name for name in self.apis if name not in registered]

  def watched_apis(self) -> List[WatchedAPI]:
    """
    Builds the API definitions for the selected checks, applying overrides.

    Overrides replace whole fields: configuring ``entries`` replaces the
    built-in entry table rather than extending it.

    Returns:
        List[WatchedAPI]: One definition per selected check.

    Raises:
        ConfigError: If a check is unknown or an override is invalid.
    """
    resolved = []
    for name in self.effective_checks:
      base = get_api(name)
      override = self.apis.get(name)
      if base is None and override is None:
        raise ConfigError(f"Unknown check: '{name}'. Available checks: {available_apis()}")
      if override is None:
        resolved.append(base)
        continue
      data = base.model_dump() if base is not None else {}
      data.update(override)
      data["name"] = name
      try:
        resolved.append(WatchedAPI.model_validate(data))
      except ValidationError as e:
        raise ConfigError(f"Invalid definition for check '{name}': {e}") from e
    return resolved

  @classmethod
  def load(
    cls,
    checks: Optional[List[str]] = None,
    strict_unknown_keys: Optional[bool] = None,
    jobs: Optional[int] = None,
    exclude: Optional[List[str]] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Args:
        checks (Optional[List[str]]): Override for the check selection.
        strict_unknown_keys (Optional[bool]): Override for strict key typing.
        jobs (Optional[int]): Override for the worker count.
        exclude (Optional[List[str]]): Extra exclusion patterns (added to the configured ones).
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.

    Raises:
        ConfigError: If the TOML file or any setting is invalid.
    """
    start_dir = search_path or Path.cwd()
    toml_config, toml_path = _load_toml_settings(start_dir)

    final_checks = checks if checks else toml_config.get("checks")

    if strict_unknown_keys is not None:
      final_strict = strict_unknown_keys
    else:
      final_strict = toml_config.get("strict_unknown_keys", False)

    final_jobs = jobs if jobs is not None else toml_config.get("jobs", 1)
    final_exclude = [*toml_config.get("exclude", []), *(exclude or [])]

    try:
      return cls(
        checks=final_checks,
        strict_unknown_keys=final_strict,
        jobs=final_jobs,
        exclude=final_exclude,
        apis=toml_config.get("apis", {}),
        source=toml_path,
      )
    except ValidationError as e:
      raise ConfigError(f"Invalid [tool.ctxcheck] configuration: {e}") from e


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches the directory and its parents for 'pyproject.toml' and extracts config.

  The first pyproject.toml found wins, even if it has no ctxcheck table.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The ``[tool.ctxcheck]`` table and the file it was read from.

  Raises:
      ConfigError: If the file exists but is not valid TOML.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to read {toml_path}: {e}") from e
      return data.get("tool", {}).get("ctxcheck", {}), toml_path

  return {}, None
