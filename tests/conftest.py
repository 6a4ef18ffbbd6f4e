"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Fixture-file assertions driven by ``# want `regex``` comments.
- Global registry isolation to prevent tests registering custom APIs from leaking.
"""

import re
import sys
from pathlib import Path
from typing import Dict, List

import pytest

# Add src to path so we can import 'ctxcheck' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from ctxcheck.apis.base import _API_REGISTRY  # noqa: E402
from ctxcheck.core.diagnostics import Diagnostic  # noqa: E402
from ctxcheck.core.engine import check_source  # noqa: E402

TESTDATA = Path(__file__).parent / "testdata"

_WANT_COMMENT = re.compile(r"#\s*want\s+(.*)$")
_WANT_PATTERN = re.compile(r"`([^`]*)`")


class WantAssert:
  """
  Checks a fixture file against the ``# want `regex``` comments it carries.

  Every diagnostic must be matched by a want on its line, and every want
  must match a distinct diagnostic on its line.
  """

  def collect_wants(self, source: str) -> Dict[int, List[str]]:
    wants: Dict[int, List[str]] = {}
    for lineno, line in enumerate(source.splitlines(), start=1):
      match = _WANT_COMMENT.search(line)
      if match:
        wants[lineno] = _WANT_PATTERN.findall(match.group(1))
    return wants

  def assert_file(self, relpath: str, checks: List[str]) -> List[Diagnostic]:
    """
    Runs `checks` on ``tests/testdata/<relpath>`` and compares with its wants.

    Returns:
        The diagnostics produced, for further assertions.
    """
    path = TESTDATA / relpath
    source = path.read_text(encoding="utf-8")
    diagnostics = check_source(source, checks=checks, path=relpath)
    wants = self.collect_wants(source)

    problems = []
    by_line: Dict[int, List[Diagnostic]] = {}
    for d in diagnostics:
      by_line.setdefault(d.line, []).append(d)

    for lineno in sorted(set(by_line) | set(wants)):
      pending = list(by_line.get(lineno, []))
      for pattern in wants.get(lineno, []):
        hit = next((d for d in pending if re.search(pattern, d.message)), None)
        if hit is None:
          problems.append(f"{relpath}:{lineno}: no diagnostic matching {pattern!r}")
        else:
          pending.remove(hit)
      for d in pending:
        problems.append(f"{relpath}:{lineno}: unexpected diagnostic: {d.message}")

    assert not problems, "\n".join(problems)
    return diagnostics


@pytest.fixture
def want():
  """Fixture to assert a testdata file produces exactly its wanted diagnostics."""
  return WantAssert()


@pytest.fixture(autouse=True)
def isolate_api_registry():
  """
  Ensures that APIs registered by a test do not leak into other tests.
  """
  original_registry = _API_REGISTRY.copy()
  yield
  _API_REGISTRY.clear()
  _API_REGISTRY.update(original_registry)
