"""
Tests for the Context Checking Engine.

Verifies:
1. End-to-end behaviour on the canonical scenarios (parity, key type,
   bound loggers, missing context, unrelated imports).
2. Exact message formatting and positions.
3. The `# want` annotated fixtures under tests/testdata.
4. Determinism and custom API definitions.
"""

from pathlib import Path

import libcst as cst
import pytest

from ctxcheck.apis import EntryRule, WatchedAPI, register_api
from ctxcheck.core.engine import analyze_module, check_source
from ctxcheck.enums import ViolationKind
from ctxcheck.errors import ConfigError

LOG_HEADER = "from scion.lib import log\nv = 1\n"
SERRORS_HEADER = "from scion.lib import serrors\n"
TESTDATA_LOG = Path(__file__).parent.parent / "testdata" / "logcheck"


def test_scenario_odd_context():
  diags = check_source(LOG_HEADER + 'log.info("m", "key")\n', checks=["logcheck"])
  assert len(diags) == 1
  d = diags[0]
  assert d.message == r'context should be even: len=1 ctx=["key"] expr="log.info(\"m\", \"key\")"'
  assert (d.line, d.column) == (3, 15)
  assert d.kind is ViolationKind.PARITY
  assert d.check == "logcheck"
  assert d.params["length"] == 1
  assert d.params["ctx"] == ['"key"']


def test_scenario_odd_context_three_elements():
  diags = check_source(LOG_HEADER + 'log.info("m", "key", v, "key")\n', checks=["logcheck"])
  assert len(diags) == 1
  assert diags[0].message.startswith('context should be even: len=3 ctx=["key",v,"key"]')


def test_scenario_non_string_key():
  diags = check_source(LOG_HEADER + 'log.info("m", v, v)\n', checks=["logcheck"])
  assert len(diags) == 1
  d = diags[0]
  assert d.message.startswith('key should be string: type="int" name="v"')
  assert d.kind is ViolationKind.KEY_TYPE
  assert (d.line, d.column) == (3, 15)


def test_scenario_bound_logger():
  code = LOG_HEADER + 'x = log.new()\nx.info("m", "key")\n'
  diags = check_source(code, checks=["logcheck"])
  assert len(diags) == 1
  assert diags[0].message == r'context should be even: len=1 ctx=["key"] expr="x.info(\"m\", \"key\")"'
  assert diags[0].line == 4


def test_scenario_missing_context():
  diags = check_source(SERRORS_HEADER + "serrors.with_ctx(err)\n", checks=["serrorscheck"])
  assert len(diags) == 1
  d = diags[0]
  assert d.message == "should have context: serrors.with_ctx(err)"
  assert d.kind is ViolationKind.MISSING_CONTEXT
  assert (d.line, d.column) == (2, 1)


def test_scenario_unrelated_package():
  code = """
import fake.log as log
from other import serrors

log.info("m", "key")
serrors.with_ctx(err)
"""
  assert check_source(code) == []


def test_serrors_messages_have_no_call_suffix():
  diags = check_source(SERRORS_HEADER + 'serrors.new("m", "key")\n', checks=["serrorscheck"])
  assert [d.message for d in diags] == ['context should be even: len=1 ctx=["key"]']


def test_multiline_call_position():
  code = LOG_HEADER + 'log.info(\n    "m",\n    "key",\n)\n'
  diags = check_source(code, checks=["logcheck"])
  assert (diags[0].line, diags[0].column) == (5, 5)
  assert "expr=" in diags[0].message


def test_both_checks_run_by_default():
  code = """
from scion.lib import log, serrors
log.info("m", "key")
serrors.with_ctx(err)
"""
  diags = check_source(code)
  assert [d.check for d in diags] == ["logcheck", "serrorscheck"]


def test_diagnostics_sorted_across_checks():
  code = """
from scion.lib import log, serrors
serrors.new("m", 1, 2)
log.info("m", "key")
"""
  diags = check_source(code)
  assert [d.line for d in diags] == [3, 4]


def test_strict_unknown_keys():
  code = LOG_HEADER + 'log.info("m", mystery, 1)\n'
  assert check_source(code, checks=["logcheck"]) == []
  diags = check_source(code, checks=["logcheck"], strict_unknown_keys=True)
  assert len(diags) == 1
  assert diags[0].message.startswith('key should be string: type="unknown" name="mystery"')


def test_unrelated_import_in_function_is_ignored():
  code = 'from scion.lib import log\n\n\ndef helper():\n    from other import log\n    log.info("m", "key")\n'
  assert check_source(code, checks=["logcheck"]) == []


@pytest.mark.parametrize(
  "body",
  [
    'k = 1\n[log.info("m", k, 1) for k in names]\n',
    'k = 1\nf = lambda k: log.info("m", k, 1)\n',
    'try:\n    key = compute()\nexcept ValueError:\n    key = 0\nlog.info("m", key, 1)\n',
  ],
)
def test_nested_scopes_and_handlers_do_not_leak_types(body):
  assert check_source(LOG_HEADER + body, checks=["logcheck"]) == []


def test_unknown_check_name():
  with pytest.raises(ConfigError):
    check_source("x = 1\n", checks=["nope"])


def test_syntax_error_propagates():
  with pytest.raises(cst.ParserSyntaxError):
    check_source("def (:\n")


def test_analysis_is_deterministic():
  code = (TESTDATA_LOG / "fail.py").read_text(encoding="utf-8")
  first = check_source(code, checks=["logcheck"])
  second = check_source(code, checks=["logcheck"])
  assert first == second
  assert len(first) == 19


def test_analyze_module_reuses_parsed_tree():
  module = cst.parse_module(LOG_HEADER + 'log.info("m", "key")\n')
  api = WatchedAPI(name="plain", import_path="scion.lib.log", entries={"info": EntryRule(min_args=2, context_start=1)})
  diags = analyze_module(module, [api])
  assert len(diags) == 1
  assert diags[0].check == "plain"
  assert "expr=" not in diags[0].message
  # The input tree is not mutated by the metadata pass
  assert module.code == LOG_HEADER + 'log.info("m", "key")\n'


def test_custom_api_definition():
  """
  Scenario: A project registers its own structured audit helper.
  Expectation: Its entry rule and constructors apply like the built-in ones.
  """
  register_api(
    WatchedAPI(
      name="auditcheck",
      import_path="acme.audit",
      entries={"record": EntryRule(min_args=1, context_start=1, requires_context=True)},
      constructors=frozenset({"session"}),
    )
  )
  code = """
from acme import audit
audit.record("user", "id")
audit.session().record("user", 1, "id")
audit.record()
"""
  diags = check_source(code, checks=["auditcheck"])
  assert [d.kind for d in diags] == [ViolationKind.PARITY, ViolationKind.KEY_TYPE, ViolationKind.MISSING_CONTEXT]


# --- Fixture files ---


@pytest.mark.parametrize("name", ["fail.py", "named.py", "keys.py", "scoping.py"])
def test_logcheck_fixtures(want, name):
  want.assert_file(f"logcheck/{name}", checks=["logcheck"])


@pytest.mark.parametrize("name", ["fail.py", "named.py", "spread.py"])
def test_serrorscheck_fixtures(want, name):
  want.assert_file(f"serrorscheck/{name}", checks=["serrorscheck"])


def test_fixture_of_other_check_is_silent():
  """
  Scenario: Running logcheck on files that only import serrors.
  Expectation: The file is skipped without diagnostics.
  """
  code = (TESTDATA_LOG.parent / "serrorscheck" / "fail.py").read_text(encoding="utf-8")
  assert check_source(code, checks=["logcheck"]) == []
