"""
ctxcheck Package.

A static checker for structured logging and error construction calls. It
finds calls to watched APIs (such as ``log.info(msg, *ctx)`` or
``serrors.wrap(msg, err, *ctx)``) and verifies that the trailing context
arguments form key/value pairs with string keys.

Usage
-----

Checking a String
^^^^^^^^^^^^^^^^^

.. code-block:: python

    import ctxcheck
    code = '''
    from scion.lib import log
    log.info("started", "port")
    '''
    for d in ctxcheck.check_source(code):
        print(d.format())
    # <string>:3:21: [logcheck] context should be even: len=1 ctx=["port"] expr="..."

Checking Files
^^^^^^^^^^^^^^

.. code-block:: python

    from pathlib import Path
    from ctxcheck import CheckEngine, RuntimeConfig

    engine = CheckEngine(RuntimeConfig.load(checks=["serrorscheck"]))
    result = engine.run([Path("src")])
    print(result.exit_code)
"""

__version__ = "0.1.0"

from ctxcheck.apis import EntryRule, WatchedAPI, available_apis, get_api, register_api
from ctxcheck.config import RuntimeConfig
from ctxcheck.core.diagnostics import Diagnostic
from ctxcheck.core.engine import analyze, analyze_module, check_source
from ctxcheck.core.runner import CheckEngine, FileResult, RunResult

__all__ = [
  "CheckEngine",
  "Diagnostic",
  "EntryRule",
  "FileResult",
  "RunResult",
  "RuntimeConfig",
  "WatchedAPI",
  "__version__",
  "analyze",
  "analyze_module",
  "available_apis",
  "check_source",
  "get_api",
  "register_api",
]
