"""
Structured logging facade (``scion.lib.log``).

Leveled methods take a message followed by key/value context::

    log.info("connection lost", "peer", addr, "attempt", n)

Loggers returned by ``new``, ``root`` and ``from_ctx`` expose the same
leveled methods.
"""

from ctxcheck.apis.base import EntryRule, WatchedAPI, register_api

_LEVEL = EntryRule(min_args=2, context_start=1)

LOG_API = register_api(
  WatchedAPI(
    name="logcheck",
    doc="reports invalid log calls",
    import_path="scion.lib.log",
    entries={level: _LEVEL for level in ("trace", "debug", "info", "warn", "error", "crit")},
    constructors=frozenset({"from_ctx", "new", "root"}),
    render_call=True,
  )
)
