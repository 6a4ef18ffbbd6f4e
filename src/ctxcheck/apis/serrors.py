"""
Structured error construction (``scion.lib.serrors``).

Factories take leading positional arguments followed by key/value context::

    serrors.new("no route", "dst", dst)
    serrors.with_ctx(err, "path", p)
    serrors.wrap(msg_err, cause, "attempt", n)
    serrors.wrap_str("lookup failed", cause, "key", k)

``with_ctx`` without any context is pointless and reported.
"""

from ctxcheck.apis.base import EntryRule, WatchedAPI, register_api

SERRORS_API = register_api(
  WatchedAPI(
    name="serrorscheck",
    doc="reports invalid serrors calls",
    import_path="scion.lib.serrors",
    entries={
      "new": EntryRule(min_args=2, context_start=1),
      "with_ctx": EntryRule(min_args=2, context_start=1, requires_context=True),
      "wrap": EntryRule(min_args=3, context_start=2),
      "wrap_str": EntryRule(min_args=3, context_start=2),
    },
  )
)
