"""Spread and keyword arguments of error factories."""

from scion.lib import serrors

CTX = ["key", 1]
OPTS = {"key": 1}


def spread(err):
  serrors.new("message", *CTX)
  serrors.new("message", "key", *CTX)
  serrors.with_ctx(err, *CTX)
  serrors.wrap("message", err, "key", *CTX)


def keywords(err):
  serrors.new("message", "key", **OPTS)  # want `context should be even: len=1 ctx=\["key"\]$`
  serrors.with_ctx(err, key="value")  # want `should have context: serrors.with_ctx\(err, key="value"\)`
  serrors.with_ctx(err, **OPTS)  # want `should have context:`


def nested(err):
  serrors.wrap("message", serrors.new("inner", "key"), "key", 1)  # want `context should be even: len=1 ctx=\["key"\]`
