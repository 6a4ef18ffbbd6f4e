"""Leveled log calls, loggers and their context arguments."""

from typing import NewType

from scion.lib import log

Key = NewType("Key", str)

UNTYPED = "untyped_key"
TYPED: Key = Key("typed_key")

value = 1


def valid_parity():
  log.trace("message")
  log.debug("message")
  log.info("message")
  log.warn("message")
  log.error("message")
  log.crit("message")

  log.trace("message", "key", value)
  log.debug("message", "key", value)
  log.info("message", "key", value)
  log.warn("message", "key", value)
  log.error("message", "key", value)
  log.crit("message", "key", value)

  log.trace("message", "key", value, "key", value)
  log.debug("message", "key", value, "key", value)
  log.info("message", "key", value, "key", value)
  log.warn("message", "key", value, "key", value)
  log.error("message", "key", value, "key", value)
  log.crit("message", "key", value, "key", value)


def valid_types():
  log.debug("message", "key", value)
  log.debug("message", UNTYPED, value)
  log.debug("message", TYPED, value)


def invalid_parity():
  log.trace("message", "key")  # want `context should be even: len=1 ctx=\["key"\]`
  log.debug("message", "key")  # want `context should be even: len=1 ctx=\["key"\]`
  log.info("message", "key")  # want `context should be even: len=1 ctx=\["key"\]`
  log.warn("message", "key")  # want `context should be even: len=1 ctx=\["key"\]`
  log.error("message", "key")  # want `context should be even: len=1 ctx=\["key"\]`
  log.crit("message", "key")  # want `context should be even: len=1 ctx=\["key"\]`

  log.trace("message", "key", value, "key")  # want `context should be even: len=3 ctx=\["key",value,"key"\]`
  log.debug("message", "key", value, "key")  # want `context should be even: len=3 ctx=\["key",value,"key"\]`
  log.info("message", "key", value, "key")  # want `context should be even: len=3 ctx=\["key",value,"key"\]`
  log.warn("message", "key", value, "key")  # want `context should be even: len=3 ctx=\["key",value,"key"\]`
  log.error("message", "key", value, "key")  # want `context should be even: len=3 ctx=\["key",value,"key"\]`
  log.crit("message", "key", value, "key")  # want `context should be even: len=3 ctx=\["key",value,"key"\]`


def invalid_type():
  log.info("message", value, value)  # want `key should be string: type="int" name="value"`


def loggers(ctx):
  logger = log.from_ctx(ctx)
  logger_n = log.new()
  logger_r = log.root()
  logger.info("message", "key")  # want `context should be even: len=1 ctx=\["key"\]`
  logger_n.info("message", "key")  # want `context should be even: len=1 ctx=\["key"\]`
  logger_r.info("message", "key")  # want `context should be even: len=1 ctx=\["key"\]`

  log.from_ctx(ctx).info("message", "key")  # want `context should be even: len=1 ctx=\["key"\]`
  log.new().info("message", "key")  # want `context should be even: len=1 ctx=\["key"\]`
  log.root().info("message", "key")  # want `context should be even: len=1 ctx=\["key"\]`
