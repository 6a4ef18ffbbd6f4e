"""An unrelated package imported as `log`, the watched one aliased."""

import fake.lib.slog as log
import scion.lib.log as slog


def fake_import_ignored():
  log.debug("message", None)
  log.info("message", "a")
  log.warn("message", "b")
  log.error("messsage", None)


def aliased():
  slog.debug("message", "key")  # want `context should be even: len=1 ctx=\["key"\]`
  slog.info("message", "key")  # want `context should be even: len=1 ctx=\["key"\]`
  slog.warn("message", "key")  # want `context should be even: len=1 ctx=\["key"\]`
  slog.error("messsage", "key")  # want `context should be even: len=1 ctx=\["key"\]`
