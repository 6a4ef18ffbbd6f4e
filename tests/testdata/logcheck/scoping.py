"""Which receivers resolve to the watched package."""

import scion.lib.log
from scion.lib import log

LOGGER = log.root()


class Recorder:
  def info(self, *args):
    pass


class Service:
  def __init__(self):
    self.logger = log.new()

  def run(self):
    self.logger.info("message", "key")


def dotted_import():
  scion.lib.log.info("message", "key")  # want `context should be even: len=1 ctx=\["key"\]`


def module_logger():
  LOGGER.info("message", "key")  # want `context should be even: len=1 ctx=\["key"\]`


def annotated_logger():
  logger: object = log.new()
  logger.info("message", "key")  # want `context should be even: len=1 ctx=\["key"\]`


def nested_calls():
  log.info("outer", "key", log.new().info("inner", "key"))  # want `len=1 ctx=\["key"\] expr="log.new\(\).info`


def shadowed_by_parameter(log):
  log.info("message", "key")


def shadowed_by_local():
  log = Recorder()
  log.info("message", "key")


def rebound_logger():
  logger = log.new()
  logger = log.root()
  logger.info("message", "key")


def unpacked_logger():
  logger, other = log.new(), log.root()
  logger.info("message", "key")


def keyword_context():
  log.info("message", key="value")
  log.info("message", "key", value=1)  # want `context should be even: len=1 ctx=\["key"\]`


def not_entry_functions():
  log.set_level("debug", "key")
  log.new("key").handler("message", "key")


def unrelated_local_import():
  from other import log

  log.info("message", "key")
