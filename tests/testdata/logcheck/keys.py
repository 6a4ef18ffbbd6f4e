"""Statically typed context keys."""

from enum import Enum, StrEnum
from typing import Any, Final, NewType, Optional

from scion.lib import log

Key = NewType("Key", str)
ID = NewType("ID", int)


class Field(StrEnum):
  PEER = "peer"


class Level(Enum):
  LOW = 1


class Label(str):
  pass


PEER: Final = "peer"
COUNT = 3
typed: Key = Key("typed")


def valid_keys(name: str, prefix: "Key"):
  log.info("message", "peer", 1)
  log.info("message", f"peer_{COUNT}", 1)
  log.info("message", "pe" "er", 1)
  log.info("message", PEER, 1)
  log.info("message", typed, 1)
  log.info("message", prefix, 1)
  log.info("message", Key("k"), 1)
  log.info("message", Field.PEER, 1)
  log.info("message", Label("peer"), 1)
  log.info("message", name, 1)
  log.info("message", name.upper(), 1)
  log.info("message", name + "_id", 1)
  log.info("message", "peer" if COUNT else "count", 1)
  log.info("message", unknown_name, 1)


def invalid_keys(maybe: Optional[str], raw: bytes, anything: Any, obj: object):
  log.info("message", 1, 1)  # want `key should be string: type="int" name="1"`
  log.info("message", COUNT, 1)  # want `key should be string: type="int" name="COUNT"`
  log.info("message", 3.5, 1)  # want `key should be string: type="float" name="3.5"`
  log.info("message", None, 1)  # want `key should be string: type="None" name="None"`
  log.info("message", raw, 1)  # want `key should be string: type="bytes" name="raw"`
  log.info("message", ID(7), 1)  # want `key should be string: type="ID" name="ID\(7\)"`
  log.info("message", Level.LOW, 1)  # want `key should be string: type="Level" name="Level.LOW"`
  log.info("message", maybe, 1)  # want `key should be string: type="Union\[None, str\]" name="maybe"`
  log.info("message", Field, 1)  # want `key should be string: type="type\[Field\]" name="Field"`
  log.info("message", len(raw), 1)  # want `key should be string: type="int" name="len\(raw\)"`
  log.info("message", anything, 1)  # want `key should be string: type="Any" name="anything"`
  log.info("message", obj, 1)  # want `key should be string: type="object" name="obj"`


def several_violations():
  log.info("message", 1, "v", 2, "w")  # want `name="1"` `name="2"`
  log.info("message", 1)  # want `context should be even: len=1 ctx=\[1\]` `key should be string: type="int" name="1"`


def names_rebound_in_nested_scopes(names):
  k = 1
  [log.info("message", k, 1) for k in names]
  {k: log.info("message", k, 1) for k in names}
  callback = lambda k: log.info("message", k, 1)
  log.info("message", k, 1)  # want `key should be string: type="int" name="k"`


def keys_assigned_in_try():
  try:
    key = compute()
  except ValueError:
    key = 0
  log.info("message", key, 1)

  try:
    count = 1
  except ValueError:
    count = 2
  log.info("message", count, 1)  # want `key should be string: type="int" name="count"`
