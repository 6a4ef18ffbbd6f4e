"""Error factories and their context arguments."""

from typing import NewType

from scion.lib import serrors

Key = NewType("Key", str)

UNTYPED = "untyped_key"
TYPED: Key = Key("typed_key")

err_wrap = serrors.new("wrap")
err_base = serrors.new("base")
value = 1


def valid_parity():
  serrors.new("some error")
  serrors.wrap(err_wrap, err_base)
  serrors.wrap_str("wrap", err_base)

  serrors.new("some error", "key", value)
  serrors.with_ctx(err_base, "key", value)
  serrors.wrap(err_wrap, err_base, "key", value)
  serrors.wrap_str("wrap", err_base, "key", value)

  serrors.new("some error", "key", value, "key", value)
  serrors.with_ctx(err_base, "key", value, "key", value)
  serrors.wrap(err_wrap, err_base, "key", value, "key", value)
  serrors.wrap_str("wrap", err_base, "key", value, "key", value)


def valid_types():
  serrors.new("some error", "key", value)
  serrors.new("some error", UNTYPED, value)
  serrors.new("some error", TYPED, value)


def invalid_parity():
  serrors.new("some error", "key")  # want `context should be even: len=1 ctx=\["key"\]`
  serrors.with_ctx(err_base, "key")  # want `context should be even: len=1 ctx=\["key"\]`
  serrors.wrap(err_wrap, err_base, "key")  # want `context should be even: len=1 ctx=\["key"\]`
  serrors.wrap_str("wrap", err_base, "key")  # want `context should be even: len=1 ctx=\["key"\]`

  serrors.new("some error", "key", value, "key")  # want `context should be even: len=3 ctx=\["key",value,"key"\]`
  serrors.with_ctx(err_base, "key", value, "key")  # want `context should be even: len=3 ctx=\["key",value,"key"\]`
  serrors.wrap(err_wrap, err_base, "key", value, "key")  # want `context should be even: len=3 ctx=\["key",value,"key"\]`
  serrors.wrap_str("wrap", err_base, "key", value, "key")  # want `context should be even: len=3 ctx=\["key",value,"key"\]`


def invalid_type():
  serrors.new("some error", value, value)  # want `key should be string: type="int" name="value"`
  serrors.with_ctx(err_base, value, value)  # want `key should be string: type="int" name="value"`
  serrors.wrap(err_wrap, err_base, value, value)  # want `key should be string: type="int" name="value"`
  serrors.wrap_str("wrap", err_base, value, value)  # want `key should be string: type="int" name="value"`


def no_ctx():
  serrors.with_ctx(err_base)  # want `should have context:.*`
