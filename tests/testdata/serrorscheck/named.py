"""An unrelated package imported as `serrors`, the watched one aliased."""

import fake.serrors as serrors
import scion.lib.serrors as errors

err_wrap = errors.new("wrap")
err_base = errors.new("base")
value = 1


def fake_import_ignored():
  serrors.new("some error", "key")
  serrors.wrap(err_wrap, err_base, "key")


def valid():
  errors.new("some error", "key", value, "key", value)
  errors.with_ctx(err_base, "key", value, "key", value)
  errors.wrap(err_wrap, err_base, "key", value, "key", value)
  errors.wrap_str("wrap", err_base, "key", value, "key", value)
