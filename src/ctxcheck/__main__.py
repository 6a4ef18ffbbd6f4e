"""
Entry point for module execution (``python -m ctxcheck``).

This module delegates execution to the CLI handler in ``ctxcheck.cli.__main__``.
"""

import sys

from ctxcheck.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
