"""
Entry point for module execution (``python -m request_switcheroo``).

This module delegates execution to the CLI handler in ``request_switcheroo.cli.__main__``.
"""

import sys

from request_switcheroo.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
