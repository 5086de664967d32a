"""
CLI Command Handlers Facade.

Re-exports the handlers from `request_switcheroo.cli.handlers` so the entry
point depends on a single module.
"""

from request_switcheroo.cli.handlers.convert import (
  handle_convert,
  _convert_single_file,
  _print_batch_summary,
)
from request_switcheroo.cli.handlers.rules import handle_check, handle_rules

__all__ = [
  "_convert_single_file",
  "_print_batch_summary",
  "handle_check",
  "handle_convert",
  "handle_rules",
]
