"""
Main Entry Point for request-switcheroo CLI.

This module handles argument parsing and dispatches to specific command
handlers defined in `request_switcheroo.cli.commands`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from request_switcheroo import __version__
from request_switcheroo.cli import commands
from request_switcheroo.config import parse_cli_key_values
from request_switcheroo.enums import DuplicatePolicy, RuleShape


def _add_catalog_arguments(parser: argparse.ArgumentParser) -> None:
  parser.add_argument("--owner", default=None, help="Legacy client type (default: from toml)")
  parser.add_argument("--model-package", default=None, help="Package prefix of request types (default: from toml)")
  parser.add_argument(
    "--rules",
    nargs="+",
    type=Path,
    default=None,
    help="Extra JSON rule files, appended after the default table",
  )
  parser.add_argument(
    "--duplicates",
    choices=[p.value for p in DuplicatePolicy],
    default=None,
    help="How repeated signatures are handled (default: reject)",
  )


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the appropriate handler function.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="request-switcheroo: Legacy client call to request object rewriter")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: CONVERT ---
  cmd_conv = subparsers.add_parser("convert", help="Rewrite a Python file or directory")
  cmd_conv.add_argument("path", type=Path, help="Input source file or directory")
  cmd_conv.add_argument("--out", type=Path, help="Output destination (file or dir)")
  _add_catalog_arguments(cmd_conv)
  cmd_conv.add_argument(
    "--positional",
    action="store_true",
    default=None,
    help="Pass request fields positionally instead of as keywords (Overrides config)",
  )
  cmd_conv.add_argument(
    "--hint",
    nargs="*",
    help="Receiver type hints in name=Type format (e.g. client=amazonaws.s3.AmazonS3)",
  )
  cmd_conv.add_argument(
    "--json-trace", type=Path, default=None, help="Dump full execution trace (events, diffs) to a JSON file."
  )

  # --- Command: RULES ---
  cmd_rules = subparsers.add_parser("rules", help="Show the rule catalog")
  _add_catalog_arguments(cmd_rules)
  cmd_rules.add_argument(
    "--shape",
    choices=[s.value for s in RuleShape],
    default=None,
    help="Only show one catalog bucket",
  )

  # --- Command: CHECK ---
  cmd_check = subparsers.add_parser("check", help="Validate the rule catalog (arity, duplicates, rule files)")
  _add_catalog_arguments(cmd_check)

  args = parser.parse_args(argv)
  duplicates = DuplicatePolicy(args.duplicates) if args.duplicates else None

  if args.command == "convert":
    hints = parse_cli_key_values(args.hint)
    keyword_arguments = False if args.positional else None
    return commands.handle_convert(
      args.path,
      args.out,
      owner=args.owner,
      model_package=args.model_package,
      rule_files=args.rules,
      duplicates=duplicates,
      keyword_arguments=keyword_arguments,
      hints=hints,
      json_trace_path=args.json_trace,
    )

  elif args.command == "rules":
    shape = RuleShape(args.shape) if args.shape else None
    return commands.handle_rules(args.owner, args.model_package, args.rules, duplicates, shape)

  elif args.command == "check":
    return commands.handle_check(args.owner, args.model_package, args.rules, duplicates)

  return 1  # pragma: no cover


if __name__ == "__main__":
  sys.exit(main())
