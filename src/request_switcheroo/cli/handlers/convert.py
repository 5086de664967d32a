"""
Convert Command Handler.

This module implements the logic for the `request-switcheroo convert` command.
It orchestrates:
1. Configuration loading (pyproject.toml plus CLI overrides).
2. One-time catalog construction.
3. Source rewriting via the Engine, file by file.
4. Output writing and trace logging.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional

from rich.markup import escape
from rich.table import Table

from request_switcheroo.config import RuntimeConfig
from request_switcheroo.core.conversion_result import ConversionResult
from request_switcheroo.core.engine import ASTEngine
from request_switcheroo.core.errors import CatalogError
from request_switcheroo.enums import DuplicatePolicy
from request_switcheroo.utils.console import (
  console,
  log_error,
  log_info,
  log_success,
  log_warning,
)


def handle_convert(
  input_path: Path,
  output_path: Optional[Path],
  owner: Optional[str] = None,
  model_package: Optional[str] = None,
  rule_files: Optional[List[Path]] = None,
  duplicates: Optional[DuplicatePolicy] = None,
  keyword_arguments: Optional[bool] = None,
  hints: Optional[Dict[str, str]] = None,
  json_trace_path: Optional[Path] = None,
) -> int:
  """
  Handles the 'convert' command execution.

  Args:
      input_path: Path to the source file or directory to convert.
      output_path: Destination file (or directory, for directory input).
      owner: Override for the legacy client type.
      model_package: Override for the request package prefix.
      rule_files: Extra JSON rule files.
      duplicates: Override for the duplicate policy.
      keyword_arguments: Override for keyword rendering of request fields.
      hints: Receiver type hints (variable name -> type).
      json_trace_path: Optional path to dump execution trace JSON.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  if not input_path.exists():
    log_error(f"Input not found: {input_path}")
    return 1

  try:
    config = RuntimeConfig.load(
      owner_type=owner,
      model_package=model_package,
      duplicate_policy=duplicates,
      rule_files=rule_files,
      keyword_arguments=keyword_arguments,
      receiver_hints=hints,
      search_path=input_path if input_path.is_dir() else input_path.parent,
    )
    engine = ASTEngine(config=config)
  except (CatalogError, ValueError) as e:
    log_error(f"Invalid rule catalog: {escape(str(e))}")
    return 1

  batch_results: Dict[str, ConversionResult] = {}

  if input_path.is_file():
    result = _convert_single_file(input_path, output_path, engine, json_trace_path)
    batch_results[input_path.name] = result
    if not result.success:
      return 1

  elif input_path.is_dir():
    if not output_path:
      log_error("Directory conversion requires --out destination directory.")
      return 1

    py_files = sorted(input_path.rglob("*.py"))
    if not py_files:
      log_warning(f"No .py files found in {input_path}")
      return 0

    log_info(f"Processing {len(py_files)} files from {input_path}...")

    for src_file in py_files:
      rel_path = src_file.relative_to(input_path)
      batch_trace = None
      if json_trace_path:
        batch_trace = (output_path / rel_path).with_suffix(".trace.json")

      result = _convert_single_file(src_file, output_path / rel_path, engine, batch_trace)
      batch_results[str(rel_path)] = result

  _print_batch_summary(batch_results)
  return 0 if all(r.success for r in batch_results.values()) else 1


def _convert_single_file(
  input_path: Path,
  output_path: Optional[Path],
  engine: ASTEngine,
  json_trace_path: Optional[Path] = None,
) -> ConversionResult:
  """
  Helper to execute the rewrite on a single file.

  Args:
      input_path: Source file path.
      output_path: Destination file path. The code is printed if None.
      engine: Configured engine (shared catalog).
      json_trace_path: Path to save trace event logs.

  Returns:
      ConversionResult: Result object containing status and code.
  """
  try:
    with open(input_path, "rt", encoding="utf-8") as f:
      code = f.read()
  except (OSError, UnicodeDecodeError) as e:
    log_error(f"Failed to read {input_path}: {escape(str(e))}")
    return ConversionResult(success=False, errors=[str(e)])

  result = engine.run(code)

  if json_trace_path and result.trace_events:
    try:
      json_trace_path.parent.mkdir(parents=True, exist_ok=True)
      with open(json_trace_path, "wt", encoding="utf-8") as f:
        json.dump(result.trace_events, f, indent=2)
      log_info(f"Trace saved to [path]{json_trace_path}[/path]")
    except OSError as e:
      log_error(f"Failed to write trace: {escape(str(e))}")

  if not result.success:
    log_error(f"Failed to convert {input_path}: {escape('; '.join(result.errors))}")
    return result

  if output_path:
    try:
      output_path.parent.mkdir(parents=True, exist_ok=True)
      with open(output_path, "wt", encoding="utf-8") as f:
        f.write(result.code)
    except OSError as e:
      log_error(f"Failed to write {output_path}: {escape(str(e))}")
      return ConversionResult(code=result.code, success=False, errors=[str(e)])
    log_success(
      f"Rewrote {result.rewrites} call(s): [path]{input_path}[/path] -> [path]{output_path}[/path]"
    )
  else:
    # Print to stdout if no output
    print(result.code, end="")

  return result


def _print_batch_summary(results: Dict[str, ConversionResult]) -> None:
  """
  Renders a summary table of conversion results to the console.

  Args:
      results: Dictionary mapping filenames to conversion results.
  """
  total = len(results)
  failures = sum(1 for r in results.values() if not r.success)
  rewrites = sum(r.rewrites for r in results.values())

  if failures == 0 and total <= 1:
    return

  table = Table(title="Rewrite Report")
  table.add_column("File", style="cyan")
  table.add_column("Status", justify="center")
  table.add_column("Rewrites", justify="right")
  table.add_column("Unresolved", justify="right")
  table.add_column("Imports / Issues")

  for filename, res in results.items():
    if res.success:
      status = "✅ Rewritten" if res.changed else "➖ Unchanged"
      detail = "; ".join(res.imports)
    else:
      status = "❌ Failed"
      detail = escape("; ".join(res.errors)) if res.errors else "Unknown Error"
    table.add_row(filename, status, str(res.rewrites), str(res.unresolved), detail)

  console.print(table)
  if failures == 0:
    log_success(f"Batch Complete: {total}/{total} files processed, {rewrites} call(s) rewritten.")
  else:
    console.print(f"\n[bold]Summary:[/bold] {total - failures} Passed, {failures} Failed.")
