"""
Rules and Check Command Handlers.

`rules` renders the frozen catalog as a table in evaluation order; `check`
builds it and reports whether the rule table is consistent.
"""

from pathlib import Path
from typing import List, Optional

from rich.markup import escape
from rich.table import Table

from request_switcheroo.config import RuntimeConfig
from request_switcheroo.core.errors import CatalogError
from request_switcheroo.enums import DuplicatePolicy, RuleShape
from request_switcheroo.semantics.catalog import BUCKET_ORDER, RuleCatalog
from request_switcheroo.semantics.manager import load_catalog
from request_switcheroo.utils.console import console, log_error, log_success


def _build(
  owner: Optional[str],
  model_package: Optional[str],
  rule_files: Optional[List[Path]],
  duplicates: Optional[DuplicatePolicy],
) -> Optional[RuleCatalog]:
  try:
    config = RuntimeConfig.load(
      owner_type=owner,
      model_package=model_package,
      duplicate_policy=duplicates,
      rule_files=rule_files,
    )
    return load_catalog(config)
  except (CatalogError, ValueError) as e:
    log_error(f"Invalid rule catalog: {escape(str(e))}")
    return None


def handle_rules(
  owner: Optional[str] = None,
  model_package: Optional[str] = None,
  rule_files: Optional[List[Path]] = None,
  duplicates: Optional[DuplicatePolicy] = None,
  shape: Optional[RuleShape] = None,
) -> int:
  """
  Handles 'rules' command.

  Args:
      owner: Override for the legacy client type.
      model_package: Override for the request package prefix.
      rule_files: Extra JSON rule files.
      duplicates: Override for the duplicate policy.
      shape: Restrict output to one bucket.

  Returns:
      int: Exit code.
  """
  catalog = _build(owner, model_package, rule_files, duplicates)
  if catalog is None:
    return 1

  shapes = [shape] if shape else [RuleShape.SPECIAL, *BUCKET_ORDER]

  table = Table(title="Rule Catalog")
  table.add_column("Bucket", style="dim")
  table.add_column("Method", style="cyan")
  table.add_column("Parameters")
  table.add_column("Request Type", style="green")
  table.add_column("Fields")

  for bucket_shape in shapes:
    for rule in catalog.bucket(bucket_shape).values():
      table.add_row(
        bucket_shape.value,
        rule.pattern.method_name,
        ", ".join(t.rsplit(".", 1)[-1] for t in rule.pattern.param_types),
        rule.target_simple_name,
        ", ".join(rule.field_names),
      )

  console.print(table)
  return 0


def handle_check(
  owner: Optional[str] = None,
  model_package: Optional[str] = None,
  rule_files: Optional[List[Path]] = None,
  duplicates: Optional[DuplicatePolicy] = None,
) -> int:
  """
  Handles 'check' command.

  Returns:
      int: 0 if the catalog builds, 1 otherwise.
  """
  catalog = _build(owner, model_package, rule_files, duplicates)
  if catalog is None:
    return 1
  counts = ", ".join(
    f"{s.value}={len(catalog.bucket(s))}" for s in (RuleShape.SPECIAL, *BUCKET_ORDER)
  )
  log_success(f"Catalog OK: {len(catalog)} rules ({counts})")
  return 0
