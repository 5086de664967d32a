"""
Import Injection.

Applies the import obligations collected while rewriting: one
``from <module> import <Name>, ...`` line per module, inserted after the
module docstring and ``__future__`` imports. Types whose simple name is taken
are imported under the alias chosen by :class:`RequestNamer`. Imports already
present with the same local name are skipped, so applying the same obligation
twice changes nothing.
"""

from typing import Dict, List, Optional

import libcst as cst

from request_switcheroo.core.import_fixer.utils import (
  create_dotted_name,
  existing_from_imports,
  is_docstring,
  is_future_import,
)
from request_switcheroo.core.obligations import ImportLedger


class RequestImportInjector(cst.CSTTransformer):
  """
  Module-level transformer injecting imports for synthesized request types.
  """

  def __init__(self, ledger: ImportLedger, aliases: Optional[Dict[str, str]] = None):
    """
    Args:
        ledger: Obligations to satisfy.
        aliases: Fully-qualified type -> alias to import it as.
    """
    self.ledger = ledger
    self.aliases = dict(aliases or {})
    self.injected: List[str] = []

  def leave_Module(self, original_node: cst.Module, updated_node: cst.Module) -> cst.Module:
    already = existing_from_imports(updated_node)
    injections: List[cst.SimpleStatementLine] = []

    for module_path, names in self.ledger.by_module().items():
      if not module_path:
        # Unqualified types cannot be imported; they must already be in scope.
        continue
      missing = []
      for name in names:
        local = self.aliases.get(f"{module_path}.{name}", name)
        if (module_path, name, local) not in already:
          missing.append((name, local))
      if not missing:
        continue
      stmt = cst.SimpleStatementLine(
        body=[
          cst.ImportFrom(
            module=create_dotted_name(module_path),
            names=[
              cst.ImportAlias(name=cst.Name(name), asname=cst.AsName(name=cst.Name(local)) if local != name else None)
              for name, local in missing
            ],
          )
        ]
      )
      injections.append(stmt)
      listed = ", ".join(name if local == name else f"{name} as {local}" for name, local in missing)
      self.injected.append(f"from {module_path} import {listed}")

    if not injections:
      return updated_node

    body = list(updated_node.body)
    insert_idx = 0
    for i, stmt in enumerate(body):
      if is_docstring(stmt, i) or is_future_import(stmt):
        insert_idx = i + 1
        continue
      break

    return updated_node.with_changes(body=body[:insert_idx] + injections + body[insert_idx:])
