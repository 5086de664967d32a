"""
Utilities for the Import Injector.

Static helpers for building dotted names, locating the insertion point after
module preambles, and reading existing module-level imports.
"""

from typing import Set, Tuple, Union

import libcst as cst

from request_switcheroo.analysis.symbol_table import get_full_name


def create_dotted_name(name_str: str) -> Union[cst.Name, cst.Attribute]:
  """
  Creates a CST node for a dotted path.

  Args:
      name_str: Dot-separated path (e.g. "amazonaws.s3.model").

  Returns:
      Union[cst.Name, cst.Attribute]: The constructed node.
  """
  parts = name_str.split(".")
  node = cst.Name(parts[0])
  for part in parts[1:]:
    node = cst.Attribute(value=node, attr=cst.Name(part))
  return node


def is_docstring(node: cst.CSTNode, idx: int) -> bool:
  """
  True if ``node`` is the module docstring (a string expression at index 0).
  """
  if idx != 0 or not isinstance(node, cst.SimpleStatementLine):
    return False
  if len(node.body) == 1 and isinstance(node.body[0], cst.Expr):
    return isinstance(node.body[0].value, (cst.SimpleString, cst.ConcatenatedString))
  return False


def is_future_import(node: cst.CSTNode) -> bool:
  """
  True if ``node`` is a ``from __future__ import ...`` line.
  """
  if not isinstance(node, cst.SimpleStatementLine):
    return False
  for small_stmt in node.body:
    if isinstance(small_stmt, cst.ImportFrom) and isinstance(small_stmt.module, cst.Name):
      if small_stmt.module.value == "__future__":
        return True
  return False


def existing_from_imports(module: cst.Module) -> Set[Tuple[str, str, str]]:
  """
  Collects ``(module, name, local name)`` triples imported at module level.

  Args:
      module: The module to scan.

  Returns:
      Set[Tuple[str, str, str]]: Triples such as
      ``("amazonaws.s3.model", "GetObjectRequest", "GetObjectRequest")``.
  """
  found: Set[Tuple[str, str, str]] = set()
  for stmt in module.body:
    if not isinstance(stmt, cst.SimpleStatementLine):
      continue
    for small_stmt in stmt.body:
      if not isinstance(small_stmt, cst.ImportFrom) or small_stmt.module is None or small_stmt.relative:
        continue
      if isinstance(small_stmt.names, cst.ImportStar):
        continue
      mod_name = get_full_name(small_stmt.module)
      for alias in small_stmt.names:
        name = get_full_name(alias.name)
        if alias.asname is None:
          found.add((mod_name, name, name))
        elif isinstance(alias.asname.name, cst.Name):
          found.add((mod_name, name, alias.asname.name.value))
  return found
