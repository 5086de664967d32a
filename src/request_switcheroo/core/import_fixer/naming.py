"""
Local Names for Request Types.

A synthesized constructor refers to its request type by a name that must be
bound to that type in the rewritten module. The simple name is used unless
something else in the module already binds it (an import from another
module, a class, a parameter, an assignment, ...). In that case an existing
alias import of the type is reused, or a fresh alias is chosen and imported
as ``from <module> import <Name> as <Alias>``.
"""

import itertools
from typing import Dict, Iterator, Set

import libcst as cst

from request_switcheroo.analysis.symbol_table import get_full_name


class BindingCollector(cst.CSTVisitor):
  """
  Records every name bound anywhere in a module.

  Each name maps to its origins: the import path for import bindings, or an
  empty string for any other kind of binding.
  """

  def __init__(self) -> None:
    self.bindings: Dict[str, Set[str]] = {}

  def _add(self, name: str, origin: str = "") -> None:
    self.bindings.setdefault(name, set()).add(origin)

  def _add_target(self, target: cst.BaseExpression) -> None:
    if isinstance(target, cst.Name):
      self._add(target.value)
    elif isinstance(target, (cst.Tuple, cst.List)):
      for element in target.elements:
        self._add_target(element.value)
    elif isinstance(target, cst.StarredElement):
      self._add_target(target.value)

  def visit_Import(self, node: cst.Import) -> None:
    for alias in node.names:
      full_path = get_full_name(alias.name)
      if alias.asname and isinstance(alias.asname.name, cst.Name):
        self._add(alias.asname.name.value, full_path)
      else:
        root = full_path.split(".")[0]
        self._add(root, root)

  def visit_ImportFrom(self, node: cst.ImportFrom) -> None:
    if isinstance(node.names, cst.ImportStar):
      return
    dots = "." * len(node.relative)
    base_mod = get_full_name(node.module) if node.module else ""
    for alias in node.names:
      import_name = get_full_name(alias.name)
      origin = f"{dots}{base_mod}.{import_name}" if base_mod else f"{dots}{import_name}"
      if alias.asname and isinstance(alias.asname.name, cst.Name):
        self._add(alias.asname.name.value, origin)
      else:
        self._add(import_name, origin)

  def visit_ClassDef(self, node: cst.ClassDef) -> None:
    self._add(node.name.value)

  def visit_FunctionDef(self, node: cst.FunctionDef) -> None:
    self._add(node.name.value)

  def visit_Param(self, node: cst.Param) -> None:
    self._add(node.name.value)

  def visit_AssignTarget(self, node: cst.AssignTarget) -> None:
    self._add_target(node.target)

  def visit_AnnAssign(self, node: cst.AnnAssign) -> None:
    self._add_target(node.target)

  def visit_AugAssign(self, node: cst.AugAssign) -> None:
    self._add_target(node.target)

  def visit_NamedExpr(self, node: cst.NamedExpr) -> None:
    self._add_target(node.target)

  def visit_For(self, node: cst.For) -> None:
    self._add_target(node.target)

  def visit_CompFor(self, node: cst.CompFor) -> None:
    self._add_target(node.target)

  def visit_WithItem(self, node: cst.WithItem) -> None:
    if node.asname is not None:
      self._add_target(node.asname.name)

  def visit_ExceptHandler(self, node: cst.ExceptHandler) -> None:
    if node.name is not None:
      self._add_target(node.name.name)


def collect_bindings(module: cst.Module) -> Dict[str, Set[str]]:
  """
  Scans a module for bound names.

  Args:
      module: The module to scan.

  Returns:
      Dict[str, Set[str]]: ``{name: {origin, ...}}``.
  """
  collector = BindingCollector()
  module.visit(collector)
  return collector.bindings


def _alias_candidates(type_name: str) -> Iterator[str]:
  """
  Yields ``ModelGetObjectRequest``, ``S3ModelGetObjectRequest``, ... then numbered names.
  """
  module, _, simple = type_name.rpartition(".")
  prefix = ""
  for segment in reversed([s for s in module.split(".") if s]):
    prefix = segment[:1].upper() + segment[1:] + prefix
    yield f"{prefix}{simple}"
  for idx in itertools.count(2):
    yield f"{simple}{idx}"


class RequestNamer:
  """
  Chooses, per module, the local name each request type is referred to by.
  """

  def __init__(self, bindings: Dict[str, Set[str]]):
    """
    Args:
        bindings: Names bound in the module, from :func:`collect_bindings`.
    """
    self.bindings = {name: set(origins) for name, origins in bindings.items()}
    self.aliases: Dict[str, str] = {}
    """Fully-qualified type -> alias it must be imported as."""

  def local_name(self, type_name: str) -> str:
    """
    Resolves the name a constructor call of ``type_name`` should use.

    Args:
        type_name: Fully-qualified request type.

    Returns:
        str: The simple name, or an alias when the simple name is taken.
    """
    module, _, simple = type_name.rpartition(".")
    if not module:
      return simple
    if type_name in self.aliases:
      return self.aliases[type_name]

    origins = self.bindings.get(simple, set())
    if origins <= {type_name}:
      self.bindings[simple] = {type_name}
      return simple

    for name, paths in sorted(self.bindings.items()):
      if paths == {type_name}:
        self.aliases[type_name] = name
        return name

    alias = next(c for c in _alias_candidates(type_name) if c not in self.bindings)
    self.bindings[alias] = {type_name}
    self.aliases[type_name] = alias
    return alias
