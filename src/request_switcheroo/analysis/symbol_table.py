"""
Symbol Table and Static Type Resolution.

The call matcher needs fully-qualified static types for each call receiver
and argument. Python source carries them only partially, so this pass infers
them conservatively before rewriting:

1.  **Literals**: ``"b"`` is ``builtins.str``, ``3`` is ``builtins.int``, etc.
2.  **Imports**: ``from amazonaws.s3 import AmazonS3`` binds ``AmazonS3`` to its path.
3.  **Annotations**: parameters and annotated assignments (``s3: AmazonS3``).
4.  **Construction**: calling an imported class, or a configured factory
    (``AmazonS3ClientBuilder.defaultClient()``), yields an instance.
5.  **Attributes of self**: ``self.s3 = AmazonS3()`` inside a class.
6.  **Control Flow**: divergent branch types collapse to a Union, which is
    treated as unresolved.
7.  **Shadowing**: any other binding of a name (unannotated parameters, loop,
    ``with``, ``except`` and comprehension targets, unpacking, augmented and
    walrus assignments) hides outer bindings of that name.

Anything the pass cannot prove stays untyped; the matcher then leaves the
call site alone. Receiver hints apply to free names and unannotated
parameters only.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

import libcst as cst

BUILTIN_TYPES = {
  "str": "builtins.str",
  "int": "builtins.int",
  "float": "builtins.float",
  "bool": "builtins.bool",
  "bytes": "builtins.bytes",
}


def get_full_name(node: cst.CSTNode) -> str:
  """
  Flattens a Name/Attribute chain into a dotted string.

  Args:
      node: The CST node.

  Returns:
      str: ``"a.b.c"``, or an empty string for other node types.
  """
  if isinstance(node, cst.Name):
    return node.value
  if isinstance(node, cst.Attribute):
    base = get_full_name(node.value)
    return f"{base}.{node.attr.value}" if base else ""
  return ""


@dataclass
class SymbolType:
  """
  Base class for inferred types.
  """

  name: str

  def __str__(self) -> str:
    return self.name


@dataclass
class InstanceType(SymbolType):
  """
  A value whose static type is known.
  """

  path: str
  """Fully-qualified type name (e.g. ``amazonaws.s3.AmazonS3``)."""


@dataclass
class ReferenceType(SymbolType):
  """
  A name bound to a module, class or callable rather than to a value.
  """

  path: str
  """Fully-qualified import path."""


@dataclass
class UnionType(SymbolType):
  """
  Divergent types from different control-flow branches.
  """

  types: List[SymbolType]

  def __init__(self, types: List[SymbolType]):
    super().__init__("Union")
    self.types = types

  def __str__(self) -> str:
    return f"Union[{', '.join(sorted(set(str(t) for t in self.types)))}]"


UNKNOWN = SymbolType(name="Unknown")


def instance(path: str) -> InstanceType:
  return InstanceType(name=path.rsplit(".", 1)[-1], path=path)


def reference(path: str) -> ReferenceType:
  return ReferenceType(name="Reference", path=path)


class Scope:
  """
  A variable scope (module, class or function).
  """

  def __init__(self, parent: Optional["Scope"] = None, name: str = "<root>"):
    self.parent = parent
    self.name = name
    self.symbols: Dict[str, SymbolType] = {}

  def set(self, name: str, sym_type: SymbolType) -> None:
    self.symbols[name] = sym_type

  def get(self, name: str) -> Optional[SymbolType]:
    """
    Resolves a symbol through enclosing scopes.

    Args:
        name: Identifier to look up.

    Returns:
        Optional[SymbolType]: The innermost binding, if any.
    """
    if name in self.symbols:
      return self.symbols[name]
    if self.parent:
      return self.parent.get(name)
    return None

  def snapshot(self) -> Dict[str, SymbolType]:
    return self.symbols.copy()


class SymbolTable:
  """
  Analysis results: maps CST nodes (by identity) to inferred types.
  """

  def __init__(self):
    self._node_types: Dict[cst.CSTNode, SymbolType] = {}

  def record_type(self, node: cst.CSTNode, sym_type: SymbolType) -> None:
    self._node_types[node] = sym_type

  def get_type(self, node: cst.CSTNode) -> Optional[SymbolType]:
    return self._node_types.get(node)

  def type_name(self, node: cst.CSTNode) -> Optional[str]:
    """
    Fully-qualified static type of an expression node.

    Args:
        node: An expression from the analyzed tree.

    Returns:
        Optional[str]: The type path, or None if the node is not a typed value.
    """
    sym_type = self._node_types.get(node)
    if isinstance(sym_type, InstanceType):
      return sym_type.path
    return None


class TypeResolver(cst.CSTVisitor):
  """
  Populates a :class:`SymbolTable` in one post-order pass.
  """

  def __init__(
    self,
    receiver_hints: Optional[Dict[str, str]] = None,
    factory_returns: Optional[Dict[str, str]] = None,
  ):
    """
    Initializes the resolver.

    Args:
        receiver_hints: Variable name -> type for names the source leaves untyped.
        factory_returns: Callable path -> type of the value it returns.
    """
    self.table = SymbolTable()
    self.factory_returns = dict(factory_returns or {})
    self.root_scope = Scope(name="hints")
    for var_name, type_path in (receiver_hints or {}).items():
      self.root_scope.set(var_name, instance(type_path))
    self.current_scope = Scope(parent=self.root_scope, name="global")
    self._class_stack: List[str] = []
    self._class_attrs: Dict[str, Dict[str, SymbolType]] = {}

  # --- Scoping ---

  def visit_ClassDef(self, node: cst.ClassDef) -> None:
    class_name = node.name.value
    self.current_scope.set(class_name, reference(class_name))
    self._class_stack.append(class_name)
    self._class_attrs.setdefault(class_name, {})
    self.current_scope = Scope(parent=self.current_scope, name=f"class_{class_name}")

  def leave_ClassDef(self, node: cst.ClassDef) -> None:
    self._class_stack.pop()
    if self.current_scope.parent:
      self.current_scope = self.current_scope.parent

  def visit_FunctionDef(self, node: cst.FunctionDef) -> None:
    """Enters function scope and binds every parameter."""
    outer = self.current_scope
    outer.set(node.name.value, UNKNOWN)
    self.current_scope = Scope(parent=outer, name=f"func_{node.name.value}")
    self._bind_parameters(node.params, method=bool(self._class_stack) and outer.name.startswith("class_"))

  def leave_FunctionDef(self, node: cst.FunctionDef) -> None:
    if self.current_scope.parent:
      self.current_scope = self.current_scope.parent

  def visit_Lambda(self, node: cst.Lambda) -> None:
    self.current_scope = Scope(parent=self.current_scope, name="lambda")
    self._bind_parameters(node.params)

  def leave_Lambda(self, node: cst.Lambda) -> None:
    if self.current_scope.parent:
      self.current_scope = self.current_scope.parent

  def _bind_parameters(self, params: cst.Parameters, method: bool = False) -> None:
    """
    Binds parameters in the current scope.

    Annotated parameters get their declared type; ``self`` of a method gets
    the enclosing class. Any other parameter hides outer bindings of its name
    and resolves only through a receiver hint.
    """
    ordered = list(params.posonly_params) + list(params.params)
    if isinstance(params.star_arg, cst.Param):
      ordered.append(params.star_arg)
    ordered.extend(params.kwonly_params)
    if params.star_kwarg is not None:
      ordered.append(params.star_kwarg)

    for idx, param in enumerate(ordered):
      name = param.name.value
      param_type = self._resolve_annotation(param.annotation) if param.annotation else None
      if param_type is None and method and idx == 0 and name == "self":
        param_type = instance(self._class_stack[-1])
      if param_type is None:
        param_type = self._hinted(name)
      self.current_scope.set(name, param_type)

  def _hinted(self, name: str) -> SymbolType:
    hinted = self.root_scope.symbols.get(name)
    return hinted if hinted is not None else UNKNOWN

  def _enter_comprehension(self, for_in: cst.CompFor) -> None:
    """Comprehension targets live in their own scope."""
    self.current_scope = Scope(parent=self.current_scope, name="comprehension")
    comp: Optional[cst.CompFor] = for_in
    while comp is not None:
      self._forget(comp.target)
      comp = comp.inner_for_in

  def _leave_comprehension(self) -> None:
    if self.current_scope.parent:
      self.current_scope = self.current_scope.parent

  def visit_ListComp(self, node: cst.ListComp) -> None:
    self._enter_comprehension(node.for_in)

  def leave_ListComp(self, node: cst.ListComp) -> None:
    self._leave_comprehension()

  def visit_SetComp(self, node: cst.SetComp) -> None:
    self._enter_comprehension(node.for_in)

  def leave_SetComp(self, node: cst.SetComp) -> None:
    self._leave_comprehension()

  def visit_DictComp(self, node: cst.DictComp) -> None:
    self._enter_comprehension(node.for_in)

  def leave_DictComp(self, node: cst.DictComp) -> None:
    self._leave_comprehension()

  def visit_GeneratorExp(self, node: cst.GeneratorExp) -> None:
    self._enter_comprehension(node.for_in)

  def leave_GeneratorExp(self, node: cst.GeneratorExp) -> None:
    self._leave_comprehension()

  # --- Control Flow Support ---

  def visit_If(self, node: cst.If) -> bool:
    node.test.visit(self)
    start_state = self.current_scope.snapshot()

    node.body.visit(self)
    body_state = self.current_scope.snapshot()

    self.current_scope.symbols = start_state.copy()
    if node.orelse:
      node.orelse.visit(self)
    else_state = self.current_scope.snapshot()

    self.current_scope.symbols = self._merge_states(body_state, else_state)
    return False

  def visit_For(self, node: cst.For) -> bool:
    node.iter.visit(self)
    self._forget(node.target)
    node.target.visit(self)
    start_state = self.current_scope.snapshot()
    node.body.visit(self)
    if node.orelse:
      node.orelse.visit(self)
    self.current_scope.symbols = self._merge_states(start_state, self.current_scope.snapshot())
    return False

  def visit_While(self, node: cst.While) -> bool:
    node.test.visit(self)
    start_state = self.current_scope.snapshot()
    node.body.visit(self)
    if node.orelse:
      node.orelse.visit(self)
    self.current_scope.symbols = self._merge_states(start_state, self.current_scope.snapshot())
    return False

  def _merge_states(self, state_a: Dict[str, SymbolType], state_b: Dict[str, SymbolType]) -> Dict[str, SymbolType]:
    """
    Merges two branch states. Conflicting bindings become a Union.
    """
    merged = {}
    for k in set(state_a) | set(state_b):
      if k in state_a and k in state_b and state_a[k] != state_b[k]:
        merged[k] = UnionType([state_a[k], state_b[k]])
      else:
        merged[k] = state_a.get(k) or state_b[k]
    return merged

  # --- Definition Tracking ---

  def leave_Import(self, node: cst.Import) -> None:
    for alias in node.names:
      full_path = get_full_name(alias.name)
      if alias.asname and isinstance(alias.asname.name, cst.Name):
        self.current_scope.set(alias.asname.name.value, reference(full_path))
      else:
        root = full_path.split(".")[0]
        self.current_scope.set(root, reference(root))

  def leave_ImportFrom(self, node: cst.ImportFrom) -> None:
    if not node.module or node.relative or isinstance(node.names, cst.ImportStar):
      return
    base_mod = get_full_name(node.module)
    for alias in node.names:
      import_name = get_full_name(alias.name)
      bind_name = alias.asname.name.value if alias.asname and isinstance(alias.asname.name, cst.Name) else import_name
      self.current_scope.set(bind_name, reference(f"{base_mod}.{import_name}"))

  def leave_Assign(self, node: cst.Assign) -> None:
    """Propagates the RHS type to simple names and ``self`` attributes."""
    rhs_type = self.table.get_type(node.value)
    if not isinstance(rhs_type, InstanceType):
      for target in node.targets:
        self._forget(target.target)
      return
    for target in node.targets:
      self._bind(target.target, rhs_type)

  def leave_AnnAssign(self, node: cst.AnnAssign) -> None:
    """Binds the annotated type, falling back to the value's type."""
    declared = self._resolve_annotation(node.annotation)
    if declared is None and node.value is not None:
      value_type = self.table.get_type(node.value)
      declared = value_type if isinstance(value_type, InstanceType) else None
    if declared is None:
      self._forget(node.target)
      return
    self._bind(node.target, declared)

  def leave_AugAssign(self, node: cst.AugAssign) -> None:
    self._forget(node.target)

  def leave_NamedExpr(self, node: cst.NamedExpr) -> None:
    """Walrus targets bind in the nearest scope that is not a comprehension."""
    value_type = self.table.get_type(node.value)
    scope = self.current_scope
    while scope.name == "comprehension" and scope.parent is not None:
      scope = scope.parent
    if isinstance(node.target, cst.Name):
      scope.set(node.target.value, value_type if isinstance(value_type, InstanceType) else UNKNOWN)
    if isinstance(value_type, InstanceType):
      self.table.record_type(node, value_type)

  def leave_WithItem(self, node: cst.WithItem) -> None:
    if node.asname is not None:
      self._forget(node.asname.name)

  def visit_ExceptHandler(self, node: cst.ExceptHandler) -> None:
    if node.name is not None:
      self._forget(node.name.name)

  def _bind(self, target: cst.BaseExpression, sym_type: SymbolType) -> None:
    if isinstance(target, cst.Name):
      self.current_scope.set(target.value, sym_type)
      if self._class_stack and self.current_scope.name.startswith("class_"):
        self._class_attrs[self._class_stack[-1]][target.value] = sym_type
    elif self._is_self_attribute(target):
      self._class_attrs[self._class_stack[-1]][target.attr.value] = sym_type
    else:
      self._forget(target)

  def _forget(self, target: cst.BaseExpression) -> None:
    """Rebinding to an unknown value shadows any earlier binding."""
    if isinstance(target, cst.Name):
      self.current_scope.set(target.value, UNKNOWN)
      if self._class_stack and self.current_scope.name.startswith("class_"):
        self._class_attrs[self._class_stack[-1]].pop(target.value, None)
    elif isinstance(target, (cst.Tuple, cst.List)):
      for element in target.elements:
        self._forget(element.value)
    elif isinstance(target, cst.StarredElement):
      self._forget(target.value)
    elif self._is_self_attribute(target):
      self._class_attrs[self._class_stack[-1]].pop(target.attr.value, None)

  def _is_self_attribute(self, node: cst.BaseExpression) -> bool:
    return (
      bool(self._class_stack)
      and isinstance(node, cst.Attribute)
      and isinstance(node.value, cst.Name)
      and node.value.value == "self"
    )

  def _resolve_path(self, node: cst.BaseExpression) -> Optional[str]:
    """Resolves a dotted reference through import bindings."""
    dotted = get_full_name(node)
    if not dotted:
      return None
    root, _, rest = dotted.partition(".")
    bound = self.current_scope.get(root)
    if isinstance(bound, ReferenceType):
      return f"{bound.path}.{rest}" if rest else bound.path
    return None

  def _resolve_annotation(self, annotation: cst.Annotation) -> Optional[InstanceType]:
    expr = annotation.annotation
    if isinstance(expr, cst.Name) and self.current_scope.get(expr.value) is None:
      builtin = BUILTIN_TYPES.get(expr.value)
      return instance(builtin) if builtin else None
    path = self._resolve_path(expr)
    return instance(path) if path else None

  # --- Usage Resolution ---

  def leave_SimpleString(self, node: cst.SimpleString) -> None:
    self.table.record_type(node, instance("builtins.bytes" if "b" in node.prefix.lower() else "builtins.str"))

  def leave_ConcatenatedString(self, node: cst.ConcatenatedString) -> None:
    left = self.table.type_name(node.left)
    if left is not None and left == self.table.type_name(node.right):
      self.table.record_type(node, instance(left))

  def leave_FormattedString(self, node: cst.FormattedString) -> None:
    self.table.record_type(node, instance("builtins.str"))

  def leave_Integer(self, node: cst.Integer) -> None:
    self.table.record_type(node, instance("builtins.int"))

  def leave_Float(self, node: cst.Float) -> None:
    self.table.record_type(node, instance("builtins.float"))

  def leave_Name(self, node: cst.Name) -> None:
    sym_type = self.current_scope.get(node.value)
    if sym_type is not None:
      self.table.record_type(node, sym_type)
    elif node.value in ("True", "False"):
      self.table.record_type(node, instance("builtins.bool"))

  def leave_Attribute(self, node: cst.Attribute) -> None:
    """
    Resolves ``ref.attr`` to a deeper reference and ``self.attr`` to its assigned type.
    """
    base_type = self.table.get_type(node.value)
    if isinstance(base_type, ReferenceType):
      self.table.record_type(node, reference(f"{base_type.path}.{node.attr.value}"))
    elif self._is_self_attribute(node):
      attr_type = self._class_attrs[self._class_stack[-1]].get(node.attr.value)
      if attr_type is not None:
        self.table.record_type(node, attr_type)

  def leave_Call(self, node: cst.Call) -> None:
    """
    Types construction of classes and configured factory calls.

    A reference whose last segment is capitalized is treated as a class.
    """
    func_type = self.table.get_type(node.func)
    if not isinstance(func_type, ReferenceType):
      return
    if func_type.path in self.factory_returns:
      self.table.record_type(node, instance(self.factory_returns[func_type.path]))
      return
    leaf = func_type.path.rsplit(".", 1)[-1]
    if leaf[:1].isupper():
      self.table.record_type(node, instance(func_type.path))


def resolve_types(
  module: cst.Module,
  receiver_hints: Optional[Dict[str, str]] = None,
  factory_returns: Optional[Dict[str, str]] = None,
) -> SymbolTable:
  """
  Runs the resolver over a module.

  Args:
      module: Parsed source.
      receiver_hints: Variable name -> type for untyped receivers.
      factory_returns: Callable path -> returned type.

  Returns:
      SymbolTable: Types keyed by node identity.
  """
  resolver = TypeResolver(receiver_hints=receiver_hints, factory_returns=factory_returns)
  module.visit(resolver)
  return resolver.table
