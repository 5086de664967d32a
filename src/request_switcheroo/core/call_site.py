"""
Host-independent views of call sites.

The engine never sees a concrete syntax tree. A host driver describes each
method invocation as a :class:`CallSite` and receives a
:class:`ReplacementCallSite` back. Argument expressions travel as opaque
references inside :class:`ArgumentView` and are never inspected, copied or
reordered by the engine.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Optional, Tuple

REQUEST_PARAMETER_NAME = "request"
CONSTRUCTOR_NAME = "<init>"


@dataclass(frozen=True, eq=False)
class ArgumentView:
  """
  One positional argument of a call site.

  Equality is identity: two views are the same argument only if they are the
  same object.
  """

  expression: Any
  """Opaque host node for the argument expression."""

  type_name: Optional[str]
  """Resolved static type (fully qualified), or None if the host could not resolve it."""


@dataclass(frozen=True)
class MethodType:
  """
  Resolved callee signature attached to a call site.
  """

  declaring_type: str
  name: str
  parameter_types: Tuple[str, ...] = ()
  parameter_names: Tuple[str, ...] = ()
  return_type: Optional[str] = None
  thrown_types: Tuple[str, ...] = ()

  def with_single_parameter(self, name: str, type_name: str) -> "MethodType":
    """
    Returns a copy declaring exactly one parameter.

    Return and thrown types are inherited unchanged.

    Args:
        name: Parameter name.
        type_name: Fully-qualified parameter type.

    Returns:
        MethodType: The rewritten signature.
    """
    return replace(self, parameter_types=(type_name,), parameter_names=(name,))


@dataclass(frozen=True)
class CallSite:
  """
  A single method invocation as seen by the matcher.
  """

  receiver_type: Optional[str]
  method_name: str
  arguments: Tuple[ArgumentView, ...] = ()
  method_type: Optional[MethodType] = None
  node: Any = field(default=None, compare=False)
  """Opaque host node for the whole invocation (carried through, never read)."""

  @property
  def is_resolved(self) -> bool:
    """
    True if the host attached callee metadata and typed every argument.

    Returns:
        bool: Resolution status.
    """
    if self.method_type is None or self.receiver_type is None:
      return False
    return all(arg.type_name is not None for arg in self.arguments)

  @property
  def argument_types(self) -> Tuple[Optional[str], ...]:
    """Resolved types of the arguments, in order."""
    return tuple(arg.type_name for arg in self.arguments)


@dataclass(frozen=True)
class ConstructorInvocation:
  """
  Construction of a request object from the original arguments.
  """

  target_type: str
  arguments: Tuple[ArgumentView, ...]
  method_type: MethodType

  @property
  def simple_name(self) -> str:
    """Unqualified class name of the target type."""
    return self.target_type.rsplit(".", 1)[-1]

  @property
  def field_names(self) -> Tuple[str, ...]:
    """Field bound by each argument, in order."""
    return self.method_type.parameter_names


@dataclass(frozen=True)
class ReplacementCallSite:
  """
  The rewritten invocation: same receiver and method, one request argument.
  """

  receiver_type: str
  method_name: str
  request: ConstructorInvocation
  method_type: MethodType
  node: Any = field(default=None, compare=False)

  @property
  def arguments(self) -> Tuple[ConstructorInvocation, ...]:
    """The single-element argument list."""
    return (self.request,)
