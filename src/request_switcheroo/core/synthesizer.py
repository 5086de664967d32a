"""
Call Synthesizer.

Builds the replacement for a matched call site. The original argument views
are moved into the constructor invocation by reference, in their original
order, so any side effects in the argument expressions keep their evaluation
order.
"""

from typing import Tuple

from request_switcheroo.core.call_site import (
  CONSTRUCTOR_NAME,
  REQUEST_PARAMETER_NAME,
  CallSite,
  ConstructorInvocation,
  MethodType,
  ReplacementCallSite,
)
from request_switcheroo.core.errors import InternalInvariantError
from request_switcheroo.core.obligations import ImportObligation, emit_import
from request_switcheroo.semantics.schema import TransformationRule


def synthesize(call_site: CallSite, rule: TransformationRule) -> Tuple[ReplacementCallSite, ImportObligation]:
  """
  Produces the single-request-argument form of a call site.

  Args:
      call_site: A resolved call site accepted by the matcher for ``rule``.
      rule: The matched transformation rule.

  Returns:
      Tuple[ReplacementCallSite, ImportObligation]: The rewritten call site and
      the import needed for ``rule.target_type``.

  Raises:
      InternalInvariantError: If the call site is unresolved or its arity
          differs from the rule's field list.
  """
  if call_site.method_type is None or call_site.receiver_type is None:
    raise InternalInvariantError(f"Cannot synthesize unresolved call site '{call_site.method_name}'")
  if len(call_site.arguments) != len(rule.field_names):
    raise InternalInvariantError(
      f"Rule for {rule.pattern} binds {len(rule.field_names)} field(s) "
      f"but call site passes {len(call_site.arguments)} argument(s)"
    )

  ctor_type = MethodType(
    declaring_type=rule.target_type,
    name=CONSTRUCTOR_NAME,
    parameter_types=call_site.argument_types,
    parameter_names=rule.field_names,
    return_type=rule.target_type,
  )
  request = ConstructorInvocation(
    target_type=rule.target_type,
    arguments=call_site.arguments,
    method_type=ctor_type,
  )

  replacement = ReplacementCallSite(
    receiver_type=call_site.receiver_type,
    method_name=call_site.method_name,
    request=request,
    method_type=call_site.method_type.with_single_parameter(REQUEST_PARAMETER_NAME, rule.target_type),
    node=call_site.node,
  )
  return replacement, emit_import(rule.target_type)
