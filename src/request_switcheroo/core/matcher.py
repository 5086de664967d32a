"""
Call Matcher.

Decides whether a call site corresponds to a cataloged legacy overload.
Matching is exact: the observed ``(receiver type, method name, argument
types)`` triple must equal a cataloged signature. Legacy overload sets are
told apart only by declared parameter types, so a subtype never matches in
place of its base.
"""

from typing import Optional

from request_switcheroo.core.call_site import CallSite
from request_switcheroo.semantics.catalog import RuleCatalog
from request_switcheroo.semantics.schema import SignaturePattern, TransformationRule


def observed_signature(call_site: CallSite) -> Optional[SignaturePattern]:
  """
  Builds the signature a call site exhibits.

  Args:
      call_site: The call-site view.

  Returns:
      Optional[SignaturePattern]: None if the call site is not fully resolved.
  """
  if not call_site.is_resolved:
    return None
  return SignaturePattern(
    owner_type=call_site.receiver_type,
    method_name=call_site.method_name,
    param_types=call_site.argument_types,
  )


def match(call_site: CallSite, catalog: RuleCatalog) -> Optional[TransformationRule]:
  """
  Finds the rule for a call site.

  Unresolved call sites (no callee metadata, untyped receiver or argument)
  never match.

  Args:
      call_site: The call-site view.
      catalog: The frozen rule catalog.

  Returns:
      Optional[TransformationRule]: The first rule in precedence order, or None.
  """
  pattern = observed_signature(call_site)
  if pattern is None:
    return None
  return catalog.lookup(pattern)
