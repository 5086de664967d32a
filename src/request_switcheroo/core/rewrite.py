"""
Single call-site rewrite.

Composes the matcher and the synthesizer and classifies the outcome. This is
the only entry point a host driver needs; it holds no state between calls.
"""

from dataclasses import dataclass
from typing import Optional, Union

from request_switcheroo.core.call_site import CallSite, ReplacementCallSite
from request_switcheroo.core.matcher import match
from request_switcheroo.core.obligations import ImportObligation
from request_switcheroo.core.synthesizer import synthesize
from request_switcheroo.enums import RewriteOutcome
from request_switcheroo.semantics.catalog import RuleCatalog
from request_switcheroo.semantics.schema import TransformationRule


@dataclass(frozen=True)
class RewriteResult:
  """
  Outcome of one rewrite attempt.

  ``call_site`` is the untouched input for no-op outcomes and the replacement
  when ``outcome`` is ``REWRITTEN``.
  """

  outcome: RewriteOutcome
  call_site: Union[CallSite, ReplacementCallSite]
  rule: Optional[TransformationRule] = None
  obligation: Optional[ImportObligation] = None

  @property
  def changed(self) -> bool:
    return self.outcome == RewriteOutcome.REWRITTEN


def rewrite_call_site(call_site: CallSite, catalog: RuleCatalog) -> RewriteResult:
  """
  Rewrites one call site against a catalog.

  Args:
      call_site: The call-site view supplied by the host.
      catalog: The frozen rule catalog.

  Returns:
      RewriteResult: ``UNRESOLVED`` or ``NO_MATCH`` with the call site unchanged,
      or ``REWRITTEN`` with the replacement and its import obligation.
  """
  if not call_site.is_resolved:
    return RewriteResult(RewriteOutcome.UNRESOLVED, call_site)

  rule = match(call_site, catalog)
  if rule is None:
    return RewriteResult(RewriteOutcome.NO_MATCH, call_site)

  replacement, obligation = synthesize(call_site, rule)
  return RewriteResult(RewriteOutcome.REWRITTEN, replacement, rule=rule, obligation=obligation)
