"""
Exception hierarchy.

Only catalog inconsistencies and internal invariant violations are errors.
Unresolved or unknown call sites are routine outcomes and are reported through
:class:`request_switcheroo.enums.RewriteOutcome` instead.
"""

from typing import Sequence


class SwitcherooError(Exception):
  """Base class for all request-switcheroo failures."""


class CatalogError(SwitcherooError):
  """Raised when a rule table cannot be turned into a consistent catalog."""


class ArityMismatchError(CatalogError):
  """
  A rule's parameter type list and field-name list disagree in length.
  """

  def __init__(self, owner: str, method: str, param_types: Sequence[str], field_names: Sequence[str]):
    self.owner = owner
    self.method = method
    self.param_types = tuple(param_types)
    self.field_names = tuple(field_names)
    super().__init__(
      f"Rule for {owner}.{method}({', '.join(self.param_types)}) binds "
      f"{len(self.param_types)} argument(s) to {len(self.field_names)} field(s): {list(self.field_names)}"
    )


class DuplicateRuleError(CatalogError):
  """
  Two rules were registered for the same exact signature under the REJECT policy.
  """

  def __init__(self, signature: str, first_target: str, second_target: str):
    self.signature = signature
    self.first_target = first_target
    self.second_target = second_target
    super().__init__(f"Duplicate rule for {signature}: '{first_target}' conflicts with '{second_target}'")


class RuleFileError(CatalogError):
  """An external rule file is missing, malformed or violates the rule schema."""


class InternalInvariantError(SwitcherooError):
  """
  Matcher and catalog disagree. Never recoverable; indicates a programming error.
  """
