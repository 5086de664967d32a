"""
Pydantic Schemas for the Rule Catalog.

This module defines the immutable value types the matcher keys on
(:class:`SignaturePattern`, :class:`TransformationRule`) and the declarative
authoring format used to build a catalog (:class:`RuleTable` made of
:class:`SpecialMapping` entries and templated :class:`ShapeGroup` expansions).

The authoring models are also the JSON schema of external rule files.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from request_switcheroo.enums import RuleShape


class SignaturePattern(BaseModel):
  """
  Immutable key describing one legacy overload.

  Two patterns are equal iff owner, method name and the ordered parameter
  type list are all equal. Frozen models are hashable, so patterns are used
  directly as catalog keys.
  """

  model_config = ConfigDict(frozen=True)

  owner_type: str = Field(..., description="Fully-qualified receiver type declaring the method.")
  method_name: str = Field(..., description="Exact method identifier.")
  param_types: Tuple[str, ...] = Field(default=(), description="Ordered fully-qualified parameter types.")

  @property
  def arity(self) -> int:
    """
    Number of positional parameters.

    Returns:
        int: Length of ``param_types``.
    """
    return len(self.param_types)

  def __str__(self) -> str:
    return f"{self.owner_type}.{self.method_name}({', '.join(self.param_types)})"


class TransformationRule(BaseModel):
  """
  Maps one signature to a request type and positional field bindings.

  Argument ``i`` of a matching call binds to ``field_names[i]``.
  """

  model_config = ConfigDict(frozen=True)

  pattern: SignaturePattern
  target_type: str = Field(..., description="Fully-qualified request type to construct.")
  field_names: Tuple[str, ...] = Field(..., description="Field bound by each positional argument, in order.")
  shape: RuleShape = Field(RuleShape.SPECIAL, description="Catalog bucket the rule was authored in.")

  @model_validator(mode="after")
  def _check_arity(self) -> "TransformationRule":
    if len(self.field_names) != self.pattern.arity:
      raise ValueError(
        f"{self.pattern} has {self.pattern.arity} parameter(s) but {len(self.field_names)} field name(s)"
      )
    return self

  @property
  def target_simple_name(self) -> str:
    """
    Unqualified class name of the target type.

    Returns:
        str: e.g. ``DeleteObjectRequest`` for ``pkg.model.DeleteObjectRequest``.
    """
    return self.target_type.rsplit(".", 1)[-1]


class SpecialMapping(BaseModel):
  """
  An individually authored rule with method-specific field names.

  Exactly one of ``target_type`` (fully qualified) or ``request_of`` (a legacy
  operation name whose conventional request type is used) must be set.
  """

  model_config = ConfigDict(frozen=True)

  method: str
  param_types: Tuple[str, ...]
  field_names: Tuple[str, ...]
  target_type: Optional[str] = None
  request_of: Optional[str] = None

  @model_validator(mode="after")
  def _check_target(self) -> "SpecialMapping":
    if (self.target_type is None) == (self.request_of is None):
      raise ValueError(f"Mapping '{self.method}' needs exactly one of 'target_type' or 'request_of'")
    return self


class ShapeGroup(BaseModel):
  """
  A templated expansion: every method shares the parameter types and field names.
  """

  model_config = ConfigDict(frozen=True)

  shape: RuleShape
  param_types: Tuple[str, ...]
  field_names: Tuple[str, ...]
  methods: Tuple[str, ...] = ()


class RuleTable(BaseModel):
  """
  Complete authoring input for one legacy owner type.

  ``special`` entries keep their declaration order, which is the matcher's
  precedence order.
  """

  model_config = ConfigDict(frozen=True)

  owner_type: str
  model_package: str
  special: Tuple[SpecialMapping, ...] = ()
  groups: Tuple[ShapeGroup, ...] = ()


class RuleFragment(BaseModel):
  """
  Partial rule table loaded from an external JSON file.

  Fragments carry no owner or package; they are expanded against the base table.
  """

  special: List[SpecialMapping] = Field(default_factory=list)
  groups: List[ShapeGroup] = Field(default_factory=list)
