"""
Rule Catalog construction and lookup.

The catalog is built once from a :class:`RuleTable`, validated eagerly and then
frozen. Lookups are exact-equality dictionary hits, evaluated in a fixed order:

1.  The ``SPECIAL`` precedence list (individually authored mappings).
2.  The generic buckets, in :data:`BUCKET_ORDER`.

Since a signature may live in at most one bucket, the order only decides the
outcome for a misconfigured table; :class:`DuplicatePolicy` makes that case
explicit at build time.
"""

from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Sequence, Tuple

from request_switcheroo.core.errors import ArityMismatchError, CatalogError, DuplicateRuleError
from request_switcheroo.enums import DuplicatePolicy, RuleShape
from request_switcheroo.semantics.schema import (
  RuleFragment,
  RuleTable,
  ShapeGroup,
  SignaturePattern,
  SpecialMapping,
  TransformationRule,
)
from request_switcheroo.utils.console import log_warning

BUCKET_ORDER: Tuple[RuleShape, ...] = (
  RuleShape.BUCKET,
  RuleShape.BUCKET_KEY,
  RuleShape.BUCKET_ID,
  RuleShape.BUCKET_PREFIX,
)


def request_type_name(model_package: str, method_name: str) -> str:
  """
  Derives the conventional request type of a legacy operation.

  ``getObject`` in ``pkg.model.`` becomes ``pkg.model.GetObjectRequest``.

  Args:
      model_package: Dot-terminated package prefix.
      method_name: Legacy operation name.

  Returns:
      str: Fully-qualified request type name.
  """
  return f"{model_package}{method_name[:1].upper()}{method_name[1:]}Request"


class RuleCatalog:
  """
  Read-only set of Transformation Rules.

  Instances are produced by :func:`build_catalog`; the internal mappings are
  exposed only through ``MappingProxyType`` views, so a built catalog can be
  shared between threads without locking.
  """

  def __init__(
    self,
    special: Dict[SignaturePattern, TransformationRule],
    buckets: Dict[RuleShape, Dict[SignaturePattern, TransformationRule]],
  ):
    self._special: Mapping[SignaturePattern, TransformationRule] = MappingProxyType(dict(special))
    self._buckets: Mapping[RuleShape, Mapping[SignaturePattern, TransformationRule]] = MappingProxyType(
      {shape: MappingProxyType(dict(buckets.get(shape, {}))) for shape in BUCKET_ORDER}
    )

  def lookup(self, pattern: SignaturePattern) -> Optional[TransformationRule]:
    """
    Finds the rule registered for an exact signature.

    Args:
        pattern: The observed signature of a call site.

    Returns:
        Optional[TransformationRule]: The first hit in precedence order, or None.
    """
    rule = self._special.get(pattern)
    if rule is not None:
      return rule
    for shape in BUCKET_ORDER:
      rule = self._buckets[shape].get(pattern)
      if rule is not None:
        return rule
    return None

  @property
  def special_rules(self) -> Tuple[TransformationRule, ...]:
    """Special mappings in precedence order."""
    return tuple(self._special.values())

  def bucket(self, shape: RuleShape) -> Mapping[SignaturePattern, TransformationRule]:
    """
    Read-only view of one partition.

    Args:
        shape: Bucket identifier. ``SPECIAL`` returns the precedence list.

    Returns:
        Mapping[SignaturePattern, TransformationRule]: The bucket contents.
    """
    if shape == RuleShape.SPECIAL:
      return self._special
    return self._buckets[shape]

  def rules(self) -> Iterator[TransformationRule]:
    """Yields every rule in evaluation order."""
    yield from self._special.values()
    for shape in BUCKET_ORDER:
      yield from self._buckets[shape].values()

  def __iter__(self) -> Iterator[TransformationRule]:
    return self.rules()

  def __len__(self) -> int:
    return len(self._special) + sum(len(b) for b in self._buckets.values())

  def __contains__(self, pattern: object) -> bool:
    return isinstance(pattern, SignaturePattern) and self.lookup(pattern) is not None


class _CatalogBuilder:
  """
  Single-threaded accumulator enforcing arity and uniqueness before freezing.
  """

  def __init__(self, duplicate_policy: DuplicatePolicy):
    self.duplicate_policy = duplicate_policy
    self.special: Dict[SignaturePattern, TransformationRule] = {}
    self.buckets: Dict[RuleShape, Dict[SignaturePattern, TransformationRule]] = {s: {} for s in BUCKET_ORDER}
    self._shape_index: Dict[SignaturePattern, RuleShape] = {}

  def _partition(self, shape: RuleShape) -> Dict[SignaturePattern, TransformationRule]:
    return self.special if shape == RuleShape.SPECIAL else self.buckets[shape]

  def add(
    self,
    shape: RuleShape,
    owner_type: str,
    method: str,
    param_types: Sequence[str],
    target_type: str,
    field_names: Sequence[str],
  ) -> None:
    if len(param_types) != len(field_names):
      raise ArityMismatchError(owner_type, method, param_types, field_names)

    pattern = SignaturePattern(owner_type=owner_type, method_name=method, param_types=tuple(param_types))
    rule = TransformationRule(pattern=pattern, target_type=target_type, field_names=tuple(field_names), shape=shape)

    previous_shape = self._shape_index.get(pattern)
    if previous_shape is not None:
      previous = self._partition(previous_shape)[pattern]
      if self.duplicate_policy == DuplicatePolicy.REJECT:
        raise DuplicateRuleError(str(pattern), previous.target_type, target_type)
      log_warning(f"Rule for {pattern} overrides '{previous.target_type}' with '{target_type}'")
      del self._partition(previous_shape)[pattern]

    self._partition(shape)[pattern] = rule
    self._shape_index[pattern] = shape

  def freeze(self) -> RuleCatalog:
    return RuleCatalog(self.special, self.buckets)


def build_catalog(
  table: RuleTable,
  duplicate_policy: DuplicatePolicy = DuplicatePolicy.REJECT,
  fragments: Sequence[RuleFragment] = (),
) -> RuleCatalog:
  """
  Expands a rule table into a validated, frozen catalog.

  Special mappings are inserted first (in order), then every shape group is
  expanded method by method against the table's owner type, deriving target
  types via :func:`request_type_name`. Fragments follow the complete base
  table in the same way, so their entries are the later write for any
  signature they repeat.

  Args:
      table: Declarative authoring input.
      duplicate_policy: Resolution of two entries with the same exact signature.
      fragments: Additional entries (e.g. from rule files), applied in order.

  Returns:
      RuleCatalog: The read-only catalog.

  Raises:
      ArityMismatchError: If an entry's parameter and field lists differ in length.
      DuplicateRuleError: If a signature repeats under ``DuplicatePolicy.REJECT``.
      CatalogError: If a shape group claims the ``SPECIAL`` partition.
  """
  builder = _CatalogBuilder(duplicate_policy)
  for source in (table, *fragments):
    _expand(builder, table.owner_type, table.model_package, source.special, source.groups)
  return builder.freeze()


def _expand(
  builder: _CatalogBuilder,
  owner_type: str,
  model_package: str,
  special: Iterable[SpecialMapping],
  groups: Iterable[ShapeGroup],
) -> None:
  for mapping in special:
    target = mapping.target_type or request_type_name(model_package, mapping.request_of)
    builder.add(
      RuleShape.SPECIAL,
      owner_type,
      mapping.method,
      mapping.param_types,
      target,
      mapping.field_names,
    )

  for group in groups:
    if group.shape == RuleShape.SPECIAL:
      raise CatalogError("Shape groups cannot expand into the 'special' partition; author them individually.")
    for method in group.methods:
      builder.add(
        group.shape,
        owner_type,
        method,
        group.param_types,
        request_type_name(model_package, method),
        group.field_names,
      )
