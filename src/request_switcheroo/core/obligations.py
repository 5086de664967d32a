"""
Import Obligations.

An obligation is a side-channel signal that a type must be importable in the
unit containing a rewritten call site. The engine only emits them; the
:class:`ImportLedger` is the collaborator-side collector and treats repeated
requests as no-ops.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Set


@dataclass(frozen=True, order=True)
class ImportObligation:
  """
  Request that ``type_name`` be importable.
  """

  type_name: str

  @property
  def module(self) -> str:
    """Dotted module path (everything before the last segment)."""
    return self.type_name.rpartition(".")[0]

  @property
  def name(self) -> str:
    """Unqualified type name."""
    return self.type_name.rpartition(".")[2]


def emit_import(type_name: str) -> ImportObligation:
  """
  Creates the obligation for a synthesized constructor's type.

  Args:
      type_name: Fully-qualified type of the constructed request.

  Returns:
      ImportObligation: The advisory import request.
  """
  return ImportObligation(type_name=type_name)


class ImportLedger:
  """
  Idempotent collector of obligations for one unit.
  """

  def __init__(self) -> None:
    self._obligations: Set[ImportObligation] = set()

  def request(self, obligation: ImportObligation) -> bool:
    """
    Records an obligation.

    Args:
        obligation: The import to apply.

    Returns:
        bool: True if newly recorded, False if it was already present.
    """
    if obligation in self._obligations:
      return False
    self._obligations.add(obligation)
    return True

  def by_module(self) -> Dict[str, List[str]]:
    """
    Groups requested names by module, both sorted.

    Returns:
        Dict[str, List[str]]: ``{module: [names]}`` in deterministic order.
    """
    grouped: Dict[str, List[str]] = {}
    for obligation in sorted(self._obligations):
      grouped.setdefault(obligation.module, []).append(obligation.name)
    return grouped

  def __iter__(self) -> Iterator[ImportObligation]:
    return iter(sorted(self._obligations))

  def __len__(self) -> int:
    return len(self._obligations)

  def __bool__(self) -> bool:
    return bool(self._obligations)
