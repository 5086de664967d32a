"""
Rewrite Trace Logger.

Records the step-by-step execution of a conversion:

1. Lifecycle phases (parsing, type resolution, rewriting, import injection).
2. Rule matches (``getObject(str, str)`` -> ``GetObjectRequest``).
3. Call-site mutations (source before and after).
4. Inspections that ended without a change, with the reason.
5. Import actions.

Events are exported as plain dictionaries for JSON serialization.
"""

import time
import uuid
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class TraceEventType(str, Enum):
  PHASE_START = "phase_start"
  PHASE_END = "phase_end"
  MATCH_RULE = "match_rule"
  CALL_MUTATION = "call_mutation"
  INSPECTION = "inspection"
  IMPORT_ACTION = "import_action"
  WARNING = "warning"


@dataclass
class TraceEvent:
  id: str
  type: TraceEventType
  timestamp: float
  description: str
  parent_id: Optional[str] = None
  metadata: Dict[str, Any] = field(default_factory=dict)


class TraceLogger:
  """
  Append-only event log with nested phases.
  """

  def __init__(self):
    self._events: List[TraceEvent] = []
    self._active_phases: List[str] = []

  def start_phase(self, name: str, description: str = "") -> str:
    """Opens a nested phase and returns its id."""
    phase_id = str(uuid.uuid4())
    self._events.append(
      TraceEvent(
        id=phase_id,
        type=TraceEventType.PHASE_START,
        timestamp=time.time(),
        description=name,
        parent_id=self._current_parent(),
        metadata={"detail": description},
      )
    )
    self._active_phases.append(phase_id)
    return phase_id

  def end_phase(self):
    """Closes the innermost phase; no-op when none is open."""
    if not self._active_phases:
      return
    phase_id = self._active_phases.pop()
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()),
        type=TraceEventType.PHASE_END,
        timestamp=time.time(),
        description="End Phase",
        parent_id=phase_id,
      )
    )

  def log_match(self, signature: str, target_type: str, shape: str):
    self._log_simple(
      TraceEventType.MATCH_RULE,
      f"Matched {signature} -> {target_type}",
      {"signature": signature, "target": target_type, "shape": shape},
    )

  def log_mutation(self, label: str, before: str, after: str):
    self._log_simple(TraceEventType.CALL_MUTATION, f"Rewrote {label}", {"before": before, "after": after})

  def log_inspection(self, node_str: str, outcome: str, detail: str = ""):
    """Logs a call site that was inspected and left unchanged."""
    self._log_simple(TraceEventType.INSPECTION, f"Inspecting '{node_str}'", {"outcome": outcome, "detail": detail})

  def log_import(self, module: str, name: str):
    self._log_simple(TraceEventType.IMPORT_ACTION, f"Import {name} from {module}", {"module": module, "name": name})

  def log_warning(self, message: str):
    self._log_simple(TraceEventType.WARNING, message, {"level": "warning"})

  def _current_parent(self) -> Optional[str]:
    return self._active_phases[-1] if self._active_phases else None

  def _log_simple(self, evt_type: TraceEventType, desc: str, meta: Dict[str, Any]):
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()),
        type=evt_type,
        timestamp=time.time(),
        description=desc,
        parent_id=self._current_parent(),
        metadata=meta,
      )
    )

  def events_of(self, evt_type: TraceEventType) -> List[TraceEvent]:
    return [e for e in self._events if e.type == evt_type]

  def export(self) -> List[Dict[str, Any]]:
    """Returns the events as JSON-ready dictionaries."""
    return [asdict(e) for e in self._events]


_GLOBAL_TRACER = TraceLogger()


def get_tracer() -> TraceLogger:
  return _GLOBAL_TRACER


def reset_tracer():
  global _GLOBAL_TRACER
  _GLOBAL_TRACER = TraceLogger()
