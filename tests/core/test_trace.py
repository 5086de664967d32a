"""
Tests for the Tracing System.
"""

from request_switcheroo.core.tracer import TraceEventType, TraceLogger, get_tracer, reset_tracer


def test_phase_nesting():
  logger = TraceLogger()

  p1 = logger.start_phase("Parent")
  logger.start_phase("Child")
  logger.end_phase()  # End Child
  logger.end_phase()  # End Parent

  events = logger.export()

  # 4 events: Start P, Start C, End C, End P
  assert len(events) == 4
  assert events[0]["type"] == TraceEventType.PHASE_START
  assert events[1]["parent_id"] == p1
  assert events[2]["type"] == TraceEventType.PHASE_END
  assert events[3]["parent_id"] == p1


def test_end_phase_without_open_phase_is_noop():
  logger = TraceLogger()
  logger.end_phase()
  assert logger.export() == []


def test_match_metadata():
  logger = TraceLogger()
  logger.log_match("Client.getObject(builtins.str, builtins.str)", "pkg.model.GetObjectRequest", "bucket_key")

  events = logger.export()
  assert len(events) == 1
  assert events[0]["type"] == TraceEventType.MATCH_RULE
  assert events[0]["metadata"]["target"] == "pkg.model.GetObjectRequest"
  assert events[0]["metadata"]["shape"] == "bucket_key"


def test_events_of_filters_by_type():
  logger = TraceLogger()
  logger.log_import("pkg.model", "GetObjectRequest")
  logger.log_inspection("Client.unknownMethod", "no_match", "No catalog entry")
  logger.log_warning("careful")

  assert [e.description for e in logger.events_of(TraceEventType.IMPORT_ACTION)] == [
    "Import GetObjectRequest from pkg.model"
  ]
  assert logger.events_of(TraceEventType.INSPECTION)[0].metadata["outcome"] == "no_match"
  assert logger.events_of(TraceEventType.WARNING)[0].metadata == {"level": "warning"}


def test_reset_tracer_replaces_global():
  first = get_tracer()
  first.log_warning("old")
  reset_tracer()
  assert get_tracer() is not first
  assert get_tracer().export() == []
