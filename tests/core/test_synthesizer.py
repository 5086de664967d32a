"""
Tests for the Call Synthesizer.

Verifies argument identity and order, constructor and replacement metadata,
and the invariant checks guarding against matcher/catalog disagreement.
"""

import pytest

from request_switcheroo.core.call_site import CONSTRUCTOR_NAME, REQUEST_PARAMETER_NAME
from request_switcheroo.core.errors import InternalInvariantError
from request_switcheroo.core.matcher import match
from request_switcheroo.core.obligations import ImportObligation
from request_switcheroo.core.synthesizer import synthesize
from request_switcheroo.semantics.rule_table import STRING


def test_delete_version_scenario(scenario_catalog, make_call_site):
  call = make_call_site("deleteVersion", STRING, STRING, STRING)
  rule = match(call, scenario_catalog)
  replacement, obligation = synthesize(call, rule)

  assert replacement.receiver_type == "Client"
  assert replacement.method_name == "deleteVersion"
  assert replacement.request.target_type == "pkg.model.DeleteObjectRequest"
  assert replacement.request.simple_name == "DeleteObjectRequest"
  assert replacement.request.field_names == ("bucket", "key", "versionId")
  assert obligation == ImportObligation("pkg.model.DeleteObjectRequest")


def test_arguments_are_moved_by_identity_in_order(scenario_catalog, make_call_site):
  call = make_call_site("getObject", STRING, STRING)
  replacement, _ = synthesize(call, match(call, scenario_catalog))

  assert len(replacement.request.arguments) == len(call.arguments)
  for original, moved in zip(call.arguments, replacement.request.arguments):
    assert moved is original
    assert moved.expression is original.expression


def test_replacement_has_single_request_argument(scenario_catalog, make_call_site):
  call = make_call_site("createBucket", STRING)
  replacement, _ = synthesize(call, match(call, scenario_catalog))
  assert replacement.arguments == (replacement.request,)
  assert replacement.node is call.node


def test_replacement_method_metadata(scenario_catalog, make_call_site):
  call = make_call_site("createBucket", STRING)
  replacement, _ = synthesize(call, match(call, scenario_catalog))

  method_type = replacement.method_type
  assert method_type.parameter_names == (REQUEST_PARAMETER_NAME,)
  assert method_type.parameter_types == ("pkg.model.CreateBucketRequest",)
  assert method_type.declaring_type == "Client"
  assert method_type.name == "createBucket"
  # Return and thrown types are inherited from the original callee.
  assert method_type.return_type == call.method_type.return_type
  assert method_type.thrown_types == call.method_type.thrown_types


def test_constructor_metadata(scenario_catalog, make_call_site):
  call = make_call_site("getObject", STRING, STRING)
  replacement, _ = synthesize(call, match(call, scenario_catalog))

  ctor_type = replacement.request.method_type
  assert ctor_type.name == CONSTRUCTOR_NAME
  assert ctor_type.declaring_type == "pkg.model.GetObjectRequest"
  assert ctor_type.return_type == "pkg.model.GetObjectRequest"
  assert ctor_type.parameter_types == (STRING, STRING)
  assert ctor_type.parameter_names == ("bucket", "key")


def test_input_call_site_is_not_mutated(scenario_catalog, make_call_site):
  call = make_call_site("getObject", STRING, STRING)
  before = (call.receiver_type, call.method_name, call.arguments, call.method_type)
  synthesize(call, match(call, scenario_catalog))
  assert (call.receiver_type, call.method_name, call.arguments, call.method_type) == before


def test_arity_disagreement_is_an_internal_error(scenario_catalog, make_call_site):
  rule = match(make_call_site("getObject", STRING, STRING), scenario_catalog)
  with pytest.raises(InternalInvariantError, match="binds 2 field"):
    synthesize(make_call_site("getObject", STRING), rule)


def test_unresolved_call_site_is_an_internal_error(scenario_catalog, make_call_site):
  rule = match(make_call_site("createBucket", STRING), scenario_catalog)
  with pytest.raises(InternalInvariantError):
    synthesize(make_call_site("createBucket", STRING, resolved=False), rule)
