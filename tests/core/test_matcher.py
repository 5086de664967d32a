"""
Tests for the Call Matcher.

Matching is exact: receiver type, method name and the ordered argument types
must all equal a cataloged signature.
"""

from request_switcheroo.core.matcher import match, observed_signature
from request_switcheroo.semantics.rule_table import INTEGER, STRING
from request_switcheroo.semantics.schema import SignaturePattern


def test_observed_signature_of_resolved_call(make_call_site):
  call = make_call_site("getObject", STRING, STRING)
  assert observed_signature(call) == SignaturePattern(
    owner_type="Client", method_name="getObject", param_types=(STRING, STRING)
  )


def test_observed_signature_of_unresolved_call(make_call_site):
  assert observed_signature(make_call_site("getObject", STRING, STRING, resolved=False)) is None
  assert observed_signature(make_call_site("getObject", STRING, None)) is None
  assert observed_signature(make_call_site("getObject", STRING, STRING, receiver_type=None)) is None


def test_match_returns_cataloged_rule(scenario_catalog, make_call_site):
  rule = match(make_call_site("createBucket", STRING), scenario_catalog)
  assert rule.target_type == "pkg.model.CreateBucketRequest"


def test_match_rejects_wider_or_narrower_types(scenario_catalog, make_call_site):
  # A subtype or a different type never substitutes for the declared parameter type.
  assert match(make_call_site("createBucket", "builtins.object"), scenario_catalog) is None
  assert match(make_call_site("createBucket", "app.BucketName"), scenario_catalog) is None
  assert match(make_call_site("createBucket", INTEGER), scenario_catalog) is None


def test_match_rejects_other_receiver(scenario_catalog, make_call_site):
  assert match(make_call_site("createBucket", STRING, receiver_type="OtherClient"), scenario_catalog) is None


def test_match_rejects_arity_variation(scenario_catalog, make_call_site):
  assert match(make_call_site("createBucket"), scenario_catalog) is None
  assert match(make_call_site("createBucket", STRING, STRING), scenario_catalog) is None


def test_match_unknown_method(scenario_catalog, make_call_site):
  assert match(make_call_site("unknownMethod", STRING), scenario_catalog) is None


def test_match_unresolved_never_matches(scenario_catalog, make_call_site):
  assert match(make_call_site("createBucket", None), scenario_catalog) is None
  assert match(make_call_site("createBucket", STRING, resolved=False), scenario_catalog) is None


def test_special_mapping_precedes_buckets(scenario_catalog, make_call_site):
  rule = match(make_call_site("listVersions", STRING, STRING, STRING, STRING, STRING, INTEGER), scenario_catalog)
  assert rule.field_names == ("bucket", "prefix", "keyMarker", "versionIdMarker", "delimiter", "maxKeys")
  prefix_rule = match(make_call_site("listVersions", STRING, STRING), scenario_catalog)
  assert prefix_rule.field_names == ("bucket", "prefix")
  assert rule.target_type == prefix_rule.target_type == "pkg.model.ListVersionsRequest"
