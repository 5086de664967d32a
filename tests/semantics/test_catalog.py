"""
Tests for Rule Catalog construction and lookup.

Verifies that:
1.  The default table expands into the expected buckets and targets.
2.  Special mappings take precedence and keep their declaration order.
3.  Arity mismatches and duplicate signatures fail the build (or are overridden explicitly).
4.  A built catalog cannot be mutated.
"""

from unittest.mock import patch

import pytest

from request_switcheroo.core.errors import ArityMismatchError, CatalogError, DuplicateRuleError
from request_switcheroo.enums import DuplicatePolicy, RuleShape
from request_switcheroo.semantics.catalog import BUCKET_ORDER, build_catalog, request_type_name
from request_switcheroo.semantics.rule_table import (
  BUCKET_ARG_METHODS,
  BUCKET_ID_ARGS_METHODS,
  BUCKET_KEY_ARGS_METHODS,
  BUCKET_PREFIX_ARGS_METHODS,
  SPECIAL_MAPPINGS,
  STRING,
  default_rule_table,
)
from request_switcheroo.semantics.schema import RuleTable, ShapeGroup, SignaturePattern, SpecialMapping

OWNER = "amazonaws.s3.AmazonS3"


def sig(method, *types, owner=OWNER):
  return SignaturePattern(owner_type=owner, method_name=method, param_types=types)


def small_table(special=(), groups=()):
  return RuleTable(owner_type="Client", model_package="pkg.model.", special=special, groups=groups)


def test_request_type_name_capitalizes_first_letter_only():
  assert request_type_name("pkg.model.", "getObject") == "pkg.model.GetObjectRequest"
  assert request_type_name("pkg.model.", "listObjectsV2") == "pkg.model.ListObjectsV2Request"


def test_default_catalog_bucket_sizes(catalog):
  assert len(catalog.bucket(RuleShape.SPECIAL)) == len(SPECIAL_MAPPINGS) == 17
  assert len(catalog.bucket(RuleShape.BUCKET)) == len(BUCKET_ARG_METHODS) == 24
  assert len(catalog.bucket(RuleShape.BUCKET_KEY)) == len(BUCKET_KEY_ARGS_METHODS) == 4
  assert len(catalog.bucket(RuleShape.BUCKET_ID)) == len(BUCKET_ID_ARGS_METHODS) == 8
  assert len(catalog.bucket(RuleShape.BUCKET_PREFIX)) == len(BUCKET_PREFIX_ARGS_METHODS) == 3
  assert len(catalog) == 56
  assert len(list(catalog)) == 56


def test_special_mapping_targets(catalog):
  rule = catalog.lookup(sig("deleteVersion", STRING, STRING, STRING))
  assert rule.target_type == "amazonaws.s3.model.DeleteObjectRequest"
  assert rule.field_names == ("bucket", "key", "versionId")
  assert rule.shape == RuleShape.SPECIAL

  policy = catalog.lookup(sig("setBucketPolicy", STRING, STRING))
  assert policy.target_type == "amazonaws.s3.model.PutBucketPolicyRequest"
  assert policy.field_names == ("bucket", "policy")


def test_special_mapping_with_model_parameter_type(catalog):
  rule = catalog.lookup(
    sig("setBucketAccelerateConfiguration", STRING, "amazonaws.s3.model.BucketAccelerateConfiguration")
  )
  assert rule is not None
  assert rule.target_type == "amazonaws.s3.model.SetBucketAccelerateConfigurationRequest"
  assert rule.field_names == ("bucket", "accelerateConfiguration")

  # Same method with a plain string in second position is not cataloged.
  assert catalog.lookup(sig("setBucketAccelerateConfiguration", STRING, STRING)) is None


def test_overloads_of_one_method_live_in_different_buckets(catalog):
  two = catalog.lookup(sig("getObjectAcl", STRING, STRING))
  three = catalog.lookup(sig("getObjectAcl", STRING, STRING, STRING))
  assert two.shape == RuleShape.BUCKET_KEY
  assert two.field_names == ("bucket", "key")
  assert three.shape == RuleShape.SPECIAL
  assert three.field_names == ("bucket", "key", "versionId")
  assert two.target_type == three.target_type == "amazonaws.s3.model.GetObjectAclRequest"


def test_same_shape_different_methods_are_not_conflated(scenario_catalog):
  list_v1 = scenario_catalog.lookup(sig("listObjects", STRING, owner="Client"))
  list_v2 = scenario_catalog.lookup(sig("listObjectsV2", STRING, owner="Client"))
  assert list_v1.target_type == "pkg.model.ListObjectsRequest"
  assert list_v2.target_type == "pkg.model.ListObjectsV2Request"
  assert list_v1.field_names == list_v2.field_names == ("bucket",)
  assert list_v1 is not list_v2


def test_id_and_prefix_buckets_bind_their_field_names(catalog):
  by_id = catalog.lookup(sig("getBucketMetricsConfiguration", STRING, STRING))
  by_prefix = catalog.lookup(sig("listObjectsV2", STRING, STRING))
  assert by_id.field_names == ("bucket", "id")
  assert by_prefix.field_names == ("bucket", "prefix")
  assert by_prefix.shape == RuleShape.BUCKET_PREFIX


def test_lookup_requires_exact_owner(catalog):
  assert catalog.lookup(sig("getObject", STRING, STRING, owner="amazonaws.s3.AmazonS3Client")) is None
  assert sig("getObject", STRING, STRING) in catalog
  assert "getObject" not in catalog


def test_iteration_order_is_special_then_buckets(catalog):
  rules = list(catalog.rules())
  assert [r.pattern.method_name for r in rules[:3]] == ["deleteVersion", "copyObject", "listVersions"]
  shapes = [r.shape for r in rules]
  order = [RuleShape.SPECIAL, *BUCKET_ORDER]
  assert shapes == sorted(shapes, key=order.index)


def test_catalog_views_are_read_only(catalog):
  bucket = catalog.bucket(RuleShape.BUCKET)
  with pytest.raises(TypeError):
    bucket[sig("headBucket", STRING)] = next(iter(bucket.values()))
  with pytest.raises(TypeError):
    del catalog.bucket(RuleShape.SPECIAL)[sig("deleteVersion", STRING, STRING, STRING)]


def test_special_arity_mismatch_fails_build():
  table = small_table(
    special=(
      SpecialMapping(method="deleteVersion", param_types=(STRING, STRING, STRING), request_of="deleteObject",
                     field_names=("bucket", "key")),
    )
  )
  with pytest.raises(ArityMismatchError) as exc:
    build_catalog(table)
  assert exc.value.method == "deleteVersion"
  assert exc.value.param_types == (STRING, STRING, STRING)
  assert exc.value.field_names == ("bucket", "key")


def test_group_arity_mismatch_fails_build():
  table = small_table(
    groups=(ShapeGroup(shape=RuleShape.BUCKET_KEY, param_types=(STRING,), field_names=("bucket", "key"),
                       methods=("getObject",)),)
  )
  with pytest.raises(ArityMismatchError):
    build_catalog(table)


def test_duplicate_rejected_by_default():
  table = small_table(
    groups=(
      ShapeGroup(shape=RuleShape.BUCKET, param_types=(STRING,), field_names=("bucket",), methods=("createBucket",)),
      ShapeGroup(shape=RuleShape.BUCKET_PREFIX, param_types=(STRING,), field_names=("prefix",),
                 methods=("createBucket",)),
    )
  )
  with pytest.raises(DuplicateRuleError, match="Duplicate rule for Client.createBucket"):
    build_catalog(table)


def test_duplicate_between_special_and_group_rejected():
  table = small_table(
    special=(SpecialMapping(method="createBucket", param_types=(STRING,), field_names=("name",),
                            target_type="pkg.model.CreateBucketRequest"),),
    groups=(
      ShapeGroup(shape=RuleShape.BUCKET, param_types=(STRING,), field_names=("bucket",), methods=("createBucket",)),
    ),
  )
  with pytest.raises(CatalogError):
    build_catalog(table)


@patch("request_switcheroo.semantics.catalog.log_warning")
def test_last_write_wins_replaces_and_moves_rule(mock_warn):
  table = small_table(
    groups=(
      ShapeGroup(shape=RuleShape.BUCKET, param_types=(STRING,), field_names=("bucket",), methods=("createBucket",)),
      ShapeGroup(shape=RuleShape.BUCKET_PREFIX, param_types=(STRING,), field_names=("prefix",),
                 methods=("createBucket",)),
    )
  )
  result = build_catalog(table, duplicate_policy=DuplicatePolicy.LAST_WRITE_WINS)

  pattern = sig("createBucket", STRING, owner="Client")
  rule = result.lookup(pattern)
  assert rule.field_names == ("prefix",)
  assert rule.shape == RuleShape.BUCKET_PREFIX
  assert pattern not in result.bucket(RuleShape.BUCKET)
  assert len(result) == 1
  mock_warn.assert_called_once()
  assert "createBucket" in mock_warn.call_args[0][0]


def test_group_cannot_target_special_partition():
  table = small_table(
    groups=(ShapeGroup(shape=RuleShape.SPECIAL, param_types=(STRING,), field_names=("bucket",), methods=("m",)),)
  )
  with pytest.raises(CatalogError, match="special"):
    build_catalog(table)


def test_default_table_respects_owner_and_package():
  table = default_rule_table(owner_type="Client", model_package="pkg.model.")
  result = build_catalog(table)
  rule = result.lookup(
    sig("setBucketMetricsConfiguration", STRING, "pkg.model.metrics.MetricsConfiguration", owner="Client")
  )
  assert rule.target_type == "pkg.model.SetBucketMetricsConfigurationRequest"
