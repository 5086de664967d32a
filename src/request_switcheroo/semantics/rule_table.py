"""
Default Rule Table for the legacy S3 client.

Pure data. Each entry is a plain tuple; :func:`default_rule_table` wraps the
tuples into a :class:`~request_switcheroo.semantics.schema.RuleTable` against one
owner type and one model package. ``{model}`` in a parameter type is replaced by
the model package.

Order matters only for ``SPECIAL_MAPPINGS`` (matcher precedence) and for the
sequence of ``SHAPE_GROUPS`` (bucket evaluation order).
"""

from typing import Tuple

from request_switcheroo.enums import RuleShape
from request_switcheroo.semantics.schema import RuleTable, ShapeGroup, SpecialMapping

DEFAULT_OWNER_TYPE = "amazonaws.s3.AmazonS3"
DEFAULT_MODEL_PACKAGE = "amazonaws.s3.model."

STRING = "builtins.str"
INTEGER = "builtins.int"

# (legacy method, parameter types, request_of, field names)
SPECIAL_MAPPINGS: Tuple[Tuple[str, Tuple[str, ...], str, Tuple[str, ...]], ...] = (
  ("deleteVersion", (STRING, STRING, STRING), "deleteObject", ("bucket", "key", "versionId")),
  (
    "copyObject",
    (STRING, STRING, STRING, STRING),
    "copyObject",
    ("sourceBucket", "sourceKey", "destinationBucket", "destinationKey"),
  ),
  (
    "listVersions",
    (STRING, STRING, STRING, STRING, STRING, INTEGER),
    "listVersions",
    ("bucket", "prefix", "keyMarker", "versionIdMarker", "delimiter", "maxKeys"),
  ),
  ("setBucketPolicy", (STRING, STRING), "putBucketPolicy", ("bucket", "policy")),
  ("getObjectAcl", (STRING, STRING, STRING), "getObjectAcl", ("bucket", "key", "versionId")),
  (
    "setBucketAccelerateConfiguration",
    (STRING, "{model}BucketAccelerateConfiguration"),
    "setBucketAccelerateConfiguration",
    ("bucket", "accelerateConfiguration"),
  ),
  (
    "setBucketCrossOriginConfiguration",
    (STRING, "{model}BucketCrossOriginConfiguration"),
    "setBucketCrossOriginConfiguration",
    ("bucket", "corsConfiguration"),
  ),
  (
    "setBucketAnalyticsConfiguration",
    (STRING, "{model}analytics.AnalyticsConfiguration"),
    "setBucketAnalyticsConfiguration",
    ("bucket", "analyticsConfiguration"),
  ),
  (
    "setBucketIntelligentTieringConfiguration",
    (STRING, "{model}intelligenttiering.IntelligentTieringConfiguration"),
    "setBucketIntelligentTieringConfiguration",
    ("bucket", "intelligentTieringConfiguration"),
  ),
  (
    "setBucketInventoryConfiguration",
    (STRING, "{model}inventory.InventoryConfiguration"),
    "setBucketInventoryConfiguration",
    ("bucket", "inventoryConfiguration"),
  ),
  (
    "setBucketLifecycleConfiguration",
    (STRING, "{model}BucketLifecycleConfiguration"),
    "setBucketLifecycleConfiguration",
    ("bucket", "lifecycleConfiguration"),
  ),
  (
    "setBucketMetricsConfiguration",
    (STRING, "{model}metrics.MetricsConfiguration"),
    "setBucketMetricsConfiguration",
    ("bucket", "metricsConfiguration"),
  ),
  (
    "setBucketNotificationConfiguration",
    (STRING, "{model}BucketNotificationConfiguration"),
    "setBucketNotificationConfiguration",
    ("bucket", "notificationConfiguration"),
  ),
  (
    "setBucketOwnershipControls",
    (STRING, "{model}ownership.OwnershipControls"),
    "setBucketOwnershipControls",
    ("bucket", "ownershipControls"),
  ),
  (
    "setBucketReplicationConfiguration",
    (STRING, "{model}BucketReplicationConfiguration"),
    "setBucketReplicationConfiguration",
    ("bucket", "replicationConfiguration"),
  ),
  (
    "setBucketTaggingConfiguration",
    (STRING, "{model}BucketTaggingConfiguration"),
    "setBucketTaggingConfiguration",
    ("bucket", "taggingConfiguration"),
  ),
  (
    "setBucketWebsiteConfiguration",
    (STRING, "{model}BucketWebsiteConfiguration"),
    "setBucketWebsiteConfiguration",
    ("bucket", "configuration"),
  ),
)

BUCKET_ARG_METHODS = (
  "createBucket",
  "deleteBucket",
  "listObjects",
  "listObjectsV2",
  "getBucketCrossOriginConfiguration",
  "deleteBucketCrossOriginConfiguration",
  "getBucketVersioningConfiguration",
  "deleteBucketEncryption",
  "deleteBucketPolicy",
  "getBucketAccelerateConfiguration",
  "getBucketAcl",
  "getBucketEncryption",
  "getBucketLifecycleConfiguration",
  "getBucketNotificationConfiguration",
  "getBucketPolicy",
  "getBucketLocation",
  "deleteBucketLifecycleConfiguration",
  "deleteBucketReplicationConfiguration",
  "deleteBucketTaggingConfiguration",
  "deleteBucketWebsiteConfiguration",
  "getBucketLoggingConfiguration",
  "getBucketReplicationConfiguration",
  "getBucketTaggingConfiguration",
  "getBucketWebsiteConfiguration",
)

BUCKET_KEY_ARGS_METHODS = (
  "deleteObject",
  "getObject",
  "getObjectAcl",
  "getObjectMetadata",
)

BUCKET_ID_ARGS_METHODS = (
  "deleteBucketAnalyticsConfiguration",
  "deleteBucketIntelligentTieringConfiguration",
  "deleteBucketInventoryConfiguration",
  "deleteBucketMetricsConfiguration",
  "getBucketAnalyticsConfiguration",
  "getBucketIntelligentTieringConfiguration",
  "getBucketInventoryConfiguration",
  "getBucketMetricsConfiguration",
)

BUCKET_PREFIX_ARGS_METHODS = (
  "listObjects",
  "listObjectsV2",
  "listVersions",
)

# (shape, parameter types, field names, methods) in bucket evaluation order
SHAPE_GROUPS: Tuple[Tuple[RuleShape, Tuple[str, ...], Tuple[str, ...], Tuple[str, ...]], ...] = (
  (RuleShape.BUCKET, (STRING,), ("bucket",), BUCKET_ARG_METHODS),
  (RuleShape.BUCKET_KEY, (STRING, STRING), ("bucket", "key"), BUCKET_KEY_ARGS_METHODS),
  (RuleShape.BUCKET_ID, (STRING, STRING), ("bucket", "id"), BUCKET_ID_ARGS_METHODS),
  (RuleShape.BUCKET_PREFIX, (STRING, STRING), ("bucket", "prefix"), BUCKET_PREFIX_ARGS_METHODS),
)


def default_rule_table(
  owner_type: str = DEFAULT_OWNER_TYPE,
  model_package: str = DEFAULT_MODEL_PACKAGE,
) -> RuleTable:
  """
  Builds the authoring table for the legacy S3 client.

  Args:
      owner_type: Fully-qualified legacy client type.
      model_package: Package prefix of request and configuration types (dot-terminated).

  Returns:
      RuleTable: The declarative table, ready for ``build_catalog``.
  """
  special = tuple(
    SpecialMapping(
      method=method,
      param_types=tuple(t.format(model=model_package) for t in param_types),
      request_of=request_of,
      field_names=field_names,
    )
    for method, param_types, request_of, field_names in SPECIAL_MAPPINGS
  )
  groups = tuple(
    ShapeGroup(shape=shape, param_types=param_types, field_names=field_names, methods=methods)
    for shape, param_types, field_names, methods in SHAPE_GROUPS
  )
  return RuleTable(owner_type=owner_type, model_package=model_package, special=special, groups=groups)
