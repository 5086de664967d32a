"""
Enumerations for request-switcheroo.

This module defines the standard enumerations used across the codebase for
catalog partitioning, rewrite outcomes and catalog build policies.
"""

from enum import Enum


class RuleShape(str, Enum):
  """
  Argument-shape buckets of the Rule Catalog.

  The declaration order is the evaluation order used by the matcher:
  ``SPECIAL`` mappings first, then the generic buckets.
  """

  SPECIAL = "special"  # Individually authored, irregular field names
  BUCKET = "bucket"  # (bucket)
  BUCKET_KEY = "bucket_key"  # (bucket, key)
  BUCKET_ID = "bucket_id"  # (bucket, id)
  BUCKET_PREFIX = "bucket_prefix"  # (bucket, prefix)


class RewriteOutcome(str, Enum):
  """
  Result classification of a single call-site rewrite attempt.
  """

  REWRITTEN = "rewritten"
  UNRESOLVED = "unresolved"  # Callee type metadata absent
  NO_MATCH = "no_match"  # Signature not present in the catalog


class DuplicatePolicy(str, Enum):
  """
  Resolution policy when two rules are registered for the same exact signature.
  """

  REJECT = "reject"
  LAST_WRITE_WINS = "last_write_wins"
