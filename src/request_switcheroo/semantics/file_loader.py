"""
File Loading Logic for external Rule Tables.

Rule files are JSON documents with two optional lists mirroring the default
table::

    {
      "special": [
        {"method": "restoreObject", "param_types": ["builtins.str", "builtins.str", "builtins.int"],
         "request_of": "restoreObject", "field_names": ["bucket", "key", "expirationInDays"]}
      ],
      "groups": [
        {"shape": "bucket", "param_types": ["builtins.str"], "field_names": ["bucket"],
         "methods": ["getBucketOwnershipControls"]}
      ]
    }

Fragments are expanded after the complete default table, so default precedence
holds and repeated signatures go through the catalog's duplicate policy.
"""

import json
from pathlib import Path

from pydantic import ValidationError

from request_switcheroo.core.errors import RuleFileError
from request_switcheroo.semantics.schema import RuleFragment


def load_rule_file(path: Path) -> RuleFragment:
  """
  Reads and validates one rule file.

  Args:
      path: Location of the JSON document.

  Returns:
      RuleFragment: The validated entries.

  Raises:
      RuleFileError: If the file is missing, not JSON, or violates the schema.
  """
  try:
    with open(path, "r", encoding="utf-8") as f:
      content = json.load(f)
  except FileNotFoundError as e:
    raise RuleFileError(f"Rule file not found: {path}") from e
  except json.JSONDecodeError as e:
    raise RuleFileError(f"Rule file {path.name} is not valid JSON: {e}") from e

  try:
    return RuleFragment.model_validate(content)
  except ValidationError as e:
    raise RuleFileError(f"Rule file {path.name} does not match the rule schema:\n{e}") from e
