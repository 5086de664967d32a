"""
Catalog assembly from runtime configuration.

Combines the default S3 rule table with any configured rule files and builds
the frozen catalog. This is the one-time initialization step; the resulting
catalog is shared read-only by every rewrite.
"""

from typing import List, Optional

from request_switcheroo.config import RuntimeConfig
from request_switcheroo.semantics.catalog import RuleCatalog, build_catalog
from request_switcheroo.semantics.file_loader import load_rule_file
from request_switcheroo.semantics.rule_table import default_rule_table
from request_switcheroo.semantics.schema import RuleFragment


def load_rule_fragments(config: RuntimeConfig) -> List[RuleFragment]:
  """
  Loads the rule files named by a configuration, in order.

  Args:
      config: Runtime settings.

  Returns:
      List[RuleFragment]: One fragment per configured file.

  Raises:
      RuleFileError: If a configured rule file cannot be loaded.
  """
  return [load_rule_file(path) for path in config.rule_files]


def load_catalog(config: Optional[RuntimeConfig] = None) -> RuleCatalog:
  """
  Builds the catalog for a configuration.

  Args:
      config: Runtime settings. Defaults to ``RuntimeConfig()``.

  Returns:
      RuleCatalog: The validated, frozen catalog.

  Raises:
      CatalogError: If the table is inconsistent or a rule file is invalid.
  """
  config = config or RuntimeConfig()
  table = default_rule_table(owner_type=config.owner_type, model_package=config.model_package)
  return build_catalog(table, duplicate_policy=config.duplicate_policy, fragments=load_rule_fragments(config))
