"""
Runtime Configuration Store.

Settings are resolved from ``[tool.request_switcheroo]`` in the nearest
``pyproject.toml`` and then overridden by explicit (CLI) arguments.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from request_switcheroo.enums import DuplicatePolicy
from request_switcheroo.semantics.rule_table import DEFAULT_MODEL_PACKAGE, DEFAULT_OWNER_TYPE
from request_switcheroo.utils.console import log_warning

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

DEFAULT_CLIENT_FACTORY = "amazonaws.s3.AmazonS3ClientBuilder.defaultClient"


class RuntimeConfig(BaseModel):
  """
  Configuration container for catalog building and source conversion.
  """

  owner_type: str = Field(DEFAULT_OWNER_TYPE, description="Fully-qualified legacy client type.")
  model_package: str = Field(DEFAULT_MODEL_PACKAGE, description="Package prefix of request types.")
  duplicate_policy: DuplicatePolicy = Field(
    DuplicatePolicy.REJECT, description="How repeated signatures in the rule table are resolved."
  )
  rule_files: List[Path] = Field(default_factory=list, description="Extra JSON rule tables.")
  keyword_arguments: bool = Field(True, description="Render request fields as keyword arguments.")
  receiver_hints: Dict[str, str] = Field(
    default_factory=dict, description="Variable name -> fully-qualified type for untyped code."
  )
  factory_returns: Dict[str, str] = Field(
    default_factory=dict,
    description=(
      "Factory callable -> fully-qualified type it returns. "
      "The default client factory returns owner_type unless mapped here."
    ),
  )

  @field_validator("model_package")
  @classmethod
  def validate_model_package(cls, v: str) -> str:
    """
    Normalizes the package prefix to end with a dot.

    Args:
        v: Raw prefix (``pkg.model`` or ``pkg.model.``).

    Returns:
        str: Dot-terminated prefix.

    Raises:
        ValueError: If the prefix is empty.
    """
    v_clean = v.strip()
    if not v_clean.strip("."):
      raise ValueError("model_package must name a package")
    return v_clean if v_clean.endswith(".") else f"{v_clean}."

  @model_validator(mode="after")
  def bind_default_factory(self) -> "RuntimeConfig":
    """Maps the default client factory to the configured owner type."""
    self.factory_returns.setdefault(DEFAULT_CLIENT_FACTORY, self.owner_type)
    return self

  @classmethod
  def load(
    cls,
    owner_type: Optional[str] = None,
    model_package: Optional[str] = None,
    duplicate_policy: Optional[DuplicatePolicy] = None,
    rule_files: Optional[List[Path]] = None,
    keyword_arguments: Optional[bool] = None,
    receiver_hints: Optional[Dict[str, str]] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with explicit arguments.

    Args:
        owner_type: Override for the legacy client type.
        model_package: Override for the request package prefix.
        duplicate_policy: Override for duplicate handling.
        rule_files: Rule files appended after those listed in TOML.
        keyword_arguments: Override for keyword rendering.
        receiver_hints: Hints merged over TOML hints.
        search_path: Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration.
    """
    toml_config, toml_dir = _load_toml_settings(search_path or Path.cwd())

    final_rule_files = []
    for raw in toml_config.get("rule_files", []):
      path = Path(raw)
      final_rule_files.append((toml_dir / path).resolve() if toml_dir else path.resolve())
    final_rule_files.extend(Path(p) for p in rule_files or [])

    final_kw = keyword_arguments
    if final_kw is None:
      final_kw = toml_config.get("keyword_arguments", True)

    return cls(
      owner_type=owner_type or toml_config.get("owner_type", DEFAULT_OWNER_TYPE),
      model_package=model_package or toml_config.get("model_package", DEFAULT_MODEL_PACKAGE),
      duplicate_policy=duplicate_policy or toml_config.get("duplicate_policy", DuplicatePolicy.REJECT),
      rule_files=final_rule_files,
      keyword_arguments=final_kw,
      receiver_hints={**toml_config.get("receiver_hints", {}), **(receiver_hints or {})},
      factory_returns=toml_config.get("factory_returns", {}),
    )


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches ``start_path`` and its parents for pyproject.toml.

  Args:
      start_path: Directory to start from.

  Returns:
      Tuple[Dict, Optional[Path]]: The tool section and the directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError):
        return {}, None
      return data.get("tool", {}).get("request_switcheroo", {}), parent

  return {}, None


def parse_cli_key_values(items: Optional[List[str]]) -> Dict[str, str]:
  """
  Parses ``name=Type`` CLI pairs into a dictionary.

  Args:
      items: Raw strings from argparse.

  Returns:
      Dict[str, str]: Parsed pairs; malformed items are skipped with a warning.
  """
  if not items:
    return {}

  parsed = {}
  for item in items:
    if "=" not in item:
      log_warning(f"Ignoring invalid hint format: '{item}'. Expected 'name=Type'.")
      continue
    key, value = item.split("=", 1)
    parsed[key.strip()] = value.strip()
  return parsed
