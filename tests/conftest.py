"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Catalog fixtures for the default S3 table and a small scenario table.
- A factory for host-independent call sites.
- Console/tracer isolation.
"""

import sys
from pathlib import Path
from typing import Callable, Optional

import pytest

# Add src to path so we can import 'request_switcheroo' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from request_switcheroo.core.call_site import ArgumentView, CallSite, MethodType  # noqa: E402
from request_switcheroo.core.tracer import reset_tracer  # noqa: E402
from request_switcheroo.semantics.catalog import RuleCatalog, build_catalog  # noqa: E402
from request_switcheroo.semantics.rule_table import default_rule_table  # noqa: E402
from request_switcheroo.utils.console import reset_console  # noqa: E402

SCENARIO_OWNER = "Client"
SCENARIO_PACKAGE = "pkg.model."


@pytest.fixture(autouse=True)
def isolate_globals():
  """Fresh tracer and console for every test."""
  reset_tracer()
  yield
  reset_console()


@pytest.fixture(scope="session")
def catalog() -> RuleCatalog:
  """The default catalog for ``amazonaws.s3.AmazonS3``."""
  return build_catalog(default_rule_table())


@pytest.fixture(scope="session")
def scenario_catalog() -> RuleCatalog:
  """Default table bound to owner ``Client`` and package ``pkg.model.``."""
  return build_catalog(default_rule_table(owner_type=SCENARIO_OWNER, model_package=SCENARIO_PACKAGE))


@pytest.fixture
def make_call_site() -> Callable[..., CallSite]:
  """
  Factory for resolved call sites with opaque argument expressions.

  Usage: ``make_call_site("getObject", STRING, STRING)``. Pass ``None`` as an
  argument type to leave that argument unresolved.
  """

  def _make(
    method: str,
    *arg_types: Optional[str],
    receiver_type: Optional[str] = SCENARIO_OWNER,
    resolved: bool = True,
  ) -> CallSite:
    arguments = tuple(ArgumentView(expression=object(), type_name=t) for t in arg_types)
    method_type = None
    if resolved and receiver_type is not None:
      method_type = MethodType(
        declaring_type=receiver_type,
        name=method,
        parameter_types=tuple(t or "?" for t in arg_types),
        parameter_names=tuple(f"p{i}" for i in range(len(arg_types))),
        return_type="Result",
        thrown_types=("ClientError",),
      )
    return CallSite(
      receiver_type=receiver_type,
      method_name=method,
      arguments=arguments,
      method_type=method_type,
      node=object(),
    )

  return _make
