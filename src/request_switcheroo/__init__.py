"""
request-switcheroo Package.

A deterministic source-to-source transformer that rewrites calls to a legacy
multi-argument client API into calls taking a single request object.

Usage
-----

Simple String Conversion
^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import request_switcheroo as rs
    code = 'from amazonaws.s3 import AmazonS3\\ns3 = AmazonS3()\\ns3.getObject("b", "k")\\n'
    print(rs.convert(code))
    # from amazonaws.s3.model import GetObjectRequest
    # ...
    # s3.getObject(GetObjectRequest(bucket="b", key="k"))

Call-Site Engine
^^^^^^^^^^^^^^^^

.. code-block:: python

    from request_switcheroo import CallSite, load_catalog, rewrite_call_site

    catalog = load_catalog()
    result = rewrite_call_site(call_site, catalog)
    if result.changed:
        replacement, obligation = result.call_site, result.obligation
"""

from typing import Optional

from request_switcheroo.config import RuntimeConfig
from request_switcheroo.core.call_site import ArgumentView, CallSite, MethodType, ReplacementCallSite
from request_switcheroo.core.engine import ASTEngine
from request_switcheroo.core.conversion_result import ConversionResult
from request_switcheroo.core.rewrite import RewriteResult, rewrite_call_site
from request_switcheroo.semantics.catalog import RuleCatalog, build_catalog
from request_switcheroo.semantics.manager import load_catalog

__version__ = "0.1.0"


def convert(code: str, config: Optional[RuntimeConfig] = None, catalog: Optional[RuleCatalog] = None) -> str:
  """
  Rewrites legacy client calls in a string of Python code.

  Args:
      code: The source code to convert.
      config: Runtime settings. Defaults to ``RuntimeConfig()``.
      catalog: An existing catalog. Built from ``config`` if None.

  Returns:
      str: The converted source code.

  Raises:
      ValueError: If the source cannot be parsed.
  """
  engine = ASTEngine(catalog=catalog, config=config)
  result = engine.run(code)
  if not result.success:
    raise ValueError("Conversion failed:\n" + "\n".join(result.errors))
  return result.code


__all__ = [
  "ASTEngine",
  "ArgumentView",
  "CallSite",
  "ConversionResult",
  "MethodType",
  "ReplacementCallSite",
  "RewriteResult",
  "RuleCatalog",
  "RuntimeConfig",
  "build_catalog",
  "convert",
  "load_catalog",
  "rewrite_call_site",
  "__version__",
]
