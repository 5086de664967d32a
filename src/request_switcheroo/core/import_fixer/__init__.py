"""
Import Fixer Package.

Provides :class:`RequestImportInjector`, the collaborator that turns import
obligations into module-level ``from ... import ...`` statements, and
:class:`RequestNamer`, which picks the local name of each request type.
"""

from request_switcheroo.core.import_fixer.injector import RequestImportInjector
from request_switcheroo.core.import_fixer.naming import RequestNamer, collect_bindings

__all__ = ["RequestImportInjector", "RequestNamer", "collect_bindings"]
