"""
Orchestration Engine for source conversion.

The `ASTEngine` drives one Python module through the pipeline:

1.  **Parsing**: source text to a LibCST module.
2.  **Type Resolution**: the `TypeResolver` assigns static types to receivers
    and arguments.
3.  **Call Rewriting**: the `CallSiteRewriter` applies the rule catalog to
    every method call.
4.  **Import Injection**: obligations emitted by rewrites become imports.

The catalog is built once per engine and shared read-only by every run.
"""

from typing import Optional

import libcst as cst

from request_switcheroo.analysis.symbol_table import resolve_types
from request_switcheroo.config import RuntimeConfig
from request_switcheroo.core.conversion_result import ConversionResult
from request_switcheroo.core.import_fixer import RequestImportInjector, RequestNamer, collect_bindings
from request_switcheroo.core.obligations import ImportLedger
from request_switcheroo.core.rewriter import CallSiteRewriter
from request_switcheroo.core.tracer import get_tracer, reset_tracer
from request_switcheroo.enums import RewriteOutcome
from request_switcheroo.semantics.catalog import RuleCatalog
from request_switcheroo.semantics.manager import load_catalog


class ASTEngine:
  """
  The main conversion unit.

  Holds the configuration and the frozen catalog; each :meth:`run` call is
  independent.
  """

  def __init__(self, catalog: Optional[RuleCatalog] = None, config: Optional[RuntimeConfig] = None):
    """
    Initializes the Engine.

    Args:
        catalog: Prebuilt catalog. Built from ``config`` if None.
        config: Runtime configuration. Defaults to ``RuntimeConfig()``.

    Raises:
        CatalogError: If the catalog has to be built and is inconsistent.
    """
    self.config = config or RuntimeConfig()
    self.catalog = catalog if catalog is not None else load_catalog(self.config)

  def parse(self, code: str) -> cst.Module:
    """
    Parses source string into a LibCST Module.

    Raises:
        libcst.ParserSyntaxError: If the input code is invalid Python.
    """
    return cst.parse_module(code)

  def run(self, code: str) -> ConversionResult:
    """
    Executes the full pipeline on one source unit.

    Args:
        code: Python source text.

    Returns:
        ConversionResult: Converted code, statistics and trace. On a parse
        error ``success`` is False and the original code is returned.
    """
    reset_tracer()
    tracer = get_tracer()
    tracer.start_phase("Conversion Pipeline", self.config.owner_type)

    tracer.start_phase("Parsing", "Source -> CST")
    try:
      tree = self.parse(code)
    except cst.ParserSyntaxError as e:
      tracer.end_phase()
      tracer.end_phase()
      return ConversionResult(
        code=code,
        errors=[f"Parse Error: {e}"],
        success=False,
        trace_events=tracer.export(),
      )
    tracer.end_phase()

    tracer.start_phase("Type Resolution", "Receivers and arguments")
    table = resolve_types(
      tree,
      receiver_hints=self.config.receiver_hints,
      factory_returns=self.config.factory_returns,
    )
    tracer.end_phase()

    tracer.start_phase("Call Rewriting", "Catalog matching")
    ledger = ImportLedger()
    namer = RequestNamer(collect_bindings(tree))
    rewriter = CallSiteRewriter(
      self.catalog,
      table,
      keyword_arguments=self.config.keyword_arguments,
      ledger=ledger,
      namer=namer,
    )
    tree = tree.visit(rewriter)
    tracer.end_phase()

    injected = []
    if ledger:
      tracer.start_phase("Import Injection", "Applying import obligations")
      injector = RequestImportInjector(ledger, aliases=namer.aliases)
      tree = tree.visit(injector)
      injected = injector.injected
      tracer.end_phase()

    counts = rewriter.outcome_counts
    tracer.end_phase()
    return ConversionResult(
      code=tree.code,
      rewrites=counts[RewriteOutcome.REWRITTEN],
      unresolved=counts[RewriteOutcome.UNRESOLVED],
      imports=injected,
      trace_events=tracer.export(),
    )
