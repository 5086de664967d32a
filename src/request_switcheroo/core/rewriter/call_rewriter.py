"""
Call-Site Rewriter.

LibCST transformer acting as the traversal driver: for every method call
``receiver.method(args)`` it builds a :class:`CallSite` view from the symbol
table, asks :func:`rewrite_call_site` for a decision, and splices the
rendered replacement into the tree.

Traversal is post-order, so argument sub-expressions are already rewritten
when their enclosing call is processed; each call site is rewritten at most
once per pass.
"""

from typing import Dict, List, Optional

import libcst as cst

from request_switcheroo.analysis.symbol_table import SymbolTable
from request_switcheroo.core.call_site import ArgumentView, CallSite, MethodType
from request_switcheroo.core.import_fixer.naming import RequestNamer
from request_switcheroo.core.obligations import ImportLedger
from request_switcheroo.core.rewrite import RewriteResult, rewrite_call_site
from request_switcheroo.core.rewriter.render import node_source, render_replacement
from request_switcheroo.core.tracer import get_tracer
from request_switcheroo.enums import RewriteOutcome
from request_switcheroo.semantics.catalog import RuleCatalog


class CallSiteRewriter(cst.CSTTransformer):
  """
  Applies the rule catalog to every method call of a module.
  """

  def __init__(
    self,
    catalog: RuleCatalog,
    table: SymbolTable,
    keyword_arguments: bool = True,
    ledger: Optional[ImportLedger] = None,
    namer: Optional[RequestNamer] = None,
  ):
    """
    Initializes the rewriter.

    Args:
        catalog: Frozen rule catalog.
        table: Types of the module being rewritten (from ``resolve_types``).
        keyword_arguments: Render request fields as keywords.
        ledger: Collector for import obligations; a new one is created if None.
        namer: Chooses the local name of request types. Without one, simple
            names are used.
    """
    self.catalog = catalog
    self.table = table
    self.keyword_arguments = keyword_arguments
    self.ledger = ledger if ledger is not None else ImportLedger()
    self.namer = namer if namer is not None else RequestNamer({})
    self.results: List[RewriteResult] = []

  @property
  def outcome_counts(self) -> Dict[RewriteOutcome, int]:
    counts = {outcome: 0 for outcome in RewriteOutcome}
    for result in self.results:
      counts[result.outcome] += 1
    return counts

  def describe(self, original: cst.Call, updated: cst.Call) -> CallSite:
    """
    Builds the engine's view of a method call.

    Types come from ``original`` (the analyzed tree); expressions come from
    ``updated`` so that rewrites already applied inside the arguments survive.
    Keyword or starred arguments leave the call unresolved.

    Args:
        original: The call as analyzed.
        updated: The call with rewritten children.

    Returns:
        CallSite: The call-site view.
    """
    func = original.func
    receiver_type = self.table.type_name(func.value)
    arguments = tuple(
      ArgumentView(expression=new_arg.value, type_name=self.table.type_name(old_arg.value))
      for old_arg, new_arg in zip(original.args, updated.args)
    )

    positional_only = all(arg.keyword is None and not arg.star for arg in original.args)
    method_type = None
    if receiver_type is not None and positional_only and all(a.type_name is not None for a in arguments):
      method_type = MethodType(
        declaring_type=receiver_type,
        name=func.attr.value,
        parameter_types=tuple(a.type_name for a in arguments),
        parameter_names=tuple(f"arg{i}" for i in range(len(arguments))),
      )

    return CallSite(
      receiver_type=receiver_type,
      method_name=func.attr.value,
      arguments=arguments,
      method_type=method_type,
      node=updated,
    )

  def leave_Call(self, original_node: cst.Call, updated_node: cst.Call) -> cst.BaseExpression:
    if not isinstance(original_node.func, cst.Attribute):
      return updated_node

    tracer = get_tracer()
    call_site = self.describe(original_node, updated_node)
    result = rewrite_call_site(call_site, self.catalog)
    self.results.append(result)

    label = f"{call_site.receiver_type or '?'}.{call_site.method_name}"
    if not result.changed:
      detail = "Callee type unresolved" if result.outcome == RewriteOutcome.UNRESOLVED else "No catalog entry"
      tracer.log_inspection(label, result.outcome.value, detail)
      return updated_node

    rule = result.rule
    tracer.log_match(str(rule.pattern), rule.target_type, rule.shape.value)

    request_name = self.namer.local_name(result.obligation.type_name)
    new_node = render_replacement(result.call_site, updated_node, self.keyword_arguments, request_name)
    if self.ledger.request(result.obligation):
      tracer.log_import(result.obligation.module, result.obligation.name)

    tracer.log_mutation(label, node_source(updated_node), node_source(new_node))
    return new_node
