"""
Rendering of replacement call sites back into LibCST nodes.

The argument expressions placed in the request constructor are the very
nodes carried by the call-site view; nothing is re-parsed or copied.
"""

from typing import Optional, Sequence

import libcst as cst

from request_switcheroo.core.call_site import ConstructorInvocation, ReplacementCallSite

_RENDER_CTX = cst.parse_module("")

_TIGHT_EQUAL = cst.AssignEqual(
  whitespace_before=cst.SimpleWhitespace(""),
  whitespace_after=cst.SimpleWhitespace(""),
)


def node_source(node: cst.CSTNode) -> str:
  """
  Renders a detached node as source text.

  Args:
      node: Any CST node.

  Returns:
      str: The code for the node.
  """
  return _RENDER_CTX.code_for_node(node)


def render_constructor(
  ctor: ConstructorInvocation,
  keyword_arguments: bool = True,
  source_args: Sequence[cst.Arg] = (),
  func_name: Optional[str] = None,
) -> cst.Call:
  """
  Builds ``Target(field=arg, ...)`` (or the positional form).

  Commas (with any comment or line break after them) and the whitespace
  before them are taken from the matching entries of ``source_args``; the
  last constructor argument gets none, its layout belongs to the outer call.

  Args:
      ctor: The synthesized constructor invocation.
      keyword_arguments: Emit ``field=value`` instead of bare positional values.
      source_args: The argument list being replaced.
      func_name: Local name bound to the target type. Defaults to its simple name.

  Returns:
      cst.Call: The constructor call.
  """
  args = []
  last = len(ctor.arguments) - 1
  for idx, (field_name, view) in enumerate(zip(ctor.field_names, ctor.arguments)):
    layout = {}
    if idx < last and idx < len(source_args):
      layout = {"comma": source_args[idx].comma, "whitespace_after_arg": source_args[idx].whitespace_after_arg}
    if keyword_arguments:
      args.append(cst.Arg(value=view.expression, keyword=cst.Name(field_name), equal=_TIGHT_EQUAL, **layout))
    else:
      args.append(cst.Arg(value=view.expression, **layout))
  return cst.Call(func=cst.Name(func_name or ctor.simple_name), args=args)


def render_replacement(
  replacement: ReplacementCallSite,
  updated_node: cst.Call,
  keyword_arguments: bool = True,
  request_name: Optional[str] = None,
) -> cst.Call:
  """
  Swaps the argument list of a call for the single request argument.

  Receiver, method name and surrounding whitespace of ``updated_node`` are
  kept; the trailing comma and whitespace of the last original argument move
  to the request argument so multi-line calls keep their layout.

  Args:
      replacement: The synthesized call site.
      updated_node: The call being replaced.
      keyword_arguments: Forwarded to :func:`render_constructor`.
      request_name: Local name of the request type, if it is imported under an alias.

  Returns:
      cst.Call: The rewritten call.
  """
  request = render_constructor(replacement.request, keyword_arguments, updated_node.args, request_name)
  if not updated_node.args:
    return updated_node.with_changes(args=[cst.Arg(value=request)])
  last = updated_node.args[-1]
  arg = cst.Arg(value=request, comma=last.comma, whitespace_after_arg=last.whitespace_after_arg)
  return updated_node.with_changes(args=[arg])
