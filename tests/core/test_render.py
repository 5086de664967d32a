"""
Tests for rendering synthesized call sites into LibCST nodes.
"""

import libcst as cst

from request_switcheroo.core.call_site import ArgumentView, CallSite, MethodType
from request_switcheroo.core.rewriter import render_constructor, render_replacement
from request_switcheroo.core.rewriter.render import node_source
from request_switcheroo.core.synthesizer import synthesize
from request_switcheroo.core.matcher import match
from request_switcheroo.semantics.rule_table import STRING


def call_site_for(node: cst.Call, receiver_type: str = "Client") -> CallSite:
  args = tuple(ArgumentView(expression=a.value, type_name=STRING) for a in node.args)
  return CallSite(
    receiver_type=receiver_type,
    method_name=node.func.attr.value,
    arguments=args,
    method_type=MethodType(
      declaring_type=receiver_type,
      name=node.func.attr.value,
      parameter_types=(STRING,) * len(args),
    ),
    node=node,
  )


def test_keyword_rendering_reuses_argument_nodes(scenario_catalog):
  node = cst.parse_expression('client.getObject(bucket_name, "key")')
  call = call_site_for(node)
  replacement, _ = synthesize(call, match(call, scenario_catalog))

  ctor = render_constructor(replacement.request)
  assert node_source(ctor) == 'GetObjectRequest(bucket=bucket_name, key="key")'
  assert ctor.args[0].value is node.args[0].value
  assert ctor.args[1].value is node.args[1].value


def test_positional_rendering(scenario_catalog):
  node = cst.parse_expression('client.createBucket("b")')
  call = call_site_for(node)
  replacement, _ = synthesize(call, match(call, scenario_catalog))
  assert node_source(render_constructor(replacement.request, keyword_arguments=False)) == 'CreateBucketRequest("b")'


def test_replacement_keeps_receiver_and_spacing(scenario_catalog):
  node = cst.parse_expression('client . deleteVersion( "b", "k", "v" )')
  call = call_site_for(node)
  replacement, _ = synthesize(call, match(call, scenario_catalog))
  rendered = render_replacement(replacement, node)
  assert node_source(rendered) == 'client . deleteVersion( DeleteObjectRequest(bucket="b", key="k", versionId="v") )'


def test_multiline_call_keeps_trailing_comma(scenario_catalog):
  node = cst.parse_expression('client.getObject(\n    "b",\n    "k",\n)')
  call = call_site_for(node)
  replacement, _ = synthesize(call, match(call, scenario_catalog))
  rendered = render_replacement(replacement, node)
  assert node_source(rendered) == 'client.getObject(\n    GetObjectRequest(bucket="b", key="k"),\n)'


def test_comments_between_arguments_survive(scenario_catalog):
  node = cst.parse_expression('client.getObject(\n    "b",  # bucket name\n    "k",\n)')
  call = call_site_for(node)
  replacement, _ = synthesize(call, match(call, scenario_catalog))
  rendered = render_replacement(replacement, node)
  assert node_source(rendered) == 'client.getObject(\n    GetObjectRequest(bucket="b",  # bucket name\n    key="k"),\n)'


def test_original_comma_spacing_is_kept(scenario_catalog):
  node = cst.parse_expression('client.deleteVersion("b","k" , "v")')
  call = call_site_for(node)
  replacement, _ = synthesize(call, match(call, scenario_catalog))
  rendered = render_replacement(replacement, node, keyword_arguments=False)
  assert node_source(rendered) == 'client.deleteVersion(DeleteObjectRequest("b","k" , "v"))'


def test_aliased_request_name(scenario_catalog):
  node = cst.parse_expression('client.createBucket("b")')
  call = call_site_for(node)
  replacement, _ = synthesize(call, match(call, scenario_catalog))
  rendered = render_replacement(replacement, node, request_name="ModelCreateBucketRequest")
  assert node_source(rendered) == 'client.createBucket(ModelCreateBucketRequest(bucket="b"))'
