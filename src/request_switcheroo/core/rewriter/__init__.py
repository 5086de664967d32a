"""
Rewriter Package.

Provides the :class:`CallSiteRewriter` LibCST transformer and the helpers
rendering synthesized call sites back into syntax nodes.
"""

from request_switcheroo.core.rewriter.call_rewriter import CallSiteRewriter
from request_switcheroo.core.rewriter.render import render_constructor, render_replacement

__all__ = ["CallSiteRewriter", "render_constructor", "render_replacement"]
