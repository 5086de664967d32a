"""
Core Package.

Contains the call-rewrite engine and its host driver:
- Call-site views, Matcher, Synthesizer and Import Obligations
- The LibCST call rewriter and import injector
- The source-level ASTEngine and tracing
"""
