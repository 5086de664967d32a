"""
Semantics Package.

Holds the Rule Catalog: signature and rule schemas, the default legacy S3
rule table, rule-file loading and catalog construction.
"""
