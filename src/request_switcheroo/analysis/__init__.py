"""
Analysis Package.

Static analysis passes run before rewriting; currently the symbol table and
type resolver that type call receivers and arguments.
"""
