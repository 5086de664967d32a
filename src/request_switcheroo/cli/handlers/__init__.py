"""
CLI Handlers Package.

Implementation modules for the `convert`, `rules` and `check` commands.
"""
