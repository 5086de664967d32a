"""
Utilities Package.

Console and logging helpers shared by the CLI and the engine.
"""
