# src/cli/__init__.py
"""Command line entry points (see cli.recipe_diff)."""
