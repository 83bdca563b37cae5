# path: src/runtime/__init__.py

"""
Runtime plumbing shared by the recipe-diff packages.

- errors:          exception taxonomy mapped to CLI exit codes
- config:          YAML settings (config/recipe_diff.yaml)
- logging_config:  root logger setup for the entrypoint
"""
