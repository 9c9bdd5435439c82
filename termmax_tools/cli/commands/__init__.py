# termmax_tools/cli/commands/__init__.py
