# termmax_tools/cli/__init__.py
