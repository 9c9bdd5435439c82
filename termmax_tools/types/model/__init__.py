# termmax_tools/types/model/__init__.py
