# termmax_tools/decode/__init__.py

from .log_decoder import LogDecoder

__all__ = ['LogDecoder']
