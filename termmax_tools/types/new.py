# termmax_tools/types/new.py

from typing import NewType


EvmHash = NewType("EvmHash", str)
EvmAddress = NewType("EvmAddress", str)
DateTimeStr = NewType("DateTimeStr", str)
ErrorId = NewType("ErrorId", str)
