"""Kernel value-object types – public re-export surface.

Modules:
  ids.py    – parse_id
  result.py – Ok, Err, Result
"""

from clubgate.kernel.types.ids import parse_id
from clubgate.kernel.types.result import Err, Ok, Result

__all__ = ["Err", "Ok", "Result", "parse_id"]
