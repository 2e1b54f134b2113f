"""Kernel value-object types – public re-export surface.

Modules:
  ids.py    – EntityId, new_id
  result.py – Ok, Err, Result
"""

from event_ledger.kernel.types.ids import EntityId, new_id
from event_ledger.kernel.types.result import Err, Ok, Result

__all__ = ["EntityId", "Err", "Ok", "Result", "new_id"]
