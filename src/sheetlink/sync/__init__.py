"""Grid fetch and debounced write-back orchestration."""

from .facade import SheetSync
from .queue import WriteBackQueue

__all__ = ["SheetSync", "WriteBackQueue"]
