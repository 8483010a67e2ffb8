# lotledger/policies/__init__.py

from .base_policy import BaseAccountingPolicy
from .fifo_policy import FIFOPolicy, LIFOPolicy, find_earliest_open_lot, find_latest_open_lot

__all__ = [
    "BaseAccountingPolicy",
    "FIFOPolicy",
    "LIFOPolicy",
    "find_earliest_open_lot",
    "find_latest_open_lot",
]
