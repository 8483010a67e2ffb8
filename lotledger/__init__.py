# lotledger/__init__.py

from .engine import (
    Account,
    AccountType,
    Book,
    Commodity,
    GainAccountResolver,
    GainsComputer,
    GainsStatus,
    Lot,
    LotAssigner,
    RealizedGain,
    Split,
    SplitSplitter,
    TradeLedger,
    Transaction,
)
from .policies import BaseAccountingPolicy, FIFOPolicy, LIFOPolicy

__all__ = [
    "Account",
    "AccountType",
    "Book",
    "Commodity",
    "GainAccountResolver",
    "GainsComputer",
    "GainsStatus",
    "Lot",
    "LotAssigner",
    "RealizedGain",
    "Split",
    "SplitSplitter",
    "TradeLedger",
    "Transaction",
    "BaseAccountingPolicy",
    "FIFOPolicy",
    "LIFOPolicy",
]
