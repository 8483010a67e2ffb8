# lotledger/engine/__init__.py

from .entities import (
    Account,
    AccountType,
    Book,
    Commodity,
    GainsStatus,
    Lot,
    Split,
    SplitPeer,
    Transaction,
)
from .slots import Slots
from .splitter import SplitDivision, SplitSplitter, divide_split
from .lot_assigner import LotAssigner
from .gain_account import (
    GainAccountError,
    GainAccountResolver,
    get_default_gain_account,
    get_or_make_orphan_account,
    set_default_gain_account,
)
from .gains import GainsComputer, determine_gain_status, get_cap_gains_split
from .trade_ledger import RealizedGain, TradeLedger

__all__ = [
    "Account",
    "AccountType",
    "Book",
    "Commodity",
    "GainsStatus",
    "Lot",
    "Split",
    "SplitPeer",
    "Transaction",
    "Slots",
    "SplitDivision",
    "SplitSplitter",
    "divide_split",
    "LotAssigner",
    "GainAccountError",
    "GainAccountResolver",
    "get_default_gain_account",
    "get_or_make_orphan_account",
    "set_default_gain_account",
    "GainsComputer",
    "determine_gain_status",
    "get_cap_gains_split",
    "RealizedGain",
    "TradeLedger",
]
