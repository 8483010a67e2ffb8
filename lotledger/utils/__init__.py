# lotledger/utils/__init__.py

from .logger import setup_logger
from .numeric import quantize, sign, to_fraction
from .trade_loader import BaseTradeLoader, CsvTradeLoader

__all__ = [
    "BaseTradeLoader",
    "CsvTradeLoader",
    "setup_logger",
    "quantize",
    "sign",
    "to_fraction",
]
