# lotledger/reports/__init__.py

from .base_report import BaseReport
from .report_collection import LotsReport, RealizedGainsReport

__all__ = [
    "BaseReport",
    "LotsReport",
    "RealizedGainsReport",
]
