"""
Loaders that turn trade history files into a normalized trades DataFrame.

Trades DataFrame (returned by ``load_trades``), one row per trade, sorted by
date (trades on the same date keep their file order):
    - date (pandas datetime64): posted date of the trade
    - account (str): security account name
    - symbol (str): commodity mnemonic of the account
    - namespace (str): commodity namespace, e.g. "NASDAQ"
    - amount (str): units, positive for a buy, negative for a sale
    - value (str): cost (positive) or proceeds (negative) in the ledger currency
    - memo (str), action (str): free text, may be empty

``amount`` and ``value`` stay strings so they can be converted to exact
fractions without passing through binary floating point.

Usage::

    from lotledger.utils.trade_loader import CsvTradeLoader

    trades = CsvTradeLoader("trades.csv").load_trades()
"""

import os
from abc import ABC, abstractmethod

import pandas as pd

REQUIRED_COLUMNS = ["date", "account", "amount", "value"]
OUTPUT_COLUMNS = ["date", "account", "symbol", "namespace", "amount", "value", "memo", "action"]


class BaseTradeLoader(ABC):
    """
    Abstract base class for trade sources.
    Subclass this to read trades from somewhere other than a CSV file.
    """

    @abstractmethod
    def load_trades(self) -> pd.DataFrame:
        """
        Load all trades. Should return a DataFrame with ``OUTPUT_COLUMNS``,
        sorted by date ascending.
        """
        pass


class CsvTradeLoader(BaseTradeLoader):
    """Read trades from a CSV file.

    Column names are matched case-insensitively.  ``symbol`` defaults to the
    account name and ``namespace`` to *default_namespace*.

    Args:
        path: CSV file to read.
        default_namespace: Namespace for rows that don't name one.
        dayfirst: Parse ambiguous dates as day-first.
    """

    def __init__(self, path: str, default_namespace: str = "SECURITY", dayfirst: bool = False):
        self.path = path
        self.default_namespace = default_namespace
        self.dayfirst = dayfirst

    def load_trades(self) -> pd.DataFrame:
        if not os.path.isfile(self.path):
            raise FileNotFoundError(f"Trades file not found: {self.path}")

        df = pd.read_csv(self.path, dtype=str, keep_default_na=False)
        df.columns = [c.strip().lower() for c in df.columns]

        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"Trades file {self.path} is missing columns {missing}. Got: {list(df.columns)}")

        for col in ("symbol", "namespace", "memo", "action"):
            if col not in df.columns:
                df[col] = ""
        df["account"] = df["account"].str.strip()
        df["symbol"] = df["symbol"].str.strip().where(df["symbol"].str.strip() != "", df["account"])
        df["namespace"] = df["namespace"].str.strip().replace("", self.default_namespace)
        df["amount"] = df["amount"].str.strip().str.replace(",", "", regex=False)
        df["value"] = df["value"].str.strip().str.replace(",", "", regex=False)

        df["date"] = pd.to_datetime(df["date"], dayfirst=self.dayfirst, errors="coerce")
        bad = df["date"].isna() | (df["amount"] == "") | (df["value"] == "")
        if bad.any():
            rows = [int(i) + 2 for i in df.index[bad]]  # 1-based, after the header
            raise ValueError(f"Trades file {self.path} has unreadable rows: {rows}")

        df = df.sort_values("date", kind="mergesort")
        return df[OUTPUT_COLUMNS].reset_index(drop=True)
