# lotledger/reports/base_report.py

from abc import ABC, abstractmethod

import pandas as pd


class BaseReport(ABC):
    @abstractmethod
    def generate(self, ledger, account_name=None) -> pd.DataFrame:
        """
        Build a tabular view of the ledger.

        :param ledger: TradeLedger whose book is reported on
        :param account_name: Restrict the report to one security account;
            None covers every account in the book

        :return: DataFrame with one row per reported item. Exact amounts are
            kept as Fraction objects; columns suffixed ``_float`` carry the
            same numbers as floats for analysis and plotting.
        """
        pass
