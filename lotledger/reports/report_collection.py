# lotledger/reports/report_collection.py

import pandas as pd

from .base_report import BaseReport

LOT_COLUMNS = [
    "account",
    "lot",
    "opened",
    "splits",
    "opening_amount",
    "opening_value",
    "balance",
    "closed",
]

GAIN_COLUMNS = [
    "date",
    "account",
    "lot",
    "amount",
    "value",
    "cost_basis",
    "gain",
]


def _accounts(ledger, account_name):
    if account_name is not None:
        return [ledger.get_account(account_name)]
    return [account for account in ledger.book.accounts if account.lots]


def _add_float_columns(df, columns):
    for col in columns:
        df[f"{col}_float"] = df[col].astype(float)
    return df


class LotsReport(BaseReport):
    def generate(self, ledger, account_name=None):
        """
        One row per lot, in the order the lots were opened.

        Columns: account, lot (title), opened (posted date of the opening
        split), splits (member count, gains records included), opening_amount,
        opening_value, balance, closed.
        """
        rows = []
        for account in _accounts(ledger, account_name):
            for lot in account.lots:
                opening = lot.earliest_split()
                rows.append(
                    {
                        "account": account.name,
                        "lot": lot.title,
                        "opened": opening.posted if opening is not None else pd.NaT,
                        "splits": len(lot.splits),
                        "opening_amount": opening.amount if opening is not None else None,
                        "opening_value": opening.value if opening is not None else None,
                        "balance": lot.balance,
                        "closed": lot.is_closed,
                    }
                )
        df = pd.DataFrame(rows, columns=LOT_COLUMNS)
        return _add_float_columns(df, ["balance"])


class RealizedGainsReport(BaseReport):
    def generate(self, ledger, account_name=None):
        """
        One row per realized gain, ordered by date.

        Columns: date, account, lot, amount, value, cost_basis, gain.
        """
        records = ledger.realized_gains(account_name)
        df = pd.DataFrame(
            [
                {
                    "date": g.date,
                    "account": g.account,
                    "lot": g.lot_title,
                    "amount": g.amount,
                    "value": g.value,
                    "cost_basis": g.cost_basis,
                    "gain": g.gain,
                }
                for g in records
            ],
            columns=GAIN_COLUMNS,
        )
        return _add_float_columns(df, ["amount", "value", "cost_basis", "gain"])

    @staticmethod
    def summarize(df: pd.DataFrame) -> pd.DataFrame:
        """Total realized gain per account."""
        if df.empty:
            return pd.DataFrame(columns=["account", "gain"])
        totals = df.groupby("account", sort=True)["gain"].apply(lambda s: sum(s, 0))
        return totals.reset_index()
