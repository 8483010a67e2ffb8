"""Tests for the lot and realized-gain reports.

Each report is checked against a small hand-built ledger with known lots
and known gains.
"""

from datetime import datetime
from fractions import Fraction

import pandas as pd
import pytest

from lotledger.engine.trade_ledger import TradeLedger
from lotledger.reports import LotsReport, RealizedGainsReport
from lotledger.reports.report_collection import GAIN_COLUMNS, LOT_COLUMNS

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_ledger():
    """ACME: two buys and a sale spanning both lots. BETA: one buy, one sale."""
    ledger = TradeLedger()
    ledger.open_account("ACME", namespace="NASDAQ")
    ledger.open_account("BETA", namespace="NYSE")
    ledger.buy("ACME", datetime(2023, 1, 1), 100, 10)
    ledger.buy("ACME", datetime(2023, 6, 1), 50, 12)
    ledger.buy("BETA", datetime(2023, 2, 1), 10, 20)
    ledger.sell("BETA", datetime(2023, 3, 1), 4, 18)
    ledger.sell("ACME", datetime(2024, 1, 1), 120, 15)
    return ledger


@pytest.fixture
def ledger():
    return _make_ledger()


# ---------------------------------------------------------------------------
# LotsReport
# ---------------------------------------------------------------------------


class TestLotsReport:
    def test_columns(self, ledger):
        df = LotsReport().generate(ledger)
        assert list(df.columns) == LOT_COLUMNS + ["balance_float"]

    def test_one_row_per_lot(self, ledger):
        df = LotsReport().generate(ledger)
        assert list(zip(df["account"], df["lot"])) == [
            ("ACME", "Lot 0"),
            ("ACME", "Lot 1"),
            ("BETA", "Lot 0"),
        ]

    def test_lot_values(self, ledger):
        df = LotsReport().generate(ledger, "ACME")
        first, second = df.iloc[0], df.iloc[1]

        assert first["opened"] == datetime(2023, 1, 1)
        assert first["opening_amount"] == 100
        assert first["opening_value"] == 1000
        assert first["balance"] == 0
        assert bool(first["closed"]) is True
        # opening buy, the part of the sale that closed it, its gains record
        assert first["splits"] == 3

        assert second["balance"] == 30
        assert bool(second["closed"]) is False
        assert second["balance_float"] == pytest.approx(30.0)

    def test_exact_balances(self, ledger):
        df = LotsReport().generate(ledger)
        assert all(isinstance(b, Fraction) for b in df["balance"])

    def test_empty_ledger(self):
        df = LotsReport().generate(TradeLedger())
        assert df.empty
        assert "balance_float" in df.columns

    def test_unknown_account_raises(self, ledger):
        with pytest.raises(ValueError, match="No account named"):
            LotsReport().generate(ledger, "Nope")


# ---------------------------------------------------------------------------
# RealizedGainsReport
# ---------------------------------------------------------------------------


class TestRealizedGainsReport:
    def test_columns(self, ledger):
        df = RealizedGainsReport().generate(ledger)
        floats = [f"{c}_float" for c in ("amount", "value", "cost_basis", "gain")]
        assert list(df.columns) == GAIN_COLUMNS + floats

    def test_rows_ordered_by_date(self, ledger):
        df = RealizedGainsReport().generate(ledger)
        assert list(df["date"]) == [
            datetime(2023, 3, 1),
            datetime(2024, 1, 1),
            datetime(2024, 1, 1),
        ]
        assert list(df["account"]) == ["BETA", "ACME", "ACME"]

    def test_gain_values(self, ledger):
        df = RealizedGainsReport().generate(ledger, "ACME")
        assert list(df["lot"]) == ["Lot 0", "Lot 1"]
        assert list(df["gain"]) == [500, 60]
        assert list(df["cost_basis"]) == [-1000, -240]
        assert df["gain_float"].sum() == pytest.approx(560.0)

    def test_loss(self, ledger):
        df = RealizedGainsReport().generate(ledger, "BETA")
        assert list(df["gain"]) == [-8]  # (18 - 20) * 4

    def test_empty_ledger(self):
        df = RealizedGainsReport().generate(TradeLedger())
        assert df.empty
        assert list(df.columns[: len(GAIN_COLUMNS)]) == GAIN_COLUMNS


class TestSummarize:
    def test_totals_per_account(self, ledger):
        report = RealizedGainsReport()
        summary = report.summarize(report.generate(ledger))
        totals = dict(zip(summary["account"], summary["gain"]))
        assert totals == {"ACME": 560, "BETA": -8}

    def test_empty(self):
        summary = RealizedGainsReport.summarize(pd.DataFrame(columns=GAIN_COLUMNS))
        assert summary.empty
        assert list(summary.columns) == ["account", "gain"]
