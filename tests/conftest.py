"""Shared fixtures for the lotledger test suite.

Provides a small book holding one stock account traded against a USD cash
account, and a ``make_trade`` factory that books a balanced two-split trade
without assigning it to any lot, so each test decides what happens next.
"""

from datetime import datetime

import pytest

from lotledger.engine.entities import AccountType, Book, Commodity
from lotledger.engine.gains import GainsComputer
from lotledger.engine.lot_assigner import LotAssigner
from lotledger.utils.numeric import to_fraction

# ---------------------------------------------------------------------------
# Commodities and accounts
# ---------------------------------------------------------------------------


@pytest.fixture
def usd():
    return Commodity("ISO4217", "USD")


@pytest.fixture
def eur():
    return Commodity("ISO4217", "EUR")


@pytest.fixture
def acme():
    return Commodity("NASDAQ", "ACME")


@pytest.fixture
def book():
    return Book()


@pytest.fixture
def stock_account(book, acme):
    return book.create_account("ACME", acme, AccountType.STOCK)


@pytest.fixture
def cash_account(book, usd):
    return book.create_account("Cash", usd, AccountType.BANK)


# ---------------------------------------------------------------------------
# Trade factory and engine pieces
# ---------------------------------------------------------------------------


@pytest.fixture
def make_trade(book, usd, stock_account, cash_account):
    """Book ``amount``/``value`` in the stock account against cash.

    Returns the stock-account split.  ``posted`` defaults to 2023-01-01.
    """

    def _make_trade(amount, value, posted=None, account=None, currency=None, memo=""):
        value = to_fraction(value)
        txn = book.create_transaction(
            currency or usd, posted=posted or datetime(2023, 1, 1), description=memo
        )
        with txn.edit():
            split = txn.add_split(account or stock_account, amount, value, memo=memo)
            txn.add_split(cash_account, -value, -value, memo=memo)
        return split

    return _make_trade


@pytest.fixture
def assigner():
    return LotAssigner()


FIXED_NOW = datetime(2024, 6, 30, 12, 0, 0)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def computer(fixed_now):
    """GainsComputer whose clock always reads ``fixed_now``."""
    return GainsComputer(clock=lambda: fixed_now)
