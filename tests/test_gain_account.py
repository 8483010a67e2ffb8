"""Tests for locating the account that realized gains are booked in."""

import pytest

from lotledger.engine.entities import Account, AccountType
from lotledger.engine.gain_account import (
    GainAccountError,
    GainAccountResolver,
    get_default_gain_account,
    get_or_make_orphan_account,
    set_default_gain_account,
)


class TestOrphanAccount:
    def test_created_at_root(self, book, usd):
        account = get_or_make_orphan_account(book, usd)
        assert account.name == "Orphaned Gains-USD"
        assert account.account_type == AccountType.INCOME
        assert account.commodity == usd
        assert account.description == "Realized Gain/Loss"
        assert "haven't been recorded elsewhere" in account.notes
        assert account in book.root_accounts

    def test_found_again(self, book, usd):
        first = get_or_make_orphan_account(book, usd)
        assert get_or_make_orphan_account(book, usd) is first
        assert [a.name for a in book.accounts].count("Orphaned Gains-USD") == 1

    def test_one_per_currency(self, book, usd, eur):
        assert get_or_make_orphan_account(book, usd) is not get_or_make_orphan_account(book, eur)

    def test_needs_currency(self, book):
        with pytest.raises(GainAccountError):
            get_or_make_orphan_account(book, None)


class TestDefaultGainAccount:
    def test_unset_is_none(self, stock_account, usd):
        assert get_default_gain_account(stock_account, usd) is None

    def test_set_and_get(self, book, stock_account, usd):
        gains = book.create_account("Capital Gains", usd, AccountType.INCOME)
        set_default_gain_account(stock_account, gains)
        assert get_default_gain_account(stock_account, usd) is gains
        assert stock_account.default_gain_accounts == {"ISO4217::USD": gains.id}

    def test_keyed_by_currency(self, book, stock_account, usd, eur):
        gains = book.create_account("Capital Gains", usd, AccountType.INCOME)
        set_default_gain_account(stock_account, gains)
        assert get_default_gain_account(stock_account, eur) is None

    def test_none_arguments_ignored(self, stock_account, usd):
        set_default_gain_account(stock_account, None)
        set_default_gain_account(None, stock_account)
        assert get_default_gain_account(None, usd) is None
        assert get_default_gain_account(stock_account, None) is None


class TestGainAccountResolver:
    def test_creates_and_remembers(self, book, stock_account, usd):
        resolver = GainAccountResolver()
        gains = resolver.resolve(stock_account, usd)
        assert gains.name == "Orphaned Gains-USD"
        assert stock_account.default_gain_accounts[usd.unique_name] == gains.id
        assert resolver.resolve(stock_account, usd) is gains

    def test_prefers_registered_account(self, book, stock_account, usd):
        gains = book.create_account("Capital Gains", usd, AccountType.INCOME)
        set_default_gain_account(stock_account, gains)
        assert GainAccountResolver().resolve(stock_account, usd) is gains
        assert book.find_account("Orphaned Gains-USD") is None

    def test_orphan_shared_between_accounts(self, book, stock_account, usd, acme):
        other = book.create_account("ACME 2", acme, AccountType.STOCK)
        resolver = GainAccountResolver()
        assert resolver.resolve(stock_account, usd) is resolver.resolve(other, usd)

    def test_detached_account_fails(self, usd, acme):
        account = Account(None, "Loose", acme)
        with pytest.raises(GainAccountError):
            GainAccountResolver().resolve(account, usd)

    def test_missing_currency_fails(self, stock_account):
        with pytest.raises(GainAccountError):
            GainAccountResolver().resolve(stock_account, None)

    def test_missing_account_fails(self, usd):
        with pytest.raises(GainAccountError):
            GainAccountResolver().resolve(None, usd)
