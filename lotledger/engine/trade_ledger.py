"""Trade-level facade over the lot and gains machinery.

:class:`TradeLedger` books each trade as a two-split transaction (security
account against a cash account), hands the security split to the
:class:`LotAssigner`, and computes the realized gain of every split the
assignment produced.  Gains come back as :class:`RealizedGain` records.

Example::

    from datetime import datetime
    from lotledger.engine.trade_ledger import TradeLedger

    ledger = TradeLedger(currency="USD")
    ledger.open_account("ACME", symbol="ACME", namespace="NASDAQ")
    ledger.buy("ACME", datetime(2023, 1, 1), units=100, price_per_unit=10)
    ledger.buy("ACME", datetime(2023, 6, 1), units=50, price_per_unit=12)

    gains = ledger.sell("ACME", datetime(2024, 1, 1), units=120, price_per_unit=15)
    # 100 units close the January lot, the remaining 20 come out of June's (FIFO).
"""

from dataclasses import dataclass
from datetime import datetime
from fractions import Fraction
from typing import Optional

import pandas as pd

from lotledger.engine.entities import Account, AccountType, Book, Commodity, Lot, Split
from lotledger.engine.gains import GainsComputer, lot_shape_error
from lotledger.engine.lot_assigner import LotAssigner
from lotledger.policies import BaseAccountingPolicy, FIFOPolicy
from lotledger.utils.logger import setup_logger
from lotledger.utils.numeric import to_fraction


@dataclass
class RealizedGain:
    """Realized gain/loss of one split that drew down a lot.

    Attributes:
        account: Name of the security account.
        lot_title: Title of the lot the split was matched against.
        split_id: Id of the split that realized the gain.
        date: Posted date of the split's transaction.
        amount: Units moved (negative for a sale out of a long lot).
        value: Value of the split in the ledger currency.
        cost_basis: ``opening.value * amount / opening.amount``.
        gain: ``cost_basis - value``; positive is a profit.
    """

    account: str
    lot_title: str
    split_id: str
    date: datetime
    amount: Fraction
    value: Fraction
    cost_basis: Fraction
    gain: Fraction


class TradeLedger:
    """Books trades and tracks their lots and realized gains.

    :param currency: Ledger currency, a mnemonic or a :class:`Commodity`
    :param currency_namespace: Namespace used when *currency* is a mnemonic
    :param policy: Lot-selection policy, FIFO by default
    :param cash_account: Name of the account that pays for purchases
    :param book: Existing book to work in; a new one by default
    :param gain_account: Account to book gains in instead of the per-currency default
    :param logger: Logger for trade bookkeeping; ``setup_logger()`` by default
    """

    def __init__(
        self,
        currency="USD",
        currency_namespace: str = "ISO4217",
        policy: Optional[BaseAccountingPolicy] = None,
        cash_account: str = "Cash",
        book: Optional[Book] = None,
        gain_account: Optional[Account] = None,
        logger=None,
    ):
        if isinstance(currency, Commodity):
            self.currency = currency
        else:
            self.currency = Commodity(currency_namespace, currency)
        self.book = book or Book()
        self.policy = policy or FIFOPolicy()
        self.assigner = LotAssigner(self.policy)
        self.gains = GainsComputer()
        self.gain_account = gain_account
        self.logger = logger or setup_logger()

        self.cash_account = self.book.find_account(cash_account)
        if self.cash_account is None:
            self.cash_account = self.book.create_account(
                cash_account, self.currency, AccountType.BANK
            )

    def open_account(self, name: str, symbol: Optional[str] = None, namespace: str = "SECURITY") -> Account:
        """Return the security account *name*, creating it if needed."""
        account = self.book.find_account(name)
        if account is None:
            account = self.book.create_account(
                name, Commodity(namespace, symbol or name), AccountType.STOCK
            )
            self.logger.info(f"Opened account {name} for {account.commodity.unique_name}")
        return account

    def get_account(self, name: str) -> Account:
        account = self.book.find_account(name)
        if account is None:
            raise ValueError(f"No account named {name}")
        return account

    def record_trade(
        self,
        account_name: str,
        date: datetime,
        amount,
        value,
        memo: str = "",
        action: str = "",
    ) -> list[RealizedGain]:
        """Book a trade against cash and settle it into lots.

        Args:
            account_name: Security account the units move in or out of.
            date: Posted date of the trade.
            amount: Units, positive for a purchase, negative for a sale.
            value: Cost (positive) or proceeds (negative) in the ledger currency.
            memo: Free text copied onto both splits.
            action: Short label such as ``"Buy"`` or ``"Sell"``.

        Returns:
            One :class:`RealizedGain` per lot the trade drew down.

        Raises:
            ValueError: If the account is unknown or *amount* is zero.
        """
        account = self.get_account(account_name)
        amount = to_fraction(amount)
        value = to_fraction(value)
        if amount == 0:
            raise ValueError(f"Trade in {account_name} has zero amount")

        txn = self.book.create_transaction(
            self.currency, posted=date, description=memo or f"{action} {account_name}".strip()
        )
        with txn.edit():
            split = txn.add_split(account, amount, value, memo=memo, action=action)
            txn.add_split(self.cash_account, -value, -value, memo=memo, action=action)

        if self.assigner.assign(split):
            self.logger.info(f"Trade of {amount} {account.commodity} on {date} spans several lots")

        gains = []
        for trade_split in [s for s in txn.splits if s.account is account]:
            self.gains.compute(trade_split, self.gain_account)
            record = self._realized_gain(trade_split)
            if record is not None:
                gains.append(record)

        self.logger.info(
            f"Recorded {action or 'trade'} of {amount} {account.commodity} on {date} for {value}"
        )
        return gains

    def buy(self, account_name: str, date: datetime, units, price_per_unit) -> list[RealizedGain]:
        """Purchase *units* at *price_per_unit*; returns gains if a short lot was covered."""
        units = to_fraction(units)
        if units <= 0:
            raise ValueError(f"Cannot buy {units} units of {account_name}")
        value = units * to_fraction(price_per_unit)
        return self.record_trade(account_name, date, units, value, action="Buy")

    def sell(self, account_name: str, date: datetime, units, price_per_unit) -> list[RealizedGain]:
        """Sell *units* at *price_per_unit* and return the realized gains."""
        units = to_fraction(units)
        if units <= 0:
            raise ValueError(f"Cannot sell {units} units of {account_name}")
        value = units * to_fraction(price_per_unit)
        return self.record_trade(account_name, date, -units, -value, action="Sell")

    def load_trades(self, loader) -> list[RealizedGain]:
        """Replay every trade a :class:`BaseTradeLoader` provides, in date order."""
        trades = loader.load_trades()
        gains = []
        for row in trades.itertuples(index=False):
            self.open_account(row.account, symbol=row.symbol, namespace=row.namespace)
            date = row.date.to_pydatetime() if isinstance(row.date, pd.Timestamp) else row.date
            gains.extend(
                self.record_trade(
                    row.account, date, row.amount, row.value, memo=row.memo, action=row.action
                )
            )
        return gains

    def _realized_gain(self, split: Split) -> Optional[RealizedGain]:
        lot = split.lot
        if lot is None or split.amount == 0:
            return None
        opening = lot.earliest_split()
        if split is opening or split.currency != opening.currency:
            return None
        if lot_shape_error(opening, split) is not None:
            return None
        gain = self.gains.get_cap_gains(split)
        return RealizedGain(
            account=split.account.name,
            lot_title=lot.title,
            split_id=split.id,
            date=split.posted,
            amount=split.amount,
            value=split.value,
            cost_basis=split.value + gain,
            gain=gain,
        )

    def get_holdings(self, account_name: str) -> Fraction:
        """Units held in *account_name* (zero for an unknown account)."""
        account = self.book.find_account(account_name)
        return account.balance if account is not None else Fraction(0)

    def get_all_holdings(self) -> dict[str, Fraction]:
        return {
            account.name: account.balance
            for account in self.book.accounts
            if account.account_type in (AccountType.STOCK, AccountType.MUTUAL)
        }

    def get_lots(self, account_name: str) -> list[Lot]:
        account = self.book.find_account(account_name)
        return list(account.lots) if account is not None else []

    def get_open_lots(self, account_name: str) -> list[Lot]:
        return [lot for lot in self.get_lots(account_name) if lot.is_open]

    def realized_gains(self, account_name: Optional[str] = None) -> list[RealizedGain]:
        """Every realized gain in the book, or in one account, ordered by date."""
        if account_name is None:
            accounts = self.book.accounts
        else:
            accounts = [self.get_account(account_name)]

        gains = []
        for account in accounts:
            for lot in account.lots:
                for split in list(lot.splits):
                    record = self._realized_gain(split)
                    if record is not None:
                        gains.append(record)
        gains.sort(key=lambda g: g.date)
        return gains
