"""In-memory ledger entities: books, accounts, transactions, splits and lots.

The graph is the usual double-entry one.  A :class:`Transaction` owns two or
more :class:`Split` legs that share its currency; each split is also booked
in exactly one :class:`Account`, and may additionally belong to one
:class:`Lot` of that account.  A lot groups the buys and sells that offset
each other, and its ``balance`` (sum of member amounts) reaches zero when
the position it tracks has been fully closed.

All amounts and values are exact :class:`fractions.Fraction` numbers.

Example::

    from datetime import datetime
    from lotledger.engine.entities import AccountType, Book, Commodity

    usd = Commodity("ISO4217", "USD")
    acme = Commodity("NASDAQ", "ACME")

    book = Book()
    stock = book.create_account("ACME", acme, AccountType.STOCK)
    cash = book.create_account("Cash", usd, AccountType.BANK)

    txn = book.create_transaction(usd, posted=datetime(2024, 1, 2))
    with txn.edit():
        buy = txn.add_split(stock, amount=100, value=1000)
        txn.add_split(cash, amount=-1000, value=-1000)
"""

import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, Flag
from fractions import Fraction
from typing import Optional

from lotledger.engine.slots import Slots
from lotledger.utils.numeric import to_fraction

logger = logging.getLogger(__name__)

ZERO = Fraction(0)


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Commodity:
    """A currency or security, identified by namespace and mnemonic."""

    namespace: str
    mnemonic: str

    @property
    def unique_name(self) -> str:
        return f"{self.namespace}::{self.mnemonic}"

    def __str__(self):
        return self.mnemonic


class AccountType(Enum):
    ASSET = "asset"
    BANK = "bank"
    STOCK = "stock"
    MUTUAL = "mutual"
    INCOME = "income"
    EXPENSE = "expense"
    EQUITY = "equity"
    LIABILITY = "liability"


class GainsStatus(Flag):
    """Freshness of a split's realized-gain bookkeeping.

    ``UNKNOWN`` means the status has not been derived from the split's
    cross-references yet.  ``GAINS`` marks the two legs of a gains
    transaction.  The dirty bits say that the amount or value changed since
    the gain was last computed.
    """

    CLEAN = 0
    AMOUNT_DIRTY = 1
    VALUE_DIRTY = 2
    GAINS = 4
    UNKNOWN = 8
    DIRTY = 3


@dataclass(frozen=True)
class SplitPeer:
    """Audit link left on both halves of a split that was divided in two."""

    peer_id: str
    date: datetime


class _Editable:
    """Nestable begin/commit edit scope."""

    _edit_level = 0

    def begin_edit(self):
        self._edit_level += 1

    def commit_edit(self):
        if self._edit_level <= 0:
            return
        self._edit_level -= 1
        if self._edit_level == 0:
            self._on_commit()

    def _on_commit(self):
        pass

    @property
    def is_being_edited(self) -> bool:
        return self._edit_level > 0

    @contextmanager
    def edit(self):
        self.begin_edit()
        try:
            yield self
        finally:
            self.commit_edit()


class Book:
    """Root of the ledger: owns the account tree and the entity table.

    Cross-references between entities are stored as ids and resolved through
    :meth:`lookup`.
    """

    def __init__(self):
        self._entities: dict[str, object] = {}
        self.root_accounts: list["Account"] = []

    def register(self, entity):
        self._entities[entity.id] = entity

    def lookup(self, entity_id: Optional[str], kind=None):
        if entity_id is None:
            return None
        entity = self._entities.get(entity_id)
        if kind is not None and not isinstance(entity, kind):
            return None
        return entity

    def lookup_split(self, split_id: Optional[str]) -> Optional["Split"]:
        return self.lookup(split_id, Split)

    def lookup_account(self, account_id: Optional[str]) -> Optional["Account"]:
        return self.lookup(account_id, Account)

    def create_account(
        self,
        name: str,
        commodity: Commodity,
        account_type: AccountType = AccountType.ASSET,
        parent: Optional["Account"] = None,
        description: str = "",
        notes: str = "",
    ) -> "Account":
        account = Account(
            self,
            name,
            commodity,
            account_type=account_type,
            description=description,
            notes=notes,
        )
        self.insert_account(account, parent=parent)
        return account

    def insert_account(self, account: "Account", parent: Optional["Account"] = None):
        """Hang *account* off *parent*, or off the root when no parent is given."""
        if parent is None:
            if account not in self.root_accounts:
                self.root_accounts.append(account)
        else:
            parent.add_child(account)

    def create_transaction(
        self,
        currency: Commodity,
        posted: Optional[datetime] = None,
        description: str = "",
    ) -> "Transaction":
        return Transaction(self, currency, posted=posted, description=description)

    @property
    def accounts(self) -> list["Account"]:
        """Every account in the tree, depth first."""
        result = []
        stack = list(reversed(self.root_accounts))
        while stack:
            account = stack.pop()
            result.append(account)
            stack.extend(reversed(account.children))
        return result

    def find_account(self, name: str) -> Optional["Account"]:
        for account in self.accounts:
            if account.name == name:
                return account
        return None


class Account(_Editable):
    def __init__(
        self,
        book: Optional[Book],
        name: str,
        commodity: Optional[Commodity],
        account_type: AccountType = AccountType.ASSET,
        description: str = "",
        notes: str = "",
    ):
        self.id = _new_id()
        self.book = book
        self.name = name
        self.commodity = commodity
        self.account_type = account_type
        self.description = description
        self.notes = notes
        self.parent: Optional[Account] = None
        self.children: list[Account] = []
        self.splits: list[Split] = []
        self.lots: list[Lot] = []
        self.slots = Slots()
        self.next_lot_id = 0
        # currency unique name -> id of the account that takes realized gains
        self.default_gain_accounts: dict[str, str] = {}
        if book is not None:
            book.register(self)

    def add_child(self, account: "Account"):
        if account.parent is not None:
            account.parent.children.remove(account)
        account.parent = self
        self.children.append(account)

    def insert_split(self, split: "Split"):
        if split.account is self:
            return
        if split.account is not None:
            split.account.remove_split(split)
        split.account = self
        self.splits.append(split)

    def remove_split(self, split: "Split"):
        if split.account is not self:
            return
        self.splits.remove(split)
        split.account = None

    @property
    def balance(self) -> Fraction:
        return sum((s.amount for s in self.splits), ZERO)

    def has_trades(self) -> bool:
        """True if any split here was traded in a currency other than the account's."""
        for split in self.splits:
            txn = split.transaction
            if txn is not None and txn.currency != self.commodity:
                return True
        return False

    def __repr__(self):
        return f"<Account(name={self.name!r}, commodity={self.commodity}, type={self.account_type.value})>"


class Transaction(_Editable):
    def __init__(
        self,
        book: Book,
        currency: Commodity,
        posted: Optional[datetime] = None,
        entered: Optional[datetime] = None,
        description: str = "",
    ):
        self.id = _new_id()
        self.book = book
        self.currency = currency
        self.posted = posted or datetime.now()
        self.entered = entered or datetime.now()
        self.description = description
        self.splits: list[Split] = []
        self.slots = Slots()
        if book is not None:
            book.register(self)

    def add_split(self, account: "Account", amount, value, memo: str = "", action: str = "") -> "Split":
        """Create a split booked in *account* and append it to this transaction."""
        split = Split(self.book, amount=amount, value=value, memo=memo, action=action)
        account.insert_split(split)
        self.append_split(split)
        return split

    def append_split(self, split: "Split"):
        if split.transaction is self:
            return
        if split.transaction is not None:
            split.transaction.splits.remove(split)
        split.transaction = self
        self.splits.append(split)

    def other_split(self, split: "Split") -> Optional["Split"]:
        """The opposite leg of a two-split transaction, or None."""
        if len(self.splits) != 2 or split not in self.splits:
            return None
        return self.splits[1] if self.splits[0] is split else self.splits[0]

    @property
    def imbalance(self) -> Fraction:
        return sum((s.value for s in self.splits), ZERO)

    def _on_commit(self):
        imbalance = self.imbalance
        if imbalance != 0:
            logger.warning(
                f"Transaction {self.id} ({self.description!r}) is out of balance by {imbalance}"
            )

    def __repr__(self):
        return (
            f"<Transaction(posted={self.posted.isoformat()}, currency={self.currency}, "
            f"splits={len(self.splits)})>"
        )


class Split:
    """One leg of a transaction.

    Assigning :attr:`amount` or :attr:`value` coerces to an exact Fraction and
    marks the split dirty, so its realized gain gets recomputed on next read.
    """

    def __init__(
        self,
        book: Optional[Book],
        amount=0,
        value=0,
        memo: str = "",
        action: str = "",
        reconcile: str = "n",
        date_reconciled: Optional[datetime] = None,
    ):
        self.id = _new_id()
        self.book = book
        self.account: Optional[Account] = None
        self.transaction: Optional[Transaction] = None
        self.lot: Optional[Lot] = None
        self._amount = to_fraction(amount)
        self._value = to_fraction(value)
        self.memo = memo
        self.action = action
        self.reconcile = reconcile
        self.date_reconciled = date_reconciled
        self.slots = Slots()

        self.gains = GainsStatus.UNKNOWN
        # Cached partner: the lot_split for a source split, the source for a gains record.
        self.gains_split: Optional[Split] = None
        self.gains_split_id: Optional[str] = None
        self.gains_source_id: Optional[str] = None
        self.lot_split_peers: list[SplitPeer] = []
        if book is not None:
            book.register(self)

    @property
    def amount(self) -> Fraction:
        return self._amount

    @amount.setter
    def amount(self, amount):
        self._amount = to_fraction(amount)
        self.mark_dirty(GainsStatus.AMOUNT_DIRTY)

    @property
    def value(self) -> Fraction:
        return self._value

    @value.setter
    def value(self, value):
        self._value = to_fraction(value)
        self.mark_dirty(GainsStatus.VALUE_DIRTY)

    def mark_dirty(self, flags: GainsStatus = GainsStatus.DIRTY):
        if GainsStatus.UNKNOWN in self.gains:
            return
        self.gains |= flags
        # An edited gains record invalidates the gain of the split it was booked for.
        if GainsStatus.GAINS in self.gains and self.gains_split is not None:
            self.gains_split.mark_dirty(flags)

    @property
    def is_dirty(self) -> bool:
        return bool(self.gains & GainsStatus.DIRTY)

    @property
    def is_gains_record(self) -> bool:
        return GainsStatus.UNKNOWN not in self.gains and GainsStatus.GAINS in self.gains

    @property
    def posted(self) -> Optional[datetime]:
        return self.transaction.posted if self.transaction is not None else None

    @property
    def currency(self) -> Optional[Commodity]:
        return self.transaction.currency if self.transaction is not None else None

    def __repr__(self):
        account = self.account.name if self.account is not None else None
        return f"<Split(account={account!r}, amount={self.amount}, value={self.value})>"


class Lot:
    """Splits of one account that offset each other.

    The lot is open while its balance is nonzero.  Its opening split is the
    member whose transaction was posted first.
    """

    def __init__(self, account: Account):
        self.id = _new_id()
        self.book = account.book
        self.account = account
        self.splits: list[Split] = []
        self.slots = Slots()
        account.lots.append(self)
        if self.book is not None:
            self.book.register(self)

    @property
    def title(self) -> str:
        return self.slots.get("title", "")

    @title.setter
    def title(self, title: str):
        self.slots.set("title", title)

    @property
    def balance(self) -> Fraction:
        return sum((s.amount for s in self.splits), ZERO)

    @property
    def is_closed(self) -> bool:
        return self.balance == 0

    @property
    def is_open(self) -> bool:
        return not self.is_closed

    def earliest_split(self) -> Optional[Split]:
        """Member posted first; on equal dates the one added first wins."""
        earliest = None
        for split in self.splits:
            if earliest is None or split.posted < earliest.posted:
                earliest = split
        return earliest

    def add_split(self, split: Split):
        if split.lot is self:
            return
        if split.account is not self.account:
            logger.error(
                f"Split {split.id} is booked in {split.account!r}, not in lot account {self.account!r}"
            )
            return
        if split.lot is not None:
            split.lot.remove_split(split)
        split.lot = self
        self.splits.append(split)
        logger.debug(f"Added split amount={split.amount} to {self.title or self.id}; balance={self.balance}")

    def remove_split(self, split: Split):
        if split.lot is not self:
            return
        self.splits.remove(split)
        split.lot = None

    def __repr__(self):
        return f"<Lot(title={self.title!r}, balance={self.balance}, splits={len(self.splits)})>"
