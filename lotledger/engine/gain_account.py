# lotledger/engine/gain_account.py

import logging
from typing import Optional

from lotledger.engine.entities import Account, AccountType, Book, Commodity

logger = logging.getLogger(__name__)

ORPHAN_ACCOUNT_PREFIX = "Orphaned Gains"
ORPHAN_ACCOUNT_DESCRIPTION = "Realized Gain/Loss"
ORPHAN_ACCOUNT_NOTES = (
    "Realized Gains or Losses from\n"
    "Commodity or Trading Accounts\n"
    "that haven't been recorded elsewhere.\n"
)


class GainAccountError(RuntimeError):
    """No account could be found or created to book a realized gain."""


def get_default_gain_account(account: Optional[Account], currency: Optional[Commodity]) -> Optional[Account]:
    """Gain account registered on *account* for *currency*, if any."""
    if account is None or currency is None or account.book is None:
        return None
    gain_id = account.default_gain_accounts.get(currency.unique_name)
    return account.book.lookup_account(gain_id)


def set_default_gain_account(account: Optional[Account], gain_account: Optional[Account]):
    """Register *gain_account* for its own commodity on *account*."""
    if account is None or gain_account is None or gain_account.commodity is None:
        return
    with account.edit():
        account.default_gain_accounts[gain_account.commodity.unique_name] = gain_account.id


def get_or_make_orphan_account(book: Book, currency: Commodity) -> Account:
    """The shared ``Orphaned Gains-<currency>`` income account at the root."""
    if book is None:
        raise GainAccountError("No book to hold the orphaned gains account")
    if currency is None:
        raise GainAccountError("No currency specified for the orphaned gains account")

    name = f"{ORPHAN_ACCOUNT_PREFIX}-{currency.mnemonic}"
    account = book.find_account(name)
    if account is None:
        account = Account(
            book,
            name,
            currency,
            account_type=AccountType.INCOME,
            description=ORPHAN_ACCOUNT_DESCRIPTION,
            notes=ORPHAN_ACCOUNT_NOTES,
        )
        with account.edit():
            book.insert_account(account)
        logger.info(f"Created gain/loss account {name!r}")
    return account


class GainAccountResolver:
    """Finds, or creates and remembers, where an account's realized gains go."""

    def resolve(self, account: Account, currency: Commodity) -> Account:
        """Return the gain account for *account* in *currency*.

        Raises:
            GainAccountError: If no gain account can be found or created.
        """
        if account is None:
            raise GainAccountError("No account to resolve a gain account for")

        gain_account = get_default_gain_account(account, currency)
        if gain_account is not None:
            return gain_account

        with account.edit():
            gain_account = get_or_make_orphan_account(account.book, currency)
            account.default_gain_accounts[currency.unique_name] = gain_account.id
        logger.debug(f"Gains of {account.name} in {currency} go to {gain_account.name}")
        return gain_account
