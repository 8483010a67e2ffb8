"""First-in-first-out and last-in-first-out lot selection.

Both policies only consider lots that are still open and whose balance has
the opposite sign of the incoming split, so a lot always moves toward zero.
They rank those lots by the posted date of each lot's opening split.  When
two lots open at the same instant, the one that comes first in the
account's lot list (i.e. the one created first) wins.
"""

import logging
from typing import Optional

from lotledger.engine.entities import Account, Lot, Split
from lotledger.utils.numeric import sign

from .base_policy import BaseAccountingPolicy

logger = logging.getLogger(__name__)


def _candidate_lots(account: Account, amount_sign: int):
    """Open lots of *account* whose balance sign is opposite to *amount_sign*."""
    for lot in account.lots:
        if lot.is_closed:
            continue
        if sign(lot.balance) != -amount_sign:
            continue
        opening = lot.earliest_split()
        if opening is None:
            continue
        yield lot, opening.posted


def find_earliest_open_lot(account: Account, amount) -> Optional[Lot]:
    """Open lot with the earliest opening split that can absorb *amount*."""
    best, best_date = None, None
    for lot, opened in _candidate_lots(account, sign(amount)):
        if best is None or opened < best_date:
            best, best_date = lot, opened
    return best


def find_latest_open_lot(account: Account, amount) -> Optional[Lot]:
    """Open lot with the latest opening split that can absorb *amount*."""
    best, best_date = None, None
    for lot, opened in _candidate_lots(account, sign(amount)):
        if best is None or opened > best_date:
            best, best_date = lot, opened
    return best


class FIFOPolicy(BaseAccountingPolicy):
    name = "fifo"

    def find_lot(self, account: Account, split: Split) -> Optional[Lot]:
        lot = find_earliest_open_lot(account, split.amount)
        logger.debug(f"FIFO candidate for amount={split.amount} in {account.name}: {lot!r}")
        return lot


class LIFOPolicy(BaseAccountingPolicy):
    name = "lifo"

    def find_lot(self, account: Account, split: Split) -> Optional[Lot]:
        lot = find_latest_open_lot(account, split.amount)
        logger.debug(f"LIFO candidate for amount={split.amount} in {account.name}: {lot!r}")
        return lot
