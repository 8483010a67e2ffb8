"""Dividing a split that is too large for the lot it is being matched to.

When a sale of 150 units meets a lot holding only 100, the sale split is cut
in two: one part exactly closes the lot, the other carries the remainder and
goes looking for another lot.  The value is shared in the same proportion as
the amount, in exact rational arithmetic, so the two halves always add back
up to the original amount and value and the transaction stays balanced.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from fractions import Fraction

from lotledger.engine.entities import Lot, Split, SplitPeer
from lotledger.utils.numeric import to_fraction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SplitDivision:
    """Amounts and values of the two halves of a divided split.

    Attributes:
        amount_a: Part that closes the target lot.
        value_a: ``amount_a * value / amount``.
        amount_b: Remainder, ``amount - amount_a``.
        value_b: ``value - value_a``.
    """

    amount_a: Fraction
    value_a: Fraction
    amount_b: Fraction
    value_b: Fraction


def divide_split(amount, value, close_amount) -> SplitDivision:
    """Divide (*amount*, *value*) so that the first part has *close_amount*.

    Args:
        amount: Total amount of the split.
        value: Total value of the split.
        close_amount: Amount needed to bring the target lot's balance to zero.
            Must have the same sign as *amount* and a strictly smaller magnitude.

    Returns:
        A :class:`SplitDivision` whose parts sum exactly to the inputs.

    Raises:
        ValueError: If *amount* is zero or *close_amount* does not fit inside it.
    """
    amount = to_fraction(amount)
    value = to_fraction(value)
    amount_a = to_fraction(close_amount)

    if amount == 0:
        raise ValueError("Cannot divide a split with zero amount")
    if amount_a == 0 or (amount_a > 0) != (amount > 0) or abs(amount_a) >= abs(amount):
        raise ValueError(f"Close amount {amount_a} does not fit inside split amount {amount}")

    value_a = amount_a * value / amount
    return SplitDivision(
        amount_a=amount_a,
        value_a=value_a,
        amount_b=amount - amount_a,
        value_b=value - value_a,
    )


class SplitSplitter:
    """Cuts a split so that one part exactly closes a lot.

    :param clock: Callable returning the timestamp written on the audit links.
    """

    def __init__(self, clock=datetime.now):
        self.clock = clock

    def split(self, split: Split, lot: Lot) -> Split:
        """Close *lot* with part of *split* and return the remainder.

        The original split keeps its identity, is shrunk to the closing part
        and committed into *lot*.  A new split carrying the remainder is booked
        in the same account, appended to the same transaction and returned
        unassigned.
        """
        division = divide_split(split.amount, split.value, -lot.balance)
        logger.debug(
            f"Dividing split amount={split.amount} into {division.amount_a} + {division.amount_b}, "
            f"value={split.value} into {division.value_a} + {division.value_b}"
        )

        account = split.account
        txn = split.transaction
        with txn.edit():
            remainder = Split(
                split.book,
                amount=division.amount_b,
                value=division.value_b,
                memo=split.memo,
                action=split.action,
                reconcile=split.reconcile,
                date_reconciled=split.date_reconciled,
            )

            split.amount = division.amount_a
            split.value = division.value_a
            # Closes the lot: its balance is now exactly zero.
            lot.add_split(split)

            now = self.clock()
            split.lot_split_peers.append(SplitPeer(peer_id=remainder.id, date=now))
            remainder.lot_split_peers.append(SplitPeer(peer_id=split.id, date=now))

            account.insert_split(remainder)
            txn.append_split(remainder)

        logger.info(
            f"Divided split in {account.name}: {division.amount_a} closes {lot.title or lot.id}, "
            f"{division.amount_b} carried over"
        )
        return remainder
