"""Realized gain/loss for lot-assigned splits.

For every split that draws down a lot (anything but the lot's opening split)
the realized gain is the difference between the cost basis of the units it
moves and its own value::

    cost_basis = opening.value * split.amount / opening.amount
    gain       = cost_basis - split.value

A nonzero gain is recorded as a separate balancing transaction with two
splits of equal and opposite value:

* the *lot split*, booked in the lot's account with amount zero (so the lot
  balance is untouched) and value ``gain``;
* the *gain split*, booked in a gain/loss account with amount and value
  ``-gain``.

The source split and its lot split reference each other by id.  Splits carry
a :class:`GainsStatus`; editing an amount or value marks the split dirty, and
:meth:`GainsComputer.get_cap_gains` recomputes only when something is dirty.
"""

import logging
from datetime import datetime
from fractions import Fraction
from typing import Optional

from lotledger.engine.entities import ZERO, Account, GainsStatus, Lot, Split, Transaction
from lotledger.engine.gain_account import GainAccountResolver

logger = logging.getLogger(__name__)

GAINS_DESCRIPTION = "Realized Gain/Loss"


def get_cap_gains_split(split: Optional[Split]) -> Optional[Split]:
    """The lot split of the gains transaction generated by *split*, if any."""
    if split is None or split.book is None:
        return None
    return split.book.lookup_split(split.gains_split_id)


def find_gains_source(split: Split) -> Optional[Split]:
    """Source split of a gains record, re-derived from the stored references.

    The lot split names its source directly; the gain split is found through
    the lot split that shares its transaction.
    """
    book = split.book
    if book is None:
        return None
    if split.gains_source_id is not None:
        return book.lookup_split(split.gains_source_id)
    if split.transaction is not None:
        other = split.transaction.other_split(split)
        if other is not None and other.gains_source_id is not None:
            return book.lookup_split(other.gains_source_id)
    return None


def determine_gain_status(split: Split):
    """Resolve an ``UNKNOWN`` status from the split's cross-references."""
    if GainsStatus.UNKNOWN not in split.gains:
        return

    lot_split = get_cap_gains_split(split)
    if lot_split is not None:
        split.gains = GainsStatus.DIRTY
        split.gains_split = lot_split
        return

    source = find_gains_source(split)
    if source is not None:
        split.gains = GainsStatus.GAINS
        split.gains_split = source
        return

    split.gains = GainsStatus.DIRTY
    split.gains_split = None


def lot_shape_error(opening: Split, split: Split) -> Optional[str]:
    """Why *split* cannot draw down the lot opened by *opening*, or None.

    The opening split must be at least as large as *split* and of the
    opposite sign.
    """
    if abs(opening.amount) < abs(split.amount):
        return "too thin!"
    if not (opening.amount > 0 > split.amount or opening.amount < 0 < split.amount):
        return "too fat!"
    return None


def compute_cost_basis(opening: Split, split: Split) -> Fraction:
    """Share of the opening split's value attributable to *split*'s amount."""
    return opening.value * split.amount / opening.amount


class GainsComputer:
    """Computes realized gains and keeps their balancing transactions current.

    :param resolver: Finds the default gain account when none is supplied.
    :param clock: Callable returning "now" for the entered date of gains transactions.
    """

    def __init__(self, resolver: Optional[GainAccountResolver] = None, clock=datetime.now):
        self.resolver = resolver or GainAccountResolver()
        self.clock = clock

    def compute(self, split: Optional[Split], gain_account: Optional[Account] = None):
        """(Re)compute the realized gain of *split* and book it.

        *split* may also be one of the two legs of a gains transaction, in
        which case the split that generated it is recomputed.  Malformed lots
        are logged and left alone.

        Args:
            split: A lot-assigned split.
            gain_account: Where to book a new gain; ignored when its commodity
                is not the transaction currency.

        Raises:
            GainAccountError: If a new gains transaction is needed and no gain
                account can be found or created.  Nothing is created in that case.
        """
        if split is None:
            return
        determine_gain_status(split)

        source = split
        if split.is_gains_record:
            source = split.gains_split
            if source is None:
                logger.error(f"Bad gains-split pointer on split {split.id}, trying to recover")
                source = find_gains_source(split)
                split.gains_split = source
                if source is None:
                    return

        lot = source.lot
        if lot is None:
            return
        determine_gain_status(source)

        pair = source.gains_split
        if not source.is_dirty and pair is not None and not pair.is_dirty:
            return

        # Amount-zero splits are typically hand-entered gains.
        if source.amount == 0:
            return

        opening = lot.earliest_split()
        if source is opening:
            return

        currency = source.currency
        if currency != opening.currency:
            # Bought and sold in different currencies; no gain is computed.
            return

        problem = lot_shape_error(opening, source)
        if problem is not None:
            logger.error(f"Malformed lot {lot.title or lot.id} ({problem})")
            return

        cost_basis = compute_cost_basis(opening, source)
        gain = cost_basis - source.value
        logger.debug(
            f"Open amt={opening.amount} val={opening.value}; split amt={source.amount} "
            f"val={source.value}; gains={gain}"
        )

        if gain == 0:
            return

        lot_split = get_cap_gains_split(source)
        if lot_split is None:
            txn, lot_split, gain_split = self._create_gains_transaction(
                source, lot, gain, gain_account
            )
        else:
            txn = lot_split.transaction
            gain_split = txn.other_split(lot_split) if txn is not None else None
            if gain_split is None:
                logger.error(f"Gains transaction of split {source.id} has lost its gain split")
                return

        with txn.edit():
            if txn.currency != currency:
                txn.currency = currency
            txn.posted = source.posted
            txn.entered = self.clock()

            lot_split.amount = ZERO
            lot_split.value = gain
            lot.add_split(lot_split)

            gain_split.amount = -gain
            gain_split.value = -gain

        source.gains = GainsStatus.CLEAN
        source.gains_split = lot_split
        lot_split.gains = GainsStatus.GAINS
        lot_split.gains_split = source
        gain_split.gains = GainsStatus.GAINS
        gain_split.gains_split = source

    def _create_gains_transaction(
        self, source: Split, lot: Lot, gain: Fraction, gain_account: Optional[Account]
    ) -> tuple[Transaction, Split, Split]:
        lot_account = lot.account
        currency = source.currency
        if gain_account is None or gain_account.commodity != currency:
            gain_account = self.resolver.resolve(lot_account, currency)

        txn = Transaction(lot_account.book, currency, posted=source.posted, description=GAINS_DESCRIPTION)
        with gain_account.edit(), lot_account.edit(), txn.edit():
            lot_split = txn.add_split(lot_account, ZERO, gain, memo=GAINS_DESCRIPTION)
            gain_split = txn.add_split(gain_account, -gain, -gain, memo=GAINS_DESCRIPTION)
            source.gains_split_id = lot_split.id
            lot_split.gains_source_id = source.id

        logger.info(
            f"Booked realized gain {gain} for {lot.title or lot.id} in {lot_account.name} "
            f"against {gain_account.name}"
        )
        return txn, lot_split, gain_split

    def get_cap_gains(self, split: Optional[Split]) -> Fraction:
        """Realized gain recorded for *split*, recomputed first if stale.

        For a gains record this is its own value, for a source split the
        value of its lot split, and zero when there is no gain.
        """
        if split is None:
            return ZERO
        determine_gain_status(split)

        pair = split.gains_split
        if split.is_dirty or (pair is not None and pair.is_dirty):
            self.compute(split)

        if not split.is_gains_record:
            split = split.gains_split
        if split is None:
            return ZERO
        return split.value
