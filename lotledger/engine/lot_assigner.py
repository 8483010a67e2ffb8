"""Assigning trade splits to lots.

A split that is not yet in a lot is offered to the accounting policy.  If the
policy finds no open lot that can take it, a new lot is opened with the split
as its opening member.  If the candidate lot has room for the whole split it
goes in whole; otherwise :class:`SplitSplitter` carves off exactly the part
that closes the lot and the remainder is run through the same loop again.

Example::

    assigner = LotAssigner()            # FIFO by default
    divided = assigner.assign(sell_split)
    # divided is True when the sale spilled over into more than one lot, in
    # which case new splits were appended to the sale's transaction.
"""

import logging
from typing import Optional

from lotledger.engine.entities import GainsStatus, Lot, Split
from lotledger.engine.splitter import SplitSplitter
from lotledger.policies import BaseAccountingPolicy, FIFOPolicy

logger = logging.getLogger(__name__)


class LotAssigner:
    """Drives an accounting policy and the splitter until a split is absorbed.

    :param policy: Lot-selection rule; FIFO when omitted.
    :param splitter: Splitter used for oversized splits.
    """

    def __init__(
        self,
        policy: Optional[BaseAccountingPolicy] = None,
        splitter: Optional[SplitSplitter] = None,
    ):
        self.policy = policy or FIFOPolicy()
        self.splitter = splitter or SplitSplitter()

    def assign(self, split: Optional[Split]) -> bool:
        """Put *split* into one or more lots of its account.

        Returns:
            True if the split had to be divided (new splits were appended to
            its transaction), False otherwise, including when the split was
            already in a lot or cannot be assigned at all.
        """
        if split is None or split.lot is not None:
            return False
        account = split.account
        if account is None or split.transaction is None or split.amount == 0:
            return False

        splits_added = False
        with account.edit():
            current = split
            while current is not None:
                logger.debug(f"Assigning split amount={current.amount} in {account.name}")
                current.mark_dirty(GainsStatus.DIRTY)
                lot = self.policy.find_lot(account, current)

                if lot is None:
                    self.open_lot(current)
                    current = None
                elif abs(current.amount) > abs(lot.balance):
                    # The matched part is committed before the remainder is offered again.
                    current = self.splitter.split(current, lot)
                    splits_added = True
                else:
                    lot.add_split(current)
                    logger.debug(f"Added split to {lot.title}, new balance={lot.balance}")
                    current = None

        return splits_added

    def open_lot(self, split: Split) -> Lot:
        """Start a new lot in the split's account with *split* as its opening member."""
        account = split.account
        lot = Lot(account)
        lot.add_split(split)
        lot.title = f"Lot {account.next_lot_id}"
        account.next_lot_id += 1
        logger.info(f"Opened {lot.title} in {account.name} with amount={split.amount}")
        return lot
