# lotledger/policies/base_policy.py

from abc import ABC, abstractmethod
from typing import Optional

from lotledger.engine.entities import Account, Lot, Split


class BaseAccountingPolicy(ABC):
    """Rule that picks the open lot a new split should be matched against."""

    name = "base"

    @abstractmethod
    def find_lot(self, account: Account, split: Split) -> Optional[Lot]:
        """
        Select a candidate lot for *split*.

        :param account: Account the split is booked in
        :param split: Split waiting to be assigned; only the sign of its amount matters
        :return: An open lot of *account* whose balance has the opposite sign
            of ``split.amount``, or None to make the caller open a new lot.
        """
        pass

    def __repr__(self):
        return f"{self.__class__.__name__}()"
