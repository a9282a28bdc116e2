from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable, Dict, Optional

from .errors import PayoutTransferFailed

log = logging.getLogger("custody")

# Returns False (or raises) when the recipient cannot accept funds
TransferSink = Callable[[str, int], bool]


class Custody:
    """
    Funds held by the raffle.
    The default sink credits an in-memory payout ledger; a custom sink can
    move money somewhere real and report failure by returning False.
    """

    def __init__(self, sink: Optional[TransferSink] = None) -> None:
        self.balance = 0
        self.paid_out: Dict[str, int] = defaultdict(int)
        self._sink = sink or self._credit

    def receive(self, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Cannot receive a negative amount: {amount}")
        self.balance += amount

    def transfer_all(self, to: str) -> int:
        amount = self.balance
        try:
            ok = self._sink(to, amount)
        except Exception as e:
            log.warning("Transfer sink raised for %s: %s", to, e)
            raise PayoutTransferFailed(to, amount) from e
        if not ok:
            raise PayoutTransferFailed(to, amount)
        self.balance = 0
        log.info("Transferred %d to %s", amount, to)
        return amount

    def _credit(self, to: str, amount: int) -> bool:
        self.paid_out[to] += amount
        return True
