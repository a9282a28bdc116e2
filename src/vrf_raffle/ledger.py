from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional

from .errors import IndexOutOfRange, InsufficientPayment, RoundNotOpen


class RoundState(IntEnum):
    OPEN = 0
    CALCULATING = 1


@dataclass
class Round:
    """Mutable record of the current round, owned by one Raffle."""

    entrance_fee: int
    last_timestamp: float
    state: RoundState = RoundState.OPEN
    participants: List[str] = field(default_factory=list)
    recent_winner: Optional[str] = None
    # Completed rounds so far
    index: int = 0


class EntryLedger:
    def __init__(self, round_: Round) -> None:
        self.round = round_

    def append(self, sender: str, payment: int) -> int:
        """Records one entry slot for sender and returns the new count."""
        r = self.round
        if payment < r.entrance_fee:
            raise InsufficientPayment(payment, r.entrance_fee)
        if r.state != RoundState.OPEN:
            raise RoundNotOpen(r.state)
        r.participants.append(sender)
        return len(r.participants)

    def player(self, index: int) -> str:
        players = self.round.participants
        if index < 0 or index >= len(players):
            raise IndexOutOfRange(index, len(players))
        return players[index]

    def count(self) -> int:
        return len(self.round.participants)

    def reset(self, now: float, winner: str) -> None:
        r = self.round
        r.recent_winner = winner
        r.participants = []
        r.last_timestamp = now
        r.state = RoundState.OPEN
        r.index += 1
