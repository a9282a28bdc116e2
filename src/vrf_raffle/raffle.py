from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

from .addresses import normalize_address
from .config import RaffleConfig
from .custody import Custody
from .draw import pick_winner
from .errors import PayoutTransferFailed, UnknownRequest, UpkeepNotNeeded
from .events import EntryRecorded, EventLog, RandomnessRequested, WinnerPicked
from .ledger import EntryLedger, Round, RoundState
from .oracle import Coordinator, RandomnessOracleClient, RequestParams
from .upkeep import UpkeepStatus, check_upkeep

log = logging.getLogger("raffle")

Clock = Callable[[], float]


class ManualClock:
    """Clock that only moves when told to (simulations and tests)."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass(frozen=True)
class RoundResult:
    round_index: int
    request_id: int
    random_word: int
    participants: Tuple[str, ...]
    winner_index: int
    winner: str
    prize: int
    settled_at: float
    paid: bool


class Raffle:
    """
    Fund-holding raffle resolved by an asynchronous randomness oracle.

    Every public method is one atomic step. Resolution is two-phase:
    perform_upkeep() issues a randomness request and parks the round in
    CALCULATING; the oracle later calls on_fulfilled(), which picks the
    winner, resets the round and pays out.
    """

    def __init__(
        self,
        config: RaffleConfig,
        coordinator: Coordinator,
        clock: Clock = time.time,
        custody: Optional[Custody] = None,
        events: Optional[EventLog] = None,
    ) -> None:
        self.config = config
        self.clock = clock
        self.custody = custody or Custody()
        self.events = events or EventLog()
        self.round = Round(entrance_fee=config.entrance_fee, last_timestamp=clock())
        self.ledger = EntryLedger(self.round)
        self.oracle = RandomnessOracleClient(
            coordinator, RequestParams.from_config(config), config.coordinator
        )
        self.oracle.bind(self._settle)
        self.history: List[RoundResult] = []

    # participant-facing

    def enter(self, sender: str, payment: int) -> None:
        sender = normalize_address(sender)
        count = self.ledger.append(sender, payment)
        self.custody.receive(payment)
        log.info("Entry %d recorded for %s (round %d)", count, sender, self.round.index)
        self.events.emit(
            EntryRecorded(
                participant=sender,
                round_index=self.round.index,
                participant_count=count,
                fee_total=self.custody.balance,
            )
        )

    def check_upkeep(self) -> Tuple[bool, UpkeepStatus]:
        status = check_upkeep(
            self.round, self.config.interval, self.custody.balance, self.clock()
        )
        return status.needed, status

    def perform_upkeep(self) -> int:
        # Re-evaluate here; a caller's earlier poll may be stale.
        needed, _ = self.check_upkeep()
        if not needed:
            raise UpkeepNotNeeded(
                self.custody.balance, len(self.round.participants), self.round.state
            )
        self.round.state = RoundState.CALCULATING
        try:
            request_id = self.oracle.request(self.clock())
        except Exception:
            self.round.state = RoundState.OPEN
            raise
        self.events.emit(RandomnessRequested(request_id))
        return request_id

    begin_resolution = perform_upkeep

    # oracle-facing

    def on_fulfilled(self, caller: str, request_id: int, words: List[int]) -> None:
        self.oracle.on_fulfilled(caller, request_id, words)

    def _settle(self, request_id: int, random_word: int) -> None:
        if not self.oracle.is_pending(request_id):
            raise UnknownRequest(request_id)
        r = self.round
        participants = tuple(r.participants)
        idx, winner = pick_winner(participants, random_word)

        pending = self.oracle.consume(request_id)
        before = replace(r, participants=list(r.participants))
        now = self.clock()
        self.ledger.reset(now, winner)

        prize = self.custody.balance
        try:
            self.custody.transfer_all(winner)
        except PayoutTransferFailed:
            log.warning("Payout of %d to %s failed (request %d)", prize, winner, request_id)
            if self.config.rollback_failed_payout:
                self._restore(before)
                self.oracle.restore(pending)
            else:
                self._record(request_id, random_word, participants, idx, winner, prize, now, False)
            raise

        self._record(request_id, random_word, participants, idx, winner, prize, now, True)
        log.info("Winner picked: %s (index %d of %d)", winner, idx, len(participants))
        self.events.emit(WinnerPicked(winner))

    def _restore(self, before: Round) -> None:
        r = self.round
        r.state = before.state
        r.participants = before.participants
        r.recent_winner = before.recent_winner
        r.last_timestamp = before.last_timestamp
        r.index = before.index

    def _record(
        self,
        request_id: int,
        random_word: int,
        participants: Tuple[str, ...],
        idx: int,
        winner: str,
        prize: int,
        now: float,
        paid: bool,
    ) -> None:
        self.history.append(
            RoundResult(
                round_index=self.round.index - 1,
                request_id=request_id,
                random_word=random_word,
                participants=participants,
                winner_index=idx,
                winner=winner,
                prize=prize,
                settled_at=now,
                paid=paid,
            )
        )

    # getters

    @property
    def entrance_fee(self) -> int:
        return self.config.entrance_fee

    @property
    def interval(self) -> int:
        return self.config.interval

    @property
    def state(self) -> RoundState:
        return self.round.state

    @property
    def player_count(self) -> int:
        return self.ledger.count()

    @property
    def recent_winner(self) -> Optional[str]:
        return self.round.recent_winner

    @property
    def last_timestamp(self) -> float:
        return self.round.last_timestamp

    @property
    def balance(self) -> int:
        return self.custody.balance

    def get_player(self, index: int) -> str:
        return self.ledger.player(index)
