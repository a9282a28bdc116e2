from __future__ import annotations

import logging
from dataclasses import dataclass

from .ledger import Round, RoundState

log = logging.getLogger("upkeep")


@dataclass(frozen=True)
class UpkeepStatus:
    needed: bool
    is_open: bool
    time_passed: bool
    has_players: bool
    has_balance: bool
    elapsed: float


def check_upkeep(round_: Round, interval: int, balance: int, now: float) -> UpkeepStatus:
    """
    Read-only readiness predicate. A round is ready only when it is open,
    the interval has elapsed, and at least one paying entry is held.
    """
    elapsed = now - round_.last_timestamp
    is_open = round_.state == RoundState.OPEN
    time_passed = elapsed >= interval
    has_players = len(round_.participants) > 0
    has_balance = balance > 0
    status = UpkeepStatus(
        needed=is_open and time_passed and has_players and has_balance,
        is_open=is_open,
        time_passed=time_passed,
        has_players=has_players,
        has_balance=has_balance,
        elapsed=elapsed,
    )
    log.debug("checkUpkeep: %s", status)
    return status
