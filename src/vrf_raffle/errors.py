from __future__ import annotations

from typing import Any


class RaffleError(Exception):
    """Base class for every failure surfaced by the raffle."""


# Input validation


class InsufficientPayment(RaffleError):
    def __init__(self, payment: int, entrance_fee: int) -> None:
        self.payment = payment
        self.entrance_fee = entrance_fee
        super().__init__(
            f"Payment {payment} is below the entrance fee {entrance_fee}"
        )


class IndexOutOfRange(RaffleError):
    def __init__(self, index: int, count: int) -> None:
        self.index = index
        self.count = count
        super().__init__(f"Participant index {index} out of range (count={count})")


# State gates


class RoundNotOpen(RaffleError):
    def __init__(self, state: Any) -> None:
        self.state = state
        super().__init__(f"Round is not open (state={state})")


class UpkeepNotNeeded(RaffleError):
    def __init__(self, balance: int, participants: int, state: Any) -> None:
        self.balance = balance
        self.participants = participants
        self.state = state
        super().__init__(
            f"Upkeep not needed (balance={balance}, participants={participants}, state={state})"
        )


# Protocol violations


class UnknownRequest(RaffleError):
    """Callback for a request id that was never issued or is no longer pending."""

    def __init__(self, request_id: int) -> None:
        self.request_id = request_id
        super().__init__(f"Nonexistent request: {request_id}")


class Unauthorized(RaffleError):
    def __init__(self, caller: str, expected: str) -> None:
        self.caller = caller
        self.expected = expected
        super().__init__(f"Caller {caller} is not the configured coordinator {expected}")


class OracleError(RaffleError):
    """The remote coordinator answered with an error object."""


# Payout


class PayoutTransferFailed(RaffleError):
    def __init__(self, winner: str, amount: int) -> None:
        self.winner = winner
        self.amount = amount
        super().__init__(f"Transfer of {amount} to {winner} failed")
