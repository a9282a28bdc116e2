from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from .config import RaffleConfig
from .errors import Unauthorized, UnknownRequest
from .project_constants import LOCAL_COORDINATOR_ADDRESS

log = logging.getLogger("oracle")

Settle = Callable[[int, int], None]


class Coordinator(Protocol):
    def request_random_words(
        self,
        key_hash: str,
        subscription_id: int,
        confirmations: int,
        callback_gas_limit: int,
        num_words: int,
    ) -> int: ...


@dataclass(frozen=True)
class RequestParams:
    key_hash: str
    subscription_id: int
    confirmations: int
    callback_gas_limit: int
    num_words: int

    @staticmethod
    def from_config(config: RaffleConfig) -> "RequestParams":
        return RequestParams(
            key_hash=config.key_hash,
            subscription_id=config.subscription_id,
            confirmations=config.confirmations,
            callback_gas_limit=config.callback_gas_limit,
            num_words=config.num_words,
        )


@dataclass(frozen=True)
class PendingRequest:
    request_id: int
    issued_at: float


class RandomnessOracleClient:
    """
    Outbound half of the oracle protocol plus the callback entry point.

    The client trusts its caller to hold the round lock: it issues whatever
    request it is asked to. Inbound callbacks are accepted only from the
    configured coordinator identity and forwarded to the bound settle step.
    """

    def __init__(
        self,
        coordinator: Coordinator,
        params: RequestParams,
        coordinator_address: str,
    ) -> None:
        self.coordinator = coordinator
        self.params = params
        self.coordinator_address = coordinator_address
        self.pending: Optional[PendingRequest] = None
        self._settle: Optional[Settle] = None

    def bind(self, settle: Settle) -> None:
        self._settle = settle

    def request(self, now: float) -> int:
        p = self.params
        request_id = int(
            self.coordinator.request_random_words(
                p.key_hash,
                p.subscription_id,
                p.confirmations,
                p.callback_gas_limit,
                p.num_words,
            )
        )
        self.pending = PendingRequest(request_id=request_id, issued_at=now)
        log.info("Requested randomness: request_id=%d", request_id)
        return request_id

    def is_pending(self, request_id: int) -> bool:
        # Id 0 is never issued
        return (
            request_id != 0
            and self.pending is not None
            and self.pending.request_id == request_id
        )

    def consume(self, request_id: int) -> PendingRequest:
        if not self.is_pending(request_id):
            raise UnknownRequest(request_id)
        pending = self.pending
        self.pending = None
        return pending

    def restore(self, pending: PendingRequest) -> None:
        self.pending = pending

    def on_fulfilled(self, caller: str, request_id: int, words: Sequence[int]) -> None:
        if caller != self.coordinator_address:
            log.warning("Rejected callback from %s for request %s", caller, request_id)
            raise Unauthorized(caller, self.coordinator_address)
        if not self.is_pending(request_id):
            log.warning("Rejected callback for unknown request %s", request_id)
            raise UnknownRequest(request_id)
        if len(words) < 1:
            raise ValueError(f"Request {request_id}: callback carried no random words")
        if self._settle is None:
            raise RuntimeError("Oracle client is not bound to a settle step")
        self._settle(request_id, int(words[0]))


def derive_words(request_id: int, num_words: int) -> List[int]:
    """Deterministic stand-in words: sha256(request_id || i) as an integer."""
    out: List[int] = []
    for i in range(num_words):
        digest = hashlib.sha256(f"{request_id}:{i}".encode("utf-8")).hexdigest()
        out.append(int(digest, 16))
    return out


class LocalCoordinator:
    """
    In-process coordinator for development and tests. Requests are recorded
    and only answered when fulfill() is called, so the callback arrives as a
    separate step exactly as it would from a remote oracle.
    """

    def __init__(self, address: str = LOCAL_COORDINATOR_ADDRESS) -> None:
        self.address = address
        self.requests: Dict[int, RequestParams] = {}
        self._next_id = 1

    def request_random_words(
        self,
        key_hash: str,
        subscription_id: int,
        confirmations: int,
        callback_gas_limit: int,
        num_words: int,
    ) -> int:
        request_id = self._next_id
        self._next_id += 1
        self.requests[request_id] = RequestParams(
            key_hash, subscription_id, confirmations, callback_gas_limit, num_words
        )
        return request_id

    @property
    def last_request_id(self) -> int:
        return self._next_id - 1

    def fulfill(
        self,
        request_id: int,
        consumer: RandomnessOracleClient,
        words: Optional[Sequence[int]] = None,
    ) -> None:
        params = self.requests.get(request_id)
        if params is None:
            raise UnknownRequest(request_id)
        if words is None:
            words = derive_words(request_id, params.num_words)
        consumer.on_fulfilled(self.address, request_id, list(words))
        # Only a delivered callback retires the request
        del self.requests[request_id]
