from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from .errors import OracleError

log = logging.getLogger("rpc")


class VrfRpcClient:
    """JSON-RPC transport to a remote randomness coordinator."""

    def __init__(
        self,
        rpc_url: str,
        timeout_s: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.rpc_url = rpc_url
        self.client = httpx.Client(timeout=timeout_s, transport=transport)
        self._id = 0

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "VrfRpcClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _post(self, method: str, params: Any) -> Dict[str, Any]:
        self._id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._id,
            "method": method,
            "params": params,
        }
        resp = self.client.post(self.rpc_url, json=payload)
        resp.raise_for_status()
        data = resp.json()
        if "error" in data:
            raise OracleError(f"RPC error: {data['error']}")
        return data

    def request_random_words(
        self,
        key_hash: str,
        subscription_id: int,
        confirmations: int,
        callback_gas_limit: int,
        num_words: int,
    ) -> int:
        data = self._post(
            "vrf_requestRandomWords",
            [
                {
                    "keyHash": key_hash,
                    "subId": subscription_id,
                    "requestConfirmations": confirmations,
                    "callbackGasLimit": callback_gas_limit,
                    "numWords": num_words,
                }
            ],
        )
        result = data.get("result")
        if not isinstance(result, dict) or "requestId" not in result:
            raise OracleError("vrf_requestRandomWords returned no requestId.")
        return int(result["requestId"])

    def get_request_status(self, request_id: int) -> Dict[str, Any]:
        """Returns {"fulfilled": bool, "randomWords": [...]} for a request."""
        data = self._post("vrf_getRequestStatus", [request_id])
        result = data.get("result")
        if result is None:
            raise OracleError(f"Request {request_id}: status not available")
        return result

    def wait_for_words(
        self, request_id: int, polls: int = 30, delay_s: float = 2.0
    ) -> List[int]:
        """Polls the request status until the coordinator reports it fulfilled."""
        for attempt in range(1, polls + 1):
            status = self.get_request_status(request_id)
            if status.get("fulfilled"):
                words = status.get("randomWords") or []
                return [int(w) for w in words]
            log.debug("Request %d not fulfilled yet (poll %d/%d)", request_id, attempt, polls)
            if attempt < polls:
                time.sleep(delay_s)
        raise OracleError(f"Request {request_id} not fulfilled after {polls} polls")
