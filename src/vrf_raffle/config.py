from __future__ import annotations

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from dotenv import find_dotenv, load_dotenv

from .project_constants import (
    DEFAULT_CALLBACK_GAS_LIMIT,
    DEFAULT_CONFIRMATIONS,
    DEFAULT_ENTRANCE_FEE,
    DEFAULT_INTERVAL,
    DEFAULT_KEY_HASH,
    DEFAULT_SUBSCRIPTION_ID,
    LOCAL_COORDINATOR_ADDRESS,
    NUM_WORDS,
    TOKEN_DECIMALS,
)


def to_raw(amount: str) -> int:
    """Converts a whole-unit decimal string ("0.01") to raw units."""
    try:
        value = Decimal(amount.strip())
    except InvalidOperation:
        raise ValueError(f"Not a decimal amount: {amount!r}")
    if not value.is_finite():
        raise ValueError(f"Amount must be finite: {amount!r}")
    raw = value * (10**TOKEN_DECIMALS)
    if raw != raw.to_integral_value():
        raise ValueError(f"Amount {amount} has more than {TOKEN_DECIMALS} decimals")
    return int(raw)


@dataclass(frozen=True)
class RaffleConfig:
    entrance_fee: int = DEFAULT_ENTRANCE_FEE
    interval: int = DEFAULT_INTERVAL
    key_hash: str = DEFAULT_KEY_HASH
    subscription_id: int = DEFAULT_SUBSCRIPTION_ID
    confirmations: int = DEFAULT_CONFIRMATIONS
    callback_gas_limit: int = DEFAULT_CALLBACK_GAS_LIMIT
    coordinator: str = LOCAL_COORDINATOR_ADDRESS
    # Undo the round reset when the winner cannot be paid
    rollback_failed_payout: bool = False
    num_words: int = field(default=NUM_WORDS, init=False)

    def __post_init__(self) -> None:
        if self.entrance_fee <= 0:
            raise ValueError(f"entrance_fee must be positive: {self.entrance_fee}")
        if self.interval <= 0:
            raise ValueError(f"interval must be positive: {self.interval}")
        if self.confirmations < 0:
            raise ValueError(f"confirmations must be non-negative: {self.confirmations}")
        if self.callback_gas_limit <= 0:
            raise ValueError(
                f"callback_gas_limit must be positive: {self.callback_gas_limit}"
            )
        if not self.coordinator:
            raise ValueError("coordinator identity is required")


@dataclass(frozen=True)
class Settings:
    raffle: RaffleConfig
    rpc_url: str | None = None

    @staticmethod
    def from_env(
        rpc_url_override: str | None = None,
        entrance_fee_override: str | None = None,
        interval_override: int | None = None,
    ) -> "Settings":
        load_dotenv(find_dotenv(usecwd=True))

        # Explicit overrides first, then env, then project defaults.
        fee_text = entrance_fee_override or os.getenv("RAFFLE_ENTRANCE_FEE", "").strip()
        entrance_fee = to_raw(fee_text) if fee_text else DEFAULT_ENTRANCE_FEE

        if interval_override is not None:
            interval = interval_override
        else:
            interval = _env_int("RAFFLE_INTERVAL", DEFAULT_INTERVAL)

        raffle = RaffleConfig(
            entrance_fee=entrance_fee,
            interval=interval,
            key_hash=os.getenv("VRF_KEY_HASH", "").strip() or DEFAULT_KEY_HASH,
            subscription_id=_env_int("VRF_SUBSCRIPTION_ID", DEFAULT_SUBSCRIPTION_ID),
            confirmations=_env_int("VRF_CONFIRMATIONS", DEFAULT_CONFIRMATIONS),
            callback_gas_limit=_env_int(
                "VRF_CALLBACK_GAS_LIMIT", DEFAULT_CALLBACK_GAS_LIMIT
            ),
            coordinator=os.getenv("VRF_COORDINATOR", "").strip()
            or LOCAL_COORDINATOR_ADDRESS,
        )

        rpc_url = rpc_url_override or os.getenv("RPC_URL", "").strip() or None
        return Settings(raffle=raffle, rpc_url=rpc_url)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")
