import base58
import pytest

from vrf_raffle.config import RaffleConfig
from vrf_raffle.oracle import LocalCoordinator
from vrf_raffle.raffle import ManualClock, Raffle

FEE = 10**16  # 0.01
INTERVAL = 30


def make_address(seed: int) -> str:
    return base58.b58encode(bytes([seed % 255 + 1]) * 32).decode("ascii")


@pytest.fixture
def addresses():
    return [make_address(i) for i in range(8)]


@pytest.fixture
def clock():
    return ManualClock(start=1_000.0)


@pytest.fixture
def coordinator():
    return LocalCoordinator()


@pytest.fixture
def config(coordinator):
    return RaffleConfig(entrance_fee=FEE, interval=INTERVAL, coordinator=coordinator.address)


@pytest.fixture
def raffle(config, coordinator, clock):
    return Raffle(config, coordinator, clock=clock)


@pytest.fixture
def ready_raffle(raffle, clock, addresses):
    """One entry, interval elapsed."""
    raffle.enter(addresses[0], FEE)
    clock.advance(INTERVAL + 1)
    return raffle
