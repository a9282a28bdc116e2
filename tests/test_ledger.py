import pytest

from conftest import FEE, INTERVAL
from vrf_raffle.addresses import InvalidAddress
from vrf_raffle.errors import IndexOutOfRange, InsufficientPayment, RoundNotOpen
from vrf_raffle.events import EntryRecorded
from vrf_raffle.ledger import RoundState


def test_initial_state(raffle, clock):
    assert raffle.state == RoundState.OPEN
    assert raffle.entrance_fee == FEE
    assert raffle.interval == INTERVAL
    assert raffle.player_count == 0
    assert raffle.recent_winner is None
    assert raffle.last_timestamp == clock()
    assert raffle.balance == 0


@pytest.mark.parametrize("payment", [0, 1, FEE - 1])
def test_underpayment_rejected(raffle, addresses, payment):
    with pytest.raises(InsufficientPayment):
        raffle.enter(addresses[0], payment)
    assert raffle.player_count == 0
    assert raffle.balance == 0


def test_entries_kept_in_order_with_duplicates(raffle, addresses):
    order = [addresses[0], addresses[1], addresses[0], addresses[2]]
    for i, a in enumerate(order, start=1):
        raffle.enter(a, FEE)
        assert raffle.player_count == i
        assert raffle.balance == FEE * i
    assert [raffle.get_player(i) for i in range(4)] == order


def test_entry_emits_event(raffle, addresses):
    raffle.enter(addresses[0], FEE)
    raffle.enter(addresses[1], FEE)
    events = raffle.events.of_type(EntryRecorded)
    assert events[-1] == EntryRecorded(
        participant=addresses[1], round_index=0, participant_count=2, fee_total=2 * FEE
    )


def test_listener_sees_entries(raffle, addresses):
    seen = []
    raffle.events.subscribe(seen.append)
    raffle.enter(addresses[3], FEE)
    assert len(seen) == 1
    assert seen[0].participant == addresses[3]


def test_overpayment_is_kept(raffle, addresses):
    raffle.enter(addresses[0], FEE * 3)
    assert raffle.balance == FEE * 3


def test_get_player_out_of_range(raffle, addresses):
    with pytest.raises(IndexOutOfRange):
        raffle.get_player(0)
    raffle.enter(addresses[0], FEE)
    with pytest.raises(IndexOutOfRange):
        raffle.get_player(1)
    with pytest.raises(IndexOutOfRange):
        raffle.get_player(-1)


def test_invalid_address_rejected(raffle):
    with pytest.raises(InvalidAddress):
        raffle.enter("not-an-address!", FEE)
    assert raffle.player_count == 0


def test_entry_rejected_while_calculating(ready_raffle, addresses):
    ready_raffle.perform_upkeep()
    with pytest.raises(RoundNotOpen):
        ready_raffle.enter(addresses[1], FEE)
    assert ready_raffle.player_count == 1
    assert ready_raffle.balance == FEE
