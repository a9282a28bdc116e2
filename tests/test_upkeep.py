from conftest import FEE, INTERVAL
from vrf_raffle.ledger import Round, RoundState
from vrf_raffle.upkeep import check_upkeep


def test_false_without_players(raffle, clock):
    clock.advance(INTERVAL * 100)
    needed, status = raffle.check_upkeep()
    assert not needed
    assert status.time_passed
    assert not status.has_players


def test_false_before_interval(raffle, clock, addresses):
    raffle.enter(addresses[0], FEE)
    clock.advance(INTERVAL - 1)
    needed, _ = raffle.check_upkeep()
    assert not needed


def test_true_at_exact_interval(raffle, clock, addresses):
    raffle.enter(addresses[0], FEE)
    clock.advance(INTERVAL)
    needed, status = raffle.check_upkeep()
    assert needed
    assert status.elapsed == INTERVAL


def test_false_while_calculating(ready_raffle):
    ready_raffle.perform_upkeep()
    needed, status = ready_raffle.check_upkeep()
    assert not needed
    assert not status.is_open


def test_timer_resets_after_resolution(ready_raffle, coordinator, clock, addresses):
    request_id = ready_raffle.perform_upkeep()
    coordinator.fulfill(request_id, ready_raffle.oracle, [5])

    ready_raffle.enter(addresses[1], FEE)
    clock.advance(INTERVAL - 1)
    assert ready_raffle.check_upkeep()[0] is False
    clock.advance(1)
    assert ready_raffle.check_upkeep()[0] is True


def test_check_does_not_mutate(ready_raffle):
    before = (ready_raffle.state, ready_raffle.player_count, ready_raffle.balance)
    ready_raffle.check_upkeep()
    ready_raffle.check_upkeep()
    assert (ready_raffle.state, ready_raffle.player_count, ready_raffle.balance) == before


def test_false_without_balance(addresses):
    r = Round(entrance_fee=FEE, last_timestamp=0.0, participants=[addresses[0]])
    status = check_upkeep(r, INTERVAL, balance=0, now=INTERVAL + 5)
    assert not status.needed
    assert not status.has_balance
    assert check_upkeep(r, INTERVAL, balance=FEE, now=INTERVAL + 5).needed


def test_predicate_requires_open_state(addresses):
    r = Round(
        entrance_fee=FEE,
        last_timestamp=0.0,
        participants=[addresses[0]],
        state=RoundState.CALCULATING,
    )
    assert not check_upkeep(r, INTERVAL, balance=FEE, now=INTERVAL * 2).needed
