from __future__ import annotations

import argparse
import logging

from .addresses import parse_address_list
from .config import Settings
from .draw import to_tokens
from .oracle import LocalCoordinator
from .raffle import ManualClock, Raffle
from .rpc import VrfRpcClient
from .verify import verify_audit, write_audit


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _settings(args: argparse.Namespace) -> Settings:
    return Settings.from_env(
        rpc_url_override=args.rpc_url,
        entrance_fee_override=getattr(args, "fee", None),
        interval_override=getattr(args, "interval", None),
    )


def cmd_simulate(args: argparse.Namespace) -> int:
    settings = _settings(args)
    log = logging.getLogger("simulate")
    players = parse_address_list(args.players)
    if not players:
        raise SystemExit("At least one player is required.")

    rpc = None
    if settings.rpc_url:
        rpc = VrfRpcClient(settings.rpc_url, timeout_s=args.timeout)
        coordinator = rpc
        log.info("Coordinator       : rpc")
    else:
        local = LocalCoordinator(address=settings.raffle.coordinator)
        coordinator = local
        log.info("Coordinator       : local")

    try:
        clock = ManualClock(start=0.0)
        raffle = Raffle(settings.raffle, coordinator, clock=clock)

        for p in players:
            raffle.enter(p, raffle.entrance_fee)
        log.info("Players entered   : %d", raffle.player_count)
        log.info("Pot               : %s", to_tokens(raffle.balance))

        clock.advance(raffle.interval + 1)
        needed, status = raffle.check_upkeep()
        if not needed:
            raise SystemExit(f"Upkeep not needed: {status}")

        request_id = raffle.perform_upkeep()
        log.info("Request id        : %d", request_id)

        if rpc is not None:
            if args.random_word is not None:
                log.warning("--random-word is ignored when a remote coordinator answers")
            words = rpc.wait_for_words(
                request_id, polls=args.max_polls, delay_s=args.poll_interval
            )
            # Relay the remote answer as the configured coordinator
            raffle.on_fulfilled(settings.raffle.coordinator, request_id, words)
        else:
            words = [args.random_word] if args.random_word is not None else None
            local.fulfill(request_id, raffle.oracle, words)
    finally:
        if rpc is not None:
            rpc.close()

    result = raffle.history[-1]
    write_audit(result, raffle.entrance_fee, args.out)

    print("========================================")
    print("🎟  VRF RAFFLE ROUND")
    print("========================================")
    print(f"Entrants      : {len(result.participants)}")
    print(f"Request id    : {result.request_id}")
    print(f"Random word   : {result.random_word}")
    print("----------------------------------------")
    print("🏆 WINNER")
    print(f"Address       : {result.winner}")
    print(f"Index         : {result.winner_index}")
    print(f"Prize         : {to_tokens(result.prize)}")
    print("----------------------------------------")
    print(f"🧾 Wrote audit: {args.out}")
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    result = verify_audit(args.audit)
    print("✅ AUDIT VERIFIED")
    print(f"Winner        : {result['winner']}")
    print(f"Winner index  : {result['winner_index']}")
    print(f"Entrants      : {result['entrants']}")
    print(f"Request id    : {result['request_id']}")
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    settings = _settings(args)
    c = settings.raffle
    print(f"Entrance fee      : {to_tokens(c.entrance_fee)} ({c.entrance_fee} raw)")
    print(f"Interval          : {c.interval}s")
    print(f"Key hash          : {c.key_hash}")
    print(f"Subscription id   : {c.subscription_id}")
    print(f"Confirmations     : {c.confirmations}")
    print(f"Callback gas limit: {c.callback_gas_limit}")
    print(f"Coordinator       : {c.coordinator}")
    print(f"RPC URL           : {'(set)' if settings.rpc_url else '(local coordinator)'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="vrf-raffle",
        description="Fund-holding raffle resolved by verifiable randomness.",
    )
    p.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    p.add_argument("--rpc-url", default=None, help="Override RPC URL (else use env).")
    p.add_argument("--timeout", type=float, default=60.0, help="RPC timeout seconds.")

    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("simulate", help="Run one round (local coordinator unless an RPC URL is set).")
    s.add_argument(
        "--players",
        required=True,
        help="Comma separated base58 addresses, in entry order (repeats allowed).",
    )
    s.add_argument(
        "--random-word",
        type=int,
        default=None,
        help="Random word the coordinator answers with (else derived from request id).",
    )
    s.add_argument("--fee", default=None, help="Entrance fee in whole tokens (e.g. 0.01).")
    s.add_argument("--interval", type=int, default=None, help="Interval in seconds.")
    s.add_argument("--out", default="audit.json", help="Audit output JSON path.")
    s.add_argument(
        "--poll-interval",
        type=float,
        default=2.0,
        help="Seconds between status polls of a remote coordinator.",
    )
    s.add_argument(
        "--max-polls", type=int, default=30, help="Status polls before giving up."
    )
    s.set_defaults(func=cmd_simulate)

    v = sub.add_parser("verify", help="Verify an existing audit.json deterministically.")
    v.add_argument("--audit", required=True, help="Path to audit.json.")
    v.set_defaults(func=cmd_verify)

    c = sub.add_parser("config", help="Print the effective configuration.")
    c.set_defaults(func=cmd_config)

    return p


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    setup_logging(args.verbose)
    raise SystemExit(args.func(args))
