from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict

from .draw import pick_winner
from .raffle import RoundResult


def build_audit(result: RoundResult, entrance_fee: int) -> Dict[str, Any]:
    return {
        "metadata": {
            "tool": "vrf-raffle",
            "version": "1.0.0",
            "generated_at_utc": datetime.now(timezone.utc).isoformat(),
            "round_index": result.round_index,
            "request_id": result.request_id,
            "random_word": str(result.random_word),  # big int; store as string
            "entrance_fee": entrance_fee,
            "settled_at": result.settled_at,
        },
        "winner": {
            "address": result.winner,
            "index": result.winner_index,
            "prize": result.prize,
            "paid": result.paid,
        },
        # Entry order is what makes the draw reproducible.
        "all_entrants": list(result.participants),
    }


def write_audit(result: RoundResult, entrance_fee: int, path: str) -> Dict[str, Any]:
    audit = build_audit(result, entrance_fee)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(audit, f, indent=2)
    return audit


def verify_audit(audit_path: str) -> Dict[str, Any]:
    with open(audit_path, "r", encoding="utf-8") as f:
        audit = json.load(f)

    meta = audit["metadata"]
    random_word = int(meta["random_word"])
    entrants = audit["all_entrants"]
    if not entrants:
        raise RuntimeError("Audit lists no entrants.")

    idx, winner = pick_winner(entrants, random_word)
    idx_expected = int(audit["winner"]["index"])
    if idx != idx_expected:
        raise RuntimeError(f"Winner index mismatch: audit={idx_expected} recomputed={idx}")

    winner_expected = audit["winner"]["address"]
    if winner != winner_expected:
        raise RuntimeError(f"Winner mismatch: audit={winner_expected} recomputed={winner}")

    return {
        "ok": True,
        "request_id": int(meta["request_id"]),
        "random_word": random_word,
        "winner": winner,
        "winner_index": idx,
        "entrants": len(entrants),
    }
