from __future__ import annotations

from typing import Sequence, Tuple

from .project_constants import TOKEN_DECIMALS


def to_tokens(raw_amount: int) -> float:
    return round(raw_amount / (10**TOKEN_DECIMALS), 4)


def winner_index(random_word: int, participant_count: int) -> int:
    if participant_count <= 0:
        raise RuntimeError("Cannot pick a winner from an empty round.")
    if random_word < 0:
        raise ValueError(f"Random word must be unsigned: {random_word}")
    return random_word % participant_count


def pick_winner(participants: Sequence[str], random_word: int) -> Tuple[int, str]:
    idx = winner_index(random_word, len(participants))
    return idx, participants[idx]
