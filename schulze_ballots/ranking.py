"""Round-by-round ranking: winners of each Schulze round take the next place."""
import enum
from typing import FrozenSet, Iterator, List, Optional, Tuple

import numpy as np

from schulze_ballots.resolver import find_winners
from schulze_ballots.tally import count_votes

Place = Tuple[int, FrozenSet[int]]


class CandidateStatus(enum.Enum):
    UNRANKED = enum.auto()
    WINNER = enum.auto()
    FINALIZED = enum.auto()


def rank_candidates(preferences: np.ndarray, tile_size: Optional[int] = None) -> Iterator[Place]:
    """
    Yields `(place, candidates)` pairs, starting from place 1. Candidates tied
    in a round share its place, and every candidate appears exactly once.

    Time complexity: O(n^4) in the worst case, as the strongest paths are
    recomputed for every round.
    """
    statuses = [CandidateStatus.UNRANKED] * preferences.shape[0]
    place = 1
    while True:
        finalized = {c for c, status in enumerate(statuses) if status is CandidateStatus.FINALIZED}
        winners = find_winners(preferences, excluded=finalized, tile_size=tile_size)
        if not winners:
            return
        for candidate in winners:
            statuses[candidate] = CandidateStatus.WINNER
        yield place, winners
        for candidate in winners:
            statuses[candidate] = CandidateStatus.FINALIZED
        place += 1


def determine_winners(
    stream,
    candidate_count: int,
    full_ranking: bool = False,
    tile_size: Optional[int] = None,
) -> List[Place]:
    """
    Counts the ballots of `stream` and returns the places: just the first one
    unless `full_ranking` is set.
    """
    preferences = count_votes(stream, candidate_count)
    places = rank_candidates(preferences, tile_size=tile_size)
    if full_ranking:
        return list(places)
    return [next(places)]
