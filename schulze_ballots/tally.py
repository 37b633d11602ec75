"""Pairwise-preference accumulation: every ballot adds to one shared matrix."""
from typing import Iterable

import numpy as np
from numba import njit

from schulze_ballots.errors import NoCandidates
from schulze_ballots.parser import Ballot, parse_ballots


@njit
def populate_preferences_from_ranks(preferences: np.ndarray, ranks: np.ndarray):
    """
    Populates the preference matrix from a single ballot, where `ranks[c]` is
    the index of the preference group of candidate `c`. Candidates sharing a
    group are tied and add nothing in either direction.

    Space complexity: O(1).
    Time complexity: O(n^2), where n is the number of candidates.
    """
    num_candidates = ranks.shape[0]
    for preferred in range(num_candidates):
        for opponent in range(num_candidates):
            if ranks[preferred] < ranks[opponent]:
                preferences[preferred, opponent] += 1


def empty_preferences(candidate_count: int) -> np.ndarray:
    """Zeroed `uint32` matrix for `candidate_count` candidates."""
    if candidate_count < 1:
        raise NoCandidates(candidate_count)
    return np.zeros((candidate_count, candidate_count), dtype=np.uint32)


def tally_ballot(preferences: np.ndarray, ballot: Ballot):
    """Adds one ballot to `preferences` in place."""
    if preferences.shape != (ballot.candidate_count, ballot.candidate_count):
        raise ValueError(
            f"ballot over {ballot.candidate_count} candidates doesn't fit a {preferences.shape} matrix"
        )
    populate_preferences_from_ranks(preferences, ballot.ranks())


def build_pairwise_preferences(ballots: Iterable[Ballot], candidate_count: int) -> np.ndarray:
    """
    Builds a square preference matrix from already parsed ballots. Every cell
    (i, j) contains the number of voters who prefer candidate i to candidate j.

    Space complexity: O(n^2), where n is the number of candidates.
    Time complexity: O(m * n^2), where n is the number of candidates and m is the number of voters.
    """
    preferences = empty_preferences(candidate_count)
    for ballot in ballots:
        tally_ballot(preferences, ballot)
    return preferences


def count_votes(stream, candidate_count: int) -> np.ndarray:
    """
    Parses every ballot of `stream` and returns the resulting preference matrix.
    A parsing error propagates, so a partially tallied matrix never escapes.
    """
    return build_pairwise_preferences(parse_ballots(stream, candidate_count), candidate_count)
