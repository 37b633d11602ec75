"""Ranked-ballot parsing and Schulze method winners.

See: https://en.wikipedia.org/wiki/Schulze_method
"""
import warnings

from schulze_ballots.errors import (
    BallotError,
    DuplicateCandidateInBallot,
    NoCandidates,
    OutOfRangeCandidate,
    PrematureEndOfInput,
    UnexpectedCharacter,
)
from schulze_ballots.parser import Ballot, BallotParser, ParserState, parse_ballot, parse_ballots, transition
from schulze_ballots.tally import build_pairwise_preferences, count_votes, tally_ballot
from schulze_ballots.resolver import compute_strongest_paths, compute_strongest_paths_tiled, find_winners
from schulze_ballots.ranking import CandidateStatus, determine_winners, rank_candidates

# Suppress Numba TBB threading layer warnings
warnings.filterwarnings("ignore", message=".*TBB threading layer.*")

__version__ = "0.1.0"
