"""Command line entry point.

Usage:
    schulze-ballots candidates.txt votes.txt --full-ranking
    python -m schulze_ballots candidates.txt votes.txt
"""
import argparse
import sys
from typing import Optional, Sequence

from schulze_ballots.errors import BallotError, NoCandidates
from schulze_ballots.printing import format_places, print_graph_matrix, read_candidate_names
from schulze_ballots.ranking import rank_candidates
from schulze_ballots.resolver import compute_strongest_paths, compute_strongest_paths_tiled
from schulze_ballots.tally import count_votes


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Determine election winners by the Schulze method")
    parser.add_argument(
        "candidates",
        help="File listing one candidate name per line",
    )
    parser.add_argument(
        "votes",
        help="File with one ballot per line, e.g. '1 > 3 = 2'",
    )
    parser.add_argument(
        "--full-ranking",
        action="store_true",
        help="Rank every candidate instead of only reporting the winners",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Don't print the tallied votes and strongest paths matrices",
    )
    parser.add_argument(
        "--tile-size",
        type=int,
        default=None,
        help="Use the tiled parallel kernel with this tile size, useful for thousands of candidates",
    )
    return parser


def run(args: argparse.Namespace) -> None:
    with open(args.candidates, "rb") as file:
        names = read_candidate_names(file)
    if not names:
        raise NoCandidates()

    with open(args.votes, "rb") as file:
        preferences = count_votes(file, len(names))

    if not args.quiet:
        print("tallied votes:")
        print_graph_matrix(preferences)
        if args.tile_size is None:
            strongest_paths = compute_strongest_paths(preferences)
        else:
            strongest_paths = compute_strongest_paths_tiled(preferences, tile_size=args.tile_size)
        print("strongest paths:")
        print_graph_matrix(strongest_paths)

    places = rank_candidates(preferences, tile_size=args.tile_size)
    if not args.full_ranking:
        places = [next(places)]
    for line in format_places(places, names, args.full_ranking):
        print(line)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.tile_size is not None and args.tile_size < 1:
        print(f"ERROR: tile size must be positive, got {args.tile_size}", file=sys.stderr)
        return 1
    try:
        run(args)
    except BallotError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"ERROR: could not read {e.filename}: {e.strerror}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
