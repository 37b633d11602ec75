"""
Character-level parser for ranked ballots.

A ballot file holds one ballot per line. Each ballot lists 1-based candidate
numbers separated by `>` (strict preference) or `=` (tie), with optional spaces
or tabs between tokens:

    1 > 3 = 4 > 2
    2

Blank lines are ignored, and the final ballot doesn't need a trailing newline.
Candidates the voter didn't mention are tied below everything they did mention,
so the second line above reads as `2 > 1 = 3 = 4`.

The grammar is recognized by a small state machine. `transition` is pure: it
maps the current state and the next input byte to the next state, or raises.
`BallotParser` drives it over a stream and does the bookkeeping: accumulating
digits, validating candidates, and splitting preference groups.
"""
import enum
import io
from typing import FrozenSet, Iterable, Iterator, List, NamedTuple, Optional, Set, Tuple, Union

import numpy as np

from schulze_ballots.errors import (
    BallotError,
    DuplicateCandidateInBallot,
    NoCandidates,
    OutOfRangeCandidate,
    PrematureEndOfInput,
    UnexpectedCharacter,
)

DIGITS = frozenset(b"0123456789")
BLANKS = frozenset(b" \t")
NEWLINES = frozenset(b"\r\n")
CARRIAGE_RETURN, LINE_FEED = ord("\r"), ord("\n")
GREATER_SIGN, EQUAL_SIGN = ord(">"), ord("=")
DIGITS_BASE = ord("0")


class ParserState(enum.Enum):
    START = enum.auto()
    EMPTY_INPUT = enum.auto()
    BEFORE_NUMBER = enum.auto()
    NUMBER = enum.auto()
    AFTER_NUMBER = enum.auto()
    GREATER_THAN = enum.auto()
    EQUAL = enum.auto()
    END_LINE = enum.auto()
    END_PARSING = enum.auto()
    DONE = enum.auto()


def transition(state: ParserState, char: Optional[int]) -> ParserState:
    """
    Returns the state reached from `state` on reading `char`, a byte value, or
    `None` at the end of the stream. Raises `UnexpectedCharacter` or
    `PrematureEndOfInput` when the input doesn't fit the grammar.

    `END_LINE`, `END_PARSING` and `DONE` consume no input; the caller leaves
    them on its own.
    """
    if state is ParserState.START or state is ParserState.EMPTY_INPUT:
        if char is None:
            return ParserState.DONE
        if char in DIGITS:
            return ParserState.NUMBER
        if char in BLANKS:
            return ParserState.EMPTY_INPUT
        if char in NEWLINES:
            return state

    elif state in (ParserState.BEFORE_NUMBER, ParserState.GREATER_THAN, ParserState.EQUAL):
        if char is not None and char in DIGITS:
            return ParserState.NUMBER
        if char is not None and char in BLANKS:
            return ParserState.BEFORE_NUMBER

    elif state is ParserState.NUMBER or state is ParserState.AFTER_NUMBER:
        if char is None:
            return ParserState.END_PARSING
        if char in DIGITS and state is ParserState.NUMBER:
            return ParserState.NUMBER
        if char in BLANKS:
            return ParserState.AFTER_NUMBER
        if char in NEWLINES:
            return ParserState.END_LINE
        if char == GREATER_SIGN:
            return ParserState.GREATER_THAN
        if char == EQUAL_SIGN:
            return ParserState.EQUAL

    else:
        raise ValueError(f"no input is read in the {state.name} state")

    if char is None:
        raise PrematureEndOfInput()
    raise UnexpectedCharacter(char)


def _check_candidate(candidate: int, candidate_count: int, seen: Set[int]):
    # `candidate` is 0-based, the messages are 1-based
    if candidate < 0 or candidate >= candidate_count:
        raise OutOfRangeCandidate(candidate + 1, candidate_count)
    if candidate in seen:
        raise DuplicateCandidateInBallot(candidate + 1)
    seen.add(candidate)


class Ballot(NamedTuple):
    """
    One voter's preferences: groups of tied candidates, most preferred first.
    Every candidate in `range(candidate_count)` belongs to exactly one group.
    """

    groups: Tuple[FrozenSet[int], ...]
    candidate_count: int

    @classmethod
    def from_groups(cls, groups: Iterable[Iterable[int]], candidate_count: int) -> "Ballot":
        """
        Builds a ballot from 0-based candidate groups, validating them the way
        the parser does and appending the unmentioned candidates as a final tie.
        """
        if candidate_count < 1:
            raise NoCandidates(candidate_count)
        seen: Set[int] = set()
        complete = []
        for group in groups:
            group = list(group)
            for candidate in group:
                _check_candidate(candidate, candidate_count, seen)
            if group:
                complete.append(frozenset(group))
        omitted = [candidate for candidate in range(candidate_count) if candidate not in seen]
        if omitted:
            complete.append(frozenset(omitted))
        return cls(tuple(complete), candidate_count)

    def ranks(self) -> np.ndarray:
        """Index of the group holding each candidate; lower is more preferred."""
        ranks = np.zeros(self.candidate_count, dtype=np.int64)
        for rank, group in enumerate(self.groups):
            for candidate in group:
                ranks[candidate] = rank
        return ranks


class BallotParser:
    """
    Iterates over the ballots of a stream, reading it one character at a time.

    The stream is normally binary, but a text stream works just as well. The
    first error stops the iteration; the raised `BallotError` carries the
    1-based line and column where it was detected.
    """

    def __init__(self, stream, candidate_count: int):
        if candidate_count < 1:
            raise NoCandidates(candidate_count)
        self.stream = stream
        self.candidate_count = candidate_count
        self.line = 1
        self.column = 0
        self._previous: Optional[int] = None
        self._reset()

    def _reset(self):
        self._seen: Set[int] = set()
        self._groups: List[FrozenSet[int]] = []
        self._group: List[int] = []
        self._number = 0
        self._number_position = (self.line, self.column)

    def _read(self) -> Optional[int]:
        data = self.stream.read(1)
        char = (ord(data) if isinstance(data, str) else data[0]) if data else None

        # CR LF counts as a single line break
        previous = self._previous
        if previous == LINE_FEED or (previous == CARRIAGE_RETURN and char != LINE_FEED):
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self._previous = char
        return char

    def _close_number(self):
        line, column = self._number_position
        try:
            _check_candidate(self._number - 1, self.candidate_count, self._seen)
        except BallotError as error:
            error.line, error.column = line, column
            raise
        self._group.append(self._number - 1)
        self._number = 0

    def _close_group(self):
        self._groups.append(frozenset(self._group))
        self._group = []

    def _finish_ballot(self) -> Ballot:
        if self._group:
            self._close_group()
        omitted = [c for c in range(self.candidate_count) if c not in self._seen]
        if omitted:
            self._groups.append(frozenset(omitted))
        ballot = Ballot(tuple(self._groups), self.candidate_count)
        self._reset()
        return ballot

    def __iter__(self) -> Iterator[Ballot]:
        state = ParserState.START
        while state is not ParserState.DONE:
            char = self._read()
            if state is ParserState.NUMBER and (char is None or char not in DIGITS):
                self._close_number()
            try:
                next_state = transition(state, char)
            except BallotError as error:
                error.line, error.column = self.line, self.column
                raise

            if next_state is ParserState.NUMBER:
                if state is not ParserState.NUMBER:
                    self._number_position = (self.line, self.column)
                self._number = self._number * 10 + (char - DIGITS_BASE)

            if next_state is ParserState.GREATER_THAN:
                self._close_group()
            elif next_state is ParserState.END_LINE:
                yield self._finish_ballot()
                next_state = ParserState.START
            elif next_state is ParserState.END_PARSING:
                yield self._finish_ballot()
                next_state = ParserState.DONE
            state = next_state


def parse_ballots(stream, candidate_count: int) -> Iterator[Ballot]:
    """Yields the ballots of `stream` in file order."""
    yield from BallotParser(stream, candidate_count)


def parse_ballot(text: Union[str, bytes], candidate_count: int) -> Ballot:
    """
    Parses a single ballot line, e.g. `"1 > 3 = 2"`. An empty line is a ballot
    where every candidate is tied.
    """
    if isinstance(text, str):
        text = text.encode("utf-8")
    ballots = list(parse_ballots(io.BytesIO(text), candidate_count))
    if len(ballots) > 1:
        raise ValueError(f"expected a single ballot, got {len(ballots)}")
    if not ballots:
        return Ballot.from_groups((), candidate_count)
    return ballots[0]
