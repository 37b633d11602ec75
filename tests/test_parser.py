"""Tests for the ballot grammar and its state machine."""
import io

import pytest

from schulze_ballots.errors import (
    DuplicateCandidateInBallot,
    NoCandidates,
    OutOfRangeCandidate,
    PrematureEndOfInput,
    UnexpectedCharacter,
)
from schulze_ballots.parser import Ballot, BallotParser, ParserState, parse_ballot, parse_ballots, transition

S = ParserState


def ballots(text, candidate_count=3):
    return list(parse_ballots(io.BytesIO(text.encode()), candidate_count))


def groups(*sets):
    return tuple(frozenset(s) for s in sets)


class TestTransition:
    @pytest.mark.parametrize(
        "state, char, expected",
        [
            (S.START, "7", S.NUMBER),
            (S.START, " ", S.EMPTY_INPUT),
            (S.START, "\n", S.START),
            (S.START, None, S.DONE),
            (S.EMPTY_INPUT, "\t", S.EMPTY_INPUT),
            (S.EMPTY_INPUT, "\r", S.EMPTY_INPUT),
            (S.EMPTY_INPUT, "1", S.NUMBER),
            (S.EMPTY_INPUT, None, S.DONE),
            (S.BEFORE_NUMBER, " ", S.BEFORE_NUMBER),
            (S.BEFORE_NUMBER, "2", S.NUMBER),
            (S.NUMBER, "0", S.NUMBER),
            (S.NUMBER, " ", S.AFTER_NUMBER),
            (S.NUMBER, "\n", S.END_LINE),
            (S.NUMBER, ">", S.GREATER_THAN),
            (S.NUMBER, "=", S.EQUAL),
            (S.NUMBER, None, S.END_PARSING),
            (S.AFTER_NUMBER, "\t", S.AFTER_NUMBER),
            (S.AFTER_NUMBER, "\r", S.END_LINE),
            (S.AFTER_NUMBER, ">", S.GREATER_THAN),
            (S.AFTER_NUMBER, "=", S.EQUAL),
            (S.AFTER_NUMBER, None, S.END_PARSING),
            (S.GREATER_THAN, "3", S.NUMBER),
            (S.GREATER_THAN, " ", S.BEFORE_NUMBER),
            (S.EQUAL, "3", S.NUMBER),
            (S.EQUAL, "\t", S.BEFORE_NUMBER),
        ],
    )
    def test_transitions(self, state, char, expected):
        assert transition(state, None if char is None else ord(char)) is expected

    @pytest.mark.parametrize(
        "state, char",
        [
            (S.START, ">"),
            (S.EMPTY_INPUT, "x"),
            (S.BEFORE_NUMBER, "\n"),
            (S.BEFORE_NUMBER, "="),
            (S.AFTER_NUMBER, "4"),
            (S.GREATER_THAN, ">"),
            (S.GREATER_THAN, "\n"),
            (S.EQUAL, "="),
            (S.NUMBER, "-"),
        ],
    )
    def test_unexpected_characters(self, state, char):
        with pytest.raises(UnexpectedCharacter):
            transition(state, ord(char))

    @pytest.mark.parametrize("state", [S.BEFORE_NUMBER, S.GREATER_THAN, S.EQUAL])
    def test_premature_end(self, state):
        with pytest.raises(PrematureEndOfInput):
            transition(state, None)

    @pytest.mark.parametrize("state", [S.END_LINE, S.END_PARSING, S.DONE])
    def test_states_that_read_nothing(self, state):
        with pytest.raises(ValueError):
            transition(state, ord("1"))


class TestGrammar:
    def test_strict_order(self):
        assert ballots("1>2>3") == [Ballot(groups({0}, {1}, {2}), 3)]

    def test_tie(self):
        assert ballots("1=2>3") == [Ballot(groups({0, 1}, {2}), 3)]

    def test_omitted_candidates_are_tied_last(self):
        assert ballots("2") == ballots("2>1=3")
        assert ballots("2")[0].groups == groups({1}, {0, 2})

    def test_whitespace_between_tokens(self):
        assert ballots(" \t3 >\t1 = 2 \t") == [Ballot(groups({2}, {0, 1}), 3)]

    def test_line_breaks(self):
        parsed = ballots("1>2\r\n\r\n\n2>3\r3\n")
        assert [b.groups for b in parsed] == [
            groups({0}, {1}, {2}),
            groups({1}, {2}, {0}),
            groups({2}, {0, 1}),
        ]

    def test_blank_input(self):
        assert ballots("") == []
        assert ballots("\n\n  \t\r\n") == []

    def test_multi_digit_candidates(self):
        parsed = ballots("12>10", candidate_count=12)
        assert parsed[0].groups[:2] == groups({11}, {9})
        assert parsed[0].groups[2] == frozenset(range(9)) | {10}

    def test_text_stream(self):
        assert list(parse_ballots(io.StringIO("3>1\n"), 3)) == ballots("3>1")

    def test_every_candidate_once(self):
        for ballot in ballots("1\n3=1\n2>1>3\n1=2=3", candidate_count=3):
            seen = [c for group in ballot.groups for c in group]
            assert sorted(seen) == [0, 1, 2]

    def test_ballots_are_streamed(self):
        parser = iter(BallotParser(io.BytesIO(b"1\n1>1\n"), 3))
        assert next(parser).groups == groups({0}, {1, 2})
        with pytest.raises(DuplicateCandidateInBallot):
            next(parser)


class TestErrors:
    def test_duplicate(self):
        with pytest.raises(DuplicateCandidateInBallot) as error:
            ballots("1>1", candidate_count=1)
        assert error.value.candidate == 1

    def test_duplicate_within_tie(self):
        with pytest.raises(DuplicateCandidateInBallot):
            ballots("2=2")

    def test_out_of_range(self):
        with pytest.raises(OutOfRangeCandidate) as error:
            ballots("5")
        assert error.value.candidate == 5
        assert str(error.value) == "line 1, column 1: candidate 5 is invalid! (1, 3)"

    def test_zero_is_out_of_range(self):
        with pytest.raises(OutOfRangeCandidate):
            ballots("0>1")

    def test_out_of_range_wins_over_bad_character(self):
        with pytest.raises(OutOfRangeCandidate):
            ballots("9x")

    @pytest.mark.parametrize("text", ["1>", "1 = ", "2>\t"])
    def test_premature_end(self, text):
        with pytest.raises(PrematureEndOfInput):
            ballots(text)

    @pytest.mark.parametrize("text", ["1 2", "1>>2", "a", "1,2", "1>\n2", ">1"])
    def test_unexpected_character(self, text):
        with pytest.raises(UnexpectedCharacter):
            ballots(text)

    def test_error_location(self):
        with pytest.raises(UnexpectedCharacter) as error:
            ballots("1\n2\n1,2")
        assert (error.value.line, error.value.column) == (3, 2)
        assert "unexpected character in input: ," in str(error.value)

    def test_crlf_counts_once(self):
        with pytest.raises(OutOfRangeCandidate) as error:
            ballots("1\r\n2\r\n3>4")
        assert (error.value.line, error.value.column) == (3, 3)

    def test_non_printable(self):
        with pytest.raises(UnexpectedCharacter) as error:
            ballots("1>\n")
        assert "non-printable" in str(error.value)

    def test_no_candidates(self):
        with pytest.raises(NoCandidates):
            BallotParser(io.BytesIO(b"1"), 0)


class TestSingleBallot:
    def test_parse_ballot(self):
        assert parse_ballot("3 > 1", 3).groups == groups({2}, {0}, {1})
        assert parse_ballot(b"1=3", 3).groups == groups({0, 2}, {1})

    def test_empty_ballot_ties_everyone(self):
        assert parse_ballot("", 4).groups == groups({0, 1, 2, 3})

    def test_rejects_several_ballots(self):
        with pytest.raises(ValueError):
            parse_ballot("1\n2", 3)

    def test_from_groups(self):
        assert Ballot.from_groups([[1], [], [0]], 4) == Ballot(groups({1}, {0}, {2, 3}), 4)
        with pytest.raises(DuplicateCandidateInBallot):
            Ballot.from_groups([[1], [1]], 3)
        with pytest.raises(OutOfRangeCandidate):
            Ballot.from_groups([[3]], 3)

    def test_ranks(self):
        assert parse_ballot("2=4>1", 4).ranks().tolist() == [1, 0, 2, 0]
