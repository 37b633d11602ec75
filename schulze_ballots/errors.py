"""Exceptions raised while reading ballots.

Every input problem is fatal for the run: the parser stops at the first one and
no winners are computed. Candidate numbers in messages are 1-based, matching the
ballot file, even though everything inside the package is 0-based.
"""
from typing import Optional


class BallotError(ValueError):
    """Base class for all ballot input errors."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(message)

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        if self.column is None:
            return f"line {self.line}: {self.message}"
        return f"line {self.line}, column {self.column}: {self.message}"


class NoCandidates(BallotError):
    def __init__(self, candidate_count: int = 0):
        self.candidate_count = candidate_count
        super().__init__("no candidates")


class OutOfRangeCandidate(BallotError):
    def __init__(self, candidate: int, candidate_count: int, line=None, column=None):
        self.candidate = candidate
        self.candidate_count = candidate_count
        super().__init__(f"candidate {candidate} is invalid! (1, {candidate_count})", line, column)


class DuplicateCandidateInBallot(BallotError):
    def __init__(self, candidate: int, line=None, column=None):
        self.candidate = candidate
        super().__init__(f"candidate {candidate} is ranked twice!", line, column)


class UnexpectedCharacter(BallotError):
    def __init__(self, char: int, line=None, column=None):
        self.char = char
        if 0x20 <= char < 0x7F:
            message = f"unexpected character in input: {chr(char)}"
        else:
            message = "unexpected non-printable input"
        super().__init__(message, line, column)


class PrematureEndOfInput(BallotError):
    def __init__(self, line=None, column=None):
        super().__init__("premature end of input", line, column)
