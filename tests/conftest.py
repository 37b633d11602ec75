import io

import pytest

from schulze_ballots.tally import count_votes


def repeat(count, ballot):
    return [ballot] * count


@pytest.fixture
def wikipedia_ballots():
    """The 45-voter example from the Schulze method article, candidates A..E as 1..5; E wins."""
    return (
        repeat(5, "1>3>2>5>4")
        + repeat(5, "1>4>5>3>2")
        + repeat(8, "2>5>4>1>3")
        + repeat(3, "3>1>2>5>4")
        + repeat(7, "3>1>5>2>4")
        + repeat(2, "3>2>1>4>5")
        + repeat(7, "4>3>5>2>1")
        + repeat(8, "5>2>1>4>3")
    )


@pytest.fixture
def language_ballots():
    """Python, Rust, Go and Java as 1..4: ten voters without a single winner."""
    return (
        ["1>4>2>3"]
        + repeat(2, "1>4>3>2")
        + repeat(2, "2>1>3>4")
        + repeat(4, "3>4>2>1")
        + ["4>1>2>3"]
    )


@pytest.fixture
def count():
    def count(lines, candidate_count):
        return count_votes(io.BytesIO("\n".join(lines).encode()), candidate_count)

    return count
