"""Plain-text input and output helpers for the command line."""
import re
from typing import Iterable, List, Sequence

import numpy as np

from schulze_ballots.ranking import Place

_LINE_BREAKS = re.compile(rb"[\r\n\0]+")


def read_candidate_names(stream) -> List[str]:
    """
    Reads one candidate name per line. CR, LF and NUL all separate lines, and
    empty lines are skipped, so the count of names is the count of candidates.
    Names are UTF-8; undecodable bytes become replacement characters.
    """
    data = stream.read()
    if isinstance(data, str):
        data = data.encode("utf-8", errors="replace")
    return [line.decode("utf-8", errors="replace") for line in _LINE_BREAKS.split(data) if line]


def print_graph_matrix(matrix: np.ndarray, file=None):
    """Prints a square matrix with 1-based row and column headers."""
    size = matrix.shape[0]
    print("     " + "".join(f"{i:5d} " for i in range(1, size + 1)), file=file)
    for row in range(size):
        cells = "".join(f"{int(value):5d} " for value in matrix[row])
        print(f"{row + 1:3d}: {cells}", file=file)
    print(file=file)


def format_places(places: Iterable[Place], names: Sequence[str], full_ranking: bool) -> List[str]:
    """Renders winners as `winner: NAME` lines, or `place K: NAME` lines for a full ranking."""
    lines = []
    for place, candidates in places:
        for candidate in sorted(candidates):
            if full_ranking:
                lines.append(f"place {place}: {names[candidate]}")
            else:
                lines.append(f"winner: {names[candidate]}")
    return lines
