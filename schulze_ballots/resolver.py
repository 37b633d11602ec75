"""
Schulze resolution: pairwise victories, strongest (widest) paths and winners.

Two interchangeable kernels compute the strongest paths. The serial one is the
textbook Floyd-Warshall-like closure. The tiled one splits the matrix into
square tiles and processes them phase by phase, so independent tiles can run in
parallel and stay in CPU caches. Both produce identical matrices.
"""
from typing import AbstractSet, FrozenSet, Optional
import warnings

import numpy as np
from numba import njit, prange


@njit
def populate_direct_victories(preferences: np.ndarray, strongest_paths: np.ndarray):
    """
    Keeps the winning side of every head-to-head comparison and zeroes the
    losing one. Ties zero both directions.
    """
    num_candidates = preferences.shape[0]
    for i in range(num_candidates):
        for j in range(num_candidates):
            if i != j and preferences[i, j] > preferences[j, i]:
                strongest_paths[i, j] = preferences[i, j]


@njit
def compute_strongest_paths(preferences: np.ndarray) -> np.ndarray:
    """
    Computes the widest path strengths using the Schulze method.

    Space complexity: O(n^2), where n is the number of candidates.
    Time complexity: O(n^3), where n is the number of candidates.
    """
    num_candidates = preferences.shape[0]
    strongest_paths = np.zeros((num_candidates, num_candidates), dtype=np.uint32)
    populate_direct_victories(preferences, strongest_paths)

    # The intermediary must be the outermost loop
    for k in range(num_candidates):
        for i in range(num_candidates):
            if i != k:
                for j in range(num_candidates):
                    if j != i and j != k:
                        strongest_paths[i, j] = max(
                            strongest_paths[i, j],
                            min(strongest_paths[i, k], strongest_paths[k, j]),
                        )

    return strongest_paths


@njit
def update_tile(
    paths: np.ndarray,
    c_row: int,
    c_col: int,
    a_row: int,
    a_col: int,
    b_row: int,
    b_col: int,
    tile_size: int,
):
    """
    In-place relaxation of the tile starting at (c_row, c_col) through the
    intermediaries of tiles (a_row, a_col) and (b_row, b_col).

    Time complexity: O(n^3), where n is the tile size.
    """
    for k in range(tile_size):
        for i in range(tile_size):
            for j in range(tile_size):
                if (
                    (c_row + i != c_col + j)
                    and (a_row + i != a_col + k)
                    and (b_row + k != b_col + j)
                ):
                    replacement = min(paths[a_row + i, a_col + k], paths[b_row + k, b_col + j])
                    if replacement > paths[c_row + i, c_col + j]:
                        paths[c_row + i, c_col + j] = replacement


@njit(parallel=True)
def _close_tiled(paths: np.ndarray, tile_size: int):
    tiles_count = paths.shape[0] // tile_size
    for k in range(tiles_count):
        k_start = k * tile_size

        # Dependent phase: the diagonal tile only relies on itself
        update_tile(paths, k_start, k_start, k_start, k_start, k_start, k_start, tile_size)

        # Partially dependent phases: the k-th tile row and column
        for i in prange(tiles_count):
            if i != k:
                i_start = i * tile_size
                update_tile(paths, i_start, k_start, i_start, k_start, k_start, k_start, tile_size)
        for j in prange(tiles_count):
            if j != k:
                j_start = j * tile_size
                update_tile(paths, k_start, j_start, k_start, k_start, k_start, j_start, tile_size)

        # Independent phase: everything else
        for i in prange(tiles_count):
            if i == k:
                continue
            i_start = i * tile_size
            for j in range(tiles_count):
                if j == k:
                    continue
                j_start = j * tile_size
                update_tile(paths, i_start, j_start, i_start, k_start, k_start, j_start, tile_size)


def check_preferences(preferences: np.ndarray):
    """Rejects matrices that would be silently wrapped by the `uint32` kernels."""
    if preferences.dtype != np.uint32:
        raise ValueError(f"preferences must be a uint32 matrix, got {preferences.dtype}")


def compute_strongest_paths_tiled(preferences: np.ndarray, tile_size: int = 16) -> np.ndarray:
    """
    Computes the widest path strengths like `compute_strongest_paths`, but tile
    by tile with the independent tiles spread across threads.

    Matrices whose side isn't a multiple of `tile_size` are padded with zeros.
    Padding candidates have no victories, so no path can improve through them.
    """
    if tile_size < 1:
        raise ValueError(f"tile size must be positive, got {tile_size}")
    check_preferences(preferences)
    num_candidates = preferences.shape[0]
    if tile_size > num_candidates:
        warnings.warn(
            f"tile size {tile_size} exceeds the {num_candidates} candidates, the matrix is padded"
        )

    padded_size = -(-num_candidates // tile_size) * tile_size
    padded = np.zeros((padded_size, padded_size), dtype=np.uint32)
    populate_direct_victories(
        np.ascontiguousarray(preferences),
        padded[:num_candidates, :num_candidates],
    )
    _close_tiled(padded, tile_size)
    return np.ascontiguousarray(padded[:num_candidates, :num_candidates])


def winners_from_paths(strongest_paths: np.ndarray) -> np.ndarray:
    """
    Boolean mask of the candidates that no one else beats by a strictly stronger
    path: `i` wins if `paths[j, i] <= paths[i, j]` for every `j`.
    """
    return (strongest_paths >= strongest_paths.T).all(axis=1)


def find_winners(
    preferences: np.ndarray,
    excluded: Optional[AbstractSet[int]] = None,
    tile_size: Optional[int] = None,
) -> FrozenSet[int]:
    """
    Returns the Schulze winners among the candidates not in `excluded`, as
    indices into the full `preferences` matrix. Several winners are a tie, not
    an error. An empty set means that no candidates are left to rank.
    """
    check_preferences(preferences)
    excluded = excluded or frozenset()
    candidates = np.array(
        [c for c in range(preferences.shape[0]) if c not in excluded],
        dtype=np.int64,
    )
    if candidates.size == 0:
        return frozenset()

    restricted = np.ascontiguousarray(preferences[np.ix_(candidates, candidates)])
    if tile_size is None:
        strongest_paths = compute_strongest_paths(restricted)
    else:
        strongest_paths = compute_strongest_paths_tiled(restricted, tile_size=tile_size)
    return frozenset(int(c) for c in candidates[winners_from_paths(strongest_paths)])
