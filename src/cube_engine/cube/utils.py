"""
Cube utils module.

Coordinate helpers. Every ``get_*_coord`` function accepts a single array of shape ``(n,)``
and returns an ``int``, or a batch of shape ``(m, n)`` and returns an array of ``m`` coordinates.
"""
import math
import numpy as np
from itertools import combinations, permutations
from typing import Union

from .defs import FACTORIAL, COMBINATION

Coord = Union[int, np.ndarray]


def _check_array(array: np.ndarray, name: str):
    if not isinstance(array, np.ndarray):
        raise TypeError(f"{name} must be ndarray, not {type(array).__name__}")
    if not np.issubdtype(array.dtype, np.integer):
        raise TypeError(f"{name} elements must be int, not {array.dtype}")
    if array.ndim not in (1, 2):
        raise ValueError(f"{name} must have 1 or 2 dimensions (got {array.ndim})")
    if array.shape[-1] <= 0:
        raise ValueError(f"{name} length must be positive (got {array.shape[-1]})")


def _result(coord: np.ndarray, batch: bool) -> Coord:
    return coord if batch else coord.item()


def get_orientation_coord(orientation: np.ndarray, v: int) -> Coord:
    """
    Get orientation coordinate number.
    The last element is implied by the others (total orientation ``0`` modulo ``v``)
    so only the first ``n - 1`` elements are encoded.
    """
    _check_array(orientation, "orientation")
    if not isinstance(v, int):
        raise TypeError(f"v must be int, not {type(v).__name__}")
    if v <= 0:
        raise ValueError(f"v must be positive (got {v})")
    if np.any((orientation < 0) | (orientation >= v)):
        raise ValueError(f"orientation values must be >= 0 and < {v} (got {orientation})")

    batch = orientation.ndim == 2
    orientation = np.atleast_2d(orientation)
    coord = np.zeros(len(orientation), dtype=np.int64)
    for i in range(orientation.shape[1] - 1):
        coord = coord * v + orientation[:, i]
    return _result(coord, batch)


def get_orientation_array(coord: Coord, v: int, n: int) -> np.ndarray:
    """Get orientation array with total orientation ``0`` modulo ``v``."""
    if not isinstance(v, int):
        raise TypeError(f"v must be int, not {type(v).__name__}")
    if not isinstance(n, int):
        raise TypeError(f"n must be int, not {type(n).__name__}")
    if v <= 0:
        raise ValueError(f"v must be positive (got {v})")
    if n <= 0:
        raise ValueError(f"n must be positive (got {n})")
    coords = np.atleast_1d(np.asarray(coord, dtype=np.int64))
    upper_lim = v ** (n - 1)
    if np.any((coords < 0) | (coords >= upper_lim)):
        raise ValueError(f"coord must be >= 0 and < {upper_lim} (got {coord})")

    orientation = np.zeros((len(coords), n), dtype=int)
    for i in range(n - 2, -1, -1):
        coords, orientation[:, i] = np.divmod(coords, v)
    orientation[:, -1] = -np.sum(orientation[:, :-1], axis=1) % v
    return orientation if np.ndim(coord) else orientation[0]


def get_permutation_coord(permutation: np.ndarray) -> Coord:
    """Get permutation coordinate number (lexicographic rank)."""
    _check_array(permutation, "permutation")
    batch = permutation.ndim == 2
    permutation = np.atleast_2d(permutation)
    n = permutation.shape[1]
    coord = np.zeros(len(permutation), dtype=np.int64)
    for i in range(n - 1):
        coord = coord * (n - i) + np.sum(permutation[:, i:i+1] > permutation[:, i+1:], axis=1)
    return _result(coord, batch)


def get_permutation_array(coord: int, n: int) -> np.ndarray:
    """Get permutation array from its lexicographic rank."""
    if not isinstance(coord, int):
        raise TypeError(f"coord must be int, not {type(coord).__name__}")
    if not isinstance(n, int):
        raise TypeError(f"n must be int, not {type(n).__name__}")
    if n <= 0:
        raise ValueError(f"n must be positive (got {n})")
    try:
        upper_lim = FACTORIAL[n].item()
    except IndexError:
        upper_lim = math.factorial(n)
    if coord < 0 or coord >= upper_lim:
        raise ValueError(f"coord must be >= 0 and < {upper_lim} (got {coord})")

    permutation = np.zeros(n, dtype=int)
    for i in range(n - 2, -1, -1):
        coord, permutation[i] = divmod(coord, n - i)
        permutation[i+1:] += permutation[i+1:] >= permutation[i]
    return permutation


def get_permutation_parity(permutation: np.ndarray) -> Union[bool, np.ndarray]:
    """Get permutation parity (``True`` if odd)."""
    _check_array(permutation, "permutation")
    batch = permutation.ndim == 2
    permutation = np.atleast_2d(permutation)
    inversions = np.zeros(len(permutation), dtype=np.int64)
    for i in range(permutation.shape[1] - 1):
        inversions += np.sum(permutation[:, i:i+1] > permutation[:, i+1:], axis=1)
    parity = inversions % 2 == 1
    return parity if batch else bool(parity[0])


def get_combination_coord(combination: np.ndarray) -> Coord:
    """Get combination coordinate number of increasing slot indexes."""
    _check_array(combination, "combination")
    if np.any(combination < 0):
        raise ValueError(f"combination values must be >= 0 (got {combination})")
    if np.any(np.diff(combination, axis=-1) <= 0):
        raise ValueError(f"combination values must be in increasing order (got {combination})")

    batch = combination.ndim == 2
    combination = np.atleast_2d(combination)
    k = combination.shape[1]
    try:
        coord = np.sum(COMBINATION[combination, np.arange(1, k + 1)], axis=1)
    except IndexError:
        coord = np.array([sum(math.comb(c, i + 1) for i, c in enumerate(row)) for row in combination])
    return _result(coord, batch)


def get_combination_array(coord: int, k: int) -> np.ndarray:
    """Get the increasing slot indexes of a combination coordinate number."""
    if not isinstance(coord, int):
        raise TypeError(f"coord must be int, not {type(coord).__name__}")
    if not isinstance(k, int):
        raise TypeError(f"k must be int, not {type(k).__name__}")
    if k <= 0:
        raise ValueError(f"k must be positive (got {k})")
    if coord < 0:
        raise ValueError(f"coord must be >= 0 (got {coord})")

    combination = np.zeros(k, dtype=int)
    for i in range(k - 1, -1, -1):
        c = i
        while math.comb(c + 1, i + 1) <= coord:
            c += 1
        coord -= math.comb(c, i + 1)
        combination[i] = c
    return combination


def all_permutations(n: int) -> np.ndarray:
    """All permutations of ``range(n)``, row index equals permutation coordinate."""
    return np.array([*permutations(range(n))], dtype=int)


def all_combinations(n: int, k: int) -> np.ndarray:
    """All increasing ``k``-combinations of ``range(n)``."""
    return np.array([*combinations(range(n), k)], dtype=int)
