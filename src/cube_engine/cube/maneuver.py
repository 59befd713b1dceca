"""Maneuver module."""
from __future__ import annotations

import random
from typing import Union, List, Tuple, Iterator, Dict, overload

from .cube import CubeState, parse_moves
from .enums import Move
from ..defs import SCRAMBLE_MIN_LENGTH, SCRAMBLE_MAX_LENGTH
from ..errors import InvalidMove

NEXT_MOVES: Dict[Move, List[Move]] = {Move.NONE: [*Move.moves()]}
"""Moves allowed after each move: any move on a different face."""
for _move in Move.moves():
    NEXT_MOVES[_move] = [move for move in Move.moves() if move.face != _move.face]


def _reduce_moves(moves: List[Move]) -> List[Move]:
    """
    Merge moves on the same face that are only separated by moves on the opposite face,
    dropping the ones that cancel out.
    """
    reduced: List[Move] = []
    for move in moves:
        i = len(reduced) - 1
        while i >= 0 and reduced[i].face == move.face.opposite:
            i -= 1
        if i >= 0 and reduced[i].face == move.face:
            shift = (reduced[i].shift + move.shift) % 4
            if shift:
                reduced[i] = Move[move.face.char + str(shift)]
            else:
                del reduced[i]
        else:
            reduced.append(move)
    return reduced


class Maneuver(str):
    def __new__(cls, moves: Union[str, List[Move], Tuple[Move, ...]], reduce: bool = False):
        """
        Create :class:`Maneuver` object.
        A :class:`Maneuver` is a subclass of :class:`str` that represents
        the sequence of moves that can be applied to a :class:`cube_engine.CubeState` object.
        Tokens are separated by spaces, an invalid token raises :class:`cube_engine.errors.InvalidMove`.
        """
        cls.moves: Tuple[Move, ...]

        if not isinstance(moves, (str, list, tuple)):
            raise TypeError(f"moves must be str, list or tuple, not {type(moves).__name__}")
        if not isinstance(reduce, bool):
            raise TypeError(f"reduce must be bool, not {type(reduce).__name__}")

        if isinstance(moves, str):
            moves = parse_moves(moves)
        else:
            for move in moves:
                if not isinstance(move, Move):
                    raise TypeError(f"moves list elements must be Move, not {type(move).__name__}")

        moves = [move for move in moves if move != Move.NONE]
        if reduce:
            moves = _reduce_moves(moves)
        obj = super().__new__(cls, " ".join(move.string for move in moves))
        obj.moves = tuple(moves)
        return obj

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    def __eq__(self, other: object) -> bool:
        """Two maneuvers are equal if they have the same effect on the cube."""
        if not isinstance(other, Maneuver):
            if not isinstance(other, (str, list, tuple)):
                return False
            try:
                other = Maneuver(other)
            except (InvalidMove, TypeError):
                return False
        return CubeState(self) == CubeState(other)

    __hash__ = None  # type: ignore

    def __len__(self) -> int:
        return len(self.moves)

    @overload
    def __getitem__(self, key: int) -> Move: ...
    @overload
    def __getitem__(self, key: slice) -> Maneuver: ...

    def __getitem__(self, key: Union[int, slice]) -> Union[Move, Maneuver]:  # type: ignore
        if not isinstance(key, (int, slice)):
            raise TypeError(f"Maneuver indices must be int or slice, not {type(key).__name__}")
        if isinstance(key, int):
            try:
                return self.moves[key]
            except IndexError:
                raise IndexError("Maneuver index out of range")
        return Maneuver([*self.moves[key]])

    def __iter__(self) -> Iterator[Move]:  # type: ignore
        for move in self.moves:
            yield move

    def __contains__(self, item: Union[str, Move]) -> bool:  # type: ignore
        if isinstance(item, str):
            item = Move.from_string(item)
        return item in self.moves

    def __neg__(self) -> Maneuver:
        return self.inverse

    def __add__(self, other: Union[str, List[Move]]) -> Maneuver:
        if not isinstance(other, Maneuver):
            other = Maneuver(other)
        return Maneuver([*self.moves] + [*other.moves])

    def __radd__(self, other: Union[str, List[Move]]) -> Maneuver:
        other = Maneuver(other)
        return other.__add__(self)

    def __mul__(self, other: Union[int, str, List[Move]]) -> Maneuver:  # type: ignore
        """Repetition with an ``int``, commutator ``A B A' B'`` with a maneuver."""
        if isinstance(other, int):
            return Maneuver([*self.moves] * other)
        if not isinstance(other, Maneuver):
            other = Maneuver(other)
        return self + other + self.inverse + other.inverse

    def __rmul__(self, other: Union[int, str, List[Move]]) -> Maneuver:  # type: ignore
        if isinstance(other, int):
            return Maneuver([*self.moves] * other)
        other = Maneuver(other)
        return other.__mul__(self)

    @property
    def inverse(self) -> Maneuver:
        """Inverse maneuver: reversed order, each move inverted."""
        return Maneuver([move.inverse for move in self.moves[::-1]])

    def reduced(self) -> Maneuver:
        """Equivalent maneuver with same face moves merged."""
        return Maneuver([*self.moves], reduce=True)

    @classmethod
    def random(cls, length: int = 25, rng: Union[random.Random, None] = None) -> Maneuver:
        """Generate a random maneuver with no two consecutive moves on the same face."""
        if not isinstance(length, int):
            raise TypeError(f"length must be int, not {type(length).__name__}")
        if length < 0:
            raise ValueError(f"length must be >= 0 (got {length})")
        choice = random.choice if rng is None else rng.choice

        moves = [Move.NONE]
        for i in range(length):
            moves.append(choice(NEXT_MOVES[moves[-1]]))
        return cls(moves[1:])


def scramble(length: Union[int, None] = None, rng: Union[random.Random, None] = None) -> Maneuver:
    """
    Generate a scramble.
    The default length is drawn uniformly from ``20`` to ``25`` moves.
    The scramble is not guaranteed to leave the cube unsolved.
    """
    if rng is not None and not isinstance(rng, random.Random):
        raise TypeError(f"rng must be Random or None, not {type(rng).__name__}")
    if length is None:
        length = (rng or random).randint(SCRAMBLE_MIN_LENGTH, SCRAMBLE_MAX_LENGTH)
    return Maneuver.random(length, rng)
