"""Cube enums."""
from __future__ import annotations

from enum import IntEnum
from typing import Iterator

from .defs import NONE
from ..errors import InvalidMove

MODIFIERS = {1: "", 2: "2", 3: "'"}


class Face(IntEnum):
    NONE = NONE
    UP = 0
    RIGHT = 1
    FRONT = 2
    DOWN = 3
    LEFT = 4
    BACK = 5

    @property
    def char(self) -> str:
        """Face letter."""
        return self.name[0] if self != Face.NONE else "N"

    @property
    def opposite(self) -> Face:
        """Opposite face."""
        if self == Face.NONE:
            return Face.NONE
        return Face((self + 3) % 6)


class Move(IntEnum):
    NONE = NONE
    U1 = 0
    U2 = 1
    U3 = 2
    R1 = 3
    R2 = 4
    R3 = 5
    F1 = 6
    F2 = 7
    F3 = 8
    D1 = 9
    D2 = 10
    D3 = 11
    L1 = 12
    L2 = 13
    L3 = 14
    B1 = 15
    B2 = 16
    B3 = 17

    @property
    def face(self) -> Face:
        """Turned face."""
        if self == Move.NONE:
            return Face.NONE
        return Face(self // 3)

    @property
    def shift(self) -> int:
        """Number of clockwise quarter turns (``1``, ``2`` or ``3``)."""
        if self == Move.NONE:
            return 0
        return self % 3 + 1

    @property
    def is_half_turn(self) -> bool:
        return self.shift == 2

    @property
    def string(self) -> str:
        """Move token, e.g. ``R``, ``R2`` or ``R'``."""
        if self == Move.NONE:
            return ""
        return self.face.char + MODIFIERS[self.shift]

    @property
    def inverse(self) -> Move:
        """Inverse move."""
        if self == Move.NONE:
            return Move.NONE
        return Move[self.face.char + str(-self.shift % 4)]

    @classmethod
    def moves(cls) -> Iterator[Move]:
        """Iterate over the 18 face moves."""
        for move in cls:
            if move != Move.NONE:
                yield move

    @classmethod
    def from_string(cls, string: str) -> Move:
        """
        Parse a move token.
        Raises :class:`cube_engine.errors.InvalidMove` if the token is not one of the 18 face moves.
        """
        if not isinstance(string, str):
            raise InvalidMove(string)
        if len(string) in (1, 2) and string[0] in "URFDLB":
            modifier = string[1:]
            for shift, mod in MODIFIERS.items():
                if modifier == mod:
                    return Move[string[0] + str(shift)]
        raise InvalidMove(string)
