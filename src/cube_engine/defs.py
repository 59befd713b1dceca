"""Package definitions."""
from enum import IntEnum
from typing import Union, Tuple

NONE = -1

CoordType = Union[int, Tuple[int, ...]]
CoordsType = Tuple[int, ...]

MAX_THRESHOLD = 30  #: IDA* threshold ceiling per phase
YIELD_INTERVAL = 64  #: node expansions between cooperative yield points
TRANSPOSITION_LIMIT = 1_000_000  #: max transposition table entries per iteration

SCRAMBLE_MIN_LENGTH = 20
SCRAMBLE_MAX_LENGTH = 25


class Phase(IntEnum):
    PHASE1 = 1  #: reach the G1 subgroup
    PHASE2 = 2  #: reach the solved state with G1 moves
    FALLBACK = 3  #: reference oracle
    DONE = 4
