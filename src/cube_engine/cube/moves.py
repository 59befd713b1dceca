"""
Move table.

Each move is described by the 4-cycle of corner slots and the 4-cycle of edge slots it affects.
Cycles are listed in piece flow order: the piece in ``cycle[i - 1]`` moves into ``cycle[i]``.
``*_orientation_change[i]`` is added to the orientation of the piece arriving at ``cycle[i]``.
Half turns keep the face cycle and use ``shift = 2``, the cycle composed with itself.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple, Union

from .defs import CORNER_MODULO, EDGE_MODULO, NUM_CYCLE_SLOTS
from .enums import Face, Move
from ..errors import InvalidMove


@dataclass(frozen=True)
class MoveDefinition:
    """Slot cycles and orientation deltas of a single move."""
    move: Move
    corner_cycle: Tuple[int, ...]
    corner_orientation_change: Tuple[int, ...]
    edge_cycle: Tuple[int, ...]
    edge_orientation_change: Tuple[int, ...]
    shift: int = 1

    @property
    def face(self) -> Face:
        return self.move.face


# clockwise quarter turns, everything else is derived from these
QUARTER_TURNS: Dict[Face, Tuple[Tuple[int, ...], Tuple[int, ...], Tuple[int, ...], Tuple[int, ...]]] = {
    Face.UP: ((0, 1, 2, 3), (0, 0, 0, 0), (0, 1, 2, 3), (0, 0, 0, 0)),
    Face.RIGHT: ((4, 0, 3, 7), (1, 2, 1, 2), (4, 0, 7, 8), (0, 0, 0, 0)),
    Face.FRONT: ((1, 0, 4, 5), (2, 1, 2, 1), (5, 1, 4, 9), (1, 1, 1, 1)),
    Face.DOWN: ((4, 7, 6, 5), (0, 0, 0, 0), (8, 11, 10, 9), (0, 0, 0, 0)),
    Face.LEFT: ((2, 1, 5, 6), (2, 1, 2, 1), (6, 2, 5, 10), (0, 0, 0, 0)),
    Face.BACK: ((3, 2, 6, 7), (2, 1, 2, 1), (7, 3, 6, 11), (1, 1, 1, 1)),
}


def _reverse(cycle: Tuple[int, ...], delta: Tuple[int, ...], modulo: int) -> Tuple[Tuple[int, ...], Tuple[int, ...]]:
    """Inverse of a cycle: reversed flow, the arriving piece undoes the delta it received."""
    n = len(cycle)
    reversed_cycle = tuple(cycle[n - 1 - k] for k in range(n))
    reversed_delta = tuple(-delta[(n - k) % n] % modulo for k in range(n))
    return reversed_cycle, reversed_delta


def _compose(delta: Tuple[int, ...], modulo: int) -> Tuple[int, ...]:
    """Orientation delta of a cycle applied twice."""
    n = len(delta)
    return tuple((delta[i - 1] + delta[i]) % modulo for i in range(n))


def _build_move_definitions() -> Dict[Move, MoveDefinition]:
    definitions = {}
    for face, (corner_cycle, corner_delta, edge_cycle, edge_delta) in QUARTER_TURNS.items():
        assert len(corner_cycle) == len(edge_cycle) == NUM_CYCLE_SLOTS
        quarter = Move[face.char + "1"]
        definitions[quarter] = MoveDefinition(quarter, corner_cycle, corner_delta, edge_cycle, edge_delta)

        half = Move[face.char + "2"]
        definitions[half] = MoveDefinition(
            half, corner_cycle, _compose(corner_delta, CORNER_MODULO),
            edge_cycle, _compose(edge_delta, EDGE_MODULO), shift=2)

        prime = Move[face.char + "3"]
        definitions[prime] = MoveDefinition(
            prime, *_reverse(corner_cycle, corner_delta, CORNER_MODULO), *_reverse(edge_cycle, edge_delta, EDGE_MODULO))
    return {move: definitions[move] for move in Move.moves()}


MOVE_DEFINITIONS = _build_move_definitions()


def move_definition(move: Union[Move, str]) -> MoveDefinition:
    """Get the definition of a move token or :class:`Move`."""
    if isinstance(move, str):
        move = Move.from_string(move)
    elif not isinstance(move, Move):
        raise InvalidMove(move)
    try:
        return MOVE_DEFINITIONS[move]
    except KeyError:
        raise InvalidMove(move.string or move.name)
