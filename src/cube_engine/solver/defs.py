"""Solver definitions."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..cube.enums import Move
from ..defs import Phase

NONE = -1

FlattenCoords = Tuple[int, ...]


PHASE1_MOVES: Tuple[Move, ...] = tuple(Move.moves())
PHASE2_MOVES: Tuple[Move, ...] = (
    Move.U1, Move.U2, Move.U3, Move.D1, Move.D2, Move.D3,
    Move.R2, Move.L2, Move.F2, Move.B2)

PHASE_MOVES = {Phase.PHASE1: PHASE1_MOVES, Phase.PHASE2: PHASE2_MOVES}


@dataclass(frozen=True)
class TransitionDef:
    """Transition table definition."""
    coord_name: str  #: :meta private:
    coord_size: int  #: :meta private:
    phase: Phase  #: :meta private:

    @property
    def name(self) -> str:
        """Transition table name."""
        return f"{self.coord_name}_{self.phase.value}"

    @property
    def moves(self) -> Tuple[Move, ...]:
        """Table columns."""
        return PHASE_MOVES[self.phase]


@dataclass(frozen=True)
class PruningDef:
    """Pruning table definition."""
    coord_names: Tuple[str, ...]  #: :meta private:
    phase: Phase  #: :meta private:

    @property
    def name(self) -> str:
        """Pruning table name."""
        return "_".join(self.coord_names) + f"_{self.phase.value}"

