"""
Two-phase solver.

Phase 1 brings the cube into the G1 subgroup (every piece oriented and the middle slice
edges inside the middle slice), phase 2 solves it with the moves that keep it in G1.
The corners only variant runs the same phases on corner coordinates.
"""
from __future__ import annotations

import math
import numpy as np
from typing import Dict, List, Tuple, Union

from ..config import SolverConfig
from ..cube.cube import CubeState
from ..cube.defs import SLICE_SLOTS
from ..events import EventBus
from .defs import FlattenCoords, Phase, PHASE_MOVES
from .tables import COORDS, Tables, get_coord, get_tables
from .search import IDAStar, PruningLookup
from .solver import BaseSolver

PHASE_COORDS = {
    Phase.PHASE1: ("co", "eo", "slice"),
    Phase.PHASE2: ("cp", "udep", "sliceperm"),
}
PHASE_PRUNING = {
    Phase.PHASE1: [("co", "slice"), ("eo", "slice")],
    Phase.PHASE2: [("cp", "sliceperm"), ("udep", "sliceperm")],
}
CORNER_PHASE_COORDS = {
    Phase.PHASE1: ("co",),
    Phase.PHASE2: ("cp",),
}
CORNER_PHASE_PRUNING = {
    Phase.PHASE1: [("co",)],
    Phase.PHASE2: [("cp",)],
}


def in_g1(state: CubeState) -> bool:
    """Whether the state is in the G1 subgroup."""
    if not isinstance(state, CubeState):
        raise TypeError(f"state must be CubeState, not {type(state).__name__}")
    return (not np.any(state.corner_orientation) and not np.any(state.edge_orientation) and
            state.slice_edges_placed)


def simple_bound(state: CubeState, phase: Phase) -> int:
    """
    Counting lower bound of the distance to the phase goal.
    Every move touches four corners and four edges and at most two middle slice edges
    can enter the middle slice with one move.
    """
    if phase == Phase.PHASE1:
        twisted = np.count_nonzero(state.corner_orientation)
        flipped = np.count_nonzero(state.edge_orientation)
        misplaced_slice = 0
        if state.has_edges:
            misplaced_slice = len(SLICE_SLOTS) - np.count_nonzero(np.isin(state.edge_permutation[list(SLICE_SLOTS)], SLICE_SLOTS))
        return max(math.ceil(twisted / 4), math.ceil(flipped / 4), math.ceil(misplaced_slice / 2))
    if phase == Phase.PHASE2:
        misplaced_corners = np.count_nonzero(state.corner_permutation != np.arange(len(state.corner_permutation)))
        misplaced_edges = np.count_nonzero(state.edge_permutation != np.arange(len(state.edge_permutation)))
        flipped = np.count_nonzero(state.edge_orientation)
        return max(math.ceil(misplaced_corners / 4), math.ceil(misplaced_edges / 4), flipped)
    raise ValueError(f"phase must be PHASE1 or PHASE2 (got {phase!r})")


def _phase_coords(phase: Phase, has_edges: bool) -> Tuple[str, ...]:
    return (PHASE_COORDS if has_edges else CORNER_PHASE_COORDS)[phase]


def _phase_pruning(phase: Phase, has_edges: bool) -> List[Tuple[str, ...]]:
    return (PHASE_PRUNING if has_edges else CORNER_PHASE_PRUNING)[phase]


def heuristic(state: CubeState, phase: Phase, tables: Union[Tables, None] = None) -> int:
    """
    Admissible lower bound of the distance to the phase goal,
    the maximum of the counting bound and the pruning table distances.
    The phase 2 heuristic is only defined for G1 states.
    """
    if not isinstance(state, CubeState):
        raise TypeError(f"state must be CubeState, not {type(state).__name__}")
    if not isinstance(phase, Phase):
        raise TypeError(f"phase must be Phase, not {type(phase).__name__}")
    if phase == Phase.PHASE2 and not in_g1(state):
        raise ValueError("phase 2 heuristic requires a G1 state")
    bound = simple_bound(state, phase)
    if tables is None:
        tables = get_tables()
    for coord_names in _phase_pruning(phase, state.has_edges):
        coords = tuple(get_coord(state, name) for name in coord_names)
        shape = tuple(COORDS[name][0] for name in coord_names)
        index = np.ravel_multi_index(coords, shape)
        bound = max(bound, int(tables.pruning_table(coord_names, phase)[index]))
    return bound


class TwoPhaseSolver(BaseSolver):
    phases = (Phase.PHASE1, Phase.PHASE2)

    def __init__(self, config: Union[SolverConfig, None] = None, oracle=None,
                 events: Union[EventBus, None] = None, tables: Union[Tables, None] = None):
        """
        Create :class:`TwoPhaseSolver` object.

        Parameters
        ----------
        config : SolverConfig or None, optional
            Solver settings, ``SolverConfig()`` if ``None``.
        oracle : ReferenceOracle or None, optional
            Second opinion asked when the two-phase search fails.
        events : EventBus or None, optional
            Channel of the ``PhaseChanged`` events.
        tables : Tables or None, optional
            Transition and pruning tables, shared process tables if ``None``.
        """
        super().__init__(config, oracle, events)
        if tables is not None and not isinstance(tables, Tables):
            raise TypeError(f"tables must be Tables or None, not {type(tables).__name__}")
        self._tables = tables
        self._searches: Dict[Tuple[Phase, bool], IDAStar] = {}

    @property
    def tables(self) -> Tables:
        if self._tables is None:
            self._tables = get_tables(self.config.table_cache_dir)
        return self._tables

    def heuristic(self, state: CubeState, phase: Phase) -> int:
        return heuristic(state, phase, self.tables)

    def _get_search(self, phase: Phase, has_edges: bool) -> IDAStar:
        search = self._searches.get((phase, has_edges))
        if search is None:
            coord_names = _phase_coords(phase, has_edges)
            transitions = [self.tables.transition_table(name, phase).tolist() for name in coord_names]
            pruning = []
            for pruning_names in _phase_pruning(phase, has_edges):
                sizes = [COORDS[name][0] for name in pruning_names]
                strides = tuple(int(np.prod(sizes[i + 1:])) for i in range(len(sizes)))
                indexes = tuple(coord_names.index(name) for name in pruning_names)
                table = self.tables.pruning_table(pruning_names, phase).tolist()
                pruning.append(PruningLookup(indexes, strides, table))
            goal = tuple(self.tables.goal[name] for name in coord_names)
            search = IDAStar(phase, PHASE_MOVES[phase], transitions, pruning, goal,
                             self.config.max_threshold, self.config.yield_interval, self.config.transposition_limit)
            self._searches[(phase, has_edges)] = search
        return search

    def build_search(self, phase: Phase, state: CubeState) -> Tuple[IDAStar, FlattenCoords]:
        search = self._get_search(phase, state.has_edges)
        start = tuple(int(get_coord(state, name)) for name in _phase_coords(phase, state.has_edges))
        return search, start

    def phase_reached(self, phase: Phase, state: CubeState) -> bool:
        if phase == Phase.PHASE1:
            return in_g1(state)
        return state.is_solved
