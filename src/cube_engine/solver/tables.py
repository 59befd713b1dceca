"""
Transition and pruning tables.

Coordinates are integer ranks of projections of the cube state.
Transition tables map ``(coord, move)`` to the coordinate after the move and are built
by moving a batch holding one representative state per coordinate value through
:func:`cube_engine.cube.cube.cycle_slots`, the same primitive the move engine uses.
Pruning tables hold the exact distance to the goal of products of coordinates.
"""
from __future__ import annotations

import os
import logging
import numpy as np
from functools import lru_cache
from typing import Callable, Dict, List, Tuple, Union

from ..cube.cube import CubeState, cycle_slots
from ..cube.defs import NUM_CORNERS, NUM_EDGES, CORNER_MODULO, EDGE_MODULO, SLICE_SLOTS, UD_EDGE_SLOTS
from ..cube.defs import CORNER_ORIENTATION_SIZE, EDGE_ORIENTATION_SIZE, CORNER_PERMUTATION_SIZE
from ..cube.defs import SLICE_COMBINATION_SIZE, UD_EDGE_PERMUTATION_SIZE, SLICE_PERMUTATION_SIZE
from ..cube.moves import move_definition
from ..cube import utils
from .defs import NONE, Phase, TransitionDef, PruningDef

logger = logging.getLogger(__name__)

Arrays = Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]

SLICE_PIECES = np.array(SLICE_SLOTS)
UD_EDGE_PIECES = np.array(UD_EDGE_SLOTS)
UD_PIECE_INDEX = np.full(NUM_EDGES, NONE, dtype=int)
UD_PIECE_INDEX[UD_EDGE_PIECES] = np.arange(len(UD_EDGE_PIECES))

TABLES_FILE = "tables.npz"


def _corner_orientation(cp, co, ep, eo):
    return utils.get_orientation_coord(co, CORNER_MODULO)


def _edge_orientation(cp, co, ep, eo):
    return utils.get_orientation_coord(eo, EDGE_MODULO)


def _slice_combination(cp, co, ep, eo):
    is_slice = np.isin(ep, SLICE_PIECES)
    rows, slots = np.nonzero(np.atleast_2d(is_slice))
    coord = utils.get_combination_coord(slots.reshape(-1, len(SLICE_SLOTS)))
    return coord if ep.ndim == 2 else coord[0].item()


def _corner_permutation(cp, co, ep, eo):
    return utils.get_permutation_coord(cp)


def _ud_edge_permutation(cp, co, ep, eo):
    ud = UD_PIECE_INDEX[ep[..., UD_EDGE_SLOTS]]
    if np.any(ud == NONE):
        raise ValueError("ud edge permutation coordinate requires middle slice edges in the middle slice")
    return utils.get_permutation_coord(ud)


def _slice_permutation(cp, co, ep, eo):
    sliced = ep[..., SLICE_SLOTS] - SLICE_PIECES[0]
    if np.any((sliced < 0) | (sliced >= len(SLICE_SLOTS))):
        raise ValueError("slice permutation coordinate requires middle slice edges in the middle slice")
    return utils.get_permutation_coord(sliced)


COORDS: Dict[str, Tuple[int, Callable[..., Union[int, np.ndarray]], bool]] = {
    # name: (size, coordinate function, uses edges)
    "co": (CORNER_ORIENTATION_SIZE, _corner_orientation, False),
    "eo": (EDGE_ORIENTATION_SIZE, _edge_orientation, True),
    "slice": (SLICE_COMBINATION_SIZE, _slice_combination, True),
    "cp": (CORNER_PERMUTATION_SIZE, _corner_permutation, False),
    "udep": (UD_EDGE_PERMUTATION_SIZE, _ud_edge_permutation, True),
    "sliceperm": (SLICE_PERMUTATION_SIZE, _slice_permutation, True),
}

TRANSITION_DEFS = [
    TransitionDef("co", CORNER_ORIENTATION_SIZE, Phase.PHASE1),
    TransitionDef("eo", EDGE_ORIENTATION_SIZE, Phase.PHASE1),
    TransitionDef("slice", SLICE_COMBINATION_SIZE, Phase.PHASE1),
    TransitionDef("cp", CORNER_PERMUTATION_SIZE, Phase.PHASE2),
    TransitionDef("udep", UD_EDGE_PERMUTATION_SIZE, Phase.PHASE2),
    TransitionDef("sliceperm", SLICE_PERMUTATION_SIZE, Phase.PHASE2),
]

PRUNING_DEFS = [
    PruningDef(("co", "slice"), Phase.PHASE1),
    PruningDef(("eo", "slice"), Phase.PHASE1),
    PruningDef(("cp", "sliceperm"), Phase.PHASE2),
    PruningDef(("udep", "sliceperm"), Phase.PHASE2),
    # corners only variant
    PruningDef(("co",), Phase.PHASE1),
    PruningDef(("cp",), Phase.PHASE2),
]


def get_coord(state: CubeState, coord_name: str) -> int:
    """Get a coordinate of the cube state."""
    if not isinstance(state, CubeState):
        raise TypeError(f"state must be CubeState, not {type(state).__name__}")
    if coord_name not in COORDS:
        raise ValueError(f"coord_name must be one of {', '.join(COORDS)} (got '{coord_name}')")
    _, coord_func, uses_edges = COORDS[coord_name]
    if uses_edges and not state.has_edges:
        raise ValueError(f"coordinate '{coord_name}' requires edges (got size {state.size} state)")
    return coord_func(state.corner_permutation, state.corner_orientation, state.edge_permutation, state.edge_orientation)


def _representatives(coord_name: str) -> Arrays:
    """One state per coordinate value, row index equals coordinate value."""
    size = COORDS[coord_name][0]
    cp = np.tile(np.arange(NUM_CORNERS), (size, 1))
    co = np.zeros((size, NUM_CORNERS), dtype=int)
    ep = np.tile(np.arange(NUM_EDGES), (size, 1))
    eo = np.zeros((size, NUM_EDGES), dtype=int)

    if coord_name == "co":
        co = utils.get_orientation_array(np.arange(size), CORNER_MODULO, NUM_CORNERS)
    elif coord_name == "eo":
        eo = utils.get_orientation_array(np.arange(size), EDGE_MODULO, NUM_EDGES)
    elif coord_name == "slice":
        combinations = utils.all_combinations(NUM_EDGES, len(SLICE_SLOTS))
        order = np.argsort(utils.get_combination_coord(combinations))
        others = [piece for piece in range(NUM_EDGES) if piece not in SLICE_PIECES]
        for row, combination in enumerate(combinations[order]):
            ep[row, combination] = SLICE_PIECES
            ep[row, np.setdiff1d(np.arange(NUM_EDGES), combination)] = others
    elif coord_name == "cp":
        cp = utils.all_permutations(NUM_CORNERS)
    elif coord_name == "udep":
        ep[:, UD_EDGE_SLOTS] = UD_EDGE_PIECES[utils.all_permutations(len(UD_EDGE_SLOTS))]
    elif coord_name == "sliceperm":
        ep[:, SLICE_SLOTS] = SLICE_PIECES[utils.all_permutations(len(SLICE_SLOTS))]
    return cp, co, ep, eo


def build_transition_table(transition_def: TransitionDef) -> np.ndarray:
    """Build the ``(coord_size, num_moves)`` transition table of a coordinate."""
    cp, co, ep, eo = _representatives(transition_def.coord_name)
    coord_func = COORDS[transition_def.coord_name][1]
    if not np.array_equal(coord_func(cp, co, ep, eo), np.arange(transition_def.coord_size)):
        raise RuntimeError(f"representatives of '{transition_def.coord_name}' are not in coordinate order")

    table = np.zeros((transition_def.coord_size, len(transition_def.moves)), dtype=np.int32)
    for col, move in enumerate(transition_def.moves):
        definition = move_definition(move)
        new_cp, new_co = cycle_slots(cp, co, definition.corner_cycle, definition.shift,
                                     definition.corner_orientation_change, CORNER_MODULO)
        new_ep, new_eo = cycle_slots(ep, eo, definition.edge_cycle, definition.shift,
                                     definition.edge_orientation_change, EDGE_MODULO)
        table[:, col] = coord_func(new_cp, new_co, new_ep, new_eo)
    return table


def build_pruning_table(transitions: List[np.ndarray], goal: Tuple[int, ...]) -> np.ndarray:
    """
    Build a pruning table with a breadth-first search from the goal.
    The table is flattened, entries hold the distance to the goal (``-1`` if unreachable).
    """
    shape = tuple(len(transition) for transition in transitions)
    num_moves = transitions[0].shape[1]
    table = np.full(int(np.prod(shape)), NONE, dtype=np.int8)
    frontier = np.array([np.ravel_multi_index(goal, shape)])
    table[frontier] = 0
    depth = 0
    while len(frontier):
        coords = np.unravel_index(frontier, shape)
        found = []
        for col in range(num_moves):
            index = np.ravel_multi_index(tuple(transition[coord, col] for transition, coord in zip(transitions, coords)), shape)
            index = index[table[index] == NONE]
            table[index] = depth + 1
            found.append(index)
        frontier = np.unique(np.concatenate(found))
        depth += 1
        logger.debug("pruning table %s: depth %d, %d new entries", shape, depth, len(frontier))
    return table


class Tables:
    """Transition and pruning tables of the two-phase solver."""

    def __init__(self, transition: Dict[str, np.ndarray], pruning: Dict[str, np.ndarray]):
        self.transition = transition
        self.pruning = pruning
        solved = CubeState()
        self.goal = {name: get_coord(solved, name) for name in COORDS}

    @classmethod
    def build(cls) -> Tables:
        """Build all the tables."""
        transition = {}
        for transition_def in TRANSITION_DEFS:
            logger.debug("building transition table '%s'", transition_def.name)
            transition[transition_def.name] = build_transition_table(transition_def)

        solved = CubeState()
        pruning = {}
        for pruning_def in PRUNING_DEFS:
            logger.debug("building pruning table '%s'", pruning_def.name)
            transitions = [transition[f"{name}_{pruning_def.phase.value}"] for name in pruning_def.coord_names]
            goal = tuple(get_coord(solved, name) for name in pruning_def.coord_names)
            pruning[pruning_def.name] = build_pruning_table(transitions, goal)
        return cls(transition, pruning)

    @classmethod
    def load(cls, cache_dir: Union[str, None] = None) -> Tables:
        """Load the tables from ``cache_dir``, building and saving them if the file is missing."""
        if cache_dir is None:
            return cls.build()
        path = os.path.join(cache_dir, TABLES_FILE)
        if os.path.exists(path):
            with np.load(path) as data:
                transition = {d.name: data[f"transition_{d.name}"] for d in TRANSITION_DEFS}
                pruning = {d.name: data[f"pruning_{d.name}"] for d in PRUNING_DEFS}
            logger.debug("loaded tables from %s", path)
            return cls(transition, pruning)
        tables = cls.build()
        tables.save(cache_dir)
        return tables

    def save(self, cache_dir: str):
        os.makedirs(cache_dir, exist_ok=True)
        arrays = {f"transition_{name}": table for name, table in self.transition.items()}
        arrays.update({f"pruning_{name}": table for name, table in self.pruning.items()})
        np.savez_compressed(os.path.join(cache_dir, TABLES_FILE), **arrays)
        logger.debug("saved tables to %s", cache_dir)

    def transition_table(self, coord_name: str, phase: Phase) -> np.ndarray:
        return self.transition[f"{coord_name}_{phase.value}"]

    def pruning_table(self, coord_names: Tuple[str, ...], phase: Phase) -> np.ndarray:
        return self.pruning["_".join(coord_names) + f"_{phase.value}"]


@lru_cache(maxsize=None)
def get_tables(cache_dir: Union[str, None] = None) -> Tables:
    """Tables shared by every solver of the process."""
    return Tables.load(cache_dir)
