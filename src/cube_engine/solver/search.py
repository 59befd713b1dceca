"""
Iterative-deepening A* search over phase coordinates.

The search is a generator: it yields a :class:`SearchProgress` every ``yield_interval``
node expansions so the caller can interleave other work or cancel, and it returns a
:class:`SearchOutcome` through ``StopIteration.value``.
"""
from __future__ import annotations

import math
import logging
from dataclasses import dataclass, field
from typing import Dict, Generator, List, Tuple, Union

from ..cube.enums import Move
from ..defs import MAX_THRESHOLD, YIELD_INTERVAL, TRANSPOSITION_LIMIT
from .defs import FlattenCoords, Phase

logger = logging.getLogger(__name__)

INF = math.inf


@dataclass(frozen=True)
class SearchProgress:
    phase: Phase
    threshold: int
    depth: int
    nodes: int


@dataclass
class SearchOutcome:
    phase: Phase
    moves: Union[List[Move], None]  #: ``None`` if the search was exhausted
    threshold: int
    nodes: int = 0

    @property
    def exhausted(self) -> bool:
        return self.moves is None


@dataclass
class PruningLookup:
    """Pruning table over a subset of the search coordinates."""
    indexes: Tuple[int, ...]  #: positions of the table coordinates in the search node
    strides: Tuple[int, ...]
    table: List[int] = field(repr=False)

    def __call__(self, node: FlattenCoords) -> int:
        index = 0
        for i, stride in zip(self.indexes, self.strides):
            index += node[i] * stride
        return self.table[index]


def successor_moves(moves: Tuple[Move, ...]) -> Dict[int, List[int]]:
    """
    Move columns to explore after each move column (``-1`` for the first move).
    Moves on the face of the previous move are never explored, they either undo it or
    merge with it, and of two moves on opposite faces only one order is explored.
    """
    successors = {-1: [*range(len(moves))]}
    for last, last_move in enumerate(moves):
        successors[last] = [
            col for col, move in enumerate(moves)
            if move.face != last_move.face and not (move.face == last_move.face.opposite and move.face < last_move.face)]
    return successors


class IDAStar:
    def __init__(
            self,
            phase: Phase,
            moves: Tuple[Move, ...],
            transitions: List[List[List[int]]],
            pruning: List[PruningLookup],
            goal: FlattenCoords,
            max_threshold: int = MAX_THRESHOLD,
            yield_interval: int = YIELD_INTERVAL,
            transposition_limit: int = TRANSPOSITION_LIMIT):
        """
        Create :class:`IDAStar` object.

        Parameters
        ----------
        phase : Phase
            Phase reported in progress and outcome objects.
        moves : tuple of Move
            Moves of the phase, in transition table column order.
        transitions : list
            One transition table per search coordinate, ``transitions[i][coord][col]``.
        pruning : list of PruningLookup
            Admissible lower bounds, the heuristic is their maximum.
        goal : tuple of int
            Goal coordinates.
        """
        if not isinstance(phase, Phase):
            raise TypeError(f"phase must be Phase, not {type(phase).__name__}")
        if len(transitions) != len(goal):
            raise ValueError(f"transitions length and goal length must be the same (got {len(transitions)} != {len(goal)})")
        self.phase = phase
        self.moves = moves
        self.transitions = transitions
        self.pruning = pruning
        self.goal = tuple(goal)
        self.max_threshold = max_threshold
        self.yield_interval = yield_interval
        self.transposition_limit = transposition_limit
        self.successors = successor_moves(moves)
        self.faces = [move.face for move in moves]

    def heuristic(self, node: FlattenCoords) -> int:
        """Admissible lower bound of the distance to the goal."""
        return max(lookup(node) for lookup in self.pruning)

    def next_node(self, node: FlattenCoords, col: int) -> FlattenCoords:
        return tuple(transition[coord][col] for transition, coord in zip(self.transitions, node))

    def search(self, start: FlattenCoords) -> Generator[SearchProgress, None, SearchOutcome]:
        """Search a shortest move sequence from ``start`` to the goal."""
        start = tuple(start)
        nodes = 0
        if start == self.goal:
            return SearchOutcome(self.phase, [], 0, nodes)

        threshold = self.heuristic(start)
        while threshold <= self.max_threshold:
            logger.debug("phase %d: threshold %d, %d nodes", self.phase, threshold, nodes)
            next_threshold = INF
            transposition = {(start, None): 0}
            stack = [(start, iter(self.successors[-1]))]
            path: List[int] = []
            while stack:
                node, cols = stack[-1]
                depth = len(path) + 1
                for col in cols:
                    child = self.next_node(node, col)
                    f = depth + self.heuristic(child)
                    if f > threshold:
                        next_threshold = min(next_threshold, f)
                        continue
                    if child == self.goal:
                        path.append(col)
                        logger.debug("phase %d: solved in %d moves, %d nodes", self.phase, len(path), nodes)
                        return SearchOutcome(self.phase, [self.moves[c] for c in path], threshold, nodes)
                    # successors depend on the face of the last move
                    key = (child, self.faces[col])
                    if transposition.get(key, INF) <= depth:
                        continue
                    if len(transposition) < self.transposition_limit:
                        transposition[key] = depth
                    stack.append((child, iter(self.successors[col])))
                    path.append(col)
                    nodes += 1
                    if nodes % self.yield_interval == 0:
                        yield SearchProgress(self.phase, threshold, depth, nodes)
                    break
                else:
                    stack.pop()
                    if path:
                        path.pop()
            if next_threshold == INF:
                break
            threshold = int(next_threshold)

        logger.debug("phase %d: exhausted at threshold %s, %d nodes", self.phase, threshold, nodes)
        return SearchOutcome(self.phase, None, threshold, nodes)
