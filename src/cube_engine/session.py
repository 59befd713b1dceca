"""
Cube session.

Holds the single live cube state of a puzzle. Moves never mutate the live state in place,
the session computes the next state and swaps the reference under a lock, so readers
always see a whole state.
"""
from __future__ import annotations

import random
import logging
import threading
from collections import deque
from typing import Deque, Iterator, List, Tuple, Union

from .cube import CubeState, Maneuver, Move, apply_move, scramble
from .cube.cube import MoveLike, ManeuverLike, SIZE, parse_moves
from .cube.moves import move_definition
from .events import EventBus, MoveApplied
from .solver import BaseSolver, CancelToken, SolveResult, TwoPhaseSolver

logger = logging.getLogger(__name__)


class CubeSession:
    def __init__(
            self,
            size: int = SIZE,
            solver: Union[BaseSolver, None] = None,
            events: Union[EventBus, None] = None):
        """
        Create :class:`CubeSession` object.

        Parameters
        ----------
        size : {3, 2}, optional
            Cube size, ``2`` for the corners only variant.
        solver : BaseSolver or None, optional
            Solver used by :meth:`solve`, a :class:`TwoPhaseSolver` sharing the session events if ``None``.
        events : EventBus or None, optional
            Channel of the ``MoveApplied`` events.
        """
        if solver is not None and not isinstance(solver, BaseSolver):
            raise TypeError(f"solver must be BaseSolver or None, not {type(solver).__name__}")
        self.events = events if events is not None else EventBus()
        self.solver = solver if solver is not None else TwoPhaseSolver(events=self.events)
        self._state = CubeState(size=size)
        self._lock = threading.Lock()
        self._solve_lock = threading.Lock()
        self._history: List[Move] = []
        self._solution: Deque[Move] = deque()
        self._generation = 0  #: bumped by every change of the live state
        self._paused = False

    @property
    def state(self) -> CubeState:
        """Copy of the live state."""
        with self._lock:
            return self._state.copy()

    @property
    def history(self) -> Maneuver:
        with self._lock:
            return Maneuver([*self._history])

    @property
    def move_count(self) -> int:
        with self._lock:
            return len(self._history)

    @property
    def is_solved(self) -> bool:
        with self._lock:
            return self._state.is_solved

    def _apply_locked(self, move: Move) -> CubeState:
        # caller holds self._lock
        self._state = apply_move(self._state, move)
        self._history.append(move)
        self._generation += 1
        return self._state.copy()

    def apply(self, move: MoveLike) -> CubeState:
        """Apply a move to the live state and return the new state."""
        move = move_definition(move).move
        with self._lock:
            state = self._apply_locked(move)
        self.events.emit(MoveApplied(move, state))
        return state

    def apply_maneuver(self, maneuver: ManeuverLike) -> CubeState:
        """Apply a sequence of moves, one event per move. Every token is parsed before the first move."""
        moves = parse_moves(maneuver)
        state = self.state
        for move in moves:
            state = self.apply(move)
        return state

    def reset(self, size: Union[int, None] = None):
        """Start a new puzzle: solved state, empty history and solution buffer."""
        with self._lock:
            self._state = CubeState(size=self._state.size if size is None else size)
            self._history.clear()
            self._solution.clear()
            self._generation += 1
        self._paused = False

    def scramble(self, length: Union[int, None] = None, rng: Union[random.Random, None] = None) -> Maneuver:
        """Start a new puzzle from a random scramble of the solved state."""
        if self._solve_lock.locked():
            raise RuntimeError("cannot scramble while a solve is running in this session")
        maneuver = scramble(length, rng)
        self.reset()
        self.apply_maneuver(maneuver)
        return maneuver

    def _begin_solve(self) -> Tuple[CubeState, int]:
        if not self._solve_lock.acquire(blocking=False):
            raise RuntimeError("a solve is already running in this session")
        with self._lock:
            return self._state.copy(), self._generation

    def _end_solve(self, result: SolveResult, generation: int):
        if not result.ok:
            logger.info("solve ended with status '%s': %s", result.status.value, result.message)
            return
        with self._lock:
            if self._generation != generation:
                logger.info("discarding solution, the cube changed while solving")
                return
            self._solution = deque(result.maneuver)

    def solve(self, cancel: Union[CancelToken, None] = None) -> SolveResult:
        """
        Solve a copy of the live state.
        The solution buffer is loaded on success, unless the live state changed during the solve.
        """
        state, generation = self._begin_solve()
        try:
            result = self.solver.solve(state, cancel)
            self._end_solve(result, generation)
            return result
        finally:
            self._solve_lock.release()

    async def solve_async(self, cancel: Union[CancelToken, None] = None) -> SolveResult:
        state, generation = self._begin_solve()
        try:
            result = await self.solver.solve_async(state, cancel)
            self._end_solve(result, generation)
            return result
        finally:
            self._solve_lock.release()

    def load_solution(self, maneuver: ManeuverLike):
        moves = parse_moves(maneuver)
        with self._lock:
            self._solution = deque(moves)

    @property
    def pending(self) -> Maneuver:
        """Moves of the solution buffer not applied yet."""
        with self._lock:
            return Maneuver([*self._solution])

    def advance(self) -> Union[Move, None]:
        """Apply the next solution move, ``None`` if paused or the buffer is empty."""
        if self._paused:
            return None
        with self._lock:
            if not self._solution:
                return None
            move = self._solution.popleft()
            state = self._apply_locked(move)
        self.events.emit(MoveApplied(move, state))
        return move

    def _has_pending(self) -> bool:
        with self._lock:
            return len(self._solution) > 0

    def play(self) -> Iterator[Union[Move, None]]:
        """Apply the solution buffer one move per step, yielding ``None`` while paused."""
        while self._has_pending():
            yield self.advance()

    def pause(self):
        self._paused = True

    def resume(self):
        self._paused = False

    @property
    def paused(self) -> bool:
        return self._paused
