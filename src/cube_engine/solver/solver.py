"""Solver module."""
from __future__ import annotations

import asyncio
import logging
import threading
from enum import Enum
from dataclasses import dataclass, field
from typing import Generator, List, Tuple, Union
from typing_extensions import TYPE_CHECKING

from ..config import SolverConfig
from ..cube import CubeState, Maneuver, Move, apply_maneuver
from ..errors import SolverExhausted, Unsolvable, Cancelled, OracleUnavailable
from ..events import EventBus, PhaseChanged
from .defs import FlattenCoords, Phase
from .search import IDAStar, SearchOutcome, SearchProgress

if TYPE_CHECKING:
    from ..oracle import ReferenceOracle

logger = logging.getLogger(__name__)


class SolveStatus(str, Enum):
    SOLVED = "solved"
    EXHAUSTED = "exhausted"
    UNSOLVABLE = "unsolvable"
    CANCELLED = "cancelled"
    ORACLE_UNAVAILABLE = "oracle_unavailable"


STATUS_ERRORS = {
    SolveStatus.EXHAUSTED: SolverExhausted,
    SolveStatus.UNSOLVABLE: Unsolvable,
    SolveStatus.CANCELLED: Cancelled,
    SolveStatus.ORACLE_UNAVAILABLE: OracleUnavailable,
}


@dataclass
class SolveResult:
    """Outcome of a solve, failures are values rather than exceptions."""
    status: SolveStatus
    maneuver: Maneuver = field(default_factory=lambda: Maneuver(""))
    message: str = ""
    phase_lengths: Tuple[int, ...] = ()
    nodes: int = 0
    source: str = "search"

    @property
    def ok(self) -> bool:
        return self.status == SolveStatus.SOLVED

    def raise_for_status(self) -> Maneuver:
        """Return the solution maneuver or raise the exception matching the status."""
        if self.status != SolveStatus.SOLVED:
            raise STATUS_ERRORS[self.status](self.message or self.status.value)
        return self.maneuver


class CancelToken:
    """Cooperative cancellation flag, checked by the solver at every yield point."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class BaseSolver:
    phases: Tuple[Phase, ...] = ()

    def __init__(
            self,
            config: Union[SolverConfig, None] = None,
            oracle: Union[ReferenceOracle, None] = None,
            events: Union[EventBus, None] = None):
        """Create :class:`BaseSolver` object."""
        if config is not None and not isinstance(config, SolverConfig):
            raise TypeError(f"config must be SolverConfig or None, not {type(config).__name__}")
        if events is not None and not isinstance(events, EventBus):
            raise TypeError(f"events must be EventBus or None, not {type(events).__name__}")
        self.config = config if config is not None else SolverConfig()
        self.oracle = oracle
        self.events = events if events is not None else EventBus()

    def build_search(self, phase: Phase, state: CubeState) -> Tuple[IDAStar, FlattenCoords]:
        """Search object of the phase and start coordinates of the state."""
        raise NotImplementedError

    def phase_reached(self, phase: Phase, state: CubeState) -> bool:
        """Whether the state satisfies the goal of the phase."""
        raise NotImplementedError

    def steps(
            self,
            state: CubeState,
            cancel: Union[CancelToken, None] = None) -> Generator[SearchProgress, None, SolveResult]:
        """
        Cooperative solve.
        Yields search progress at every yield point and returns the :class:`SolveResult`.
        The state is never modified.
        """
        result = yield from self._search(state, cancel)
        if self._can_fallback(state, result):
            result = self._fallback(state, result)
        return result

    def solve(self, state: CubeState, cancel: Union[CancelToken, None] = None) -> SolveResult:
        """Solve the cube, blocking until the search ends."""
        steps = self.steps(state, cancel)
        while True:
            try:
                next(steps)
            except StopIteration as stop:
                return stop.value

    async def solve_async(self, state: CubeState, cancel: Union[CancelToken, None] = None) -> SolveResult:
        """Solve the cube, giving control back to the event loop at every yield point."""
        search = self._search(state, cancel)
        while True:
            try:
                next(search)
            except StopIteration as stop:
                result = stop.value
                break
            await asyncio.sleep(0)
        if self._can_fallback(state, result):
            result = await self._fallback_async(state, result)
        return result

    def _search(
            self,
            state: CubeState,
            cancel: Union[CancelToken, None]) -> Generator[SearchProgress, None, SolveResult]:
        if not isinstance(state, CubeState):
            raise TypeError(f"state must be CubeState, not {type(state).__name__}")
        if cancel is not None and not isinstance(cancel, CancelToken):
            raise TypeError(f"cancel must be CancelToken or None, not {type(cancel).__name__}")

        if cancel is not None and cancel.cancelled:
            return SolveResult(SolveStatus.CANCELLED, message="cancelled before start")
        if state.is_solved:
            self.events.emit(PhaseChanged(Phase.DONE))
            return SolveResult(SolveStatus.SOLVED, Maneuver(""))
        if not state.is_reachable:
            logger.warning("state is not reachable from the solved state: %r", state)
            return SolveResult(SolveStatus.UNSOLVABLE, message="state violates the twist, flip or parity invariants")

        current = state.copy()
        moves: List[Move] = []
        phase_lengths = []
        nodes = 0
        for phase in self.phases:
            if cancel is not None and cancel.cancelled:
                return SolveResult(SolveStatus.CANCELLED, message=f"cancelled before phase {phase.value}", nodes=nodes)
            self.events.emit(PhaseChanged(phase))
            search, start = self.build_search(phase, current)
            outcome: SearchOutcome
            progress = search.search(start)
            while True:
                try:
                    step = next(progress)
                except StopIteration as stop:
                    outcome = stop.value
                    break
                if cancel is not None and cancel.cancelled:
                    progress.close()
                    logger.info("solve cancelled in phase %d", phase)
                    return SolveResult(SolveStatus.CANCELLED, message=f"cancelled in phase {phase.value}",
                                       nodes=nodes + step.nodes)
                yield step
            nodes += outcome.nodes

            if outcome.exhausted:
                return SolveResult(SolveStatus.EXHAUSTED, nodes=nodes, message=(
                    f"phase {phase.value} threshold exceeded {self.config.max_threshold}"))
            current.apply_maneuver(outcome.moves)
            if not self.phase_reached(phase, current):
                logger.error("phase %d search ended outside its goal: %r", phase, current)
                return SolveResult(SolveStatus.UNSOLVABLE, nodes=nodes, message=f"phase {phase.value} goal not reached")
            moves += outcome.moves
            phase_lengths.append(len(outcome.moves))

        result = self._verified(state, Maneuver(moves, reduce=True), "search")
        result.phase_lengths = tuple(phase_lengths)
        result.nodes = nodes
        return result

    def _verified(self, state: CubeState, maneuver: Maneuver, source: str) -> SolveResult:
        if not apply_maneuver(state, maneuver).is_solved:
            return self._unsolvable(state, f"{source} solution '{maneuver}' does not solve the cube")
        self.events.emit(PhaseChanged(Phase.DONE))
        logger.info("solved with %d moves (%s)", len(maneuver), source)
        return SolveResult(SolveStatus.SOLVED, maneuver, source=source)

    def _unsolvable(self, state: CubeState, message: str) -> SolveResult:
        logger.error("unsolvable reachable state %r: %s", state, message)
        return SolveResult(SolveStatus.UNSOLVABLE, message=message)

    def _can_fallback(self, state: CubeState, result: SolveResult) -> bool:
        return (result.status in (SolveStatus.EXHAUSTED, SolveStatus.UNSOLVABLE) and
                self.oracle is not None and self.config.use_oracle_fallback and state.is_reachable)

    def _fallback(self, state: CubeState, result: SolveResult) -> SolveResult:
        self.events.emit(PhaseChanged(Phase.FALLBACK))
        logger.warning("two-phase search failed (%s: %s), asking the reference oracle", result.status.value, result.message)
        try:
            maneuver = self.oracle.solve_now(state)
        except OracleUnavailable as e:
            return SolveResult(SolveStatus.ORACLE_UNAVAILABLE, message=str(e), nodes=result.nodes)
        except Unsolvable as e:
            return self._unsolvable(state, f"oracle failed: {e}")
        return self._verified(state, maneuver, "oracle")

    async def _fallback_async(self, state: CubeState, result: SolveResult) -> SolveResult:
        self.events.emit(PhaseChanged(Phase.FALLBACK))
        logger.warning("two-phase search failed (%s: %s), asking the reference oracle", result.status.value, result.message)
        try:
            maneuver = await self.oracle.solve(state)
        except OracleUnavailable as e:
            return SolveResult(SolveStatus.ORACLE_UNAVAILABLE, message=str(e), nodes=result.nodes)
        except Unsolvable as e:
            return self._unsolvable(state, f"oracle failed: {e}")
        return self._verified(state, maneuver, "oracle")
