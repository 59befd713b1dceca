"""
Reference oracle adapter.

Wraps a third-party solver behind a small capability interface. The oracle is used as a
second opinion when the two-phase search fails and for differential testing.
States cross the boundary as named fields and solutions come back as move token strings.
"""
from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Callable, Dict, List, Union

from .config import SolverConfig
from .cube import CubeState, Maneuver
from .errors import InvalidMove, OracleUnavailable, Unsolvable

logger = logging.getLogger(__name__)

OracleFields = Dict[str, List[int]]
Backend = Callable[[OracleFields], str]
BackendLoader = Callable[[], Backend]


class OracleStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    UNAVAILABLE = "unavailable"


def to_oracle_fields(state: CubeState) -> OracleFields:
    """Named fields representation consumed by the oracle backend."""
    if not isinstance(state, CubeState):
        raise TypeError(f"state must be CubeState, not {type(state).__name__}")
    return state.to_dict()


def from_oracle_fields(fields: OracleFields) -> CubeState:
    return CubeState.from_dict(fields)


def parse_solution(answer: object) -> Maneuver:
    """Parse the space separated move tokens returned by the backend."""
    if not isinstance(answer, str):
        raise Unsolvable(f"oracle answer must be str, not {type(answer).__name__}")
    try:
        return Maneuver(answer.strip())
    except InvalidMove as e:
        raise Unsolvable(f"oracle answer is not a move sequence: {answer!r}") from e


def _kociemba_solve(fields: OracleFields) -> str:
    import kociemba

    state = from_oracle_fields(fields)
    if not state.has_edges:
        raise ValueError("kociemba solves 3x3 states only")
    return kociemba.solve(state.facelets())


def load_kociemba_backend() -> Backend:
    """Default backend: the ``kociemba`` package fed the facelet string of the state."""
    try:
        import kociemba  # noqa: F401
    except ImportError as e:
        raise OracleUnavailable("the kociemba package is not installed") from e
    return _kociemba_solve


class ReferenceOracle:
    def __init__(
            self,
            loader: BackendLoader = load_kociemba_backend,
            max_attempts: int = 5,
            base_delay: float = 0.1):
        """
        Create :class:`ReferenceOracle` object.

        Parameters
        ----------
        loader : callable, optional
            Returns the backend solve function, raises ``OracleUnavailable`` while the backend is not ready.
        max_attempts : int, optional
            Number of ``loader`` calls made by :meth:`initialize`.
        base_delay : float, optional
            Delay in seconds before the second attempt, doubled after each failed attempt.
        """
        if not callable(loader):
            raise TypeError(f"loader must be callable, not {type(loader).__name__}")
        if not isinstance(max_attempts, int):
            raise TypeError(f"max_attempts must be int, not {type(max_attempts).__name__}")
        if max_attempts <= 0:
            raise ValueError(f"max_attempts must be positive (got {max_attempts})")
        self.status = OracleStatus.UNINITIALIZED
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self._loader = loader
        self._backend: Union[Backend, None] = None

    @classmethod
    def from_config(cls, config: SolverConfig, loader: BackendLoader = load_kociemba_backend) -> ReferenceOracle:
        return cls(loader, config.oracle_max_attempts, config.oracle_base_delay)

    @property
    def ready(self) -> bool:
        return self.status == OracleStatus.READY

    def retry_delay(self, attempt: int) -> float:
        """Exponential backoff delay after the failed ``attempt`` (1-indexed)."""
        if attempt < 1:
            raise ValueError(f"attempt must be >= 1 (got {attempt})")
        return self.base_delay * (2 ** (attempt - 1))

    async def initialize(self) -> OracleStatus:
        """Load the backend, retrying with exponential backoff."""
        if self.ready:
            return self.status
        for attempt in range(1, self.max_attempts + 1):
            try:
                self._backend = self._loader()
            except OracleUnavailable as e:
                if attempt == self.max_attempts:
                    logger.warning("oracle unavailable after %d attempts: %s", attempt, e)
                    break
                delay = self.retry_delay(attempt)
                logger.warning("oracle not ready (attempt %d/%d), retrying in %.2fs: %s",
                               attempt, self.max_attempts, delay, e)
                await asyncio.sleep(delay)
            else:
                self.status = OracleStatus.READY
                logger.info("oracle ready after %d attempts", attempt)
                return self.status
        self.status = OracleStatus.UNAVAILABLE
        return self.status

    def solve_now(self, state: CubeState) -> Maneuver:
        """
        Solve the state with the backend, blocking.
        Raises ``OracleUnavailable`` if the oracle is not ready and ``Unsolvable`` if the backend fails.
        """
        if not self.ready:
            raise OracleUnavailable(f"oracle is {self.status.value}")
        fields = to_oracle_fields(state)
        try:
            answer = self._backend(fields)
        except ValueError as e:
            raise Unsolvable(f"oracle rejected the state: {e}") from e
        except Exception as e:
            logger.exception("oracle backend failed")
            raise Unsolvable(f"oracle backend failed: {e!r}") from e
        return parse_solution(answer)

    async def solve(self, state: CubeState) -> Maneuver:
        """Solve the state with the backend in a worker thread."""
        if not self.ready:
            raise OracleUnavailable(f"oracle is {self.status.value}")
        return await asyncio.to_thread(self.solve_now, state)
