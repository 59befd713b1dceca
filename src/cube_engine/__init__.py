"""Top-level package for Cube Engine."""

__version__ = '1.0.0'

from .errors import CubeEngineError, InvalidMove, SolverExhausted, Unsolvable, Cancelled, OracleUnavailable
from .config import SolverConfig
from .cube import CubeState, Move, Maneuver, apply_move, apply_maneuver, is_solved, clone, scramble
from .events import EventBus, MoveApplied, PhaseChanged
from .solver import BaseSolver, TwoPhaseSolver, CancelToken, SolveResult, SolveStatus, Phase, in_g1, heuristic
from .oracle import ReferenceOracle, OracleStatus
from .session import CubeSession

__all__ = ["CubeEngineError", "InvalidMove", "SolverExhausted", "Unsolvable", "Cancelled", "OracleUnavailable",
           "SolverConfig", "CubeState", "Move", "Maneuver", "apply_move", "apply_maneuver", "is_solved", "clone",
           "scramble", "EventBus", "MoveApplied", "PhaseChanged", "BaseSolver", "TwoPhaseSolver", "CancelToken",
           "SolveResult", "SolveStatus", "Phase", "in_g1", "heuristic", "ReferenceOracle", "OracleStatus",
           "CubeSession"]
