from .defs import Phase, PHASE1_MOVES, PHASE2_MOVES
from .tables import Tables, get_tables
from .solver import BaseSolver, CancelToken, SolveResult, SolveStatus
from .two_phase import TwoPhaseSolver, in_g1, heuristic

__all__ = ["Phase", "PHASE1_MOVES", "PHASE2_MOVES", "Tables", "get_tables",
           "BaseSolver", "CancelToken", "SolveResult", "SolveStatus", "TwoPhaseSolver", "in_g1", "heuristic"]
