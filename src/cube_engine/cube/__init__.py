from .enums import Face, Move
from .moves import MoveDefinition, MOVE_DEFINITIONS, move_definition
from .cube import CubeState, apply_move, apply_maneuver, is_solved, clone
from .maneuver import Maneuver, scramble

__all__ = ["Face", "Move", "MoveDefinition", "MOVE_DEFINITIONS", "move_definition",
           "CubeState", "apply_move", "apply_maneuver", "is_solved", "clone", "Maneuver", "scramble"]
