"""Cube module."""
from __future__ import annotations

import warnings
import numpy as np
from copy import deepcopy
from typing import Union, Sequence, List, Tuple, Dict

from .defs import NUM_CORNERS, NUM_EDGES, CORNER_MODULO, EDGE_MODULO, SLICE_SLOTS
from .defs import CORNER_NAMES, EDGE_NAMES, CORNER_FACELETS, EDGE_FACELETS, CENTER_FACELETS, NUM_FACELETS
from .enums import Face, Move
from .moves import MoveDefinition, move_definition
from . import utils

SIZE = 3
SIZES = (2, 3)
REPR_ORDER = [Face.UP, Face.RIGHT, Face.FRONT, Face.DOWN, Face.LEFT, Face.BACK]
NET_ORDER = [Face.LEFT, Face.FRONT, Face.RIGHT, Face.BACK]

MoveLike = Union[Move, str]
ManeuverLike = Union[str, Sequence[MoveLike]]


def cycle_slots(
        permutation: np.ndarray,
        orientation: np.ndarray,
        cycle: Sequence[int],
        shift: int,
        delta: Sequence[int],
        modulo: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Move the pieces along a slot cycle.
    Works on a single state of shape ``(n,)`` or a batch of states of shape ``(m, n)``.

    The pieces and orientations of the cycle slots are read from the pre-move arrays first,
    then every ``cycle[i]`` receives the piece of its cyclic predecessor ``cycle[i - shift]``
    with orientation ``(predecessor orientation + delta[i]) % modulo``.
    Slots outside the cycle are copied through unchanged.
    """
    cycle = np.asarray(cycle, dtype=int)
    sources = np.roll(cycle, shift)
    arriving = permutation[..., sources]
    arriving_orientation = orientation[..., sources]

    permutation = permutation.copy()
    orientation = orientation.copy()
    permutation[..., cycle] = arriving
    orientation[..., cycle] = (arriving_orientation + np.asarray(delta, dtype=int)) % modulo
    return permutation, orientation


def parse_moves(maneuver: ManeuverLike) -> List[Move]:
    """Parse a maneuver into a list of moves, raising ``InvalidMove`` on the first bad token."""
    if isinstance(maneuver, str):
        # get moves from attr `moves` if maneuver is an instance of the `Maneuver` str subclass
        moves = getattr(maneuver, "moves", None)
        if moves is not None:
            return [*moves]
        return [Move.from_string(move_str) for move_str in maneuver.split()]
    if not isinstance(maneuver, (list, tuple)):
        raise TypeError(f"maneuver must be str, list or tuple, not {type(maneuver).__name__}")
    return [move_definition(move).move for move in maneuver]


class CubeState:
    def __init__(self, scramble: Union[ManeuverLike, None] = None, size: int = SIZE):
        """
        Create :class:`CubeState` object.
        The state starts solved and the optional ``scramble`` maneuver is applied to it.
        ``size=2`` creates the corners-only variant with empty edge arrays.
        """
        if not isinstance(size, int):
            raise TypeError(f"size must be int, not {type(size).__name__}")
        if size not in SIZES:
            raise ValueError(f"size must be one of {SIZES} (got {size})")

        self.corner_permutation: np.ndarray
        """Corner permutation array, ``corner_permutation[slot]`` is the corner piece in that slot."""
        self.corner_orientation: np.ndarray
        """Corner orientation array, values modulo ``3``."""
        self.edge_permutation: np.ndarray
        """Edge permutation array, empty for the ``2x2`` variant."""
        self.edge_orientation: np.ndarray
        """Edge orientation array, values modulo ``2``, empty for the ``2x2`` variant."""
        self.reset(size)
        if scramble is not None:
            self.apply_maneuver(scramble)

    @classmethod
    def solved(cls, size: int = SIZE) -> CubeState:
        """Solved state."""
        return cls(size=size)

    @classmethod
    def from_arrays(
            cls,
            corner_permutation: Sequence[int],
            corner_orientation: Sequence[int],
            edge_permutation: Sequence[int] = (),
            edge_orientation: Sequence[int] = ()) -> CubeState:
        """
        Create a state from explicit arrays.
        Raises ``ValueError`` for malformed arrays and warns for well-formed but unreachable states.
        """
        arrays = [np.array(array, dtype=int).ravel() for array in
                  (corner_permutation, corner_orientation, edge_permutation, edge_orientation)]
        cp, co, ep, eo = arrays
        if len(cp) != NUM_CORNERS or len(co) != NUM_CORNERS:
            raise ValueError(f"corner arrays length must be {NUM_CORNERS} (got {len(cp)} and {len(co)})")
        if len(ep) != len(eo) or len(ep) not in (0, NUM_EDGES):
            raise ValueError(f"edge arrays length must be 0 or {NUM_EDGES} (got {len(ep)} and {len(eo)})")
        if not np.array_equal(np.sort(cp), np.arange(NUM_CORNERS)):
            raise ValueError(f"invalid corner permutation (got {cp.tolist()})")
        if len(ep) and not np.array_equal(np.sort(ep), np.arange(NUM_EDGES)):
            raise ValueError(f"invalid edge permutation (got {ep.tolist()})")
        if np.any((co < 0) | (co >= CORNER_MODULO)):
            raise ValueError(f"corner orientation values must be >= 0 and < {CORNER_MODULO} (got {co.tolist()})")
        if np.any((eo < 0) | (eo >= EDGE_MODULO)):
            raise ValueError(f"edge orientation values must be >= 0 and < {EDGE_MODULO} (got {eo.tolist()})")

        state = cls(size=SIZE if len(ep) else 2)
        state._publish(cp, co, ep, eo)
        if np.sum(co) % CORNER_MODULO != 0:
            warnings.warn("invalid corner orientation")
        if np.sum(eo) % EDGE_MODULO != 0:
            warnings.warn("invalid edge orientation")
        if len(ep) and utils.get_permutation_parity(cp) != utils.get_permutation_parity(ep):
            warnings.warn("invalid cube parity")
        return state

    @classmethod
    def from_dict(cls, fields: Dict[str, Sequence[int]]) -> CubeState:
        """Create a state from its named fields representation."""
        if not isinstance(fields, dict):
            raise TypeError(f"fields must be dict, not {type(fields).__name__}")
        return cls.from_arrays(
            fields["corner_permutation"], fields["corner_orientation"],
            fields.get("edge_permutation", ()), fields.get("edge_orientation", ()))

    def to_dict(self) -> Dict[str, List[int]]:
        """Named fields representation."""
        return {
            "corner_permutation": self.corner_permutation.tolist(),
            "corner_orientation": self.corner_orientation.tolist(),
            "edge_permutation": self.edge_permutation.tolist(),
            "edge_orientation": self.edge_orientation.tolist()
        }

    @property
    def size(self) -> int:
        return SIZE if self.has_edges else 2

    @property
    def has_edges(self) -> bool:
        return len(self.edge_permutation) > 0

    @property
    def is_solved(self) -> bool:
        return (np.array_equal(self.corner_permutation, np.arange(len(self.corner_permutation))) and
                np.array_equal(self.edge_permutation, np.arange(len(self.edge_permutation))) and
                not np.any(self.corner_orientation) and not np.any(self.edge_orientation))

    @property
    def is_reachable(self) -> bool:
        """Whether the state satisfies the twist, flip and parity invariants of legal states."""
        if np.sum(self.corner_orientation) % CORNER_MODULO != 0:
            return False
        if not self.has_edges:
            return True
        if np.sum(self.edge_orientation) % EDGE_MODULO != 0:
            return False
        return utils.get_permutation_parity(self.corner_permutation) == utils.get_permutation_parity(self.edge_permutation)

    @property
    def slice_edges_placed(self) -> bool:
        """Whether the four middle slice edges occupy middle slice slots."""
        if not self.has_edges:
            return True
        return bool(np.all(np.isin(self.edge_permutation[list(SLICE_SLOTS)], SLICE_SLOTS)))

    def key(self) -> bytes:
        """Canonical fixed-width key, one byte per array entry."""
        return np.concatenate([
            self.corner_permutation, self.corner_orientation,
            self.edge_permutation, self.edge_orientation]).astype(np.uint8).tobytes()

    def __ne__(self, other: object) -> bool:
        """Negation of equality comparison."""
        return not self.__eq__(other)

    def __eq__(self, other: object) -> bool:
        """Equality comparison."""
        if not isinstance(other, CubeState):
            return False
        return self.key() == other.key()

    __hash__ = None  # mutable

    def facelets(self) -> str:
        """
        Facelet string of the ``3x3`` state.
        ``54`` face letters in ``URFDLB`` face order, each face read row by row.
        """
        if not self.has_edges:
            raise ValueError("facelet representation requires edges (got size 2 state)")
        facelets = [""] * NUM_FACELETS
        for face, index in zip(REPR_ORDER, CENTER_FACELETS):
            facelets[index] = face.char
        for slot, (piece, orientation) in enumerate(zip(self.corner_permutation, self.corner_orientation)):
            for n in range(CORNER_MODULO):
                facelets[CORNER_FACELETS[slot][(n + orientation) % CORNER_MODULO]] = CORNER_NAMES[piece][n]
        for slot, (piece, orientation) in enumerate(zip(self.edge_permutation, self.edge_orientation)):
            for n in range(EDGE_MODULO):
                facelets[EDGE_FACELETS[slot][(n + orientation) % EDGE_MODULO]] = EDGE_NAMES[piece][n]
        return "".join(facelets)

    def __repr__(self) -> str:
        """String representation of the :class:`CubeState` object."""
        if self.has_edges:
            return self.facelets()
        return (f"CubeState(corner_permutation={self.corner_permutation.tolist()}, "
                f"corner_orientation={self.corner_orientation.tolist()})")

    def __str__(self) -> str:
        """Print representation of the :class:`CubeState` object (a cube net)."""
        if not self.has_edges:
            return self.__repr__()
        repr = self.facelets()
        faces = {face: repr[i * SIZE * SIZE:(i + 1) * SIZE * SIZE] for i, face in enumerate(REPR_ORDER)}

        indent = "  " * SIZE + "  "
        str = indent + "--" * SIZE + "---\n"
        for i in range(SIZE):
            str += indent + "| " + " ".join(faces[Face.UP][i * SIZE:(i + 1) * SIZE]) + " |\n"
        str += "--------" * SIZE + "---------\n"
        for i in range(SIZE):
            str += "| " + " | ".join(" ".join(faces[face][i * SIZE:(i + 1) * SIZE]) for face in NET_ORDER) + " |\n"
        str += "--------" * SIZE + "---------\n"
        for i in range(SIZE):
            str += indent + "| " + " ".join(faces[Face.DOWN][i * SIZE:(i + 1) * SIZE]) + " |\n"
        str += indent + "--" * SIZE + "---"
        return str

    def reset(self, size: Union[int, None] = None):
        """Reset the cube to the solved state."""
        if size is None:
            size = self.size
        num_edges = NUM_EDGES if size == SIZE else 0
        self.corner_permutation = np.arange(NUM_CORNERS, dtype=int)
        self.corner_orientation = np.zeros(NUM_CORNERS, dtype=int)
        self.edge_permutation = np.arange(num_edges, dtype=int)
        self.edge_orientation = np.zeros(num_edges, dtype=int)

    def _publish(self, cp: np.ndarray, co: np.ndarray, ep: np.ndarray, eo: np.ndarray):
        self.corner_permutation, self.corner_orientation, self.edge_permutation, self.edge_orientation = cp, co, ep, eo

    def _arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        return self.corner_permutation, self.corner_orientation, self.edge_permutation, self.edge_orientation

    def apply_move(self, move: MoveLike):
        """Apply a move to the cube."""
        self._publish(*_transform(self._arrays(), move_definition(move)))

    def apply_maneuver(self, maneuver: ManeuverLike):
        """Apply a sequence of moves to the cube."""
        definitions = [move_definition(move) for move in parse_moves(maneuver)]
        arrays = self._arrays()
        for definition in definitions:
            arrays = _transform(arrays, definition)
        self._publish(*arrays)

    def copy(self) -> CubeState:
        """Return a copy of the cube."""
        return deepcopy(self)


def _transform(
        arrays: Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray],
        definition: MoveDefinition) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    cp, co, ep, eo = arrays
    cp, co = cycle_slots(cp, co, definition.corner_cycle, definition.shift,
                         definition.corner_orientation_change, CORNER_MODULO)
    if len(ep):
        ep, eo = cycle_slots(ep, eo, definition.edge_cycle, definition.shift,
                             definition.edge_orientation_change, EDGE_MODULO)
    return cp, co, ep, eo


def apply_move(cube: CubeState, move: MoveLike) -> CubeState:
    """Return a copy of the cube with the move applied."""
    if not isinstance(cube, CubeState):
        raise TypeError(f"cube must be CubeState, not {type(cube).__name__}")

    cube = cube.copy()
    cube.apply_move(move)
    return cube


def apply_maneuver(cube: CubeState, maneuver: ManeuverLike) -> CubeState:
    """Return a copy of the cube with the sequence of moves applied."""
    if not isinstance(cube, CubeState):
        raise TypeError(f"cube must be CubeState, not {type(cube).__name__}")

    cube = cube.copy()
    cube.apply_maneuver(maneuver)
    return cube


def is_solved(cube: CubeState) -> bool:
    """Whether the cube is solved."""
    if not isinstance(cube, CubeState):
        raise TypeError(f"cube must be CubeState, not {type(cube).__name__}")
    return cube.is_solved


def clone(cube: CubeState) -> CubeState:
    """Return a copy of the cube."""
    if not isinstance(cube, CubeState):
        raise TypeError(f"cube must be CubeState, not {type(cube).__name__}")
    return cube.copy()
