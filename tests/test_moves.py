import pytest

from cube_engine import CubeState, Move, InvalidMove, apply_move, apply_maneuver
from cube_engine.cube import MOVE_DEFINITIONS, move_definition
from cube_engine.cube.defs import NUM_CYCLE_SLOTS

QUARTER_TURNS = [move for move in Move.moves() if not move.is_half_turn]
HALF_TURNS = [move for move in Move.moves() if move.is_half_turn]


def test_move_table_complete():
    assert len(MOVE_DEFINITIONS) == 18
    for move, definition in MOVE_DEFINITIONS.items():
        assert definition.move == move
        assert len(definition.corner_cycle) == NUM_CYCLE_SLOTS
        assert len(definition.edge_cycle) == NUM_CYCLE_SLOTS
        assert len(definition.corner_orientation_change) == NUM_CYCLE_SLOTS
        assert len(definition.edge_orientation_change) == NUM_CYCLE_SLOTS


def test_move_tokens():
    tokens = [move.string for move in Move.moves()]
    assert tokens == ["U", "U2", "U'", "R", "R2", "R'", "F", "F2", "F'",
                      "D", "D2", "D'", "L", "L2", "L'", "B", "B2", "B'"]
    for move in Move.moves():
        assert Move.from_string(move.string) == move
        assert move_definition(move.string) is MOVE_DEFINITIONS[move]


@pytest.mark.parametrize("token", ["X", "r", "R3", "R''", "", "U 2", "R2'", None, 3])
def test_invalid_move(token):
    with pytest.raises(InvalidMove):
        move_definition(token)


def test_invalid_move_is_value_error():
    with pytest.raises(ValueError):
        apply_move(CubeState(), "M")


def test_invalid_move_does_not_mutate():
    cube = CubeState("R U")
    before = cube.copy()
    with pytest.raises(InvalidMove):
        cube.apply_maneuver("F B X")
    assert cube == before
    with pytest.raises(InvalidMove):
        cube.apply_move(Move.NONE)
    assert cube == before


@pytest.mark.parametrize("move", QUARTER_TURNS)
def test_quarter_turn_order(move):
    cube = CubeState("R U F' D2 L B'")
    assert apply_maneuver(cube, [move] * 4) == cube
    assert apply_maneuver(cube, [move] * 2) != cube


@pytest.mark.parametrize("move", HALF_TURNS)
def test_half_turn_order(move):
    cube = CubeState("R U F' D2 L B'")
    assert apply_maneuver(cube, [move] * 2) == cube
    assert apply_move(cube, move) != cube


@pytest.mark.parametrize("move", list(Move.moves()))
def test_move_then_inverse(move):
    cube = CubeState("F2 L' U B R D'")
    assert apply_move(apply_move(cube, move), move.inverse) == cube


@pytest.mark.parametrize("face", "URFDLB")
def test_half_turn_is_two_quarter_turns(face):
    cube = CubeState("B' D L2 F U' R")
    assert apply_move(cube, face + "2") == apply_maneuver(cube, [face, face])
    assert apply_move(cube, face + "'") == apply_maneuver(cube, [face] * 3)


def test_orientation_deltas_keep_totals():
    for definition in MOVE_DEFINITIONS.values():
        assert sum(definition.corner_orientation_change) % 3 == 0
        assert sum(definition.edge_orientation_change) % 2 == 0


def test_only_quarter_turns_of_f_and_b_flip_edges():
    for move in Move.moves():
        cube = apply_move(CubeState(), move)
        flips = int(cube.edge_orientation.sum())
        if move.face.char in "FB" and not move.is_half_turn:
            assert flips == 4
        else:
            assert flips == 0


def test_r_move_facelets():
    cube = apply_move(CubeState(), "R")
    assert cube.facelets() == "UUFUUFUUFRRRRRRRRRFFDFFDFFDDDBDDBDDBLLLLLLLLLUBBUBBUBB"
