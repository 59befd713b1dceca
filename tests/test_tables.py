import numpy as np
import pytest

from cube_engine import CubeState, Move, apply_move, scramble
from cube_engine.cube import utils
from cube_engine.solver import Phase, PHASE1_MOVES, PHASE2_MOVES, Tables
from cube_engine.solver.tables import COORDS, PRUNING_DEFS, get_coord


def random_g1_moves(rng, length=20):
    return [rng.choice(PHASE2_MOVES) for _ in range(length)]


def test_permutation_coord():
    assert utils.get_permutation_coord(np.arange(8)) == 0
    assert utils.get_permutation_coord(np.arange(8)[::-1].copy()) == 40319
    for coord in (0, 1, 17, 5039, 40319):
        assert utils.get_permutation_coord(utils.get_permutation_array(coord, 8)) == coord
    permutations = utils.all_permutations(4)
    assert np.array_equal(utils.get_permutation_coord(permutations), np.arange(24))


def test_orientation_coord():
    assert utils.get_orientation_coord(np.zeros(8, dtype=int), 3) == 0
    for coord in (0, 1, 100, 2186):
        orientation = utils.get_orientation_array(coord, 3, 8)
        assert orientation.sum() % 3 == 0
        assert utils.get_orientation_coord(orientation, 3) == coord
    with pytest.raises(ValueError):
        utils.get_orientation_array(2187, 3, 8)


def test_combination_coord():
    for coord in (0, 1, 250, 494):
        combination = utils.get_combination_array(coord, 4)
        assert utils.get_combination_coord(combination) == coord
    with pytest.raises(ValueError):
        utils.get_combination_coord(np.array([3, 2, 5, 7]))


def test_permutation_parity():
    assert not utils.get_permutation_parity(np.arange(8))
    assert utils.get_permutation_parity(np.array([1, 0, 2, 3]))
    assert not utils.get_permutation_parity(np.array([1, 2, 0, 3]))


def test_solved_coords(tables):
    solved = CubeState()
    assert get_coord(solved, "co") == 0
    assert get_coord(solved, "eo") == 0
    assert get_coord(solved, "cp") == 0
    assert get_coord(solved, "udep") == 0
    assert get_coord(solved, "sliceperm") == 0
    assert tables.goal["slice"] == get_coord(solved, "slice")


def test_coord_errors():
    with pytest.raises(ValueError):
        get_coord(CubeState(), "xy")
    with pytest.raises(ValueError):
        get_coord(CubeState(size=2), "eo")
    with pytest.raises(ValueError):
        get_coord(CubeState("R"), "sliceperm")
    with pytest.raises(TypeError):
        get_coord("cube", "co")


def test_transition_shapes(tables):
    for name in ("co", "eo", "slice"):
        assert tables.transition_table(name, Phase.PHASE1).shape == (COORDS[name][0], len(PHASE1_MOVES))
    for name in ("cp", "udep", "sliceperm"):
        assert tables.transition_table(name, Phase.PHASE2).shape == (COORDS[name][0], len(PHASE2_MOVES))


def test_phase1_transitions_match_engine(tables, rng):
    for _ in range(20):
        cube = CubeState(scramble(rng=rng))
        for col, move in enumerate(PHASE1_MOVES):
            moved = apply_move(cube, move)
            for name in ("co", "eo", "slice"):
                table = tables.transition_table(name, Phase.PHASE1)
                assert table[get_coord(cube, name), col] == get_coord(moved, name)


def test_phase2_transitions_match_engine(tables, rng):
    for _ in range(20):
        cube = CubeState(random_g1_moves(rng))
        for col, move in enumerate(PHASE2_MOVES):
            moved = apply_move(cube, move)
            for name in ("cp", "udep", "sliceperm"):
                table = tables.transition_table(name, Phase.PHASE2)
                assert table[get_coord(cube, name), col] == get_coord(moved, name)


def test_pruning_tables(tables):
    for pruning_def in PRUNING_DEFS:
        table = tables.pruning[pruning_def.name]
        shape = [COORDS[name][0] for name in pruning_def.coord_names]
        assert len(table) == np.prod(shape)
        assert table.dtype == np.int8
        assert np.all(table >= 0)
        goal = np.ravel_multi_index([tables.goal[name] for name in pruning_def.coord_names], shape)
        assert table[goal] == 0
        assert np.count_nonzero(table == 0) == 1


def test_pruning_single_move(tables):
    cube = apply_move(CubeState(), Move.R1)
    index = np.ravel_multi_index((get_coord(cube, "co"), get_coord(cube, "slice")), (2187, 495))
    assert tables.pruning_table(("co", "slice"), Phase.PHASE1)[index] == 1


def test_save_and_load(tables, tmp_path):
    tables.save(str(tmp_path))
    loaded = Tables.load(str(tmp_path))
    for name, table in tables.transition.items():
        assert np.array_equal(loaded.transition[name], table)
    for name, table in tables.pruning.items():
        assert np.array_equal(loaded.pruning[name], table)
