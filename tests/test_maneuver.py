import random
import pytest

from cube_engine import CubeState, Maneuver, Move, InvalidMove, scramble


def test_parse():
    maneuver = Maneuver("R U2 F'")
    assert maneuver == "R U2 F'"
    assert maneuver.moves == (Move.R1, Move.U2, Move.F3)
    assert len(maneuver) == 3
    assert maneuver[0] == Move.R1
    assert maneuver[1:] == "U2 F'"
    assert [*maneuver] == [Move.R1, Move.U2, Move.F3]
    assert "U2" in maneuver
    assert Move.R3 not in maneuver
    assert Maneuver([Move.R1, Move.U2]) == "R U2"
    assert Maneuver("  R   U  ") == "R U"


def test_parse_invalid():
    with pytest.raises(InvalidMove) as e:
        Maneuver("R U X")
    assert e.value.token == "X"
    with pytest.raises(InvalidMove):
        Maneuver("r")
    with pytest.raises(TypeError):
        Maneuver(["R", "U"])
    with pytest.raises(TypeError):
        Maneuver(42)


def test_inverse():
    maneuver = Maneuver("R U2 F'")
    assert str(maneuver.inverse) == "F U2 R'"
    assert str(-maneuver) == "F U2 R'"
    assert CubeState(maneuver + maneuver.inverse).is_solved


def test_add_and_repeat():
    assert str(Maneuver("R U") + "F") == "R U F"
    assert str("F" + Maneuver("R U")) == "F R U"
    assert str(Maneuver("R U") * 2) == "R U R U"
    assert str(2 * Maneuver("R")) == "R R"


def test_commutator():
    sexy = Maneuver("R") * Maneuver("U")
    assert str(sexy) == "R U R' U'"
    assert CubeState(sexy * 6).is_solved


def test_equality_is_by_effect():
    assert Maneuver("R R") == Maneuver("R2")
    assert Maneuver("U D") == "D U"
    assert Maneuver("R U R' U'") * 6 == Maneuver("")
    assert Maneuver("R") != Maneuver("L")
    assert Maneuver("R") != "X"
    assert Maneuver("R") != 42


def test_reduced():
    assert str(Maneuver("R R").reduced()) == "R2"
    assert str(Maneuver("R R'").reduced()) == ""
    assert str(Maneuver("R L R").reduced()) == "R2 L"
    assert str(Maneuver("U R2 R2 U")) == "U R2 R2 U"
    assert str(Maneuver("U R2 R2 U", reduce=True)) == "U2"
    assert str(Maneuver("R U F").reduced()) == "R U F"


def test_random_no_repeated_face():
    rng = random.Random(7)
    for length in range(2, 40):
        maneuver = Maneuver.random(length, rng)
        assert len(maneuver) == length
        for previous, move in zip(maneuver, maneuver[1:]):
            assert previous.face != move.face


def test_scramble_default_length(rng):
    lengths = {len(scramble(rng=rng)) for _ in range(200)}
    assert lengths <= set(range(20, 26))
    assert len(lengths) > 1


def test_scramble_faces(rng):
    for _ in range(100):
        maneuver = scramble(30, rng)
        tokens = str(maneuver).split()
        for previous, token in zip(tokens, tokens[1:]):
            assert previous[0] != token[0]


def test_scramble_reproducible():
    assert str(scramble(rng=random.Random(1))) == str(scramble(rng=random.Random(1)))


def test_scramble_invalid():
    with pytest.raises(ValueError):
        scramble(-1)
    with pytest.raises(TypeError):
        scramble(2.5)
    with pytest.raises(TypeError):
        scramble(rng="seed")
    assert scramble(0) == ""
