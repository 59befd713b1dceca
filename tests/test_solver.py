import asyncio
import random
import warnings
import pytest

from cube_engine import (CubeState, Maneuver, Move, SolverConfig, TwoPhaseSolver, CancelToken, SolveStatus,
                         Phase, EventBus, PhaseChanged, SolverExhausted, Unsolvable, Cancelled,
                         apply_maneuver, scramble, in_g1, heuristic)
from cube_engine.solver import PHASE2_MOVES
from cube_engine.solver.two_phase import simple_bound


def solve_ok(solver, cube):
    result = solver.solve(cube)
    assert result.status == SolveStatus.SOLVED, result.message
    assert apply_maneuver(cube, result.maneuver).is_solved
    return result


def test_in_g1():
    assert in_g1(CubeState())
    assert in_g1(CubeState("U D' R2 L2 F2 B2 U2"))
    assert not in_g1(CubeState("R"))
    assert not in_g1(CubeState("F"))
    assert not in_g1(CubeState("L'"))
    assert not in_g1(CubeState("B2 F"))
    # oriented pieces with a middle slice edge out of the middle slice
    cube = CubeState.from_arrays([1, 0, 2, 3, 4, 5, 6, 7], [0] * 8, [4, 1, 2, 3, 0, 5, 6, 7, 8, 9, 10, 11], [0] * 12)
    assert cube.is_reachable
    assert not in_g1(cube)
    assert in_g1(CubeState("R2 U R2"))
    assert in_g1(CubeState(size=2))
    assert in_g1(CubeState("U R2", size=2))
    assert not in_g1(CubeState("R", size=2))


def test_heuristic_values(tables):
    assert heuristic(CubeState(), Phase.PHASE1, tables) == 0
    assert heuristic(CubeState(), Phase.PHASE2, tables) == 0
    assert heuristic(CubeState("R"), Phase.PHASE1, tables) == 1
    assert heuristic(CubeState("R2 U D'"), Phase.PHASE1, tables) == 0
    assert heuristic(CubeState("U"), Phase.PHASE2, tables) == 1
    with pytest.raises(ValueError):
        heuristic(CubeState("F"), Phase.PHASE2, tables)
    with pytest.raises(TypeError):
        heuristic(CubeState(), 1, tables)


def test_simple_bound():
    assert simple_bound(CubeState("R"), Phase.PHASE1) == 1
    assert simple_bound(CubeState("F B"), Phase.PHASE1) == 2
    assert simple_bound(CubeState("U"), Phase.PHASE2) == 1
    with pytest.raises(ValueError):
        simple_bound(CubeState(), Phase.DONE)


def test_heuristic_admissible_phase1(tables, rng):
    for length in range(1, 8):
        for _ in range(10):
            cube = CubeState(Maneuver.random(length, rng))
            assert heuristic(cube, Phase.PHASE1, tables) <= length


def test_heuristic_admissible_phase2(tables, rng):
    for length in range(1, 10):
        for _ in range(10):
            cube = CubeState([rng.choice(PHASE2_MOVES) for _ in range(length)])
            assert in_g1(cube)
            assert heuristic(cube, Phase.PHASE2, tables) <= length


def test_solve_solved(solver):
    result = solver.solve(CubeState())
    assert result.ok
    assert result.maneuver == ""
    assert len(result.maneuver) == 0
    assert result.raise_for_status() == Maneuver("")


@pytest.mark.parametrize("maneuver", ["R", "U2", "R U R' U'", "F B' L2 D", "R2 F2 U L' B D2"])
def test_solve_short(solver, maneuver):
    cube = CubeState(maneuver)
    result = solve_ok(solver, cube)
    assert len(result.phase_lengths) == 2
    assert result.source == "search"


def test_solve_does_not_mutate(solver, rng):
    cube = CubeState(scramble(rng=rng))
    before = cube.copy()
    solve_ok(solver, cube)
    assert cube == before


def test_solve_random_scrambles(solver):
    rng = random.Random(100)
    for _ in range(100):
        cube = CubeState(scramble(20, rng))
        result = solve_ok(solver, cube)
        assert len(result.maneuver) <= 2 * SolverConfig().max_threshold


def test_solution_moves_are_reduced(solver, rng):
    cube = CubeState(scramble(rng=rng))
    result = solve_ok(solver, cube)
    for previous, move in zip(result.maneuver, result.maneuver[1:]):
        assert previous.face != move.face


def test_phase_lengths(solver, rng):
    cube = CubeState(scramble(rng=rng))
    result = solve_ok(solver, cube)
    assert len(result.phase_lengths) == 2
    assert sum(result.phase_lengths) >= len(result.maneuver)
    assert result.nodes > 0


def test_solve_corners_only(solver, rng):
    for _ in range(5):
        cube = CubeState(scramble(rng=rng), size=2)
        result = solve_ok(solver, cube)
        assert len(result.maneuver) <= 30


def test_solve_unreachable(solver):
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        cube = CubeState.from_arrays(range(8), [1] + [0] * 7, range(12), [0] * 12)
    result = solver.solve(cube)
    assert result.status == SolveStatus.UNSOLVABLE
    with pytest.raises(Unsolvable):
        result.raise_for_status()


def test_solve_exhausted(tables):
    solver = TwoPhaseSolver(SolverConfig(max_threshold=1), tables=tables)
    result = solver.solve(CubeState("F B"))
    assert result.status == SolveStatus.EXHAUSTED
    assert not result.ok
    with pytest.raises(SolverExhausted):
        result.raise_for_status()


def test_cancel_before_start(solver):
    cancel = CancelToken()
    cancel.cancel()
    assert cancel.cancelled
    result = solver.solve(CubeState("R U"), cancel)
    assert result.status == SolveStatus.CANCELLED
    with pytest.raises(Cancelled):
        result.raise_for_status()


def test_cancel_between_yield_points(tables, rng):
    solver = TwoPhaseSolver(SolverConfig(yield_interval=1), tables=tables)
    cube = CubeState(scramble(rng=rng))
    before = cube.copy()
    cancel = CancelToken()
    steps = solver.steps(cube, cancel)
    next(steps)
    cancel.cancel()
    with pytest.raises(StopIteration) as stop:
        next(steps)
    assert stop.value.value.status == SolveStatus.CANCELLED
    assert cube == before


def test_steps_yield_progress(tables, rng):
    solver = TwoPhaseSolver(SolverConfig(yield_interval=8), tables=tables)
    cube = CubeState(scramble(rng=rng))
    steps = solver.steps(cube)
    count = 0
    while True:
        try:
            step = next(steps)
        except StopIteration as stop:
            result = stop.value
            break
        assert step.phase in (Phase.PHASE1, Phase.PHASE2)
        count += 1
    assert result.ok
    # the node counter restarts with each phase
    assert result.nodes // 8 - 1 <= count <= result.nodes // 8


def test_phase_events(tables, rng):
    events = EventBus()
    received = []
    events.subscribe(received.append)
    solver = TwoPhaseSolver(events=events, tables=tables)
    solve_ok(solver, CubeState(scramble(rng=rng)))
    assert received == [PhaseChanged(Phase.PHASE1), PhaseChanged(Phase.PHASE2), PhaseChanged(Phase.DONE)]


def test_solver_type_errors(tables):
    with pytest.raises(TypeError):
        TwoPhaseSolver(config={"max_threshold": 3})
    with pytest.raises(TypeError):
        TwoPhaseSolver(tables="tables")
    with pytest.raises(TypeError):
        TwoPhaseSolver(tables=tables).solve("R U")


@pytest.mark.asyncio
async def test_solve_async(solver, rng):
    cube = CubeState(scramble(rng=rng))
    result = await solver.solve_async(cube)
    assert result.ok
    assert apply_maneuver(cube, result.maneuver).is_solved


@pytest.mark.asyncio
async def test_solve_async_yields_to_event_loop(tables, rng):
    solver = TwoPhaseSolver(SolverConfig(yield_interval=1), tables=tables)
    cube = CubeState(scramble(rng=rng))
    ticks = 0
    done = False

    async def ticker():
        nonlocal ticks
        while not done:
            ticks += 1
            await asyncio.sleep(0)

    task = asyncio.create_task(ticker())
    result = await solver.solve_async(cube)
    done = True
    await task
    assert result.ok
    assert ticks > 1


@pytest.mark.asyncio
async def test_solve_async_cancel(tables, rng):
    solver = TwoPhaseSolver(SolverConfig(yield_interval=1), tables=tables)
    cancel = CancelToken()

    async def cancel_soon():
        await asyncio.sleep(0)
        cancel.cancel()

    task = asyncio.create_task(cancel_soon())
    result = await solver.solve_async(CubeState(scramble(rng=rng)), cancel)
    await task
    assert result.status == SolveStatus.CANCELLED


def test_solution_moves_type(solver):
    result = solve_ok(solver, CubeState("R U F"))
    assert all(isinstance(move, Move) for move in result.maneuver)
