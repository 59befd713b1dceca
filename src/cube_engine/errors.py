"""Cube engine exceptions."""


class CubeEngineError(Exception):
    """Base class of all cube engine errors."""


class InvalidMove(CubeEngineError, ValueError):
    """Unrecognized move token."""

    def __init__(self, token: object):
        self.token = token
        super().__init__(f"invalid move {token!r}")


class SolverExhausted(CubeEngineError):
    """The search threshold escalated past its ceiling without reaching the goal."""


class Unsolvable(CubeEngineError):
    """Every solving strategy failed."""


class Cancelled(CubeEngineError):
    """The solve was cancelled between yield points."""


class OracleUnavailable(CubeEngineError):
    """The reference oracle is not ready (recoverable by retrying)."""
