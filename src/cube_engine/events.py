"""
Solver and session events.

The engine never calls timers, audio or animation code directly, it publishes events
and the presentation layer subscribes to them.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Union

from .cube import CubeState, Move
from .defs import Phase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveApplied:
    move: Move
    state: CubeState


@dataclass(frozen=True)
class PhaseChanged:
    phase: Phase


Event = Union[MoveApplied, PhaseChanged]
Listener = Callable[[Event], None]


class EventBus:
    """Synchronous publish/subscribe channel."""

    def __init__(self):
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener, returns a function that unsubscribes it."""
        if not callable(listener):
            raise TypeError(f"listener must be callable, not {type(listener).__name__}")
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)
        return unsubscribe

    def emit(self, event: Event):
        with self._lock:
            listeners = [*self._listeners]
        for listener in listeners:
            listener(event)
        logger.debug("emitted %s to %d listeners", type(event).__name__, len(listeners))
