"""Bulk-prefetch readiness state machine.

    empty --start--> inproc --complete--> ready --start (forced)--> inproc
    any --disable--> disabled --enable--> empty

Every ``start`` bumps ``generation`` so a prefetch run can tell whether a newer run
has taken over the machine.

Waiters block on an ``asyncio.Event`` that is set whenever the machine is settled
(``ready`` or ``disabled``). The wait is bounded and never fails: a timeout means
"carry on with whatever the store holds".
"""

from __future__ import annotations

import asyncio
from enum import StrEnum

import structlog

from pkgcomplete.errors import InvalidTransitionError

log = structlog.get_logger()

DEFAULT_READY_TIMEOUT_SECONDS = 30.0


class ReadinessState(StrEnum):
    EMPTY = "empty"
    INPROC = "inproc"
    READY = "ready"
    DISABLED = "disabled"


_SETTLED = frozenset({ReadinessState.READY, ReadinessState.DISABLED})

_ALLOWED: dict[ReadinessState, frozenset[ReadinessState]] = {
    ReadinessState.EMPTY: frozenset({ReadinessState.INPROC, ReadinessState.DISABLED}),
    ReadinessState.INPROC: frozenset({ReadinessState.READY, ReadinessState.DISABLED}),
    ReadinessState.READY: frozenset({ReadinessState.INPROC, ReadinessState.DISABLED}),
    ReadinessState.DISABLED: frozenset({ReadinessState.EMPTY, ReadinessState.DISABLED}),
}


class Readiness:
    def __init__(self, state: ReadinessState = ReadinessState.EMPTY) -> None:
        self._state = state
        self._generation = 0
        self._settled = asyncio.Event()
        if state in _SETTLED:
            self._settled.set()

    @property
    def state(self) -> ReadinessState:
        return self._state

    @property
    def generation(self) -> int:
        """Number of prefetch runs started so far."""
        return self._generation

    @property
    def is_ready(self) -> bool:
        return self._state is ReadinessState.READY

    @property
    def is_disabled(self) -> bool:
        return self._state is ReadinessState.DISABLED

    def set_state(self, target: ReadinessState) -> None:
        """Move to ``target``. Raises InvalidTransitionError for illegal moves."""
        current = self._state
        if target not in _ALLOWED[current]:
            raise InvalidTransitionError(current.value, target.value)

        self._state = target
        if target in _SETTLED:
            self._settled.set()
        else:
            self._settled.clear()
        if current is not target:
            log.info("cache_state_changed", previous=current.value, state=target.value)

    def start(self) -> int:
        """Enter ``inproc`` and return the new run's generation."""
        self.set_state(ReadinessState.INPROC)
        self._generation += 1
        return self._generation

    def complete(self) -> None:
        self.set_state(ReadinessState.READY)

    def disable(self) -> None:
        self.set_state(ReadinessState.DISABLED)

    def enable(self) -> None:
        """Leave ``disabled`` for ``empty``. No-op in any other state."""
        if self._state is ReadinessState.DISABLED:
            self.set_state(ReadinessState.EMPTY)

    async def wait_for_ready(self, timeout: float = DEFAULT_READY_TIMEOUT_SECONDS) -> bool:
        """Wait until the machine is settled, at most ``timeout`` seconds.

        Returns ``True`` if settled, ``False`` on timeout. Never raises on timeout.
        """
        if self._settled.is_set():
            return True

        log.debug("cache_wait_started", state=self._state.value, timeout=timeout)
        try:
            await asyncio.wait_for(self._settled.wait(), timeout)
        except TimeoutError:
            log.info("cache_wait_timeout", state=self._state.value, timeout=timeout)
            return False
        log.debug("cache_wait_finished", state=self._state.value)
        return True
