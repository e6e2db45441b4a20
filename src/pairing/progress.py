"""
Observable import state and the cosmetic progress animation.

The progress bar is purely presentational: it advances on a fixed timer
after the pairing file is already on disk.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

DEFAULT_STEP = 0.025
DEFAULT_INTERVAL_SECONDS = 0.05

StateListener = Callable[[str, Any], None]


class ImportState:
    """
    State a UI binds to while an import runs.

    Every assignment to a tracked field notifies subscribers with
    ``(field, value)``, including assignments that don't change the value.
    """

    FIELDS = (
        "is_importing_from_appdb",
        "is_importing_file",
        "import_progress",
        "show_error_alert",
        "error_message",
    )

    def __init__(self) -> None:
        self._listeners: list[StateListener] = []
        self.is_importing_from_appdb = False
        self.is_importing_file = False
        self.import_progress = 0.0
        self.show_error_alert = False
        self.error_message = ""

    def __setattr__(self, name: str, value: Any) -> None:
        super().__setattr__(name, value)
        if name in self.FIELDS:
            for listener in list(self.__dict__.get("_listeners", ())):
                listener(name, value)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def report_error(self, message: str) -> None:
        self.error_message = message
        self.show_error_alert = True
        self.is_importing_from_appdb = False

    def snapshot(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.FIELDS}


async def animate_progress(
    state: ImportState,
    step: float = DEFAULT_STEP,
    interval: float = DEFAULT_INTERVAL_SECONDS,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> None:
    """
    Advance ``state.import_progress`` from 0.0 to 1.0 on a fixed timer.

    On completion progress is exactly 1.0 and both importing flags are cleared.
    """
    if step <= 0:
        raise ValueError(f"step must be > 0, got {step}")

    state.is_importing_file = True
    state.import_progress = 0.0

    # ticks * step, not a running sum: 40 steps of 0.025 end exactly on 1.0
    ticks = 0
    while state.import_progress < 1.0:
        await sleep(interval)
        ticks += 1
        state.import_progress = min(1.0, ticks * step)

    state.is_importing_file = False
    state.is_importing_from_appdb = False
    logger.debug("Progress animation finished", extra={"progress": state.import_progress})
