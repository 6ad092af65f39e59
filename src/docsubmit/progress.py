"""Cosmetic progress emulation for a call whose real duration is unknown."""

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class ProgressSimulator:
    """Advance a step counter on a fixed period, stopping one short of the total.

    Reaching ``total_steps`` is reserved for the owner once the real result
    is in; the timer alone never reports completion.
    """

    def __init__(
        self,
        total_steps: int,
        interval: float,
        on_tick: Callable[[int], None],
    ):
        if total_steps < 1:
            raise ValueError("total_steps must be at least 1")
        self.total_steps = total_steps
        self.interval = interval
        self._on_tick = on_tick
        self._steps = 0
        self._stopped = False
        self._task: asyncio.Task | None = None

    @property
    def steps_completed(self) -> int:
        return self._steps

    @property
    def ceiling(self) -> int:
        return self.total_steps - 1

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is not None:
            raise RuntimeError("ProgressSimulator already started")
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        self._stopped = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def _run(self) -> None:
        while self._steps < self.ceiling:
            await asyncio.sleep(self.interval)
            if self._stopped:
                return
            self._steps += 1
            logger.debug("Progress tick %d/%d", self._steps, self.total_steps)
            self._on_tick(self._steps)
