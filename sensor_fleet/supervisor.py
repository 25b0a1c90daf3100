"""SimulationSupervisor - spawns one SensorPublisher task per sensor and owns
the coordinated shutdown sequence.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
import threading

from sensor_fleet.config import RuntimeParameters
from sensor_fleet.generators import sensor_rng
from sensor_fleet.models import SensorIdentity
from sensor_fleet.publisher import SensorPublisher
from sensor_fleet.publishers.base import Publisher

__all__ = ["DEFAULT_GRACE_PERIOD_S", "SimulationSupervisor"]

logger = logging.getLogger("sensor_fleet")

DEFAULT_GRACE_PERIOD_S = 1.0


class SimulationSupervisor:
    """Runs a fleet of simulated sensors against one shared publisher.

    Example::

        from sensor_fleet import RuntimeParameters, SimulationSupervisor
        from sensor_fleet.publishers import ConsolePublisher

        params = RuntimeParameters(sensor_count=3, min_rate=1.0, max_rate=2.0)
        SimulationSupervisor(params, ConsolePublisher()).run(duration_s=5)

    Parameters:
        params:
            Resolved runtime parameters.  They are validated here, before
            anything is spawned; invalid bounds raise
            :class:`~sensor_fleet.config.ConfigurationError`.
        publisher:
            Connected publish capability shared by every sensor.  The caller
            owns its lifecycle (``connect`` / ``close``).
        grace_period_s:
            How long to wait after signalling cancellation before returning.
        seed:
            Base seed for the per-sensor random sources; ``None`` seeds from
            the clock.
    """

    def __init__(
        self,
        params: RuntimeParameters,
        publisher: Publisher,
        *,
        grace_period_s: float = DEFAULT_GRACE_PERIOD_S,
        seed: int | None = None,
    ) -> None:
        params.validate_bounds()
        self.params = params
        self._publisher = publisher
        self._grace_period_s = grace_period_s
        self._seed = seed
        self.sensors: list[SensorPublisher] = []
        self._tasks: list[asyncio.Task[None]] = []
        self._cancel_event: asyncio.Event | None = None

    @property
    def sensor_count(self) -> int:
        return self.params.sensor_count

    @property
    def published_count(self) -> int:
        return sum(s.published for s in self.sensors)

    @property
    def failed_count(self) -> int:
        return sum(s.failed for s in self.sensors)

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self, duration_s: float | None = None) -> None:
        """Blocking entry point; ``duration_s=None`` runs until Ctrl-C / SIGTERM.

        Called from a thread whose event loop is already running (Jupyter,
        IPython), the fleet runs on a worker thread with its own loop and
        this call blocks until it finishes.  Errors from the worker are
        re-raised here.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            self._run_to_completion(duration_s)
            return

        errors: list[BaseException] = []
        worker = threading.Thread(
            target=self._run_to_completion,
            args=(duration_s, errors),
            name="sensor-fleet",
            daemon=True,
        )
        worker.start()
        worker.join()
        if errors:
            raise errors[0]

    def _run_to_completion(self, duration_s: float | None, errors: list[BaseException] | None = None) -> None:
        try:
            asyncio.run(self.run_async(duration_s=duration_s))
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
        except BaseException as exc:
            if errors is None:
                raise
            errors.append(exc)

    async def run_async(
        self,
        stop_event: asyncio.Event | None = None,
        duration_s: float | None = None,
    ) -> None:
        """Spawn the sensors, wait for a stop request, then shut down.

        A stop request is *stop_event* being set, SIGINT/SIGTERM, or
        *duration_s* elapsing, whichever comes first.  If this coroutine is
        itself cancelled, the fleet is shut down and ``CancelledError``
        propagates to the caller.
        """
        logger.info(
            "Starting simulation with %d sensors, publishing at rates between %.6f and %.6f Hz",
            self.params.sensor_count,
            self.params.min_rate,
            self.params.max_rate,
        )

        self._cancel_event = asyncio.Event()
        self.spawn(self._cancel_event)

        if stop_event is None:
            stop_event = asyncio.Event()

        # NotImplementedError: raised on Windows where signal handlers are unsupported.
        # RuntimeError: raised when running in a non-main thread (e.g. notebook env).
        loop = asyncio.get_running_loop()
        installed: list[signal.Signals] = []
        for sig in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(NotImplementedError, RuntimeError):
                loop.add_signal_handler(sig, stop_event.set)
                installed.append(sig)

        try:
            if duration_s is None:
                await stop_event.wait()
                logger.info("Stop signal received - shutting down simulator...")
            else:
                try:
                    await asyncio.wait_for(stop_event.wait(), timeout=duration_s)
                    logger.info("Stop signal received - shutting down simulator...")
                except asyncio.TimeoutError:
                    logger.info("Duration reached (%.1fs) - shutting down simulator...", duration_s)
        except asyncio.CancelledError:
            logger.info("Simulator cancelled - shutting down simulator...")
            raise
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)
            await self.shutdown()

    def spawn(self, cancel_event: asyncio.Event) -> list[asyncio.Task[None]]:
        """Create one task per sensor, all observing *cancel_event*."""
        for index in range(self.params.sensor_count):
            sensor = SensorPublisher(
                SensorIdentity.from_index(index, self.params.kinds),
                self._publisher,
                min_rate=self.params.min_rate,
                max_rate=self.params.max_rate,
                cancel_event=cancel_event,
                rng=sensor_rng(index, self._seed),
            )
            self.sensors.append(sensor)
            self._tasks.append(asyncio.create_task(sensor.run(), name=f"sensor-{index:03d}"))
        logger.debug("Spawned %d sensor tasks", len(self._tasks))
        return self._tasks

    async def shutdown(self) -> None:
        """Signal cancellation and give in-flight sensors the grace period to stop.

        Sensors are not awaited individually.  Tasks still pending when the
        grace period ends are cancelled so the event loop can close.
        """
        if self._cancel_event is not None:
            self._cancel_event.set()
        await asyncio.sleep(self._grace_period_s)

        pending = [t for t in self._tasks if not t.done()]
        if pending:
            logger.warning("%d sensor(s) still mid-tick after %.1fs grace period - cancelling", len(pending), self._grace_period_s)
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        for task in self._tasks:
            if not task.cancelled() and task.exception() is not None:
                logger.error("Sensor task %s failed: %r", task.get_name(), task.exception())

        logger.info(
            "Simulator stopped (%d messages published, %d publish errors)",
            self.published_count,
            self.failed_count,
        )
