"""Generic async polling service abstraction.

Provides a reusable base class for services that follow the
poll → submit pattern on a fixed period.
"""
import asyncio
import signal
from abc import ABC, abstractmethod
from contextlib import suppress
from typing import Generic, TypeVar

from rpimon.lib.config import Settings, get_settings
from rpimon.logging import get_logger

logger = get_logger("lib.polling")

T = TypeVar("T")
R = TypeVar("R")


class PollingService(ABC, Generic[T, R]):
    """Abstract base class for async polling services.

    Implements the common polling loop pattern with:
    - Configurable polling frequency
    - Strictly sequential cycles (no overlap, no catch-up burst)
    - Graceful shutdown handling
    - Error recovery
    """

    def __init__(
        self,
        name: str,
        frequency_sec: int | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the polling service.

        Args:
            name: Service name for logging.
            frequency_sec: Polling frequency in seconds.
            settings: Settings to use instead of the global ones.
        """
        self.name = name
        self.settings = settings or get_settings()
        self.frequency_sec = frequency_sec or self.settings.polling.frequency_sec
        self.last_result: R | None = None
        self._shutdown = asyncio.Event()
        self._logger = get_logger(f"polling.{name}")

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize any resources needed before polling starts.

        Called once at the start of run().
        """

    @abstractmethod
    async def cleanup(self) -> None:
        """Clean up resources before exit.

        Called once when the polling loop exits.
        """

    @abstractmethod
    async def poll(self) -> T:
        """Collect the data for one cycle."""

    @abstractmethod
    async def submit(self, data: T) -> R:
        """Hand the cycle's data on and return the outcome."""

    def on_poll_error(self, error: Exception) -> None:
        """Handle an error that escaped a cycle.

        Override to customize error handling. Default logs the error.
        """
        self._logger.error("%s cycle failed: %s", self.name, error)

    def request_shutdown(self) -> None:
        """Stop the loop, aborting a cycle or period wait in progress."""
        self._shutdown.set()

    @property
    def _shutdown_requested(self) -> bool:
        return self._shutdown.is_set()

    def _handle_shutdown(self, signum: int) -> None:
        """Handle shutdown signals gracefully."""
        signal_name = signal.Signals(signum).name
        self._logger.info("Received %s, initiating graceful shutdown...", signal_name)
        self.request_shutdown()

    def _setup_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        """Register signal handlers for graceful shutdown."""
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, self._handle_shutdown, sig)

    async def _poll_cycle(self) -> R:
        """Execute a single poll → submit cycle."""
        data = await self.poll()
        result = await self.submit(data)
        self.last_result = result
        return result

    async def _run_cycle(self) -> bool:
        """Run one cycle unless shutdown is requested first.

        Returns:
            False if the cycle was aborted by a shutdown request.
        """
        cycle = asyncio.create_task(self._poll_cycle())
        stop = asyncio.create_task(self._shutdown.wait())
        done, _ = await asyncio.wait(
            {cycle, stop}, return_when=asyncio.FIRST_COMPLETED
        )
        stop.cancel()

        if cycle not in done:
            self._logger.info("Aborting %s cycle in progress", self.name)
            cycle.cancel()
            with suppress(asyncio.CancelledError):
                await cycle
            return False

        error = cycle.exception()
        if error is not None:
            self.on_poll_error(error)
        return True

    async def _wait_for_next_cycle(self, timeout: float) -> None:
        """Sleep until the next cycle is due or shutdown is requested."""
        with suppress(TimeoutError):
            await asyncio.wait_for(self._shutdown.wait(), timeout=timeout)

    async def _run_loop(self) -> None:
        """Run the async polling loop with precise timing."""
        await self.initialize()
        self._logger.info(
            "%s polling service started (every %ds)", self.name, self.frequency_sec
        )

        loop = asyncio.get_running_loop()

        try:
            while not self._shutdown_requested:
                cycle_start = loop.time()

                if not await self._run_cycle() or self._shutdown_requested:
                    break

                # Sleep only the remaining time to maintain consistent intervals
                elapsed = loop.time() - cycle_start
                sleep_time = max(0, self.frequency_sec - elapsed)
                if sleep_time > 0:
                    await self._wait_for_next_cycle(sleep_time)
        finally:
            self._logger.info("Cleaning up resources...")
            await self.cleanup()
            self._logger.info("%s shutdown complete", self.name)

    async def _main(self) -> None:
        loop = asyncio.get_running_loop()
        self._setup_signal_handlers(loop)
        try:
            await self._run_loop()
        finally:
            for sig in (signal.SIGTERM, signal.SIGINT):
                loop.remove_signal_handler(sig)

    def run(self) -> None:
        """Run the polling loop.

        This is the main entry point. It:
        1. Sets up signal handlers for graceful shutdown
        2. Calls initialize()
        3. Enters the polling loop (poll → submit)
        4. Calls cleanup() on exit
        """
        asyncio.run(self._main())
