"""Sample all configured DHT22 sensors and forward them to Graphite.

Every ``REFRESH_TIME`` seconds (15 minutes by default) all sensors listed
in the sensors file are read concurrently, and their datapoints are posted
to the metrics endpoint in a single request.
"""

from typing_extensions import override

from rpimon.dht.driver import DHTDriver, create_driver
from rpimon.dht.models import Datapoint
from rpimon.dht.reader import sample_fleet
from rpimon.graphite.submit import GraphiteSubmitter, SubmitResult
from rpimon.lib.config import Sensor, Settings
from rpimon.lib.polling import PollingService
from rpimon.logging import get_logger

logger = get_logger("dht.polling")


class MonitoringService(PollingService[list[Datapoint], SubmitResult]):
    """Polling service for a fleet of DHT22 sensors."""

    def __init__(
        self,
        sensors: list[Sensor],
        submitter: GraphiteSubmitter,
        settings: Settings | None = None,
        drivers: dict[str, DHTDriver] | None = None,
    ) -> None:
        super().__init__(name="DHT22", settings=settings)
        self._sensors = sensors
        self._submitter = submitter
        self._drivers: dict[str, DHTDriver] = drivers or {}

    @override
    async def initialize(self) -> None:
        """Create a driver for every configured sensor."""
        for sensor in self._sensors:
            if sensor.name not in self._drivers:
                self._drivers[sensor.name] = create_driver(sensor.pin, self.settings)
        if self.settings.debug:
            logger.warning(
                "Debug flag is set, but datapoints are still submitted to %s",
                self.settings.graphite.endpoint,
            )

    @override
    async def cleanup(self) -> None:
        """Release the sensor drivers."""
        for name, driver in self._drivers.items():
            try:
                driver.exit()
            except Exception as e:
                logger.warning("Failed to release sensor %s: %s", name, e)
        self._drivers.clear()

    @override
    async def poll(self) -> list[Datapoint]:
        """Read every sensor once and return the cycle's datapoints."""
        datapoints = await sample_fleet(
            self._sensors,
            self._drivers,
            resolution=self.frequency_sec,
            policy=self.settings.read_policy,
        )
        logger.info(
            "Collected %d datapoint(s) from %d sensor(s)",
            len(datapoints),
            len(self._sensors),
        )
        return datapoints

    @override
    async def submit(self, data: list[Datapoint]) -> SubmitResult:
        """Post the cycle's datapoints to the metrics endpoint."""
        return await self._submitter.submit(data)
