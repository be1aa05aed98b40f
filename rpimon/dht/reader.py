"""Read DHT22 sensors and turn readings into datapoints.

A sensor is polled until it answers, with attempts spaced by the sensor's
minimum re-poll interval. All configured sensors are read concurrently and
joined before the cycle's datapoints are handed on.
"""

import asyncio
from collections.abc import Mapping, Sequence

from rpimon.dht.driver import DHTDriver
from rpimon.dht.models import Datapoint, Reading, reading_to_datapoints
from rpimon.lib.config import ReadPolicy, Sensor
from rpimon.lib.exceptions import SensorReadError, SensorReadExhaustedError
from rpimon.lib.utils import unix_now
from rpimon.logging import get_logger

logger = get_logger("dht.reader")


async def read_until_success(
    sensor: Sensor, driver: DHTDriver, policy: ReadPolicy
) -> Reading:
    """Poll ``driver`` until it returns a reading or ``policy`` gives up.

    Raises:
        SensorReadExhaustedError: If the policy is bounded and exhausted.
    """
    loop = asyncio.get_running_loop()
    first_attempt = loop.time()
    attempts = 0

    while True:
        attempt_start = loop.time()
        attempts += 1
        try:
            # Driver reads are blocking bit-banging, keep them off the loop
            return await asyncio.to_thread(driver.read)
        except SensorReadError as e:
            logger.warning(
                "Error reading %s (pin %d, attempt %d): %s",
                sensor.name,
                sensor.pin,
                attempts,
                e,
            )
            last_error = e

        wait = max(0.0, policy.interval_sec - (loop.time() - attempt_start))
        next_attempt_at = loop.time() + wait - first_attempt
        if policy.exhausted(attempts, next_attempt_at):
            raise SensorReadExhaustedError(sensor.name, attempts, last_error)
        await asyncio.sleep(wait)


async def read_sensor(
    sensor: Sensor,
    driver: DHTDriver,
    resolution: int,
    policy: ReadPolicy,
) -> list[Datapoint]:
    """Read one sensor and return its temperature and humidity datapoints."""
    reading = await read_until_success(sensor, driver, policy)
    timestamp = unix_now()
    logger.info("Successfully read %s: %s", sensor.name, reading)
    return reading_to_datapoints(
        sensor.name, reading, resolution=resolution, timestamp=timestamp
    )


async def sample_fleet(
    sensors: Sequence[Sensor],
    drivers: Mapping[str, DHTDriver],
    resolution: int,
    policy: ReadPolicy,
) -> list[Datapoint]:
    """Read every sensor concurrently and merge their datapoints.

    A sensor that fails, whether given up on by a bounded policy or broken
    in some other way, contributes nothing to the cycle. The other sensors
    are unaffected.
    """
    results = await asyncio.gather(
        *(
            read_sensor(sensor, drivers[sensor.name], resolution, policy)
            for sensor in sensors
        ),
        return_exceptions=True,
    )

    datapoints: list[Datapoint] = []
    for sensor, result in zip(sensors, results, strict=True):
        if isinstance(result, SensorReadExhaustedError):
            logger.error("Skipping %s this cycle: %s", sensor.name, result)
            continue
        if isinstance(result, Exception):
            logger.error(
                "Skipping %s this cycle, unexpected error: %r", sensor.name, result
            )
            continue
        if isinstance(result, BaseException):
            raise result
        datapoints.extend(result)
    return datapoints
