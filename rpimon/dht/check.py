"""One-off diagnostic read of a single DHT22 sensor.

No scheduling and no submission: read once, print what happened.
"""

import sys

from rpimon.dht.driver import create_driver
from rpimon.lib.config import Settings
from rpimon.lib.exceptions import ChecksumError, GpioError, ReadTimeoutError


def check(pin: int, settings: Settings | None = None) -> int:
    """Read the sensor on ``pin`` once and print the reading or the failure."""
    driver = create_driver(pin, settings)
    try:
        reading = driver.read()
    except ChecksumError:
        print("Checksum value of the reading is incorrect!", file=sys.stderr)
    except ReadTimeoutError:
        print("Timeout reading the sensor value", file=sys.stderr)
    except GpioError as e:
        print(f"Problem reading GPIO value: {e}", file=sys.stderr)
    else:
        print(reading)
    finally:
        driver.exit()
    return 0
