"""Tests for the one-off diagnostic read."""

from unittest.mock import patch

import pytest

from rpimon.dht.check import check
from rpimon.dht.models import Reading
from rpimon.lib.exceptions import ChecksumError, GpioError, ReadTimeoutError


class TestCheck:
    """Tests for the check command."""

    def test_prints_reading(self, fake_driver, capsys):
        driver = fake_driver(reading=Reading(temperature=21.5, humidity=40.1))

        with patch("rpimon.dht.check.create_driver", return_value=driver) as mock_create:
            assert check(4) == 0

        mock_create.assert_called_once_with(4, None)
        out, err = capsys.readouterr()
        assert out.strip() == "temperature=21.5°C humidity=40.1%"
        assert err == ""
        assert driver.calls == 1
        assert driver.exited

    @pytest.mark.parametrize(
        ("error", "message"),
        [
            (ChecksumError(), "Checksum value of the reading is incorrect!"),
            (ReadTimeoutError(), "Timeout reading the sensor value"),
            (GpioError("Input/output error"), "Problem reading GPIO value: Input/output error"),
        ],
    )
    def test_prints_failure(self, fake_driver, capsys, error, message):
        driver = fake_driver(failures=[error])

        with patch("rpimon.dht.check.create_driver", return_value=driver):
            assert check(4) == 0

        out, err = capsys.readouterr()
        assert out == ""
        assert err.strip() == message
        # Exactly one attempt, no retry
        assert driver.calls == 1
        assert driver.exited
