"""Submit datapoints to a Graphite HTTP endpoint (e.g. Grafana Cloud).

One POST per cycle with the cycle's datapoints as a JSON array. The outcome
is logged and returned to the caller; it is never raised.
"""

import asyncio
import http.client
import json
import urllib.error
import urllib.request
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum, auto
from http import HTTPStatus

from pydantic import SecretStr

from rpimon.dht.models import Datapoint
from rpimon.lib.config import GraphiteSettings
from rpimon.logging import get_logger

logger = get_logger("graphite.submit")


class SubmitOutcome(StrEnum):
    OK = auto()
    AUTH_ERROR = auto()
    BAD_REQUEST = auto()
    ERROR = auto()
    TRANSPORT_ERROR = auto()


@dataclass(frozen=True, slots=True)
class SubmitResult:
    outcome: SubmitOutcome
    status_code: int | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome is SubmitOutcome.OK


def serialize_datapoints(datapoints: Sequence[Datapoint]) -> str:
    """Serialize datapoints into the JSON array the endpoint expects."""
    return json.dumps([dp.to_dict() for dp in datapoints], allow_nan=False)


def classify_status(status: int) -> SubmitOutcome:
    """Map an HTTP status code onto a submission outcome."""
    if status == HTTPStatus.OK:
        return SubmitOutcome.OK
    if status in (HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN):
        return SubmitOutcome.AUTH_ERROR
    if status == HTTPStatus.BAD_REQUEST:
        return SubmitOutcome.BAD_REQUEST
    return SubmitOutcome.ERROR


class GraphiteSubmitter:
    """Posts datapoints to the metrics endpoint with bearer authentication."""

    def __init__(
        self, endpoint: str, api_key: SecretStr, timeout_sec: float = 30.0
    ) -> None:
        self._endpoint = endpoint
        self._api_key = api_key
        self._timeout_sec = timeout_sec

    @classmethod
    def from_settings(cls, cfg: GraphiteSettings) -> "GraphiteSubmitter":
        return cls(cfg.endpoint, cfg.api_key, cfg.timeout_sec)

    def _post(self, body: bytes) -> int:
        """POST ``body`` and return the response status code."""
        req = urllib.request.Request(
            self._endpoint,
            data=body,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self._api_key.get_secret_value()}",
            },
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self._timeout_sec) as resp:
                return resp.status
        except urllib.error.HTTPError as e:
            # urllib raises for 4xx/5xx, the status is what we care about
            return e.code

    async def submit(self, datapoints: Sequence[Datapoint]) -> SubmitResult:
        """Send the cycle's datapoints and log the outcome."""
        body = serialize_datapoints(datapoints)
        logger.info("Sending a POST request to Graphite with: %s", body)

        try:
            status = await asyncio.to_thread(self._post, body.encode("utf-8"))
        except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
            logger.error("Failed to reach metrics endpoint: %s", e)
            return SubmitResult(SubmitOutcome.TRANSPORT_ERROR, detail=str(e))

        outcome = classify_status(status)
        if outcome is SubmitOutcome.OK:
            logger.info("Data submitted to Graphite successfully!")
        elif outcome is SubmitOutcome.AUTH_ERROR:
            logger.error("Unauthorized (HTTP %d)! Check the token.", status)
        elif outcome is SubmitOutcome.BAD_REQUEST:
            logger.error("Bad request (HTTP %d)!", status)
        else:
            logger.error("Uncaught error writing data (HTTP %d)", status)
        return SubmitResult(outcome, status_code=status)
