"""Delivery capability for link events.

The exporter only depends on the :class:`Sender` protocol. Any object with a
``send(event, payload)`` method that raises :class:`DeliveryError` on failure
can be injected; :class:`HoneycombSender` is the default network
implementation. The exporter builds and validates the payload with
:meth:`LinkEvent.to_payload` before calling ``send``, so senders never
rebuild it.
"""

from __future__ import annotations

import json
import logging
from typing import Dict, Optional, Protocol, runtime_checkable
from urllib.parse import quote

import requests

from honeycomb_backlink.config import BacklinkConfig, validate_config
from honeycomb_backlink.errors import DeliveryError
from honeycomb_backlink.translator import LinkEvent
from honeycomb_backlink.utils.attributes import ScalarValue
from honeycomb_backlink.utils.timestamps import format_timestamp

logger = logging.getLogger("honeycomb_backlink.sender")

USER_AGENT = "honeycomb-backlink-exporter"


@runtime_checkable
class Sender(Protocol):
    """Sends a single link event, raising DeliveryError on failure.

    ``payload`` is the already-validated result of ``event.to_payload()``.
    """

    def send(self, event: LinkEvent, payload: Dict[str, ScalarValue]) -> None:
        ...


class HoneycombSender:
    """
    Blocking sender for the Honeycomb single-event API.

    Each call to :meth:`send` issues one ``POST /1/events/<dataset>``. There
    is no batching and no retry; failures surface as DeliveryError.
    """

    def __init__(
        self,
        config: BacklinkConfig,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the sender.

        Args:
            config: Validated configuration carrying the API key
            session: Optional requests session (a new one is created otherwise)

        Raises:
            ConfigError: if the configuration cannot initialize delivery
        """
        validate_config(config)
        self.api_host = config.honeycomb.api_host.rstrip("/")
        self.dataset = config.honeycomb.dataset
        self.timeout = config.honeycomb.timeout
        self._session = session or requests.Session()
        self._session.headers.update({
            "X-Honeycomb-Team": config.honeycomb.api_key,
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        })
        self._closed = False

    def send(self, event: LinkEvent, payload: Dict[str, ScalarValue]) -> None:
        """
        Send one link event.

        Args:
            event: Link event carrying dataset and timestamp
            payload: Validated field mapping from ``event.to_payload()``

        Raises:
            DeliveryError: if no dataset is known, the request fails or the
                API rejects the event
        """
        if self._closed:
            raise DeliveryError("sender is closed")

        dataset = event.dataset or self.dataset
        if not dataset:
            raise DeliveryError("no dataset for link event", {"trace_id": event.trace_id})

        headers = {}
        if event.timestamp is not None:
            headers["X-Honeycomb-Event-Time"] = format_timestamp(event.timestamp)

        url = f"{self.api_host}/1/events/{quote(dataset, safe='')}"
        try:
            response = self._session.post(
                url,
                data=json.dumps(payload),
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise DeliveryError(
                "failed to send link event",
                {"dataset": dataset, "error": e},
            ) from e

        if not response.ok:
            raise DeliveryError(
                "link event rejected",
                {"dataset": dataset, "status_code": response.status_code},
            )
        logger.debug("sent link event for trace %s to %s", event.trace_id, dataset)

    def close(self) -> None:
        """Close the underlying HTTP session."""
        if self._closed:
            return
        self._closed = True
        self._session.close()

    def __enter__(self) -> "HoneycombSender":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False
