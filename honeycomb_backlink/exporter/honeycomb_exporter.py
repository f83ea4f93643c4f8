"""Link event exporter: traverses span batches and emits one event per link."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from opentelemetry.exporter.otlp.proto.common.trace_encoder import encode_spans
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult

from honeycomb_backlink.config import BacklinkConfig, load_config
from honeycomb_backlink.errors import (
    BacklinkError,
    ConfigError,
    DeliveryError,
    SerializationError,
)
from honeycomb_backlink.exporter.sender import HoneycombSender, Sender
from honeycomb_backlink.translator import Batch, iter_link_events

ErrorCallback = Callable[[BacklinkError], None]


@dataclass
class PushResult:
    """Outcome of one push. Per-event failures never fail the push itself."""

    sent: int = 0
    failed: int = 0
    errors: List[BacklinkError] = field(default_factory=list)


class HoneycombBacklinkExporter:
    """
    Builds and sends link events for every span link in a batch.

    The traversal is synchronous: each event is sent (one blocking call to
    the sender) before the next link is visited. A failure to build or send
    one event is logged, passed to ``on_error`` and skipped.
    """

    def __init__(
        self,
        config: Optional[BacklinkConfig] = None,
        sender: Optional[Sender] = None,
        on_error: Optional[ErrorCallback] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Initialize the exporter.

        Args:
            config: Configuration used to build a HoneycombSender when no
                sender is injected
            sender: Delivery capability; not closed by :meth:`shutdown`
            on_error: Callback receiving each per-event error (defaults to
                a warning log)
            logger: Logger for error reporting

        Raises:
            ConfigError: if neither config nor sender is given, or the
                config cannot initialize delivery
        """
        self.logger = logger or logging.getLogger("honeycomb_backlink.exporter")
        self.config = config

        if sender is None:
            if config is None:
                raise ConfigError("a config or a sender is required")
            sender = HoneycombSender(config)
            self._owns_sender = True
        else:
            self._owns_sender = False
        self.sender = sender

        self.on_error = on_error or (lambda err: self.logger.warning(str(err)))
        self._shutdown = False

    @classmethod
    def from_config(
        cls,
        config_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ) -> "HoneycombBacklinkExporter":
        """
        Build an exporter from file/environment/explicit configuration.

        When ``logging.debug`` is set, the ``honeycomb_backlink`` logger is
        switched to DEBUG. The plain constructor never touches logger levels.
        """
        config = load_config(config_file=config_file, overrides=overrides)
        if config.logging.debug:
            logging.getLogger("honeycomb_backlink").setLevel(logging.DEBUG)
        return cls(config=config, **kwargs)

    def push_trace_data(self, batch: Batch) -> PushResult:
        """
        Emit one link event per span link in the batch.

        Args:
            batch: TracesData, ExportTraceServiceRequest or iterable of
                ResourceSpans

        Returns:
            PushResult counting sent and failed events

        Raises:
            PreconditionViolation: if an identifier in the batch has the
                wrong length; events visited before it were already sent
            DeliveryError: if the exporter has been shut down
        """
        if self._shutdown:
            raise DeliveryError("exporter is shut down")

        result = PushResult()
        for event in iter_link_events(batch):
            try:
                payload = event.to_payload()
                self.sender.send(event, payload)
            except (SerializationError, DeliveryError) as e:
                self._report(e, result)
                continue
            except Exception as e:
                err = DeliveryError("sender failed", {"error": e})
                err.__cause__ = e
                self._report(err, result)
                continue
            result.sent += 1

        self.logger.debug("pushed link events: sent=%d failed=%d", result.sent, result.failed)
        return result

    def _report(self, err: BacklinkError, result: PushResult) -> None:
        result.failed += 1
        result.errors.append(err)
        self.logger.error(str(err))
        try:
            self.on_error(err)
        except Exception:
            self.logger.exception("error callback failed")

    def shutdown(self) -> None:
        """Stop accepting pushes and release an owned sender."""
        if self._shutdown:
            return
        self._shutdown = True
        if self._owns_sender:
            close = getattr(self.sender, "close", None)
            if close is not None:
                close()

    def __enter__(self) -> "HoneycombBacklinkExporter":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.shutdown()
        return False


class HoneycombBacklinkSpanExporter(SpanExporter):
    """
    OpenTelemetry SDK exporter wrapping :class:`HoneycombBacklinkExporter`.

    Finished spans are encoded to OTLP protobuf and pushed as link events.
    Use with the SDK's BatchSpanProcessor or SimpleSpanProcessor.
    """

    def __init__(self, exporter: HoneycombBacklinkExporter) -> None:
        self._exporter = exporter
        self._shutdown = False

    @classmethod
    def from_config(cls, **kwargs: Any) -> "HoneycombBacklinkSpanExporter":
        return cls(HoneycombBacklinkExporter.from_config(**kwargs))

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        """
        Push link events for a batch of finished spans.

        Returns SUCCESS even when individual link events fail; those are
        reported through the exporter's error callback.
        """
        if self._shutdown:
            return SpanExportResult.FAILURE
        if not spans:
            return SpanExportResult.SUCCESS
        self._exporter.push_trace_data(encode_spans(spans))
        return SpanExportResult.SUCCESS

    def shutdown(self) -> None:
        if self._shutdown:
            return
        self._shutdown = True
        self._exporter.shutdown()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        # Every send completes inside export(); nothing is buffered here.
        return True
