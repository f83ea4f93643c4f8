"""Translate OTLP span links into flat Honeycomb link events.

Every span link in a batch becomes one independent event. The link's own
target identifiers fill ``trace.trace_id``/``trace.parent_id`` so the event
is queried as part of the linked trace, while the containing span's
identifiers fill ``trace.link.trace_id``/``trace.link.span_id`` and point
back at the origin.

Field merge order is fixed: identifier fields, then resource attributes,
then link attributes. A later write wins on key collision.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from opentelemetry.proto.collector.trace.v1.trace_service_pb2 import ExportTraceServiceRequest
from opentelemetry.proto.trace.v1.trace_pb2 import ResourceSpans, Span, TracesData

from honeycomb_backlink.errors import SerializationError
from honeycomb_backlink.utils.attributes import ScalarValue, flatten_attributes
from honeycomb_backlink.utils.ids import canonicalize_span_id, canonicalize_trace_id
from honeycomb_backlink.utils.timestamps import timestamp_to_datetime

logger = logging.getLogger("honeycomb_backlink.translator")

TRACE_ID_FIELD = "trace.trace_id"
PARENT_ID_FIELD = "trace.parent_id"
LINK_TRACE_ID_FIELD = "trace.link.trace_id"
LINK_SPAN_ID_FIELD = "trace.link.span_id"
ANNOTATION_TYPE_FIELD = "meta.annotation_type"
ANNOTATION_TYPE_LINK = "link"
SERVICE_NAME_KEY = "service.name"

Batch = Union[TracesData, ExportTraceServiceRequest, Iterable[ResourceSpans]]


@dataclass
class LinkEvent:
    """A single link event ready for delivery.

    ``dataset`` and ``timestamp`` travel beside the fields and are never
    part of the payload.
    """

    fields: Dict[str, Any] = field(default_factory=dict)
    dataset: Optional[str] = None
    timestamp: Optional[datetime] = None

    def add_field(self, key: str, value: Any) -> None:
        self.fields[key] = value

    def add(self, values: Dict[str, Any]) -> None:
        for key, value in values.items():
            self.fields[key] = value

    @property
    def trace_id(self) -> Optional[str]:
        return self.fields.get(TRACE_ID_FIELD)

    def to_payload(self) -> Dict[str, ScalarValue]:
        """
        Build the JSON-ready field mapping.

        Raises:
            SerializationError: if a value is not a str/bool/int/float
                scalar, or is a non-finite float
        """
        payload: Dict[str, ScalarValue] = {}
        for key, value in self.fields.items():
            if not isinstance(value, (str, bool, int, float)):
                raise SerializationError(
                    "unsupported field value",
                    {"field": key, "type": type(value).__name__},
                )
            if isinstance(value, float) and not math.isfinite(value):
                raise SerializationError(
                    "non-finite float field value",
                    {"field": key, "value": value},
                )
            payload[key] = value
        return payload


def _dataset_name(value: ScalarValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _resource_spans(batch: Batch) -> Iterable[ResourceSpans]:
    if isinstance(batch, (TracesData, ExportTraceServiceRequest)):
        return batch.resource_spans
    return batch


def build_link_event(
    span: Span,
    link: Span.Link,
    resource_fields: Dict[str, ScalarValue],
) -> LinkEvent:
    """
    Build the link event for one span link.

    Args:
        span: The span carrying the link
        link: The span link
        resource_fields: Flattened attributes of the span's resource

    Returns:
        LinkEvent with identifier fields, merged attributes and dataset

    Raises:
        PreconditionViolation: if any identifier has the wrong length
    """
    event = LinkEvent(timestamp=timestamp_to_datetime(span.start_time_unix_nano))

    event.add_field(TRACE_ID_FIELD, canonicalize_trace_id(link.trace_id))
    parent_id = canonicalize_span_id(link.span_id)
    if parent_id:
        event.add_field(PARENT_ID_FIELD, parent_id)
    event.add_field(LINK_TRACE_ID_FIELD, canonicalize_trace_id(span.trace_id))
    event.add_field(LINK_SPAN_ID_FIELD, canonicalize_span_id(span.span_id))
    event.add_field(ANNOTATION_TYPE_FIELD, ANNOTATION_TYPE_LINK)

    for key, value in resource_fields.items():
        event.add_field(key, value)
        if key == SERVICE_NAME_KEY:
            event.dataset = _dataset_name(value)

    event.add(flatten_attributes(link.attributes))
    return event


def iter_link_events(batch: Batch) -> Iterator[LinkEvent]:
    """
    Walk resource -> scope -> span -> link and yield one event per link.

    Events are yielded lazily in traversal order, so a consumer can send
    each event before the next one is built. The batch is never mutated.
    """
    for resource_spans in _resource_spans(batch):
        resource_fields = flatten_attributes(resource_spans.resource.attributes)
        for scope_spans in resource_spans.scope_spans:
            logger.debug(
                "translating %d spans for scope %s %s",
                len(scope_spans.spans),
                scope_spans.scope.name or "<unnamed>",
                scope_spans.scope.version,
            )
            for span in scope_spans.spans:
                for link in span.links:
                    yield build_link_event(span, link, resource_fields)


def translate(batch: Batch) -> List[LinkEvent]:
    """Translate a batch into the full list of link events."""
    return list(iter_link_events(batch))
