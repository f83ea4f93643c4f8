"""Shared builders for OTLP protobuf batches and a recording sender."""

from typing import Any, Dict, List, Optional

import pytest

from opentelemetry.proto.common.v1.common_pb2 import (
    AnyValue,
    ArrayValue,
    InstrumentationScope,
    KeyValue,
    KeyValueList,
)
from opentelemetry.proto.resource.v1.resource_pb2 import Resource
from opentelemetry.proto.trace.v1.trace_pb2 import (
    ResourceSpans,
    ScopeSpans,
    Span,
    Status,
    TracesData,
)

from honeycomb_backlink.errors import DeliveryError

SPAN_TRACE_ID = bytes.fromhex("4bf92f3577b34da6a3ce929d0e0e4736")
SPAN_ID = bytes.fromhex("00f067aa0ba902b7")
LINK_TRACE_ID = bytes.fromhex("00000000000000000123456789abcdef")
LINK_SPAN_ID = bytes.fromhex("b7ad6b7169203331")


def any_value(value: Any) -> AnyValue:
    if value is None:
        return AnyValue()
    if isinstance(value, bool):
        return AnyValue(bool_value=value)
    if isinstance(value, int):
        return AnyValue(int_value=value)
    if isinstance(value, float):
        return AnyValue(double_value=value)
    if isinstance(value, str):
        return AnyValue(string_value=value)
    if isinstance(value, bytes):
        return AnyValue(bytes_value=value)
    if isinstance(value, list):
        return AnyValue(array_value=ArrayValue(values=[any_value(v) for v in value]))
    if isinstance(value, dict):
        return AnyValue(kvlist_value=KeyValueList(values=attributes(value)))
    raise TypeError(f"unsupported attribute value {value!r}")


def attributes(values: Optional[Dict[str, Any]]) -> List[KeyValue]:
    return [KeyValue(key=k, value=any_value(v)) for k, v in (values or {}).items()]


def make_link(
    trace_id: bytes = LINK_TRACE_ID,
    span_id: bytes = LINK_SPAN_ID,
    attrs: Optional[Dict[str, Any]] = None,
) -> Span.Link:
    return Span.Link(trace_id=trace_id, span_id=span_id, attributes=attributes(attrs))


def make_span(
    links: Optional[List[Span.Link]] = None,
    trace_id: bytes = SPAN_TRACE_ID,
    span_id: bytes = SPAN_ID,
    start_time_unix_nano: int = 1_000_000_000,
    name: str = "operation",
) -> Span:
    return Span(
        trace_id=trace_id,
        span_id=span_id,
        name=name,
        start_time_unix_nano=start_time_unix_nano,
        status=Status(code=Status.STATUS_CODE_OK),
        links=links or [],
    )


def make_scope_spans(
    spans: List[Span],
    scope_name: str = "test.scope",
    scope_version: str = "1.0.0",
) -> ScopeSpans:
    return ScopeSpans(
        scope=InstrumentationScope(name=scope_name, version=scope_version),
        spans=spans,
    )


def make_resource_spans(
    spans: List[Span],
    resource_attrs: Optional[Dict[str, Any]] = None,
    scope_name: str = "test.scope",
    scope_version: str = "1.0.0",
) -> ResourceSpans:
    return make_multi_scope_resource_spans(
        [make_scope_spans(spans, scope_name, scope_version)],
        resource_attrs,
    )


def make_multi_scope_resource_spans(
    scopes: List[ScopeSpans],
    resource_attrs: Optional[Dict[str, Any]] = None,
) -> ResourceSpans:
    return ResourceSpans(
        resource=Resource(attributes=attributes(resource_attrs)),
        scope_spans=scopes,
    )


def make_batch(*resource_spans: ResourceSpans) -> TracesData:
    return TracesData(resource_spans=list(resource_spans))


class RecordingSender:
    """Sender that keeps every event and can fail on chosen calls."""

    def __init__(self, fail_on=(), error=None):
        self.events = []
        self.payloads = []
        self.attempts = 0
        self.fail_on = set(fail_on)
        self.error = error
        self.closed = False

    def send(self, event, payload):
        index = self.attempts
        self.attempts += 1
        if index in self.fail_on:
            raise self.error or DeliveryError("send failed", {"index": index})
        self.events.append(event)
        self.payloads.append(payload)

    def close(self):
        self.closed = True


@pytest.fixture
def recorder():
    return RecordingSender()
