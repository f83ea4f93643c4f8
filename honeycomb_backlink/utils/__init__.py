"""Utility functions for the backlink exporter."""

from honeycomb_backlink.utils.attributes import (
    ScalarValue,
    any_value_to_scalar,
    flatten_attributes,
)
from honeycomb_backlink.utils.ids import canonicalize_span_id, canonicalize_trace_id
from honeycomb_backlink.utils.timestamps import format_timestamp, timestamp_to_datetime

__all__ = [
    "ScalarValue",
    "any_value_to_scalar",
    "flatten_attributes",
    "canonicalize_trace_id",
    "canonicalize_span_id",
    "timestamp_to_datetime",
    "format_timestamp",
]
