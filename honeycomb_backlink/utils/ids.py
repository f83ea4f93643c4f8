"""Canonical hex encodings for trace and span identifiers."""

from __future__ import annotations

from honeycomb_backlink.errors import PreconditionViolation

TRACE_ID_LENGTH = 16
SPAN_ID_LENGTH = 8


def canonicalize_trace_id(trace_id: bytes) -> str:
    """
    Encode a 16-byte trace id as a hex string.

    Producers often zero-pad legacy 64-bit identifiers into the 128-bit
    field (e.g. 0000000000000000f798a1e7f33c8af6). The id is split into a
    high and a low half; when the high half is zero only the low half is
    encoded, following Jaeger's model/ids.go.

    Args:
        trace_id: Raw trace id, exactly 16 bytes

    Returns:
        16-character hex string for zero-padded ids, 32 characters otherwise

    Raises:
        PreconditionViolation: if trace_id is not 16 bytes long
    """
    if len(trace_id) != TRACE_ID_LENGTH:
        raise PreconditionViolation(
            "trace id must be 16 bytes",
            {"length": len(trace_id)},
        )
    high = int.from_bytes(trace_id[:SPAN_ID_LENGTH], "big")
    low = int.from_bytes(trace_id[SPAN_ID_LENGTH:], "big")
    if high != 0:
        return format(high, "016x") + format(low, "016x")
    return format(low, "016x")


def canonicalize_span_id(span_id: bytes) -> str:
    """
    Encode an 8-byte span id as a lowercase hex string.

    The empty (all-zero) span id encodes as "".

    Raises:
        PreconditionViolation: if span_id is not 8 bytes long
    """
    if len(span_id) != SPAN_ID_LENGTH:
        raise PreconditionViolation(
            "span id must be 8 bytes",
            {"length": len(span_id)},
        )
    if not any(span_id):
        return ""
    return bytes(span_id).hex()
