"""Flatten OTLP typed attributes into plain scalar mappings."""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Union

from opentelemetry.proto.common.v1.common_pb2 import AnyValue, KeyValue

ScalarValue = Union[str, bool, int, float]

# AnyValue oneof members that survive flattening.
_SCALAR_KINDS = ("string_value", "bool_value", "int_value", "double_value")


def any_value_to_scalar(value: AnyValue) -> Optional[ScalarValue]:
    """
    Convert an OTLP AnyValue to its scalar payload.

    Args:
        value: OTLP AnyValue

    Returns:
        The str/bool/int/float payload, or None for arrays, key-value
        lists, bytes and unset values
    """
    kind = value.WhichOneof("value")
    if kind not in _SCALAR_KINDS:
        return None
    return getattr(value, kind)


def flatten_attributes(attributes: Iterable[KeyValue]) -> Dict[str, ScalarValue]:
    """
    Convert a repeated KeyValue attribute collection into a scalar dict.

    Only string, bool, int64 and double values are kept. Other kinds are
    dropped silently. A repeated key keeps its last scalar value.
    """
    flattened: Dict[str, ScalarValue] = {}
    for attr in attributes:
        scalar = any_value_to_scalar(attr.value)
        if scalar is None:
            continue
        flattened[attr.key] = scalar
    return flattened
