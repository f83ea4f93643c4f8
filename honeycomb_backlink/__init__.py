"""Honeycomb backlink exporter: emits one Honeycomb event per OTLP span link."""

from honeycomb_backlink.config import BacklinkConfig, load_config
from honeycomb_backlink.errors import (
    BacklinkError,
    ConfigError,
    DeliveryError,
    PreconditionViolation,
    SerializationError,
)
from honeycomb_backlink.exporter import (
    ConsoleSender,
    HoneycombBacklinkExporter,
    HoneycombBacklinkSpanExporter,
    HoneycombSender,
    PushResult,
    Sender,
)
from honeycomb_backlink.translator import LinkEvent, iter_link_events, translate

__version__ = "0.1.0"

__all__ = [
    "BacklinkConfig",
    "load_config",
    "BacklinkError",
    "ConfigError",
    "DeliveryError",
    "PreconditionViolation",
    "SerializationError",
    "ConsoleSender",
    "HoneycombBacklinkExporter",
    "HoneycombBacklinkSpanExporter",
    "HoneycombSender",
    "PushResult",
    "Sender",
    "LinkEvent",
    "iter_link_events",
    "translate",
]
