"""Exporters and senders for delivering link events to Honeycomb."""

from honeycomb_backlink.exporter.console_sender import ConsoleSender
from honeycomb_backlink.exporter.honeycomb_exporter import (
    HoneycombBacklinkExporter,
    HoneycombBacklinkSpanExporter,
    PushResult,
)
from honeycomb_backlink.exporter.sender import HoneycombSender, Sender

__all__ = [
    "ConsoleSender",
    "HoneycombSender",
    "Sender",
    "HoneycombBacklinkExporter",
    "HoneycombBacklinkSpanExporter",
    "PushResult",
]
