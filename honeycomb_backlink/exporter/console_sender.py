"""Console sender for developer visibility and dry runs."""

from __future__ import annotations

import sys
from typing import Dict

from honeycomb_backlink.translator import LinkEvent
from honeycomb_backlink.utils.attributes import ScalarValue


class ConsoleSender:
    """Simple sender that prints link events to stdout (or provided stream)."""

    def __init__(self, stream=None) -> None:
        self.stream = stream or sys.stdout

    def send(self, event: LinkEvent, payload: Dict[str, ScalarValue]) -> None:
        line = f"[link] dataset={event.dataset or '-'}"
        if event.timestamp is not None:
            line += f" time={event.timestamp.isoformat()}"
        line += f" fields={payload}"
        print(line, file=self.stream)

    def close(self) -> None:
        return None
