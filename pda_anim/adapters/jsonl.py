from __future__ import annotations

import json
from typing import Iterator

from pda_anim.adapters.base import TraceSource
from pda_core.errors import TraceFormatError
from pda_core.trace import Action, action_from_dict


class JsonlTraceSource(TraceSource):
    """Trace stored one JSON object per line: a ``{"string": ...}`` header, then one action per line."""

    def __init__(self, path: str):
        self.path = path

    def _objects(self) -> Iterator[dict]:
        with open(self.path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                yield json.loads(line)

    def input_string(self) -> str:
        for obj in self._objects():
            string = obj.get("string") if isinstance(obj, dict) else None
            if not isinstance(string, str):
                raise TraceFormatError(f"{self.path}: first record must carry the input 'string'")
            return string
        raise TraceFormatError(f"{self.path}: empty trace stream")

    def stream_actions(self) -> Iterator[Action]:
        objects = self._objects()
        next(objects, None)  # header
        for i, obj in enumerate(objects):
            yield action_from_dict(obj, i)
