from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator

from pda_core.trace import Action, Trace


class TraceSource(ABC):
    @abstractmethod
    def input_string(self) -> str:
        ...

    @abstractmethod
    def stream_actions(self) -> Iterator[Action]:
        ...

    def load(self) -> Trace:
        return Trace(self.input_string(), list(self.stream_actions()))
