from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class Diagnostics:
    messages: list[str] = field(default_factory=list)

    def add(self, message: str) -> None:
        logger.info(message)
        self.messages.append(message)

    def snapshot(self) -> list[str]:
        return list(self.messages)

    def __iter__(self) -> Iterator[str]:
        return iter(self.messages)

    def __len__(self) -> int:
        return len(self.messages)
