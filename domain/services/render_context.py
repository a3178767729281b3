from __future__ import annotations

import random
import time
from dataclasses import dataclass, field

MAX_SEED = 2**31 - 1


@dataclass
class RenderContext:
    seed: int | None = None
    timestamp: int | None = None
    counter: int = 0
    rng: random.Random = field(init=False, repr=False)
    nonce: int = field(init=False)

    def __post_init__(self) -> None:
        self.rng = random.Random(self.seed)
        if self.timestamp is None:
            self.timestamp = int(time.time() * 1000)
        # Separates contexts created in the same millisecond.
        self.nonce = self.rng.randint(1, MAX_SEED)

    def next_id(self, prefix: str) -> str:
        self.counter += 1
        return f"{prefix}_{self.timestamp}_{self.nonce:x}_{self.counter}"

    def rand_seed(self) -> int:
        return self.rng.randint(1, MAX_SEED)
