from __future__ import annotations

import pytest


class FixedRandom:
    """Returns queued values in order; records every (a, b) request."""

    def __init__(self, values):
        self._values = list(values)
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        if not self._values:
            raise RuntimeError("FixedRandom exhausted")
        return self._values.pop(0)


@pytest.fixture
def fixed_random():
    return FixedRandom
