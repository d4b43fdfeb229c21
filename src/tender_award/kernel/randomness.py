"""
Injected, seed-based randomness

Bid simulation needs random draws (price noise, which contractors fail the
formal check, which rejection template applies). All of them come from a
RandomSource so that the same seed and the same inputs reproduce the same bids.

A stream is derived per context string: SHA-256 of "{seed}:{context}" seeds a
private random.Random. Streams for different contexts are independent, so
bids for different contractors can be generated in any order (or in
parallel) without changing the outcome.

Fun fact: Public lotteries for allocating contracts were used in Renaissance
Venice - the doge himself was elected through rounds of drawing lots!
"""

import hashlib
import random
from typing import Protocol


class RandomSource(Protocol):
    """Protocol for deterministic random streams keyed by context"""

    def stream(self, context: str) -> random.Random:
        """Return a fresh generator for the given context"""
        ...


class SeededRandomSource:
    """
    Deterministic random source derived from a seed string

    Example:
        >>> source = SeededRandomSource("tender-2024")
        >>> a = source.stream("contractor:3").random()
        >>> b = source.stream("contractor:3").random()
        >>> a == b
        True
    """

    def __init__(self, seed: str) -> None:
        if not seed:
            raise ValueError("Seed cannot be empty")
        self.seed = seed

    def stream(self, context: str) -> random.Random:
        digest = hashlib.sha256(f"{self.seed}:{context}".encode("utf-8")).hexdigest()
        return random.Random(int(digest, 16))

    def __repr__(self) -> str:
        return f"SeededRandomSource(seed={self.seed!r})"


DEFAULT_SEED = "tender-award"

default_random_source = SeededRandomSource(DEFAULT_SEED)
