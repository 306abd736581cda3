"""
Deterministic seeded randomness.

Selection and reducer bonuses must reproduce across runs and ports, so
the algorithms are fixed and documented here rather than delegated to
the platform RNG:

- String hash: FNV-1a, 32 bit. Offset basis 2166136261, prime 16777619,
  applied to the UTF-8 bytes of the key.
- PRNG: Mulberry32 seeded with that hash. Each draw adds 0x6D2B79F5 to
  the state and mixes it down to a float in [0, 1).

All arithmetic is masked to 32 bits.
"""

from dataclasses import dataclass

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619
MASK_32 = 0xFFFFFFFF


def fnv1a_32(text: str) -> int:
    """32-bit FNV-1a hash of a string's UTF-8 bytes."""
    h = FNV_OFFSET_BASIS
    for byte in text.encode("utf-8"):
        h ^= byte
        h = (h * FNV_PRIME) & MASK_32
    return h


def _imul(a: int, b: int) -> int:
    return (a * b) & MASK_32


@dataclass
class Mulberry32:
    """Mulberry32 generator. Small, fast, reproducible."""
    state: int

    def __post_init__(self):
        self.state &= MASK_32

    def next_float(self) -> float:
        """Next float in [0, 1)."""
        self.state = (self.state + 0x6D2B79F5) & MASK_32
        t = self.state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & MASK_32
        t = (t ^ (t >> 14)) & MASK_32
        return t / 4294967296

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], inclusive."""
        return low + int(self.next_float() * (high - low + 1))


def seed_key(*parts: object) -> str:
    """Join seed components into a key. None renders as an empty string."""
    return "|".join("" if p is None else str(p) for p in parts)


def rng_for(*parts: object) -> Mulberry32:
    """PRNG seeded from the FNV-1a hash of the joined parts."""
    return Mulberry32(fnv1a_32(seed_key(*parts)))


def weighted_draw(weights: list[int], rng: Mulberry32) -> int:
    """
    Pick an index with probability proportional to its integer weight.

    Draws r = floor(u * total) and returns the first index whose
    cumulative weight exceeds r. Weights must be non-negative with a
    positive total.
    """
    total = sum(weights)
    if total <= 0:
        raise ValueError("weighted_draw needs a positive total weight")
    roll = int(rng.next_float() * total)
    cumulative = 0
    for index, weight in enumerate(weights):
        cumulative += weight
        if roll < cumulative:
            return index
    return len(weights) - 1
