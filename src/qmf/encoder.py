"""
Prime-Harmonic Text Encoder

Maps a string onto the memory field as a pair (quaternion, prime signature).

Encoding:
    1. Lowercase the text (encoding is case-insensitive)
    2. For character i with code point c:   p[i] = PRIMES[(c + i) mod 100]
    3. For every p[i] (duplicates included): φ[i] = p[i] · (i + 1) / 1000
    4. Accumulate harmonics
           w += cos(φ)
           x += sin(φ) · cos(2φ)
           y += sin(2φ) · cos(φ)
           z += sin(φ) · sin(2φ)
    5. Divide by n = len(p) (1 for empty text) and normalize

The signature is p deduplicated (first occurrence kept). Only set
membership matters downstream; the order is informational.

The encoder is a pure function of the text: no hidden state, no randomness.
"""

import math
from dataclasses import dataclass
from typing import List, Tuple

from .quaternion import InvalidInputError, Quaternion, normalize


# First 100 primes (2..541)
PRIMES: Tuple[int, ...] = (
    2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53, 59, 61, 67, 71,
    73, 79, 83, 89, 97, 101, 103, 107, 109, 113, 127, 131, 137, 139, 149, 151,
    157, 163, 167, 173, 179, 181, 191, 193, 197, 199, 211, 223, 227, 229, 233,
    239, 241, 251, 257, 263, 269, 271, 277, 281, 283, 293, 307, 311, 313, 317,
    331, 337, 347, 349, 353, 359, 367, 373, 379, 383, 389, 397, 401, 409, 419,
    421, 431, 433, 439, 443, 449, 457, 461, 463, 467, 479, 487, 491, 499, 503,
    509, 521, 523, 541,
)

PRIME_SET = frozenset(PRIMES)

# Phase scale: φ = prime · (i + 1) / PHASE_SCALE
PHASE_SCALE = 1000.0


@dataclass(frozen=True)
class EncodedText:
    """Encoder output: unit quaternion plus deduplicated prime signature."""
    quaternion: Quaternion
    prime_signature: Tuple[int, ...]


def _require_text(text) -> str:
    if not isinstance(text, str):
        raise InvalidInputError(f"text must be a str, got {type(text).__name__}")
    return text


def prime_sequence(text: str) -> List[int]:
    """Raw (non-deduplicated) prime sequence for the lowercased text."""
    text = _require_text(text).lower()
    return [PRIMES[(ord(ch) + i) % len(PRIMES)] for i, ch in enumerate(text)]


def encode_text(text: str) -> EncodedText:
    """
    Encode text into the memory field.

    Args:
        text: Any string; the empty string is valid

    Returns:
        EncodedText. Empty text gives an empty signature and the
        identity quaternion (1, 0, 0, 0).

    Raises:
        InvalidInputError: text is not a str
    """
    sequence = prime_sequence(text)

    w = x = y = z = 0.0
    for i, prime in enumerate(sequence):
        phase = (prime * (i + 1)) / PHASE_SCALE
        w += math.cos(phase)
        x += math.sin(phase) * math.cos(phase * 2)
        y += math.sin(phase * 2) * math.cos(phase)
        z += math.sin(phase) * math.sin(phase * 2)

    n = len(sequence) or 1
    quaternion = normalize(Quaternion(w / n, x / n, y / n, z / n))

    # dict preserves first-occurrence order while dropping repeats
    signature = tuple(dict.fromkeys(sequence))
    return EncodedText(quaternion=quaternion, prime_signature=signature)
