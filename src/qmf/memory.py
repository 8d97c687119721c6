"""
Memory records for the field.

A Memory pairs the original text with its encoding. Records are created once
and never modified; the collection that holds them belongs to the caller.
"""

import random
import time
import uuid
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .encoder import encode_text
from .quaternion import InvalidInputError, Quaternion


# Vocabulary for generated stress-test memories
RANDOM_WORDS = (
    "alpha", "beta", "gamma", "delta", "epsilon",
    "zeta", "eta", "theta", "iota", "kappa",
)
RANDOM_MIN_WORDS = 3
RANDOM_MAX_WORDS = 7


@dataclass(frozen=True)
class Memory:
    """
    Stored record.

    Attributes:
        id: Opaque identifier, unique within the owning collection
        content: Original text
        quaternion: Unit quaternion from the encoder
        prime_signature: Deduplicated prime signature
        timestamp: Creation time (seconds since epoch)
    """
    id: str
    content: str
    quaternion: Quaternion
    prime_signature: Tuple[int, ...]
    timestamp: float


def _new_id(rng: Optional[random.Random]) -> str:
    if rng is None:
        return str(uuid.uuid4())
    # Seeded ids keep generated fields reproducible
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))


def create_memory(
    content: str,
    memory_id: Optional[str] = None,
    timestamp: Optional[float] = None,
) -> Memory:
    """
    Encode content and wrap it in a Memory.

    Args:
        content: Text to store
        memory_id: Identifier; a uuid4 string is generated when omitted
        timestamp: Creation time; defaults to time.time()
    """
    encoded = encode_text(content)
    if memory_id is not None and not isinstance(memory_id, str):
        raise InvalidInputError(f"memory_id must be a str, got {type(memory_id).__name__}")
    return Memory(
        id=memory_id if memory_id is not None else _new_id(None),
        content=content,
        quaternion=encoded.quaternion,
        prime_signature=encoded.prime_signature,
        timestamp=time.time() if timestamp is None else float(timestamp),
    )


def generate_random_memory(rng: Optional[random.Random] = None) -> Memory:
    """Random 3-7 word memory over the Greek-letter vocabulary."""
    source = rng if rng is not None else random
    words = RANDOM_MIN_WORDS + source.randrange(RANDOM_MAX_WORDS - RANDOM_MIN_WORDS + 1)
    content = " ".join(source.choice(RANDOM_WORDS) for _ in range(words))
    return create_memory(content, memory_id=_new_id(rng))


def generate_random_memories(count: int, rng: Optional[random.Random] = None) -> List[Memory]:
    if count < 0:
        raise InvalidInputError(f"count must be non-negative, got {count}")
    return [generate_random_memory(rng) for _ in range(count)]
