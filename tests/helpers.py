"""Test helpers for building memories with hand-picked encodings."""

from qmf import Memory, Quaternion


SCENARIO_TEXTS = [
    "machine learning",
    "machine learning algorithms",
    "deep learning neural networks",
    "cooking italian pasta",
    "italian food recipes",
    "quantum physics theory",
]


def make_memory(quaternion, signature, content="x", memory_id="m", timestamp=0.0):
    """Memory with a hand-picked encoding, bypassing the encoder."""
    if not isinstance(quaternion, Quaternion):
        quaternion = Quaternion(*quaternion)
    return Memory(
        id=memory_id,
        content=content,
        quaternion=quaternion,
        prime_signature=tuple(signature),
        timestamp=timestamp,
    )
