"""
Canonical byte encodings for face hashes and key material.

The registry stores the face hash as a fixed 32-byte word. There is exactly one
way to produce it:

    face_hash = SHA-256(embedding as little-endian float32 bytes)

and exactly one way to widen a shorter value to 32 bytes: left-pad with zero
bytes. Values longer than 32 bytes are rejected, never truncated.
"""
import hashlib
import re
from typing import Sequence, Union

import numpy as np

BYTES32_LENGTH = 32

_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")


def embedding_to_bytes(embedding: Union[np.ndarray, Sequence[float]]) -> bytes:
    """Serialize an embedding as little-endian float32 bytes.

    Args:
        embedding: Embedding vector

    Returns:
        bytes: 4 * len(embedding) bytes
    """
    return np.asarray(embedding, dtype="<f4").tobytes()


def face_hash(embedding: Union[np.ndarray, Sequence[float]]) -> bytes:
    """Compute the 32-byte face hash of an embedding."""
    return hashlib.sha256(embedding_to_bytes(embedding)).digest()


def to_bytes32(value: bytes) -> bytes:
    """Widen a value to exactly 32 bytes.

    Args:
        value: Raw bytes, at most 32 long

    Returns:
        bytes: The value left-padded with zero bytes to 32 bytes

    Raises:
        ValueError: If the value is longer than 32 bytes
    """
    if len(value) > BYTES32_LENGTH:
        raise ValueError(f"Value is {len(value)} bytes, expected at most {BYTES32_LENGTH}")
    return value.rjust(BYTES32_LENGTH, b"\x00")


def parse_hex(text: str) -> bytes:
    """Parse a hex string with an optional 0x prefix.

    Raises:
        ValueError: If the string contains non-hex characters or has odd length
    """
    raw = text[2:] if text[:2].lower() == "0x" else text
    if not _HEX_RE.match(raw):
        raise ValueError("Value is not a hex string")
    if len(raw) % 2:
        raise ValueError("Hex string has an odd number of digits")
    return bytes.fromhex(raw)


def to_hex(value: bytes) -> str:
    """Render bytes as 0x-prefixed lowercase hex."""
    return "0x" + value.hex()
