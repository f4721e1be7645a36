"""Tests for canonical byte encodings."""
import hashlib

import numpy as np
import pytest

from faceproof.core.utils.encoding import (
    BYTES32_LENGTH,
    embedding_to_bytes,
    face_hash,
    parse_hex,
    to_bytes32,
    to_hex,
)


def test_embedding_bytes_are_little_endian_float32():
    assert embedding_to_bytes([1.0, -2.0]) == b"\x00\x00\x80\x3f\x00\x00\x00\xc0"


def test_face_hash_is_sha256_of_float32_bytes(face):
    expected = hashlib.sha256(np.asarray(face, dtype="<f4").tobytes()).digest()

    assert face_hash(face) == expected
    assert len(face_hash(face)) == BYTES32_LENGTH


def test_face_hash_is_deterministic_across_input_types(face):
    assert face_hash(face) == face_hash(face.tolist())
    assert face_hash(face) != face_hash(face * 2)


def test_to_bytes32_left_pads():
    assert to_bytes32(b"\x01\x02") == b"\x00" * 30 + b"\x01\x02"
    assert to_bytes32(b"\xff" * 32) == b"\xff" * 32


def test_to_bytes32_rejects_longer_values():
    with pytest.raises(ValueError):
        to_bytes32(b"\x00" * 33)


@pytest.mark.parametrize("text,expected", [("0x0aFF", b"\x0a\xff"), ("0aff", b"\x0a\xff"), ("0X01", b"\x01"), ("", b"")])
def test_parse_hex(text, expected):
    assert parse_hex(text) == expected


@pytest.mark.parametrize("text", ["0x123", "0xgg", "hello", "0x 12"])
def test_parse_hex_rejects_malformed(text):
    with pytest.raises(ValueError):
        parse_hex(text)


def test_to_hex_round_trip():
    assert to_hex(b"\x00\xab") == "0x00ab"
    assert parse_hex(to_hex(b"\x12\x34")) == b"\x12\x34"
