"""Conversion between byte strings and the integers RSA operates on.

Everything here is big-endian and unsigned. `encode`/`decode` are the variable-length pair used for textbook
messages, while `bytes_to_integer`/`integer_to_bytes` handle the fixed-length octet strings found in DER payloads.

Leading NUL bytes are invisible to the integer representation, so `decode(encode(b"\\x00hi"))` yields `b"hi"`.
Callers needing exact round trips of such input must carry the length themselves.

Typical usage example:

    m = encode("hi")
    text, length = decode(m)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


def bytes_to_integer(msg: bytes) -> int:
    """Converts a byte string to an integer in accordance to preset procedures.

    Args:
        msg: The bytes (AKA Octet String) to convert.

    Returns:
        The representative integer.
    """
    return int.from_bytes(msg, byteorder="big", signed=False)


def integer_to_bytes(msg: int, fixedlen: int) -> bytes:
    """Converts an integer to a string, using a fixed-length byte representation.

    Args:
        msg: The integer to unmarshal.
        fixedlen: The target length of the byte string.

    Returns:
        The representative bytes. (AKA Octet String)
    """
    return msg.to_bytes(fixedlen, byteorder="big", signed=False)


def encode(text: bytes | str, encoding: str = "utf-8") -> int:
    """Interprets a message as a big-endian unsigned integer.

    Args:
        text: The message. Strings are encoded with `encoding` first.
        encoding: Text encoding applied to `str` input. Defaults to utf-8.

    Returns:
        The message representative. Empty input gives 0.
    """
    if isinstance(text, str):
        text = text.encode(encoding)
    return bytes_to_integer(text)


def decode(value: int) -> tuple[bytes, int]:
    """Produces the minimal big-endian byte string for a non-negative integer.

    Args:
        value: The integer to unmarshal.

    Returns:
        Tuple of (bytes, byte count). Zero gives (b"", 0).

    Raises:
        ValueError: If `value` is negative.
    """
    if value < 0:
        raise ValueError("Cannot decode a negative integer")
    count = (value.bit_length() + 7) // 8
    return integer_to_bytes(value, count), count
