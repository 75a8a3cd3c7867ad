"""Autokey XOR obfuscation used by the power strip firmware.

Every byte is XORed with a key that starts at 171 and is then replaced by the
ciphertext byte just produced, so the same rule drives both directions. This
is obfuscation only; anyone on the LAN can read the traffic.

TCP exchanges additionally carry a 4-byte big-endian length header in front of
the ciphertext. UDP never does, the datagram already delimits the message.
"""

from __future__ import annotations

import struct

from powerstrip.errors import EncodingError, ProtocolError

INITIAL_KEY = 171
WIRE_CHARSET = "latin-1"
HEADER = struct.Struct(">I")
HEADER_SIZE = HEADER.size


def obfuscate(plaintext: bytes) -> bytes:
    key = INITIAL_KEY
    result = bytearray()
    for byte in plaintext:
        key ^= byte
        result.append(key)
    return bytes(result)


def deobfuscate(ciphertext: bytes) -> bytes:
    key = INITIAL_KEY
    result = bytearray()
    for byte in ciphertext:
        result.append(key ^ byte)
        key = byte
    return bytes(result)


def encode_payload(command: str, prepend_length: bool = False) -> bytes:
    """Encode a JSON command for the wire.

    Characters outside the single-byte table are replaced with ``?``.
    """
    plain = command.encode(WIRE_CHARSET, errors="replace")
    payload = obfuscate(plain)
    if prepend_length:
        return HEADER.pack(len(payload)) + payload
    return payload


def decode_payload(data: bytes) -> str:
    """Recover the JSON text from an unframed reply.

    Raises EncodingError when the recovered bytes are not UTF-8.
    """
    plain = deobfuscate(data)
    try:
        return plain.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise EncodingError(
            f"Reply of {len(data)} bytes is not valid UTF-8: {exc.reason}"
        ) from exc


def read_length_prefix(header: bytes) -> int:
    """Return the payload length announced by a TCP frame header."""
    if len(header) != HEADER_SIZE:
        raise ProtocolError(
            f"Length header must be {HEADER_SIZE} bytes, got {len(header)}"
        )
    (length,) = HEADER.unpack(header)
    return int(length)
