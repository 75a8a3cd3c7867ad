"""One-shot TCP and UDP exchanges with a power strip."""

from __future__ import annotations

import logging
import socket
from enum import Enum

from powerstrip.codec import (
    HEADER_SIZE,
    decode_payload,
    encode_payload,
    read_length_prefix,
)
from powerstrip.errors import ProtocolError, TransportError

logger = logging.getLogger(__name__)

RECV_CHUNK_SIZE = 4096

DEFAULT_PORT = 9999
DEFAULT_TIMEOUT = 2.0


class Transport(str, Enum):
    TCP = "tcp"
    UDP = "udp"


class TransportClient:
    """Send a command and return the decoded reply.

    Every call opens a fresh socket and closes it before returning; nothing is
    pooled. UDP replies are read into a fixed buffer, so a reply longer than
    ``UDP_BUFFER_SIZE`` bytes is truncated and will usually fail to parse. A
    TCP length header above ``TCP_MAX_REPLY`` is rejected before reading.
    """

    UDP_BUFFER_SIZE = 2048
    TCP_MAX_REPLY = 64 * 1024

    def __init__(
        self, ip: str, port: int = DEFAULT_PORT, timeout: float = DEFAULT_TIMEOUT
    ) -> None:
        self.ip = ip
        self.port = port
        self.timeout = timeout

    @property
    def address(self) -> tuple[str, int]:
        return (self.ip, self.port)

    def send(self, command: str, transport: Transport) -> str:
        if transport is Transport.TCP:
            return self.send_tcp(command)
        return self.send_udp(command)

    def send_udp(self, command: str, timeout: float | None = None) -> str:
        deadline = self.timeout if timeout is None else timeout
        payload = encode_payload(command)
        logger.debug(
            "UDP -> %s:%d (%d bytes) %s", self.ip, self.port, len(payload), command
        )

        try:
            with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
                sock.bind(("", 0))
                sock.settimeout(deadline)
                sock.sendto(payload, self.address)
                data, _addr = sock.recvfrom(self.UDP_BUFFER_SIZE)
        except TimeoutError as exc:
            raise TransportError(
                f"No UDP reply from {self.ip}:{self.port} within {deadline:.2f}s"
            ) from exc
        except OSError as exc:
            raise TransportError(
                f"UDP exchange with {self.ip}:{self.port} failed: {exc}"
            ) from exc

        logger.debug("UDP <- %s:%d (%d bytes)", self.ip, self.port, len(data))
        return decode_payload(data)

    def send_tcp(self, command: str, timeout: float | None = None) -> str:
        deadline = self.timeout if timeout is None else timeout
        payload = encode_payload(command, prepend_length=True)
        logger.debug(
            "TCP -> %s:%d (%d bytes) %s", self.ip, self.port, len(payload), command
        )

        try:
            with socket.create_connection(self.address, timeout=deadline) as sock:
                sock.sendall(payload)
                length = read_length_prefix(_recv_exactly(sock, HEADER_SIZE))
                if length > self.TCP_MAX_REPLY:
                    raise ProtocolError(
                        f"TCP reply announces {length} bytes, "
                        f"limit is {self.TCP_MAX_REPLY}"
                    )
                data = _recv_exactly(sock, length)
        except TimeoutError as exc:
            raise TransportError(
                f"No TCP reply from {self.ip}:{self.port} within {deadline:.2f}s"
            ) from exc
        except OSError as exc:
            raise TransportError(
                f"TCP exchange with {self.ip}:{self.port} failed: {exc}"
            ) from exc

        logger.debug("TCP <- %s:%d (%d bytes)", self.ip, self.port, len(data))
        return decode_payload(data)


def _recv_exactly(sock: socket.socket, size: int) -> bytes:
    buffer = bytearray()
    while len(buffer) < size:
        chunk = sock.recv(min(size - len(buffer), RECV_CHUNK_SIZE))
        if not chunk:
            raise TransportError(
                f"Connection closed after {len(buffer)} of {size} bytes"
            )
        buffer.extend(chunk)
    return bytes(buffer)
