"""Frame packing and parsing for the desk controller's serial protocol."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass

HEADER = 0xA5
DEVICE_TYPE = 0x03
MAX_PAYLOAD_LENGTH = 200


class Command(enum.IntEnum):
    """Command codes used on the wire."""

    SET = 0x01
    GET = 0x03
    REPORT = 0x10
    HEARTBEAT = 0x20


_DATA_COMMANDS = frozenset({Command.GET, Command.REPORT})


@dataclass(frozen=True)
class Frame:
    """A checksum-valid frame received from the controller."""

    cmd: int
    version: str = ""
    data: bytes = b""


def _checksum(data: Iterable[int]) -> int:
    return sum(data) & 0xFF


def _as_bytes(values: Iterable[int]) -> bytes:
    return bytes(value & 0xFF for value in values)


def _pack(cmd: int, length: int, payload: bytes) -> bytes:
    frame = bytearray((HEADER, HEADER, DEVICE_TYPE, cmd, 0x00, length & 0xFF, 0x00))
    frame += payload
    frame.append(_checksum(frame))
    return bytes(frame)


def pack_get(attr_ids: Iterable[int]) -> bytes:
    """Build a GET request for the given attribute ids."""
    payload = _as_bytes(attr_ids)
    return _pack(Command.GET, len(payload) + 1, payload)


def pack_set(values: Iterable[int]) -> bytes:
    """Build a SET request carrying raw (type, attribute, value...) bytes."""
    payload = _as_bytes(values)
    return _pack(Command.SET, len(payload) + 1, payload)


def pack_heartbeat() -> bytes:
    """Build the heartbeat reply frame."""
    return _pack(Command.HEARTBEAT, 0, b"")


class FrameParser:
    """Incremental parser for frames sent by the controller.

    A frame is ``A5 A5 yy mm dd cmd lenH lenL`` followed by ``lenL`` bytes
    (message id and payload) and a one-byte additive checksum.
    """

    def __init__(self) -> None:
        self._buffer = bytearray()
        self._count = 0

    def _reject(self) -> None:
        self._count = 0
        buffer = self._buffer
        buffer[0] = 0
        if len(buffer) > 1:
            buffer[1] = 0
        if len(buffer) > 7:
            buffer[7] = 0

    def feed(self, chunk: Iterable[int]) -> Frame | None:
        """Consume received bytes; return a frame if one completed in this chunk."""
        buffer = self._buffer
        complete = False
        for byte in chunk:
            buffer.append(byte & 0xFF)
            if buffer[0] != HEADER:
                self._count = 0
                buffer.clear()
                continue
            if self._count > 7 and self._count >= buffer[7] + 8:
                complete = True
            else:
                self._count += 1
            if (self._count > 1 and buffer[1] != HEADER) or (
                self._count > 7 and buffer[7] > MAX_PAYLOAD_LENGTH
            ):
                self._reject()

        if not complete:
            return None

        end = self._count
        frame = None
        if _checksum(buffer[:end]) == buffer[end]:
            cmd = buffer[5]
            data = bytes(buffer[9 : 8 + buffer[7]]) if cmd in _DATA_COMMANDS else b""
            version = f"{buffer[2]}年{buffer[3]}月{buffer[4]}日"
            frame = Frame(cmd=cmd, version=version, data=data)
        self._count = 0
        buffer.clear()
        return frame