"""Parser for the older serial helper's reply format."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

HEADER = 0xA5
REPORT_COMMAND = 0x04
MAX_FRAME_LENGTH = 200
MAX_ATTRIBUTE_ID = 16


@dataclass(frozen=True)
class LegacyFrame:
    """A checksum-valid frame.

    ``cmd`` is 0 for a frame that is not an accepted attribute report; for
    an accepted report ``data`` holds the whole frame.
    """

    cmd: int
    data: bytes = b""


class LegacyFrameParser:
    """Incremental parser for frames of the form ``A5 len ... checksum``.

    The second byte is the total frame length including the checksum.
    """

    def __init__(self) -> None:
        self._buffer = bytearray()
        self._count = 0

    def _reject(self) -> None:
        self._count = 0
        buffer = self._buffer
        buffer[0] = 0
        buffer[1] = 0
        if len(buffer) > 7:
            buffer[7] = 0

    def feed(self, chunk: Iterable[int]) -> LegacyFrame | None:
        """Consume received bytes; return a frame if one completed in this chunk."""
        buffer = self._buffer
        complete = False
        for byte in chunk:
            buffer.append(byte & 0xFF)
            if buffer[0] != HEADER:
                self._count = 0
                buffer.clear()
                continue
            if len(buffer) > 1 and self._count > 2 and self._count >= buffer[1] - 1:
                complete = True
            else:
                self._count += 1
            if len(buffer) > 1 and buffer[1] > MAX_FRAME_LENGTH:
                self._reject()

        if not complete:
            return None

        end = self._count
        frame = None
        if sum(buffer[:end]) & 0xFF == buffer[end]:
            cmd = buffer[3]
            attr = buffer[5] if len(buffer) > 5 else 0
            if cmd == REPORT_COMMAND and 0 < attr < MAX_ATTRIBUTE_ID:
                frame = LegacyFrame(cmd=cmd, data=bytes(buffer[: buffer[1]]))
            else:
                frame = LegacyFrame(cmd=0)
        self._count = 0
        buffer.clear()
        return frame