"""A connection to the desk controller over a serial port."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Protocol

import serial

from tablehelper.ports import PortInfo
from tablehelper.protocol import Frame, FrameParser
from tablehelper.settings import PortSettings


class DeviceNotConnectedError(Exception):
    """Raised when the serial device is not connected."""


class DeviceRemovedError(Exception):
    """Raised when the connected serial device has disappeared."""


class _Parser(Protocol):
    def feed(self, chunk: Iterable[int]) -> Any: ...


@dataclass(frozen=True)
class Received:
    """Bytes read from the port and the frame they completed, if any."""

    raw: bytes
    frame: Frame | Any | None = None


def _port_name(port: PortInfo | str | None) -> str:
    if isinstance(port, PortInfo):
        return port.port_name
    return port or ""


def _system_location(port: PortInfo | str) -> str:
    if isinstance(port, PortInfo):
        return port.system_location or port.port_name
    return port


class SerialSession:
    """Opens, feeds and watches one serial connection.

    ``serial_factory`` creates the port object (``serial.Serial`` by default)
    and ``parser_factory`` the frame parser used for received bytes.
    """

    def __init__(
        self,
        serial_factory: Callable[..., Any] = serial.Serial,
        parser_factory: Callable[[], _Parser] = FrameParser,
    ) -> None:
        self._serial_factory = serial_factory
        self._parser_factory = parser_factory
        self._parser = parser_factory()
        self._serial: Any = None
        self._port_name = ""

    @property
    def is_open(self) -> bool:
        """Whether a port is currently open."""
        return self._serial is not None and bool(getattr(self._serial, "is_open", True))

    @property
    def port_name(self) -> str:
        """Name of the port last opened, or an empty string."""
        return self._port_name

    def open(self, port: PortInfo | str | None, settings: PortSettings | None = None) -> None:
        """Open ``port`` with the given line settings, closing any open port first."""
        name = _port_name(port)
        if not name:
            raise DeviceNotConnectedError("no device available")
        if self._serial is not None:
            self.close()
        settings = settings or PortSettings()
        self._serial = self._serial_factory(
            port=_system_location(port), timeout=0, **settings.to_serial_kwargs()
        )
        self._port_name = name
        self._parser = self._parser_factory()

    def close(self) -> None:
        """Close the port if one is open."""
        handle, self._serial = self._serial, None
        if handle is not None:
            handle.close()

    def __enter__(self) -> SerialSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _require_open(self) -> Any:
        if not self.is_open:
            raise DeviceNotConnectedError("device is not connected")
        return self._serial

    def send(self, data: bytes | bytearray | Iterable[int]) -> int:
        """Write ``data`` to the port and return the number of bytes written."""
        handle = self._require_open()
        payload = bytes(data)
        written = handle.write(payload)
        return len(payload) if written is None else written

    def receive(self) -> Received:
        """Read every byte waiting on the port and feed it to the frame parser."""
        handle = self._require_open()
        waiting = handle.in_waiting
        raw = bytes(handle.read(waiting)) if waiting else b""
        frame = self._parser.feed(raw) if raw else None
        return Received(raw=raw, frame=frame)

    def check_port(self, ports: Iterable[PortInfo | str]) -> None:
        """Close the connection and raise if its port is no longer in ``ports``."""
        if not self.is_open:
            return
        present = {_port_name(port) for port in ports}
        if self._port_name not in present:
            self.close()
            raise DeviceRemovedError(f"device {self._port_name} was removed")