import pytest
import serial

from tablehelper.legacy_protocol import LegacyFrameParser
from tablehelper.ports import PortInfo
from tablehelper.protocol import Command, pack_heartbeat
from tablehelper.session import (
    DeviceNotConnectedError,
    DeviceRemovedError,
    SerialSession,
)
from tablehelper.settings import FlowControl, PortSettings


class FakeSerial:
    instances = []

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.is_open = True
        self.written = bytearray()
        self.incoming = bytearray()
        FakeSerial.instances.append(self)

    def write(self, data):
        self.written += data
        return len(data)

    @property
    def in_waiting(self):
        return len(self.incoming)

    def read(self, size):
        chunk = bytes(self.incoming[:size])
        del self.incoming[:size]
        return chunk

    def close(self):
        self.is_open = False


def failing_factory(**kwargs):
    raise serial.SerialException("cannot open")


@pytest.fixture
def session():
    FakeSerial.instances.clear()
    return SerialSession(serial_factory=FakeSerial)


def test_open_passes_port_and_settings(session):
    settings = PortSettings(baud_rate=9600, flow_control=FlowControl.HARDWARE)
    session.open("COM3", settings)
    handle = FakeSerial.instances[-1]
    assert session.is_open
    assert session.port_name == "COM3"
    assert handle.kwargs["port"] == "COM3"
    assert handle.kwargs["baudrate"] == 9600
    assert handle.kwargs["rtscts"] is True


def test_open_port_info_uses_system_location(session):
    info = PortInfo(port_name="ttyUSB0", system_location="/dev/ttyUSB0")
    session.open(info)
    assert FakeSerial.instances[-1].kwargs["port"] == "/dev/ttyUSB0"
    assert session.port_name == "ttyUSB0"


def test_open_without_port_raises(session):
    with pytest.raises(DeviceNotConnectedError):
        session.open(None)
    assert not session.is_open


def test_open_failure_leaves_session_closed():
    session = SerialSession(serial_factory=failing_factory)
    with pytest.raises(serial.SerialException):
        session.open("COM1")
    assert not session.is_open


def test_reopen_closes_previous(session):
    session.open("COM1")
    first = FakeSerial.instances[-1]
    session.open("COM2")
    assert first.is_open is False
    assert session.port_name == "COM2"


def test_send_writes_bytes(session):
    session.open("COM1")
    frame = pack_heartbeat()
    assert session.send(frame) == len(frame)
    assert bytes(FakeSerial.instances[-1].written) == frame


def test_send_when_closed_raises(session):
    with pytest.raises(DeviceNotConnectedError):
        session.send(b"\x01")


def test_close_then_send_raises(session):
    session.open("COM1")
    session.close()
    assert not session.is_open
    with pytest.raises(DeviceNotConnectedError):
        session.send(b"\x01")


def test_receive_when_closed_raises(session):
    with pytest.raises(DeviceNotConnectedError):
        session.receive()


def test_receive_parses_heartbeat_frame(session):
    session.open("COM1")
    header = bytes([0xA5, 0xA5, 24, 5, 1, Command.HEARTBEAT, 0x00, 0x00])
    FakeSerial.instances[-1].incoming += header + bytes([sum(header) & 0xFF])
    received = session.receive()
    assert received.raw == header + bytes([sum(header) & 0xFF])
    assert received.frame.cmd == Command.HEARTBEAT
    assert received.frame.version == "24年5月1日"


def test_receive_across_chunks(session):
    session.open("COM1")
    header = bytes([0xA5, 0xA5, 24, 5, 1, Command.HEARTBEAT, 0x00, 0x00])
    handle = FakeSerial.instances[-1]
    handle.incoming += header[:4]
    assert session.receive().frame is None
    handle.incoming += header[4:] + bytes([sum(header) & 0xFF])
    assert session.receive().frame.cmd == Command.HEARTBEAT


def test_receive_nothing_waiting(session):
    session.open("COM1")
    received = session.receive()
    assert received.raw == b""
    assert received.frame is None


def test_custom_parser_factory():
    FakeSerial.instances.clear()
    session = SerialSession(serial_factory=FakeSerial, parser_factory=LegacyFrameParser)
    session.open("COM1")
    FakeSerial.instances[-1].incoming += b"\x01\x02"
    received = session.receive()
    assert received.raw == b"\x01\x02"
    assert received.frame is None


def test_check_port_present_keeps_open(session):
    session.open("COM1")
    session.check_port([PortInfo(port_name="COM1"), "COM2"])
    assert session.is_open


def test_check_port_missing_raises_and_closes(session):
    session.open("COM1")
    handle = FakeSerial.instances[-1]
    with pytest.raises(DeviceRemovedError):
        session.check_port([PortInfo(port_name="COM2")])
    assert not session.is_open
    assert handle.is_open is False


def test_check_port_when_closed_is_quiet(session):
    session.check_port([])
    assert not session.is_open


def test_context_manager_closes(session):
    with session as active:
        active.open("COM1")
        handle = FakeSerial.instances[-1]
        assert active.is_open
    assert handle.is_open is False
    assert not session.is_open