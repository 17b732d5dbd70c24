# tablehelper

`tablehelper` is a library for talking to lift-table controllers over a
serial port. It builds and parses the controller's checksummed frames,
holds the serial line settings, saves and loads the sixteen attribute
values as INI files, and manages one serial connection. It also models the
state of a custom window title bar and its caption buttons, with no GUI
toolkit attached.

## Installation

```
pip install tablehelper
```

With the test dependencies:

```
pip install "tablehelper[test]"
```

## The frame protocol

`tablehelper.protocol` packs requests and parses replies:

```python
from tablehelper.protocol import Command, FrameParser, pack_get, pack_heartbeat, pack_set

request = pack_get(range(1, 17))          # ask for attributes 1..16
write = pack_set([0x02, 5, 30])           # type 2 (uint8), attribute 5, value 30
beat = pack_heartbeat()

parser = FrameParser()
frame = parser.feed(incoming_bytes)       # a Frame, or None if none completed
if frame is not None and frame.cmd == Command.GET:
    print(frame.version, frame.data.hex(" "))
```

Every request starts with `A5 A5 03`, followed by the command, a two-byte
length, a message id, the payload and an 8-bit sum of all preceding bytes.
`FrameParser.feed` accepts bytes in any chunking, drops data that does not
start with the header and rejects frames whose length byte exceeds 200.
A `Frame` carries the command code, a version string built from the date
bytes of the reply, and, for `GET` and `REPORT` replies, the attribute
payload. Frames with a bad checksum are discarded.

`tablehelper.legacy_protocol` has `LegacyFrameParser` for the older layout
`A5 <total length> ... <checksum>`. It returns a `LegacyFrame`, whose `cmd`
is `0x04` with the whole frame in `data` for an accepted attribute report,
and `0` for any other checksum-valid frame.

## Line settings and hex text

`tablehelper.settings` provides:

- `PortSettings(baud_rate=19200, data_bits=8, parity=Parity.NONE,
  stop_bits=StopBits.ONE, flow_control=FlowControl.NONE)`. Its
  `to_serial_kwargs()` returns keyword arguments for `serial.Serial`.
  Invalid baud rates or data bits raise `ValueError`.
- `port_parameter_choices()`: labelled choices for each setting, in display
  order. The 1.5 stop bits choice appears on Windows only.
- `parse_hex_bytes("A5 a5 3")` gives `b"\xa5\xa5\x03"`. Tokens that cannot
  be read become 0. `format_hex(data)` gives upper-case pairs separated by
  spaces.
- `save_values(path, values)` and `load_values(path)` write and read the
  sixteen attribute values. Attributes 1 to 8 go in section `[main]` and 9
  to 16 in `[sub]`, under keys `sb_data1` … `sb_data16`. A file that cannot
  be read or lacks `sb_data16` raises `ConfigError`.

## Ports and sessions

`tablehelper.ports.available_ports()` lists the serial ports as `PortInfo`
records. `PortInfo.fields()` gives name, description, manufacturer, serial
number, location and hex vendor and product ids, with `N/A` for blanks.
`PortInfo.label()` gives `name(description)`.

`tablehelper.session.SerialSession` owns one connection:

```python
from tablehelper.ports import available_ports
from tablehelper.session import SerialSession
from tablehelper.settings import PortSettings
from tablehelper.protocol import pack_get

with SerialSession() as session:
    session.open(available_ports()[0], PortSettings(baud_rate=9600))
    session.send(pack_get(range(1, 17)))
    received = session.receive()        # Received(raw=..., frame=...)
    session.check_port(available_ports())
```

`send` and `receive` raise `DeviceNotConnectedError` when no port is open.
`check_port` closes the connection and raises `DeviceRemovedError` when the
open port is no longer listed. The serial class and the parser class can be
replaced through the `serial_factory` and `parser_factory` arguments, for
example `parser_factory=LegacyFrameParser`.

## Title bar state

`tablehelper.caption` models the caption buttons (`CaptionButton`, with
`IconType` and `ButtonEvent`), the window icon with its grayed inactive
version (`IconWidget`) and the title text colours (`TitleWidget`).
`tablehelper.titlebar.TitleBar` combines them. It covers theme switching,
maximize and restore swapping, which buttons `WindowFlags` enables, button
rectangles, and routing of `CaptionButtonState` events to the right button.

## What the package does not do

There is no command-line program and no interactive screen. The package
has no model of the sixteen-value attribute panel. Callers build the SET
payloads themselves with `pack_set` and read replies from `Frame.data`.
Nothing polls ports on a timer; call `check_port` as often as needed.

## Running the tests

```
pip install "tablehelper[test]"
pytest
```