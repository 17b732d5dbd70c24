"""Serial port parameters, hex text helpers and saved attribute values."""

from __future__ import annotations

import configparser
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

import serial

ATTRIBUTE_IDS = tuple(range(1, 17))
BAUD_RATES = (19200, 9600, 38400, 115200)
DATA_BITS = (5, 6, 7, 8)

_MAIN_SECTION = "main"
_SUB_SECTION = "sub"
_LAST_MAIN_ATTRIBUTE = 8
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


class ConfigError(Exception):
    """Raised when a saved configuration cannot be used."""


class Parity(Enum):
    NONE = serial.PARITY_NONE
    EVEN = serial.PARITY_EVEN
    ODD = serial.PARITY_ODD
    MARK = serial.PARITY_MARK
    SPACE = serial.PARITY_SPACE


class StopBits(Enum):
    ONE = serial.STOPBITS_ONE
    ONE_AND_HALF = serial.STOPBITS_ONE_POINT_FIVE
    TWO = serial.STOPBITS_TWO


class FlowControl(Enum):
    NONE = "none"
    HARDWARE = "rts/cts"
    SOFTWARE = "xon/xoff"


@dataclass(frozen=True)
class PortSettings:
    """Line parameters for opening a serial port."""

    baud_rate: int = 19200
    data_bits: int = 8
    parity: Parity = Parity.NONE
    stop_bits: StopBits = StopBits.ONE
    flow_control: FlowControl = FlowControl.NONE

    def __post_init__(self) -> None:
        if not isinstance(self.baud_rate, int) or self.baud_rate <= 0:
            raise ValueError(f"invalid baud rate: {self.baud_rate!r}")
        if self.data_bits not in DATA_BITS:
            raise ValueError(f"invalid data bits: {self.data_bits!r}")

    def to_serial_kwargs(self) -> dict:
        """Keyword arguments for ``serial.Serial``."""
        return {
            "baudrate": self.baud_rate,
            "bytesize": self.data_bits,
            "parity": self.parity.value,
            "stopbits": self.stop_bits.value,
            "xonxoff": self.flow_control is FlowControl.SOFTWARE,
            "rtscts": self.flow_control is FlowControl.HARDWARE,
        }


def port_parameter_choices() -> dict[str, list[tuple[str, object]]]:
    """Labelled choices for each port parameter, in display order.

    A baud rate of ``None`` stands for a custom rate.
    """
    stop_bits = [("1", StopBits.ONE)]
    if sys.platform == "win32":
        stop_bits.append(("1.5", StopBits.ONE_AND_HALF))
    stop_bits.append(("2", StopBits.TWO))
    return {
        "baud_rate": [(str(rate), rate) for rate in BAUD_RATES] + [("Custom", None)],
        "data_bits": [(str(bits), bits) for bits in DATA_BITS],
        "parity": [
            ("None", Parity.NONE),
            ("Even", Parity.EVEN),
            ("Odd", Parity.ODD),
            ("Mark", Parity.MARK),
            ("Space", Parity.SPACE),
        ],
        "stop_bits": stop_bits,
        "flow_control": [
            ("None", FlowControl.NONE),
            ("RTS/CTS", FlowControl.HARDWARE),
            ("XON/XOFF", FlowControl.SOFTWARE),
        ],
    }


def _to_int(text: str, base: int = 10) -> int:
    cleaned = text.strip()
    if "_" in cleaned:
        return 0
    try:
        value = int(cleaned, base)
    except ValueError:
        return 0
    return value if _INT_MIN <= value <= _INT_MAX else 0


def parse_hex_bytes(text: str) -> bytes:
    """Turn space-separated hex numbers into bytes; unreadable tokens become 0."""
    return bytes(_to_int(token, 16) & 0xFF for token in text.strip().split(" ") if token)


def format_hex(data: bytes) -> str:
    """Format bytes as upper-case hex pairs separated by spaces."""
    return bytes(data).hex(" ").upper()


def _section(attr_id: int) -> str:
    return _MAIN_SECTION if attr_id <= _LAST_MAIN_ATTRIBUTE else _SUB_SECTION


def _key(attr_id: int) -> str:
    return f"sb_data{attr_id}"


def _new_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # keys are case sensitive
    return parser


def load_values(path: str | os.PathLike) -> dict[int, int]:
    """Read the sixteen attribute values from an INI configuration file."""
    parser = _new_parser()
    try:
        with open(path, encoding="utf-8") as handle:
            parser.read_file(handle)
    except (OSError, UnicodeDecodeError, configparser.Error) as exc:
        raise ConfigError(f"cannot read configuration {os.fspath(path)}: {exc}") from exc
    if not parser.has_option(_SUB_SECTION, _key(ATTRIBUTE_IDS[-1])):
        raise ConfigError("configuration is incomplete")
    return {
        attr_id: _to_int(parser.get(_section(attr_id), _key(attr_id), fallback="0"))
        for attr_id in ATTRIBUTE_IDS
    }


def save_values(path: str | os.PathLike, values: Mapping[int, int]) -> None:
    """Write the sixteen attribute values to an INI file, replacing its contents."""
    unknown = set(values) - set(ATTRIBUTE_IDS)
    if unknown:
        raise ValueError(f"unknown attribute ids: {sorted(unknown)}")
    parser = _new_parser()
    parser.add_section(_MAIN_SECTION)
    parser.add_section(_SUB_SECTION)
    for attr_id in ATTRIBUTE_IDS:
        parser.set(_section(attr_id), _key(attr_id), str(int(values.get(attr_id, 0))))
    with open(path, "w", encoding="utf-8") as handle:
        parser.write(handle, space_around_delimiters=False)