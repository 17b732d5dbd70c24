"""Discovery of the serial ports present on the system."""

from __future__ import annotations

from dataclasses import dataclass

from serial.tools import list_ports

BLANK = "N/A"


@dataclass(frozen=True)
class PortInfo:
    """Description of one serial port."""

    port_name: str
    description: str = ""
    manufacturer: str = ""
    serial_number: str = ""
    system_location: str = ""
    vendor_id: int = 0
    product_id: int = 0

    def fields(self) -> list[str]:
        """Name, description, manufacturer, serial number, location, vendor and
        product id, with blanks shown as ``N/A`` and ids in hex."""
        return [
            self.port_name,
            self.description or BLANK,
            self.manufacturer or BLANK,
            self.serial_number or BLANK,
            self.system_location,
            format(self.vendor_id, "x") if self.vendor_id else BLANK,
            format(self.product_id, "x") if self.product_id else BLANK,
        ]

    def label(self) -> str:
        """Text shown in a port list: ``name(description)``."""
        return f"{self.port_name}({self.fields()[1]})"


def _text(value: object) -> str:
    if value is None:
        return ""
    text = str(value)
    return "" if text.lower() == "n/a" else text


def available_ports() -> list[PortInfo]:
    """The serial ports currently present."""
    return [
        PortInfo(
            port_name=_text(port.name) or _text(port.device),
            description=_text(port.description),
            manufacturer=_text(port.manufacturer),
            serial_number=_text(port.serial_number),
            system_location=_text(port.device),
            vendor_id=port.vid or 0,
            product_id=port.pid or 0,
        )
        for port in list_ports.comports()
    ]