"""State and appearance rules for the title bar's caption buttons, icon and title."""

from __future__ import annotations

import enum
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass

ICON_WIDTH = 16
ICON_HEIGHT = 16
TRANSPARENT = "transparent"

Pixel = tuple[int, int, int, int]
Color = tuple[int, int, int]


class IconType(enum.Enum):
    """Kind of caption button."""

    MINIMIZE = "minimize"
    RESTORE = "restore"
    MAXIMIZE = "maximize"
    CLOSE = "close"


class ButtonEvent(enum.Enum):
    """Mouse events that change a caption button's look."""

    HOVER_ENTER = "hover_enter"
    HOVER_LEAVE = "hover_leave"
    PRESS = "press"
    RELEASE = "release"


def _qround(value: float) -> int:
    return math.floor(value + 0.5)


def icon_width(pixel_ratio: float) -> int:
    """Caption icon width for a pixel ratio, snapped to 10, 12 or 15 pixels."""
    width = math.ceil(10 * pixel_ratio)
    if width <= 10:
        return 10
    if width <= 12:
        return 12
    return 15


def gray(red: int, green: int, blue: int) -> int:
    """Gray level of a colour, weighted 11:16:5."""
    return (red * 11 + green * 16 + blue * 5) // 32


def _icon_path(icon_type: IconType, state: str, dark: bool) -> str:
    mode = "dark" if dark else "light"
    return f":/icons/{icon_type.value}-{state}-{mode}.ico"


@dataclass(frozen=True)
class _Palette:
    normal: str
    hover: str
    pressed: str


class CaptionButton:
    """A minimize, restore, maximize or close button in the title bar."""

    def __init__(self, icon_type: IconType, pixel_ratio: float = 1.0) -> None:
        self.icon_type = IconType(icon_type)
        self.pixel_ratio = pixel_ratio
        self.visible = False
        self.is_active = False
        self.is_under_mouse = False
        self.is_pressed = False
        self.icon_dark = False
        self._listeners: list[Callable[[], object]] = []
        self._close_icon_hover: str | None = None
        self._update_icons()
        self._update_colors()

    def _update_icons(self) -> None:
        self.active_icon = _icon_path(self.icon_type, "active", self.icon_dark)
        self.inactive_icon = _icon_path(self.icon_type, "inactive", self.icon_dark)
        if self.icon_type is IconType.CLOSE and self.icon_dark:
            self._close_icon_hover = _icon_path(IconType.CLOSE, "active", False)

    def _update_colors(self) -> None:
        if self.icon_type is IconType.CLOSE:
            self._palette = _Palette(TRANSPARENT, "#F00000", "#F1707A")
        elif self.icon_dark:
            self._palette = _Palette(TRANSPARENT, "#E5E5E5", "#CACACB")
        else:
            self._palette = _Palette(TRANSPARENT, "#505050", "#3F3F3F")

    @property
    def normal_color(self) -> str:
        return self._palette.normal

    @property
    def hover_color(self) -> str:
        return self._palette.hover

    @property
    def pressed_color(self) -> str:
        return self._palette.pressed

    def connect_clicked(self, callback: Callable[[], object]) -> None:
        """Call ``callback`` whenever the button is clicked."""
        self._listeners.append(callback)

    def click(self) -> None:
        """Report a click to every connected callback."""
        for callback in list(self._listeners):
            callback()

    def set_icon_mode(self, icon_dark: bool) -> None:
        """Use dark icons (for a light title bar) or light ones."""
        self.icon_dark = bool(icon_dark)
        self._update_icons()
        self._update_colors()

    def set_active(self, is_active: bool) -> None:
        """Mark whether the window owning the button is active."""
        self.is_active = bool(is_active)

    def set_state(self, event: ButtonEvent) -> None:
        """Apply a mouse event; anything else is ignored."""
        if event is ButtonEvent.HOVER_ENTER:
            self.is_under_mouse = True
        elif event is ButtonEvent.HOVER_LEAVE:
            self.is_under_mouse = False
        elif event is ButtonEvent.PRESS:
            self.is_pressed = True
            self.is_under_mouse = True
        elif event is ButtonEvent.RELEASE:
            self.is_pressed = False
            self.is_under_mouse = False

    def current_icon(self) -> str | None:
        """Resource path of the icon to draw in the current state."""
        if self.is_under_mouse:
            if self.icon_type is IconType.CLOSE and self.icon_dark:
                return self._close_icon_hover
            return self.active_icon
        return self.active_icon if self.is_active else self.inactive_icon

    def current_color(self) -> str:
        """Background colour to fill in the current state."""
        if self.is_under_mouse:
            return self._palette.pressed if self.is_pressed else self._palette.hover
        return self._palette.normal

    def icon_size(self) -> tuple[int, int]:
        """Drawn icon size; the minimize icon is a single line high."""
        width = icon_width(self.pixel_ratio)
        height = 1 if self.icon_type is IconType.MINIMIZE else width
        return width, height


def _to_pixel(pixel: Iterable[int]) -> Pixel:
    values = tuple(int(channel) for channel in pixel)
    if len(values) != 4:
        raise ValueError(f"a pixel needs four channels (r, g, b, a), got {values!r}")
    if any(not 0 <= channel <= 255 for channel in values):
        raise ValueError(f"pixel channels must lie in 0..255, got {values!r}")
    return values  # type: ignore[return-value]


class IconWidget:
    """The window icon, drawn grayed while the window is inactive."""

    def __init__(self, pixel_ratio: float = 1.0) -> None:
        self.pixel_ratio = pixel_ratio
        self.active = True
        self.pixmap: tuple[tuple[Pixel, ...], ...] = ()
        self.grayed_pixmap: tuple[tuple[Pixel, ...], ...] = ()

    def set_pixmap(self, pixels: Iterable[Iterable[Iterable[int]]]) -> None:
        """Set the icon from rows of ``(r, g, b, a)`` pixels."""
        rows = tuple(tuple(_to_pixel(pixel) for pixel in row) for row in pixels)
        self.pixmap = rows
        self.grayed_pixmap = tuple(
            tuple((level, level, level, a) for r, g, b, a in row for level in (gray(r, g, b),))
            for row in rows
        )

    def set_active(self, active: bool) -> None:
        self.active = bool(active)

    def current_pixmap(self) -> tuple[tuple[Pixel, ...], ...]:
        """The pixels to draw: the original when active, grayed otherwise."""
        return self.pixmap if self.active else self.grayed_pixmap

    def icon_rect(self, width: int, height: int) -> tuple[int, int, int, int]:
        """``(x, y, w, h)`` of the icon centred in a widget of the given size."""
        icon_w = _qround(ICON_WIDTH * self.pixel_ratio)
        icon_h = _qround(ICON_HEIGHT * self.pixel_ratio)
        x = int(_qround(width - ICON_WIDTH * self.pixel_ratio) / 2)
        y = int(_qround(height - ICON_HEIGHT * self.pixel_ratio) / 2)
        return x, y, icon_w, icon_h


class TitleWidget:
    """The window title text and its active and inactive colours."""

    def __init__(self, pixel_ratio: float = 1.0) -> None:
        self.pixel_ratio = pixel_ratio
        self.active = False
        self.title = ""
        self.active_color: Color | None = None
        self.inactive_color: Color | None = None

    def set_text(self, text: str) -> None:
        self.title = str(text)

    def set_active(self, active: bool) -> None:
        self.active = bool(active)

    def set_title_color(self, active_color: Color, inactive_color: Color) -> None:
        self.active_color = tuple(active_color)  # type: ignore[assignment]
        self.inactive_color = tuple(inactive_color)  # type: ignore[assignment]

    def current_color(self) -> Color | None:
        """The text colour for the current active state."""
        return self.active_color if self.active else self.inactive_color

    def font_pixel_size(self) -> int:
        """Title font size in pixels."""
        return _qround(12 * self.pixel_ratio)