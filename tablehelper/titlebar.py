"""Title bar model: caption buttons, icon, title and side widgets."""

from __future__ import annotations

import enum
import math
from collections.abc import Iterable
from dataclasses import dataclass

from tablehelper.caption import (
    ButtonEvent,
    CaptionButton,
    IconType,
    IconWidget,
    TitleWidget,
)

TITLE_BAR_HEIGHT = 29
ICON_AREA_WIDTH = 29
DEFAULT_CAPTION_BUTTON_WIDTH = 36
DEFAULT_LAYOUT_SPACING = 6
DARK_BACKGROUND = "#000000"
LIGHT_BACKGROUND = "#FFFFFF"
DARK_TITLE_COLOR = (255, 255, 255)
LIGHT_TITLE_COLOR = (0, 0, 0)
INACTIVE_TITLE_COLOR = (150, 150, 150)
_STYLE = "TitleBar {{background-color: {}; border: none;}}"


def _qround(value: float) -> int:
    return math.floor(value + 0.5)


class CaptionButtonState(enum.Enum):
    """Caption button events reported by the window."""

    MINIMIZE_HOVER_ENTER = enum.auto()
    MAXIMIZE_HOVER_ENTER = enum.auto()
    CLOSE_HOVER_ENTER = enum.auto()
    MINIMIZE_HOVER_LEAVE = enum.auto()
    MAXIMIZE_HOVER_LEAVE = enum.auto()
    CLOSE_HOVER_LEAVE = enum.auto()
    MINIMIZE_PRESS = enum.auto()
    MAXIMIZE_PRESS = enum.auto()
    CLOSE_PRESS = enum.auto()
    MINIMIZE_RELEASE = enum.auto()
    MAXIMIZE_RELEASE = enum.auto()
    CLOSE_RELEASE = enum.auto()
    MINIMIZE_CLICKED = enum.auto()
    MAXIMIZE_CLICKED = enum.auto()
    CLOSE_CLICKED = enum.auto()


class WindowFlags(enum.Flag):
    """Which caption buttons the window offers."""

    NONE = 0
    MINIMIZE_BUTTON = enum.auto()
    MAXIMIZE_BUTTON = enum.auto()
    CLOSE_BUTTON = enum.auto()


_ALL_BUTTONS = WindowFlags.MINIMIZE_BUTTON | WindowFlags.MAXIMIZE_BUTTON | WindowFlags.CLOSE_BUTTON

_S = CaptionButtonState
_STATE_ACTIONS: dict[CaptionButtonState, tuple[str, ButtonEvent | None]] = {
    _S.MINIMIZE_HOVER_ENTER: ("minimize", ButtonEvent.HOVER_ENTER),
    _S.MAXIMIZE_HOVER_ENTER: ("maximize", ButtonEvent.HOVER_ENTER),
    _S.CLOSE_HOVER_ENTER: ("close", ButtonEvent.HOVER_ENTER),
    _S.MINIMIZE_HOVER_LEAVE: ("minimize", ButtonEvent.HOVER_LEAVE),
    _S.MAXIMIZE_HOVER_LEAVE: ("maximize", ButtonEvent.HOVER_LEAVE),
    _S.CLOSE_HOVER_LEAVE: ("close", ButtonEvent.HOVER_LEAVE),
    _S.MINIMIZE_PRESS: ("minimize", ButtonEvent.PRESS),
    _S.MAXIMIZE_PRESS: ("maximize", ButtonEvent.PRESS),
    _S.CLOSE_PRESS: ("close", ButtonEvent.PRESS),
    _S.MINIMIZE_RELEASE: ("minimize", ButtonEvent.RELEASE),
    _S.MAXIMIZE_RELEASE: ("maximize", ButtonEvent.RELEASE),
    _S.CLOSE_RELEASE: ("close", ButtonEvent.RELEASE),
    _S.MINIMIZE_CLICKED: ("minimize", None),
    _S.MAXIMIZE_CLICKED: ("maximize", None),
    _S.CLOSE_CLICKED: ("close", None),
}


@dataclass(frozen=True)
class Rect:
    """A rectangle; the default one is null."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    @property
    def is_null(self) -> bool:
        return self.width == 0 and self.height == 0


class TitleBar:
    """The custom title bar of a window.

    ``window_flags`` is ``None`` when there is no window, in which case no
    caption button counts as enabled.
    """

    def __init__(
        self,
        pixel_ratio: float = 1.0,
        window_flags: WindowFlags | None = _ALL_BUTTONS,
        *,
        dark: bool = False,
        layout_spacing: int = DEFAULT_LAYOUT_SPACING,
        style_base_color: str | None = None,
    ) -> None:
        self.pixel_ratio = pixel_ratio
        self.window_flags = window_flags
        self.height = _qround(TITLE_BAR_HEIGHT * pixel_ratio)
        self.icon_area_width = _qround(ICON_AREA_WIDTH * pixel_ratio)
        self.layout_spacing = layout_spacing
        self.style_base_color = style_base_color

        self.icon_widget = IconWidget(pixel_ratio)
        self.title_widget = TitleWidget(pixel_ratio)
        self.minimize_button = CaptionButton(IconType.MINIMIZE, pixel_ratio)
        self.restore_button = CaptionButton(IconType.RESTORE, pixel_ratio)
        self.maximize_button = CaptionButton(IconType.MAXIMIZE, pixel_ratio)
        self.close_button = CaptionButton(IconType.CLOSE, pixel_ratio)

        self.left_widget: object | None = None
        self.right_widget: object | None = None
        self.title_bar_color: str | None = None
        self.style_sheet = ""
        self.active = True
        self.is_maximized = False
        self.dark = bool(dark)
        self._button_width = _qround(DEFAULT_CAPTION_BUTTON_WIDTH * pixel_ratio)
        self._button_height = self.height

        # Every caption button starts hidden; show the ones the window offers.
        if self.is_minimize_button_enabled():
            self.minimize_button.visible = True
        if self.is_maximize_button_enabled():
            self.maximize_button.visible = True
        self.close_button.visible = True

        self.set_theme(self.dark)

    @property
    def _buttons(self) -> tuple[CaptionButton, ...]:
        return (self.minimize_button, self.restore_button, self.maximize_button, self.close_button)

    @property
    def left_placeholder_visible(self) -> bool:
        return self.left_widget is not None

    @property
    def right_placeholder_visible(self) -> bool:
        return self.right_widget is not None

    def set_title(self, title: str) -> None:
        self.title_widget.set_text(title)

    def set_icon(self, pixels: Iterable[Iterable[Iterable[int]]]) -> None:
        """Set the window icon from rows of ``(r, g, b, a)`` pixels."""
        self.icon_widget.set_pixmap(pixels)

    def set_active(self, active: bool) -> None:
        """Propagate the window's active state to every part of the bar."""
        self.active = bool(active)
        self.icon_widget.set_active(self.active)
        self.title_widget.set_active(self.active)
        for button in self._buttons:
            button.set_active(self.active)

    def set_maximized(self, maximized: bool) -> None:
        """Swap the maximize and restore buttons to match the window state."""
        self.is_maximized = bool(maximized)
        if not self.is_maximize_button_enabled():
            return
        self.maximize_button.visible = not self.is_maximized
        self.restore_button.visible = self.is_maximized

    def set_theme(self, dark: bool | None = None) -> None:
        """Apply the dark or light theme; ``None`` re-applies the current one."""
        if dark is not None:
            self.dark = bool(dark)
        if self.title_bar_color:
            background = self.title_bar_color
        elif self.style_base_color:
            background = self.style_base_color
        else:
            background = DARK_BACKGROUND if self.dark else LIGHT_BACKGROUND
        self.style_sheet = _STYLE.format(background)

        # Icons contrast with the background.
        for button in (
            self.minimize_button,
            self.maximize_button,
            self.restore_button,
            self.close_button,
        ):
            button.set_icon_mode(not self.dark)
        title_color = DARK_TITLE_COLOR if self.dark else LIGHT_TITLE_COLOR
        self.title_widget.set_title_color(title_color, INACTIVE_TITLE_COLOR)
        self.set_active(self.active)

    def set_left_widget(self, widget: object | None) -> None:
        self.left_widget = widget

    def set_right_widget(self, widget: object | None) -> None:
        self.right_widget = widget

    def set_caption_button_width(self, width: int) -> None:
        """Give every caption button ``width`` and the bar's current height."""
        if width < 0:
            raise ValueError(f"caption button width must not be negative: {width}")
        self._button_width = int(width)
        self._button_height = self.height

    def caption_buttons_width(self) -> int:
        """Total width of the visible caption buttons."""
        return sum(self._button_width for button in self._buttons if button.visible)

    def _enabled(self, flag: WindowFlags) -> bool:
        return self.window_flags is not None and bool(self.window_flags & flag)

    def is_minimize_button_enabled(self) -> bool:
        return self._enabled(WindowFlags.MINIMIZE_BUTTON)

    def is_maximize_button_enabled(self) -> bool:
        return self._enabled(WindowFlags.MAXIMIZE_BUTTON)

    def is_close_button_enabled(self) -> bool:
        return self._enabled(WindowFlags.CLOSE_BUTTON)

    def _button_rect(self, target: CaptionButton) -> Rect:
        if not target.visible:
            return Rect()
        x = 0
        for button in self._buttons:
            if button is target:
                break
            if button.visible:
                x += self._button_width
        return Rect(x, 0, self._button_width, self._button_height)

    def minimize_button_rect(self) -> Rect:
        return self._button_rect(self.minimize_button)

    def maximize_button_rect(self) -> Rect:
        """Rectangle of the maximize button, or of restore when that is shown."""
        if self.maximize_button.visible:
            return self._button_rect(self.maximize_button)
        return self._button_rect(self.restore_button)

    def close_button_rect(self) -> Rect:
        return self._button_rect(self.close_button)

    def _target(self, group: str) -> CaptionButton:
        if group == "minimize":
            return self.minimize_button
        if group == "close":
            return self.close_button
        return self.restore_button if self.is_maximized else self.maximize_button

    def caption_button_state_changed(self, state: CaptionButtonState) -> None:
        """Forward a caption button event from the window to the right button."""
        action = _STATE_ACTIONS.get(state)
        if action is None:
            return
        group, event = action
        button = self._target(group)
        if event is None:
            button.click()
        else:
            button.set_state(event)