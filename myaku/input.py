"""Keyboard input handling with vim-style navigation for each view mode."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class Mode(Enum):
    """The view mode decides which key bindings are active."""

    DASHBOARD = "dashboard"
    PROCESS = "process"
    FILTER = "filter"


class KeyCode(Enum):
    """Named (non-character) keys. Character keys are given as one-character strings."""

    ESCAPE = "escape"
    ENTER = "enter"
    TAB = "tab"
    BACKSPACE = "backspace"
    DELETE = "delete"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"


@dataclass(frozen=True)
class Modifiers:
    """Modifier keys held during a key event."""

    ctrl: bool = False
    alt: bool = False
    shift: bool = False
    meta: bool = False

    def any(self) -> bool:
        """True if any modifier is held."""
        return self.ctrl or self.alt or self.shift or self.meta


Key = Union[KeyCode, str]


@dataclass(frozen=True)
class KeyEvent:
    """A key press or release."""

    key: Key
    pressed: bool = True
    modifiers: Modifiers = field(default_factory=Modifiers)
    text: Optional[str] = None


class Action(Enum):
    """What a key press asks the application to do."""

    QUIT = "quit"
    SWITCH_DASHBOARD = "switch_dashboard"
    SWITCH_PROCESS = "switch_process"
    FORCE_REFRESH = "force_refresh"
    FOCUS_NEXT = "focus_next"
    FOCUS_PREV = "focus_prev"
    UP = "up"
    DOWN = "down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    FIRST = "first"
    LAST = "last"
    CYCLE_SORT = "cycle_sort"
    TOGGLE_SORT_DIRECTION = "toggle_sort_direction"
    ENTER_FILTER = "enter_filter"
    BACK = "back"
    CONFIRM = "confirm"
    BACKSPACE = "backspace"
    NONE = "none"


@dataclass(frozen=True)
class Char:
    """A character typed while entering a filter."""

    char: str


_DASHBOARD_HOTKEYS = {
    "q": Action.QUIT,
    "p": Action.SWITCH_PROCESS,
    "r": Action.FORCE_REFRESH,
    KeyCode.ESCAPE: Action.QUIT,
}

_DASHBOARD_NAV = {
    "j": Action.DOWN,
    KeyCode.DOWN: Action.DOWN,
    "k": Action.UP,
    KeyCode.UP: Action.UP,
    "h": Action.FOCUS_PREV,
    KeyCode.LEFT: Action.FOCUS_PREV,
    "l": Action.FOCUS_NEXT,
    KeyCode.RIGHT: Action.FOCUS_NEXT,
}

_PROCESS_HOTKEYS = {
    "q": Action.QUIT,
    KeyCode.ESCAPE: Action.BACK,
    "/": Action.ENTER_FILTER,
}

_PROCESS_NAV = {
    "j": Action.DOWN,
    KeyCode.DOWN: Action.DOWN,
    "k": Action.UP,
    KeyCode.UP: Action.UP,
    KeyCode.PAGE_DOWN: Action.PAGE_DOWN,
    KeyCode.PAGE_UP: Action.PAGE_UP,
    KeyCode.TAB: Action.FOCUS_NEXT,
}

_FILTER_KEYS = {
    KeyCode.ESCAPE: Action.BACK,
    KeyCode.ENTER: Action.CONFIRM,
    KeyCode.BACKSPACE: Action.BACKSPACE,
}


def _plain_key(event: KeyEvent) -> Optional[Key]:
    """The key of an unmodified press, with letters folded to lower case."""
    if event.modifiers.any():
        return None
    if isinstance(event.key, str):
        return event.key.lower()
    return event.key


def _map_dashboard_key(event: KeyEvent) -> Action:
    plain = _plain_key(event)
    if plain in _DASHBOARD_HOTKEYS:
        return _DASHBOARD_HOTKEYS[plain]
    if event.key is KeyCode.TAB:
        return Action.FOCUS_PREV if event.modifiers.shift else Action.FOCUS_NEXT
    return _DASHBOARD_NAV.get(event.key, Action.NONE)


def _map_process_key(event: KeyEvent) -> Action:
    plain = _plain_key(event)
    if plain in _PROCESS_HOTKEYS:
        return _PROCESS_HOTKEYS[plain]
    key = event.key
    shift = event.modifiers.shift
    if key in _PROCESS_NAV:
        return _PROCESS_NAV[key]
    if key == "g":
        return Action.LAST if shift else Action.FIRST
    if key == "G":
        return Action.LAST if shift else Action.NONE
    if key == "s":
        return Action.TOGGLE_SORT_DIRECTION if shift else Action.CYCLE_SORT
    if key == "S":
        return Action.TOGGLE_SORT_DIRECTION if shift else Action.NONE
    if key == "r" and not event.modifiers.any():
        return Action.FORCE_REFRESH
    if key == "d" and not event.modifiers.any():
        return Action.SWITCH_DASHBOARD
    return Action.NONE


def _map_filter_key(event: KeyEvent) -> Union[Action, Char]:
    if isinstance(event.key, str):
        return Char(event.key)
    return _FILTER_KEYS.get(event.key, Action.NONE)


def map_key(event: KeyEvent, mode: Mode) -> Union[Action, Char]:
    """Map a key event to an action for the given mode; releases map to NONE."""
    if not event.pressed:
        return Action.NONE
    if mode is Mode.FILTER:
        return _map_filter_key(event)
    if mode is Mode.DASHBOARD:
        return _map_dashboard_key(event)
    return _map_process_key(event)