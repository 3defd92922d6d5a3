"""Physical key bindings per view mode.

Textual key names are translated into logical ``KeyPressed`` events here
so the controller and sub-views never see terminal key codes.
"""

from typing import Dict, Optional

from zenmail.core.events import Key, KeyPressed

from .modes import ViewMode

LIST_KEYS: Dict[str, Key] = {
    "q": Key.QUIT,
    "ctrl+q": Key.QUIT,
    "c": Key.COMPOSE,
    "r": Key.REPLY,
    "enter": Key.OPEN,
    "up": Key.NAVIGATE_UP,
    "k": Key.NAVIGATE_UP,
    "down": Key.NAVIGATE_DOWN,
    "j": Key.NAVIGATE_DOWN,
    "g": Key.REFRESH,
    "f5": Key.REFRESH,
}

READER_KEYS: Dict[str, Key] = {
    "q": Key.QUIT,
    "ctrl+q": Key.QUIT,
    "escape": Key.ESCAPE,
    "up": Key.SCROLL_UP,
    "k": Key.SCROLL_UP,
    "down": Key.SCROLL_DOWN,
    "j": Key.SCROLL_DOWN,
    "pageup": Key.PAGE_UP,
    "pagedown": Key.PAGE_DOWN,
    "space": Key.PAGE_DOWN,
}

COMPOSE_KEYS: Dict[str, Key] = {
    "ctrl+q": Key.QUIT,
    "escape": Key.ESCAPE,
    "tab": Key.NEXT_FIELD,
    "shift+tab": Key.PREVIOUS_FIELD,
    "ctrl+s": Key.SUBMIT,
    "ctrl+c": Key.CANCEL,
    "enter": Key.ENTER,
    "backspace": Key.BACKSPACE,
    "left": Key.LEFT,
    "right": Key.RIGHT,
    "up": Key.UP,
    "down": Key.DOWN,
    "home": Key.HOME,
    "end": Key.END,
}

BINDINGS: Dict[ViewMode, Dict[str, Key]] = {
    ViewMode.LIST: LIST_KEYS,
    ViewMode.READER: READER_KEYS,
    ViewMode.COMPOSE: COMPOSE_KEYS,
}

HINTS: Dict[ViewMode, str] = {
    ViewMode.LIST: "q: quit | ↑↓: navigate | enter: read | c: compose | r: reply | g: refresh",
    ViewMode.READER: "q/esc: back | ↑↓: scroll | pgup/pgdn: page",
    ViewMode.COMPOSE: "tab: next field | ctrl+s: send | ctrl+c: cancel | esc: back",
}

RETRY_HINTS: Dict[ViewMode, str] = {
    ViewMode.LIST: "Press g to retry or any other key to dismiss.",
    ViewMode.READER: "Press any key to dismiss.",
    ViewMode.COMPOSE: "Press ctrl+s to retry or any other key to dismiss.",
}


def translate_key(
    key: str, character: Optional[str], mode: ViewMode
) -> Optional[KeyPressed]:
    """Map a Textual key to a logical key press, or ``None`` if unbound."""
    logical = BINDINGS[mode].get(key)
    if logical is not None:
        return KeyPressed(logical)

    # Printable characters are only text while composing
    if mode is ViewMode.COMPOSE and character and len(character) == 1:
        if character.isprintable():
            return KeyPressed(Key.CHARACTER, character)

    return None
