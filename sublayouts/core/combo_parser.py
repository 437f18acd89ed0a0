"""
sublayouts.core.combo_parser - Key combo parser for group keymaps.

Turns readable strings such as "mod+shift+tab" into a (modifiers, key)
pair that a host can match against its key events.

Features:
    - Aliases: mod = super = win, ctrl = control, alt = mod1.
    - Case-insensitive: "Mod+Shift+Tab" == "mod+shift+tab".
    - Key aliases: "enter" == "return", "esc" == "escape", "," == "comma".
    - Clear errors for invalid combos (ComboParseError).
"""

from __future__ import annotations

import enum
import logging
import string

log = logging.getLogger(__name__)


class Modifier(enum.IntFlag):
    """Modifier bits, X11 style."""
    NONE = 0
    SHIFT = 1
    CONTROL = 4
    ALT = 8
    SUPER = 64


# ============================================================================
# Modifier aliases
# ============================================================================
_MODIFIER_MAP: dict[str, Modifier] = {
    "shift": Modifier.SHIFT,
    "ctrl": Modifier.CONTROL,
    "control": Modifier.CONTROL,
    "alt": Modifier.ALT,
    "mod1": Modifier.ALT,
    "meta": Modifier.ALT,
    "mod": Modifier.SUPER,
    "mod4": Modifier.SUPER,
    "super": Modifier.SUPER,
    "win": Modifier.SUPER,
}

_MODIFIER_NAMES: list[tuple[Modifier, str]] = [
    (Modifier.SUPER, "Mod"),
    (Modifier.CONTROL, "Ctrl"),
    (Modifier.ALT, "Alt"),
    (Modifier.SHIFT, "Shift"),
]


# ============================================================================
# Key names
# ============================================================================
_KEY_ALIASES: dict[str, str] = {
    "enter": "return",
    "esc": "escape",
    "del": "delete",
    "pgup": "pageup",
    "pgdn": "pagedown",
    ",": "comma",
    ".": "period",
    "-": "minus",
    "=": "equal",
    "equals": "equal",
    "/": "slash",
    ";": "semicolon",
    "[": "bracketleft",
    "]": "bracketright",
}

_KEYS: set[str] = set()


def _build_keys() -> None:
    """Populate the key name set on first use."""
    if _KEYS:
        return
    _KEYS.update(string.ascii_lowercase)
    _KEYS.update(string.digits)
    _KEYS.update(f"f{i}" for i in range(1, 25))
    _KEYS.update(
        {
            "return", "escape", "space", "tab", "backspace", "delete",
            "insert", "home", "end", "pageup", "pagedown",
            "left", "right", "up", "down",
            "comma", "period", "minus", "equal", "slash", "semicolon",
            "bracketleft", "bracketright", "backslash", "grave", "apostrophe",
        }
    )


class ComboParseError(ValueError):
    """Raised when a combo string cannot be parsed."""


def parse_combo(combo: str) -> tuple[Modifier, str]:
    """
    Parse a combo string into (modifiers, canonical key name).

    Raises:
        ComboParseError: if the combo is empty, has no key, has more than
                         one key, repeats a modifier or contains an
                         unknown token.
    """
    _build_keys()

    if not combo or not combo.strip():
        raise ComboParseError("Empty combo string")

    parts = [p.strip().lower() for p in combo.split("+")]
    parts = [p for p in parts if p]
    if not parts:
        raise ComboParseError(f"No valid parts in combo: {combo!r}")

    modifiers = Modifier.NONE
    key: str | None = None

    for part in parts:
        if part in _MODIFIER_MAP:
            flag = _MODIFIER_MAP[part]
            if modifiers & flag:
                raise ComboParseError(f"Duplicate modifier {part!r} in combo: {combo!r}")
            modifiers |= flag
            continue

        name = _KEY_ALIASES.get(part, part)
        if name not in _KEYS:
            raise ComboParseError(f"Unknown key or modifier: {part!r} in combo: {combo!r}")
        if key is not None:
            raise ComboParseError(f"Multiple keys in combo: {combo!r}")
        key = name

    if key is None:
        raise ComboParseError(f"No key found in combo: {combo!r}")

    return modifiers, key


def combo_to_str(modifiers: Modifier, key: str) -> str:
    """Readable form, e.g. (SUPER | SHIFT, "tab") -> "Mod+Shift+Tab"."""
    parts = [name for flag, name in _MODIFIER_NAMES if modifiers & flag]
    parts.append(key.upper() if len(key) == 1 else key.capitalize())
    return "+".join(parts)


def is_valid_combo(combo: str) -> bool:
    try:
        parse_combo(combo)
    except ComboParseError:
        return False
    return True
