"""
Logical key identifiers and key groups.

A key code packs its address group in the high byte and its offset in the
low byte::

    group(key)  = key >> 8
    offset(key) = key & 0xFF

Offsets in the ``KEYS`` group are USB HID keyboard usage IDs; multimedia
offsets are consumer-page usages.
"""

from enum import Enum, IntEnum
from typing import Dict, Tuple


class KeyAddressGroup(IntEnum):
    """Address zones with independent addressing in the device protocol."""
    LOGO = 0x00
    INDICATORS = 0x01
    MULTIMEDIA = 0x02
    GKEYS = 0x03
    KEYS = 0x04


def _code(group: KeyAddressGroup, offset: int) -> int:
    return group << 8 | offset


class Key(IntEnum):
    LOGO = _code(KeyAddressGroup.LOGO, 0x01)
    LOGO2 = _code(KeyAddressGroup.LOGO, 0x02)

    BACKLIGHT = _code(KeyAddressGroup.INDICATORS, 0x01)
    GAME = _code(KeyAddressGroup.INDICATORS, 0x02)
    CAPS = _code(KeyAddressGroup.INDICATORS, 0x03)
    SCROLL = _code(KeyAddressGroup.INDICATORS, 0x04)
    NUM = _code(KeyAddressGroup.INDICATORS, 0x05)

    NEXT = _code(KeyAddressGroup.MULTIMEDIA, 0xB5)
    PREV = _code(KeyAddressGroup.MULTIMEDIA, 0xB6)
    STOP = _code(KeyAddressGroup.MULTIMEDIA, 0xB7)
    PLAY = _code(KeyAddressGroup.MULTIMEDIA, 0xCD)
    MUTE = _code(KeyAddressGroup.MULTIMEDIA, 0xE2)

    G1 = _code(KeyAddressGroup.GKEYS, 0x01)
    G2 = _code(KeyAddressGroup.GKEYS, 0x02)
    G3 = _code(KeyAddressGroup.GKEYS, 0x03)
    G4 = _code(KeyAddressGroup.GKEYS, 0x04)
    G5 = _code(KeyAddressGroup.GKEYS, 0x05)
    G6 = _code(KeyAddressGroup.GKEYS, 0x06)
    G7 = _code(KeyAddressGroup.GKEYS, 0x07)
    G8 = _code(KeyAddressGroup.GKEYS, 0x08)
    G9 = _code(KeyAddressGroup.GKEYS, 0x09)

    A = _code(KeyAddressGroup.KEYS, 0x04)
    B = _code(KeyAddressGroup.KEYS, 0x05)
    C = _code(KeyAddressGroup.KEYS, 0x06)
    D = _code(KeyAddressGroup.KEYS, 0x07)
    E = _code(KeyAddressGroup.KEYS, 0x08)
    F = _code(KeyAddressGroup.KEYS, 0x09)
    G = _code(KeyAddressGroup.KEYS, 0x0A)
    H = _code(KeyAddressGroup.KEYS, 0x0B)
    I = _code(KeyAddressGroup.KEYS, 0x0C)  # noqa: E741
    J = _code(KeyAddressGroup.KEYS, 0x0D)
    K = _code(KeyAddressGroup.KEYS, 0x0E)
    L = _code(KeyAddressGroup.KEYS, 0x0F)
    M = _code(KeyAddressGroup.KEYS, 0x10)
    N = _code(KeyAddressGroup.KEYS, 0x11)
    O = _code(KeyAddressGroup.KEYS, 0x12)  # noqa: E741
    P = _code(KeyAddressGroup.KEYS, 0x13)
    Q = _code(KeyAddressGroup.KEYS, 0x14)
    R = _code(KeyAddressGroup.KEYS, 0x15)
    S = _code(KeyAddressGroup.KEYS, 0x16)
    T = _code(KeyAddressGroup.KEYS, 0x17)
    U = _code(KeyAddressGroup.KEYS, 0x18)
    V = _code(KeyAddressGroup.KEYS, 0x19)
    W = _code(KeyAddressGroup.KEYS, 0x1A)
    X = _code(KeyAddressGroup.KEYS, 0x1B)
    Y = _code(KeyAddressGroup.KEYS, 0x1C)
    Z = _code(KeyAddressGroup.KEYS, 0x1D)
    N1 = _code(KeyAddressGroup.KEYS, 0x1E)
    N2 = _code(KeyAddressGroup.KEYS, 0x1F)
    N3 = _code(KeyAddressGroup.KEYS, 0x20)
    N4 = _code(KeyAddressGroup.KEYS, 0x21)
    N5 = _code(KeyAddressGroup.KEYS, 0x22)
    N6 = _code(KeyAddressGroup.KEYS, 0x23)
    N7 = _code(KeyAddressGroup.KEYS, 0x24)
    N8 = _code(KeyAddressGroup.KEYS, 0x25)
    N9 = _code(KeyAddressGroup.KEYS, 0x26)
    N0 = _code(KeyAddressGroup.KEYS, 0x27)
    ENTER = _code(KeyAddressGroup.KEYS, 0x28)
    ESC = _code(KeyAddressGroup.KEYS, 0x29)
    BACKSPACE = _code(KeyAddressGroup.KEYS, 0x2A)
    TAB = _code(KeyAddressGroup.KEYS, 0x2B)
    SPACE = _code(KeyAddressGroup.KEYS, 0x2C)
    MINUS = _code(KeyAddressGroup.KEYS, 0x2D)
    EQUAL = _code(KeyAddressGroup.KEYS, 0x2E)
    OPEN_BRACKET = _code(KeyAddressGroup.KEYS, 0x2F)
    CLOSE_BRACKET = _code(KeyAddressGroup.KEYS, 0x30)
    BACKSLASH = _code(KeyAddressGroup.KEYS, 0x31)
    DOLLAR = _code(KeyAddressGroup.KEYS, 0x32)
    SEMICOLON = _code(KeyAddressGroup.KEYS, 0x33)
    QUOTE = _code(KeyAddressGroup.KEYS, 0x34)
    TILDE = _code(KeyAddressGroup.KEYS, 0x35)
    COMMA = _code(KeyAddressGroup.KEYS, 0x36)
    PERIOD = _code(KeyAddressGroup.KEYS, 0x37)
    SLASH = _code(KeyAddressGroup.KEYS, 0x38)
    CAPS_LOCK = _code(KeyAddressGroup.KEYS, 0x39)
    F1 = _code(KeyAddressGroup.KEYS, 0x3A)
    F2 = _code(KeyAddressGroup.KEYS, 0x3B)
    F3 = _code(KeyAddressGroup.KEYS, 0x3C)
    F4 = _code(KeyAddressGroup.KEYS, 0x3D)
    F5 = _code(KeyAddressGroup.KEYS, 0x3E)
    F6 = _code(KeyAddressGroup.KEYS, 0x3F)
    F7 = _code(KeyAddressGroup.KEYS, 0x40)
    F8 = _code(KeyAddressGroup.KEYS, 0x41)
    F9 = _code(KeyAddressGroup.KEYS, 0x42)
    F10 = _code(KeyAddressGroup.KEYS, 0x43)
    F11 = _code(KeyAddressGroup.KEYS, 0x44)
    F12 = _code(KeyAddressGroup.KEYS, 0x45)
    PRINT_SCREEN = _code(KeyAddressGroup.KEYS, 0x46)
    SCROLL_LOCK = _code(KeyAddressGroup.KEYS, 0x47)
    PAUSE_BREAK = _code(KeyAddressGroup.KEYS, 0x48)
    INSERT = _code(KeyAddressGroup.KEYS, 0x49)
    HOME = _code(KeyAddressGroup.KEYS, 0x4A)
    PAGE_UP = _code(KeyAddressGroup.KEYS, 0x4B)
    DEL = _code(KeyAddressGroup.KEYS, 0x4C)
    END = _code(KeyAddressGroup.KEYS, 0x4D)
    PAGE_DOWN = _code(KeyAddressGroup.KEYS, 0x4E)
    ARROW_RIGHT = _code(KeyAddressGroup.KEYS, 0x4F)
    ARROW_LEFT = _code(KeyAddressGroup.KEYS, 0x50)
    ARROW_BOTTOM = _code(KeyAddressGroup.KEYS, 0x51)
    ARROW_TOP = _code(KeyAddressGroup.KEYS, 0x52)
    NUM_LOCK = _code(KeyAddressGroup.KEYS, 0x53)
    NUM_SLASH = _code(KeyAddressGroup.KEYS, 0x54)
    NUM_ASTERISK = _code(KeyAddressGroup.KEYS, 0x55)
    NUM_MINUS = _code(KeyAddressGroup.KEYS, 0x56)
    NUM_PLUS = _code(KeyAddressGroup.KEYS, 0x57)
    NUM_ENTER = _code(KeyAddressGroup.KEYS, 0x58)
    NUM_1 = _code(KeyAddressGroup.KEYS, 0x59)
    NUM_2 = _code(KeyAddressGroup.KEYS, 0x5A)
    NUM_3 = _code(KeyAddressGroup.KEYS, 0x5B)
    NUM_4 = _code(KeyAddressGroup.KEYS, 0x5C)
    NUM_5 = _code(KeyAddressGroup.KEYS, 0x5D)
    NUM_6 = _code(KeyAddressGroup.KEYS, 0x5E)
    NUM_7 = _code(KeyAddressGroup.KEYS, 0x5F)
    NUM_8 = _code(KeyAddressGroup.KEYS, 0x60)
    NUM_9 = _code(KeyAddressGroup.KEYS, 0x61)
    NUM_0 = _code(KeyAddressGroup.KEYS, 0x62)
    NUM_DOT = _code(KeyAddressGroup.KEYS, 0x63)
    INTL_BACKSLASH = _code(KeyAddressGroup.KEYS, 0x64)
    MENU = _code(KeyAddressGroup.KEYS, 0x65)
    CTRL_LEFT = _code(KeyAddressGroup.KEYS, 0xE0)
    SHIFT_LEFT = _code(KeyAddressGroup.KEYS, 0xE1)
    ALT_LEFT = _code(KeyAddressGroup.KEYS, 0xE2)
    WIN_LEFT = _code(KeyAddressGroup.KEYS, 0xE3)
    CTRL_RIGHT = _code(KeyAddressGroup.KEYS, 0xE4)
    SHIFT_RIGHT = _code(KeyAddressGroup.KEYS, 0xE5)
    ALT_RIGHT = _code(KeyAddressGroup.KEYS, 0xE6)
    WIN_RIGHT = _code(KeyAddressGroup.KEYS, 0xE7)

    @property
    def group(self) -> KeyAddressGroup:
        return KeyAddressGroup(self >> 8)

    @property
    def offset(self) -> int:
        return self & 0xFF


# Numeric pad range, absent on tenkeyless boards
NUMPAD_KEYS = frozenset(k for k in Key if Key.NUM_LOCK <= k <= Key.NUM_DOT)

# Modifiers sit at 0xE0-0xE7 in the HID usage table
MODIFIER_KEYS = frozenset(k for k in Key if Key.CTRL_LEFT <= k <= Key.WIN_RIGHT)


# =========================================================================
# Key groups (bulk operations)
# =========================================================================

class KeyGroup(Enum):
    LOGO = "logo"
    INDICATORS = "indicators"
    GKEYS = "gkeys"
    FKEYS = "fkeys"
    MODIFIERS = "modifiers"
    MULTIMEDIA = "multimedia"
    ARROWS = "arrows"
    NUMERIC = "numeric"
    FUNCTIONS = "functions"
    KEYS = "keys"


KEY_GROUPS: Dict[KeyGroup, Tuple[Key, ...]] = {
    KeyGroup.LOGO: (Key.LOGO, Key.LOGO2),
    KeyGroup.INDICATORS: (
        Key.CAPS, Key.NUM, Key.SCROLL, Key.GAME, Key.BACKLIGHT,
    ),
    KeyGroup.MULTIMEDIA: (
        Key.NEXT, Key.PREV, Key.STOP, Key.PLAY, Key.MUTE,
    ),
    KeyGroup.GKEYS: (
        Key.G1, Key.G2, Key.G3, Key.G4, Key.G5, Key.G6, Key.G7, Key.G8, Key.G9,
    ),
    KeyGroup.FKEYS: (
        Key.F1, Key.F2, Key.F3, Key.F4, Key.F5, Key.F6,
        Key.F7, Key.F8, Key.F9, Key.F10, Key.F11, Key.F12,
    ),
    KeyGroup.MODIFIERS: (
        Key.SHIFT_LEFT, Key.CTRL_LEFT, Key.WIN_LEFT, Key.ALT_LEFT,
        Key.ALT_RIGHT, Key.WIN_RIGHT, Key.CTRL_RIGHT, Key.SHIFT_RIGHT,
        Key.MENU,
    ),
    KeyGroup.FUNCTIONS: (
        Key.ESC, Key.PRINT_SCREEN, Key.SCROLL_LOCK, Key.PAUSE_BREAK,
        Key.INSERT, Key.DEL, Key.HOME, Key.END, Key.PAGE_UP, Key.PAGE_DOWN,
    ),
    KeyGroup.ARROWS: (
        Key.ARROW_TOP, Key.ARROW_LEFT, Key.ARROW_BOTTOM, Key.ARROW_RIGHT,
    ),
    KeyGroup.NUMERIC: (
        Key.NUM_1, Key.NUM_2, Key.NUM_3, Key.NUM_4, Key.NUM_5,
        Key.NUM_6, Key.NUM_7, Key.NUM_8, Key.NUM_9, Key.NUM_0,
        Key.NUM_DOT, Key.NUM_ENTER, Key.NUM_PLUS, Key.NUM_MINUS,
        Key.NUM_ASTERISK, Key.NUM_SLASH, Key.NUM_LOCK,
    ),
    KeyGroup.KEYS: (
        Key.A, Key.B, Key.C, Key.D, Key.E, Key.F, Key.G, Key.H, Key.I,
        Key.J, Key.K, Key.L, Key.M, Key.N, Key.O, Key.P, Key.Q, Key.R,
        Key.S, Key.T, Key.U, Key.V, Key.W, Key.X, Key.Y, Key.Z,
        Key.N1, Key.N2, Key.N3, Key.N4, Key.N5,
        Key.N6, Key.N7, Key.N8, Key.N9, Key.N0,
        Key.ENTER, Key.BACKSPACE, Key.TAB, Key.SPACE, Key.MINUS, Key.EQUAL,
        Key.OPEN_BRACKET, Key.CLOSE_BRACKET, Key.BACKSLASH, Key.DOLLAR,
        Key.SEMICOLON, Key.QUOTE, Key.TILDE, Key.COMMA, Key.PERIOD,
        Key.SLASH, Key.CAPS_LOCK, Key.INTL_BACKSLASH,
    ),
}

# Order used when lighting every key at once
ALL_KEYS_ORDER: Tuple[KeyGroup, ...] = (
    KeyGroup.LOGO,
    KeyGroup.INDICATORS,
    KeyGroup.MULTIMEDIA,
    KeyGroup.GKEYS,
    KeyGroup.FKEYS,
    KeyGroup.FUNCTIONS,
    KeyGroup.ARROWS,
    KeyGroup.NUMERIC,
    KeyGroup.MODIFIERS,
    KeyGroup.KEYS,
)


def keys_in_group(group: KeyGroup) -> Tuple[Key, ...]:
    """Fixed ordered key set for a bulk group."""
    return KEY_GROUPS[group]
