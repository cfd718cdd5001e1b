"""
Core value types: keyboard models, colors, device records, effect enums.

Wire values of every enum here are part of the device protocol and are
written into frames as-is.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .keys import Key


class Model(Enum):
    """Supported keyboard families.

    Only ever resolved from (vendor, product, interface) through
    :mod:`logiled.device_catalog`.
    """
    UNKNOWN = "unknown"
    G213 = "g213"
    G410 = "g410"
    G413 = "g413"
    G512 = "g512"
    G513 = "g513"
    G610 = "g610"
    G810 = "g810"
    G815 = "g815"
    G910 = "g910"
    G915 = "g915"
    GPRO = "gpro"


@dataclass(frozen=True)
class Color:
    """8-bit RGB color. No alpha."""
    red: int
    green: int
    blue: int

    def __post_init__(self):
        for name in ("red", "green", "blue"):
            value = getattr(self, name)
            if not 0 <= value <= 0xFF:
                raise ValueError(f"{name} channel out of range: {value}")

    @property
    def packed(self) -> int:
        """Channels packed as ``r | g << 8 | b << 16``."""
        return self.red | self.green << 8 | self.blue << 16

    def as_bytes(self) -> bytes:
        return bytes((self.red, self.green, self.blue))

    @classmethod
    def from_tuple(cls, rgb) -> "Color":
        r, g, b = rgb
        return cls(r, g, b)


WHITE = Color(0xFF, 0xFF, 0xFF)
CYAN = Color(0x00, 0xFF, 0xFF)
BLACK = Color(0x00, 0x00, 0x00)


@dataclass(frozen=True)
class KeyValue:
    """A single key/color assignment, the unit of a lighting request."""
    key: Key
    color: Color


@dataclass(frozen=True)
class DeviceInfo:
    """A discovered keyboard.

    Attributes:
        vendor_id: USB vendor ID.
        product_id: USB product ID.
        interface_number: HID interface carrying the lighting protocol.
        serial_number: iSerialNumber string, empty if unavailable.
        manufacturer: iManufacturer string, empty if unavailable.
        product: iProduct string, empty if unavailable.
        model: Resolved keyboard family.
        path: Backend-specific path used to reopen the device
              (hidraw path bytes for hidapi, ``"bus-address"`` for pyusb).
    """
    vendor_id: int
    product_id: int
    interface_number: int
    serial_number: str = ""
    manufacturer: str = ""
    product: str = ""
    model: Model = Model.UNKNOWN
    path: Union[bytes, str] = ""

    def __str__(self) -> str:
        name = self.product or self.model.value
        text = f"{name} [{self.vendor_id:04x}:{self.product_id:04x}]"
        if self.serial_number:
            text += f" serial {self.serial_number}"
        return text


# =========================================================================
# Native effects
# =========================================================================

class NativeEffectGroup(IntEnum):
    OFF = 0x00
    COLOR = 0x01
    BREATHING = 0x02
    CYCLE = 0x03
    WAVES = 0x04
    RIPPLE = 0x05


class NativeEffect(IntEnum):
    """Firmware-run lighting programs.

    High byte is the :class:`NativeEffectGroup`, low byte the wave
    variation.
    """
    OFF = 0x0000
    COLOR = NativeEffectGroup.COLOR << 8
    BREATHING = NativeEffectGroup.BREATHING << 8
    CYCLE = NativeEffectGroup.CYCLE << 8
    WAVES = NativeEffectGroup.WAVES << 8
    HWAVE = (NativeEffectGroup.WAVES << 8) | 0x01
    VWAVE = (NativeEffectGroup.WAVES << 8) | 0x02
    CWAVE = (NativeEffectGroup.WAVES << 8) | 0x03
    RIPPLE = NativeEffectGroup.RIPPLE << 8

    @property
    def group(self) -> NativeEffectGroup:
        return NativeEffectGroup(self >> 8)

    @property
    def variation(self) -> int:
        return self & 0xFF


class NativeEffectPart(IntEnum):
    """Surface targeted by an effect. ``ALL`` is not on the wire."""
    KEYS = 0x00
    LOGO = 0x01
    ALL = 0xFF


class NativeEffectStorage(IntEnum):
    NONE = 0x00
    USER = 0x01


class StartupMode(IntEnum):
    WAVE = 0x01
    COLOR = 0x02


class OnBoardMode(IntEnum):
    BOARD = 0x01
    SOFTWARE = 0x02
