"""logiled - per-key RGB lighting control for Logitech G-series keyboards."""

from .__version__ import __version__
from .device_catalog import LOGITECH_VID, SUPPORTED_KEYBOARDS
from .exceptions import (
    AccessDeniedError,
    DeviceNotFoundError,
    LedKeyboardError,
    TransportError,
    UnsupportedError,
)
from .keyboard import LedKeyboard
from .keys import Key, KeyGroup
from .models import (
    Color,
    DeviceInfo,
    KeyValue,
    Model,
    NativeEffect,
    NativeEffectPart,
    NativeEffectStorage,
    OnBoardMode,
    StartupMode,
)
from .session import SessionManager

__all__ = [
    "__version__",
    "LOGITECH_VID",
    "SUPPORTED_KEYBOARDS",
    "AccessDeniedError",
    "DeviceNotFoundError",
    "LedKeyboardError",
    "TransportError",
    "UnsupportedError",
    "LedKeyboard",
    "Key",
    "KeyGroup",
    "Color",
    "DeviceInfo",
    "KeyValue",
    "Model",
    "NativeEffect",
    "NativeEffectPart",
    "NativeEffectStorage",
    "OnBoardMode",
    "StartupMode",
    "SessionManager",
]
