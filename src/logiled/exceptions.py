"""Error types raised by logiled.

Acquisition failures (opening a session, building a transport) raise.
Per-command failures are reported as ``False`` by :class:`LedKeyboard`
after logging; the transport and encoders raise these internally.
"""


class LedKeyboardError(Exception):
    """Base class for all logiled errors."""


class DeviceNotFoundError(LedKeyboardError):
    """No attached keyboard matched the requested filter."""


class AccessDeniedError(LedKeyboardError):
    """The device handle or its interface could not be acquired.

    Usually a permissions problem (missing udev rule) or another driver
    holding the interface.
    """


class UnsupportedError(LedKeyboardError):
    """The command has no protocol mapping for the current model."""


class TransportError(LedKeyboardError):
    """A USB/HID write or transfer failed."""
