"""
Keyboard session lifecycle: discovery, exclusive open, close, frame send.

One ``SessionManager`` holds at most one open keyboard. Acquisition
failures raise; sending reports success as a bool.
"""

import logging
from typing import List, Optional

from .device_catalog import find_entry
from .exceptions import AccessDeniedError, DeviceNotFoundError
from .models import DeviceInfo, Model
from .profiles import EP_INTERRUPT_IN, get_profile
from .transport import KeyboardTransport, UsbDeviceRecord, create_transport

log = logging.getLogger(__name__)


def _device_info(record: UsbDeviceRecord) -> Optional[DeviceInfo]:
    entry = find_entry(record.vendor_id, record.product_id, record.interface_number)
    if entry is None:
        return None
    return DeviceInfo(
        vendor_id=record.vendor_id,
        product_id=record.product_id,
        interface_number=entry.interface_number,
        serial_number=record.serial_number,
        manufacturer=record.manufacturer,
        product=record.product,
        model=entry.model,
        path=record.path,
    )


class SessionManager:
    """Owns the transport and the currently open keyboard."""

    def __init__(self, transport: Optional[KeyboardTransport] = None):
        self._transport = transport
        self._device: Optional[DeviceInfo] = None

    @property
    def transport(self) -> KeyboardTransport:
        if self._transport is None:
            self._transport = create_transport()
        return self._transport

    # -- Discovery -----------------------------------------------------

    def list_devices(self) -> List[DeviceInfo]:
        """Supported keyboards currently attached, in enumeration order."""
        devices = []
        for record in self.transport.enumerate():
            info = _device_info(record)
            if info is not None:
                devices.append(info)
        log.debug("Found %d supported keyboard(s)", len(devices))
        return devices

    # -- Lifecycle -----------------------------------------------------

    def open(self, vendor_id: int = 0, product_id: int = 0, serial: str = "") -> DeviceInfo:
        """Open the first attached keyboard matching the filter.

        A zero ``vendor_id``/``product_id`` matches any; a non-empty
        ``serial`` must match exactly.

        Raises:
            DeviceNotFoundError: no supported keyboard matches.
            AccessDeniedError: the device or its interface is busy or
                not permitted, or the previously open keyboard could
                not be released.
        """
        previous = self._device
        if previous is not None and not self.close():
            raise AccessDeniedError(f"Could not release {previous} before reopening")

        for info in self.list_devices():
            if vendor_id and info.vendor_id != vendor_id:
                continue
            if product_id and info.product_id != product_id:
                continue
            if serial and info.serial_number != serial:
                continue
            self._acquire(info)
            return info

        raise DeviceNotFoundError(
            f"No supported keyboard matches vendor={vendor_id:#06x} "
            f"product={product_id:#06x} serial={serial!r}"
        )

    def _acquire(self, info: DeviceInfo) -> None:
        profile = get_profile(info.model)
        endpoint = profile.interrupt_endpoint if profile else EP_INTERRUPT_IN
        record = UsbDeviceRecord(
            vendor_id=info.vendor_id,
            product_id=info.product_id,
            interface_number=info.interface_number,
            path=info.path,
            serial_number=info.serial_number,
        )
        self.transport.open(record, info.interface_number, endpoint)
        self._device = info
        log.info("Opened %s (%s)", info, info.model.value)

    def close(self) -> bool:
        """Release the open keyboard. Safe to call repeatedly."""
        if self._device is None:
            return True
        device, self._device = self._device, None
        ok = self.transport.close()
        if ok:
            log.info("Closed %s", device)
        else:
            log.warning("Closed %s, but the interface was not released cleanly", device)
        return ok

    # -- State ---------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._device is not None

    @property
    def current_device(self) -> Optional[DeviceInfo]:
        return self._device

    @property
    def current_model(self) -> Model:
        return self._device.model if self._device else Model.UNKNOWN

    # -- I/O -----------------------------------------------------------

    def send(self, frame: bytes) -> bool:
        if self._device is None:
            log.warning("Send without an open keyboard")
            return False
        return self.transport.send(frame)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
