"""
USB I/O layer for Logitech lighting frames.

The ``KeyboardTransport`` ABC abstracts raw device access so that:
  • Tests can inject a mock transport (no real hardware needed).
  • ``PyUsbTransport`` talks HID SET_REPORT control transfers via pyusb.
  • ``HidApiTransport`` writes output reports through the OS HID driver.

Linux dependencies (install one):
  • pyusb:  ``pip install pyusb``   (needs libusb1: ``apt install libusb-1.0-0``)
  • hidapi: ``pip install hidapi`` (needs libhidapi: ``apt install libhidapi-dev``)
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Union

from . import conf
from .exceptions import AccessDeniedError, TransportError
from .profiles import EP_INTERRUPT_IN, SHORT_FRAME_SIZE

# Optional USB backends, graceful import
try:
    import usb.core
    import usb.util
    PYUSB_AVAILABLE = True
except ImportError:
    PYUSB_AVAILABLE = False

try:
    import hid
    HIDAPI_AVAILABLE = True
except ImportError:
    HIDAPI_AVAILABLE = False

log = logging.getLogger(__name__)


# =========================================================================
# Constants
# =========================================================================

USB_CLASS_HID = 0x03

# HID class SET_REPORT (host-to-device, class, interface)
HID_REQUEST_TYPE = 0x21
HID_SET_REPORT = 0x09
REPORT_VALUE_SHORT = 0x0211   # output report 0x11
REPORT_VALUE_LONG = 0x0212    # output report 0x12

DRAIN_LENGTH = 64
DRAIN_TIMEOUT_MS = 1
DRAIN_DELAY = 0.001   # seconds between write and drain


@dataclass(frozen=True)
class UsbDeviceRecord:
    """One enumerated HID interface.

    ``path`` is whatever the backend needs to reopen this exact device.
    """
    vendor_id: int
    product_id: int
    interface_number: int
    path: Union[bytes, str]
    serial_number: str = ""
    manufacturer: str = ""
    product: str = ""


def _hex(frame: bytes) -> str:
    return frame.hex(" ")


# =========================================================================
# Abstract transport
# =========================================================================

class KeyboardTransport(ABC):
    """Raw device I/O. One open device at a time."""

    name = "abstract"

    @abstractmethod
    def enumerate(self, vendor_id: int = 0, product_id: int = 0) -> List[UsbDeviceRecord]:
        """List HID interfaces; 0 matches any vendor/product."""

    @abstractmethod
    def open(self, record: UsbDeviceRecord, interface: int,
             endpoint: int = EP_INTERRUPT_IN) -> None:
        """Acquire *record* for exclusive use.

        Raises:
            AccessDeniedError: device or interface could not be acquired.
        """

    @abstractmethod
    def close(self) -> bool:
        """Release the device. False if releasing the interface failed."""

    @abstractmethod
    def write(self, frame: bytes) -> int:
        """Send one frame. Returns bytes written.

        Raises:
            TransportError: on any backend failure.
        """

    @abstractmethod
    def read_interrupt(self, length: int, timeout_ms: int) -> bytes:
        """Read the pending input report, empty on timeout."""

    @property
    @abstractmethod
    def is_open(self) -> bool:
        ...

    @property
    def drains(self) -> bool:
        """Whether ``send`` reads back the device's acknowledgement."""
        return False

    def send(self, frame: bytes) -> bool:
        """Write *frame*, then drain the response where supported."""
        try:
            written = self.write(frame)
        except TransportError as e:
            log.warning("Frame write failed: %s", e)
            return False
        if written != len(frame):
            log.warning("Short write: %d of %d bytes", written, len(frame))
            return False
        if self.drains:
            time.sleep(DRAIN_DELAY)
            self.read_interrupt(DRAIN_LENGTH, DRAIN_TIMEOUT_MS)
        return True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        if self.is_open:
            self.close()


# =========================================================================
# Real transport: pyusb
# =========================================================================
# Sequence per open:
#   find(bus, address)
#   detach kernel driver (if active) on the lighting interface
#   claim interface
# and the reverse on close. Frames go out as SET_REPORT control
# transfers; the firmware answers on the interrupt IN endpoint.

def _usb_string(device, index: int) -> str:
    if not index:
        return ""
    try:
        return usb.util.get_string(device, index) or ""
    except (ValueError, NotImplementedError, usb.core.USBError) as e:
        log.debug("String descriptor %d unreadable: %s", index, e)
        return ""


class PyUsbTransport(KeyboardTransport):
    """Real USB transport using pyusb (libusb backend).

    Requires: ``pip install pyusb`` + ``apt install libusb-1.0-0``
    """

    name = "pyusb"

    def __init__(self, timeout_ms: Optional[int] = None):
        if not PYUSB_AVAILABLE:
            raise ImportError(
                "pyusb is not installed. Install with: pip install pyusb\n"
                "Also need libusb: apt install libusb-1.0-0 (Debian/Ubuntu) "
                "or dnf install libusb1 (Fedora)"
            )
        self._timeout = timeout_ms if timeout_ms is not None else conf.usb_timeout_ms()
        self._device = None
        self._interface = 0
        self._endpoint = EP_INTERRUPT_IN
        self._detached = False

    def enumerate(self, vendor_id=0, product_id=0):
        kwargs = {'find_all': True}
        if vendor_id:
            kwargs['idVendor'] = vendor_id
        if product_id:
            kwargs['idProduct'] = product_id

        records = []
        for dev in usb.core.find(**kwargs):
            try:
                interfaces = [
                    intf.bInterfaceNumber
                    for cfg in dev for intf in cfg
                    if intf.bInterfaceClass == USB_CLASS_HID and intf.bAlternateSetting == 0
                ]
            except usb.core.USBError as e:
                log.debug("Skipping %04x:%04x: %s", dev.idVendor, dev.idProduct, e)
                continue
            serial = _usb_string(dev, dev.iSerialNumber)
            manufacturer = _usb_string(dev, dev.iManufacturer)
            product = _usb_string(dev, dev.iProduct)
            for number in interfaces:
                records.append(UsbDeviceRecord(
                    vendor_id=dev.idVendor,
                    product_id=dev.idProduct,
                    interface_number=number,
                    path=f"{dev.bus}-{dev.address}",
                    serial_number=serial,
                    manufacturer=manufacturer,
                    product=product,
                ))
        return records

    def open(self, record, interface, endpoint=EP_INTERRUPT_IN):
        bus, address = (int(part) for part in str(record.path).split("-"))
        device = usb.core.find(idVendor=record.vendor_id, idProduct=record.product_id,
                               bus=bus, address=address)
        if device is None:
            raise AccessDeniedError(f"USB device {record.path} disappeared")

        detached = False
        try:
            if device.is_kernel_driver_active(interface):
                device.detach_kernel_driver(interface)
                detached = True
        except NotImplementedError:
            pass
        except usb.core.USBError as e:
            usb.util.dispose_resources(device)
            raise AccessDeniedError(f"Cannot detach kernel driver: {e}") from e

        try:
            usb.util.claim_interface(device, interface)
        except usb.core.USBError as e:
            if detached:
                try:
                    device.attach_kernel_driver(interface)
                except usb.core.USBError as err:
                    log.warning("Kernel driver reattach failed: %s", err)
            usb.util.dispose_resources(device)
            raise AccessDeniedError(f"Cannot claim interface {interface}: {e}") from e

        self._device = device
        self._interface = interface
        self._endpoint = endpoint
        self._detached = detached

    def close(self):
        if self._device is None:
            return True
        ok = True
        try:
            usb.util.release_interface(self._device, self._interface)
        except usb.core.USBError as e:
            log.warning("Release of interface %d failed: %s", self._interface, e)
            ok = False
        if self._detached:
            try:
                self._device.attach_kernel_driver(self._interface)
            except usb.core.USBError as e:
                log.warning("Kernel driver reattach failed: %s", e)
        usb.util.dispose_resources(self._device)
        self._device = None
        self._detached = False
        return ok

    def write(self, frame):
        if self._device is None:
            raise TransportError("Transport not open")
        value = REPORT_VALUE_SHORT if len(frame) <= SHORT_FRAME_SIZE else REPORT_VALUE_LONG
        log.debug("ctrl %04x: %s", value, _hex(frame))
        try:
            return self._device.ctrl_transfer(HID_REQUEST_TYPE, HID_SET_REPORT, value,
                                              self._interface, frame, self._timeout)
        except usb.core.USBError as e:
            raise TransportError(f"Control transfer failed: {e}") from e

    def read_interrupt(self, length, timeout_ms):
        if self._device is None:
            return b''
        try:
            return bytes(self._device.read(self._endpoint, length, timeout_ms))
        except usb.core.USBError as e:
            # Nothing pending is the normal case
            log.debug("Interrupt read on %#04x: %s", self._endpoint, e)
            return b''

    @property
    def is_open(self):
        return self._device is not None

    @property
    def drains(self):
        return True


# =========================================================================
# Real transport: HIDAPI
# =========================================================================
# hidapi handles are not held across a session: the OS driver stays
# attached and every frame reopens the device by path. Nothing is read
# back.

class HidApiTransport(KeyboardTransport):
    """USB transport using HIDAPI (hidapi library).

    Requires: ``pip install hidapi`` + ``apt install libhidapi-dev``
    """

    name = "hidapi"

    def __init__(self):
        if not HIDAPI_AVAILABLE:
            raise ImportError(
                "hidapi is not installed. Install with: pip install hidapi\n"
                "Also need libhidapi: apt install libhidapi-dev (Debian/Ubuntu) "
                "or dnf install hidapi-devel (Fedora)"
            )
        self._path = None

    def enumerate(self, vendor_id=0, product_id=0):
        records = []
        for info in hid.enumerate(vendor_id, product_id):
            records.append(UsbDeviceRecord(
                vendor_id=info['vendor_id'],
                product_id=info['product_id'],
                interface_number=info.get('interface_number', -1),
                path=info['path'],
                serial_number=info.get('serial_number') or "",
                manufacturer=info.get('manufacturer_string') or "",
                product=info.get('product_string') or "",
            ))
        return records

    def _open_device(self, path):
        device = hid.device()
        try:
            device.open_path(path)
        except OSError as e:
            raise AccessDeniedError(f"Cannot open HID device {path!r}: {e}") from e
        return device

    def open(self, record, interface, endpoint=EP_INTERRUPT_IN):
        # Probe access only; the handle is reopened for every frame
        self._open_device(record.path).close()
        self._path = record.path

    def close(self):
        self._path = None
        return True

    def write(self, frame):
        if self._path is None:
            raise TransportError("Transport not open")
        log.debug("hid write: %s", _hex(frame))
        try:
            device = self._open_device(self._path)
        except AccessDeniedError as e:
            raise TransportError(str(e)) from e
        try:
            written = device.write(frame)
        except (OSError, ValueError) as e:
            raise TransportError(f"HID write failed: {e}") from e
        finally:
            device.close()
        if written < 0:
            raise TransportError("HID write failed")
        return written

    def read_interrupt(self, length, timeout_ms):
        return b''

    @property
    def is_open(self):
        return self._path is not None


# =========================================================================
# Backend selection
# =========================================================================

_TRANSPORTS = {
    'pyusb': PyUsbTransport,
    'hidapi': HidApiTransport,
}


def available_backends() -> dict:
    """Backend name -> importable, in order of preference."""
    return {"pyusb": PYUSB_AVAILABLE, "hidapi": HIDAPI_AVAILABLE}


def create_transport(backend: Optional[str] = None) -> KeyboardTransport:
    """Build a transport: explicit *backend*, configured preference, then
    pyusb, then hidapi.

    Raises:
        ValueError: unknown backend name.
        ImportError: the chosen backend, or every backend, is missing.
    """
    name = backend or conf.preferred_backend()
    if name:
        if name not in _TRANSPORTS:
            raise ValueError(f"Unknown backend: {name!r}")
        return _TRANSPORTS[name]()
    for name, available in available_backends().items():
        if available:
            return _TRANSPORTS[name]()
    raise ImportError(
        "No USB backend available. Install pyusb or hidapi:\n"
        "  pip install pyusb   (+ apt install libusb-1.0-0)\n"
        "  pip install hidapi  (+ apt install libhidapi-dev)"
    )
