"""Mock tests for the USB transports and backend selection.

No real USB hardware required: the ``usb`` and ``hid`` modules are
replaced with mocks inside ``logiled.transport``.
"""

from unittest.mock import MagicMock, call, patch

import pytest

from logiled.exceptions import AccessDeniedError, TransportError
from logiled.transport import (
    DRAIN_LENGTH,
    DRAIN_TIMEOUT_MS,
    HID_REQUEST_TYPE,
    HID_SET_REPORT,
    REPORT_VALUE_LONG,
    REPORT_VALUE_SHORT,
    HidApiTransport,
    KeyboardTransport,
    PyUsbTransport,
    UsbDeviceRecord,
    available_backends,
    create_transport,
)

SHORT = bytes([0x11, 0xFF, 0x0C, 0x5A]).ljust(20, b"\x00")
LONG = bytes([0x12, 0xFF, 0x0C, 0x3A]).ljust(64, b"\x00")
RECORD = UsbDeviceRecord(0x046D, 0xC331, 1, "3-7")


class FakeUSBError(Exception):
    pass


@pytest.fixture(autouse=True)
def _patch_sleep():
    """Disable time.sleep in transport for fast tests."""
    with patch("logiled.transport.time.sleep"):
        yield


@pytest.fixture
def usb_mod():
    mod = MagicMock()
    mod.core.USBError = FakeUSBError
    with patch("logiled.transport.usb", mod, create=True), \
            patch("logiled.transport.PYUSB_AVAILABLE", True):
        yield mod


@pytest.fixture
def hid_mod():
    mod = MagicMock()
    with patch("logiled.transport.hid", mod, create=True), \
            patch("logiled.transport.HIDAPI_AVAILABLE", True):
        yield mod


def _usb_device(bus=3, address=7, interfaces=((0, 3), (1, 3), (2, 1))):
    """Fake pyusb device: one configuration with (number, class) interfaces."""
    dev = MagicMock()
    dev.idVendor, dev.idProduct = 0x046D, 0xC331
    dev.bus, dev.address = bus, address
    dev.iSerialNumber, dev.iManufacturer, dev.iProduct = 3, 1, 2
    cfg = []
    for number, cls in interfaces:
        intf = MagicMock()
        intf.bInterfaceNumber = number
        intf.bInterfaceClass = cls
        intf.bAlternateSetting = 0
        cfg.append(intf)
    dev.__iter__.return_value = iter([cfg])
    return dev


# =========================================================================
# Abstract send
# =========================================================================

class _FakeTransport(KeyboardTransport):
    def __init__(self, drains=False):
        self.write = MagicMock(side_effect=len)
        self.read_interrupt = MagicMock(return_value=b"")
        self._drains = drains

    def enumerate(self, vendor_id=0, product_id=0):
        return []

    def open(self, record, interface, endpoint=0x82):
        pass

    def close(self):
        return True

    def write(self, frame):
        raise NotImplementedError

    def read_interrupt(self, length, timeout_ms):
        raise NotImplementedError

    @property
    def is_open(self):
        return True

    @property
    def drains(self):
        return self._drains


class TestSend:

    def test_success(self):
        t = _FakeTransport()
        assert t.send(SHORT) is True
        t.write.assert_called_once_with(SHORT)
        t.read_interrupt.assert_not_called()

    def test_drain_after_write(self):
        t = _FakeTransport(drains=True)
        assert t.send(SHORT) is True
        t.read_interrupt.assert_called_once_with(DRAIN_LENGTH, DRAIN_TIMEOUT_MS)

    def test_write_error_is_false(self):
        t = _FakeTransport()
        t.write.side_effect = TransportError("pipe")
        assert t.send(SHORT) is False

    def test_short_write_is_false(self):
        t = _FakeTransport()
        t.write.side_effect = None
        t.write.return_value = 5
        assert t.send(SHORT) is False


# =========================================================================
# pyusb
# =========================================================================

class TestPyUsbEnumerate:

    def test_one_record_per_hid_interface(self, usb_mod):
        usb_mod.core.find.return_value = [_usb_device()]
        usb_mod.util.get_string.side_effect = lambda dev, idx: {1: "Logitech", 2: "G810", 3: "SN1"}[idx]
        records = PyUsbTransport(timeout_ms=2000).enumerate(0x046D, 0xC331)
        assert [r.interface_number for r in records] == [0, 1]
        assert records[1] == UsbDeviceRecord(0x046D, 0xC331, 1, "3-7", "SN1", "Logitech", "G810")
        usb_mod.core.find.assert_called_once_with(find_all=True, idVendor=0x046D, idProduct=0xC331)

    def test_wildcard_filter(self, usb_mod):
        usb_mod.core.find.return_value = []
        PyUsbTransport(timeout_ms=2000).enumerate()
        usb_mod.core.find.assert_called_once_with(find_all=True)

    def test_unreadable_strings_are_empty(self, usb_mod):
        usb_mod.core.find.return_value = [_usb_device()]
        usb_mod.util.get_string.side_effect = FakeUSBError("access denied")
        records = PyUsbTransport(timeout_ms=2000).enumerate()
        assert records[0].serial_number == ""
        assert records[0].product == ""


class TestPyUsbOpen:

    def test_detach_and_claim(self, usb_mod):
        dev = _usb_device()
        dev.is_kernel_driver_active.return_value = True
        usb_mod.core.find.return_value = dev
        t = PyUsbTransport(timeout_ms=2000)
        t.open(RECORD, 1, 0x82)
        usb_mod.core.find.assert_called_once_with(idVendor=0x046D, idProduct=0xC331, bus=3, address=7)
        dev.detach_kernel_driver.assert_called_once_with(1)
        usb_mod.util.claim_interface.assert_called_once_with(dev, 1)
        assert t.is_open

    def test_no_detach_when_inactive(self, usb_mod):
        dev = _usb_device()
        dev.is_kernel_driver_active.return_value = False
        usb_mod.core.find.return_value = dev
        PyUsbTransport(timeout_ms=2000).open(RECORD, 1)
        dev.detach_kernel_driver.assert_not_called()

    def test_claim_failure_reattaches(self, usb_mod):
        dev = _usb_device()
        dev.is_kernel_driver_active.return_value = True
        usb_mod.core.find.return_value = dev
        usb_mod.util.claim_interface.side_effect = FakeUSBError("busy")
        t = PyUsbTransport(timeout_ms=2000)
        with pytest.raises(AccessDeniedError):
            t.open(RECORD, 1)
        dev.attach_kernel_driver.assert_called_once_with(1)
        usb_mod.util.dispose_resources.assert_called_once_with(dev)
        assert not t.is_open

    def test_device_gone(self, usb_mod):
        usb_mod.core.find.return_value = None
        with pytest.raises(AccessDeniedError):
            PyUsbTransport(timeout_ms=2000).open(RECORD, 1)

    def test_detach_failure(self, usb_mod):
        dev = _usb_device()
        dev.is_kernel_driver_active.return_value = True
        dev.detach_kernel_driver.side_effect = FakeUSBError("denied")
        usb_mod.core.find.return_value = dev
        with pytest.raises(AccessDeniedError):
            PyUsbTransport(timeout_ms=2000).open(RECORD, 1)
        usb_mod.util.claim_interface.assert_not_called()


class TestPyUsbIO:

    @pytest.fixture
    def opened(self, usb_mod):
        dev = _usb_device()
        dev.is_kernel_driver_active.return_value = True
        usb_mod.core.find.return_value = dev
        t = PyUsbTransport(timeout_ms=2000)
        t.open(RECORD, 1, 0x82)
        return t, dev

    def test_short_frame_control_transfer(self, opened):
        t, dev = opened
        dev.ctrl_transfer.return_value = 20
        assert t.write(SHORT) == 20
        dev.ctrl_transfer.assert_called_once_with(
            HID_REQUEST_TYPE, HID_SET_REPORT, REPORT_VALUE_SHORT, 1, SHORT, 2000)

    def test_long_frame_report_value(self, opened):
        t, dev = opened
        dev.ctrl_transfer.return_value = 64
        t.write(LONG)
        assert dev.ctrl_transfer.call_args.args[2] == REPORT_VALUE_LONG == 0x0212

    def test_write_error(self, opened):
        t, dev = opened
        dev.ctrl_transfer.side_effect = FakeUSBError("pipe")
        with pytest.raises(TransportError):
            t.write(SHORT)

    def test_send_drains_interrupt_endpoint(self, opened):
        t, dev = opened
        dev.ctrl_transfer.return_value = 20
        dev.read.return_value = [0x11, 0xFF]
        assert t.send(SHORT) is True
        dev.read.assert_called_once_with(0x82, 64, 1)

    def test_drain_timeout_ignored(self, opened):
        t, dev = opened
        dev.ctrl_transfer.return_value = 20
        dev.read.side_effect = FakeUSBError("timeout")
        assert t.send(SHORT) is True

    def test_close_releases_and_reattaches(self, opened, usb_mod):
        t, dev = opened
        assert t.close() is True
        usb_mod.util.release_interface.assert_called_once_with(dev, 1)
        dev.attach_kernel_driver.assert_called_once_with(1)
        usb_mod.util.dispose_resources.assert_called_once_with(dev)
        assert not t.is_open

    def test_close_release_failure(self, opened, usb_mod):
        t, _ = opened
        usb_mod.util.release_interface.side_effect = FakeUSBError("gone")
        assert t.close() is False
        assert not t.is_open

    def test_close_when_closed(self, usb_mod):
        assert PyUsbTransport(timeout_ms=2000).close() is True
        usb_mod.util.release_interface.assert_not_called()

    def test_write_when_closed(self, usb_mod):
        with pytest.raises(TransportError):
            PyUsbTransport(timeout_ms=2000).write(SHORT)


# =========================================================================
# hidapi
# =========================================================================

class TestHidApi:

    def test_enumerate(self, hid_mod):
        hid_mod.enumerate.return_value = [{
            'path': b'/dev/hidraw3', 'vendor_id': 0x046D, 'product_id': 0xC33F,
            'serial_number': None, 'manufacturer_string': 'Logitech',
            'product_string': 'G815', 'interface_number': 1,
        }]
        (record,) = HidApiTransport().enumerate(0x046D, 0)
        assert record == UsbDeviceRecord(0x046D, 0xC33F, 1, b'/dev/hidraw3', "", "Logitech", "G815")
        hid_mod.enumerate.assert_called_once_with(0x046D, 0)

    def test_open_checks_access(self, hid_mod):
        dev = hid_mod.device.return_value
        t = HidApiTransport()
        t.open(RECORD, 1)
        dev.open_path.assert_called_once_with("3-7")
        dev.close.assert_called_once()
        assert t.is_open

    def test_open_denied(self, hid_mod):
        hid_mod.device.return_value.open_path.side_effect = OSError("open failed")
        t = HidApiTransport()
        with pytest.raises(AccessDeniedError):
            t.open(RECORD, 1)
        assert not t.is_open

    def test_write_reopens_each_frame(self, hid_mod):
        dev = hid_mod.device.return_value
        dev.write.return_value = 20
        t = HidApiTransport()
        t.open(RECORD, 1)
        assert t.send(SHORT) is True
        assert t.send(SHORT) is True
        assert dev.open_path.call_count == 3
        assert dev.write.call_args_list == [call(SHORT), call(SHORT)]
        assert dev.close.call_count == 3

    def test_write_error(self, hid_mod):
        dev = hid_mod.device.return_value
        dev.write.side_effect = OSError("write error")
        t = HidApiTransport()
        t.open(RECORD, 1)
        assert t.send(SHORT) is False
        assert dev.close.call_count == 2

    def test_no_drain(self, hid_mod):
        assert HidApiTransport().read_interrupt(64, 1) == b""

    def test_close(self, hid_mod):
        t = HidApiTransport()
        t.open(RECORD, 1)
        assert t.close() is True
        assert not t.is_open
        with pytest.raises(TransportError):
            t.write(SHORT)


# =========================================================================
# Backend selection
# =========================================================================

class TestCreateTransport:

    @pytest.fixture(autouse=True)
    def pref(self):
        with patch("logiled.transport.conf.preferred_backend", return_value=None) as pref:
            yield pref

    def test_prefers_pyusb(self, usb_mod, hid_mod):
        with patch("logiled.transport.conf.usb_timeout_ms", return_value=2000):
            assert isinstance(create_transport(), PyUsbTransport)

    def test_falls_back_to_hidapi(self, hid_mod):
        with patch("logiled.transport.PYUSB_AVAILABLE", False):
            assert isinstance(create_transport(), HidApiTransport)

    def test_explicit_backend(self, usb_mod, hid_mod):
        assert isinstance(create_transport("hidapi"), HidApiTransport)

    def test_configured_backend(self, usb_mod, hid_mod, pref):
        pref.return_value = "hidapi"
        assert isinstance(create_transport(), HidApiTransport)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_transport("libusb0")

    def test_none_available(self):
        with patch("logiled.transport.PYUSB_AVAILABLE", False), \
                patch("logiled.transport.HIDAPI_AVAILABLE", False):
            with pytest.raises(ImportError):
                create_transport()

    def test_missing_explicit_backend(self):
        with patch("logiled.transport.HIDAPI_AVAILABLE", False):
            with pytest.raises(ImportError):
                create_transport("hidapi")

    def test_available_backends_follow_imports(self):
        with patch("logiled.transport.PYUSB_AVAILABLE", False), \
                patch("logiled.transport.HIDAPI_AVAILABLE", True):
            assert available_backends() == {"pyusb": False, "hidapi": True}
            assert list(available_backends()) == ["pyusb", "hidapi"]
